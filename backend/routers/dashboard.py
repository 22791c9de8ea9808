from fastapi import APIRouter, Depends

from core.dependencies import get_workflow
from schemas.dashboard import DashboardStats
from services.workflow import AuditWorkflow

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardStats)
async def get_dashboard(workflow: AuditWorkflow = Depends(get_workflow)):
    return await workflow.watch_dashboard().once()
