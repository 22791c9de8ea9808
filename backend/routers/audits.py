import logging

from fastapi import APIRouter, Depends, HTTPException

from core.dependencies import get_store, get_workflow
from models.audit import Audit
from schemas.audit import AuditCreate, AuditCreated, AuditResponse, AuditStats
from schemas.report import AuditReport
from services.export_service import build_audit_report
from services.record_store import RecordStore
from services.scoring import audit_stats, risk_distribution
from services.workflow import AuditWorkflow

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/audits", tags=["audits"])


async def _get_audit_or_404(audit_id: int, store: RecordStore) -> Audit:
    audit = await store.get_audit(audit_id).once()
    if not audit:
        raise HTTPException(status_code=404, detail="Audit not found")
    return audit


@router.get("", response_model=list[AuditResponse])
async def list_audits(store: RecordStore = Depends(get_store)):
    return await store.get_all_audits().once()


@router.post("", response_model=AuditCreated, status_code=201)
async def create_audit(req: AuditCreate, workflow: AuditWorkflow = Depends(get_workflow)):
    audit_id = await workflow.create_audit(req.title)
    audit = await workflow.store.get_audit(audit_id).once()
    answers = await workflow.store.get_answers_for_audit_once(audit_id)
    resp = AuditCreated.model_validate(audit)
    resp.answer_count = len(answers)
    return resp


@router.get("/stats", response_model=AuditStats)
async def get_audit_stats(store: RecordStore = Depends(get_store)):
    audits = await store.get_all_audits().once()
    return AuditStats(**audit_stats(audits), risk_distribution=risk_distribution(audits))


@router.get("/{audit_id}", response_model=AuditResponse)
async def get_audit(audit_id: int, store: RecordStore = Depends(get_store)):
    return await _get_audit_or_404(audit_id, store)


@router.delete("/{audit_id}", status_code=204)
async def delete_audit(audit_id: int, workflow: AuditWorkflow = Depends(get_workflow)):
    audit = await _get_audit_or_404(audit_id, workflow.store)
    await workflow.delete_audit(audit)


@router.post("/{audit_id}/finish", response_model=AuditResponse)
async def finish_audit(audit_id: int, workflow: AuditWorkflow = Depends(get_workflow)):
    audit = await workflow.finish_audit(audit_id)
    if not audit:
        raise HTTPException(status_code=404, detail="Audit not found")
    return audit


@router.get("/{audit_id}/report", response_model=AuditReport)
async def get_audit_report(audit_id: int, store: RecordStore = Depends(get_store)):
    audit = await _get_audit_or_404(audit_id, store)
    questions = await store.get_all_questions().once()
    answers = await store.get_answers_for_audit_once(audit_id)
    return build_audit_report(audit, questions, answers)
