from fastapi import APIRouter, Depends

from core.dependencies import get_store
from schemas.question import QuestionResponse
from services.record_store import RecordStore

router = APIRouter(prefix="/questions", tags=["questions"])


@router.get("", response_model=list[QuestionResponse])
async def list_questions(store: RecordStore = Depends(get_store)):
    return await store.get_all_questions().once()
