from fastapi import APIRouter, Depends, HTTPException

from core.dependencies import get_workflow
from models.answer import Answer
from schemas.answer import AnswerResponse, AnswerUpdate, FlowStep, QuestionWithAnswer, SavedAnswer
from schemas.question import QuestionResponse
from services.workflow import AuditWorkflow, QuestionFlow, validate_answer

router = APIRouter(tags=["answers"])


@router.get("/audits/{audit_id}/questions", response_model=list[QuestionWithAnswer])
async def list_questions_with_answers(audit_id: int, workflow: AuditWorkflow = Depends(get_workflow)):
    if not await workflow.store.get_audit(audit_id).once():
        raise HTTPException(status_code=404, detail="Audit not found")
    pairs = await workflow.questions_with_answers(audit_id)
    return [
        QuestionWithAnswer(
            question=QuestionResponse.model_validate(q),
            answer=AnswerResponse.model_validate(a) if a else None,
        )
        for q, a in pairs
    ]


@router.put("/audits/{audit_id}/questions/{question_id}/answer", response_model=SavedAnswer)
async def save_answer(audit_id: int, question_id: int, req: AnswerUpdate, workflow: AuditWorkflow = Depends(get_workflow)):
    questions = await workflow.store.get_all_questions().once()
    if not any(q.id == question_id for q in questions):
        raise HTTPException(status_code=404, detail="Question not found")

    saved = await workflow.save_answer(Answer(
        audit_id=audit_id,
        question_id=question_id,
        value=req.value,
        comment=req.comment,
        non_compliance_level=req.non_compliance_level.value if req.non_compliance_level else None,
    ))
    if not saved:
        raise HTTPException(status_code=404, detail="Audit not found")

    audit = await workflow.store.get_audit(audit_id).once()
    return SavedAnswer(
        answer=AnswerResponse.model_validate(saved),
        validation=validate_answer(saved),
        audit_score=audit.score,
        audit_risk_level=audit.risk_level.value,
    )


@router.post("/audits/{audit_id}/questions/{question_id}/next", response_model=FlowStep)
async def advance_question(audit_id: int, question_id: int, workflow: AuditWorkflow = Depends(get_workflow)):
    if not await workflow.store.get_audit(audit_id).once():
        raise HTTPException(status_code=404, detail="Audit not found")

    flow = QuestionFlow(workflow, audit_id)
    await flow.load()
    if not flow.seek(question_id):
        raise HTTPException(status_code=404, detail="Question not found")

    start = flow.index
    validation = flow.next()
    return FlowStep(
        moved=flow.index != start,
        validation=validation,
        question_id=flow.current[0].id,
    )
