from pydantic import BaseModel, Field

from models.answer import NonComplianceLevel
from schemas.question import QuestionResponse


class AnswerUpdate(BaseModel):
    value: int = Field(0, ge=0, le=2)
    comment: str | None = None
    non_compliance_level: NonComplianceLevel | None = None


class AnswerValidation(BaseModel):
    """Result of checking one answer; an incomplete "No" is reported, never raised."""
    is_valid: bool
    missing_comment: bool = False
    missing_non_compliance_level: bool = False


class AnswerResponse(BaseModel):
    id: int
    audit_id: int
    question_id: int
    value: int
    comment: str | None
    non_compliance_level: str | None

    model_config = {"from_attributes": True}


class SavedAnswer(BaseModel):
    answer: AnswerResponse
    validation: AnswerValidation
    audit_score: int
    audit_risk_level: str


class QuestionWithAnswer(BaseModel):
    question: QuestionResponse
    answer: AnswerResponse | None


class FlowStep(BaseModel):
    """Outcome of asking the guided flow to advance past one question."""
    moved: bool
    validation: AnswerValidation
    question_id: int
