from pydantic import BaseModel

from models.audit import AuditStatus, RiskLevel


class ReportRow(BaseModel):
    number: int
    question_id: int
    control_ref: str | None
    question: str
    answer: str  # Yes | Partial | No | Unanswered
    comment: str
    non_compliance_level: str


class AuditReport(BaseModel):
    audit_id: int
    title: str
    iso_control: str
    status: AuditStatus
    score: int
    risk_level: RiskLevel
    recommendation: str
    rows: list[ReportRow]
