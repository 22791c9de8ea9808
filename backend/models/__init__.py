from models.audit import Audit, AuditStatus, RiskLevel
from models.question import Question
from models.answer import Answer, AnswerValue, NonComplianceLevel

__all__ = [
    "Audit",
    "AuditStatus",
    "RiskLevel",
    "Question",
    "Answer",
    "AnswerValue",
    "NonComplianceLevel",
]
