import enum

from pydantic import BaseModel


class ReadinessStatus(str, enum.Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class FindingDetail(BaseModel):
    audit_id: int
    question_id: int
    control_ref: str
    comment: str
    type: str  # "MAYOR", "MENOR" or "N/A"


class AuditTrend(BaseModel):
    audit_id: int
    audit_name: str
    score: int


class DashboardStats(BaseModel):
    total_answers: int = 0
    global_compliance: float = 0.0
    yes_percentage: float = 0.0
    partial_percentage: float = 0.0
    no_percentage: float = 0.0
    compliance_by_control: dict[str, float] = {}
    total_major_nc: int = 0
    total_minor_nc: int = 0
    total_observations: int = 0
    findings: list[FindingDetail] = []
    audit_trends: list[AuditTrend] = []
    readiness_status: ReadinessStatus = ReadinessStatus.LOW
