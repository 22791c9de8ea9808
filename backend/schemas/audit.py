from datetime import datetime
from pydantic import BaseModel, Field

from models.audit import AuditStatus, RiskLevel


class AuditCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)


class AuditResponse(BaseModel):
    id: int
    title: str
    description: str
    created_at: datetime
    completed_at: datetime | None
    status: AuditStatus
    score: int
    max_score: int
    risk_level: RiskLevel
    iso_control: str
    recommendations: str

    model_config = {"from_attributes": True}


class AuditCreated(AuditResponse):
    answer_count: int = 0


class AuditStats(BaseModel):
    total: int
    completed: int
    average_score: int
    high_risk_count: int
    risk_distribution: dict[RiskLevel, int]
