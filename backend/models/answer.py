import enum

from sqlalchemy import Integer, String, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from database import Base


class AnswerValue(int, enum.Enum):
    NO = 0
    PARTIAL = 1
    YES = 2


class NonComplianceLevel(str, enum.Enum):
    MENOR = "MENOR"  # minor
    MAYOR = "MAYOR"  # major


class Answer(Base):
    __tablename__ = "answers"
    __table_args__ = (UniqueConstraint("audit_id", "question_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    audit_id: Mapped[int] = mapped_column(Integer, ForeignKey("audits.id", ondelete="CASCADE"), index=True)
    question_id: Mapped[int] = mapped_column(Integer, ForeignKey("questions.id", ondelete="CASCADE"))
    value: Mapped[int] = mapped_column(Integer, default=0)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    non_compliance_level: Mapped[str | None] = mapped_column(String(10), nullable=True)

    audit = relationship("Audit", back_populates="answers")
    question = relationship("Question", back_populates="answers")
