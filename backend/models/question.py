from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from database import Base


class Question(Base):
    __tablename__ = "questions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    control_ref: Mapped[str | None] = mapped_column(String(50), nullable=True)  # e.g. "A.9.1"

    answers = relationship("Answer", back_populates="question", cascade="all, delete-orphan", passive_deletes=True)
