"""Keyed record store for audits, questions and answers, with watchable reads."""

import logging
from contextlib import asynccontextmanager
from collections.abc import Awaitable, Callable, Sequence

from sqlalchemy import select, update, delete, func
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from models.audit import Audit, RiskLevel
from models.question import Question
from models.answer import Answer
from services.watch import WatchQuery, WatchRegistry

logger = logging.getLogger(__name__)

AUDITS = "audits"
QUESTIONS = "questions"
ANSWERS = "answers"


class RecordStore:
    """
    Persists Audit, Question and Answer rows.

    Every write runs in its own session and commits before watchers are
    notified, so a watcher always sees the committed state. Rows are returned
    detached; mutate them and hand them back through update_* to persist.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory
        self._registry = WatchRegistry()
        self._batch_depth = 0
        self._pending: set[str] = set()

    def watch(self, tables: set[str], loader: Callable[[], Awaitable]) -> WatchQuery:
        return WatchQuery(self._registry, tables, loader)

    async def _changed(self, *tables: str) -> None:
        if self._batch_depth:
            self._pending.update(tables)
            return
        await self._registry.notify(set(tables))

    @asynccontextmanager
    async def batch(self):
        """
        Hold back watcher notifications until the outermost batch exits, then
        deliver once for the union of the tables written inside it.
        """
        self._batch_depth += 1
        try:
            yield self
        finally:
            self._batch_depth -= 1
            if not self._batch_depth and self._pending:
                tables, self._pending = self._pending, set()
                await self._registry.notify(tables)

    # --- Audits ---

    async def insert_audit(self, audit: Audit) -> int:
        async with self._session_factory() as db:
            db.add(audit)
            await db.commit()
            audit_id = audit.id
        await self._changed(AUDITS)
        return audit_id

    async def update_audit(self, audit: Audit) -> None:
        async with self._session_factory() as db:
            await db.execute(
                update(Audit).where(Audit.id == audit.id).values(
                    title=audit.title,
                    description=audit.description,
                    completed_at=audit.completed_at,
                    status=audit.status,
                    score=audit.score,
                    max_score=audit.max_score,
                    risk_level=audit.risk_level,
                    iso_control=audit.iso_control,
                    recommendations=audit.recommendations,
                )
            )
            await db.commit()
        await self._changed(AUDITS)

    async def update_score_and_risk(self, audit_id: int, score: int, risk: RiskLevel) -> None:
        async with self._session_factory() as db:
            await db.execute(update(Audit).where(Audit.id == audit_id).values(score=score, risk_level=risk))
            await db.commit()
        await self._changed(AUDITS)

    async def delete_audit(self, audit: Audit) -> None:
        # Answers go with it through ON DELETE CASCADE
        async with self._session_factory() as db:
            await db.execute(delete(Audit).where(Audit.id == audit.id))
            await db.commit()
        logger.info("Deleted audit %s", audit.id)
        await self._changed(AUDITS, ANSWERS)

    async def _load_audit(self, audit_id: int) -> Audit | None:
        async with self._session_factory() as db:
            result = await db.execute(select(Audit).where(Audit.id == audit_id))
            return result.scalar_one_or_none()

    async def _load_all_audits(self) -> list[Audit]:
        async with self._session_factory() as db:
            result = await db.execute(select(Audit).order_by(Audit.created_at.desc(), Audit.id.desc()))
            return list(result.scalars().all())

    def get_audit(self, audit_id: int) -> WatchQuery[Audit | None]:
        return self.watch({AUDITS}, lambda: self._load_audit(audit_id))

    def get_all_audits(self) -> WatchQuery[list[Audit]]:
        """Newest first."""
        return self.watch({AUDITS}, self._load_all_audits)

    # --- Questions ---

    async def insert_questions(self, questions: Sequence[Question]) -> None:
        async with self._session_factory() as db:
            db.add_all(list(questions))
            await db.commit()
        await self._changed(QUESTIONS)

    async def count_questions(self) -> int:
        async with self._session_factory() as db:
            return (await db.execute(select(func.count()).select_from(Question))).scalar() or 0

    async def _load_questions(self) -> list[Question]:
        async with self._session_factory() as db:
            result = await db.execute(select(Question).order_by(Question.id))
            return list(result.scalars().all())

    def get_all_questions(self) -> WatchQuery[list[Question]]:
        return self.watch({QUESTIONS}, self._load_questions)

    # --- Answers ---

    async def insert_answer(self, answer: Answer) -> int:
        async with self._session_factory() as db:
            db.add(answer)
            await db.commit()
            answer_id = answer.id
        await self._changed(ANSWERS)
        return answer_id

    async def insert_answers(self, answers: Sequence[Answer]) -> None:
        if not answers:
            return
        async with self._session_factory() as db:
            db.add_all(list(answers))
            await db.commit()
        await self._changed(ANSWERS)

    async def update_answer(self, answer: Answer) -> None:
        async with self._session_factory() as db:
            await db.execute(
                update(Answer).where(Answer.id == answer.id).values(
                    value=answer.value,
                    comment=answer.comment,
                    non_compliance_level=answer.non_compliance_level,
                )
            )
            await db.commit()
        await self._changed(ANSWERS)

    async def get_answer(self, answer_id: int) -> Answer | None:
        async with self._session_factory() as db:
            result = await db.execute(select(Answer).where(Answer.id == answer_id))
            return result.scalar_one_or_none()

    async def find_answer(self, audit_id: int, question_id: int) -> Answer | None:
        async with self._session_factory() as db:
            result = await db.execute(
                select(Answer).where(Answer.audit_id == audit_id, Answer.question_id == question_id)
            )
            return result.scalar_one_or_none()

    async def get_answers_for_audit_once(self, audit_id: int) -> list[Answer]:
        async with self._session_factory() as db:
            result = await db.execute(select(Answer).where(Answer.audit_id == audit_id).order_by(Answer.id))
            return list(result.scalars().all())

    def get_answers_for_audit(self, audit_id: int) -> WatchQuery[list[Answer]]:
        return self.watch({ANSWERS}, lambda: self.get_answers_for_audit_once(audit_id))

    async def _load_all_answers(self) -> list[Answer]:
        async with self._session_factory() as db:
            result = await db.execute(select(Answer).order_by(Answer.id))
            return list(result.scalars().all())

    def get_all_answers(self) -> WatchQuery[list[Answer]]:
        return self.watch({ANSWERS}, self._load_all_answers)
