"""
Audit workflow: creates audits, saves answers with live rescoring, and finishes audits.

Lifecycle: new audits start IN_PROGRESS and move to COMPLETED on finish.
PENDING and FAILED exist on AuditStatus but nothing here transitions into them.
"""

import logging
from datetime import datetime

from config import settings
from models.audit import Audit, AuditStatus, RiskLevel
from models.question import Question
from models.answer import Answer, AnswerValue
from schemas.answer import AnswerValidation
from schemas.dashboard import DashboardStats
from services.aggregation import compute_dashboard
from services.record_store import RecordStore, AUDITS, QUESTIONS, ANSWERS
from services.scoring import evaluate
from services.watch import WatchQuery

logger = logging.getLogger(__name__)


def validate_answer(answer: Answer | None) -> AnswerValidation:
    """A "No" is complete only with a non-blank comment and a non-conformity level."""
    value = answer.value if answer is not None else AnswerValue.NO
    if value != AnswerValue.NO:
        return AnswerValidation(is_valid=True)
    missing_comment = answer is None or not (answer.comment or "").strip()
    missing_level = answer is None or not (answer.non_compliance_level or "").strip()
    return AnswerValidation(
        is_valid=not (missing_comment or missing_level),
        missing_comment=missing_comment,
        missing_non_compliance_level=missing_level,
    )


def normalize_answer(answer: Answer) -> Answer:
    if answer.value != AnswerValue.NO:
        answer.non_compliance_level = None
    return answer


class AuditWorkflow:
    def __init__(self, store: RecordStore, iso_control: str | None = None):
        self.store = store
        self.iso_control = iso_control or settings.default_iso_control

    async def create_audit(self, title: str) -> int:
        """
        Create an audit and one blank answer per template question.

        An empty template still yields a valid audit with zero answers.
        """
        audit = Audit(
            title=title,
            description="",
            status=AuditStatus.IN_PROGRESS,
            score=0,
            max_score=100,
            risk_level=RiskLevel.LOW,
            iso_control=self.iso_control,
            recommendations="",
        )
        questions = await self.store.get_all_questions().once()
        async with self.store.batch():
            audit_id = await self.store.insert_audit(audit)
            if not questions:
                logger.warning("Audit %s created with no questions configured", audit_id)
                return audit_id

            await self.store.insert_answers([
                Answer(audit_id=audit_id, question_id=q.id, value=AnswerValue.NO.value, comment=None, non_compliance_level=None)
                for q in questions
            ])
            await self.recalculate_score(audit_id)
        logger.info("Created audit %s (%s) with %d answers", audit_id, title, len(questions))
        return audit_id

    async def recalculate_score(self, audit_id: int) -> tuple[int, RiskLevel] | None:
        answers = await self.store.get_answers_for_audit_once(audit_id)
        if not answers:
            return None
        score, risk = evaluate(answers)
        await self.store.update_score_and_risk(audit_id, score, risk)
        logger.debug("Audit %s rescored: %d (%s)", audit_id, score, risk.value)
        return score, risk

    async def save_answer(self, answer: Answer) -> Answer | None:
        """
        Upsert an answer, matched by id when it has one, else by (audit, question),
        then rescore its audit. Returns None when the owning audit does not exist.

        Watchers are notified once, after both the answer and the score are written.
        """
        normalize_answer(answer)

        existing = await self.store.get_answer(answer.id) if answer.id is not None else None
        if existing is None:
            existing = await self.store.find_answer(answer.audit_id, answer.question_id)

        async with self.store.batch():
            if existing is not None:
                existing.value = answer.value
                existing.comment = answer.comment
                existing.non_compliance_level = answer.non_compliance_level
                await self.store.update_answer(existing)
                saved = existing
            else:
                if await self.store.get_audit(answer.audit_id).once() is None:
                    logger.debug("Audit %s not found; answer not saved", answer.audit_id)
                    return None
                saved = Answer(
                    audit_id=answer.audit_id,
                    question_id=answer.question_id,
                    value=answer.value,
                    comment=answer.comment,
                    non_compliance_level=answer.non_compliance_level,
                )
                await self.store.insert_answer(saved)

            await self.recalculate_score(saved.audit_id)
        return saved

    async def finish_audit(self, audit_id: int) -> Audit | None:
        audit = await self.store.get_audit(audit_id).once()
        if audit is None:
            logger.debug("Audit %s not found; nothing to finish", audit_id)
            return None
        answers = await self.store.get_answers_for_audit_once(audit_id)
        audit.score, audit.risk_level = evaluate(answers)
        audit.status = AuditStatus.COMPLETED
        audit.completed_at = datetime.utcnow()
        await self.store.update_audit(audit)
        logger.info("Audit %s finished with score %d (%s)", audit_id, audit.score, audit.risk_level.value)
        return audit

    async def delete_audit(self, audit: Audit) -> None:
        await self.store.delete_audit(audit)

    async def questions_with_answers(self, audit_id: int) -> list[tuple[Question, Answer | None]]:
        questions = await self.store.get_all_questions().once()
        answers = await self.store.get_answers_for_audit_once(audit_id)
        by_question = {a.question_id: a for a in answers}
        return [(q, by_question.get(q.id)) for q in questions]

    async def _load_dashboard(self) -> DashboardStats:
        return compute_dashboard(
            await self.store.get_all_answers().once(),
            await self.store.get_all_questions().once(),
            await self.store.get_all_audits().once(),
        )

    def watch_dashboard(self) -> WatchQuery[DashboardStats]:
        return self.store.watch({AUDITS, QUESTIONS, ANSWERS}, self._load_dashboard)


class QuestionFlow:
    """Question-by-question cursor over one audit; blocks moving past an incomplete "No"."""

    def __init__(self, workflow: AuditWorkflow, audit_id: int):
        self.workflow = workflow
        self.audit_id = audit_id
        self.items: list[tuple[Question, Answer | None]] = []
        self.index = 0

    async def load(self) -> None:
        self.items = await self.workflow.questions_with_answers(self.audit_id)
        self.index = max(0, min(self.index, len(self.items) - 1))

    @property
    def current(self) -> tuple[Question, Answer | None] | None:
        if not self.items:
            return None
        return self.items[self.index]

    @property
    def is_last(self) -> bool:
        return self.index >= len(self.items) - 1

    def seek(self, question_id: int) -> bool:
        """Move the cursor to a question; False when the audit has no such question."""
        for i, (question, _) in enumerate(self.items):
            if question.id == question_id:
                self.index = i
                return True
        return False

    def validate_current(self) -> AnswerValidation:
        current = self.current
        return validate_answer(current[1] if current else None)

    async def save(self, value: int, comment: str | None = None, non_compliance_level: str | None = None) -> Answer | None:
        current = self.current
        if current is None:
            return None
        question, answer = current
        draft = Answer(
            audit_id=self.audit_id,
            question_id=question.id,
            value=value,
            comment=comment,
            non_compliance_level=non_compliance_level,
        )
        if answer is not None:
            draft.id = answer.id
        saved = await self.workflow.save_answer(draft)
        if saved is not None:
            self.items[self.index] = (question, saved)
        return saved

    def next(self) -> AnswerValidation:
        validation = self.validate_current()
        if validation.is_valid and not self.is_last:
            self.index += 1
        return validation

    def previous(self) -> None:
        if self.index > 0:
            self.index -= 1

    async def finish(self) -> tuple[AnswerValidation, Audit | None]:
        validation = self.validate_current()
        if not validation.is_valid:
            return validation, None
        return validation, await self.workflow.finish_audit(self.audit_id)
