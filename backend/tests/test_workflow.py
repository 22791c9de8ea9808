"""
Tests for the audit workflow: creation, answer saving, finishing and the guided flow.
"""
import pytest

from models import Answer, AuditStatus, Question, RiskLevel
from schemas.dashboard import ReadinessStatus
from services.workflow import AuditWorkflow, QuestionFlow, normalize_answer, validate_answer


async def _answer_all(workflow, audit_id, value, **kwargs):
    for q in await workflow.store.get_all_questions().once():
        await workflow.save_answer(Answer(audit_id=audit_id, question_id=q.id, value=value, **kwargs))


class TestCreateAudit:
    async def test_seeds_one_blank_answer_per_question(self, workflow, questions):
        audit_id = await workflow.create_audit("Annual review")

        answers = await workflow.store.get_answers_for_audit_once(audit_id)

        assert len(answers) == len(questions)
        assert {a.question_id for a in answers} == {q.id for q in questions}
        assert all(a.audit_id == audit_id for a in answers)
        assert all(a.value == 0 and a.comment is None and a.non_compliance_level is None for a in answers)

    async def test_new_audit_is_in_progress_and_scored(self, workflow, questions):
        audit = await workflow.store.get_audit(await workflow.create_audit("Annual review")).once()

        assert audit.status == AuditStatus.IN_PROGRESS
        assert audit.iso_control == "ISO/IEC 27001:2022"
        assert audit.completed_at is None
        # All answers start as "No"
        assert (audit.score, audit.risk_level) == (0, RiskLevel.CRITICAL)

    async def test_empty_template_gives_audit_without_answers(self, workflow):
        audit_id = await workflow.create_audit("No questions yet")

        audit = await workflow.store.get_audit(audit_id).once()
        assert audit is not None
        assert await workflow.store.get_answers_for_audit_once(audit_id) == []
        assert (audit.score, audit.risk_level) == (0, RiskLevel.LOW)

    async def test_default_iso_control_comes_from_settings(self, store):
        assert AuditWorkflow(store).iso_control == "ISO/IEC 27001:2022"


class TestSaveAnswer:
    async def test_rescored_on_every_save(self, workflow, questions):
        audit_id = await workflow.create_audit("Live")

        await workflow.save_answer(Answer(audit_id=audit_id, question_id=questions[0].id, value=2))
        audit = await workflow.store.get_audit(audit_id).once()
        assert (audit.score, audit.risk_level) == (33, RiskLevel.CRITICAL)

        await _answer_all(workflow, audit_id, 2)
        audit = await workflow.store.get_audit(audit_id).once()
        assert (audit.score, audit.risk_level) == (100, RiskLevel.LOW)

    async def test_upsert_by_audit_and_question(self, workflow, questions):
        audit_id = await workflow.create_audit("Upsert")

        saved = await workflow.save_answer(Answer(audit_id=audit_id, question_id=questions[1].id, value=1))

        answers = await workflow.store.get_answers_for_audit_once(audit_id)
        assert len(answers) == len(questions)
        assert saved.id == next(a.id for a in answers if a.question_id == questions[1].id)
        assert saved.value == 1

    async def test_upsert_by_id(self, workflow, questions):
        audit_id = await workflow.create_audit("By id")
        existing = await workflow.store.find_answer(audit_id, questions[0].id)

        draft = Answer(id=existing.id, audit_id=audit_id, question_id=questions[0].id, value=0,
                       comment="Not documented", non_compliance_level="MENOR")
        await workflow.save_answer(draft)

        stored = await workflow.store.get_answer(existing.id)
        assert (stored.comment, stored.non_compliance_level) == ("Not documented", "MENOR")

    async def test_changing_no_to_yes_clears_level(self, workflow, questions):
        audit_id = await workflow.create_audit("Clear level")
        q = questions[0]
        await workflow.save_answer(Answer(audit_id=audit_id, question_id=q.id, value=0,
                                          comment="Missing", non_compliance_level="MAYOR"))

        await workflow.save_answer(Answer(audit_id=audit_id, question_id=q.id, value=2,
                                          comment="Missing", non_compliance_level="MAYOR"))

        stored = await workflow.store.find_answer(audit_id, q.id)
        assert stored.value == 2
        assert stored.non_compliance_level is None
        assert stored.comment == "Missing"

    async def test_inserts_answer_for_question_added_later(self, workflow, questions):
        audit_id = await workflow.create_audit("Late question")
        await workflow.store.insert_questions([Question(text="new", control_ref="A.18.1")])
        new_q = (await workflow.store.get_all_questions().once())[-1]

        saved = await workflow.save_answer(Answer(audit_id=audit_id, question_id=new_q.id, value=2))

        assert saved.id is not None
        assert len(await workflow.store.get_answers_for_audit_once(audit_id)) == len(questions) + 1

    async def test_missing_audit_is_nothing_to_do(self, workflow, questions):
        assert await workflow.save_answer(Answer(audit_id=999, question_id=questions[0].id, value=2)) is None


class TestFinishAudit:
    async def test_completes_and_scores(self, workflow, questions):
        audit_id = await workflow.create_audit("Finish")
        await _answer_all(workflow, audit_id, 1)

        audit = await workflow.finish_audit(audit_id)

        stored = await workflow.store.get_audit(audit_id).once()
        assert stored.status == AuditStatus.COMPLETED
        assert stored.completed_at is not None
        assert (stored.score, stored.risk_level) == (50, RiskLevel.HIGH)
        assert audit.score == stored.score

    async def test_idempotent(self, workflow, questions):
        audit_id = await workflow.create_audit("Twice")
        await _answer_all(workflow, audit_id, 2)
        await workflow.save_answer(Answer(audit_id=audit_id, question_id=questions[0].id, value=1))

        first = await workflow.finish_audit(audit_id)
        second = await workflow.finish_audit(audit_id)

        assert (first.score, first.status, first.risk_level) == (second.score, second.status, second.risk_level)
        assert (second.score, second.risk_level) == (83, RiskLevel.LOW)

    async def test_missing_audit(self, workflow):
        assert await workflow.finish_audit(12345) is None


class TestDeleteAudit:
    async def test_cascades(self, workflow, questions):
        audit_id = await workflow.create_audit("Delete me")
        other_id = await workflow.create_audit("Keep me")

        await workflow.delete_audit(await workflow.store.get_audit(audit_id).once())

        assert await workflow.store.get_answers_for_audit_once(audit_id) == []
        all_answers = await workflow.store.get_all_answers().once()
        assert {a.audit_id for a in all_answers} == {other_id}


class TestValidation:
    def test_yes_and_partial_are_valid(self):
        assert validate_answer(Answer(value=2)).is_valid
        assert validate_answer(Answer(value=1)).is_valid

    def test_no_requires_comment_and_level(self):
        result = validate_answer(Answer(value=0, comment="  ", non_compliance_level=None))
        assert not result.is_valid
        assert result.missing_comment
        assert result.missing_non_compliance_level

    def test_complete_no(self):
        result = validate_answer(Answer(value=0, comment="No policy", non_compliance_level="MAYOR"))
        assert result.is_valid

    def test_missing_answer_is_incomplete_no(self):
        result = validate_answer(None)
        assert not result.is_valid
        assert result.missing_comment and result.missing_non_compliance_level

    def test_normalize_keeps_level_only_for_no(self):
        assert normalize_answer(Answer(value=1, non_compliance_level="MENOR")).non_compliance_level is None
        assert normalize_answer(Answer(value=0, non_compliance_level="MENOR")).non_compliance_level == "MENOR"


class TestQuestionFlow:
    @pytest.fixture
    async def flow(self, workflow, questions):
        audit_id = await workflow.create_audit("Guided")
        flow = QuestionFlow(workflow, audit_id)
        await flow.load()
        return flow

    async def test_pairs_every_question(self, flow, questions):
        assert [q.id for q, _ in flow.items] == [q.id for q in questions]
        assert all(a is not None for _, a in flow.items)

    async def test_seek(self, flow, questions):
        assert flow.seek(questions[2].id)
        assert flow.index == 2
        assert flow.is_last
        assert not flow.seek(999)
        assert flow.index == 2

    async def test_blocks_on_incomplete_no(self, flow):
        validation = flow.next()

        assert not validation.is_valid
        assert flow.index == 0

    async def test_keeps_entered_data_when_blocked(self, flow):
        await flow.save(0, comment="Not approved")

        validation = flow.next()

        assert validation.missing_non_compliance_level and not validation.missing_comment
        assert flow.current[1].comment == "Not approved"
        assert flow.index == 0

    async def test_moves_once_complete(self, flow):
        await flow.save(0, comment="Not approved", non_compliance_level="MAYOR")
        assert flow.next().is_valid
        assert flow.index == 1

        await flow.save(2)
        flow.next()
        assert flow.index == 2

        flow.previous()
        assert flow.index == 1

    async def test_cursor_is_clamped(self, flow):
        flow.previous()
        assert flow.index == 0

        for _ in range(len(flow.items)):
            await flow.save(2)
            flow.next()
        assert flow.index == len(flow.items) - 1
        assert flow.is_last

    async def test_finish_requires_valid_current_answer(self, flow):
        flow.index = len(flow.items) - 1

        validation, audit = await flow.finish()
        assert not validation.is_valid
        assert audit is None

        await flow.save(1)
        validation, audit = await flow.finish()
        assert validation.is_valid
        assert audit.status == AuditStatus.COMPLETED

    async def test_empty_audit(self, workflow):
        flow = QuestionFlow(workflow, await workflow.create_audit("Empty"))
        await flow.load()

        assert flow.current is None
        assert await flow.save(2) is None
        assert not flow.next().is_valid


class TestDashboardWatch:
    async def test_recomputed_after_each_save(self, workflow, questions):
        snapshots = []
        sub = await workflow.watch_dashboard().subscribe(snapshots.append)
        assert snapshots[-1].total_answers == 0

        audit_id = await workflow.create_audit("Dashboard")
        assert snapshots[-1].total_answers == len(questions)
        assert snapshots[-1].global_compliance == 0

        await _answer_all(workflow, audit_id, 2)
        latest = snapshots[-1]
        assert latest.global_compliance == 100
        assert latest.readiness_status == ReadinessStatus.HIGH
        assert [t.score for t in latest.audit_trends] == [100]

        sub.unsubscribe()
        await workflow.delete_audit(await workflow.store.get_audit(audit_id).once())
        assert snapshots[-1].total_answers == len(questions)

    async def test_one_recompute_per_write(self, workflow, questions):
        snapshots = []
        await workflow.watch_dashboard().subscribe(snapshots.append)

        audit_id = await workflow.create_audit("Dashboard")
        assert len(snapshots) == 2

        await workflow.save_answer(Answer(audit_id=audit_id, question_id=questions[0].id, value=2))
        assert len(snapshots) == 3
        assert snapshots[-1].audit_trends[0].score == 33
