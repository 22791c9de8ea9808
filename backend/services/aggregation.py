"""Cross-audit dashboard statistics computed from the full answer, question and audit sets."""

from collections.abc import Sequence

from models.answer import AnswerValue, NonComplianceLevel
from schemas.dashboard import AuditTrend, DashboardStats, FindingDetail, ReadinessStatus
from services.scoring import percent_of

UNKNOWN_CONTROL = "Unknown"
MISSING_CONTROL = "?"

READINESS_THRESHOLDS = [
    (80, ReadinessStatus.HIGH),
    (60, ReadinessStatus.MEDIUM),
]

PERCENT_DIGITS = 2


def control_group(control_ref: str | None) -> str:
    """Collapse a control reference to its first two segments ("A.9.3" -> "A.9")."""
    if control_ref is None:
        return UNKNOWN_CONTROL
    parts = control_ref.split(".")
    if len(parts) >= 2:
        return f"{parts[0]}.{parts[1]}"
    return control_ref


def readiness_for_compliance(compliance: float) -> ReadinessStatus:
    for threshold, status in READINESS_THRESHOLDS:
        if compliance >= threshold:
            return status
    return ReadinessStatus.LOW


def compliance_by_control(answers: Sequence, questions_by_id: dict) -> dict[str, float]:
    scores: dict[str, list[int]] = {}
    for ans in answers:
        q = questions_by_id.get(ans.question_id)
        key = control_group(q.control_ref if q else None)
        scores.setdefault(key, []).append(percent_of(ans.value))
    return {
        key: round(sum(values) / len(values), PERCENT_DIGITS)
        for key, values in scores.items()
    }


def collect_findings(answers: Sequence, questions_by_id: dict) -> list[FindingDetail]:
    findings = []
    for ans in answers:
        if ans.value != AnswerValue.NO:
            continue
        q = questions_by_id.get(ans.question_id)
        findings.append(FindingDetail(
            audit_id=ans.audit_id,
            question_id=ans.question_id,
            control_ref=(q.control_ref if q and q.control_ref else MISSING_CONTROL),
            comment=ans.comment or "",
            type=ans.non_compliance_level or "N/A",
        ))
    findings.sort(key=lambda f: (f.control_ref, f.audit_id, f.question_id))
    return findings


def audit_trends(audits: Sequence) -> list[AuditTrend]:
    # Ids are assigned in creation order
    return [
        AuditTrend(audit_id=a.id, audit_name=a.title, score=a.score)
        for a in sorted(audits, key=lambda a: a.id)
    ]


def compute_dashboard(answers: Sequence, questions: Sequence, audits: Sequence) -> DashboardStats:
    """
    Compute the dashboard from every answer of every audit.

    Args:
        answers: All Answer rows.
        questions: All Question rows (used for control references).
        audits: All Audit rows (used for the trend series).

    Returns:
        DashboardStats; an empty one when there are no answers.
    """
    if not answers:
        return DashboardStats()

    total = len(answers)
    yes_count = sum(1 for a in answers if a.value == AnswerValue.YES)
    partial_count = sum(1 for a in answers if a.value == AnswerValue.PARTIAL)
    no_count = sum(1 for a in answers if a.value == AnswerValue.NO)

    global_compliance = (yes_count * 100 + partial_count * 50) / total
    questions_by_id = {q.id: q for q in questions}

    major = sum(1 for a in answers if a.value == AnswerValue.NO and a.non_compliance_level == NonComplianceLevel.MAYOR.value)
    minor = sum(1 for a in answers if a.value == AnswerValue.NO and a.non_compliance_level == NonComplianceLevel.MENOR.value)

    return DashboardStats(
        total_answers=total,
        global_compliance=round(global_compliance, PERCENT_DIGITS),
        yes_percentage=round(yes_count / total * 100, PERCENT_DIGITS),
        partial_percentage=round(partial_count / total * 100, PERCENT_DIGITS),
        no_percentage=round(no_count / total * 100, PERCENT_DIGITS),
        compliance_by_control=compliance_by_control(answers, questions_by_id),
        total_major_nc=major,
        total_minor_nc=minor,
        # Partial answers stand in for observations
        total_observations=partial_count,
        findings=collect_findings(answers, questions_by_id),
        audit_trends=audit_trends(audits),
        readiness_status=readiness_for_compliance(global_compliance),
    )
