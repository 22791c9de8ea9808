"""
Per-audit scoring: turns a set of answers into a 0-100 score and a risk level.

Scoring model:
  - Each answer is worth 0 % (No), 50 % (Partial) or 100 % (Yes).
  - The audit score is the integer mean of those percentages.
  - One threshold table (RISK_THRESHOLDS) classifies every score, whether it is
    recomputed while answering or when the audit is finished.
"""

from collections.abc import Iterable, Sequence

from models.answer import AnswerValue
from models.audit import AuditStatus, RiskLevel

VALUE_PERCENT = {
    AnswerValue.NO: 0,
    AnswerValue.PARTIAL: 50,
    AnswerValue.YES: 100,
}

# Inclusive lower bounds, checked top-down
RISK_THRESHOLDS = [
    (80, RiskLevel.LOW),
    (60, RiskLevel.MEDIUM),
    (40, RiskLevel.HIGH),
    (0, RiskLevel.CRITICAL),
]

RECOMMENDATION_BANDS = [
    (0, 25, "Critical level: immediate attention required. Implement basic controls urgently."),
    (26, 50, "High risk: significant gaps exist. Prioritise the areas with the greatest impact."),
    (51, 75, "Medium risk: good progress, but improvements are needed to meet the standard."),
    (76, 99, "Good standing: most controls are in place. Review the minor details."),
    (100, 100, "Excellent: full compliance. Keep up continuous monitoring."),
]
NO_DATA_RECOMMENDATION = "No data"


def percent_of(value) -> int:
    """Unknown values score 0 rather than raising."""
    return VALUE_PERCENT.get(value, 0)


def score_for_audit(answers: Sequence) -> int:
    if not answers:
        return 0
    total = sum(percent_of(a.value) for a in answers)
    return max(0, min(100, total // len(answers)))


def risk_level_for_score(score: int) -> RiskLevel:
    for threshold, level in RISK_THRESHOLDS:
        if score >= threshold:
            return level
    return RiskLevel.CRITICAL


def evaluate(answers: Sequence) -> tuple[int, RiskLevel]:
    score = score_for_audit(answers)
    return score, risk_level_for_score(score)


def recommendation_for_score(score: int) -> str:
    for low, high, text in RECOMMENDATION_BANDS:
        if low <= score <= high:
            return text
    return NO_DATA_RECOMMENDATION


def audit_stats(audits: Iterable) -> dict:
    audits = list(audits)
    return {
        "total": len(audits),
        "completed": sum(1 for a in audits if a.status == AuditStatus.COMPLETED),
        "average_score": int(sum(a.score for a in audits) / len(audits)) if audits else 0,
        "high_risk_count": sum(1 for a in audits if a.risk_level in (RiskLevel.HIGH, RiskLevel.CRITICAL)),
    }


def risk_distribution(audits: Iterable) -> dict[RiskLevel, int]:
    counts = {level: 0 for level in RiskLevel}
    for a in audits:
        counts[a.risk_level] = counts.get(a.risk_level, 0) + 1
    return counts
