"""
Score evaluator - deduct-from-100% model.

Two fatal rules live here on purpose:

- live_score(): the rule used at submission and admin edit. Only a literal
  "Fatal" on a fatal question zeroes the score; a negative answer on a
  fatal question just deducts its weight like any other "No".
- audited_fatal_check(): the rule the ATA views re-apply to stored reports.
  "Fatal" OR "No" on a fatal question counts as fatal.

They disagree for "No" on a fatal question. Both are kept as-is.
"""

from typing import Iterable, Union

from models import ScoredAnswer, ScoreResult, AuditReport
from models.base import round_half_up
from .adapters import normalize_report


POSITIVE_ANSWERS = frozenset({"Yes", "1", "true", "True", "NA"})
NEGATIVE_ANSWERS = frozenset({"No", "0", "false", "False"})
FATAL_ANSWER = "Fatal"

# ATA re-validation treats these as disqualifying on a fatal question
AUDITED_FATAL_ANSWERS = frozenset({FATAL_ANSWER, "No"})

MAX_SCORE = 100


def deduction_for(item: ScoredAnswer) -> float:
    """Points one answer takes off. Unknown answers are informational: 0."""
    if item.weightage <= 0 or item.answer in POSITIVE_ANSWERS:
        return 0.0
    if item.answer in NEGATIVE_ANSWERS:
        return item.weightage
    return 0.0


def live_score(answered: Iterable[ScoredAnswer]) -> ScoreResult:
    """
    Score a flattened answer set.

    Unanswered weighted questions still count toward the denominator.
    Deductions are tallied even when a fatal is found, then discarded.
    """
    items = [a for a in answered if a.weightage > 0]
    total_weightage = sum(a.weightage for a in items)

    has_fatal = False
    deducted = 0.0
    for item in items:
        if item.is_fatal and item.answer == FATAL_ANSWER:
            has_fatal = True
        deducted += deduction_for(item)

    if has_fatal or total_weightage == 0:
        score = 0
    else:
        score = max(0, round_half_up(MAX_SCORE - deducted / total_weightage * MAX_SCORE))

    return ScoreResult(
        score=score,
        has_fatal=has_fatal,
        total_weightage=total_weightage,
        deducted_points=deducted,
    )


# The evaluator contract name
evaluate = live_score


def _stored_shapes(data: dict) -> list[AuditReport]:
    """
    Every answer block a raw report carries.

    A report can hold sectionAnswers and a legacy answers[].questions[]
    block at the same time; normalize_report() keeps only the former.
    """
    reports = [normalize_report(data)]
    sections = data.get("sectionAnswers", data.get("section_answers"))
    legacy = data.get("answers")
    if sections is not None and isinstance(legacy, list):
        blocks = [s for s in legacy if isinstance(s, dict) and "questions" in s]
        if blocks:
            reports.append(normalize_report({"answers": blocks}))
    return reports


def _has_audited_fatal(report: AuditReport) -> bool:
    if report.has_fatal:
        return True
    return any(
        a.is_fatal and a.answer in AUDITED_FATAL_ANSWERS
        for a in report.iter_answers()
    )


def audited_fatal_check(report: Union[AuditReport, dict]) -> bool:
    """
    Re-detect fatal answers on a stored report (ATA review).

    Accepts a report model or the raw stored dict in either legacy shape,
    or both at once. A stored hasFatal=true is trusted.
    """
    if isinstance(report, dict):
        return any(_has_audited_fatal(r) for r in _stored_shapes(report))
    return _has_audited_fatal(report)


def adjusted_score(report: Union[AuditReport, dict]) -> int:
    """Stored score, zeroed when ATA re-validation finds a fatal."""
    if audited_fatal_check(report):
        return 0
    if isinstance(report, dict):
        report = normalize_report(report)
    return report.score
