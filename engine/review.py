"""
Operations on submitted reports: admin edit and ATA review.

Every operation returns a new AuditReport. The input is never touched, and
answers, score and edit history change together in the returned copy.
"""

from datetime import datetime
from typing import Mapping, Optional
from pydantic import Field

from config import EngineSettings, get_settings
from models import (
    AuditReport,
    EditRecord,
    AtaReview,
    QuestionRating,
    AccuracyMetrics,
    WireModel,
)
from models.base import coerce_answer
from .adapters import to_scored_answers
from .errors import UnknownQuestionError, ReviewError
from .scoring import live_score, adjusted_score


EDITED = "edited"
ATA_REVIEWED = "added ATA review"


class QuestionAssessment(WireModel):
    """Master auditor's input for one question. Defaults mean 'agreed'."""
    ata_answer: Optional[str] = None
    is_correct: bool = True
    is_ce: bool = Field(default=False, alias="isCE")
    is_nce: bool = Field(default=False, alias="isNCE")
    comments: str = ""


def _deep_copy(report: AuditReport) -> AuditReport:
    return report.model_copy(deep=True)


def edit_report(
    report: AuditReport,
    changes: Mapping[str, str],
    editor: str,
    remarks: Optional[Mapping[str, str]] = None,
    action: str = EDITED,
) -> AuditReport:
    """
    Admin edit: change answers, re-score, log it.

    changes and remarks are keyed by question id. Ids the report doesn't
    contain are a caller error.
    """
    remarks = remarks or {}
    known = {a.question_id for a in report.iter_answers()}
    unknown = [qid for qid in (*changes, *remarks) if qid not in known]
    if unknown:
        raise UnknownQuestionError(list(dict.fromkeys(unknown)))

    edited = _deep_copy(report)
    for answer in edited.iter_answers():
        if answer.question_id in changes:
            answer.answer = coerce_answer(changes[answer.question_id])
        if answer.question_id in remarks:
            answer.remarks = coerce_answer(remarks[answer.question_id])

    result = live_score(to_scored_answers(edited))
    return edited.model_copy(update={
        "score": result.score,
        "has_fatal": result.has_fatal,
        "edit_history": [*edited.edit_history, EditRecord(editor=editor, action=action)],
        "updated_at": datetime.now(),
    })


def build_ata_review(
    report: AuditReport,
    reviewer: str,
    rating: int,
    feedback: str,
    assessments: Optional[Mapping[str, QuestionAssessment]] = None,
    settings: Optional[EngineSettings] = None,
) -> AtaReview:
    """
    Score the auditor's work against the master auditor's judgement.

    Questions without an assessment count as correct with the auditor's
    answer. originalScore is fatal-adjusted with the ATA rule, not the
    live one.
    """
    settings = settings or get_settings()
    assessments = assessments or {}

    if not feedback or not feedback.strip():
        raise ReviewError("Please provide feedback before submitting your review.")
    if not 1 <= rating <= settings.ata_rating_scale:
        raise ReviewError(f"Rating must be between 1 and {settings.ata_rating_scale}")

    known = {a.question_id for a in report.iter_answers()}
    unknown = [qid for qid in assessments if qid not in known]
    if unknown:
        raise UnknownQuestionError(unknown)

    ratings = []
    for answer in report.iter_answers():
        assessment = assessments.get(answer.question_id) or QuestionAssessment()
        ratings.append(QuestionRating(
            question_id=answer.question_id,
            question_text=answer.question_text or answer.question_id,
            auditor_answer=answer.answer,
            ata_answer=answer.answer if assessment.ata_answer is None else assessment.ata_answer,
            is_correct=assessment.is_correct,
            is_ce=assessment.is_ce,
            is_nce=assessment.is_nce,
            comments=assessment.comments,
        ))

    original = adjusted_score(report)
    ata_score = settings.ata_score(rating)

    return AtaReview(
        reviewer_name=reviewer,
        feedback=feedback.strip(),
        rating=rating,
        question_ratings=ratings,
        accuracy_metrics=AccuracyMetrics.from_ratings(ratings),
        original_score=original,
        ata_score=ata_score,
        variance=abs(original - ata_score),
    )


def apply_ata_review(report: AuditReport, review: AtaReview) -> AuditReport:
    """Attach a review and log it. Score and answers are left alone."""
    reviewed = _deep_copy(report)
    return reviewed.model_copy(update={
        "ata_review": review,
        "edit_history": [
            *reviewed.edit_history,
            EditRecord(editor=review.reviewer_name, action=ATA_REVIEWED),
        ],
        "updated_at": datetime.now(),
    })
