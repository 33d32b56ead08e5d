"""
ATA models - master auditor re-validation of a scored audit.
"""

from datetime import datetime
from pydantic import Field

from .base import WireModel, round_half_up


class QuestionRating(WireModel):
    """Master auditor's verdict on one answer."""
    question_id: str = ""
    question_text: str = ""
    auditor_answer: str = ""
    ata_answer: str = ""
    is_correct: bool = True
    is_ce: bool = Field(default=False, alias="isCE")    # Critical error
    is_nce: bool = Field(default=False, alias="isNCE")  # Non-critical error
    comments: str = ""


class AccuracyMetrics(WireModel):
    """Auditor accuracy as judged by the master auditor."""
    total_questions: int = 0
    correct_answers: int = 0
    incorrect_answers: int = 0
    ce_errors: int = 0
    nce_errors: int = 0
    overall_accuracy: int = 100

    @classmethod
    def from_ratings(cls, ratings: list[QuestionRating]) -> "AccuracyMetrics":
        """Tally ratings. An incorrect answer is CE first, NCE second."""
        correct = sum(1 for r in ratings if r.is_correct)
        incorrect = [r for r in ratings if not r.is_correct]
        ce = sum(1 for r in incorrect if r.is_ce)
        nce = sum(1 for r in incorrect if not r.is_ce and r.is_nce)
        total = len(ratings)
        return cls(
            total_questions=total,
            correct_answers=correct,
            incorrect_answers=len(incorrect),
            ce_errors=ce,
            nce_errors=nce,
            overall_accuracy=round_half_up(correct / total * 100) if total else 100,
        )


class AtaReview(WireModel):
    """
    A completed ATA review.

    original_score is the fatal-adjusted auditor score; ata_score is the
    master auditor's rating on the 0-100 scale.
    """
    reviewer_name: str = "Master Auditor"
    feedback: str = ""
    rating: int = 5
    timestamp: datetime = Field(default_factory=datetime.now)

    question_ratings: list[QuestionRating] = Field(default_factory=list)
    accuracy_metrics: AccuracyMetrics = Field(default_factory=AccuracyMetrics)

    original_score: int = 0
    ata_score: int = 0
    variance: int = 0
