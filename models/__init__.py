"""
Domain models - single source of truth for all audit data contracts.

Design principles:
- Every contract defined once
- camelCase on the wire, snake_case in Python
- Lenient at the boundary (missing weightage is 0, unknown fields ignored)
- Backend-agnostic (repository handles persistence)
"""

from .base import BaseEntity, TimestampMixin, WireModel
from .form import FormDefinition, Section, Question, SectionType, QuestionType
from .report import ScoredAnswer, ScoreResult, AnsweredQuestion, SectionAnswers, EditRecord, AuditReport
from .review import AtaReview, QuestionRating, AccuracyMetrics

__all__ = [
    # Base
    "BaseEntity",
    "TimestampMixin",
    "WireModel",
    # Form
    "FormDefinition",
    "Section",
    "Question",
    "SectionType",
    "QuestionType",
    # Report
    "ScoredAnswer",
    "ScoreResult",
    "AnsweredQuestion",
    "SectionAnswers",
    "EditRecord",
    "AuditReport",
    # Review
    "AtaReview",
    "QuestionRating",
    "AccuracyMetrics",
]
