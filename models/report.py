"""
Audit report models - what the evaluator consumes and what gets persisted.
"""

from datetime import datetime
from typing import Optional, Iterator
from pydantic import Field, ConfigDict, field_validator

from .base import WireModel, BaseEntity, coerce_weightage, coerce_fatal, coerce_answer
from .review import AtaReview


class ScoredAnswer(WireModel):
    """
    Evaluator input unit.

    One per answered section/question pair, flattened out of a form or
    a stored report.
    """
    model_config = ConfigDict(frozen=True)

    question_text: str = ""
    answer: str = ""
    is_fatal: bool = False
    weightage: float = 0.0
    question_id: Optional[str] = None

    @field_validator("weightage", mode="before")
    @classmethod
    def _weightage(cls, v):
        return coerce_weightage(v)

    @field_validator("is_fatal", mode="before")
    @classmethod
    def _is_fatal(cls, v):
        return coerce_fatal(v)

    @field_validator("answer", mode="before")
    @classmethod
    def _answer(cls, v):
        return coerce_answer(v)


class ScoreResult(WireModel):
    """Evaluator output."""
    model_config = ConfigDict(frozen=True)

    score: int = 0
    has_fatal: bool = False
    total_weightage: float = 0.0
    deducted_points: float = 0.0


class AnsweredQuestion(WireModel):
    """A question as stored in a submitted report, answer embedded."""
    question_id: str = ""
    question_text: str = ""
    answer: str = ""
    remarks: str = ""
    is_fatal: bool = False
    weightage: float = 0.0
    question_type: str = "text"
    options: Optional[str] = None

    @field_validator("weightage", mode="before")
    @classmethod
    def _weightage(cls, v):
        return coerce_weightage(v)

    @field_validator("is_fatal", mode="before")
    @classmethod
    def _is_fatal(cls, v):
        return coerce_fatal(v)

    @field_validator("answer", "remarks", mode="before")
    @classmethod
    def _text(cls, v):
        return coerce_answer(v)

    @field_validator("question_id", mode="before")
    @classmethod
    def _question_id(cls, v):
        return "" if v is None else str(v)

    @field_validator("options", mode="before")
    @classmethod
    def _options(cls, v):
        if isinstance(v, (list, tuple)):
            return ",".join(str(o) for o in v)
        return v

    def to_scored(self) -> ScoredAnswer:
        return ScoredAnswer(
            question_text=self.question_text,
            answer=self.answer,
            is_fatal=self.is_fatal,
            weightage=self.weightage,
            question_id=self.question_id or None,
        )


class SectionAnswers(WireModel):
    """Answers for one section (or one repetition instance)."""
    section_id: Optional[str] = None
    section_name: str = ""
    answers: list[AnsweredQuestion] = Field(default_factory=list)


class EditRecord(WireModel):
    """One entry in a report's edit trail."""
    timestamp: datetime = Field(default_factory=datetime.now)
    editor: str
    action: str


class AuditReport(BaseEntity):
    """
    A scored audit.

    score and section_answers are only ever replaced together; engine.review
    builds a new report for every edit rather than mutating this one.
    """
    audit_id: str
    form_id: Optional[str] = None
    form_name: str = ""
    agent: str = ""
    auditor: str = ""

    section_answers: list[SectionAnswers] = Field(default_factory=list)

    score: int = 0
    max_score: int = 100
    has_fatal: bool = False
    status: str = "completed"

    edit_history: list[EditRecord] = Field(default_factory=list)
    ata_review: Optional[AtaReview] = None

    @field_validator("audit_id", "form_id", "auditor", mode="before")
    @classmethod
    def _ids(cls, v):
        # Database rows carry integer ids
        return str(v) if isinstance(v, int) and not isinstance(v, bool) else v

    @field_validator("has_fatal", mode="before")
    @classmethod
    def _has_fatal(cls, v):
        return coerce_fatal(v)

    def iter_answers(self) -> Iterator[AnsweredQuestion]:
        for section in self.section_answers:
            yield from section.answers

    def find_answer(self, question_id: str) -> Optional[AnsweredQuestion]:
        for a in self.iter_answers():
            if a.question_id == question_id:
                return a
        return None

    @property
    def was_edited(self) -> bool:
        return any(r.action == "edited" for r in self.edit_history)
