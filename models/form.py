"""
Form definition models - sections, questions, conditional metadata.

Owned by the form builder. Immutable once an audit begins, so every model
here is frozen; repetition instances are produced with model_copy().
"""

from enum import Enum
from typing import Optional
from pydantic import Field, ConfigDict, field_validator

from .base import WireModel, coerce_weightage, coerce_fatal, coerce_flag, coerce_value_list


DEFAULT_ANSWER_OPTIONS = ["Yes", "No", "NA"]
FATAL_OPTION = "Fatal"


class SectionType(str, Enum):
    """Section kinds offered by the form builder."""
    AGENT = "agent"
    QUESTIONNAIRE = "questionnaire"
    CUSTOM = "custom"
    INTERACTION = "interaction"


class QuestionType(str, Enum):
    """Input kinds. Determines the widget, not the scoring."""
    TEXT = "text"
    DROPDOWN = "dropdown"
    MULTI_SELECT = "multiSelect"
    NUMBER = "number"
    DATE = "date"
    PARTNER = "partner"


class Question(WireModel):
    """A single audit question."""
    model_config = ConfigDict(frozen=True)

    id: str
    text: str = ""
    type: str = QuestionType.TEXT.value  # Flexible - unknown types render as text
    options: Optional[str] = None  # Comma-separated, as the form builder stores it

    # Scoring
    weightage: float = 0.0
    mandatory: bool = False
    is_fatal: bool = False
    enable_remarks: bool = False

    # Section control
    controls_section: bool = False
    controlled_section_id: Optional[str] = None
    visible_on_values: list[str] = Field(default_factory=list)

    # Question control (same section only)
    controls_visibility: bool = False
    controlled_by: Optional[str] = None

    # Repetition; None means "not configured", fall back to the prompt text
    triggers_repetition: Optional[bool] = None
    repeat_on_values: list[str] = Field(default_factory=list)

    @field_validator("weightage", mode="before")
    @classmethod
    def _weightage(cls, v):
        return coerce_weightage(v)

    @field_validator("is_fatal", mode="before")
    @classmethod
    def _is_fatal(cls, v):
        return coerce_fatal(v)

    @field_validator("mandatory", "enable_remarks", "controls_section", "controls_visibility", mode="before")
    @classmethod
    def _flags(cls, v):
        return coerce_flag(v)

    @field_validator("visible_on_values", "repeat_on_values", mode="before")
    @classmethod
    def _value_lists(cls, v):
        return coerce_value_list(v)

    @field_validator("options", mode="before")
    @classmethod
    def _options(cls, v):
        if isinstance(v, (list, tuple)):
            return ",".join(str(o) for o in v)
        return v

    @property
    def is_scored(self) -> bool:
        """Only weighted questions contribute to the score."""
        return self.weightage > 0

    def option_list(self) -> list[str]:
        """Configured options, trimmed, empties dropped."""
        if not self.options:
            return []
        return [o.strip() for o in self.options.split(",") if o.strip()]

    def answer_options(self) -> list[str]:
        """
        Answers an editor may pick for this question.

        Fatal questions always offer "Fatal", whatever the builder configured.
        """
        options = self.option_list() or list(DEFAULT_ANSWER_OPTIONS)
        if self.is_fatal and FATAL_OPTION not in options:
            options.append(FATAL_OPTION)
        return options


class Section(WireModel):
    """
    A group of questions.

    A section with is_repeatable=True is a template; the engine clones it
    into numbered instances.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    type: str = SectionType.QUESTIONNAIRE.value
    questions: list[Question] = Field(default_factory=list)
    controlled_by: Optional[str] = None

    # Repetition
    is_repeatable: bool = False
    repeatable_group_id: Optional[str] = None
    max_repetitions: Optional[int] = None
    repetition_index: Optional[int] = None

    @field_validator("is_repeatable", mode="before")
    @classmethod
    def _is_repeatable(cls, v):
        return coerce_flag(v)

    @field_validator("questions", mode="before")
    @classmethod
    def _questions(cls, v):
        return v or []

    @property
    def index(self) -> int:
        """Repetition index; templates count as 1."""
        return self.repetition_index or 1

    @property
    def group_key(self) -> str:
        return self.repeatable_group_id or self.id

    @property
    def is_template(self) -> bool:
        return self.is_repeatable and self.index == 1

    def find_question(self, question_id: str) -> Optional[Question]:
        for q in self.questions:
            if q.id == question_id:
                return q
        return None


class FormDefinition(WireModel):
    """
    An audit form.

    Stored as opaque JSON by the form builder; parse it with
    engine.adapters.parse_form to get contract errors instead of
    pydantic ones.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    sections: list[Section] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _id(cls, v):
        # Database forms carry integer ids
        return str(v) if isinstance(v, int) else v

    def all_questions(self) -> list[Question]:
        return [q for s in self.sections for q in s.questions]

    def find_section(self, section_id: str) -> Optional[Section]:
        for s in self.sections:
            if s.id == section_id:
                return s
        return None

    def find_question(self, question_id: str) -> Optional[Question]:
        for s in self.sections:
            q = s.find_question(question_id)
            if q:
                return q
        return None
