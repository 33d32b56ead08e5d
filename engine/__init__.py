"""
Engine - conditional audit form evaluation and scoring.

Data flows one way:
    form + answers -> visibility resolver -> visible questions -> evaluator -> score

Modules:
- visibility: which sections/questions are showing (fail-open)
- repetition: repeatable-section instances created/removed by trigger answers
- scoring: deduct-from-100% evaluator, plus the ATA fatal re-check
- adapters: parse forms, normalize legacy report shapes
- session: AuditSession, the stateful wrapper for one audit in progress
- review: admin edit and ATA review of submitted reports
"""

from .errors import (
    EngineError,
    FormDefinitionError,
    ReportFormatError,
    MissingRequiredAnswers,
    UnknownQuestionError,
    ReviewError,
)
from .visibility import (
    VisibleForm,
    resolve_visible,
    working_sections,
    is_section_visible,
    is_question_visible,
)
from .repetition import (
    apply_repetition,
    clone_section,
    is_repetition_trigger,
    DEFAULT_REPETITION_PROMPT,
)
from .scoring import (
    live_score,
    evaluate,
    audited_fatal_check,
    adjusted_score,
)
from .adapters import (
    parse_form,
    normalize_report,
    to_scored_answers,
    to_legacy_report_format,
    report_to_dict,
)
from .session import AuditSession
from .review import (
    QuestionAssessment,
    edit_report,
    build_ata_review,
    apply_ata_review,
)

__all__ = [
    # errors
    'EngineError',
    'FormDefinitionError',
    'ReportFormatError',
    'MissingRequiredAnswers',
    'UnknownQuestionError',
    'ReviewError',
    # visibility
    'VisibleForm',
    'resolve_visible',
    'working_sections',
    'is_section_visible',
    'is_question_visible',
    # repetition
    'apply_repetition',
    'clone_section',
    'is_repetition_trigger',
    'DEFAULT_REPETITION_PROMPT',
    # scoring
    'live_score',
    'evaluate',
    'audited_fatal_check',
    'adjusted_score',
    # adapters
    'parse_form',
    'normalize_report',
    'to_scored_answers',
    'to_legacy_report_format',
    'report_to_dict',
    # session
    'AuditSession',
    # review
    'QuestionAssessment',
    'edit_report',
    'build_ata_review',
    'apply_ata_review',
]
