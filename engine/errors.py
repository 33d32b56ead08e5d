"""
Engine exceptions.

Raised only for caller-contract violations at the boundaries. Scoring and
visibility never raise for bad data; they fall back to lenient defaults.
"""


class EngineError(Exception):
    """Base for all engine errors."""


class FormDefinitionError(EngineError, ValueError):
    """Form JSON could not be parsed into a FormDefinition."""


class ReportFormatError(EngineError, ValueError):
    """Stored report is not in any known shape."""


class MissingRequiredAnswers(EngineError):
    """Submission attempted with visible mandatory questions unanswered."""

    def __init__(self, questions):
        self.questions = list(questions)
        labels = ", ".join(f"{q.text} ({q.id})" for q in self.questions)
        super().__init__(f"Please complete all required fields: {labels}")


class UnknownQuestionError(EngineError, ValueError):
    """An edit referenced a question the report does not contain."""

    def __init__(self, question_ids):
        self.question_ids = list(question_ids)
        super().__init__(f"Unknown question id(s): {', '.join(self.question_ids)}")


class ReviewError(EngineError, ValueError):
    """ATA review input rejected."""
