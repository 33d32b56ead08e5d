"""
Shared helpers for the API routes.
"""

from typing import Optional
from flask import jsonify, request
from pydantic import ValidationError

from config import get_settings
from engine import (
    AuditSession,
    FormDefinitionError,
    MissingRequiredAnswers,
    ReportFormatError,
    ReviewError,
    UnknownQuestionError,
)
from models import FormDefinition, Section


def json_body() -> dict:
    """Request JSON as a dict; anything else is an empty body."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def error(message: str, status: int = 400, **extra):
    return jsonify({"error": message, **extra}), status


def engine_error_response(e: Exception):
    """Map engine exceptions to JSON error responses."""
    if isinstance(e, MissingRequiredAnswers):
        missing = [{"id": q.id, "text": q.text} for q in e.questions]
        return error(str(e), 422, missing=missing)
    if isinstance(e, UnknownQuestionError):
        return error(str(e), 400, unknown=e.question_ids)
    if isinstance(e, (FormDefinitionError, ReportFormatError, ReviewError)):
        return error(str(e), 400)
    if isinstance(e, ValidationError):
        return error(f"Invalid request: {e.error_count()} validation error(s)", 400)
    raise e


def parse_instances(raw) -> list[Section]:
    """Client-held repetition instances."""
    if not raw:
        return []
    if not isinstance(raw, list):
        raise FormDefinitionError("dynamicInstances must be a list")
    try:
        return [Section.model_validate(s) for s in raw]
    except ValidationError as e:
        raise FormDefinitionError(f"Invalid dynamic instance: {e}") from e


def parse_string_map(raw, name: str) -> dict[str, str]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise FormDefinitionError(f"{name} must be an object")
    return {str(k): ("" if v is None else str(v)) for k, v in raw.items()}


def session_from_body(form: FormDefinition, data: dict) -> AuditSession:
    """Rebuild an AuditSession from the state a client sends back."""
    return AuditSession.restore(
        form,
        answers=parse_string_map(data.get("answers"), "answers"),
        dynamic_instances=parse_instances(data.get("dynamicInstances")),
        remarks=parse_string_map(data.get("remarks"), "remarks"),
        settings=get_settings(),
    )


def session_state(session: AuditSession) -> dict:
    """What a client keeps between calls, plus what it should render."""
    visible = session.resolve()
    return {
        "answers": session.answers,
        "remarks": session.remarks,
        "dynamicInstances": [s.model_dump(mode="json", by_alias=True) for s in session.dynamic_instances],
        "visible": visible.model_dump(mode="json", by_alias=True),
        "score": session.score().model_dump(mode="json", by_alias=True),
    }


def require_str(data: dict, key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    value = str(value).strip()
    return value or None
