"""
Input/output adapters.

Everything that sniffs formats lives here, so the resolver and evaluator only
ever see FormDefinition / ScoredAnswer.

Stored reports come in two shapes:
    sectionAnswers[].answers[]   - submission format
    answers[].questions[]        - reports-page format (text, questionType, ...)
"""

import json
from typing import Any, Iterable, Union
from pydantic import ValidationError

from models import FormDefinition, AuditReport, ScoredAnswer
from .errors import FormDefinitionError, ReportFormatError


def _loads(raw, error_cls, what: str):
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as e:
        raise error_cls(f"{what} is not valid JSON: {e}") from e


def parse_form(raw: Union[str, bytes, dict]) -> FormDefinition:
    """
    Parse a form definition from JSON text or a decoded dict.

    The sections column is sometimes stored as its own JSON string; that is
    unpacked too.
    """
    data = raw
    if isinstance(raw, (str, bytes)):
        data = _loads(raw, FormDefinitionError, "Form definition")
    if not isinstance(data, dict):
        raise FormDefinitionError("Form definition must be a JSON object")

    data = dict(data)
    if isinstance(data.get("sections"), str):
        data["sections"] = _loads(data["sections"], FormDefinitionError, "Form sections")

    try:
        return FormDefinition.model_validate(data)
    except ValidationError as e:
        raise FormDefinitionError(f"Invalid form definition: {e}") from e


def _first(data: dict, *keys, default=None):
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return default


def _normalize_row(row: dict) -> dict:
    """One answered question, any legacy spelling -> submission format."""
    out = dict(row)
    out["questionId"] = _first(row, "questionId", "question_id", "id", default="")
    out["questionText"] = _first(row, "questionText", "question_text", "text", "question", default="")
    out["questionType"] = _first(row, "questionType", "question_type", "type", default="text")
    for key in ("id", "text", "question", "type"):
        out.pop(key, None)
    return out


def _normalize_sections(data: dict) -> list[dict]:
    sections = data.get("sectionAnswers", data.get("section_answers"))
    if isinstance(sections, dict):
        sections = list(sections.values())

    if isinstance(sections, list):
        return [
            {
                "sectionId": _first(s, "sectionId", "section_id", "id"),
                "sectionName": _first(s, "sectionName", "section_name", "section", "name", default=""),
                "answers": [_normalize_row(r) for r in s.get("answers") or [] if isinstance(r, dict)],
            }
            for s in sections if isinstance(s, dict)
        ]

    legacy = data.get("answers")
    if isinstance(legacy, list):
        return [
            {
                "sectionId": _first(s, "sectionId", "id"),
                "sectionName": _first(s, "section", "sectionName", "name", default=""),
                "answers": [_normalize_row(r) for r in s.get("questions") or [] if isinstance(r, dict)],
            }
            for s in legacy if isinstance(s, dict)
        ]

    return []


def normalize_report(raw: Union[str, bytes, dict]) -> AuditReport:
    """Stored report (either shape) -> AuditReport."""
    data = raw
    if isinstance(raw, (str, bytes)):
        data = _loads(raw, ReportFormatError, "Report")
    if not isinstance(data, dict):
        raise ReportFormatError("Report must be a JSON object")

    normalized = dict(data)
    normalized.pop("answers", None)
    normalized.pop("section_answers", None)
    normalized["sectionAnswers"] = _normalize_sections(data)
    normalized["auditId"] = _first(data, "auditId", "audit_id", "id", default="")
    normalized["formName"] = _first(data, "formName", "form_name", "form", default="")
    normalized["auditor"] = _first(data, "auditorName", "auditor", default="")
    if "createdAt" not in data and data.get("timestamp") is not None:
        normalized["createdAt"] = data["timestamp"]
    if data.get("editHistory") is None:
        normalized.pop("editHistory", None)

    try:
        return AuditReport.model_validate(normalized)
    except ValidationError as e:
        raise ReportFormatError(f"Invalid report: {e}") from e


def to_scored_answers(source: Union[AuditReport, dict, Iterable[Any]]) -> list[ScoredAnswer]:
    """
    Flatten anything answer-shaped into evaluator input.

    Accepts a report, a raw stored report dict, or a list of
    ScoredAnswer / answer-row dicts.
    """
    if isinstance(source, dict):
        source = normalize_report(source)

    if isinstance(source, AuditReport):
        return [a.to_scored() for a in source.iter_answers()]

    result = []
    for item in source:
        if isinstance(item, ScoredAnswer):
            result.append(item)
        elif isinstance(item, dict):
            row = _normalize_row(item)
            result.append(ScoredAnswer.model_validate({
                "questionText": row["questionText"],
                "questionId": row["questionId"] or None,
                "answer": row.get("answer"),
                "isFatal": row.get("isFatal", row.get("is_fatal")),
                "weightage": row.get("weightage"),
            }))
        else:
            raise ReportFormatError(f"Cannot score {type(item).__name__}")
    return result


def report_to_dict(report: AuditReport) -> dict:
    """Wire shape (camelCase, JSON-safe)."""
    return report.model_dump(mode="json", by_alias=True)


def to_legacy_report_format(report: AuditReport) -> dict:
    """
    Reports-page shape: answers[].questions[] with `text` and `questionType`.
    """
    return {
        "id": report.audit_id,
        "auditId": report.audit_id,
        "agent": report.agent,
        "auditor": report.auditor,
        "formName": report.form_name,
        "timestamp": int(report.created_at.timestamp() * 1000),
        "score": report.score,
        "hasFatal": report.has_fatal,
        "answers": [
            {
                "section": section.section_name,
                "questions": [
                    {
                        "text": a.question_text,
                        "answer": a.answer,
                        "remarks": a.remarks,
                        "questionType": a.question_type,
                        "isFatal": a.is_fatal,
                        "weightage": a.weightage,
                        "questionId": a.question_id,
                        "options": a.options,
                    }
                    for a in section.answers
                ],
            }
            for section in report.section_answers
        ],
        "editHistory": [r.model_dump(mode="json", by_alias=True) for r in report.edit_history],
    }
