"""
Audit report API routes.

Submission, admin edit, ATA review and score checks. Every write replaces
the whole report so score and answers are saved together.
"""

from flask import jsonify, request
from pydantic import ValidationError

from config import get_settings
from repositories import get_repository
from engine import (
    EngineError,
    QuestionAssessment,
    live_score,
    audited_fatal_check,
    adjusted_score,
    to_scored_answers,
    to_legacy_report_format,
    report_to_dict,
    edit_report,
    build_ata_review,
    apply_ata_review,
)
from . import audits_bp
from .helpers import json_body, error, engine_error_response, session_from_body, parse_string_map, require_str


@audits_bp.route("/api/score", methods=["POST"])
def score():
    """
    Score an answer set without storing anything.

    Body is a ScoredAnswer list, {"answers": [ScoredAnswer, ...]} or a
    stored report in either shape.
    """
    data = request.get_json(silent=True)
    if isinstance(data, list):
        data = {"answers": data}
    if not isinstance(data, dict):
        return error("Expected an answer list or a report")
    answers = data.get("answers")
    try:
        if isinstance(answers, list) and not any(isinstance(a, dict) and "questions" in a for a in answers):
            items = to_scored_answers(answers)
        else:
            items = to_scored_answers(data)
    except (EngineError, ValidationError) as e:
        return engine_error_response(e)

    return jsonify(live_score(items).model_dump(mode="json", by_alias=True))


@audits_bp.route("/api/audits")
def list_audits():
    """List reports. ?auditor= and ?pending=ata filter."""
    repo = get_repository()
    auditor = request.args.get("auditor")
    if request.args.get("pending") == "ata":
        reports = repo.audits.list_pending_ata()
    elif auditor:
        reports = repo.audits.list_for_auditor(auditor)
    else:
        reports = repo.audits.list()

    return jsonify([
        {
            "auditId": r.audit_id,
            "formName": r.form_name,
            "agent": r.agent,
            "auditor": r.auditor,
            "score": r.score,
            "hasFatal": r.has_fatal,
            "edited": r.was_edited,
            "ataReviewed": r.ata_review is not None,
            "updatedAt": r.updated_at.isoformat(),
        }
        for r in reports
    ])


@audits_bp.route("/api/audits", methods=["POST"])
def submit_audit():
    """
    Submit a completed audit.

    Body: {formId, auditId, agent, auditor, answers, remarks, dynamicInstances}
    """
    data = json_body()
    form_id = require_str(data, "formId")
    audit_id = require_str(data, "auditId")
    if not form_id or not audit_id:
        return error("formId and auditId required")

    repo = get_repository()
    form = repo.forms.get(form_id)
    if not form:
        return error("Form not found", 404)
    if repo.audits.exists(audit_id):
        return error("Audit already submitted")

    try:
        session = session_from_body(form, data)
        report = session.submit(
            audit_id,
            agent=require_str(data, "agent") or "",
            auditor=require_str(data, "auditor") or "",
        )
    except EngineError as e:
        return engine_error_response(e)

    repo.audits.save(report)
    return jsonify(report_to_dict(report)), 201


@audits_bp.route("/api/audits/<audit_id>")
def get_audit(audit_id):
    report = get_repository().audits.get(audit_id)
    if not report:
        return error("Not found", 404)
    return jsonify(report_to_dict(report))


@audits_bp.route("/api/audits/<audit_id>/legacy")
def get_audit_legacy(audit_id):
    """Report in the answers[].questions[] shape."""
    report = get_repository().audits.get(audit_id)
    if not report:
        return error("Not found", 404)
    return jsonify(to_legacy_report_format(report))


@audits_bp.route("/api/audits/<audit_id>", methods=["PATCH"])
def update_audit(audit_id):
    """
    Admin edit.

    Body: {editor, answers: {questionId: value}, remarks: {questionId: text}}
    """
    repo = get_repository()
    report = repo.audits.get(audit_id)
    if not report:
        return error("Not found", 404)

    data = json_body()
    editor = require_str(data, "editor")
    if not editor:
        return error("editor required")

    try:
        edited = edit_report(
            report,
            parse_string_map(data.get("answers"), "answers"),
            editor=editor,
            remarks=parse_string_map(data.get("remarks"), "remarks"),
        )
    except EngineError as e:
        return engine_error_response(e)

    repo.audits.save(edited)
    return jsonify(report_to_dict(edited))


@audits_bp.route("/api/audits/<audit_id>/ata", methods=["POST"])
def review_audit(audit_id):
    """
    Master auditor review.

    Body: {masterAuditor, rating, feedback,
           assessments: {questionId: {ataAnswer, isCorrect, isCE, isNCE, comments}}}
    """
    repo = get_repository()
    report = repo.audits.get(audit_id)
    if not report:
        return error("Not found", 404)

    data = json_body()
    reviewer = (
        require_str(data, "masterAuditor")
        or require_str(data, "reviewerName")
        or "Master Auditor"
    )

    rating = data.get("rating", 5)
    if isinstance(rating, bool) or not isinstance(rating, int):
        return error("rating must be an integer")

    raw_assessments = data.get("assessments") or {}
    if not isinstance(raw_assessments, dict):
        return error("assessments must be an object")

    try:
        assessments = {
            str(qid): QuestionAssessment.model_validate(a)
            for qid, a in raw_assessments.items()
        }
        review = build_ata_review(
            report, reviewer, rating, data.get("feedback") or "",
            assessments=assessments,
            settings=get_settings(),
        )
    except (EngineError, ValidationError) as e:
        return engine_error_response(e)

    reviewed = apply_ata_review(report, review)
    repo.audits.save(reviewed)
    return jsonify(report_to_dict(reviewed)), 201


@audits_bp.route("/api/audits/<audit_id>/fatal-check")
def fatal_check(audit_id):
    """Live vs ATA fatal rules side by side for one report."""
    report = get_repository().audits.get(audit_id)
    if not report:
        return error("Not found", 404)

    live = live_score(to_scored_answers(report))
    return jsonify({
        "auditId": report.audit_id,
        "liveHasFatal": live.has_fatal,
        "liveScore": live.score,
        "auditedHasFatal": audited_fatal_check(report),
        "storedScore": report.score,
        "adjustedScore": adjusted_score(report),
    })
