"""
Form API routes.

Stores form definitions and resolves visibility for a client-held
answer set. Sessions are not kept server-side: the client sends its
answers and repetition instances back on every call.
"""

from flask import jsonify
from repositories import get_repository
from engine import parse_form, EngineError
from . import forms_bp
from .helpers import json_body, error, engine_error_response, session_from_body, session_state


@forms_bp.route("/api/forms")
def list_forms():
    """List form summaries."""
    forms = get_repository().forms.list()
    return jsonify([
        {"id": f.id, "name": f.name, "sections": len(f.sections)}
        for f in forms
    ])


@forms_bp.route("/api/forms", methods=["POST"])
def create_form():
    """Store a form definition from the form builder."""
    try:
        form = parse_form(json_body())
    except EngineError as e:
        return engine_error_response(e)

    repo = get_repository()
    if repo.forms.exists(form.id):
        return error("Form already exists")

    repo.forms.save(form)
    return jsonify(form.model_dump(mode="json", by_alias=True)), 201


@forms_bp.route("/api/forms/<form_id>")
def get_form(form_id):
    form = get_repository().forms.get(form_id)
    if not form:
        return error("Not found", 404)
    return jsonify(form.model_dump(mode="json", by_alias=True))


@forms_bp.route("/api/forms/<form_id>/resolve", methods=["POST"])
def resolve_form(form_id):
    """Visible sections/questions for {answers, dynamicInstances}."""
    form = get_repository().forms.get(form_id)
    if not form:
        return error("Not found", 404)

    try:
        session = session_from_body(form, json_body())
    except EngineError as e:
        return engine_error_response(e)

    return jsonify(session.resolve().model_dump(mode="json", by_alias=True))


@forms_bp.route("/api/forms/<form_id>/answer", methods=["POST"])
def answer_question(form_id):
    """
    Apply one answer change.

    Body: {answers, dynamicInstances, remarks, questionId, value}
    Returns the new client state, visible structure and live score.
    """
    form = get_repository().forms.get(form_id)
    if not form:
        return error("Not found", 404)

    data = json_body()
    question_id = data.get("questionId")
    if not question_id:
        return error("questionId required")

    try:
        session = session_from_body(form, data)
    except EngineError as e:
        return engine_error_response(e)

    session.set_answer(str(question_id), data.get("value"))
    return jsonify(session_state(session))
