"""
Unit test fixtures.

All unit tests should be:
- Fast (< 100ms)
- Isolated (no external dependencies)
- Deterministic (same result every time)
"""

import pytest
from datetime import datetime

from engine import parse_form


@pytest.fixture
def fixed_time():
    """Fixed datetime for deterministic tests."""
    return datetime(2024, 1, 15, 12, 0, 0)


@pytest.fixture
def form_data():
    """
    Raw form with both kinds of conditional control.

    q3 controls q4 inside the Agent section; q5 controls the Complaint
    section.
    """
    return {
        "id": "form-1",
        "name": "Call Quality",
        "sections": [
            {
                "id": "s1",
                "name": "Agent",
                "type": "agent",
                "questions": [
                    {"id": "q1", "text": "Greeting used?", "type": "dropdown",
                     "options": "Yes,No,NA", "weightage": 10, "mandatory": True},
                    {"id": "q2", "text": "Verified identity?", "weightage": 10,
                     "isFatal": True, "mandatory": True},
                    {"id": "q3", "text": "Escalation needed?", "controlsVisibility": True,
                     "visibleOnValues": ["Yes"]},
                    {"id": "q4", "text": "Escalation reason", "controlledBy": "q3",
                     "mandatory": True},
                    {"id": "q5", "text": "Complaint raised?", "controlsSection": True,
                     "controlledSectionId": "s2", "visibleOnValues": ["Yes"]},
                ],
            },
            {
                "id": "s2",
                "name": "Complaint",
                "controlledBy": "q5",
                "questions": [
                    {"id": "c1", "text": "Complaint logged?", "weightage": 20, "mandatory": True},
                ],
            },
        ],
    }


@pytest.fixture
def form(form_data):
    return parse_form(form_data)


@pytest.fixture
def repeatable_form_data():
    """Form with a repeatable Interaction section matched on the prompt text."""
    return {
        "id": "form-2",
        "name": "Interactions",
        "sections": [
            {
                "id": "intro",
                "name": "Intro",
                "questions": [{"id": "i1", "text": "Customer name", "mandatory": True}],
            },
            {
                "id": "int",
                "name": "Interaction 1",
                "type": "interaction",
                "isRepeatable": True,
                "repeatableGroupId": "grp",
                "questions": [
                    {"id": "iq1", "text": "Issue resolved?", "weightage": 10},
                    {"id": "iq2", "text": "Transferred?", "controlsVisibility": True,
                     "visibleOnValues": ["Yes"]},
                    {"id": "iq3", "text": "Transfer reason", "controlledBy": "iq2"},
                    {"id": "iq4", "text": "Was there another interaction?"},
                ],
            },
            {
                "id": "close",
                "name": "Closing",
                "questions": [{"id": "z1", "text": "Closed properly?", "weightage": 10}],
            },
        ],
    }


@pytest.fixture
def repeatable_form(repeatable_form_data):
    return parse_form(repeatable_form_data)


@pytest.fixture
def section_answers_report():
    """Stored report in the submission shape. Fatal question answered "No"."""
    return {
        "auditId": "AUD-1",
        "formId": "form-1",
        "formName": "Call Quality",
        "agent": "Jane Doe",
        "auditorName": "sam",
        "auditor": 7,
        "sectionAnswers": [
            {
                "sectionId": "s1",
                "sectionName": "Agent",
                "answers": [
                    {"questionId": "q1", "questionText": "Greeting used?", "answer": "Yes",
                     "isFatal": False, "weightage": 10, "questionType": "dropdown"},
                    {"questionId": "q2", "questionText": "Verified identity?", "answer": "No",
                     "isFatal": True, "weightage": 10},
                ],
            },
        ],
        "score": 50,
        "maxScore": 100,
        "hasFatal": False,
    }


@pytest.fixture
def questions_report():
    """Stored report in the reports-page shape. Fatal question answered "Fatal"."""
    return {
        "id": "AUD-2",
        "form": "Call Quality",
        "agent": "Jane Doe",
        "auditor": "sam",
        "timestamp": 1700000000000,
        "answers": [
            {
                "section": "Agent",
                "questions": [
                    {"text": "Greeting used?", "answer": "Yes", "weightage": 10,
                     "isFatal": False, "questionType": "dropdown"},
                    {"text": "Verified identity?", "answer": "Fatal", "weightage": 10,
                     "isFatal": True},
                ],
            },
        ],
        "score": 0,
        "hasFatal": True,
    }
