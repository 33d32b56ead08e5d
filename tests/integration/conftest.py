"""
Integration test fixtures.

Integration tests:
- Test component boundaries
- Use real I/O but to temp locations
- Should be deterministic
"""

import pytest
import tempfile
import shutil
from pathlib import Path


@pytest.fixture
def temp_dir():
    """Temporary directory for test data."""
    d = tempfile.mkdtemp()
    yield Path(d)
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def data_dir(temp_dir):
    """Temporary JSON backend root."""
    p = temp_dir / "data"
    p.mkdir()
    return p


@pytest.fixture
def memory_backend():
    """Route the app at a fresh in-memory repository."""
    from repositories import configure_backend, get_repository
    configure_backend("memory")
    yield get_repository()
    configure_backend("memory")


@pytest.fixture
def client(memory_backend):
    import app
    app.app.config["TESTING"] = True
    return app.app.test_client()


@pytest.fixture
def form_data():
    """Small form: one fatal, one controlled section, one repeatable section."""
    return {
        "id": "form-1",
        "name": "Call Quality",
        "sections": [
            {
                "id": "s1",
                "name": "Agent",
                "questions": [
                    {"id": "q1", "text": "Greeting used?", "weightage": 10, "mandatory": True},
                    {"id": "q2", "text": "Verified identity?", "weightage": 10,
                     "isFatal": True, "mandatory": True},
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
            {
                "id": "int",
                "name": "Interaction 1",
                "isRepeatable": True,
                "questions": [
                    {"id": "iq1", "text": "Issue resolved?", "weightage": 10},
                    {"id": "iq4", "text": "Another interaction?", "triggersRepetition": True},
                ],
            },
        ],
    }
