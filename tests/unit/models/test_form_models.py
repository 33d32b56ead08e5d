"""Unit tests for form definition models."""

import pytest
from pydantic import ValidationError

from models import Question, Section, FormDefinition


class TestQuestion:
    """Test Question model."""

    def test_create_minimal(self):
        q = Question(id="q1")
        assert q.text == ""
        assert q.type == "text"
        assert q.weightage == 0
        assert q.is_fatal is False
        assert q.triggers_repetition is None

    def test_accepts_camel_case(self):
        q = Question.model_validate({
            "id": "q1",
            "isFatal": True,
            "controlsSection": True,
            "controlledSectionId": "s2",
            "visibleOnValues": ["Yes"],
        })
        assert q.is_fatal is True
        assert q.controls_section is True
        assert q.controlled_section_id == "s2"
        assert q.visible_on_values == ["Yes"]

    def test_dumps_camel_case(self):
        data = Question(id="q1", is_fatal=True).model_dump(by_alias=True)
        assert data["isFatal"] is True
        assert "is_fatal" not in data

    @pytest.mark.parametrize("raw", [None, "abc", -5, "", True])
    def test_bad_weightage_is_zero(self, raw):
        q = Question.model_validate({"id": "q1", "weightage": raw})
        assert q.weightage == 0
        assert not q.is_scored

    def test_numeric_string_weightage(self):
        q = Question.model_validate({"id": "q1", "weightage": "12.5"})
        assert q.weightage == 12.5
        assert q.is_scored

    @pytest.mark.parametrize("raw", ["true", 1, None, "yes"])
    def test_only_literal_true_is_fatal(self, raw):
        q = Question.model_validate({"id": "q1", "isFatal": raw})
        assert q.is_fatal is False

    def test_null_flags_are_false(self):
        q = Question.model_validate({"id": "q1", "mandatory": None, "controlsVisibility": None})
        assert q.mandatory is False
        assert q.controls_visibility is False

    def test_comma_string_value_lists(self):
        q = Question.model_validate({"id": "q1", "visibleOnValues": "Yes, Escalated ,"})
        assert q.visible_on_values == ["Yes", "Escalated"]

    def test_option_list(self):
        q = Question(id="q1", options="Good, Bad,, Ugly")
        assert q.option_list() == ["Good", "Bad", "Ugly"]

    def test_options_list_is_joined(self):
        q = Question.model_validate({"id": "q1", "options": ["A", "B"]})
        assert q.options == "A,B"

    def test_answer_options_default(self):
        assert Question(id="q1").answer_options() == ["Yes", "No", "NA"]

    def test_answer_options_fatal_adds_fatal(self):
        q = Question(id="q1", options="Pass,Fail", is_fatal=True)
        assert q.answer_options() == ["Pass", "Fail", "Fatal"]

    def test_answer_options_fatal_not_duplicated(self):
        q = Question(id="q1", options="Yes,No,Fatal", is_fatal=True)
        assert q.answer_options().count("Fatal") == 1

    def test_ignores_unknown_fields(self):
        q = Question.model_validate({"id": "q1", "placeholder": "Type here"})
        assert q.id == "q1"

    def test_frozen(self):
        q = Question(id="q1")
        with pytest.raises(ValidationError):
            q.text = "changed"


class TestSection:
    """Test Section model."""

    def test_defaults(self):
        s = Section(id="s1")
        assert s.questions == []
        assert s.index == 1
        assert s.group_key == "s1"
        assert not s.is_template

    def test_null_questions(self):
        s = Section.model_validate({"id": "s1", "questions": None})
        assert s.questions == []

    def test_repeatable_template(self):
        s = Section(id="int", is_repeatable=True, repeatable_group_id="grp")
        assert s.is_template
        assert s.group_key == "grp"

    def test_instance_is_not_template(self):
        s = Section(id="int_repeat_2", is_repeatable=True, repetition_index=2)
        assert not s.is_template
        assert s.index == 2

    def test_find_question(self):
        s = Section(id="s1", questions=[Question(id="a"), Question(id="b")])
        assert s.find_question("b").id == "b"
        assert s.find_question("c") is None


class TestFormDefinition:
    """Test FormDefinition model."""

    def test_integer_id(self):
        form = FormDefinition.model_validate({"id": 42, "name": "Form"})
        assert form.id == "42"

    def test_lookup(self, form):
        assert form.find_section("s2").name == "Complaint"
        assert form.find_question("c1").weightage == 20
        assert form.find_question("missing") is None
        assert len(form.all_questions()) == 6
