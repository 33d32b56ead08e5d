"""
Form visibility resolver.

Given a form, its live repetition instances and an answer snapshot, decide
which sections and questions are showing. Pure: no state, no I/O.

Fail-open throughout - a control pointing at a question that doesn't
exist leaves the target visible.
"""

from typing import Mapping, Optional, Sequence
from pydantic import Field, ConfigDict

from models import FormDefinition, Section, Question, WireModel


class VisibleForm(WireModel):
    """Resolver output - data only, the renderer decides the widgets."""
    model_config = ConfigDict(frozen=True)

    visible_sections: list[Section] = Field(default_factory=list)
    visible_questions_by_section: dict[str, list[Question]] = Field(default_factory=dict)

    def visible_questions(self) -> list[Question]:
        """All visible questions, in render order."""
        return [
            q
            for s in self.visible_sections
            for q in self.visible_questions_by_section.get(s.id, [])
        ]

    def pairs(self) -> list[tuple[Section, Question]]:
        return [
            (s, q)
            for s in self.visible_sections
            for q in self.visible_questions_by_section.get(s.id, [])
        ]


def working_sections(form: FormDefinition, dynamic_instances: Sequence[Section] = ()) -> list[Section]:
    """
    Form sections with repetition instances slotted in.

    Each instance follows its template and the group's earlier instances,
    in creation order. Instances whose template is gone go last.
    """
    by_group: dict[str, list[Section]] = {}
    for inst in dynamic_instances:
        by_group.setdefault(inst.group_key, []).append(inst)

    result = []
    for section in form.sections:
        result.append(section)
        if section.is_template:
            result.extend(by_group.pop(section.group_key, []))

    for leftovers in by_group.values():
        result.extend(leftovers)
    return result


def _answer_for(answers: Mapping[str, str], question_id: str) -> str:
    return answers.get(question_id) or ""


def find_section_controller(section: Section, sections: Sequence[Section]) -> Optional[Question]:
    """The question (in any section) that declares control over this section."""
    for s in sections:
        for q in s.questions:
            if q.controls_section and q.controlled_section_id == section.id:
                return q
    return None


def is_section_visible(section: Section, sections: Sequence[Section], answers: Mapping[str, str]) -> bool:
    if not section.controlled_by:
        return True

    controller = find_section_controller(section, sections)
    if controller is None:
        return True

    return _answer_for(answers, controller.id) in controller.visible_on_values


def is_question_visible(question: Question, section: Section, answers: Mapping[str, str]) -> bool:
    """Question control only looks inside the question's own section."""
    if not question.controlled_by:
        return True

    controller = section.find_question(question.controlled_by)
    if controller is None:
        return True

    return _answer_for(answers, controller.id) in controller.visible_on_values


def resolve_visible(
    form: FormDefinition,
    dynamic_instances: Sequence[Section],
    answers: Mapping[str, str],
) -> VisibleForm:
    """Compute the visible sections and, per section, the visible questions."""
    sections = working_sections(form, dynamic_instances)

    visible_sections = []
    questions_by_section = {}
    for section in sections:
        if not is_section_visible(section, sections, answers):
            continue
        visible_sections.append(section)
        questions_by_section[section.id] = [
            q for q in section.questions
            if is_question_visible(q, section, answers)
        ]

    return VisibleForm(
        visible_sections=visible_sections,
        visible_questions_by_section=questions_by_section,
    )
