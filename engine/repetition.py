"""
Repeatable-section lifecycle.

A repeatable section is a template. Answering its trigger question with a
repeat value materializes the next numbered instance; answering with a stop
value removes every later instance of the same group. Lower indexes are
never removed implicitly.

apply_repetition() is pure: it returns a new instance tuple and leaves its
inputs alone. AuditSession is what holds the result between answers.
"""

import re
from typing import Optional, Sequence

from models import FormDefinition, Section, Question
from .visibility import working_sections


DEFAULT_REPETITION_PROMPT = "Was there another interaction?"
REPEAT_VALUE = "Yes"
STOP_VALUE = "No"

_TRAILING_INDEX = re.compile(r"\s+1$")


def is_repetition_trigger(question: Question, prompt: str = DEFAULT_REPETITION_PROMPT) -> bool:
    """
    triggersRepetition decides when set. Forms built before the flag
    existed are matched on the question text.
    """
    if question.triggers_repetition is not None:
        return question.triggers_repetition
    return question.text == prompt


def wants_repeat(question: Question, value: str) -> bool:
    if question.repeat_on_values:
        return value in question.repeat_on_values
    return value == REPEAT_VALUE


def wants_stop(question: Question, value: str) -> bool:
    if value == STOP_VALUE:
        return True
    if question.repeat_on_values and value:
        return value not in question.repeat_on_values
    return False


def instance_id(base_id: str, index: int) -> str:
    return f"{base_id}_repeat_{index}"


def base_name(template: Section) -> str:
    """'Interaction 1' -> 'Interaction'; 'Interaction' stays."""
    return _TRAILING_INDEX.sub("", template.name)


def clone_section(template: Section, index: int) -> Section:
    """
    Build instance `index` of a template.

    Question ids get the _repeat_N suffix. controlledBy references that point
    inside the template are re-pointed so nested visibility still works.
    """
    local_ids = {q.id for q in template.questions}
    questions = []
    for q in template.questions:
        update = {"id": instance_id(q.id, index)}
        if q.controlled_by in local_ids:
            update["controlled_by"] = instance_id(q.controlled_by, index)
        questions.append(q.model_copy(update=update))

    return template.model_copy(update={
        "id": instance_id(template.id, index),
        "name": f"{base_name(template)} {index}",
        "repetition_index": index,
        "repeatable_group_id": template.group_key,
        "questions": questions,
    })


def find_template(form: FormDefinition, group_key: str) -> Optional[Section]:
    for section in form.sections:
        if section.is_template and section.group_key == group_key:
            return section
    return None


def find_owner(sections: Sequence[Section], question_id: str) -> Optional[tuple[Section, Question]]:
    for section in sections:
        q = section.find_question(question_id)
        if q:
            return section, q
    return None


def apply_repetition(
    form: FormDefinition,
    dynamic_instances: Sequence[Section],
    question_id: str,
    value: str,
    prompt: str = DEFAULT_REPETITION_PROMPT,
) -> tuple[Section, ...]:
    """
    Apply one answer change to the instance set.

    Returns the new instance tuple; the same contents when the answer
    doesn't touch a repetition trigger.
    """
    instances = tuple(dynamic_instances)
    owner = find_owner(working_sections(form, instances), question_id)
    if owner is None:
        return instances

    section, question = owner
    if not is_repetition_trigger(question, prompt):
        return instances

    group = section.group_key
    current = section.index

    if wants_repeat(question, value):
        if not section.is_repeatable:
            return instances

        next_index = current + 1
        if any(s.group_key == group and s.index == next_index for s in (*form.sections, *instances)):
            return instances  # Already there

        template = find_template(form, group)
        if template is None:
            return instances
        if template.max_repetitions is not None and next_index > template.max_repetitions:
            return instances

        return instances + (clone_section(template, next_index),)

    if wants_stop(question, value):
        return tuple(
            s for s in instances
            if not (s.group_key == group and s.index > current)
        )

    return instances
