"""
AuditSession - one auditor working through one form.

Owns the answer map, remarks and repetition instances for a single audit.
Never share a session between audits. Everything handed out is a copy, so
resolver and evaluator calls see an immutable snapshot.
"""

from typing import Mapping, Optional, Sequence

from config import EngineSettings, get_settings
from models import (
    FormDefinition,
    Section,
    Question,
    ScoredAnswer,
    ScoreResult,
    AnsweredQuestion,
    SectionAnswers,
    AuditReport,
)
from .errors import MissingRequiredAnswers
from .repetition import apply_repetition
from .scoring import live_score
from .visibility import VisibleForm, resolve_visible


def _is_blank(value: Optional[str]) -> bool:
    return value is None or value.strip() == ""


class AuditSession:
    """
    In-progress audit.

    Typical flow:
        session = AuditSession(form)
        session.set_answer("q1", "Yes")
        visible = session.resolve()
        report = session.submit("AUD-1", agent="Jane", auditor="sam")
    """

    def __init__(self, form: FormDefinition, settings: Optional[EngineSettings] = None):
        self.form = form
        self.settings = settings or get_settings()
        self._answers: dict[str, str] = {}
        self._remarks: dict[str, str] = {}
        self._instances: tuple[Section, ...] = ()

    @classmethod
    def restore(
        cls,
        form: FormDefinition,
        answers: Mapping[str, str],
        dynamic_instances: Sequence[Section] = (),
        remarks: Optional[Mapping[str, str]] = None,
        settings: Optional[EngineSettings] = None,
    ) -> "AuditSession":
        """Rebuild a session from client-held state without replaying events."""
        session = cls(form, settings)
        session._answers = {k: ("" if v is None else str(v)) for k, v in answers.items()}
        session._remarks = dict(remarks or {})
        session._instances = tuple(dynamic_instances)
        return session

    # === State snapshots ===

    @property
    def answers(self) -> dict[str, str]:
        return dict(self._answers)

    @property
    def remarks(self) -> dict[str, str]:
        return dict(self._remarks)

    @property
    def dynamic_instances(self) -> tuple[Section, ...]:
        return self._instances

    # === Transitions ===

    def set_answer(self, question_id: str, value: str) -> None:
        """
        Record an answer, then apply the repetition lifecycle.

        Answers for questions that later become hidden are kept; they're
        just not shown or scored.
        """
        value = "" if value is None else str(value)
        self._answers[question_id] = value

        before = self._instances
        after = apply_repetition(
            self.form, before, question_id, value,
            prompt=self.settings.repetition_prompt,
        )
        if after == before:
            return

        added = [s for s in after if s not in before]
        removed = [s for s in before if s not in after]
        for s in added:
            print(f"[REPEAT] Created {s.name}")
        if removed:
            names = ", ".join(s.name for s in removed)
            print(f"[REPEAT] Removed {len(removed)} instance(s): {names}")
        self._instances = after

    def set_remark(self, question_id: str, text: str) -> None:
        self._remarks[question_id] = text or ""

    # === Queries ===

    def resolve(self) -> VisibleForm:
        return resolve_visible(self.form, self._instances, self.answers)

    def scored_answers(self) -> list[ScoredAnswer]:
        """Evaluator input - visible questions only."""
        answers = self._answers
        return [
            ScoredAnswer(
                question_id=q.id,
                question_text=q.text,
                answer=answers.get(q.id, ""),
                is_fatal=q.is_fatal,
                weightage=q.weightage,
            )
            for q in self.resolve().visible_questions()
        ]

    def score(self) -> ScoreResult:
        return live_score(self.scored_answers())

    def missing_required(self) -> list[Question]:
        """Visible mandatory questions left empty."""
        return [
            q for q in self.resolve().visible_questions()
            if q.mandatory and _is_blank(self._answers.get(q.id))
        ]

    # === Submission ===

    def submit(self, audit_id: str, agent: str = "", auditor: str = "") -> AuditReport:
        """
        Build the final report.

        Raises MissingRequiredAnswers if any visible mandatory question is
        empty. Answers and score come from the same snapshot.
        """
        missing = self.missing_required()
        if missing:
            raise MissingRequiredAnswers(missing)

        visible = self.resolve()
        answers = self.answers
        remarks = self.remarks

        section_answers = [
            SectionAnswers(
                section_id=section.id,
                section_name=section.name,
                answers=[
                    AnsweredQuestion(
                        question_id=q.id,
                        question_text=q.text,
                        answer=answers.get(q.id, ""),
                        remarks=remarks.get(q.id, ""),
                        is_fatal=q.is_fatal,
                        weightage=q.weightage,
                        question_type=q.type,
                        options=q.options,
                    )
                    for q in visible.visible_questions_by_section.get(section.id, [])
                ],
            )
            for section in visible.visible_sections
        ]

        result = live_score(a.to_scored() for s in section_answers for a in s.answers)

        return AuditReport(
            audit_id=audit_id,
            form_id=self.form.id,
            form_name=self.form.name,
            agent=agent,
            auditor=auditor,
            section_answers=section_answers,
            score=result.score,
            max_score=self.settings.max_score,
            has_fatal=result.has_fatal,
        )
