"""Ordered history of the questions asked in a form session."""

from __future__ import annotations

import copy
from collections.abc import Iterator
from dataclasses import dataclass, replace
from typing import Any

from birocrat.errors import InvalidRewindTarget
from birocrat.form.types import Answer, Question, QuestionId


@dataclass(frozen=True)
class Step:
    """One question in the history.

    ``state_before`` is the driver state the question was asked in. Once the
    question is answered the step also carries the answer and the state the
    driver returned with its next question (``None`` if the answer completed
    the form).
    """

    question: Question
    state_before: Any
    answer: Answer | None = None
    state_after: Any = None

    @property
    def question_id(self) -> QuestionId:
        return self.question.id

    @property
    def is_pending(self) -> bool:
        return self.answer is None


class SessionHistory:
    """Append-only list of steps that can be cut back to an earlier step.

    At most one step is pending, and it is always the last one. States are
    deep copied on the way in and on the way out to the driver, so a driver
    that mutates the state it is handed cannot alter a recorded step.
    """

    def __init__(self) -> None:
        self._steps: list[Step] = []

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self) -> Iterator[Step]:
        return iter(tuple(self._steps))

    def __getitem__(self, position: int) -> Step:
        return self._steps[position]

    @property
    def steps(self) -> tuple[Step, ...]:
        return tuple(self._steps)

    @property
    def pending(self) -> Step | None:
        if self._steps and self._steps[-1].is_pending:
            return self._steps[-1]
        return None

    def append_pending(self, question: Question, state_before: Any) -> Step:
        if self.pending is not None:
            raise ValueError("history already has a pending step")
        step = Step(question=question, state_before=copy.deepcopy(state_before))
        self._steps.append(step)
        return step

    def answer_pending(self, answer: Answer, state_after: Any = None) -> Step:
        pending = self.pending
        if pending is None:
            raise ValueError("history has no pending step to answer")
        answered = replace(pending, answer=answer, state_after=copy.deepcopy(state_after))
        self._steps[-1] = answered
        return answered

    def state_for_driver(self) -> Any:
        """A private copy of the pending step's state, to hand to the driver."""
        pending = self.pending
        if pending is None:
            raise ValueError("history has no pending step")
        return copy.deepcopy(pending.state_before)

    def truncate(self, position: int) -> Step:
        """Drop every step after ``position`` and make that step pending again."""
        if not 0 <= position < len(self._steps):
            raise InvalidRewindTarget(
                f"no step at position {position} (history has {len(self._steps)} steps)"
            )
        del self._steps[position + 1 :]
        target = self._steps[position]
        if not target.is_pending:
            target = replace(target, answer=None, state_after=None)
            self._steps[position] = target
        return target

    def index_of(self, question_id: QuestionId) -> int | None:
        """Position of the first step holding ``question_id``."""
        for position, step in enumerate(self._steps):
            if step.question_id == question_id:
                return position
        return None

    def answers(self) -> list[tuple[QuestionId, Answer]]:
        return [(step.question_id, step.answer) for step in self._steps if step.answer is not None]
