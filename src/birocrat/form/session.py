"""Form session engine."""

from __future__ import annotations

import contextlib
import uuid
from collections.abc import Generator
from contextvars import ContextVar
from typing import Any

from loguru import logger

from birocrat.errors import (
    AnswerKindMismatch,
    DriverProtocolViolation,
    InvalidRewindTarget,
    SessionAlreadyDone,
    SessionAlreadyStarted,
    SessionFailed,
    SessionNotDone,
    SessionNotStarted,
)
from birocrat.form.cache import AnswerCache
from birocrat.form.history import SessionHistory, Step
from birocrat.form.protocol import Driver, call_driver
from birocrat.form.types import (
    Answer,
    DoneOutcome,
    DonePoll,
    ErrorOutcome,
    ErrorPoll,
    Outcome,
    Poll,
    Question,
    QuestionId,
    QuestionKind,
    QuestionPoll,
    Selected,
    Text,
)

_session_context: ContextVar[str] = ContextVar("form_session")


def current_session() -> str:
    """Get the id of the session currently operating, for log records."""
    return _session_context.get("-")


def check_answer_kind(question: Question, answer: Answer) -> None:
    """Make sure ``answer`` has the shape ``question`` requires.

    Option membership is left to the driver.
    """
    if question.kind in (QuestionKind.SIMPLE, QuestionKind.MULTILINE):
        if not isinstance(answer, Text):
            raise AnswerKindMismatch(question.id, f"text for {question.kind.value} question")
        return

    if not isinstance(answer, Selected):
        raise AnswerKindMismatch(question.id, "selected options for select question")
    if question.multiple:
        if not answer.options:
            raise AnswerKindMismatch(question.id, "at least one option for multiple select question")
    elif len(answer.options) != 1:
        raise AnswerKindMismatch(question.id, "exactly one option for single select question")


class FormSession:
    """One run through a form, driven by a pure driver function.

    The session records every question asked along with the driver state it
    was asked in, so any earlier question can be answered again with
    ``rewind_to``. Answers given are remembered by question id and offered
    back whenever a question with the same id is pending.
    """

    def __init__(self, driver: Driver, *, session_id: str | None = None) -> None:
        self._driver = driver
        self.session_id = session_id or uuid.uuid4().hex[:8]
        self._history = SessionHistory()
        self._cache = AnswerCache()
        self._started = False
        self._done = False
        self._result: Any = None
        self._failure: DriverProtocolViolation | None = None

    @property
    def history(self) -> tuple[Step, ...]:
        return self._history.steps

    @property
    def is_started(self) -> bool:
        return self._started

    @property
    def is_done(self) -> bool:
        return self._done

    @property
    def is_failed(self) -> bool:
        return self._failure is not None

    @property
    def result(self) -> Any:
        if not self._done:
            raise SessionNotDone()
        return self._result

    def answers(self) -> list[tuple[QuestionId, Answer]]:
        """Question ids and answers of the answered steps, in the order asked."""
        return self._history.answers()

    def suggested_answer_for(self, question_id: QuestionId) -> Answer | None:
        return self._cache.get(question_id)

    def start(self) -> Poll:
        """Ask the driver for the first question."""
        with self._activate():
            self._ensure_usable()
            if self._started:
                raise SessionAlreadyStarted()
            self._started = True

            outcome = self._call(None, None)
            if isinstance(outcome, ErrorOutcome):
                self._failure = DriverProtocolViolation(
                    f"first call of driver failed with no input: {outcome.message!r}"
                )
                logger.warning("Driver rejected its first call: {}", outcome.message)
                raise self._failure
            if isinstance(outcome, DoneOutcome):
                logger.info("Form completed without asking a question")
                return self._complete(outcome.result)

            self._history.append_pending(outcome.question, outcome.state)
            logger.debug("Started form with question {!r}", outcome.question.id)
            return QuestionPoll(outcome.question, self._cache.get(outcome.question.id))

    def current_question(self) -> Question:
        with self._activate():
            return self._require_pending().question

    def progress_with_answer(self, answer: Answer) -> Poll:
        """Answer the pending question and ask the driver what comes next.

        A rejected answer leaves the session exactly as it was, with the same
        question still pending.
        """
        with self._activate():
            pending = self._require_pending()
            check_answer_kind(pending.question, answer)

            outcome = self._call(self._history.state_for_driver(), answer)
            if isinstance(outcome, ErrorOutcome):
                logger.debug("Driver rejected answer to question {!r}: {}", pending.question_id, outcome.message)
                return ErrorPoll(outcome.message)

            if isinstance(outcome, DoneOutcome):
                self._record(answer, None)
                return self._complete(outcome.result)

            self._record(answer, outcome.state)
            self._history.append_pending(outcome.question, outcome.state)
            logger.debug("Asking question {!r} at step {}", outcome.question.id, len(self._history) - 1)
            return QuestionPoll(outcome.question, self._cache.get(outcome.question.id))

    def rewind_to(self, position: int) -> Question:
        """Go back to the step at ``position`` so it can be answered again.

        Every later step is discarded. Cached answers are kept, so they are
        still suggested if the same questions come up again.
        """
        with self._activate():
            self._ensure_usable()
            if not self._started:
                raise SessionNotStarted()
            if self._done:
                if not len(self._history):
                    raise InvalidRewindTarget("form completed without asking any question")
                raise SessionAlreadyDone()

            dropped = len(self._history) - position - 1
            step = self._history.truncate(position)
            logger.debug("Rewound to step {} (question {!r}), dropped {} steps", position, step.question_id, dropped)
            return step.question

    def rewind_to_question(self, question_id: QuestionId) -> Question:
        """Rewind to the first step that asked ``question_id``."""
        position = self._history.index_of(question_id)
        if position is None:
            raise InvalidRewindTarget(f"question {question_id!r} is not in the history")
        return self.rewind_to(position)

    def _record(self, answer: Answer, state_after: Any) -> None:
        step = self._history.answer_pending(answer, state_after)
        previous = self._cache.record(step.question_id, answer)
        if previous is not None and previous != answer:
            logger.debug("Cached answer for question {!r} replaced", step.question_id)
        else:
            logger.debug("Cached answer for question {!r}", step.question_id)

    def _complete(self, result: Any) -> DonePoll:
        self._done = True
        self._result = result
        logger.debug("Form done after {} steps", len(self._history))
        return DonePoll(result)

    def _call(self, state: Any, answer: Answer | None) -> Outcome:
        try:
            return call_driver(self._driver, state, answer)
        except DriverProtocolViolation as exc:
            self._failure = exc
            logger.warning("Session failed on driver protocol violation: {}", exc)
            raise

    def _require_pending(self) -> Step:
        self._ensure_usable()
        if not self._started:
            raise SessionNotStarted()
        if self._done:
            raise SessionAlreadyDone()
        pending = self._history.pending
        if pending is None:
            raise SessionFailed("form session has no pending question")
        return pending

    def _ensure_usable(self) -> None:
        if self._failure is not None:
            raise SessionFailed(f"form session is unusable after a driver protocol violation: {self._failure}")

    @contextlib.contextmanager
    def _activate(self) -> Generator[None, None, None]:
        token = _session_context.set(self.session_id)
        try:
            yield
        finally:
            _session_context.reset(token)
