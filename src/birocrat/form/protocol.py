"""Driver call contract and outcome parsing."""

from __future__ import annotations

import copy
import json
from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from loguru import logger
from pydantic import ValidationError

from birocrat.errors import DriverProtocolViolation, DriverRuntimeError
from birocrat.form.types import (
    Answer,
    DoneOutcome,
    ErrorOutcome,
    Outcome,
    Question,
    QuestionOutcome,
)

TAG_QUESTION = "question"
TAG_ERROR = "error"
TAG_DONE = "done"
OUTCOME_TAGS = (TAG_QUESTION, TAG_ERROR, TAG_DONE)


class Driver(Protocol):
    """A pure decision function producing the next outcome of a form.

    Called with ``(None, None)`` to get the first question, then with the state
    stored for the pending question and the answer given to it. Identical
    arguments must always yield identical outcomes.
    """

    def __call__(self, state: Any, answer: Answer | None) -> Any: ...


def call_driver(driver: Driver, state: Any, answer: Answer | None) -> Outcome:
    """Invoke a driver and parse what it returned."""
    try:
        raw = driver(state, answer)
    except Exception as exc:
        logger.warning("Driver raised {}: {}", type(exc).__name__, exc)
        raise DriverRuntimeError(f"failed to run driver function: {exc}") from exc
    return parse_outcome(raw)


def parse_outcome(raw: Any) -> Outcome:
    """Normalize a driver return value into an outcome.

    Outcome objects are validated like their tagged forms. Otherwise the value
    must be a tagged sequence: ``("question", question, state)``,
    ``("error", message)`` or ``("done", result)``. Question states are copied
    here so the driver keeps no handle on what the session stores.
    """
    if isinstance(raw, QuestionOutcome):
        return QuestionOutcome(parse_question(raw.question), snapshot_state(raw.state))
    if isinstance(raw, ErrorOutcome):
        return ErrorOutcome(parse_error_message(raw.message))
    if isinstance(raw, DoneOutcome):
        return DoneOutcome(normalize_result(raw.result))

    if isinstance(raw, str | bytes) or not isinstance(raw, Sequence) or not raw:
        raise DriverProtocolViolation(
            "received invalid return value from driver (expected sequence with status string and data)"
        )

    tag = raw[0]
    if tag not in OUTCOME_TAGS:
        raise DriverProtocolViolation(
            f"found invalid status from driver: {tag!r} (expected 'question', 'error', or 'done')"
        )
    if len(raw) < 2:
        raise DriverProtocolViolation(f"driver returned status {tag!r} without data")

    if tag == TAG_QUESTION:
        if len(raw) < 3:
            raise DriverProtocolViolation("driver returned a question without a state")
        return QuestionOutcome(parse_question(raw[1]), snapshot_state(raw[2]))
    if tag == TAG_ERROR:
        return ErrorOutcome(parse_error_message(raw[1]))
    return DoneOutcome(normalize_result(raw[1]))


def parse_error_message(message: Any) -> str:
    if not isinstance(message, str):
        raise DriverProtocolViolation("expected string error message when status from driver was 'error'")
    return message


def snapshot_state(state: Any) -> Any:
    """Deep copy a driver state; states that cannot be copied are rejected."""
    try:
        return copy.deepcopy(state)
    except Exception as exc:
        raise DriverProtocolViolation(f"failed to copy driver state: {exc}") from exc


def parse_question(data: Any) -> Question:
    if isinstance(data, Question):
        return data
    if not isinstance(data, Mapping):
        raise DriverProtocolViolation("failed to parse question data from driver as a mapping")
    try:
        return Question.model_validate(dict(data))
    except ValidationError as exc:
        raise DriverProtocolViolation(f"invalid question data from driver: {_first_error(exc)}") from exc


def normalize_result(result: Any) -> Any:
    """Round-trip a completed form's result through JSON."""
    try:
        return json.loads(json.dumps(result))
    except (TypeError, ValueError) as exc:
        raise DriverProtocolViolation(f"failed to serialize result from completed driver: {exc}") from exc


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "question"
    return f"{location}: {first.get('msg', 'invalid value')}"
