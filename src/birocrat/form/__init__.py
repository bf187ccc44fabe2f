"""Form session engine."""

from .cache import AnswerCache
from .history import SessionHistory, Step
from .protocol import Driver, call_driver, parse_outcome
from .session import FormSession, check_answer_kind, current_session
from .types import (
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
    QuestionOutcome,
    QuestionPoll,
    Selected,
    Text,
)

__all__ = [
    "Answer",
    "AnswerCache",
    "DoneOutcome",
    "DonePoll",
    "Driver",
    "ErrorOutcome",
    "ErrorPoll",
    "FormSession",
    "Outcome",
    "Poll",
    "Question",
    "QuestionId",
    "QuestionKind",
    "QuestionOutcome",
    "QuestionPoll",
    "Selected",
    "SessionHistory",
    "Step",
    "Text",
    "call_driver",
    "check_answer_kind",
    "current_session",
    "parse_outcome",
]
