"""Form data model: questions, answers, driver outcomes and polls."""

from __future__ import annotations

from collections.abc import Hashable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

QuestionId = Hashable


class QuestionKind(str, Enum):
    """Kinds of question a driver can ask."""

    SIMPLE = "simple"
    MULTILINE = "multiline"
    SELECT = "select"


class Question(BaseModel):
    """A question asked by a driver.

    Drivers describe questions as mappings with ``id``, ``type`` and ``text``
    keys, plus ``options``/``multiple`` for select questions and an optional
    ``default`` suggestion. Two questions with equal ids are treated as the
    same logical question when suggesting previous answers.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: Any
    kind: QuestionKind = Field(alias="type")
    prompt: str = Field(alias="text")
    options: tuple[str, ...] = ()
    multiple: bool = False
    default: str | None = None

    @field_validator("id")
    @classmethod
    def _id_must_be_hashable(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("question id is required")
        if not isinstance(value, Hashable):
            raise ValueError(f"question id must be hashable, got {type(value).__name__}")
        return value

    @field_validator("multiple", mode="before")
    @classmethod
    def _multiple_must_be_bool(cls, value: Any) -> Any:
        if value is None:
            return False
        if not isinstance(value, bool):
            raise ValueError("'multiple' must be a boolean")
        return value

    @model_validator(mode="after")
    def _check_select_fields(self) -> Question:
        if self.kind is not QuestionKind.SELECT:
            return self
        if not self.options:
            raise ValueError("select question requires a non-empty list of options")
        if self.default is not None and self.default not in self.options:
            raise ValueError(f"default {self.default!r} is not one of the options")
        return self

    @property
    def is_select(self) -> bool:
        return self.kind is QuestionKind.SELECT


@dataclass(frozen=True)
class Text:
    """A textual answer, for simple and multiline questions."""

    text: str


@dataclass(frozen=True)
class Selected:
    """An answer made of chosen options, for select questions."""

    options: tuple[str, ...]

    def __init__(self, options: Sequence[str]) -> None:
        object.__setattr__(self, "options", tuple(options))


Answer = Text | Selected


@dataclass(frozen=True)
class QuestionOutcome:
    """The driver wants another question asked."""

    question: Question
    state: Any


@dataclass(frozen=True)
class ErrorOutcome:
    """The driver rejected the answer it was given."""

    message: str


@dataclass(frozen=True)
class DoneOutcome:
    """The driver completed the form."""

    result: Any


Outcome = QuestionOutcome | ErrorOutcome | DoneOutcome


@dataclass(frozen=True)
class QuestionPoll:
    """Another question is pending, with a previously given answer if there is one."""

    question: Question
    suggestion: Answer | None = None


@dataclass(frozen=True)
class ErrorPoll:
    """The answer was rejected; the same question is still pending."""

    message: str


@dataclass(frozen=True)
class DonePoll:
    """The form is complete."""

    result: Any = field(default=None)


Poll = QuestionPoll | ErrorPoll | DonePoll
