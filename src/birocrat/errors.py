"""Application-level exception types for Birocrat."""

from __future__ import annotations

from typing import Any


class BirocratError(Exception):
    """Base exception for Birocrat."""


class ConfigurationError(BirocratError):
    """Raised when form parameters or settings are invalid."""


class ScriptLoadError(BirocratError):
    """Raised when a driver script cannot be loaded."""


class FormError(BirocratError):
    """Base exception for errors raised while operating a form session."""


class DriverProtocolViolation(FormError):
    """Raised when a driver breaks the call contract. Fatal to the session."""


class DriverRuntimeError(DriverProtocolViolation):
    """Raised when the driver itself failed while being invoked."""


class SessionFailed(FormError):
    """Raised when operating a session that already suffered a protocol violation."""


class SessionMisuseError(FormError):
    """Base exception for programmer errors at the integration boundary."""


class AnswerKindMismatch(SessionMisuseError):
    """Raised when an answer does not have the shape its question requires."""

    def __init__(self, question_id: Any, expected: str) -> None:
        super().__init__(f"invalid answer for question {question_id!r} (expected {expected})")
        self.question_id = question_id
        self.expected = expected


class InvalidRewindTarget(SessionMisuseError):
    """Raised when a rewind targets a step that does not exist."""


class SessionAlreadyDone(SessionMisuseError):
    """Raised when mutating a session that has completed."""

    def __init__(self) -> None:
        super().__init__("form session is already done")


class SessionAlreadyStarted(SessionMisuseError):
    """Raised when starting a session twice."""

    def __init__(self) -> None:
        super().__init__("form session was already started")


class SessionNotStarted(SessionMisuseError):
    """Raised when operating a session before it was started."""

    def __init__(self) -> None:
        super().__init__("form session has not been started")


class SessionNotDone(SessionMisuseError):
    """Raised when reading the result of a session that has not completed."""

    def __init__(self) -> None:
        super().__init__("form session is not done yet")
