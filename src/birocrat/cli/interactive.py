"""Interactive terminal loop for a form session."""

from __future__ import annotations

from typing import Any

from loguru import logger

from birocrat.cli.render import Renderer
from birocrat.config import Settings
from birocrat.form.session import FormSession
from birocrat.form.types import Answer, DonePoll, ErrorPoll, Question, QuestionKind, Selected, Text


class InvalidSelection(ValueError):
    """Raised when select input does not name valid options."""


def parse_selection(question: Question, raw: str) -> Selected:
    """Turn comma separated option numbers (or option names) into an answer."""
    chosen: list[str] = []
    for part in raw.split(","):
        token = part.strip()
        if not token:
            continue
        if token.isdigit():
            index = int(token)
            if not 1 <= index <= len(question.options):
                raise InvalidSelection(f"There is no option {index}.")
            chosen.append(question.options[index - 1])
        elif token in question.options:
            chosen.append(token)
        else:
            raise InvalidSelection(f"'{token}' is not one of the options.")
    if not chosen:
        raise InvalidSelection("Please choose an option.")
    if not question.multiple and len(chosen) > 1:
        raise InvalidSelection("Please choose exactly one option.")
    return Selected(chosen)


def format_selection(question: Question, options: tuple[str, ...]) -> str:
    return ",".join(str(question.options.index(option) + 1) for option in options if option in question.options)


class FormRunner:
    """Presents a form session question by question until it is done."""

    def __init__(self, session: FormSession, renderer: Renderer, settings: Settings) -> None:
        self._session = session
        self._renderer = renderer
        self._settings = settings

    def run(self) -> Any:
        """Drive the session to completion and return the form result."""
        poll = self._session.start()
        while not isinstance(poll, DonePoll):
            if isinstance(poll, ErrorPoll):
                self._renderer.error(poll.message)

            question = self._session.current_question()
            position = len(self._session.history) - 1
            self._renderer.question(position + 1, question)
            raw = self._read(question)

            target = self._back_target(raw, position)
            if target is not None:
                self._session.rewind_to(target)
                logger.info("Went back to question {}", target + 1)
                poll = None
                continue
            if self._is_back_command(raw):
                poll = None
                continue

            try:
                answer = self._to_answer(question, raw)
            except InvalidSelection as exc:
                self._renderer.error(str(exc))
                poll = None
                continue
            poll = self._session.progress_with_answer(answer)

        logger.info("Form completed with {} answers", len(self._session.answers()))
        return poll.result

    def _read(self, question: Question) -> str:
        default = self._default_for(question)
        if question.kind is QuestionKind.MULTILINE:
            return self._renderer.read_multiline(question.prompt, default or "")
        return self._renderer.ask(default)

    def _default_for(self, question: Question) -> str | None:
        suggestion: Answer | None = None
        if self._settings.offer_suggestions:
            suggestion = self._session.suggested_answer_for(question.id)
        if isinstance(suggestion, Text) and not question.is_select:
            return suggestion.text
        if isinstance(suggestion, Selected) and question.is_select:
            return format_selection(question, suggestion.options) or None
        if question.default is None:
            return None
        if question.is_select:
            return format_selection(question, (question.default,))
        return question.default

    def _is_back_command(self, raw: str) -> bool:
        words = raw.strip().split()
        return bool(words) and words[0] == self._settings.back_command

    def _back_target(self, raw: str, position: int) -> int | None:
        """Resolve a back command to a history position, or ``None``."""
        if not self._is_back_command(raw):
            return None
        words = raw.strip().split()
        if len(words) == 1:
            target = position - 1
        elif len(words) == 2 and words[1].isdigit():
            target = int(words[1]) - 1
        else:
            self._renderer.error(f"Usage: {self._settings.back_command} [question number]")
            return None
        if not 0 <= target < position:
            self._renderer.error("There is no earlier question to go back to.")
            return None
        return target

    @staticmethod
    def _to_answer(question: Question, raw: str) -> Answer:
        if question.is_select:
            return parse_selection(question, raw)
        return Text(raw)
