"""Answer cache keyed by question id."""

from __future__ import annotations

from birocrat.form.types import Answer, QuestionId


class AnswerCache:
    """Most recent accepted answer for every question id seen in a session.

    Entries outlive the steps that produced them: rewinding never removes
    anything, so a question asked again on a different branch is still offered
    its previous answer. This is a suggestion index only, never history.
    """

    def __init__(self) -> None:
        self._answers: dict[QuestionId, Answer] = {}

    def record(self, question_id: QuestionId, answer: Answer) -> Answer | None:
        """Store ``answer`` and return the one it replaced, if any."""
        previous = self._answers.get(question_id)
        self._answers[question_id] = answer
        return previous

    def get(self, question_id: QuestionId) -> Answer | None:
        return self._answers.get(question_id)
