import pytest

from birocrat.errors import InvalidRewindTarget
from birocrat.form.history import SessionHistory
from birocrat.form.types import Question, Text


def _question(question_id: int) -> Question:
    return Question.model_validate({"id": question_id, "type": "simple", "text": f"Question {question_id}?"})


def _history_with_answers(count: int) -> SessionHistory:
    history = SessionHistory()
    for index in range(count):
        history.append_pending(_question(index + 1), {"step": index})
        history.answer_pending(Text(f"answer {index + 1}"), {"step": index + 1})
    history.append_pending(_question(count + 1), {"step": count})
    return history


def test_only_the_last_step_is_pending() -> None:
    history = _history_with_answers(2)

    assert len(history) == 3
    assert [step.is_pending for step in history] == [False, False, True]
    assert history.pending is history[2]
    assert history.answers() == [(1, Text("answer 1")), (2, Text("answer 2"))]


def test_append_requires_no_pending_step() -> None:
    history = SessionHistory()
    history.append_pending(_question(1), None)

    with pytest.raises(ValueError, match="pending"):
        history.append_pending(_question(2), None)


def test_answer_requires_pending_step() -> None:
    history = SessionHistory()

    with pytest.raises(ValueError, match="no pending step"):
        history.answer_pending(Text("x"))


def test_answering_replaces_the_step_instead_of_mutating_it() -> None:
    history = SessionHistory()
    pending = history.append_pending(_question(1), {"step": 0})

    answered = history.answer_pending(Text("Alice"), {"step": 1})

    assert pending.answer is None
    assert answered.answer == Text("Alice")
    assert answered.state_after == {"step": 1}
    assert history[0] is answered


def test_truncate_keeps_target_and_clears_its_answer() -> None:
    history = _history_with_answers(3)

    target = history.truncate(1)

    assert len(history) == 2
    assert target.is_pending
    assert target.state_before == {"step": 1}
    assert target.state_after is None
    assert history.pending is target
    assert history.answers() == [(1, Text("answer 1"))]


def test_truncate_to_pending_step_is_a_no_op() -> None:
    history = _history_with_answers(2)
    pending = history.pending

    assert history.truncate(2) is pending
    assert len(history) == 3


@pytest.mark.parametrize("position", [-1, 3, 10])
def test_truncate_out_of_range(position: int) -> None:
    history = _history_with_answers(2)

    with pytest.raises(InvalidRewindTarget):
        history.truncate(position)
    assert len(history) == 3


def test_index_of_uses_first_occurrence() -> None:
    history = SessionHistory()
    history.append_pending(_question(5), None)
    history.answer_pending(Text("first"), None)
    history.append_pending(_question(5), None)

    assert history.index_of(5) == 0
    assert history.index_of(6) is None


def test_states_are_isolated_from_callers() -> None:
    history = SessionHistory()
    state = {"names": ["Alice"]}
    history.append_pending(_question(1), state)

    state["names"].append("Bob")
    handed_out = history.state_for_driver()
    handed_out["names"].append("Carol")

    assert history[0].state_before == {"names": ["Alice"]}
