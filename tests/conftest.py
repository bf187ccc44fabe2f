from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

EXAMPLES_DIR = Path(__file__).resolve().parents[1] / "examples"

CUISINES = ["Indian", "Korean", "Japanese", "Chinese", "Italian"]
SPICE_LEVELS = ["Mild", "Medium", "Hot", "Very Hot", "Extreme Hot"]


def worked_example(state: Any, answer: Any) -> Any:
    """Name, age, cuisine and (for Indian or Korean) spice levels."""
    if state is None:
        return ("question", {"id": 1, "type": "simple", "text": "What is your name?"}, {"step": 1})

    if state["step"] == 1:
        state["name"] = answer.text
        state["step"] = 2
        return ("question", {"id": 2, "type": "simple", "text": f"How old are you, {state['name']}?"}, state)
    if state["step"] == 2:
        if not answer.text.isdigit():
            return ("error", "Please enter a valid number.")
        state["age"] = int(answer.text)
        state["step"] = 3
        return (
            "question",
            {"id": 3, "type": "select", "text": "What is your favourite type of cuisine?", "options": CUISINES},
            state,
        )
    if state["step"] == 3:
        state["favourite_cuisine"] = answer.options[0]
        if state["favourite_cuisine"] not in ("Indian", "Korean"):
            return ("done", {key: state[key] for key in ("name", "age", "favourite_cuisine")})
        state["step"] = 4
        return (
            "question",
            {
                "id": 4,
                "type": "select",
                "text": "What levels of spice can you tolerate?",
                "options": SPICE_LEVELS,
                "multiple": True,
            },
            state,
        )
    state["spice_levels"] = list(answer.options)
    return ("done", {key: state[key] for key in ("name", "age", "favourite_cuisine", "spice_levels")})


class RecordingDriver:
    """Wraps a driver and records every call made to it."""

    def __init__(self, driver: Any) -> None:
        self._driver = driver
        self.calls: list[tuple[Any, Any]] = []

    def __call__(self, state: Any, answer: Any) -> Any:
        self.calls.append((state, answer))
        return self._driver(state, answer)


@pytest.fixture
def driver() -> RecordingDriver:
    return RecordingDriver(worked_example)


@pytest.fixture
def examples_dir() -> Path:
    return EXAMPLES_DIR
