from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from birocrat.errors import DriverRuntimeError, ScriptLoadError
from birocrat.form.session import FormSession
from birocrat.form.types import DonePoll, ErrorPoll, QuestionPoll, Selected, Text
from birocrat.runtime.script import ScriptDriver, driver_main, load_driver_script


def _write_script(path: Path, lines: list[str]) -> Path:
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def test_each_load_gets_its_own_module(tmp_path: Path) -> None:
    script = _write_script(
        tmp_path / "counter.py",
        [
            "CALLS = []",
            "def main(state, answer, params):",
            "    CALLS.append(1)",
            "    return ('done', len(CALLS))",
        ],
    )

    first = load_driver_script(script)
    second = load_driver_script(script)

    assert first is not second
    assert first.__name__ != second.__name__
    assert ScriptDriver(driver_main(first))(None, None) == ("done", 1)
    assert ScriptDriver(driver_main(first))(None, None) == ("done", 2)
    assert ScriptDriver(driver_main(second))(None, None) == ("done", 1)


def test_missing_script_and_missing_main(tmp_path: Path) -> None:
    with pytest.raises(ScriptLoadError, match="not found"):
        load_driver_script(tmp_path / "nope.py")

    script = _write_script(tmp_path / "no_main.py", ["MAIN = 1"])
    with pytest.raises(ScriptLoadError, match=r"main\(\)"):
        ScriptDriver.from_file(script)


def test_script_that_fails_to_execute(tmp_path: Path) -> None:
    script = _write_script(tmp_path / "broken.py", ["raise RuntimeError('boom')"])

    with pytest.raises(ScriptLoadError, match="boom") as exc_info:
        load_driver_script(script)
    assert isinstance(exc_info.value.__cause__, RuntimeError)


def test_params_are_read_only_and_fresh_per_call() -> None:
    seen: list[Any] = []

    def main(state: Any, answer: Any, params: Any) -> Any:
        seen.append(params)
        params["tags"].append("mutated")
        with pytest.raises(TypeError):
            params["id"] = 99
        return ("done", dict(params))

    source = {"id": 37, "tags": ["a"]}
    driver = ScriptDriver(main, source)
    source["id"] = 0

    driver(None, None)
    driver(None, None)

    assert seen[0]["id"] == 37
    assert seen[1]["tags"] == ["a", "mutated"]
    assert driver.params["tags"] == ["a"]


def test_script_exception_becomes_driver_runtime_error(tmp_path: Path) -> None:
    script = _write_script(
        tmp_path / "raises.py",
        [
            "def main(state, answer, params):",
            "    return params['missing']",
        ],
    )
    session = FormSession(ScriptDriver.from_file(script))

    with pytest.raises(DriverRuntimeError):
        session.start()
    assert session.is_failed


def test_basic_form_example(examples_dir: Path) -> None:
    session = FormSession(ScriptDriver.from_file(examples_dir / "basic_form.py", {"id": 37}))

    poll = session.start()
    assert isinstance(poll, QuestionPoll)
    assert poll.question.prompt == "What is your name, user 37?"

    poll = session.progress_with_answer(Text("Alice"))
    assert isinstance(poll, QuestionPoll)
    assert poll.question.prompt == "How old are you, Alice?"
    assert poll.question.default == "30"

    assert session.progress_with_answer(Text("twenty-five")) == ErrorPoll("Please enter a valid number.")
    session.progress_with_answer(Text("25"))

    assert isinstance(session.progress_with_answer(Selected(["Italian"])), DonePoll)

    fresh = FormSession(ScriptDriver.from_file(examples_dir / "basic_form.py", {"id": 37}))
    fresh.start()
    fresh.progress_with_answer(Text("Alice"))
    fresh.progress_with_answer(Text("25"))
    fresh.progress_with_answer(Selected(["Indian"]))
    poll = fresh.progress_with_answer(Selected(["Mild", "Medium"]))

    assert poll == DonePoll(
        {"name": "Alice", "age": 25, "favourite_cuisine": "Indian", "spice_levels": ["Mild", "Medium"]}
    )


def test_dependent_questions_example(examples_dir: Path) -> None:
    params = json.loads((examples_dir / "dependent_questions.json").read_text(encoding="utf-8"))
    session = FormSession(ScriptDriver.from_file(examples_dir / "dependent_questions.py", params))

    poll = session.start()
    assert isinstance(poll, QuestionPoll)
    assert poll.question.id == "meditated"
    assert set(poll.question.options) == {"Yes", "No"}

    poll = session.progress_with_answer(Selected(["Yes"]))
    assert isinstance(poll, QuestionPoll)
    assert poll.question.id == "meditation_minutes"

    assert session.progress_with_answer(Text("a while")) == ErrorPoll("Please enter a number")
    poll = session.progress_with_answer(Text("20"))
    assert isinstance(poll, QuestionPoll)
    assert poll.question.id == "meditation_quality"

    assert session.progress_with_answer(Text("11")) == ErrorPoll("Please enter a number between 1 and 10")
    poll = session.progress_with_answer(Text("7"))
    assert isinstance(poll, QuestionPoll)
    assert poll.question.id == "mood"
    assert poll.question.default == "5"

    session.progress_with_answer(Text("6"))
    poll = session.progress_with_answer(Selected(["Work", "Reading"]))
    assert isinstance(poll, QuestionPoll)
    assert poll.question.id == "notes"

    poll = session.progress_with_answer(Text("Slept well.\nBusy day."))
    assert poll == DonePoll(
        {
            "meditated": "Yes",
            "meditation_minutes": "20",
            "meditation_quality": "7",
            "mood": "6",
            "activities": ["Work", "Reading"],
            "notes": "Slept well.\nBusy day.",
        }
    )

    session_no = FormSession(ScriptDriver.from_file(examples_dir / "dependent_questions.py", params))
    session_no.start()
    poll = session_no.progress_with_answer(Selected(["No"]))
    assert isinstance(poll, QuestionPoll)
    assert poll.question.id == "mood"
