from birocrat.form.cache import AnswerCache
from birocrat.form.types import Selected, Text


def test_record_returns_previous_answer() -> None:
    cache = AnswerCache()

    assert cache.record(1, Text("Alice")) is None
    assert cache.record(1, Text("Bob")) == Text("Alice")
    assert cache.get(1) == Text("Bob")


def test_lookup_of_unknown_id() -> None:
    cache = AnswerCache()
    cache.record("cuisine", Selected(["Indian"]))

    assert cache.get("cuisine") == Selected(["Indian"])
    assert cache.get("spice") is None
