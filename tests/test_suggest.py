import pytest

from suggest import Suggestion, similarity


def test_similarity_bounds() -> None:
    assert similarity("build", "build") == 1.0
    assert similarity("abc", "xyz") == 0.0
    assert 0.0 < similarity("buld", "build") < 1.0


def test_similarity_is_symmetric() -> None:
    assert similarity("buld", "build") == similarity("build", "buld")


def test_similarity_ignores_case() -> None:
    assert similarity("BUILD", "build") == 1.0


def test_single_characters() -> None:
    assert similarity("a", "b") == 0.0
    assert similarity("a", "a") == 1.0


def test_buld_suggests_build() -> None:
    s = Suggestion("buld", ["build", "fmt", "version"])
    assert similarity("buld", "build") >= 0.2
    assert s.names() == ["build"]
    assert s.say("v: unknown command `buld`") == (
        "v: unknown command `buld`\nDid you mean `build`?"
    )


def test_best_match_first() -> None:
    s = Suggestion("buld", ["bump", "build", "bug", "build-tools"])
    assert s.names()[0] == "build"


def test_order_does_not_depend_on_input_order() -> None:
    names = ["test", "test-all", "test-fmt", "test-self", "tests"]
    a = Suggestion("tset", names).names()
    b = Suggestion("tset", list(reversed(names))).names()
    assert a == b


def test_threshold() -> None:
    assert Suggestion("buld", ["build"], threshold=0.9).names() == []
    assert Suggestion("buld", ["build"], threshold=0.5).names() == ["build"]


def test_no_match_returns_message_only() -> None:
    assert Suggestion("qqq", ["build"]).say("nope") == "nope"


def test_many_matches_are_listed() -> None:
    text = Suggestion("test", ["test-all", "test-fmt", "test-self"]).say("msg")
    lines = text.splitlines()
    assert lines[0] == "msg"
    assert lines[1] == "Did you mean one of:"
    assert len(lines) == 5


@pytest.mark.parametrize("wrong", ["", "x"])
def test_degenerate_input(wrong) -> None:
    assert Suggestion(wrong, ["build"]).names() == []
