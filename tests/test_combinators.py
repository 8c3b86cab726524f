import pytest
from hypothesis import given, strategies as st

from pympc.Errors import GrammarError
from pympc.Folds import fold_list, release_str, strfold
from pympc.Parser import Cursor, Failure, Success
from pympc.Prim import parse, pure, run_parser, string
from pympc.Combinators import and_, apply, count, expect, many, many1, maybe, or_


def run(parser, input_str):
    return run_parser(parser, input_str)


def seq(*texts):
    return and_(strfold, *[(string(t), release_str) for t in texts])


# --- Alternation ---

def test_or_first_match_wins():
    result = parse(or_(string("a"), string("ab")), "ab")
    assert result == Success("a", Cursor("ab", 1))


def test_or_tries_each_alternative_from_the_start():
    p = or_(seq("a", "b"), seq("a", "c"))
    assert run(p, "ac")[0] == "ac"


def test_or_reports_furthest_failure_and_all_expectations():
    p = or_(seq("ab", "c"), string("x"))
    result = parse(p, "abd")
    assert result == Failure(frozenset(["c", "x"]), 2)


def test_pipe_operator():
    p = string("a") | string("b") | string("c")
    assert run(p, "c")[0] == "c"
    res, err = run(p, "d")
    assert res is None
    assert err.expected == frozenset(["a", "b", "c"])


def test_or_rejects_empty_and_non_parsers():
    with pytest.raises(GrammarError):
        or_()
    with pytest.raises(GrammarError):
        or_(string("a"), "b")


def test_pipe_rejects_non_parsers_when_built():
    with pytest.raises(GrammarError):
        string("a") | "b"
    with pytest.raises(GrammarError):
        string("a") | None


# --- Sequence ---

def test_and_folds_values_in_order():
    result = parse(seq("a", "b"), "abc")
    assert result == Success("ab", Cursor("abc", 2))


def test_and_passes_value_list_to_fold():
    p = and_(fold_list, (string("x"), None), (pure(1), None), (string("y"), None))
    assert run(p, "xy")[0] == ["x", 1, "y"]


def test_and_returns_failing_child_failure_verbatim():
    result = parse(seq("a", "b"), "ax")
    assert result == Failure(frozenset(["b"]), 1)


def test_and_backtracks_as_a_unit():
    p = or_(seq("a", "b"), pure("none"))
    assert parse(p, "ax") == Success("none", Cursor("ax", 0))


@pytest.mark.parametrize("args", [
    (None, (string("a"), None)),
    (strfold,),
    (strfold, string("a")),
    (strfold, (string("a"),)),
    (strfold, (string("a"), "not callable")),
    (strfold, ("a", None)),
])
def test_and_construction_errors(args):
    with pytest.raises(GrammarError):
        and_(*args)


# --- Repetition ---

def test_many_zero_matches():
    result = parse(many(strfold, string("x")), "yyy")
    assert result == Success("", Cursor("yyy", 0))


def test_many_collects_until_failure():
    result = parse(many(fold_list, string("x")), "xxy")
    assert result == Success(["x", "x"], Cursor("xxy", 2))


def test_many_stops_after_zero_width_iteration():
    calls = []

    def seen(v):
        calls.append(v)
        return v

    result = parse(many(fold_list, string("").map(seen)), "abc")
    assert result == Success([""], Cursor("abc", 0))
    assert len(calls) == 1


def test_many_drops_trailing_partial_match():
    p = many(strfold, seq("ab", "c"))
    assert parse(p, "abcab") == Success("abc", Cursor("abcab", 3))


def test_many_requires_fold():
    with pytest.raises(GrammarError):
        many(None, string("x"))


@given(st.integers(min_value=0, max_value=50))
def test_many_count(n):
    result = parse(many(fold_list, string("a")), "a" * n + "b")
    assert result.value == ["a"] * n
    assert result.cursor.pos == n


def test_many1():
    assert run(many1(fold_list, string("a")), "aab")[0] == ["a", "a"]
    assert parse(many1(fold_list, string("a")), "b") == Failure(frozenset(["a"]), 0)


def test_count():
    assert parse(count(2, fold_list, string("a")), "aaa") == Success(["a", "a"], Cursor("aaa", 2))
    assert parse(count(2, fold_list, string("a")), "ab") == Failure(frozenset(["a"]), 1)
    assert parse(count(0, fold_list, string("a")), "b") == Success([], Cursor("b", 0))


def test_count_allows_zero_width_parser():
    assert run(count(3, fold_list, pure("z")), "")[0] == ["z", "z", "z"]


def test_count_rejects_negative():
    with pytest.raises(GrammarError):
        count(-1, fold_list, string("a"))


# --- maybe / apply / expect ---

def test_maybe():
    assert parse(maybe(string("a")), "b") == Success(None, Cursor("b", 0))
    assert run(maybe(string("a"), ""), "a")[0] == "a"


def test_apply_and_map():
    assert run(apply(string("42"), int), "42")[0] == 42
    assert run(string("7").map(int), "7")[0] == 7


def test_apply_requires_function():
    with pytest.raises(GrammarError):
        apply(string("a"), None)


def test_expect_relabels_failure_at_start():
    digit = expect(or_(string("0"), string("1")), "a digit")
    assert parse(digit, "x") == Failure(frozenset(["a digit"]), 0)
    assert parse(string("a").label("letter a"), "b") == Failure(frozenset(["letter a"]), 0)


def test_expect_keeps_failure_past_start():
    p = expect(seq("a", "b"), "ab pair")
    assert parse(p, "ax") == Failure(frozenset(["b"]), 1)
