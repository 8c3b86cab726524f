from typing import Any, Callable, Optional, Tuple, TypeVar

from .Errors import GrammarError
from .Folds import FoldOp, ReleaseOp
from .Parser import Alternation, Apply, Expect, Parser, Repetition, Sequence
from .Prim import pure

T = TypeVar('T')
U = TypeVar('U')


def _check_parser(p: Any, where: str) -> None:
    if not isinstance(p, Parser):
        raise GrammarError(f"{where} expects parsers, got {type(p).__name__}")


def _check_fold(fold: Any, where: str) -> None:
    if not callable(fold):
        raise GrammarError(f"{where} requires a fold function")


def _check_release(release: Any, where: str) -> None:
    if release is not None and not callable(release):
        raise GrammarError(f"{where}: release must be callable or None")


# 1. or_: Tries parsers in order until one succeeds
def or_(*parsers: Parser[T]) -> Parser[T]:
    """
    Applies parsers in order from the same position until one succeeds.
    If all fail, reports everything they expected at the furthest position
    any of them reached.
    """
    if not parsers:
        raise GrammarError("or_ needs at least one alternative")
    for p in parsers:
        _check_parser(p, "or_")
    return Parser(Alternation(tuple(parsers)))


# 2. and_: Runs parsers one after another and folds their values
def and_(fold: FoldOp, *pairs: Tuple[Parser[Any], Optional[ReleaseOp]]) -> Parser[Any]:
    """
    Runs each parser in order and passes the list of values to `fold`.
    Each parser comes paired with the release for its value, used when a
    later parser fails and the whole sequence backtracks:

        greet = and_(strfold, (string("Hello "), release_str), (name, release_str))
    """
    _check_fold(fold, "and_")
    if not pairs:
        raise GrammarError("and_ needs at least one parser")
    parsers = []
    releases = []
    for pair in pairs:
        if not (isinstance(pair, tuple) and len(pair) == 2):
            raise GrammarError("and_ expects (parser, release) pairs; use None for values needing no release")
        p, release = pair
        _check_parser(p, "and_")
        _check_release(release, "and_")
        parsers.append(p)
        releases.append(release)
    return Parser(Sequence(fold, tuple(parsers), tuple(releases)))


# 3. many: Zero or more occurrences
def many(fold: FoldOp, p: Parser[Any], release: Optional[ReleaseOp] = None) -> Parser[Any]:
    """
    Applies p zero or more times and folds the values. Never fails on input;
    if the run is aborted (e.g. DepthLimitExceededError) the values collected
    so far are released with `release`.
    """
    _check_fold(fold, "many")
    _check_parser(p, "many")
    _check_release(release, "many")
    return Parser(Repetition(fold, p, release=release))


# 4. many1: One or more occurrences
def many1(fold: FoldOp, p: Parser[Any], release: Optional[ReleaseOp] = None) -> Parser[Any]:
    """Applies p one or more times and folds the values."""
    _check_fold(fold, "many1")
    _check_parser(p, "many1")
    _check_release(release, "many1")
    return Parser(Repetition(fold, p, minimum=1, release=release))


# 5. count: Exactly n occurrences
def count(n: int, fold: FoldOp, p: Parser[Any], release: Optional[ReleaseOp] = None) -> Parser[Any]:
    """
    Applies p exactly n times and folds the values. If it fails part way,
    the values collected so far are released with `release`.
    """
    if n < 0:
        raise GrammarError(f"count needs a non-negative number of repetitions, got {n}")
    _check_fold(fold, "count")
    _check_parser(p, "count")
    _check_release(release, "count")
    return Parser(Repetition(fold, p, minimum=n, maximum=n, release=release))


# 6. maybe: Optional occurrence
def maybe(p: Parser[T], default: Optional[T] = None) -> Parser[Optional[T]]:
    """Tries p; returns `default` without consuming input if it fails."""
    return or_(p, pure(default))


# 7. apply: Transforms a successful value
def apply(p: Parser[T], fn: Callable[[T], U]) -> Parser[U]:
    _check_parser(p, "apply")
    if not callable(fn):
        raise GrammarError("apply requires a function")
    return Parser(Apply(p, fn))


# 8. expect: Names what a parser matches in failure reports
def expect(p: Parser[T], label: str) -> Parser[T]:
    _check_parser(p, "expect")
    return Parser(Expect(p, label))
