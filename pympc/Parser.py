import logging
from dataclasses import dataclass, field
from typing import Any, Callable, FrozenSet, Generic, List, Optional, Sequence as Seq, Tuple, TypeVar, Union

from .Config import DEFAULT_CONFIG, ParseConfig
from .Errors import DeletedParserError, GrammarError, UndefinedParserError
from .Folds import FoldOp, ReleaseOp
from .Guard import DepthGuard

logger = logging.getLogger(__name__)

T = TypeVar('T')  # Generic type for parser results
U = TypeVar('U')


@dataclass(frozen=True)
class Cursor:
    """An offset into an immutable input buffer. Parsers return new cursors."""
    input: str
    pos: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.pos <= len(self.input):
            raise ValueError(f"cursor position {self.pos} outside input of length {len(self.input)}")

    @property
    def remaining(self) -> str:
        return self.input[self.pos:]

    @property
    def at_end(self) -> bool:
        return self.pos == len(self.input)

    def startswith(self, text: str) -> bool:
        return self.input.startswith(text, self.pos)

    def advance(self, n: int) -> 'Cursor':
        return Cursor(self.input, self.pos + n)

    def line_col(self) -> Tuple[int, int]:
        """1-based line and column of the cursor."""
        line = self.input.count('\n', 0, self.pos) + 1
        column = self.pos - (self.input.rfind('\n', 0, self.pos) + 1) + 1
        return line, column


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T
    cursor: Cursor


@dataclass(frozen=True)
class Failure:
    """What would have matched, and where the attempt gave up."""
    expected: FrozenSet[str]
    position: int

    def merge(self, other: 'Failure') -> 'Failure':
        """Combine two failed alternatives: union of expectations, furthest position."""
        return Failure(self.expected | other.expected, max(self.position, other.position))

    def __str__(self) -> str:
        return f"expected {_show_expected(self.expected)} at position {self.position}"


Result = Union[Success[T], Failure]


@dataclass
class ParseError:
    """A Failure placed back into its input, for reporting to a user."""
    expected: FrozenSet[str]
    position: int
    line: int
    column: int
    found: str
    source_name: str = ""

    @classmethod
    def from_failure(cls, failure: Failure, text: str, source_name: str = "") -> 'ParseError':
        line, column = Cursor(text, failure.position).line_col()
        found = repr(text[failure.position]) if failure.position < len(text) else "end of input"
        return cls(failure.expected, failure.position, line, column, found, source_name)

    def __str__(self) -> str:
        where = f"{self.line}:{self.column}"
        if self.source_name:
            where = f"{self.source_name}:{where}"
        return f"{where}: expected {_show_expected(self.expected)} at {self.found}"


def _show_expected(expected: FrozenSet[str]) -> str:
    items = [repr(e) for e in sorted(expected)]
    if not items:
        return "nothing"
    if len(items) == 1:
        return items[0]
    return "one of " + ", ".join(items)


@dataclass
class RunContext:
    """Per-run state. Kept out of the grammar so runs can share a graph."""
    config: ParseConfig = DEFAULT_CONFIG
    guard: DepthGuard = field(init=False)

    def __post_init__(self) -> None:
        self.guard = DepthGuard(self.config.max_depth)


def _release_all(values: List[Any], releases: Seq[Optional[ReleaseOp]]) -> None:
    for value, release in zip(values, releases):
        if release is not None:
            release(value)


# --- Grammar nodes ---
# A node is the immutable body of a Parser handle. Nodes refer to other
# handles, never to other nodes, so placeholders can be filled in later.

class Node:
    def parse(self, cursor: Cursor, ctx: RunContext) -> Result[Any]:
        raise NotImplementedError

    def children(self) -> Tuple['Parser', ...]:
        return ()

    def describe(self, show: Callable[['Parser'], str]) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class Literal(Node):
    text: str

    def parse(self, cursor: Cursor, ctx: RunContext) -> Result[str]:
        if cursor.startswith(self.text):
            return Success(self.text, cursor.advance(len(self.text)))
        return Failure(frozenset([self.text]), cursor.pos)

    def describe(self, show: Callable[['Parser'], str]) -> str:
        return repr(self.text)


@dataclass(frozen=True)
class Pure(Node):
    value: Any

    def parse(self, cursor: Cursor, ctx: RunContext) -> Result[Any]:
        return Success(self.value, cursor)

    def describe(self, show: Callable[['Parser'], str]) -> str:
        return "<pure>"


@dataclass(frozen=True)
class Fail(Node):
    message: str

    def parse(self, cursor: Cursor, ctx: RunContext) -> Result[Any]:
        return Failure(frozenset([self.message]), cursor.pos)

    def describe(self, show: Callable[['Parser'], str]) -> str:
        return "<fail>"


@dataclass(frozen=True)
class Eof(Node):
    def parse(self, cursor: Cursor, ctx: RunContext) -> Result[None]:
        if cursor.at_end:
            return Success(None, cursor)
        return Failure(frozenset(["end of input"]), cursor.pos)

    def describe(self, show: Callable[['Parser'], str]) -> str:
        return "<eof>"


@dataclass(frozen=True)
class Alternation(Node):
    """Ordered choice: the first alternative to succeed wins."""
    parsers: Tuple['Parser', ...]

    def parse(self, cursor: Cursor, ctx: RunContext) -> Result[Any]:
        failure: Optional[Failure] = None
        for p in self.parsers:
            result = p(cursor, ctx)
            if isinstance(result, Success):
                return result
            failure = result if failure is None else failure.merge(result)
        return failure

    def children(self) -> Tuple['Parser', ...]:
        return self.parsers

    def describe(self, show: Callable[['Parser'], str]) -> str:
        return "(" + " | ".join(show(p) for p in self.parsers) + ")"


@dataclass(frozen=True)
class Sequence(Node):
    """
    Runs every parser in order and folds their values into one.
    Backtracks as a unit: if any parser fails, values already produced are
    released with their paired release and the failure is returned as is.
    """
    fold: FoldOp
    parsers: Tuple['Parser', ...]
    releases: Tuple[Optional[ReleaseOp], ...]

    def parse(self, cursor: Cursor, ctx: RunContext) -> Result[Any]:
        values: List[Any] = []
        current = cursor
        try:
            for p in self.parsers:
                result = p(current, ctx)
                if isinstance(result, Failure):
                    _release_all(values, self.releases)
                    return result
                values.append(result.value)
                current = result.cursor
        except Exception:
            # e.g. DepthLimitExceededError from deep inside a child
            _release_all(values, self.releases)
            raise
        return Success(self.fold(values), current)

    def children(self) -> Tuple['Parser', ...]:
        return self.parsers

    def describe(self, show: Callable[['Parser'], str]) -> str:
        return "(" + " ".join(show(p) for p in self.parsers) + ")"


@dataclass(frozen=True)
class Repetition(Node):
    """
    Runs a parser between `minimum` and `maximum` times (maximum None means
    unbounded) and folds the values. Stops at the first failure, keeping the
    cursor of the last success. An unbounded repetition also stops after an
    iteration that consumed nothing.
    """
    fold: FoldOp
    parser: 'Parser'
    minimum: int = 0
    maximum: Optional[int] = None
    release: Optional[ReleaseOp] = None

    def parse(self, cursor: Cursor, ctx: RunContext) -> Result[Any]:
        values: List[Any] = []
        current = cursor
        try:
            while self.maximum is None or len(values) < self.maximum:
                result = self.parser(current, ctx)
                if isinstance(result, Failure):
                    if len(values) < self.minimum:
                        _release_all(values, [self.release] * len(values))
                        return result
                    break
                values.append(result.value)
                advanced = result.cursor.pos != current.pos
                current = result.cursor
                if self.maximum is None and not advanced:
                    break
        except Exception:
            _release_all(values, [self.release] * len(values))
            raise
        return Success(self.fold(values), current)

    def children(self) -> Tuple['Parser', ...]:
        return (self.parser,)

    def describe(self, show: Callable[['Parser'], str]) -> str:
        inner = show(self.parser)
        if (self.minimum, self.maximum) == (0, None):
            return inner + "*"
        if (self.minimum, self.maximum) == (1, None):
            return inner + "+"
        if self.minimum == self.maximum:
            return f"{inner}{{{self.minimum}}}"
        return f"{inner}{{{self.minimum},{'' if self.maximum is None else self.maximum}}}"


@dataclass(frozen=True)
class Apply(Node):
    parser: 'Parser'
    fn: Callable[[Any], Any]

    def parse(self, cursor: Cursor, ctx: RunContext) -> Result[Any]:
        result = self.parser(cursor, ctx)
        if isinstance(result, Failure):
            return result
        return Success(self.fn(result.value), result.cursor)

    def children(self) -> Tuple['Parser', ...]:
        return (self.parser,)

    def describe(self, show: Callable[['Parser'], str]) -> str:
        return show(self.parser)


@dataclass(frozen=True)
class Expect(Node):
    """Replaces what a parser reports as expected, if it failed where it started."""
    parser: 'Parser'
    label: str

    def parse(self, cursor: Cursor, ctx: RunContext) -> Result[Any]:
        result = self.parser(cursor, ctx)
        if isinstance(result, Failure) and result.position == cursor.pos:
            return Failure(frozenset([self.label]), cursor.pos)
        return result

    def children(self) -> Tuple['Parser', ...]:
        return (self.parser,)

    def describe(self, show: Callable[['Parser'], str]) -> str:
        return f"<{self.label}>"


class Parser(Generic[T]):
    """
    A handle on a grammar node. Grammars are graphs of handles: a handle can
    be shared by several parents and can (through a placeholder) refer back
    to itself. A handle is undefined (a placeholder from `new`), defined, or
    deleted (after `delete` tore its graph down).
    """
    def __init__(self, node: Optional[Node] = None, name: str = ""):
        self.node = node
        self.name = name
        self.deleted = False

    @property
    def defined(self) -> bool:
        return self.node is not None

    def __call__(self, cursor: Cursor, ctx: RunContext) -> Result[T]:
        node = self.node
        if node is None:
            if self.deleted:
                raise DeletedParserError(self.name or repr(self))
            raise UndefinedParserError(self.name)
        with ctx.guard:
            if not ctx.config.trace:
                return node.parse(cursor, ctx)
            logger.debug("%r: trying at %d", self, cursor.pos)
            result = node.parse(cursor, ctx)
            if isinstance(result, Success):
                logger.debug("%r: matched %d..%d", self, cursor.pos, result.cursor.pos)
            else:
                logger.debug("%r: failed at %d", self, result.position)
            return result

    def define(self, parser: 'Parser[T]') -> 'Parser[T]':
        """Fill in a placeholder with the body of `parser`. Allowed once."""
        if self.deleted:
            raise DeletedParserError(self.name or repr(self))
        if self.node is not None:
            raise GrammarError(f"parser '{self.name}' is already defined")
        if parser is self:
            raise GrammarError(f"parser '{self.name}' cannot be defined as itself")
        if parser.deleted:
            raise DeletedParserError(parser.name or repr(parser))
        if parser.node is None:
            raise GrammarError(f"cannot define '{self.name}' from undefined parser '{parser.name}'")
        self.node = parser.node
        logger.debug("Defined parser '%s' as %s", self.name, type(parser.node).__name__)
        return self

    # Alternative (<|>)
    def __or__(self, other: 'Parser[T]') -> 'Parser[T]':
        if not isinstance(other, Parser):
            raise GrammarError(f"| expects parsers, got {type(other).__name__}")
        return Parser(Alternation((self, other)))

    def map(self, fn: Callable[[T], U]) -> 'Parser[U]':
        return Parser(Apply(self, fn))

    # Label (<?>)
    def label(self, msg: str) -> 'Parser[T]':
        return Parser(Expect(self, msg))

    def __repr__(self) -> str:
        if self.name:
            return f"Parser({self.name!r})"
        if self.deleted:
            return "Parser(<deleted>)"
        if self.node is None:
            return "Parser(<undefined>)"
        return f"Parser(<{type(self.node).__name__}>)"
