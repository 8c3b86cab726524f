import logging
from typing import Any, Optional, Tuple, TypeVar

from .Config import DEFAULT_CONFIG, ParseConfig
from .Errors import GrammarError
from .Parser import Cursor, Eof, Fail, Literal, ParseError, Parser, Pure, Result, RunContext, Success

logger = logging.getLogger(__name__)

T = TypeVar('T')


def string(text: str) -> Parser[str]:
    """Match `text` exactly and return it."""
    if not isinstance(text, str):
        raise GrammarError(f"string() expects text, got {type(text).__name__}")
    return Parser(Literal(text))


def pure(value: T) -> Parser[T]:
    """Succeed with `value` without consuming input."""
    return Parser(Pure(value))


def fail(msg: str) -> Parser[Any]:
    """A parser that always fails, reporting `msg` as what was expected."""
    return Parser(Fail(msg))


def eof() -> Parser[None]:
    """Succeed only at the end of input."""
    return Parser(Eof())


def new(name: str) -> Parser[Any]:
    """
    Create a named placeholder, to be filled in later with `define`.
    Placeholders are how recursive grammars refer to themselves:

        expr = new("expr")
        term = or_(string("x"), and_(strfold, (string("("), None), (expr, None), (string(")"), None)))
        expr.define(term)
    """
    if not name:
        raise GrammarError("placeholder parsers need a name")
    return Parser(None, name)


def parse(parser: Parser[T], input_str: str, config: Optional[ParseConfig] = None) -> Result[T]:
    """Run `parser` from the start of `input_str`."""
    ctx = RunContext(config or DEFAULT_CONFIG)
    logger.debug("Running %r over %d characters", parser, len(input_str))
    result = parser(Cursor(input_str), ctx)
    if isinstance(result, Success):
        logger.debug("%r matched up to position %d", parser, result.cursor.pos)
    else:
        logger.debug("%r failed at position %d", parser, result.position)
    return result


def run_parser(parser: Parser[T],
               input_str: str,
               config: Optional[ParseConfig] = None) -> Tuple[Optional[T], Optional[ParseError]]:
    config = config or DEFAULT_CONFIG
    result = parse(parser, input_str, config)
    if isinstance(result, Success):
        return result.value, None
    return None, ParseError.from_failure(result, input_str, config.source_name)
