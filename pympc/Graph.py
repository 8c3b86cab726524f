"""
Operations over a grammar as a graph of Parser handles.

Grammars are not trees: one parser can be shared by several parents, and
recursive grammars reach a parser from itself through a placeholder. Every
function here walks the graph with a visited set and an explicit stack, so
each handle is seen once and cycles terminate.
"""
import logging
from typing import Callable, Iterator, Optional, Set

from .Parser import Parser

logger = logging.getLogger(__name__)


def walk(*roots: Parser) -> Iterator[Parser]:
    """
    Yield every handle reachable from `roots`, each exactly once, depth
    first in definition order. A handle's children are read before it is
    yielded, so the caller may tear the handle down straight away.
    """
    seen: Set[int] = set()
    stack = list(reversed(roots))
    while stack:
        parser = stack.pop()
        if id(parser) in seen:
            continue
        seen.add(id(parser))
        if parser.node is not None:
            stack.extend(reversed(parser.node.children()))
        yield parser


def delete_all(*roots: Parser, on_release: Optional[Callable[[Parser], None]] = None) -> int:
    """
    Tear down everything reachable from `roots` in one pass. Returns how many
    handles were released. Handles already deleted are skipped, so deleting
    overlapping grammars one after another never releases anything twice.
    """
    released = 0
    for parser in walk(*roots):
        if parser.deleted:
            continue
        parser.node = None
        parser.deleted = True
        released += 1
        if on_release is not None:
            on_release(parser)
    logger.debug("Deleted %d parsers", released)
    return released


def delete(root: Parser, on_release: Optional[Callable[[Parser], None]] = None) -> int:
    """Tear down the grammar reachable from `root`. Using it afterwards raises DeletedParserError."""
    return delete_all(root, on_release=on_release)


def describe(root: Parser) -> str:
    """
    Render a grammar as text, e.g. `('Hello ' ('Dan' | 'Adam'))*`.
    A named parser is expanded the first time it is reached and shown as
    `<name>` after that, which is also what keeps recursive grammars finite.
    """
    named: Set[int] = set()
    expanding: Set[int] = set()

    def show(parser: Parser) -> str:
        if parser.deleted:
            return "<deleted>"
        if parser.node is None or (parser.name and id(parser) in named):
            return f"<{parser.name}>"
        if id(parser) in expanding:
            return "<...>"
        if parser.name:
            named.add(id(parser))
        expanding.add(id(parser))
        try:
            return parser.node.describe(show)
        finally:
            expanding.discard(id(parser))

    return show(root)
