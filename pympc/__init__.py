# Core
from .Parser import Parser, Cursor, Success, Failure, Result, ParseError, RunContext
from .Prim import run_parser, parse, string, pure, fail, eof, new
from .Config import ParseConfig, DEFAULT_CONFIG
from .Errors import PympcError, GrammarError, UndefinedParserError, DeletedParserError, DepthLimitExceededError

# Combinators
from .Combinators import or_, and_, many, many1, count, maybe, apply, expect

# Folds and releases
from .Folds import (
    FoldOp, ReleaseOp, strfold, release_str,
    fold_null, fold_list, fold_first, fold_last, keep, discard
)

# Grammar graph
from .Graph import walk, delete, delete_all, describe
