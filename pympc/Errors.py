class PympcError(Exception):
    """Base class for errors raised by the engine (never for parse failures)."""


class GrammarError(PympcError, ValueError):
    """A grammar was built incorrectly: bad arguments to a constructor."""


class UndefinedParserError(GrammarError):
    """A placeholder created with `new` was run before being defined."""

    def __init__(self, name: str):
        super().__init__(f"parser '{name}' was used before being defined")
        self.name = name


class DeletedParserError(GrammarError):
    """A parser handle was used after its graph was torn down."""

    def __init__(self, name: str):
        super().__init__(f"parser '{name}' has been deleted")
        self.name = name


class DepthLimitExceededError(PympcError, RecursionError):
    """Parser nesting went deeper than ParseConfig.max_depth during a run."""

    def __init__(self, max_depth: int):
        super().__init__(f"maximum parser nesting depth of {max_depth} exceeded")
        self.max_depth = max_depth
