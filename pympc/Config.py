from dataclasses import dataclass

# Each level costs a couple of Python frames, so this stays well inside
# the interpreter's default recursion limit.
DEFAULT_MAX_DEPTH = 256


@dataclass(frozen=True)
class ParseConfig:
    """
    Settings for a single parse run.

    max_depth:   how many parsers may be nested inside each other before the
                 run is aborted with DepthLimitExceededError.
    trace:       log every parser entry and outcome at DEBUG level.
    source_name: name used in ParseError diagnostics (e.g. a file name).
    """
    max_depth: int = DEFAULT_MAX_DEPTH
    trace: bool = False
    source_name: str = ""

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {self.max_depth}")


DEFAULT_CONFIG = ParseConfig()
