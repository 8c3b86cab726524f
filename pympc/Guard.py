from dataclasses import dataclass, field

from .Config import DEFAULT_MAX_DEPTH
from .Errors import DepthLimitExceededError


@dataclass
class DepthGuard:
    """
    Context manager counting how deeply parsers are nested in a run.

        guard = DepthGuard(max_depth=100)
        with guard:
            result = child(cursor, ctx)

    One guard belongs to one run, so concurrent runs over the same grammar
    never share a counter.
    """
    max_depth: int = DEFAULT_MAX_DEPTH
    depth: int = field(default=0, init=False)

    def __enter__(self) -> 'DepthGuard':
        self.depth += 1
        if self.depth > self.max_depth:
            self.depth -= 1
            raise DepthLimitExceededError(self.max_depth)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.depth -= 1
