from typing import Any, Callable, List, Optional

# A fold consumes an ordered list of child values and returns one value.
# Values it does not keep in its result it must release itself.
FoldOp = Callable[[List[Any]], Any]

# A release disposes of a value that was produced but will not be used.
# None is accepted wherever a release is expected and means "nothing to do".
ReleaseOp = Callable[[Any], None]


def release_str(value: Optional[str]) -> None:
    """Release a text value produced by `string`. Text needs no cleanup."""
    return None


def strfold(values: List[Optional[str]]) -> str:
    """Concatenate text values in order, skipping None."""
    return "".join(v for v in values if v is not None)


def fold_null(values: List[Any]) -> None:
    """Drop every value. Only use with values that need no release."""
    return None


def fold_list(values: List[Any]) -> List[Any]:
    """Keep every value, in order, as a list."""
    return list(values)


def discard(release: Optional[ReleaseOp]) -> FoldOp:
    """Build a fold that releases every value and returns None."""
    def fold(values: List[Any]) -> None:
        if release is not None:
            for v in values:
                release(v)
        return None
    return fold


def keep(index: int, release: Optional[ReleaseOp] = None) -> FoldOp:
    """
    Build a fold that returns values[index] and releases all the others.
    Negative indexes count from the end. If the index is out of range
    everything is released and the fold returns None.
    """
    def fold(values: List[Any]) -> Any:
        position = index if index >= 0 else len(values) + index
        kept = values[position] if 0 <= position < len(values) else None
        if release is not None:
            for i, v in enumerate(values):
                if i != position:
                    release(v)
        return kept
    return fold


fold_first = keep(0)
fold_last = keep(-1)
