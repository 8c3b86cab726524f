# tests/conftest.py
import pytest

from pympc.Parser import Cursor, RunContext


class ReleaseTracker:
    """
    Wraps text values so every produced value can be matched against a
    release. `track(p)` makes p produce fresh boxed values; `release` counts
    how often each box was released.
    """
    def __init__(self):
        self.produced = []
        self.released = []

    def box(self, text):
        value = [text]
        self.produced.append(value)
        return value

    def release(self, value):
        assert any(value is v for v in self.produced), "released a value that was never produced"
        self.released.append(value)

    def track(self, p):
        return p.map(self.box)

    def fold(self, values):
        # Keeps every value by boxing them together; consumes the inputs.
        for v in values:
            self.release(v)
        return self.box("".join(v[0] for v in values))

    def release_count(self, value):
        return sum(1 for v in self.released if v is value)

    @property
    def outstanding(self):
        return [v for v in self.produced if self.release_count(v) == 0]


@pytest.fixture
def tracker():
    return ReleaseTracker()


@pytest.fixture(scope="session")
def make_tracker():
    # Session scoped so it can be used from hypothesis tests.
    return ReleaseTracker


@pytest.fixture
def run_at():
    def _run(parser, input_str, pos=0):
        return parser(Cursor(input_str, pos), RunContext())

    return _run
