"""Shared pytest fixtures: a hand-cranked clock and a scripted random source."""

import pytest

from game_utils import Scheduler


class FakeClock:
    """Millisecond clock that only moves when a test says so."""

    def __init__(self, start=0):
        self.t = start

    def __call__(self):
        return self.t

    def advance(self, ms):
        self.t += ms
        return self.t


class ScriptedRandom:
    """Stand-in for random.Random returning queued values, then `default`."""

    def __init__(self, values=(), default=0.99):
        self.values = list(values)
        self.default = default

    def random(self):
        if self.values:
            return self.values.pop(0)
        return self.default


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler(clock):
    return Scheduler(clock)


@pytest.fixture
def scripted_rng():
    """Factory: scripted_rng(0.5, 0.1, default=0.99)."""

    def make(*values, default=0.99):
        return ScriptedRandom(values, default)

    return make
