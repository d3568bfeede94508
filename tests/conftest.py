import random

import pytest

from pixelmath.engine import RoundEngine
from pixelmath.settings import GameSettings


class FakeClock:
    def __init__(self, start: float = 100.0) -> None:
        self.t = start

    def __call__(self) -> float:
        return self.t

    def advance_ms(self, ms: float) -> None:
        self.t += ms / 1000.0


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    return GameSettings(advance_delay_ms=0)


@pytest.fixture
def engine(settings, clock):
    return RoundEngine(settings, rng=random.Random(7), now_fn=clock)
