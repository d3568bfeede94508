from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum, auto

from .enums import Op


class Phase(Enum):
    ANSWERING = auto()
    SHOP = auto()
    GAME_OVER = auto()


class Outcome(Enum):
    CORRECT = auto()
    WRONG = auto()
    TIMEOUT = auto()
    FORFEIT = auto()

    @property
    def won(self) -> bool:
        return self is Outcome.CORRECT


@dataclass(frozen=True)
class Problem:
    a: int
    b: int
    op: Op
    answer: int

    def text(self) -> str:
        return f"{self.a} {self.op.value} {self.b} = ?"


def round_half_up(value: float) -> int:
    # 62.5 -> 63, -2.5 -> -2
    return int(math.floor(value + 0.5))


__all__ = ["Phase", "Outcome", "Problem", "round_half_up"]
