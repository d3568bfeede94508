"""Power-up variants and what they do to a game.

A catalog entry only names its variant; the behaviour lives in
:func:`apply_powerup`. To add a new kind of power-up, add a dataclass here and
register an implementation for it::

    @apply_powerup.register(Shield)
    def _(power: Shield, state: GameState) -> tuple[GameState, bool]:
        ...
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import singledispatch
from typing import TYPE_CHECKING, Tuple

from .effects import Effect
from .enums import EffectType

if TYPE_CHECKING:
    from .state import GameState  # pragma: no cover


@dataclass(frozen=True)
class PowerUp:
    # A reusable power-up stays in the inventory after use unless its
    # definition is marked one-time.
    reusable: bool = False


@dataclass(frozen=True)
class ExtraLife(PowerUp):
    lives: int = 2


@dataclass(frozen=True)
class DoublePoints(PowerUp):
    rounds: int = 2


@dataclass(frozen=True)
class TimeBonus(PowerUp):
    rounds: int = 1


@dataclass(frozen=True)
class AddTime(PowerUp):
    ms: int = 500


@dataclass(frozen=True)
class InstantPoints(PowerUp):
    points: int = 200


@singledispatch
def apply_powerup(power: PowerUp, state: "GameState") -> Tuple["GameState", bool]:
    """Return ``(new_state, consumed)``; ``state`` itself is left untouched."""
    raise TypeError(f"no behaviour registered for {type(power).__name__}")


@apply_powerup.register(ExtraLife)
def _(power: ExtraLife, state: "GameState") -> Tuple["GameState", bool]:
    nxt = state.copy()
    nxt.lives += power.lives
    return nxt, not power.reusable


@apply_powerup.register(DoublePoints)
def _(power: DoublePoints, state: "GameState") -> Tuple["GameState", bool]:
    nxt = state.copy()
    nxt.effects.push(Effect(EffectType.DOUBLE, rounds_left=power.rounds))
    return nxt, not power.reusable


@apply_powerup.register(TimeBonus)
def _(power: TimeBonus, state: "GameState") -> Tuple["GameState", bool]:
    nxt = state.copy()
    nxt.effects.push(Effect(EffectType.TIME_BONUS, rounds_left=power.rounds))
    return nxt, not power.reusable


@apply_powerup.register(AddTime)
def _(power: AddTime, state: "GameState") -> Tuple["GameState", bool]:
    nxt = state.copy()
    # no round counter: it waits in the ledger until the next round start takes it
    nxt.effects.push(Effect(EffectType.ADD_TIME, bonus_ms=power.ms))
    return nxt, not power.reusable


@apply_powerup.register(InstantPoints)
def _(power: InstantPoints, state: "GameState") -> Tuple["GameState", bool]:
    nxt = state.copy()
    nxt.score += power.points
    return nxt, not power.reusable


__all__ = [
    "PowerUp",
    "ExtraLife",
    "DoublePoints",
    "TimeBonus",
    "AddTime",
    "InstantPoints",
    "apply_powerup",
]
