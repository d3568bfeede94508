from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable, Iterator, List, Optional

from .enums import EffectType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Effect:
    type: EffectType
    rounds_left: Optional[int] = None
    bonus_ms: Optional[int] = None

    @property
    def timed(self) -> bool:
        return self.rounds_left is not None


class EffectLedger:
    """Ordered list of active modifiers.

    Effects with ``rounds_left`` lose one round per :meth:`decay` and are
    dropped once the counter falls below 1. Effects without a counter stay
    until :meth:`take` removes them.
    """

    def __init__(self, effects: Optional[Iterable[Effect]] = None) -> None:
        self._effects: List[Effect] = list(effects or [])

    def push(self, effect: Effect) -> None:
        self._effects.append(effect)

    def decay(self) -> None:
        kept: List[Effect] = []
        for effect in self._effects:
            if effect.rounds_left is None:
                kept.append(effect)
                continue
            left = effect.rounds_left - 1
            if left >= 1:
                kept.append(replace(effect, rounds_left=left))
        if len(kept) != len(self._effects):
            logger.debug("Expired %d effect(s)", len(self._effects) - len(kept))
        self._effects = kept

    def has(self, effect_type: EffectType) -> bool:
        return any(e.type is effect_type for e in self._effects)

    def take(self, effect_type: EffectType) -> Optional[Effect]:
        for i, effect in enumerate(self._effects):
            if effect.type is effect_type:
                return self._effects.pop(i)
        return None

    def copy(self) -> "EffectLedger":
        return EffectLedger(self._effects)

    def as_tuple(self) -> tuple[Effect, ...]:
        return tuple(self._effects)

    def __iter__(self) -> Iterator[Effect]:
        return iter(list(self._effects))

    def __len__(self) -> int:
        return len(self._effects)

    def __repr__(self) -> str:
        return f"EffectLedger({self._effects!r})"


__all__ = ["Effect", "EffectLedger"]
