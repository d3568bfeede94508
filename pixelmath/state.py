from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Optional

from .catalog import ShopOffer
from .effects import Effect, EffectLedger
from .inventory import Inventory, InventoryItem
from .models import Outcome, Phase, Problem


@dataclass
class GameState:
    """The single mutable aggregate behind a game.

    The engine never edits the committed instance in place: it works on
    :meth:`copy` and swaps the result in once a transition is complete.
    """

    lives: int
    score: int
    time_limit_ms: int
    effects: EffectLedger
    inventory: Inventory
    round: int = 1
    difficulty: int = 1
    correct_count: int = 0
    problem: Optional[Problem] = None
    countdown_ms: int = 0
    phase: Phase = Phase.ANSWERING
    shop_offers: List[ShopOffer] = field(default_factory=list)
    last_outcome: Optional[Outcome] = None
    last_gain: int = 0
    revealed_answer: Optional[int] = None
    notice: str = ""

    def copy(self) -> "GameState":
        return replace(
            self,
            effects=self.effects.copy(),
            inventory=self.inventory.copy(),
            shop_offers=list(self.shop_offers),
        )


@dataclass(frozen=True)
class Snapshot:
    lives: int
    score: int
    round: int
    difficulty: int
    correct_count: int
    phase: Phase
    problem: Optional[Problem]
    countdown_ms: int
    time_limit_ms: int
    effects: tuple[Effect, ...]
    inventory: tuple[InventoryItem, ...]
    max_inventory: int
    shop_offers: tuple[ShopOffer, ...]
    last_outcome: Optional[Outcome]
    last_gain: int
    revealed_answer: Optional[int]
    notice: str
    round_active: bool

    @classmethod
    def of(cls, state: GameState, *, countdown_ms: int, round_active: bool) -> "Snapshot":
        return cls(
            lives=state.lives,
            score=state.score,
            round=state.round,
            difficulty=state.difficulty,
            correct_count=state.correct_count,
            phase=state.phase,
            problem=state.problem,
            countdown_ms=countdown_ms,
            time_limit_ms=state.time_limit_ms,
            effects=state.effects.as_tuple(),
            inventory=state.inventory.as_tuple(),
            max_inventory=state.inventory.max_size,
            shop_offers=tuple(state.shop_offers),
            last_outcome=state.last_outcome,
            last_gain=state.last_gain,
            revealed_answer=state.revealed_answer,
            notice=state.notice,
            round_active=round_active,
        )


__all__ = ["GameState", "Snapshot"]
