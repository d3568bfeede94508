from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .enums import Rarity
from .models import round_half_up
from .powerups import AddTime, DoublePoints, ExtraLife, InstantPoints, PowerUp, TimeBonus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PowerUpDef:
    id: str
    name: str
    description: str
    base_price: int
    rarity: Rarity
    one_time: bool
    power: PowerUp


@dataclass(frozen=True)
class ShopOffer:
    definition: PowerUpDef
    price: int

    @property
    def name(self) -> str:
        return self.definition.name


class _CatalogRegistry:
    def __init__(self) -> None:
        self._defs: Dict[str, PowerUpDef] = {}

    def register(self, definition: PowerUpDef) -> None:
        self._defs[definition.id] = definition

    def get(self, def_id: str) -> Optional[PowerUpDef]:
        return self._defs.get(def_id)

    def ids(self) -> List[str]:
        return list(self._defs.keys())

    def all(self) -> List[PowerUpDef]:
        return list(self._defs.values())

    def __len__(self) -> int:
        return len(self._defs)


CATALOG = _CatalogRegistry()
CATALOG.register(PowerUpDef(
    id="extra_life",
    name="+2 Lives",
    description="Adds two lives right away.",
    base_price=120,
    rarity=Rarity.RARE,
    one_time=True,
    power=ExtraLife(lives=2),
))
CATALOG.register(PowerUpDef(
    id="double_2",
    name="2x Points (2 rounds)",
    description="Doubles the points of the next two rounds.",
    base_price=150,
    rarity=Rarity.EPIC,
    one_time=False,
    power=DoublePoints(rounds=2),
))
CATALOG.register(PowerUpDef(
    id="time_bonus_points",
    name="Time Bonus",
    description="A correct answer also pays a point per 10 ms left on the clock.",
    base_price=90,
    rarity=Rarity.COMMON,
    one_time=False,
    power=TimeBonus(rounds=1),
))
CATALOG.register(PowerUpDef(
    id="instant_points",
    name="+200 Points",
    description="Adds 200 points right away.",
    base_price=200,
    rarity=Rarity.RARE,
    one_time=True,
    power=InstantPoints(points=200),
))
CATALOG.register(PowerUpDef(
    id="add_time_ms",
    name="+500ms",
    description="Adds 500 ms to the time limit from the next round on.",
    base_price=70,
    rarity=Rarity.COMMON,
    one_time=True,
    power=AddTime(ms=500),
))


def jitter_price(
    base_price: int,
    rng: random.Random,
    *,
    jitter: Tuple[float, float] = (0.9, 1.3),
    min_price: int = 10,
) -> int:
    lo, hi = jitter
    return max(min_price, round_half_up(base_price * (lo + rng.random() * (hi - lo))))


def pick_shop_offers(
    rng: random.Random,
    *,
    weights: Dict[str, float],
    count: Optional[int] = None,
    offer_range: Tuple[int, int] = (1, 3),
    jitter: Tuple[float, float] = (0.9, 1.3),
    min_price: int = 10,
    catalog: _CatalogRegistry = CATALOG,
) -> List[ShopOffer]:
    """Draw offers by rarity weight; the same definition may come up twice."""
    pool = catalog.all()
    if not pool:
        return []
    if count is None:
        count = rng.randint(offer_range[0], offer_range[1])
    pool_weights = [max(0.0, float(weights.get(d.rarity.value, 1))) for d in pool]
    if sum(pool_weights) <= 0:
        pool_weights = [1.0] * len(pool)
    picks = rng.choices(pool, weights=pool_weights, k=count)
    offers = [
        ShopOffer(definition=d, price=jitter_price(d.base_price, rng, jitter=jitter, min_price=min_price))
        for d in picks
    ]
    logger.debug("Rolled shop offers: %s", ", ".join(f"{o.definition.id}@{o.price}" for o in offers))
    return offers


__all__ = ["PowerUpDef", "ShopOffer", "CATALOG", "jitter_price", "pick_shop_offers"]
