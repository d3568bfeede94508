# pixelmath/settings.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from .constants import (
    ADVANCE_DELAY_MS,
    BASE_POINT,
    MAX_INVENTORY,
    MAX_TIME_MS,
    MIN_PRICE,
    MIN_TIME_MS,
    OFFER_MAX,
    OFFER_MIN,
    PRICE_JITTER,
    RARITY_WEIGHTS,
    ROUNDS_BEFORE_SHOP,
    SELL_RATIO,
    START_LIVES,
    START_TIME_MS,
    TICK_MS,
    TIME_DECREASE_AFTER_SHOP,
)


@dataclass
class GameSettings:
    """Rule tunables handed to the engine; defaults mirror config.json."""

    start_lives: int = START_LIVES
    rounds_before_shop: int = ROUNDS_BEFORE_SHOP
    max_inventory: int = MAX_INVENTORY
    start_time_ms: int = START_TIME_MS
    min_time_ms: int = MIN_TIME_MS
    max_time_ms: int = MAX_TIME_MS
    time_decrease_after_shop: int = TIME_DECREASE_AFTER_SHOP
    base_point: int = BASE_POINT
    tick_ms: int = TICK_MS
    advance_delay_ms: int = ADVANCE_DELAY_MS
    rarity_weights: Dict[str, float] = field(default_factory=lambda: dict(RARITY_WEIGHTS))
    offer_min: int = OFFER_MIN
    offer_max: int = OFFER_MAX
    price_jitter: Tuple[float, float] = PRICE_JITTER
    min_price: int = MIN_PRICE
    sell_ratio: float = SELL_RATIO


# ------------- snapshot (runtime) -------------

def make_runtime_settings(CFG: Dict[str, Any]) -> GameSettings:
    """Zbuduj ustawienia gry z (już oczyszczonego) słownika konfiguracji."""
    g = CFG["game"]
    s = CFG["shop"]
    settings = GameSettings(
        start_lives=int(g["start_lives"]),
        rounds_before_shop=int(g["rounds_before_shop"]),
        max_inventory=int(g["max_inventory"]),
        start_time_ms=int(g["start_time_ms"]),
        min_time_ms=int(g["min_time_ms"]),
        max_time_ms=int(g["max_time_ms"]),
        time_decrease_after_shop=int(g["time_decrease_after_shop"]),
        base_point=int(g["base_point"]),
        tick_ms=int(g["tick_ms"]),
        advance_delay_ms=int(g["advance_delay_ms"]),
        rarity_weights={k: float(v) for k, v in s["rarity_weights"].items()},
        offer_min=int(s["offer_min"]),
        offer_max=int(s["offer_max"]),
        price_jitter=(float(s["price_jitter"][0]), float(s["price_jitter"][1])),
        min_price=int(s["min_price"]),
        sell_ratio=float(s["sell_ratio"]),
    )
    clamp_settings(settings)
    return settings

# ------------- clamp -------------

def clamp_settings(s: GameSettings) -> None:
    """Zaciska zakresy – spójne z _sanitize_cfg() z pixelmath/config.py."""
    s.start_lives        = max(1, min(9, int(s.start_lives)))
    s.rounds_before_shop = max(1, int(s.rounds_before_shop))
    s.max_inventory      = max(1, int(s.max_inventory))
    s.start_time_ms      = max(1, int(s.start_time_ms))
    s.min_time_ms        = max(1, min(s.start_time_ms, int(s.min_time_ms)))
    s.max_time_ms        = max(s.start_time_ms, int(s.max_time_ms))
    s.time_decrease_after_shop = max(0, int(s.time_decrease_after_shop))
    s.tick_ms            = max(1, int(s.tick_ms))
    s.advance_delay_ms   = max(0, int(s.advance_delay_ms))
    s.offer_min          = max(1, int(s.offer_min))
    s.offer_max          = max(s.offer_min, int(s.offer_max))
    s.min_price          = max(0, int(s.min_price))
    s.sell_ratio         = max(0.0, min(1.0, float(s.sell_ratio)))


__all__ = ["GameSettings", "make_runtime_settings", "clamp_settings"]
