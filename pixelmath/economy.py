from __future__ import annotations

import logging
import random
from enum import Enum
from typing import List, Optional

from .catalog import CATALOG, ShopOffer, pick_shop_offers
from .inventory import InventoryItem
from .models import round_half_up
from .powerups import apply_powerup
from .settings import GameSettings
from .state import GameState

logger = logging.getLogger(__name__)


class RejectReason(Enum):
    INVENTORY_FULL = "No room left in the inventory"
    INSUFFICIENT_SCORE = "Not enough points"


class PurchaseRejected(Exception):
    def __init__(self, reason: RejectReason, offer: ShopOffer):
        self.reason = reason
        self.offer = offer
        super().__init__(reason.value)


class Economy:
    """Shop, inventory and power-up use.

    Every operation takes the current :class:`GameState` and returns the next
    one; the state passed in is never modified.
    """

    def __init__(self, settings: GameSettings, *, rng: Optional[random.Random] = None, catalog=CATALOG) -> None:
        self.settings = settings
        self.rng = rng or random.Random()
        self.catalog = catalog

    def roll_offers(self) -> List[ShopOffer]:
        s = self.settings
        return pick_shop_offers(
            self.rng,
            weights=s.rarity_weights,
            offer_range=(s.offer_min, s.offer_max),
            jitter=s.price_jitter,
            min_price=s.min_price,
            catalog=self.catalog,
        )

    def sell_value(self, item: InventoryItem) -> int:
        return round_half_up(item.paid_price * self.settings.sell_ratio)

    def buy(self, state: GameState, offer_index: int) -> GameState:
        if not 0 <= offer_index < len(state.shop_offers):
            return state
        offer = state.shop_offers[offer_index]
        if state.inventory.is_full():
            raise PurchaseRejected(RejectReason.INVENTORY_FULL, offer)
        if state.score < offer.price:
            raise PurchaseRejected(RejectReason.INSUFFICIENT_SCORE, offer)

        nxt = state.copy()
        nxt.score -= offer.price
        nxt.inventory.add(InventoryItem(definition=offer.definition, paid_price=offer.price))
        del nxt.shop_offers[offer_index]
        logger.info("Bought %s for %d (score %d -> %d)", offer.definition.id, offer.price, state.score, nxt.score)
        return nxt

    def use(self, state: GameState, index: int) -> GameState:
        item = state.inventory.get(index)
        if item is None:
            return state
        nxt, consumed = apply_powerup(item.definition.power, state)
        removed = item.definition.one_time or consumed
        if removed:
            nxt.inventory.remove(index)
        logger.info("Used %s (%s)", item.definition.id, "removed" if removed else "kept")
        return nxt

    def sell(self, state: GameState, index: int) -> GameState:
        item = state.inventory.get(index)
        if item is None:
            return state
        credit = self.sell_value(item)
        nxt = state.copy()
        nxt.inventory.remove(index)
        nxt.score += credit
        logger.info("Sold %s for %d", item.definition.id, credit)
        return nxt


__all__ = ["Economy", "PurchaseRejected", "RejectReason"]
