from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Iterator, List, Optional

if TYPE_CHECKING:
    from .catalog import PowerUpDef  # pragma: no cover


@dataclass(frozen=True)
class InventoryItem:
    definition: "PowerUpDef"
    paid_price: int

    @property
    def name(self) -> str:
        return self.definition.name


class Inventory:
    def __init__(self, max_size: int, items: Optional[Iterable[InventoryItem]] = None) -> None:
        self.max_size = int(max_size)
        self._items: List[InventoryItem] = list(items or [])[: self.max_size]

    def is_full(self) -> bool:
        return len(self._items) >= self.max_size

    def add(self, item: InventoryItem) -> None:
        if self.is_full():
            raise OverflowError("inventory is full")
        self._items.append(item)

    def get(self, index: int) -> Optional[InventoryItem]:
        if 0 <= index < len(self._items):
            return self._items[index]
        return None

    def remove(self, index: int) -> InventoryItem:
        return self._items.pop(index)

    def copy(self) -> "Inventory":
        return Inventory(self.max_size, self._items)

    def as_tuple(self) -> tuple[InventoryItem, ...]:
        return tuple(self._items)

    def __iter__(self) -> Iterator[InventoryItem]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)


__all__ = ["InventoryItem", "Inventory"]
