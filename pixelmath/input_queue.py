from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING, Any, Deque, List, Tuple

if TYPE_CHECKING:
    from .engine import RoundEngine  # pragma: no cover

logger = logging.getLogger(__name__)

Command = Tuple[str, Any]

# command name -> RoundEngine method
COMMANDS = {
    "submit": "submit_answer",
    "forfeit": "forfeit",
    "buy": "buy",
    "use": "use_item",
    "sell": "sell_item",
    "close_shop": "close_shop",
    "restart": "restart",
}


class InputQueue:
    """Commands collected from events (or any other source), drained once per frame."""

    def __init__(self) -> None:
        self._q: Deque[Command] = deque()

    def push(self, name: str, arg: Any = None) -> None:
        self._q.append((name, arg))

    def pop_all(self) -> list[Command]:
        out: List[Command] = list(self._q)
        self._q.clear()
        return out


def dispatch(engine: "RoundEngine", command: Command) -> Any:
    name, arg = command
    method = COMMANDS.get(name)
    if method is None:
        logger.warning("Unknown command %r", name)
        return None
    fn = getattr(engine, method)
    return fn() if arg is None else fn(arg)


__all__ = ["Command", "COMMANDS", "InputQueue", "dispatch"]
