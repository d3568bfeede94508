from __future__ import annotations

from typing import Callable


class Countdown:
    """Per-round countdown polled against ``now_fn`` (seconds).

    The remaining time moves in whole ``tick_ms`` steps. Once cancelled the
    countdown is frozen at the value it had and never reports expiry, so a
    poll that arrives after the round was answered cannot resolve it again.
    """

    def __init__(self, now_fn: Callable[[], float], duration_ms: int, *, tick_ms: int = 50) -> None:
        self._now = now_fn
        self.duration_ms = max(0, int(duration_ms))
        self.tick_ms = max(1, int(tick_ms))
        self.remaining = self.duration_ms
        self.running = False
        self.cancelled = False
        self._t0 = 0.0

    def start(self) -> None:
        if not self.running and not self.cancelled:
            self._t0 = self._now()
            self.running = True

    def cancel(self) -> int:
        if self.running:
            self.remaining = self._live_remaining()
            self.running = False
        self.cancelled = True
        return self.remaining

    def _live_remaining(self) -> int:
        # rounded to 1 us so float clock noise cannot drop a tick
        elapsed_ms = max(0.0, round((self._now() - self._t0) * 1000.0, 3))
        ticks = int(elapsed_ms // self.tick_ms)
        return max(0, self.duration_ms - ticks * self.tick_ms)

    def get(self) -> int:
        if not self.running:
            return self.remaining
        return self._live_remaining()

    def expired(self) -> bool:
        return not self.cancelled and self.get() <= 0


__all__ = ["Countdown"]
