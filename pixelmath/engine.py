from __future__ import annotations

import logging
import random
import re
import threading
import time
from dataclasses import replace
from typing import Callable, Optional, Union

from .economy import Economy, PurchaseRejected
from .effects import EffectLedger
from .enums import EffectType
from .inventory import Inventory
from .models import Outcome, Phase, Problem, round_half_up
from .problems import generate_problem
from .settings import GameSettings
from .state import GameState, Snapshot
from .timer import Countdown

logger = logging.getLogger(__name__)

Number = Union[int, float]

ANSWER_RE = re.compile(r"-?[0-9]+(?:\.[0-9]+)?")


def parse_answer(text: str) -> Optional[Number]:
    raw = (text or "").strip()
    if not ANSWER_RE.fullmatch(raw):
        return None
    return float(raw) if "." in raw else int(raw)


class RoundEngine:
    """Round / shop / game-over state machine.

    All commands and the countdown poll (:meth:`update`) go through one lock
    and one commit point: a transition works on a copy of :attr:`state` and
    replaces it when done, so no caller ever sees half of a round resolution.
    """

    def __init__(
        self,
        settings: Optional[GameSettings] = None,
        *,
        rng: Optional[random.Random] = None,
        now_fn: Callable[[], float] = time.monotonic,
        economy: Optional[Economy] = None,
    ) -> None:
        self.settings = settings or GameSettings()
        self.rng = rng or random.Random()
        self.economy = economy or Economy(self.settings, rng=self.rng)
        self._now = now_fn
        self._lock = threading.RLock()
        self._countdown: Optional[Countdown] = None
        self._next_round_at: Optional[float] = None

        self.state = self._fresh_state()
        with self._lock:
            nxt = self.state.copy()
            self.start_round(nxt, 1)
            self.state = nxt

    # ---- Queries ----

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def round_active(self) -> bool:
        return self.state.phase is Phase.ANSWERING and self._countdown is not None

    def remaining_ms(self) -> int:
        cd = self._countdown
        return cd.get() if cd is not None else self.state.countdown_ms

    def snapshot(self) -> Snapshot:
        with self._lock:
            return Snapshot.of(self.state, countdown_ms=self.remaining_ms(), round_active=self.round_active)

    def score_for(self, problem: Problem, effects: EffectLedger, ms_left: int) -> int:
        base = self.settings.base_point + abs(problem.answer)
        multiplier = 2 if effects.has(EffectType.DOUBLE) else 1
        gained = round_half_up(base * multiplier)
        if effects.has(EffectType.TIME_BONUS):
            gained += round_half_up(ms_left / 10)
        return gained

    # ---- Round lifecycle ----

    def _fresh_state(self) -> GameState:
        s = self.settings
        return GameState(
            lives=s.start_lives,
            score=0,
            time_limit_ms=s.start_time_ms,
            effects=EffectLedger(),
            inventory=Inventory(s.max_inventory),
        )

    def _cancel_countdown(self) -> int:
        cd, self._countdown = self._countdown, None
        if cd is None:
            return 0
        return cd.cancel()

    def start_round(self, state: GameState, difficulty: Optional[int] = None) -> GameState:
        """Put a new problem into the working copy ``state`` and arm its countdown."""
        level = state.difficulty if difficulty is None else int(difficulty)
        self._cancel_countdown()
        state.problem = generate_problem(level, self.rng)
        state.countdown_ms = state.time_limit_ms
        state.phase = Phase.ANSWERING
        self._countdown = Countdown(self._now, state.time_limit_ms, tick_ms=self.settings.tick_ms)
        self._countdown.start()
        return state

    def _apply_pending_time(self, state: GameState) -> None:
        bonus = state.effects.take(EffectType.ADD_TIME)
        while bonus is not None:
            before = state.time_limit_ms
            state.time_limit_ms = min(state.time_limit_ms + int(bonus.bonus_ms or 0), self.settings.max_time_ms)
            logger.info("Time limit %d -> %d ms", before, state.time_limit_ms)
            bonus = state.effects.take(EffectType.ADD_TIME)

    def _begin_round(self, state: GameState) -> None:
        self._apply_pending_time(state)
        self.start_round(state)

    def advance_round(self, state: GameState) -> GameState:
        """Decay effects, bump the round and either open the shop or queue the next problem."""
        state.effects.decay()
        state.round += 1
        if state.round % self.settings.rounds_before_shop == 0:
            state.phase = Phase.SHOP
            state.shop_offers = self.economy.roll_offers()
            logger.info("Round %d: shop opened with %d offer(s)", state.round, len(state.shop_offers))
            return state
        delay = self.settings.advance_delay_ms
        if delay > 0:
            self._next_round_at = self._now() + delay / 1000.0
        else:
            self._begin_round(state)
        return state

    def _resolve(self, outcome: Outcome, ms_left: int) -> None:
        nxt = self.state.copy()
        nxt.last_outcome = outcome
        nxt.countdown_ms = ms_left
        nxt.notice = ""
        nxt.revealed_answer = None
        if outcome is Outcome.FORFEIT and nxt.problem is not None:
            nxt.revealed_answer = nxt.problem.answer

        if outcome.won:
            gained = self.score_for(nxt.problem, nxt.effects, ms_left)
            nxt.correct_count += 1
            nxt.score += gained
            nxt.last_gain = gained
            logger.info("Round %d correct: +%d (score %d)", nxt.round, gained, nxt.score)
        else:
            nxt.last_gain = 0
            nxt.lives = max(0, nxt.lives - 1)
            logger.info("Round %d %s: lives %d", nxt.round, outcome.name.lower(), nxt.lives)
            if nxt.lives == 0:
                nxt.phase = Phase.GAME_OVER
                self._next_round_at = None
                self.state = nxt
                logger.info(
                    "Game over at round %d: score %d, %d correct", nxt.round, nxt.score, nxt.correct_count
                )
                return

        self.state = self.advance_round(nxt)

    def update(self) -> None:
        """Poll the clock: resolve an expired countdown or start a queued round."""
        with self._lock:
            cd = self._countdown
            if self.state.phase is Phase.ANSWERING and cd is not None:
                if cd.expired():
                    self._cancel_countdown()
                    self._resolve(Outcome.TIMEOUT, 0)
                else:
                    remaining = cd.get()
                    if remaining != self.state.countdown_ms:
                        self.state = replace(self.state, countdown_ms=remaining)
                return

            if (self._next_round_at is not None
                    and self.state.phase is Phase.ANSWERING
                    and self._now() >= self._next_round_at):
                self._next_round_at = None
                nxt = self.state.copy()
                self._begin_round(nxt)
                self.state = nxt

    # ---- Commands ----

    def submit_answer(self, text: str) -> Optional[Outcome]:
        with self._lock:
            if not self.round_active:
                return None
            ms_left = self._cancel_countdown()
            if ms_left <= 0:
                outcome = Outcome.TIMEOUT
            else:
                value = parse_answer(text)
                correct = value is not None and value == self.state.problem.answer
                outcome = Outcome.CORRECT if correct else Outcome.WRONG
            self._resolve(outcome, ms_left)
            return outcome

    def forfeit(self) -> Optional[Outcome]:
        with self._lock:
            if not self.round_active:
                return None
            ms_left = self._cancel_countdown()
            self._resolve(Outcome.FORFEIT, ms_left)
            return Outcome.FORFEIT

    def buy(self, offer_index: int) -> bool:
        with self._lock:
            if self.state.phase is not Phase.SHOP:
                return False
            try:
                nxt = self.economy.buy(self.state, offer_index)
            except PurchaseRejected as e:
                logger.info("Purchase of %s rejected: %s", e.offer.definition.id, e)
                self.state = replace(self.state, notice=str(e))
                return False
            if nxt is self.state:
                return False
            nxt.notice = ""
            self.state = nxt
            return True

    def use_item(self, index: int) -> bool:
        with self._lock:
            if self.state.phase is Phase.GAME_OVER:
                return False
            nxt = self.economy.use(self.state, index)
            if nxt is self.state:
                return False
            nxt.notice = ""
            self.state = nxt
            return True

    def sell_item(self, index: int) -> bool:
        with self._lock:
            if self.state.phase is Phase.GAME_OVER:
                return False
            nxt = self.economy.sell(self.state, index)
            if nxt is self.state:
                return False
            nxt.notice = ""
            self.state = nxt
            return True

    def close_shop(self) -> bool:
        with self._lock:
            if self.state.phase is not Phase.SHOP:
                return False
            s = self.settings
            nxt = self.state.copy()
            nxt.difficulty += 1
            nxt.time_limit_ms = max(s.min_time_ms, nxt.time_limit_ms - s.time_decrease_after_shop)
            nxt.shop_offers = []
            nxt.notice = ""
            logger.info("Shop closed: difficulty %d, time limit %d ms", nxt.difficulty, nxt.time_limit_ms)
            self._begin_round(nxt)
            self.state = nxt
            return True

    def restart(self) -> None:
        with self._lock:
            self._cancel_countdown()
            self._next_round_at = None
            nxt = self._fresh_state()
            self.start_round(nxt, 1)
            self.state = nxt
            logger.info("Game restarted")


__all__ = ["RoundEngine", "parse_answer"]
