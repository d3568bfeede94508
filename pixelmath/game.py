from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Tuple

import pygame

from .config import CFG
from .constants import *
from .engine import RoundEngine
from .input_queue import InputQueue, dispatch
from .models import Outcome, Phase
from .settings import make_runtime_settings
from .state import Snapshot
from .ui_components import PixelHearts, TimeBar, draw_panel

logger = logging.getLogger(__name__)

ANSWER_CHARS = set("0123456789-.")
ANSWER_MAX_LEN = 8

# inventory slots: key -> index (SHIFT + key sells)
SLOT_KEYS = {pygame.K_z: 0, pygame.K_x: 1, pygame.K_c: 2, pygame.K_v: 3, pygame.K_b: 4}
OFFER_KEYS = {pygame.K_1: 0, pygame.K_2: 1, pygame.K_3: 2, pygame.K_4: 3, pygame.K_5: 4, pygame.K_6: 5}

OUTCOME_TEXT = {
    Outcome.CORRECT: ("CORRECT", GOOD),
    Outcome.WRONG: ("WRONG", BAD),
    Outcome.TIMEOUT: ("TIME UP", BAD),
    Outcome.FORFEIT: ("GIVEN UP", BAD),
}


class Game:

    # ---- Core lifecycle wiring ----

    def __init__(self, screen: pygame.Surface, engine: Optional[RoundEngine] = None):
        self.screen = screen
        self.cfg = CFG
        self.engine = engine or RoundEngine(make_runtime_settings(CFG))

        self.w, self.h = self.screen.get_size()
        self.clock = pygame.time.Clock()
        self.ui_scale = 1.0
        self._font_cache: dict[tuple[str, int], pygame.font.Font] = {}
        self._sysfont_fallback = "couriernew"
        self._rebuild_fonts()

        self.answer = ""
        self.last_window_size = self.screen.get_size()

        # --- Render helpers ---
        self.timebar = TimeBar(self)
        self.hearts = PixelHearts(self)

    def px(self, v: float) -> int:
        return max(1, int(round(v * getattr(self, "ui_scale", 1.0))))

    # ---- Fonts & layout ----

    def _compute_ui_scale(self) -> float:
        ref_w, ref_h = WINDOWED_DEFAULT_SIZE
        s = min(self.w / ref_w, self.h / ref_h)
        return max(0.6, min(2.2, s))

    def _font(self, px: int) -> pygame.font.Font:
        size = max(8, int(round(px)))
        key = (FONT_PATH, size)
        f = self._font_cache.get(key)
        if f is None:
            if os.path.exists(FONT_PATH):
                f = pygame.font.Font(FONT_PATH, size)
            else:
                f = pygame.font.SysFont(self._sysfont_fallback, size, bold=True)
            self._font_cache[key] = f
        return f

    def _rebuild_fonts(self) -> None:
        self.ui_scale = self._compute_ui_scale()
        self._font_cache.clear()
        self.font = self._font(self.px(FONT_SIZE_SMALL))
        self.mid = self._font(self.px(FONT_SIZE_MID))
        self.big = self._font(self.px(FONT_SIZE_BIG))

    def handle_resize(self, width: int, height: int) -> None:
        self.screen = pygame.display.set_mode((max(200, width), max(200, height)), pygame.RESIZABLE)
        self.w, self.h = self.screen.get_size()
        self.last_window_size = (self.w, self.h)
        logger.debug("Window resized to %dx%d", self.w, self.h)
        self._rebuild_fonts()

    def _set_display_mode(self, fullscreen: bool) -> None:
        if fullscreen:
            self.screen = pygame.display.set_mode((0, 0), pygame.FULLSCREEN)
        else:
            self.screen = pygame.display.set_mode(WINDOWED_DEFAULT_SIZE, pygame.RESIZABLE)
        self.w, self.h = self.screen.get_size()
        self._rebuild_fonts()

    # ---- Input ----

    def handle_event(self, event: pygame.event.Event, iq: InputQueue) -> None:
        if event.type == pygame.VIDEORESIZE:
            self.handle_resize(event.w, event.h)
            return

        if event.type != pygame.KEYDOWN:
            return

        if event.key == pygame.K_ESCAPE:
            pygame.quit(); sys.exit(0)

        phase = self.engine.phase

        if phase is Phase.GAME_OVER:
            if event.key in (pygame.K_SPACE, pygame.K_RETURN, pygame.K_r):
                self.answer = ""
                iq.push("restart")
            return

        if event.key in SLOT_KEYS:
            slot = SLOT_KEYS[event.key]
            iq.push("sell" if event.mod & pygame.KMOD_SHIFT else "use", slot)
            return

        if phase is Phase.SHOP:
            if event.key in OFFER_KEYS:
                iq.push("buy", OFFER_KEYS[event.key])
            elif event.key in (pygame.K_RETURN, pygame.K_SPACE):
                iq.push("close_shop")
            return

        if event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            iq.push("submit", self.answer)
            self.answer = ""
        elif event.key == pygame.K_BACKSPACE:
            self.answer = self.answer[:-1]
        elif event.key == pygame.K_h:
            self.answer = ""
            iq.push("forfeit")
        elif event.unicode and event.unicode in ANSWER_CHARS and len(self.answer) < ANSWER_MAX_LEN:
            self.answer += event.unicode

    def update(self, iq: InputQueue) -> None:
        for command in iq.pop_all():
            dispatch(self.engine, command)
        self.engine.update()

    # ---- Rendering ----

    def draw_text(self, text: str, *, pos: Tuple[float, float], font: Optional[pygame.font.Font] = None,
                  color=INK, shadow: bool = True, center: bool = False) -> pygame.Rect:
        font = font or self.font
        surf = font.render(text, True, color)
        x, y = pos
        if center:
            x -= surf.get_width() / 2
        if shadow:
            sh = font.render(text, True, (0, 0, 0))
            self.screen.blit(sh, (int(x) + TEXT_SHADOW_OFFSET[0], int(y) + TEXT_SHADOW_OFFSET[1]))
        self.screen.blit(surf, (int(x), int(y)))
        return pygame.Rect(int(x), int(y), surf.get_width(), surf.get_height())

    def _draw_hud(self, snap: Snapshot) -> None:
        pad = self.px(PADDING)
        self.hearts.draw(snap.lives, pad, pad)
        line = f"Score {snap.score}    Round {snap.round}    Correct {snap.correct_count}    Level {snap.difficulty}"
        self.draw_text(line, pos=(pad, pad + self.px(34)))

        if snap.effects:
            tags = []
            for e in snap.effects:
                tag = e.type.value.replace("_", " ")
                if e.rounds_left is not None:
                    tag += f" ({e.rounds_left})"
                elif e.bonus_ms:
                    tag += f" +{e.bonus_ms}ms"
                tags.append(tag)
            self.draw_text("Active: " + ", ".join(tags), pos=(pad, pad + self.px(60)), color=ACCENT)

    def _draw_inventory(self, snap: Snapshot) -> None:
        pad = self.px(PADDING)
        slot_w = (self.w - pad * 2 - self.px(12) * (snap.max_inventory - 1)) // max(1, snap.max_inventory)
        slot_h = self.px(84)
        y = self.h - pad - slot_h
        keys = "ZXCVB"
        for i in range(snap.max_inventory):
            rect = pygame.Rect(pad + i * (slot_w + self.px(12)), y, slot_w, slot_h)
            draw_panel(self.screen, rect)
            if i < len(snap.inventory):
                item = snap.inventory[i]
                sell = self.engine.economy.sell_value(item)
                color = RARITY_COLORS.get(item.definition.rarity.value, INK)
                self.draw_text(item.name, pos=(rect.x + self.px(10), rect.y + self.px(8)), color=color)
                self.draw_text(f"{keys[i]} use   shift+{keys[i]} sell ({sell})",
                               pos=(rect.x + self.px(10), rect.y + self.px(44)), color=DIM, shadow=False)
            else:
                self.draw_text("empty", pos=(rect.x + self.px(10), rect.y + self.px(8)), color=DIM, shadow=False)

    def _draw_answering(self, snap: Snapshot) -> None:
        cy = int(self.h * 0.36)
        if snap.problem is not None:
            self.draw_text(snap.problem.text(), pos=(self.w / 2, cy), font=self.big, center=True)

        if snap.round_active:
            if snap.revealed_answer is not None:
                self.draw_text(f"Previous answer: {snap.revealed_answer}", pos=(self.w / 2, cy - self.px(50)),
                               color=DIM, center=True, shadow=False)
            self.draw_text(self.answer + "_", pos=(self.w / 2, cy + self.px(80)), font=self.mid,
                           color=ACCENT, center=True)
            ratio = snap.countdown_ms / max(1, snap.time_limit_ms)
            self.timebar.draw(ratio, cy + self.px(130), label=f"{snap.countdown_ms / 1000:.2f}s")
            self.draw_text("ENTER = check    H = give up", pos=(self.w / 2, cy + self.px(190)),
                           color=DIM, center=True, shadow=False)
        elif snap.last_outcome is not None:
            text, color = OUTCOME_TEXT[snap.last_outcome]
            if snap.last_outcome is Outcome.CORRECT:
                text += f"  +{snap.last_gain}"
            elif snap.revealed_answer is not None:
                text += f"  answer: {snap.revealed_answer}"
            self.draw_text(text, pos=(self.w / 2, cy + self.px(80)), font=self.mid, color=color, center=True)

    def _draw_shop(self, snap: Snapshot) -> None:
        pad = self.px(PADDING)
        top = int(self.h * 0.26)
        self.draw_text("SHOP", pos=(self.w / 2, top), font=self.mid, color=ACCENT, center=True)
        card_w = (self.w - pad * 2 - self.px(12) * 2) // 3
        card_h = self.px(150)
        for i, offer in enumerate(snap.shop_offers):
            col, row = i % 3, i // 3
            rect = pygame.Rect(pad + col * (card_w + self.px(12)), top + self.px(44) + row * (card_h + self.px(12)),
                               card_w, card_h)
            rarity = offer.definition.rarity.value
            draw_panel(self.screen, rect, border=RARITY_COLORS.get(rarity, PANEL_BORDER))
            x = rect.x + self.px(10)
            self.draw_text(f"{i + 1}. {offer.name}", pos=(x, rect.y + self.px(8)))
            self.draw_text(rarity, pos=(x, rect.y + self.px(34)), color=RARITY_COLORS.get(rarity, INK), shadow=False)
            self.draw_text(f"Price: {offer.price}", pos=(x, rect.y + self.px(60)), color=ACCENT)
            self._draw_wrapped(offer.definition.description, x, rect.y + self.px(88), rect.width - self.px(20))

        if snap.notice:
            self.draw_text(snap.notice, pos=(self.w / 2, top + self.px(360)), color=BAD, center=True)
        self.draw_text(f"1-{max(1, len(snap.shop_offers))} = buy    ENTER = play", pos=(self.w / 2, top + self.px(390)),
                       color=DIM, center=True, shadow=False)

    def _draw_wrapped(self, text: str, x: int, y: int, width: int) -> None:
        line = ""
        for word in text.split():
            probe = f"{line} {word}".strip()
            if self.font.size(probe)[0] > width and line:
                self.draw_text(line, pos=(x, y), color=DIM, shadow=False)
                y += self.font.get_linesize()
                line = word
            else:
                line = probe
        if line:
            self.draw_text(line, pos=(x, y), color=DIM, shadow=False)

    def _draw_game_over(self, snap: Snapshot) -> None:
        cy = int(self.h * 0.30)
        self.draw_text("GAME OVER", pos=(self.w / 2, cy), font=self.big, color=BAD, center=True)
        rows = [
            f"Correct answers: {snap.correct_count}",
            f"Points: {snap.score}",
            f"Round reached: {snap.round}",
        ]
        for i, row in enumerate(rows):
            self.draw_text(row, pos=(self.w / 2, cy + self.px(90) + i * self.px(34)), font=self.mid, center=True)
        self.draw_text("SPACE = restart    ESC = quit", pos=(self.w / 2, cy + self.px(220)),
                       color=DIM, center=True, shadow=False)

    def draw(self) -> None:
        snap = self.engine.snapshot()
        self.screen.fill(BG)
        self._draw_hud(snap)
        if snap.phase is Phase.ANSWERING:
            self._draw_answering(snap)
        elif snap.phase is Phase.SHOP:
            self._draw_shop(snap)
        else:
            self._draw_game_over(snap)
        if snap.phase is not Phase.GAME_OVER:
            self._draw_inventory(snap)
        pygame.display.flip()


__all__ = ["Game"]
