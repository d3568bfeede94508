from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import pygame

from .constants import *  # noqa: F401,F403

if TYPE_CHECKING:
    from .game import Game


class TimeBar:
    def __init__(self, game: "Game") -> None:
        self.g = game

    def draw(self, ratio: float, y: int, label: Optional[str] = None) -> None:
        g = self.g
        ratio = max(0.0, min(1.0, ratio))
        if ratio <= TIMER_BAR_CRIT_TIME:
            fill_color = TIMER_BAR_CRIT_COLOR
        elif ratio <= TIMER_BAR_WARN_TIME:
            fill_color = TIMER_BAR_WARN_COLOR
        else:
            fill_color = TIMER_BAR_FILL

        bar_w = int(g.w * TIMER_BAR_WIDTH_FACTOR)
        bar_h = g.px(TIMER_BAR_HEIGHT)
        bar_x = (g.w - bar_w) // 2

        pygame.draw.rect(g.screen, TIMER_BAR_BG, (bar_x, y, bar_w, bar_h), border_radius=UI_RADIUS)

        fill_w = int(bar_w * ratio)
        if fill_w > 0:
            pygame.draw.rect(g.screen, fill_color, (bar_x, y, fill_w, bar_h), border_radius=UI_RADIUS)

        pygame.draw.rect(
            g.screen,
            TIMER_BAR_BORDER,
            (bar_x, y, bar_w, bar_h),
            width=TIMER_BAR_BORDER_W,
            border_radius=UI_RADIUS,
        )

        if label:
            surf = g.font.render(label, True, INK)
            g.screen.blit(surf, (bar_x + (bar_w - surf.get_width()) // 2, y + bar_h + g.px(4)))


class PixelHearts:
    """Row of pixel-art hearts, one per life."""

    def __init__(self, game: "Game") -> None:
        self.g = game
        self._sprite: Optional[pygame.Surface] = None
        self._sprite_px = 0

    def _heart(self, px: int) -> pygame.Surface:
        if self._sprite is None or self._sprite_px != px:
            rows, cols = len(HEART), len(HEART[0])
            surf = pygame.Surface((cols * px, rows * px), pygame.SRCALPHA)
            for y, row in enumerate(HEART):
                for x, cell in enumerate(row):
                    if cell:
                        surf.fill(HEART_COLOR, (x * px, y * px, px, px))
            self._sprite, self._sprite_px = surf, px
        return self._sprite

    def draw(self, lives: int, x: int, y: int) -> pygame.Rect:
        heart = self._heart(self.g.px(HEART_PIXEL))
        gap = self.g.px(6)
        for i in range(max(0, lives)):
            self.g.screen.blit(heart, (x + i * (heart.get_width() + gap), y))
        w = max(0, lives) * (heart.get_width() + gap)
        return pygame.Rect(x, y, w, heart.get_height())


def draw_panel(surface: pygame.Surface, rect: pygame.Rect, *, border=PANEL_BORDER, fill=PANEL_BG) -> None:
    pygame.draw.rect(surface, fill, rect, border_radius=UI_RADIUS)
    pygame.draw.rect(surface, border, rect, width=2, border_radius=UI_RADIUS)


__all__ = ["TimeBar", "PixelHearts", "draw_panel"]
