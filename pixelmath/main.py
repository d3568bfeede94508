from __future__ import annotations

import logging
import os
import sys

import pygame

from .config import CFG
from .constants import FPS
from .game import Game
from .input_queue import InputQueue

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, CFG["logging"]["level"], logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )


# ============================== MAIN LOOP ============================== #
def main():
    setup_logging()
    os.environ.setdefault('SDL_VIDEO_CENTERED', "1")
    pygame.init()
    pygame.key.set_repeat(300, 40)
    fullscreen = bool(CFG.get("display", {}).get("fullscreen", False))
    screen = pygame.display.set_mode((1, 1))  # tiny placeholder; real size set next
    game = Game(screen)
    game._set_display_mode(fullscreen)
    pygame.display.set_caption("Pixel Math")
    logger.info("Pixel Math started (config: %s)", CFG.get("config_path"))
    iq = InputQueue()

    while True:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                pygame.quit(); sys.exit(0)
            game.handle_event(event, iq)
        game.update(iq)
        game.draw()
        game.clock.tick(FPS)

if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        pygame.quit(); sys.exit(0)
