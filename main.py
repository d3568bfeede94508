from __future__ import annotations

import sys

import pygame

from pixelmath.main import main

if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        pygame.quit(); sys.exit(0)
