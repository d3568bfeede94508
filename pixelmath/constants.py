from __future__ import annotations

from pathlib import Path

from .config import CFG

PKG_DIR = Path(__file__).resolve().parent


# --- Game rules -------------------------------------------------------------
START_LIVES = int(CFG["game"]["start_lives"])
ROUNDS_BEFORE_SHOP = int(CFG["game"]["rounds_before_shop"])
MAX_INVENTORY = int(CFG["game"]["max_inventory"])
BASE_POINT = int(CFG["game"]["base_point"])

# --- Round tempo (milliseconds) ---------------------------------------------
START_TIME_MS = int(CFG["game"]["start_time_ms"])
MIN_TIME_MS = int(CFG["game"]["min_time_ms"])
MAX_TIME_MS = int(CFG["game"]["max_time_ms"])          # cap for AddTime bonuses
TIME_DECREASE_AFTER_SHOP = int(CFG["game"]["time_decrease_after_shop"])
TICK_MS = int(CFG["game"]["tick_ms"])                  # countdown granularity
ADVANCE_DELAY_MS = int(CFG["game"]["advance_delay_ms"])  # feedback pause between rounds

# --- Shop -------------------------------------------------------------------
RARITY_WEIGHTS = dict(CFG["shop"]["rarity_weights"])
OFFER_MIN = int(CFG["shop"]["offer_min"])
OFFER_MAX = int(CFG["shop"]["offer_max"])
PRICE_JITTER = (float(CFG["shop"]["price_jitter"][0]), float(CFG["shop"]["price_jitter"][1]))
MIN_PRICE = int(CFG["shop"]["min_price"])
SELL_RATIO = float(CFG["shop"]["sell_ratio"])

# Problem operand range: max = OPERAND_BASE + OPERAND_STEP * difficulty
OPERAND_BASE = 5
OPERAND_STEP = 5
OPERAND_B_CAP = 10

# --- Palette ----------------------------------------------------------------
BG = (18, 20, 28)
INK = (235, 235, 235)
ACCENT = (255, 210, 90)
DIM = (150, 158, 175)
GOOD = (110, 220, 120)
BAD = (230, 90, 90)
PANEL_BG = (30, 34, 46)
PANEL_BORDER = (90, 100, 125)

RARITY_COLORS = {
    "common": (200, 200, 200),
    "rare":   (90, 170, 255),
    "epic":   (200, 120, 255),
}

# --- Layout -----------------------------------------------------------------
FPS = int(CFG.get("display", {}).get("fps", 60))
WINDOWED_DEFAULT_SIZE = tuple(CFG["display"].get("windowed_size", [900, 640]))
PADDING = 24
UI_RADIUS = 8
TEXT_SHADOW_OFFSET = (2, 2)

FONT_PATH = str(PKG_DIR / "assets" / "fonts" / "pixel.ttf")
FONT_SIZE_SMALL = 18
FONT_SIZE_MID = 26
FONT_SIZE_BIG = 56

# --- Timer bar --------------------------------------------------------------
TIMER_BAR_WIDTH_FACTOR = 0.60
TIMER_BAR_HEIGHT = 14
TIMER_BAR_BG = (40, 40, 50)
TIMER_BAR_FILL = (76, 175, 80)
TIMER_BAR_BORDER = (160, 180, 200)
TIMER_BAR_BORDER_W = 2
TIMER_BAR_WARN_COLOR = (255, 170, 80)
TIMER_BAR_CRIT_COLOR = (220, 80, 80)
TIMER_BAR_WARN_TIME = 0.50
TIMER_BAR_CRIT_TIME = 0.25

# --- Lives ------------------------------------------------------------------
HEART_PIXEL = 4
HEART_COLOR = (220, 40, 60)
HEART = [
    [0, 1, 1, 0, 0, 1, 1, 0],
    [1, 1, 1, 1, 1, 1, 1, 1],
    [1, 1, 1, 1, 1, 1, 1, 1],
    [0, 1, 1, 1, 1, 1, 1, 0],
    [0, 0, 1, 1, 1, 1, 0, 0],
    [0, 0, 0, 1, 1, 0, 0, 0],
]
