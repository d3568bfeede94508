# pixelmath/config.py
from __future__ import annotations
import json, logging, math, os
from typing import Dict, Any, Optional

from pathlib import Path

PACKAGE_DIR = os.path.dirname(__file__)
CONFIG_PATH = os.path.join(PACKAGE_DIR, "config.json")

logger = logging.getLogger(__name__)

DEFAULT_CFG: Dict[str, Any] = {
    "display": {"fullscreen": False, "fps": 60, "windowed_size": [900, 640]},
    "game": {
        "start_lives": 3,
        "rounds_before_shop": 5,
        "max_inventory": 3,
        "start_time_ms": 3000,
        "min_time_ms": 1000,
        "max_time_ms": 10000,
        "time_decrease_after_shop": 200,
        "base_point": 10,
        "tick_ms": 50,
        "advance_delay_ms": 150,
    },
    "shop": {
        "rarity_weights": {"common": 70, "rare": 25, "epic": 5},
        "offer_min": 1,
        "offer_max": 3,
        "price_jitter": [0.9, 1.3],
        "min_price": 10,
        "sell_ratio": 0.5,
    },
    "logging": {"level": "INFO"},
}

def _deepcopy(obj):
    return json.loads(json.dumps(obj))

def _merge(dst: dict, src: dict) -> dict:
    for k, v in src.items():
        if isinstance(v, dict) and isinstance(dst.get(k), dict):
            _merge(dst[k], v)
        else:
            dst[k] = v
    return dst

def _finite(value) -> float:
    v = float(value)
    if not math.isfinite(v):
        raise ValueError(f"non-finite value {value!r}")
    return v

def _clamp_int(value, lo: int, hi: int) -> int:
    return int(max(lo, min(hi, int(_finite(value)))))

def _sanitize_cfg(cfg: dict) -> dict:
    g = cfg["game"]
    g["start_lives"]              = _clamp_int(g["start_lives"], 1, 9)
    g["rounds_before_shop"]       = _clamp_int(g["rounds_before_shop"], 1, 100)
    g["max_inventory"]            = _clamp_int(g["max_inventory"], 1, 5)
    g["start_time_ms"]            = _clamp_int(g["start_time_ms"], 200, 60000)
    g["min_time_ms"]              = _clamp_int(g["min_time_ms"], 100, g["start_time_ms"])
    g["max_time_ms"]              = _clamp_int(g["max_time_ms"], g["start_time_ms"], 120000)
    g["time_decrease_after_shop"] = _clamp_int(g["time_decrease_after_shop"], 0, 10000)
    g["base_point"]               = _clamp_int(g["base_point"], 0, 1000)
    g["tick_ms"]                  = _clamp_int(g["tick_ms"], 10, 500)
    g["advance_delay_ms"]         = _clamp_int(g["advance_delay_ms"], 0, 5000)

    s = cfg["shop"]
    weights = s.get("rarity_weights") or {}
    s["rarity_weights"] = {
        k: max(0.0, _finite(weights.get(k, DEFAULT_CFG["shop"]["rarity_weights"][k])))
        for k in DEFAULT_CFG["shop"]["rarity_weights"]
    }
    s["offer_min"] = _clamp_int(s["offer_min"], 1, 6)
    s["offer_max"] = _clamp_int(s["offer_max"], s["offer_min"], 6)
    jitter = s.get("price_jitter", [0.9, 1.3])
    if isinstance(jitter, (list, tuple)) and len(jitter) == 2 and all(isinstance(x, (int, float)) for x in jitter):
        lo = max(0.1, min(5.0, _finite(jitter[0])))
        hi = max(lo, min(5.0, _finite(jitter[1])))
        s["price_jitter"] = [lo, hi]
    else:
        s["price_jitter"] = [0.9, 1.3]
    s["min_price"]  = _clamp_int(s["min_price"], 0, 100000)
    s["sell_ratio"] = max(0.0, min(1.0, _finite(s["sell_ratio"])))

    d = cfg["display"]
    d["fps"] = _clamp_int(d.get("fps", 60), 30, 240)
    ws = d.get("windowed_size", [900, 640])
    if isinstance(ws, (list, tuple)) and len(ws) == 2 and all(isinstance(x, (int, float)) for x in ws):
        w, h = _clamp_int(ws[0], 200, 10000), _clamp_int(ws[1], 200, 10000)
        d["windowed_size"] = [w, h]
    else:
        d["windowed_size"] = [900, 640]

    lg = cfg.setdefault("logging", {})
    level = str(lg.get("level", "INFO")).upper()
    lg["level"] = level if level in ("DEBUG", "INFO", "WARNING", "ERROR") else "INFO"

    return cfg

def load_config(path: Optional[str] = None) -> dict:
    cfg = _deepcopy(DEFAULT_CFG)
    path = path or CONFIG_PATH
    try:
        with open(path, "r", encoding="utf-8") as f:
            user = json.load(f)
        if isinstance(user, dict):
            _merge(cfg, user)
        else:
            logger.warning("Ignoring %s: top level is not an object", path)
    except FileNotFoundError:
        pass
    except (OSError, ValueError) as e:
        logger.warning("Could not read config %s: %s", path, e)
    try:
        cfg = _sanitize_cfg(cfg)
    except (AttributeError, KeyError, OverflowError, TypeError, ValueError) as e:
        logger.warning("Invalid values in config %s (%s), using defaults", path, e)
        cfg = _sanitize_cfg(_deepcopy(DEFAULT_CFG))
    cfg["config_path"] = str(Path(path).resolve())
    return cfg

CFG = load_config()
