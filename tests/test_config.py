import json
import random

from pixelmath.config import DEFAULT_CFG, load_config
from pixelmath.engine import RoundEngine
from pixelmath.models import Phase
from pixelmath.settings import GameSettings, clamp_settings, make_runtime_settings


def write_cfg(tmp_path, data):
    path = tmp_path / "config.json"
    path.write_text(data if isinstance(data, str) else json.dumps(data), encoding="utf-8")
    return str(path)


def test_missing_file_gives_defaults(tmp_path):
    cfg = load_config(str(tmp_path / "nope.json"))
    assert cfg["game"] == DEFAULT_CFG["game"]
    assert cfg["shop"]["rarity_weights"] == {"common": 70.0, "rare": 25.0, "epic": 5.0}
    assert cfg["config_path"].endswith("nope.json")


def test_user_values_are_merged_and_clamped(tmp_path):
    path = write_cfg(tmp_path, {
        "game": {"start_lives": 4, "max_inventory": 50, "tick_ms": 1},
        "shop": {"rarity_weights": {"epic": -3}},
        "logging": {"level": "debug"},
    })
    cfg = load_config(path)
    assert cfg["game"]["start_lives"] == 4
    assert cfg["game"]["max_inventory"] == 5
    assert cfg["game"]["tick_ms"] == 10
    assert cfg["game"]["rounds_before_shop"] == 5
    assert cfg["shop"]["rarity_weights"] == {"common": 70.0, "rare": 25.0, "epic": 0.0}
    assert cfg["logging"]["level"] == "DEBUG"


def test_load_does_not_touch_defaults(tmp_path):
    load_config(write_cfg(tmp_path, {"game": {"start_lives": 7}}))
    assert DEFAULT_CFG["game"]["start_lives"] == 3


def test_malformed_json_falls_back_to_defaults(tmp_path):
    cfg = load_config(write_cfg(tmp_path, "{not json"))
    assert cfg["game"] == DEFAULT_CFG["game"]


def test_non_object_top_level_is_ignored(tmp_path):
    cfg = load_config(write_cfg(tmp_path, [1, 2, 3]))
    assert cfg["game"] == DEFAULT_CFG["game"]


def test_bad_value_type_falls_back_to_defaults(tmp_path):
    cfg = load_config(write_cfg(tmp_path, {"game": {"start_lives": "lots"}}))
    assert cfg["game"]["start_lives"] == 3


def test_bad_jitter_and_level_are_replaced(tmp_path):
    cfg = load_config(write_cfg(tmp_path, {
        "shop": {"price_jitter": "wide"},
        "logging": {"level": "chatty"},
    }))
    assert cfg["shop"]["price_jitter"] == [0.9, 1.3]
    assert cfg["logging"]["level"] == "INFO"


def test_min_time_never_exceeds_start_time(tmp_path):
    cfg = load_config(write_cfg(tmp_path, {"game": {"start_time_ms": 2000, "min_time_ms": 5000}}))
    assert cfg["game"]["min_time_ms"] == 2000


def test_make_runtime_settings(tmp_path):
    cfg = load_config(write_cfg(tmp_path, {"game": {"rounds_before_shop": 3}, "shop": {"sell_ratio": 0.25}}))
    s = make_runtime_settings(cfg)
    assert isinstance(s, GameSettings)
    assert s.rounds_before_shop == 3
    assert s.sell_ratio == 0.25
    assert s.start_time_ms == 3000
    assert s.price_jitter == (0.9, 1.3)


def test_clamp_settings():
    s = GameSettings(start_lives=0, min_time_ms=9000, sell_ratio=3.0, offer_min=4, offer_max=2)
    clamp_settings(s)
    assert s.start_lives == 1
    assert s.min_time_ms == s.start_time_ms
    assert s.sell_ratio == 1.0
    assert s.offer_max == 4


def test_infinite_number_falls_back_to_defaults(tmp_path, caplog):
    path = write_cfg(tmp_path, '{"game": {"start_lives": Infinity, "max_inventory": 4}}')
    cfg = load_config(path)
    assert cfg["game"] == DEFAULT_CFG["game"]
    assert "Invalid values" in caplog.text


def test_non_finite_weight_never_reaches_the_shop(tmp_path):
    path = write_cfg(tmp_path, '{"shop": {"rarity_weights": {"epic": Infinity, "rare": NaN}}}')
    cfg = load_config(path)
    assert cfg["shop"]["rarity_weights"] == {"common": 70.0, "rare": 25.0, "epic": 5.0}

    settings = make_runtime_settings(cfg)
    settings.advance_delay_ms = 0
    engine = RoundEngine(settings, rng=random.Random(3), now_fn=lambda: 0.0)
    for _ in range(4):
        engine.submit_answer(str(engine.state.problem.answer))
    assert engine.phase is Phase.SHOP
    assert 1 <= len(engine.state.shop_offers) <= 3


def test_non_finite_sell_ratio_and_jitter(tmp_path):
    cfg = load_config(write_cfg(tmp_path, '{"shop": {"sell_ratio": -Infinity, "price_jitter": [0.9, Infinity]}}'))
    assert cfg["shop"]["sell_ratio"] == 0.5
    assert cfg["shop"]["price_jitter"] == [0.9, 1.3]
