import random
from dataclasses import replace

import pytest

from pixelmath.catalog import CATALOG, ShopOffer
from pixelmath.effects import Effect
from pixelmath.engine import RoundEngine, parse_answer
from pixelmath.enums import EffectType, Op
from pixelmath.inventory import InventoryItem
from pixelmath.models import Outcome, Phase, Problem
from pixelmath.settings import GameSettings


def answer_right(engine):
    return engine.submit_answer(str(engine.state.problem.answer))


def answer_wrong(engine):
    return engine.submit_answer(str(engine.state.problem.answer + 1))


def give(engine, def_id, paid=100):
    engine.state.inventory.add(InventoryItem(CATALOG.get(def_id), paid))


def test_initial_state(engine):
    snap = engine.snapshot()
    assert (snap.lives, snap.score, snap.round, snap.difficulty) == (3, 0, 1, 1)
    assert snap.phase is Phase.ANSWERING
    assert snap.problem is not None and snap.problem.op is Op.ADD
    assert snap.countdown_ms == snap.time_limit_ms == 3000
    assert snap.round_active
    assert snap.inventory == () and snap.effects == ()


def test_correct_answer_scores_and_advances(engine):
    problem = engine.state.problem
    assert answer_right(engine) is Outcome.CORRECT
    s = engine.state
    assert s.score == 10 + abs(problem.answer)
    assert s.last_gain == s.score
    assert s.correct_count == 1
    assert s.round == 2
    assert s.lives == 3
    assert engine.round_active
    assert s.countdown_ms == 3000


def test_wrong_answer_costs_a_life(engine):
    assert answer_wrong(engine) is Outcome.WRONG
    assert engine.state.lives == 2
    assert engine.state.round == 2
    assert engine.state.score == 0


@pytest.mark.parametrize("text", ["", "   ", "abc", "4+3", "--1"])
def test_non_numeric_answer_is_wrong(engine, text):
    assert engine.submit_answer(text) is Outcome.WRONG
    assert engine.state.lives == 2


def test_parse_answer():
    assert parse_answer(" 12 ") == 12
    assert parse_answer("-3") == -3
    assert parse_answer("7.0") == 7
    assert parse_answer("7.5") == 7.5
    assert parse_answer("x") is None
    assert parse_answer("") is None


@pytest.mark.parametrize("text", ["1_000", "nan", "inf", "-inf", "1e1", "\u0663", "+5", "5.", ".5", "0x10"])
def test_parse_answer_accepts_plain_numbers_only(text):
    assert parse_answer(text) is None


def test_exotic_numeric_text_is_a_wrong_answer(engine):
    engine.state = replace(engine.state, problem=Problem(a=6, b=4, op=Op.ADD, answer=10))
    assert engine.submit_answer("1e1") is Outcome.WRONG
    assert engine.state.lives == 2


def test_shop_opens_instead_of_fifth_round(engine):
    for _ in range(3):
        answer_right(engine)
    assert engine.state.round == 4
    answer_right(engine)
    s = engine.state
    assert s.round == 5
    assert s.phase is Phase.SHOP
    assert 1 <= len(s.shop_offers) <= 3
    assert not engine.round_active
    assert engine.submit_answer("1") is None
    assert engine.forfeit() is None


def test_lost_rounds_also_lead_to_the_shop(engine):
    answer_right(engine)
    answer_wrong(engine)
    answer_right(engine)
    answer_wrong(engine)
    assert engine.state.phase is Phase.SHOP
    assert engine.state.lives == 1


def test_close_shop_raises_difficulty_and_cuts_time(engine):
    for _ in range(4):
        answer_right(engine)
    assert engine.close_shop() is True
    s = engine.state
    assert s.phase is Phase.ANSWERING
    assert s.difficulty == 2
    assert s.time_limit_ms == 2800
    assert s.shop_offers == []
    assert engine.round_active
    assert s.countdown_ms == 2800


def test_close_shop_floors_time_limit(clock):
    settings = GameSettings(start_time_ms=1100, min_time_ms=1000, advance_delay_ms=0)
    engine = RoundEngine(settings, rng=random.Random(1), now_fn=clock)
    for _ in range(4):
        answer_right(engine)
    engine.close_shop()
    assert engine.state.time_limit_ms == 1000
    for _ in range(5):
        answer_right(engine)
    assert engine.state.phase is Phase.SHOP
    engine.close_shop()
    assert engine.state.time_limit_ms == 1000
    assert engine.state.difficulty == 3


def test_close_shop_outside_shop_is_ignored(engine):
    before = engine.state
    assert engine.close_shop() is False
    assert engine.state is before


def test_countdown_ticks_in_fixed_steps(engine, clock):
    clock.advance_ms(120)
    engine.update()
    assert engine.state.countdown_ms == 2900
    clock.advance_ms(2830)
    engine.update()
    assert engine.state.countdown_ms == 50
    assert engine.state.lives == 3


def test_timeout_costs_a_life(engine, clock):
    clock.advance_ms(3000)
    engine.update()
    s = engine.state
    assert s.last_outcome is Outcome.TIMEOUT
    assert s.lives == 2
    assert s.round == 2
    assert engine.round_active


def test_timeout_on_last_life_ends_game(engine, clock):
    answer_wrong(engine)
    answer_wrong(engine)
    assert engine.state.lives == 1
    frozen_round = engine.state.round

    clock.advance_ms(3000)
    engine.update()
    s = engine.state
    assert s.phase is Phase.GAME_OVER
    assert s.lives == 0
    assert s.round == frozen_round
    assert not engine.round_active

    clock.advance_ms(10_000)
    engine.update()
    assert engine.submit_answer("1") is None
    assert engine.state.round == frozen_round
    assert engine.state.phase is Phase.GAME_OVER


def test_late_poll_cannot_resolve_an_answered_round(engine, clock):
    clock.advance_ms(2000)
    answer_right(engine)
    clock.advance_ms(1500)  # the first countdown would be over by now
    engine.update()
    assert engine.state.lives == 3
    assert engine.state.last_outcome is Outcome.CORRECT
    assert engine.state.round == 2


def test_answer_after_clock_ran_out_counts_as_timeout(engine, clock):
    clock.advance_ms(3000)
    assert answer_right(engine) is Outcome.TIMEOUT
    assert engine.state.score == 0
    assert engine.state.lives == 2


def test_double_points_for_two_rounds(engine):
    engine.state.effects.push(Effect(EffectType.DOUBLE, rounds_left=2))
    engine.state = replace(engine.state, problem=Problem(a=3, b=4, op=Op.ADD, answer=7))

    answer_right(engine)
    assert engine.state.score == 34
    assert [(e.type, e.rounds_left) for e in engine.state.effects] == [(EffectType.DOUBLE, 1)]

    second = engine.state.problem.answer
    answer_right(engine)
    assert engine.state.last_gain == 2 * (10 + abs(second))
    assert len(engine.state.effects) == 0

    third = engine.state.problem.answer
    answer_right(engine)
    assert engine.state.last_gain == 10 + abs(third)


def test_time_bonus_adds_tenth_of_remaining_ms(engine, clock):
    engine.state.effects.push(Effect(EffectType.TIME_BONUS, rounds_left=1))
    clock.advance_ms(1000)
    problem = engine.state.problem
    answer_right(engine)
    assert engine.state.last_gain == 10 + abs(problem.answer) + 200
    assert not engine.state.effects.has(EffectType.TIME_BONUS)


def test_double_and_time_bonus_compose(engine, clock):
    engine.state.effects.push(Effect(EffectType.DOUBLE, rounds_left=1))
    engine.state.effects.push(Effect(EffectType.TIME_BONUS, rounds_left=1))
    engine.state = replace(engine.state, problem=Problem(a=2, b=3, op=Op.ADD, answer=5))
    clock.advance_ms(500)
    answer_right(engine)
    assert engine.state.last_gain == 30 + 250


def test_add_time_applies_at_next_round_start(engine):
    give(engine, "add_time_ms")
    assert engine.use_item(0) is True
    assert engine.state.time_limit_ms == 3000
    assert engine.state.effects.has(EffectType.ADD_TIME)

    answer_right(engine)
    assert engine.state.time_limit_ms == 3500
    assert engine.state.countdown_ms == 3500
    assert not engine.state.effects.has(EffectType.ADD_TIME)

    answer_right(engine)
    assert engine.state.time_limit_ms == 3500


def test_add_time_is_capped(clock):
    engine = RoundEngine(GameSettings(max_time_ms=3200, advance_delay_ms=0), rng=random.Random(2), now_fn=clock)
    give(engine, "add_time_ms")
    engine.use_item(0)
    answer_wrong(engine)
    assert engine.state.time_limit_ms == 3200


def test_add_time_used_in_shop_applies_after_the_cut(engine):
    for _ in range(4):
        answer_right(engine)
    give(engine, "add_time_ms")
    engine.use_item(0)
    engine.close_shop()
    assert engine.state.time_limit_ms == 3000 - 200 + 500


def test_forfeit_reveals_answer_and_costs_a_life(engine):
    problem = engine.state.problem
    assert engine.forfeit() is Outcome.FORFEIT
    s = engine.state
    assert s.lives == 2
    assert s.revealed_answer == problem.answer
    assert s.last_outcome is Outcome.FORFEIT
    assert s.round == 2
    assert engine.round_active
    assert engine.snapshot().revealed_answer == problem.answer


def test_revealed_answer_clears_when_next_round_resolves(engine):
    engine.forfeit()
    assert engine.state.revealed_answer is not None
    answer_right(engine)
    assert engine.state.revealed_answer is None


def test_revealed_answer_survives_feedback_delay(clock):
    engine = RoundEngine(GameSettings(advance_delay_ms=150), rng=random.Random(4), now_fn=clock)
    problem = engine.state.problem
    engine.forfeit()
    clock.advance_ms(200)
    engine.update()
    assert engine.round_active
    assert engine.state.revealed_answer == problem.answer


def test_buy_in_shop(engine):
    for _ in range(4):
        answer_right(engine)
    engine.state = replace(engine.state, score=100, shop_offers=[ShopOffer(CATALOG.get("extra_life"), 120)])

    assert engine.buy(0) is False
    assert engine.state.score == 100
    assert engine.state.notice == "Not enough points"
    assert len(engine.state.inventory) == 0

    engine.state = replace(engine.state, score=150)
    assert engine.buy(0) is True
    assert engine.state.score == 30
    assert engine.state.notice == ""
    assert engine.state.shop_offers == []
    assert engine.buy(0) is False


def test_buy_outside_shop_is_ignored(engine):
    engine.state = replace(engine.state, score=1000, shop_offers=[ShopOffer(CATALOG.get("extra_life"), 120)])
    assert engine.buy(0) is False
    assert engine.state.score == 1000


def test_sell_through_engine(engine):
    give(engine, "instant_points", paid=200)
    assert engine.sell_item(0) is True
    assert engine.state.score == 100
    assert engine.sell_item(0) is False


def test_inventory_commands_ignored_after_game_over(engine):
    give(engine, "extra_life")
    for _ in range(3):
        answer_wrong(engine)
    assert engine.state.phase is Phase.GAME_OVER
    assert engine.use_item(0) is False
    assert engine.sell_item(0) is False
    assert engine.state.lives == 0


def test_restart_resets_everything(engine):
    give(engine, "double_2")
    engine.use_item(0)
    give(engine, "extra_life")
    answer_right(engine)
    for _ in range(3):
        answer_wrong(engine)
    assert engine.state.phase is Phase.GAME_OVER

    engine.restart()
    s = engine.state
    assert (s.lives, s.score, s.round, s.difficulty, s.correct_count) == (3, 0, 1, 1, 0)
    assert s.time_limit_ms == 3000
    assert len(s.inventory) == 0 and len(s.effects) == 0
    assert s.phase is Phase.ANSWERING
    assert engine.round_active


def test_feedback_delay_before_next_problem(clock):
    engine = RoundEngine(GameSettings(advance_delay_ms=150), rng=random.Random(3), now_fn=clock)
    first = engine.state.problem
    answer_right(engine)
    assert engine.state.round == 2
    assert not engine.round_active
    assert engine.state.problem == first
    assert engine.submit_answer(str(first.answer)) is None

    clock.advance_ms(100)
    engine.update()
    assert not engine.round_active

    clock.advance_ms(60)
    engine.update()
    assert engine.round_active
    assert engine.state.countdown_ms == 3000


def test_random_play_keeps_invariants(clock):
    rng = random.Random(99)
    engine = RoundEngine(GameSettings(advance_delay_ms=0), rng=random.Random(5), now_fn=clock)
    for _ in range(2000):
        roll = rng.random()
        if roll < 0.35:
            if engine.round_active:
                answer_right(engine)
        elif roll < 0.45:
            engine.submit_answer("?")
        elif roll < 0.55:
            clock.advance_ms(rng.choice([50, 400, 3000]))
            engine.update()
        elif roll < 0.70:
            engine.buy(rng.randrange(3))
        elif roll < 0.78:
            engine.use_item(rng.randrange(4))
        elif roll < 0.84:
            engine.sell_item(rng.randrange(4))
        elif roll < 0.97:
            engine.close_shop()
        else:
            if engine.phase is Phase.GAME_OVER:
                engine.restart()

        s = engine.state
        assert s.score >= 0
        assert s.lives >= 0
        assert len(s.inventory) <= 3
        assert (s.lives == 0) == (s.phase is Phase.GAME_OVER)
        assert s.time_limit_ms >= 1000
        if s.phase is not Phase.ANSWERING:
            assert not engine.round_active
