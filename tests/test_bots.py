from dataclasses import replace

import pytest

from holdem.models import ActionType, Phase, PlayerSeat
from trainer.bots import NEUTRAL, PERSONALITIES, BotDecision, Personality, decide, hand_strength, profile_for

from .helpers import FixedRandom, create_engine, make_players, with_cards


def preflop_state(seats=3):
    engine = create_engine()
    return engine.setup_hand(make_players(seats), dealer_index=-1, hand_count=0)


def profiles(name):
    return {"s0": PERSONALITIES[name], "s2": PERSONALITIES[name]}


def test_rock_folds_trash_facing_a_bet():
    state = with_cards(preflop_state(), 0, ["7c", "2h"])
    decision = decide(0, state, FixedRandom(0.5), profiles("Conservative Rock"))
    assert decision == BotDecision(ActionType.FOLD)


def test_calling_station_calls_weak_hand_preflop():
    state = with_cards(preflop_state(), 0, ["9c", "8d"])
    decision = decide(0, state, FixedRandom(0.5), profiles("Calling Station"))
    assert decision == BotDecision(ActionType.CALL, 20)


def test_maniac_raises_premium_hand_by_pot_fraction():
    state = with_cards(preflop_state(), 0, ["As", "Ah"])
    decision = decide(0, state, FixedRandom(0.5), profiles("Aggressive Maniac"))
    # uniform(0.5, 1.5) lands on 1.0 with a fixed roll of 0.5, so the raise is one pot.
    assert decision == BotDecision(ActionType.RAISE, 20 + 30)


def test_big_blind_checks_when_nothing_to_call():
    state = with_cards(preflop_state(), 2, ["7c", "2h"])
    assert state.to_call(2) == 0
    decision = decide(2, state, FixedRandom(0.5))
    assert decision == BotDecision(ActionType.CHECK, 0)


def test_postflop_weak_hand_uses_bluff_rate_to_stay_in():
    state = with_cards(preflop_state(), 0, ["7c", "2h"], board=["Ks", "9d", "4h"])
    state = replace(state, phase=Phase.FLOP)
    cannon = profiles("Loose Cannon")

    # Pre-flop a 0.5 roll is under the 0.65 vpip; post-flop it is over the 0.25 bluff rate.
    assert decide(0, state, FixedRandom(0.5), cannon).action == ActionType.FOLD
    preflop = replace(state, phase=Phase.PRE_FLOP, community_cards=())
    assert decide(0, preflop, FixedRandom(0.5), cannon).action == ActionType.CALL


def test_bluff_roll_boosts_strength_out_of_the_fold_zone():
    state = with_cards(preflop_state(), 0, ["7c", "2h"], board=["Ks", "9d", "4h"])
    state = replace(state, phase=Phase.FLOP)
    # 0.2 is under the maniac's bluff rate, so high card plays like a medium hand.
    decision = decide(0, state, FixedRandom(0.2), profiles("Aggressive Maniac"))
    assert decision.action == ActionType.CALL


def test_short_stack_calls_instead_of_raising():
    state = with_cards(preflop_state(), 0, ["As", "Ah"])
    players = list(state.players)
    players[0] = replace(players[0], chips=15)
    state = replace(state, players=tuple(players))
    decision = decide(0, state, FixedRandom(0.1), profiles("Aggressive Maniac"))
    assert decision == BotDecision(ActionType.CALL, 15)


@pytest.mark.parametrize(
    "hole, board, expected",
    [
        (["As", "Ad"], ["Kc", "9h", "4s"], 0.6),
        (["Ks", "Kd"], ["4c", "4h", "9s"], 0.7),
        (["9c", "9d"], ["9h", "Kh", "2s"], 0.8),
        (["Ah", "7h"], ["Kh", "9h", "2h"], 0.95),
    ],
)
def test_postflop_strength_bands(hole, board, expected):
    state = replace(with_cards(preflop_state(), 0, hole, board=board), phase=Phase.FLOP)
    assert hand_strength(state.players[0], state) == pytest.approx(expected)


def test_preflop_strength_is_normalized_grade():
    state = with_cards(preflop_state(), 0, ["As", "Ah"])
    assert hand_strength(state.players[0], state) == pytest.approx(20 / 25)
    state = with_cards(state, 0, ["7c", "2h"])
    assert hand_strength(state.players[0], state) == 0.0


def test_profile_lookup_prefers_overrides_then_personality():
    seat = PlayerSeat(seat_id="bot_1", name="Cody", chips=100, personality="Loose Cannon")
    assert profile_for(seat) is PERSONALITIES["Loose Cannon"]
    override = {"bot_1": PERSONALITIES["Calling Station"]}
    assert profile_for(seat, override) is PERSONALITIES["Calling Station"]
    assert profile_for(replace(seat, personality=None)) is NEUTRAL


def test_preflop_bluff_draw_keeps_weak_hand_in_despite_tight_vpip():
    bluffer = Personality("Tight Bluffer", vpip=0.05, aggression=0.0, bluff=0.5)
    state = with_cards(preflop_state(), 0, ["7c", "2h"])
    # 0.4 beats the bluff rate; the boosted 0.3 strength is still a weak hand.
    decision = decide(0, state, FixedRandom(0.4), {"s0": bluffer})
    assert decision == BotDecision(ActionType.CALL, 20)

    decision = decide(0, state, FixedRandom(0.6), {"s0": bluffer})
    assert decision == BotDecision(ActionType.FOLD)
