from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Mapping, Optional

from holdem.evaluator import (
    CATEGORY_SPAN,
    HIGH_CARD,
    PAIR,
    THREE_OF_A_KIND,
    TWO_PAIR,
    category_of,
    evaluate,
    grade_starting_hand,
)
from holdem.models import ActionType, GameState, Phase, PlayerSeat

WEAK_THRESHOLD = 0.35
RAISE_THRESHOLD = 0.6
BLUFF_BOOST = 0.3
PREFLOP_SCORE_CAP = 25


@dataclass(frozen=True)
class Personality:
    name: str
    vpip: float  # how loosely it enters pots
    aggression: float  # how often it raises when it likes its hand
    bluff: float  # how often it plays a hand stronger than it is


@dataclass(frozen=True)
class BotDecision:
    action: ActionType
    amount: Optional[int] = None


NEUTRAL = Personality("Neutral", vpip=0.4, aggression=0.3, bluff=0.1)

PERSONALITIES = {
    profile.name: profile
    for profile in (
        Personality("Conservative Rock", vpip=0.15, aggression=0.2, bluff=0.03),
        Personality("Loose Cannon", vpip=0.65, aggression=0.5, bluff=0.25),
        Personality("Calling Station", vpip=0.75, aggression=0.1, bluff=0.05),
        Personality("Aggressive Maniac", vpip=0.6, aggression=0.8, bluff=0.35),
    )
}


def profile_for(seat: PlayerSeat, profiles: Optional[Mapping[str, Personality]] = None) -> Personality:
    if profiles and seat.seat_id in profiles:
        return profiles[seat.seat_id]
    if seat.personality in PERSONALITIES:
        return PERSONALITIES[seat.personality]
    return NEUTRAL


def hand_strength(seat: PlayerSeat, state: GameState) -> float:
    """Normalized 0..1 strength of a seat's holding on the current board."""
    if len(seat.hole_cards) < 2:
        return 0.0
    if state.phase == Phase.PRE_FLOP or not state.community_cards:
        score = grade_starting_hand(seat.hole_cards).score
        return min(max(score, 0), PREFLOP_SCORE_CAP) / PREFLOP_SCORE_CAP

    score = evaluate(seat.hole_cards, state.community_cards).score
    category = category_of(score)
    # Leading rank sits in the highest base-15 slot of the tie-break.
    top_rank = (score % CATEGORY_SPAN) // 15**4
    if category == HIGH_CARD:
        return 0.1 + 0.1 * (top_rank - 2) / 12
    if category == PAIR:
        return 0.4 + 0.2 * (top_rank - 2) / 12
    if category == TWO_PAIR:
        return 0.7
    if category == THREE_OF_A_KIND:
        return 0.8
    return 0.95  # straight or better


def decide(
    seat_idx: int,
    state: GameState,
    rng: random.Random,
    profiles: Optional[Mapping[str, Personality]] = None,
) -> BotDecision:
    """Pick FOLD/CHECK/CALL/RAISE for the seat using its personality."""
    seat = state.players[seat_idx]
    profile = profile_for(seat, profiles)
    to_call = state.to_call(seat_idx)

    strength = hand_strength(seat, state)
    if rng.random() < profile.bluff:
        strength = min(1.0, strength + BLUFF_BOOST)

    if to_call > 0 and strength < WEAK_THRESHOLD:
        stays = rng.random() < profile.bluff
        if not stays and state.phase == Phase.PRE_FLOP:
            # Loose profiles still enter pots voluntarily.
            stays = rng.random() < profile.vpip
        if not stays:
            return BotDecision(ActionType.FOLD)

    if seat.chips > to_call and rng.random() < profile.aggression and strength > RAISE_THRESHOLD:
        raise_by = max(int(state.pot * rng.uniform(0.5, 1.5)), state.min_bet)
        return BotDecision(ActionType.RAISE, to_call + raise_by)

    if to_call > 0:
        return BotDecision(ActionType.CALL, min(to_call, seat.chips))
    return BotDecision(ActionType.CHECK, 0)
