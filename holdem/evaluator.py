from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from .cards import Card
from .models import HandScore, StartingHandGrade

HIGH_CARD = "High Card"
PAIR = "Pair"
TWO_PAIR = "Two Pair"
THREE_OF_A_KIND = "Three of a Kind"
STRAIGHT = "Straight"
FLUSH = "Flush"
FULL_HOUSE = "Full House"
FOUR_OF_A_KIND = "Four of a Kind"
STRAIGHT_FLUSH = "Straight Flush"

CATEGORY_ORDER = [
    HIGH_CARD,
    PAIR,
    TWO_PAIR,
    THREE_OF_A_KIND,
    STRAIGHT,
    FLUSH,
    FULL_HOUSE,
    FOUR_OF_A_KIND,
    STRAIGHT_FLUSH,
]
CATEGORY_SPAN = 1_000_000
CATEGORY_BASE = {name: idx * CATEGORY_SPAN for idx, name in enumerate(CATEGORY_ORDER)}

WAITING = "Waiting"


@dataclass(frozen=True)
class _Profile:
    values: List[int]  # every card value, high to low
    counts: Counter
    groups: List[int]  # distinct values ordered by (count, value) descending
    flush_values: List[int]
    straight_high: Optional[int]


def evaluate(hole_cards: Sequence[Card], community_cards: Sequence[Card]) -> HandScore:
    """Score hole + board cards (up to 7). Higher scores are stronger hands."""
    cards = sorted([*hole_cards, *community_cards], key=lambda card: card.value, reverse=True)
    if not cards:
        return HandScore(0, WAITING)
    if len(cards) < 5:
        return _score(HIGH_CARD, [card.value for card in cards])

    profile = _profile(cards)
    for category, classify in _CLASSIFIERS:
        ranks = classify(profile)
        if ranks is not None:
            return _score(category, ranks)
    raise AssertionError("high card classifier always matches")


def category_of(score: int) -> str:
    return CATEGORY_ORDER[min(score // CATEGORY_SPAN, len(CATEGORY_ORDER) - 1)]


def _score(category: str, ranks: Sequence[int]) -> HandScore:
    # Positional base-15 so earlier ranks dominate; padded to five slots.
    tiebreak = 0
    for value in list(ranks)[:5] + [0] * (5 - min(len(ranks), 5)):
        tiebreak = tiebreak * 15 + value
    return HandScore(CATEGORY_BASE[category] + tiebreak, category)


def _profile(cards: Sequence[Card]) -> _Profile:
    values = [card.value for card in cards]
    counts = Counter(values)
    suits = Counter(card.suit for card in cards)
    groups = sorted(counts, key=lambda value: (counts[value], value), reverse=True)

    flush_values: List[int] = []
    for suit, count in suits.items():
        if count >= 5:
            flush_values = [card.value for card in cards if card.suit == suit]
            break

    return _Profile(
        values=values,
        counts=counts,
        groups=groups,
        flush_values=flush_values,
        straight_high=straight_high(values),
    )


def straight_high(values: Sequence[int]) -> Optional[int]:
    distinct = sorted(set(values), reverse=True)
    run = 1
    for idx in range(1, len(distinct)):
        if distinct[idx - 1] - distinct[idx] == 1:
            run += 1
            if run >= 5:
                return distinct[idx] + 4
        else:
            run = 1
    if {14, 2, 3, 4, 5}.issubset(distinct):  # wheel
        return 5
    return None


def _kickers(profile: _Profile, exclude: Sequence[int], count: int) -> List[int]:
    return [value for value in sorted(profile.counts, reverse=True) if value not in exclude][:count]


def _straight_flush(profile: _Profile) -> Optional[List[int]]:
    if not profile.flush_values:
        return None
    high = straight_high(profile.flush_values)
    return [high] if high else None


def _four_of_a_kind(profile: _Profile) -> Optional[List[int]]:
    quads = [value for value in profile.groups if profile.counts[value] == 4]
    if not quads:
        return None
    return [quads[0]] + _kickers(profile, quads[:1], 1)


def _full_house(profile: _Profile) -> Optional[List[int]]:
    trips = [value for value in profile.groups if profile.counts[value] == 3]
    if not trips:
        return None
    pairs = [value for value in profile.groups if profile.counts[value] >= 2 and value != trips[0]]
    if not pairs:
        return None
    return [trips[0], pairs[0]]


def _flush(profile: _Profile) -> Optional[List[int]]:
    return profile.flush_values[:5] if profile.flush_values else None


def _straight(profile: _Profile) -> Optional[List[int]]:
    return [profile.straight_high] if profile.straight_high else None


def _three_of_a_kind(profile: _Profile) -> Optional[List[int]]:
    top = profile.groups[0]
    if profile.counts[top] != 3:
        return None
    return [top] + _kickers(profile, [top], 2)


def _two_pair(profile: _Profile) -> Optional[List[int]]:
    pairs = [value for value in profile.groups if profile.counts[value] == 2]
    if len(pairs) < 2:
        return None
    high, low = pairs[0], pairs[1]
    return [high, low] + _kickers(profile, [high, low], 1)


def _pair(profile: _Profile) -> Optional[List[int]]:
    top = profile.groups[0]
    if profile.counts[top] != 2:
        return None
    return [top] + _kickers(profile, [top], 3)


def _high_card(profile: _Profile) -> Optional[List[int]]:
    return profile.values[:5]


_CLASSIFIERS: List[tuple[str, Callable[[_Profile], Optional[List[int]]]]] = [
    (STRAIGHT_FLUSH, _straight_flush),
    (FOUR_OF_A_KIND, _four_of_a_kind),
    (FULL_HOUSE, _full_house),
    (FLUSH, _flush),
    (STRAIGHT, _straight),
    (THREE_OF_A_KIND, _three_of_a_kind),
    (TWO_PAIR, _two_pair),
    (PAIR, _pair),
    (HIGH_CARD, _high_card),
]


# Starting hands ---------------------------------------------------------

_HIGH_CARD_POINTS = {14: 10.0, 13: 8.0, 12: 7.0, 11: 6.0}
_DISTANCE_POINTS = {1: 1, 2: -1, 3: -2, 4: -4}

GRADE_THRESHOLDS = [
    (20, "S", "Premium hand. Raise and build the pot."),
    (15, "A", "Strong hand. Raise from any position."),
    (10, "B", "Good hand. Play it, but respect big raises."),
    (7, "C", "Playable in late position or in a cheap pot."),
    (5, "D", "Marginal. Fold to a raise, limp only when it is cheap."),
]
FAIL_GRADE = ("F", "Weak hand. Folding is usually the right move.")


def grade_starting_hand(hand: Sequence[Card]) -> StartingHandGrade:
    """Chen-style pre-flop score for exactly two hole cards."""
    if len(hand) != 2:
        raise ValueError("Starting hand must contain exactly two cards")
    high, low = sorted(hand, key=lambda card: card.value, reverse=True)
    suited = high.suit == low.suit

    points = _HIGH_CARD_POINTS.get(high.value, high.value / 2)
    if high.value == low.value:
        points = max(points * 2, 5)
    else:
        distance = high.value - low.value
        if suited:
            points += 2
        points += _DISTANCE_POINTS.get(distance, -5)
        if distance <= 1 and suited and high.value < 12:
            points += 1

    score = math.ceil(points)
    for threshold, grade, tip in GRADE_THRESHOLDS:
        if score >= threshold:
            return StartingHandGrade(score, grade, tip)
    grade, tip = FAIL_GRADE
    return StartingHandGrade(score, grade, tip)
