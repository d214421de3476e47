from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Sequence, Tuple

RANKS = "AKQJT98765432"
SUITS = "hdcs"

RANK_VALUE = {rank: idx for idx, rank in enumerate(reversed(RANKS), start=2)}
SUIT_SYMBOL = {"h": "♥", "d": "♦", "c": "♣", "s": "♠"}


@dataclass(frozen=True)
class Card:
    rank: str
    suit: str

    def __post_init__(self) -> None:
        if self.rank not in RANKS:
            raise ValueError(f"Invalid rank: {self.rank}")
        if self.suit not in SUITS:
            raise ValueError(f"Invalid suit: {self.suit}")

    @property
    def value(self) -> int:
        return RANK_VALUE[self.rank]

    @property
    def label(self) -> str:
        return f"{self.rank}{self.suit}"

    @property
    def pretty(self) -> str:
        rank = "10" if self.rank == "T" else self.rank
        return f"{rank}{SUIT_SYMBOL[self.suit]}"

    def __str__(self) -> str:
        return self.label


def build_deck() -> Tuple[Card, ...]:
    """Canonical order: suit by suit, deuce to ace."""
    return tuple(Card(rank, suit) for suit in SUITS for rank in RANKS[::-1])


def shuffle(deck: Sequence[Card], rng: random.Random) -> Tuple[Card, ...]:
    shuffled = list(deck)
    rng.shuffle(shuffled)
    return tuple(shuffled)


def deal(deck: Sequence[Card], count: int) -> Tuple[List[Card], Tuple[Card, ...]]:
    """Pop ``count`` cards off the tail. Returns the cards and what is left."""
    if len(deck) < count:
        raise ValueError("Not enough cards left in deck")
    remaining = list(deck)
    cards = [remaining.pop() for _ in range(count)]
    return cards, tuple(remaining)


def cards_to_labels(cards: Sequence[Card]) -> List[str]:
    return [card.label for card in cards]


def parse_label(label: str) -> Card:
    if len(label) != 2:
        raise ValueError(f"Invalid card label: {label}")
    return Card(label[0].upper(), label[1].lower())


def parse_cards(labels: Sequence[str]) -> List[Card]:
    return [parse_label(label) for label in labels]
