"""Texas Hold'em rules engine used by the trainer: cards, hand scoring, betting rounds."""

from .cards import Card, RANKS, SUITS, build_deck, deal, parse_cards, shuffle
from .evaluator import evaluate, grade_starting_hand
from .game import FOLD_OUT, GameEngine
from .models import (
    ActionType,
    GameState,
    HandHistoryEntry,
    HandScore,
    Phase,
    PlayerSeat,
    StartingHandGrade,
    TableConfig,
)

__all__ = [
    "Card",
    "RANKS",
    "SUITS",
    "build_deck",
    "deal",
    "parse_cards",
    "shuffle",
    "evaluate",
    "grade_starting_hand",
    "FOLD_OUT",
    "GameEngine",
    "ActionType",
    "GameState",
    "HandHistoryEntry",
    "HandScore",
    "Phase",
    "PlayerSeat",
    "StartingHandGrade",
    "TableConfig",
]
