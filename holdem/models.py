from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from .cards import Card


class Phase(str, Enum):
    MENU = "MENU"
    SHOP = "SHOP"
    PRE_FLOP = "PRE_FLOP"
    FLOP = "FLOP"
    TURN = "TURN"
    RIVER = "RIVER"
    SHOWDOWN = "SHOWDOWN"
    GAME_OVER = "GAME_OVER"


BETTING_PHASES = (Phase.PRE_FLOP, Phase.FLOP, Phase.TURN, Phase.RIVER)


class ActionType(str, Enum):
    FOLD = "FOLD"
    CHECK = "CHECK"
    CALL = "CALL"
    RAISE = "RAISE"


@dataclass
class TableConfig:
    seats: int = 8
    starting_stack: int = 1_000
    sb: int = 10
    bb: int = 20
    bot_delay_ms: int = 0


@dataclass(frozen=True)
class PlayerSeat:
    seat_id: str
    name: str
    chips: int
    hole_cards: Tuple[Card, ...] = ()
    current_bet: int = 0
    is_active: bool = True
    is_all_in: bool = False
    is_human: bool = False
    action_message: Optional[str] = None
    personality: Optional[str] = None

    @property
    def can_act(self) -> bool:
        return self.is_active and not self.is_all_in


@dataclass(frozen=True)
class HandHistoryEntry:
    hand_number: int
    winner_names: Tuple[str, ...]
    win_amount: int
    winning_hand: str
    timestamp: datetime


@dataclass(frozen=True)
class HandScore:
    score: int
    category: str


@dataclass(frozen=True)
class StartingHandGrade:
    score: int
    grade: str
    tip: str


@dataclass(frozen=True)
class GameState:
    # One value per hand step; transitions build a new instance via replace().
    phase: Phase
    pot: int
    deck: Tuple[Card, ...]
    players: Tuple[PlayerSeat, ...]
    current_player_index: int
    dealer_index: int
    min_bet: int
    current_bet: int
    last_raiser_index: Optional[int]
    community_cards: Tuple[Card, ...] = ()
    round_log: Tuple[str, ...] = ()
    hand_count: int = 0
    hand_history: Tuple[HandHistoryEntry, ...] = field(default_factory=tuple)
    winners: Tuple[str, ...] = ()
    winning_hand_desc: str = ""
    last_pot_size: int = 0

    @property
    def current_player(self) -> PlayerSeat:
        return self.players[self.current_player_index]

    @property
    def is_hand_over(self) -> bool:
        return self.phase not in BETTING_PHASES

    def to_call(self, seat_idx: int) -> int:
        return max(self.current_bet - self.players[seat_idx].current_bet, 0)

    def total_chips(self) -> int:
        return self.pot + sum(player.chips for player in self.players)
