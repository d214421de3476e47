from __future__ import annotations

import random
from dataclasses import replace
from typing import Iterable, List, Optional, Sequence, Tuple

from holdem.cards import Card, build_deck, parse_cards
from holdem.game import GameEngine
from holdem.models import ActionType, GameState, PlayerSeat, TableConfig


class FixedRandom(random.Random):
    """Every roll returns the same value, so bot dice are predictable."""

    def __init__(self, value: float) -> None:
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


def create_engine(*, sb: int = 10, bb: int = 20, seed: int = 42) -> GameEngine:
    return GameEngine(TableConfig(sb=sb, bb=bb), rng=random.Random(seed))


def make_players(count: int, chips: int = 1_000) -> List[PlayerSeat]:
    names = ["Alpha", "Beta", "Gamma", "Delta", "Echo", "Foxtrot", "Golf", "Hotel", "India"]
    return [PlayerSeat(seat_id=f"s{idx}", name=names[idx], chips=chips) for idx in range(count)]


def stacked_deck(deal_order: Sequence[str]) -> Tuple[Card, ...]:
    """A deck whose tail pops produce ``deal_order`` first, in order."""
    wanted = parse_cards(deal_order)
    rest = [card for card in build_deck() if card not in wanted]
    return tuple(rest + list(reversed(wanted)))


def stack_deck(monkeypatch, deal_order: Sequence[str]) -> None:
    deck = stacked_deck(deal_order)
    monkeypatch.setattr("holdem.game.shuffle", lambda cards, rng: deck)


def perform_actions(
    engine: GameEngine, state: GameState, actions: Iterable[Tuple[int, ActionType, Optional[int]]]
) -> GameState:
    """Apply a scripted sequence of (seat, action, amount) through ``engine.act``."""
    for seat_idx, action, amount in actions:
        assert state.current_player_index == seat_idx, f"expected seat {state.current_player_index} to act"
        state = engine.act(state, seat_idx, action, amount)
    return state


def check_down(engine: GameEngine, state: GameState) -> GameState:
    """Call or check with whoever is up until the hand ends."""
    while not state.is_hand_over:
        if not engine.needs_action(state):
            state = engine.advance_turn(state)
            continue
        state = engine.act(state, state.current_player_index, ActionType.CALL)
    return state


def with_cards(state: GameState, seat_idx: int, hole: Sequence[str], board: Sequence[str] = ()) -> GameState:
    players = list(state.players)
    players[seat_idx] = replace(players[seat_idx], hole_cards=tuple(parse_cards(hole)))
    return replace(state, players=tuple(players), community_cards=tuple(parse_cards(board)))
