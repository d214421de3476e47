from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from holdem.cards import Card
from holdem.evaluator import evaluate, grade_starting_hand
from holdem.game import GameEngine
from holdem.models import ActionType, GameState, Phase

# ConsolePrompt is the terminal stand-in for the trainer's table UI.

_SHORTCUTS = {
    "F": ActionType.FOLD,
    "FOLD": ActionType.FOLD,
    "X": ActionType.CHECK,
    "CHECK": ActionType.CHECK,
    "C": ActionType.CALL,
    "CALL": ActionType.CALL,
    "R": ActionType.RAISE,
    "RAISE": ActionType.RAISE,
}


@dataclass
class TableStats:
    hand: str
    pot_odds: Optional[str]
    spr: str
    grade: Optional[str] = None
    tip: Optional[str] = None


def format_cards(cards: Sequence[Card]) -> str:
    return " ".join(card.pretty for card in cards) or "--"


def table_stats(state: GameState, seat_idx: int) -> TableStats:
    """HUD numbers for a seat: current hand, pot odds and stack-to-pot ratio."""
    seat = state.players[seat_idx]
    hand = evaluate(seat.hole_cards, state.community_cards).category
    to_call = state.to_call(seat_idx)
    pot_odds = f"{state.pot / to_call:.1f} : 1" if to_call > 0 else None
    spr = f"{seat.chips / state.pot:.1f}" if state.pot > 0 else "-"

    stats = TableStats(hand=hand, pot_odds=pot_odds, spr=spr)
    if state.phase == Phase.PRE_FLOP and len(seat.hole_cards) == 2:
        grade = grade_starting_hand(seat.hole_cards)
        stats.grade = grade.grade
        stats.tip = grade.tip
    return stats


def parse_action(text: str, legal: Sequence[ActionType]) -> Tuple[ActionType, Optional[int]]:
    """Turn ``"r 60"`` style input into an action. Raises ValueError on bad input."""
    parts = text.strip().upper().split()
    if not parts:
        raise ValueError("Empty input")
    action = _SHORTCUTS.get(parts[0])
    if action is None:
        raise ValueError(f"Unknown action: {parts[0]}")
    # CHECK and CALL are interchangeable shortcuts for "match the table".
    if action == ActionType.CHECK and ActionType.CALL in legal:
        action = ActionType.CALL
    elif action == ActionType.CALL and ActionType.CHECK in legal:
        action = ActionType.CHECK
    if action not in legal:
        raise ValueError(f"{action.value} is not legal right now")

    if action != ActionType.RAISE:
        return action, None
    if len(parts) < 2:
        raise ValueError("Raise needs an amount, e.g. 'r 60'")
    try:
        amount = int(parts[1])
    except ValueError:
        raise ValueError(f"Invalid amount: {parts[1]}") from None
    if amount <= 0:
        raise ValueError("Amount must be positive")
    return action, amount


def render_table(state: GameState, viewer: Optional[int] = None) -> List[str]:
    lines = [
        f"== Hand #{state.hand_count} | {state.phase.value} | Pot {state.pot} | To match {state.current_bet} ==",
        f"Board: {format_cards(state.community_cards)}",
    ]
    reveal = state.phase == Phase.SHOWDOWN
    for idx, seat in enumerate(state.players):
        markers = []
        if idx == state.dealer_index:
            markers.append("D")
        if idx == state.current_player_index and not state.is_hand_over:
            markers.append("*")
        if seat.is_all_in:
            markers.append("ALL IN")
        elif not seat.is_active:
            markers.append("FOLD" if seat.chips > 0 else "OUT")
        if reveal or idx == viewer:
            cards = format_cards(seat.hole_cards)
        else:
            cards = "## ##" if seat.hole_cards else "--"
        bet = f" bet {seat.current_bet}" if seat.current_bet else ""
        note = f" [{seat.action_message}]" if seat.action_message else ""
        lines.append(
            f"  {idx}: {seat.name:<8} {seat.chips:>6}{bet:<10} {cards:<8} {' '.join(markers)}{note}".rstrip()
        )
    if state.phase == Phase.SHOWDOWN and state.winners:
        lines.append(f"Winner: {' & '.join(state.winners)} +{state.last_pot_size} ({state.winning_hand_desc})")
    return lines


class ConsolePrompt:
    """Asks the human for a move on stdin, re-prompting on bad input."""

    def __init__(
        self,
        engine: GameEngine,
        read: Callable[[str], str] = input,
        write: Callable[[str], None] = print,
    ) -> None:
        self.engine = engine
        self.read = read
        self.write = write

    def __call__(self, state: GameState, seat_idx: int) -> Tuple[ActionType, Optional[int]]:
        legal, to_call, min_raise, max_commit = self.engine.legal_actions(state, seat_idx)
        for line in render_table(state, viewer=seat_idx):
            self.write(line)
        stats = table_stats(state, seat_idx)
        hud = f"Hand: {stats.hand} | Pot odds: {stats.pot_odds or '-'} | SPR: {stats.spr}"
        if stats.grade:
            hud += f" | Grade {stats.grade}: {stats.tip}"
        self.write(hud)
        if ActionType.RAISE in legal:
            self.write(f"Raise puts in {min_raise}..{max_commit} chips")

        options = "/".join(action.value for action in legal)
        while True:
            text = self.read(f"Action [{options}] (to call {to_call}): ")
            try:
                return parse_action(text, legal)
            except ValueError as exc:
                self.write(str(exc))
