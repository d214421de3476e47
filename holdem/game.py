from __future__ import annotations

import logging
import random
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence, Tuple

from .cards import build_deck, cards_to_labels, deal, shuffle
from .evaluator import evaluate
from .models import ActionType, GameState, HandHistoryEntry, Phase, PlayerSeat, TableConfig

# GameEngine holds no table state of its own. Every transition takes a
# GameState and hands back a new one; the caller owns sequencing.

LOGGER = logging.getLogger(__name__)

FOLD_OUT = "All opponents folded"

_NEXT_STREET: Dict[Phase, Tuple[Phase, int]] = {
    Phase.PRE_FLOP: (Phase.FLOP, 3),
    Phase.FLOP: (Phase.TURN, 1),
    Phase.TURN: (Phase.RIVER, 1),
}

_ACTION_LABELS = {
    ActionType.CHECK: "Checks",
    ActionType.CALL: "Calls",
    ActionType.RAISE: "Raises",
}


class GameEngine:
    """No-Limit Texas Hold'em betting rounds for a single trainer table."""

    def __init__(self, config: TableConfig, rng: Optional[random.Random] = None) -> None:
        self.config = config
        self.rng = rng or random.Random()

    # Hand lifecycle --------------------------------------------------

    def setup_hand(
        self,
        players: Sequence[PlayerSeat],
        dealer_index: int,
        hand_count: int,
        history: Sequence[HandHistoryEntry] = (),
    ) -> GameState:
        seats = [
            replace(
                player,
                hole_cards=(),
                is_active=player.chips > 0,
                is_all_in=False,
                current_bet=0,
                action_message=None,
            )
            for player in players
        ]
        funded = [idx for idx, seat in enumerate(seats) if seat.chips > 0]
        if len(funded) < 2:
            raise RuntimeError("Not enough active players to start a hand")

        dealer = self._next_funded(seats, dealer_index)
        if len(funded) == 2:
            sb_idx = dealer
            bb_idx = self._next_funded(seats, dealer)
        else:
            sb_idx = self._next_funded(seats, dealer)
            bb_idx = self._next_funded(seats, sb_idx)

        sb_amount = self._post_blind(seats, sb_idx, self.config.sb)
        bb_amount = self._post_blind(seats, bb_idx, self.config.bb)

        deck = shuffle(build_deck(), self.rng)
        for idx, seat in enumerate(seats):
            if seat.is_active:
                hole, deck = deal(deck, 2)
                seats[idx] = replace(seat, hole_cards=tuple(hole))

        first_actor = self._first_eligible(seats, bb_idx + 1)
        number = hand_count + 1
        LOGGER.debug("Hand %d: dealer=%d sb=%d bb=%d", number, dealer, sb_idx, bb_idx)

        return GameState(
            phase=Phase.PRE_FLOP,
            pot=sb_amount + bb_amount,
            deck=deck,
            players=tuple(seats),
            current_player_index=first_actor if first_actor is not None else (bb_idx + 1) % len(seats),
            dealer_index=dealer,
            min_bet=self.config.bb,
            current_bet=self.config.bb,
            last_raiser_index=bb_idx,
            community_cards=(),
            round_log=(f"Hand #{number} Started",),
            hand_count=number,
            hand_history=tuple(history),
        )

    def _post_blind(self, seats: List[PlayerSeat], idx: int, blind: int) -> int:
        seat = seats[idx]
        amount = min(blind, seat.chips)
        seats[idx] = replace(
            seat,
            chips=seat.chips - amount,
            current_bet=amount,
            is_all_in=seat.chips - amount == 0,
        )
        return amount

    def _next_funded(self, seats: Sequence[PlayerSeat], start: int) -> int:
        count = len(seats)
        for step in range(1, count + 1):
            idx = (start + step) % count
            if seats[idx].chips > 0:
                return idx
        raise RuntimeError("No funded seat at the table")

    def _first_eligible(self, seats: Sequence[PlayerSeat], start: int) -> Optional[int]:
        count = len(seats)
        for step in range(count):
            idx = (start + step) % count
            if seats[idx].can_act:
                return idx
        return None

    # Action handling -------------------------------------------------

    def apply_action(
        self,
        state: GameState,
        seat_idx: int,
        amount: int,
        label: str,
        display_total: Optional[int] = None,
    ) -> GameState:
        seat = state.players[seat_idx]
        if not seat.is_active:
            raise ValueError("Seat not active")

        actual = min(max(amount, 0), seat.chips)
        shown = display_total or actual or ""
        bubble = f"{label.split(' ')[0]} {shown}".strip()
        updated = replace(
            seat,
            chips=seat.chips - actual,
            current_bet=seat.current_bet + actual,
            is_all_in=seat.chips - actual == 0,
            action_message="Check" if bubble == "Checks" else bubble,
        )
        players = list(state.players)
        players[seat_idx] = updated

        current_bet = state.current_bet
        min_bet = state.min_bet
        last_raiser = state.last_raiser_index
        if updated.current_bet > state.current_bet:
            min_bet = max(state.min_bet, updated.current_bet - state.current_bet)
            current_bet = updated.current_bet
            last_raiser = seat_idx

        message = f"{seat.name} {label.lower()} {shown}".strip()
        return replace(
            state,
            players=tuple(players),
            pot=state.pot + actual,
            current_bet=current_bet,
            min_bet=min_bet,
            last_raiser_index=last_raiser,
            round_log=state.round_log + (message,),
        )

    def fold(self, state: GameState, seat_idx: int) -> GameState:
        seat = state.players[seat_idx]
        if not seat.is_active:
            raise ValueError("Seat not active")
        players = list(state.players)
        players[seat_idx] = replace(seat, is_active=False, action_message="Fold")
        folded = replace(
            state,
            players=tuple(players),
            round_log=state.round_log + (f"{seat.name} folds",),
        )
        if sum(1 for player in folded.players if player.is_active) == 1:
            return self.showdown(folded)
        return folded

    def act(self, state: GameState, seat_idx: int, action: ActionType, amount: Optional[int] = None) -> GameState:
        """Apply one player decision and move the hand forward."""
        if action == ActionType.FOLD:
            state = self.fold(state, seat_idx)
        elif action in (ActionType.CHECK, ActionType.CALL):
            to_call = state.to_call(seat_idx)
            verb = ActionType.CALL if to_call > 0 else ActionType.CHECK
            state = self.apply_action(state, seat_idx, to_call, _ACTION_LABELS[verb])
        elif action == ActionType.RAISE:
            if amount is None:
                raise ValueError("Raise requires amount")
            seat = state.players[seat_idx]
            floor = state.to_call(seat_idx) + state.min_bet
            committed = min(max(amount, floor), seat.chips)
            total = seat.current_bet + committed
            label = "Raises to" if total > state.current_bet else "Calls"
            state = self.apply_action(state, seat_idx, committed, label, display_total=total)
        else:
            raise ValueError(f"Unsupported action {action}")

        if state.is_hand_over:
            return state
        return self.advance_turn(state)

    def legal_actions(
        self, state: GameState, seat_idx: int
    ) -> Tuple[List[ActionType], int, Optional[int], Optional[int]]:
        """Legal moves plus (to_call, min raise commitment, max commitment)."""
        seat = state.players[seat_idx]
        if not seat.can_act:
            raise RuntimeError("Seat not active")

        to_call = state.to_call(seat_idx)
        legal: List[ActionType] = [ActionType.FOLD]
        legal.append(ActionType.CALL if to_call > 0 else ActionType.CHECK)

        min_raise = None
        max_commit = None
        if seat.chips > to_call:
            legal.append(ActionType.RAISE)
            max_commit = seat.chips
            min_raise = min(to_call + state.min_bet, seat.chips)
        return legal, to_call, min_raise, max_commit

    # Turn and street progression ------------------------------------

    def betting_closed(self, state: GameState) -> bool:
        """True when no seat can still put chips in this street."""
        eligible = [player for player in state.players if player.can_act]
        if not eligible:
            return True
        return len(eligible) == 1 and eligible[0].current_bet >= state.current_bet

    def needs_action(self, state: GameState) -> bool:
        if state.is_hand_over or self.betting_closed(state):
            return False
        return state.current_player.can_act

    def advance_turn(self, state: GameState) -> GameState:
        if state.is_hand_over:
            return state
        if sum(1 for player in state.players if player.is_active) <= 1:
            return self.showdown(state)
        if self.betting_closed(state):
            return self.advance_street(state)

        count = len(state.players)
        found = None
        reached_raiser = False
        for step in range(1, count + 1):
            idx = (state.current_player_index + step) % count
            if idx == state.last_raiser_index:
                reached_raiser = True
            if state.players[idx].can_act:
                found = idx
                break

        if found is None:
            return self.advance_street(state)

        # Action is back at (or past) the aggressor and everyone is matched.
        if reached_raiser and state.players[found].current_bet == state.current_bet:
            return self.advance_street(state)

        return replace(state, current_player_index=found)

    def advance_street(self, state: GameState) -> GameState:
        players = tuple(replace(player, current_bet=0) for player in state.players)
        if state.phase == Phase.RIVER:
            return self.showdown(replace(state, players=players))
        if state.phase not in _NEXT_STREET:
            raise RuntimeError(f"Cannot advance street from {state.phase.value}")

        next_phase, count = _NEXT_STREET[state.phase]
        _, deck = deal(state.deck, 1)  # burn
        cards, deck = deal(deck, count)

        first_actor = self._first_eligible(players, state.dealer_index + 1)
        can_bet = sum(1 for player in players if player.can_act)
        auto = can_bet < 2
        marker = f"--- {next_phase.value} (Auto) ---" if auto else f"--- {next_phase.value} ---"
        LOGGER.debug("Street %s dealt %s", next_phase.value, cards_to_labels(cards))

        advanced = replace(
            state,
            phase=next_phase,
            deck=deck,
            community_cards=state.community_cards + tuple(cards),
            players=players,
            current_bet=0,
            min_bet=self.config.bb,
            current_player_index=first_actor if first_actor is not None else state.current_player_index,
            last_raiser_index=first_actor,
            round_log=state.round_log + (marker,),
        )
        if auto:
            # Nobody left who can bet: run the board out.
            return self.advance_street(advanced)
        return advanced

    # Showdown --------------------------------------------------------

    def showdown(self, state: GameState) -> GameState:
        active = [idx for idx, player in enumerate(state.players) if player.is_active]
        if not active:
            return replace(state, phase=Phase.SHOWDOWN)

        if len(active) == 1:
            winners = active
            description = FOLD_OUT
        else:
            best_score = -1
            winners = []
            description = ""
            for idx in active:
                result = evaluate(state.players[idx].hole_cards, state.community_cards)
                if result.score > best_score:
                    best_score = result.score
                    winners = [idx]
                    description = result.category
                elif result.score == best_score:
                    winners.append(idx)

        payouts = self._split_pot(state, winners)
        players = [replace(player, current_bet=0) for player in state.players]
        for idx, amount in payouts.items():
            players[idx] = replace(players[idx], chips=players[idx].chips + amount)

        names = tuple(state.players[idx].name for idx in self._left_of_dealer(state, winners))
        entry = HandHistoryEntry(
            hand_number=state.hand_count,
            winner_names=names,
            win_amount=state.pot,
            winning_hand=description,
            timestamp=datetime.now(timezone.utc),
        )
        LOGGER.debug("Hand %d won by %s (%s) for %d", state.hand_count, names, description, state.pot)

        return replace(
            state,
            players=tuple(players),
            phase=Phase.SHOWDOWN,
            pot=0,
            last_pot_size=state.pot,
            winners=names,
            winning_hand_desc=description,
            round_log=state.round_log + (f"Showdown! Winner: {', '.join(names)} ({description})",),
            hand_history=state.hand_history + (entry,),
        )

    def _split_pot(self, state: GameState, winners: Sequence[int]) -> Dict[int, int]:
        share, remainder = divmod(state.pot, len(winners))
        payouts = {}
        for position, idx in enumerate(self._left_of_dealer(state, winners)):
            payouts[idx] = share + (1 if position < remainder else 0)
        return payouts

    def _left_of_dealer(self, state: GameState, seats: Sequence[int]) -> List[int]:
        count = len(state.players)
        return sorted(seats, key=lambda idx: (idx - state.dealer_index - 1) % count)
