from __future__ import annotations

import logging
import random
import time
from dataclasses import replace
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from holdem.game import GameEngine
from holdem.models import ActionType, GameState, HandHistoryEntry, Phase, PlayerSeat, TableConfig

from .bots import Personality, decide

LOGGER = logging.getLogger(__name__)

FRIEND_NAMES = ["Nick", "Cody", "Rob", "Devin", "Noah", "Pat", "Cody A"]
AI_PERSONALITIES = ["Conservative Rock", "Loose Cannon", "Calling Station", "Aggressive Maniac"]

HUMAN_SEAT_ID = "p1"

# A prompt receives the live state and the human's seat and returns the move.
PromptFn = Callable[[GameState, int], Tuple[ActionType, Optional[int]]]
EventFn = Callable[[GameState], None]


def create_players(
    config: TableConfig,
    human_name: Optional[str] = "You",
    opponent_names: Sequence[str] = FRIEND_NAMES,
) -> List[PlayerSeat]:
    """Seat the human first, then bots with rotating personalities."""
    players: List[PlayerSeat] = []
    if human_name is not None:
        players.append(PlayerSeat(seat_id=HUMAN_SEAT_ID, name=human_name, chips=config.starting_stack, is_human=True))

    bot_seats = config.seats - len(players)
    if bot_seats > len(opponent_names):
        raise ValueError("Not enough opponent names for the requested seats")
    for idx, name in enumerate(opponent_names[:bot_seats]):
        players.append(
            PlayerSeat(
                seat_id=f"bot_{idx}",
                name=name,
                chips=config.starting_stack,
                personality=AI_PERSONALITIES[idx % len(AI_PERSONALITIES)],
            )
        )
    return players


class TrainerSession:
    """Runs hands at one trainer table: the human (if any) plus bot opponents."""

    def __init__(
        self,
        config: TableConfig,
        prompt: Optional[PromptFn] = None,
        on_update: Optional[EventFn] = None,
        rng: Optional[random.Random] = None,
        players: Optional[Sequence[PlayerSeat]] = None,
        profiles: Optional[Dict[str, Personality]] = None,
    ) -> None:
        self.config = config
        self.rng = rng or random.Random()
        self.engine = GameEngine(config, rng=self.rng)
        self.prompt = prompt
        self.on_update = on_update
        self.profiles = profiles
        self.players: List[PlayerSeat] = list(players) if players is not None else create_players(config)
        self.dealer_index = -1
        self.hand_count = 0
        self.history: Tuple[HandHistoryEntry, ...] = ()
        self.state: Optional[GameState] = None

    # Table status ----------------------------------------------------

    def human_index(self) -> Optional[int]:
        for idx, player in enumerate(self.players):
            if player.is_human:
                return idx
        return None

    def is_game_over(self) -> bool:
        human = self.human_index()
        if human is not None and self.players[human].chips <= 0:
            return True
        return sum(1 for player in self.players if player.chips > 0) < 2

    # Hand loop -------------------------------------------------------

    def start_hand(self) -> GameState:
        state = self.engine.setup_hand(self.players, self.dealer_index, self.hand_count, self.history)
        LOGGER.info(
            "Hand #%d started, dealer %s",
            state.hand_count,
            state.players[state.dealer_index].name,
        )
        self.state = state
        self._notify(state)
        return state

    def play_hand(self) -> GameState:
        state = self.start_hand()
        while not state.is_hand_over:
            if not self.engine.needs_action(state):
                state = self.engine.advance_turn(state)
                continue
            seat_idx = state.current_player_index
            action, amount = self._choose(state, seat_idx)
            state = self.engine.act(state, seat_idx, action, amount)
            self.state = state
            self._notify(state)

        self._finish_hand(state)
        return state

    def run(self, max_hands: Optional[int] = None) -> GameState:
        """Play hands until the human busts, one stack remains, or ``max_hands``."""
        if max_hands is not None and max_hands < 1:
            raise ValueError("max_hands must be at least 1")
        if self.is_game_over():
            raise RuntimeError("Not enough active players to start a hand")
        state = self.play_hand()
        played = 1
        while not self.is_game_over():
            if max_hands is not None and played >= max_hands:
                break
            state = self.play_hand()
            played += 1

        if self.is_game_over():
            state = replace(state, phase=Phase.GAME_OVER)
            self.state = state
            LOGGER.info("Game over after %d hands", played)
        return state

    def _choose(self, state: GameState, seat_idx: int) -> Tuple[ActionType, Optional[int]]:
        seat = state.players[seat_idx]
        if seat.is_human and self.prompt is not None:
            return self.prompt(state, seat_idx)
        if self.config.bot_delay_ms:
            time.sleep(self.config.bot_delay_ms / 1000)
        decision = decide(seat_idx, state, self.rng, self.profiles)
        return decision.action, decision.amount

    def _finish_hand(self, state: GameState) -> None:
        self.players = list(state.players)
        self.dealer_index = state.dealer_index
        self.hand_count = state.hand_count
        self.history = state.hand_history
        self.state = state
        LOGGER.info(
            "Hand #%d: %s won %d (%s)",
            state.hand_count,
            ", ".join(state.winners),
            state.last_pot_size,
            state.winning_hand_desc,
        )
        self._notify(state)

    def _notify(self, state: GameState) -> None:
        if self.on_update is not None:
            self.on_update(state)
