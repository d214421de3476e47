import dataclasses

import pytest

from holdem.models import ActionType, Phase, PlayerSeat

from .helpers import create_engine, make_players, perform_actions


def test_transitions_leave_previous_state_untouched():
    engine = create_engine()
    start = engine.setup_hand(make_players(3), dealer_index=-1, hand_count=0)
    after = engine.act(start, 0, ActionType.RAISE, 60)

    assert after is not start
    assert start.pot == 30
    assert start.players[0].chips == 1_000
    assert start.current_player_index == 0
    assert start.round_log == ("Hand #1 Started",)
    assert after.round_log[: len(start.round_log)] == start.round_log


def test_state_and_seats_are_frozen():
    engine = create_engine()
    state = engine.setup_hand(make_players(2), dealer_index=-1, hand_count=0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        state.pot = 0  # type: ignore[misc]
    with pytest.raises(dataclasses.FrozenInstanceError):
        state.players[0].chips = 0  # type: ignore[misc]


def test_setup_clears_previous_hand_fields():
    engine = create_engine()
    first = engine.setup_hand(make_players(3), dealer_index=-1, hand_count=0)
    first = perform_actions(engine, first, [(0, ActionType.FOLD, None)])
    assert not first.players[0].is_active

    second = engine.setup_hand(first.players, first.dealer_index, first.hand_count, first.hand_history)
    for seat in second.players:
        assert seat.is_active
        assert len(seat.hole_cards) == 2
    assert second.players[0].action_message is None
    assert second.community_cards == ()


def test_button_rotation_skips_eliminated_players():
    engine = create_engine(sb=5, bb=10)
    players = make_players(3, chips=200)
    players[1] = PlayerSeat(seat_id="s1", name="Beta", chips=0)
    first = engine.setup_hand(players, dealer_index=-1, hand_count=0)
    assert first.dealer_index == 0
    second = engine.setup_hand(first.players, first.dealer_index, first.hand_count)
    assert second.dealer_index == 2


def test_community_cards_only_grow():
    engine = create_engine()
    state = engine.setup_hand(make_players(2), dealer_index=-1, hand_count=0)
    state = engine.act(state, 0, ActionType.CALL)
    seen = [state.community_cards]
    while not state.is_hand_over:
        state = engine.act(state, state.current_player_index, ActionType.CHECK)
        seen.append(state.community_cards)

    for earlier, later in zip(seen, seen[1:]):
        assert later[: len(earlier)] == earlier
    assert [len(cards) for cards in seen] == [3, 3, 4, 4, 5, 5, 5]
    assert state.phase == Phase.SHOWDOWN


def test_history_is_carried_between_hands():
    engine = create_engine()
    state = engine.setup_hand(make_players(2), dealer_index=-1, hand_count=0)
    state = perform_actions(engine, state, [(0, ActionType.FOLD, None)])
    assert len(state.hand_history) == 1

    nxt = engine.setup_hand(state.players, state.dealer_index, state.hand_count, state.hand_history)
    assert nxt.hand_history == state.hand_history
    assert nxt.hand_count == 2
