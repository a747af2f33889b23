"""
Tests for card effects and play validation.
"""

import copy

import pytest

from mystery_letter.constants import DECK_SIZE, CardKind
from mystery_letter.errors import (
    GameError, CANNOT_DISCARD_LOSING_CARD, CARD_NOT_IN_HAND, GUESS_REQUIRED, ILLEGAL_GUESS,
    INVALID_TARGET, MUST_PLAY_FORCED_CARD, NOT_YOUR_TURN, UNKNOWN_TARGET
)
from mystery_letter.effects import EFFECT_HANDLERS
from mystery_letter.validate import forced_rule, legal_cards

ROOM = "TABLE"

W, S, A, D, X, C, H, O = list(CardKind)


def snapshot(room):
    return (
        room.version,
        room.turn,
        {pid: (list(p.hand), p.alive, p.protected) for pid, p in room.participants.items()},
        list(room.deck),
        list(room.discard),
    )


@pytest.fixture
def three(make_table, rig):
    """Three players, p1 to act; returns a function to rig the cards."""
    room = make_table(3)

    def _deal(p1, p2, p3, deck):
        return rig(room, {"p1": p1, "p2": p2, "p3": p3}, deck)
    return _deal


def test_watcher_correct_guess(three, engine):
    room = three([S], [D], [A], [A, W])
    engine.draw(ROOM, "p1")

    outcome = engine.play(ROOM, "p1", "W1", target_id="p2", guess="duelist")
    assert outcome.eliminated == ["p2"]
    assert not room.participants["p2"].alive
    assert room.participants["p2"].hand == []
    assert room.discard[-2:] == [W, D]
    assert room.turn == "p3"


def test_watcher_wrong_guess(three, engine):
    room = three([S], [D], [A], [A, W])
    engine.draw(ROOM, "p1")

    outcome = engine.play(ROOM, "p1", "W1", target_id="p2", guess="O8")
    assert outcome.eliminated == []
    assert room.participants["p2"].alive
    assert room.turn == "p2"


def test_watcher_guess_rules(three, engine):
    room = three([S], [D], [A], [A, W])
    engine.draw(ROOM, "p1")
    before = snapshot(room)

    with pytest.raises(GameError) as exc:
        engine.play(ROOM, "p1", "W1", target_id="p2")
    assert exc.value.code == GUESS_REQUIRED

    with pytest.raises(GameError) as exc:
        engine.play(ROOM, "p1", "W1", target_id="p2", guess="W1")
    assert exc.value.code == ILLEGAL_GUESS

    with pytest.raises(GameError) as exc:
        engine.play(ROOM, "p1", "W1", target_id="p2", guess="Q9")
    assert exc.value.code == ILLEGAL_GUESS

    assert snapshot(room) == before


def test_seer_reveals_to_actor(three, engine):
    room = three([W], [D], [A], [A, S])
    engine.draw(ROOM, "p1")

    outcome = engine.play(ROOM, "p1", "S2", target_id="p2")
    assert outcome.reveal == {"target_id": "p2", "card": "D4"}
    # The log never names the card
    assert all("Duelist" not in line for line in room.log)


def test_aegis_on_another_player(three, engine):
    room = three([W], [D], [S], [W, A])
    engine.draw(ROOM, "p1")

    outcome = engine.play(ROOM, "p1", "A3", target_id="p3")
    assert outcome.protected == "p3"
    assert room.participants["p3"].protected
    assert not room.participants["p1"].protected


def test_aegis_may_target_protected_player(three, engine):
    room = three([W], [D], [S], [W, A])
    room.participants["p3"].protected = True
    engine.draw(ROOM, "p1")

    outcome = engine.play(ROOM, "p1", "A3", target_id="p3")
    assert not outcome.no_effect
    assert room.participants["p3"].protected


def test_duelist_lower_card_loses(three, engine):
    room = three([W], [S], [A], [W, D])
    engine.draw(ROOM, "p1")

    outcome = engine.play(ROOM, "p1", "D4", target_id="p3")
    assert outcome.eliminated == ["p1"]
    assert not room.participants["p1"].alive
    assert room.participants["p3"].alive
    assert room.turn == "p2"


def test_duelist_tie(three, engine):
    room = three([W], [W], [S], [W, D])
    engine.draw(ROOM, "p1")

    outcome = engine.play(ROOM, "p1", "D4", target_id="p2")
    assert outcome.eliminated == []
    assert room.participants["p1"].alive and room.participants["p2"].alive


def test_comparison_knocks_out_lower_rank(three, engine):
    """P1 keeps a Courier, P2 holds a Seer: P2 is out and the Seer is discarded."""
    room = three([C], [S], [W], [W, D])
    engine.draw(ROOM, "p1")

    engine.play(ROOM, "p1", "D4", target_id="p2")
    p2 = room.participants["p2"]
    assert not p2.alive
    assert p2.hand == []
    assert room.discard[-1] == S
    assert room.card_total() == DECK_SIZE


def test_switch_trades_hands(three, engine):
    room = three([W], [O], [A], [W, X])
    engine.draw(ROOM, "p1")

    outcome = engine.play(ROOM, "p1", "X5", target_id="p2")
    assert outcome.swapped
    assert room.participants["p1"].hand == [O]
    assert room.participants["p2"].hand == [W]


def test_courier_on_opponent(three, engine):
    room = three([W], [D], [A], [S, C])
    engine.draw(ROOM, "p1")

    engine.play(ROOM, "p1", "C6", target_id="p2")
    assert room.participants["p2"].hand == [S]
    assert room.discard[-1] == D
    assert room.deck == []
    # Deck ran dry during the turn: showdown
    assert room.phase == "round_over"
    assert room.last_result.reason == "showdown"


def test_courier_on_oracle_holder(three, engine):
    room = three([W], [O], [A], [S, C])
    engine.draw(ROOM, "p1")

    outcome = engine.play(ROOM, "p1", "C6", target_id="p2")
    assert outcome.eliminated == ["p2"]
    assert room.discard[-1] == O
    assert room.deck == [S]
    assert room.turn == "p3"


def test_courier_defaults_to_self(three, engine):
    room = three([W], [D], [A], [S, A, C])
    engine.draw(ROOM, "p1")

    outcome = engine.play(ROOM, "p1", "C6")
    assert outcome.target_id == "p1"
    assert room.participants["p1"].hand == [A]
    assert room.discard[-1] == W


def test_courier_on_protected_player_does_nothing(three, engine):
    room = three([W], [D], [A], [S, C])
    room.participants["p2"].protected = True
    engine.draw(ROOM, "p1")

    outcome = engine.play(ROOM, "p1", "C6", target_id="p2")
    assert outcome.no_effect
    assert room.participants["p2"].hand == [D]
    assert room.deck == [S]


def test_heir_has_no_effect(three, engine):
    room = three([W], [D], [A], [S, H])
    engine.draw(ROOM, "p1")

    outcome = engine.play(ROOM, "p1", "H7", target_id="p2")
    assert outcome.target_id is None
    assert room.participants["p1"].hand == [W]
    assert room.turn == "p2"


def test_forced_play_of_heir(three, engine):
    room = three([H], [D], [A], [S, X])
    engine.draw(ROOM, "p1")
    assert forced_rule(room.participants["p1"].hand) == "forced_play"
    assert legal_cards(room.participants["p1"].hand) == [H]
    before = snapshot(room)

    with pytest.raises(GameError) as exc:
        engine.play(ROOM, "p1", "X5", target_id="p2")
    assert exc.value.code == MUST_PLAY_FORCED_CARD
    assert snapshot(room) == before

    engine.play(ROOM, "p1", "H7")
    assert room.participants["p1"].hand == [X]


def test_oracle_cannot_be_played(three, engine):
    room = three([O], [D], [A], [S, W])
    engine.draw(ROOM, "p1")
    before = snapshot(room)

    with pytest.raises(GameError) as exc:
        engine.play(ROOM, "p1", "O8")
    assert exc.value.code == CANNOT_DISCARD_LOSING_CARD
    assert snapshot(room) == before


def test_target_validation(three, engine):
    room = three([S], [D], [A], [A, W])
    room.participants["p3"].alive = False
    room.recompute_turn_order()
    engine.draw(ROOM, "p1")
    before = snapshot(room)

    cases = [
        (dict(card="D4", target_id="p2"), CARD_NOT_IN_HAND),
        (dict(card="Z9"), CARD_NOT_IN_HAND),
        (dict(card="W1"), INVALID_TARGET),
        (dict(card="W1", target_id="p1", guess="S2"), INVALID_TARGET),
        (dict(card="W1", target_id="p3", guess="S2"), INVALID_TARGET),
        (dict(card="W1", target_id="ghost", guess="S2"), UNKNOWN_TARGET),
    ]
    for kwargs, code in cases:
        with pytest.raises(GameError) as exc:
            engine.play(ROOM, "p1", **kwargs)
        assert exc.value.code == code

    with pytest.raises(GameError) as exc:
        engine.play(ROOM, "p2", "D4", target_id="p1")
    assert exc.value.code == NOT_YOUR_TURN

    assert snapshot(room) == before


def test_protected_target_is_a_no_op(make_table, rig, engine):
    """P1 shields itself; P2's correct guess at P1 does nothing."""
    room = rig(make_table(2), {"p1": [S], "p2": [W]}, [D, W, A])

    engine.draw(ROOM, "p1")
    engine.play(ROOM, "p1", "A3", target_id="p1")
    assert room.participants["p1"].protected

    engine.draw(ROOM, "p2")
    outcome = engine.play(ROOM, "p2", "W1", target_id="p1", guess="S2")
    assert outcome.no_effect
    assert outcome.eliminated == []
    assert room.participants["p1"].alive
    assert room.participants["p1"].hand == [S]

    # Protection ends when P1's turn comes back around
    assert room.turn == "p1"
    assert not room.participants["p1"].protected


def test_no_target_available_allows_untargeted_play(make_table, rig, engine):
    room = rig(make_table(2), {"p1": [A], "p2": [W]}, [D, S])
    room.participants["p2"].protected = True
    engine.draw(ROOM, "p1")

    outcome = engine.play(ROOM, "p1", "S2")
    assert outcome.no_effect
    assert outcome.reveal is None
    assert room.turn == "p2"


def test_rejected_play_changes_nothing(three, engine):
    room = three([S], [D], [A], [A, W])
    engine.draw(ROOM, "p1")
    before = copy.deepcopy(snapshot(room))

    with pytest.raises(GameError):
        engine.play(ROOM, "p1", "S2", target_id="p1")
    assert snapshot(room) == before
    assert room.card_total() == DECK_SIZE


def test_every_card_kind_has_an_effect():
    assert set(EFFECT_HANDLERS) == set(CardKind)
