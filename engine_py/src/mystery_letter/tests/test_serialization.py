"""
Tests for per-viewer state projection.
"""

import orjson

from mystery_letter.constants import CardKind
from mystery_letter.serialization import get_public_room_info, project_room, sanitize_state

W, S, A, D, X, C, H, O = list(CardKind)


def test_viewer_sees_only_own_hand(make_table, rig):
    room = rig(make_table(3), {"p1": [X], "p2": [O], "p3": [A]}, [W, D])

    state = sanitize_state(room, "p1")
    assert state["you"] == "p1"
    assert state["hand"] == ["X5"]
    assert state["deck_count"] == 2
    assert "deck" not in state

    other_hands = orjson.dumps(state["players"]).decode()
    assert "O8" not in other_hands
    assert all("hand" not in player for player in state["players"])
    assert [player["hand_count"] for player in state["players"]] == [1, 1, 1]


def test_turn_hints(make_table, rig, engine):
    room = rig(make_table(2), {"p1": [H], "p2": [S]}, [W, X])

    state = sanitize_state(room, "p1")
    assert state["needs_draw"] is True
    assert state["must_play"] is None

    engine.draw("TABLE", "p1")
    state = sanitize_state(room, "p1")
    assert state["needs_draw"] is False
    assert state["must_play"] == ["H7"]

    # Not their turn: no hints
    other = sanitize_state(room, "p2")
    assert other["must_play"] is None
    assert other["needs_draw"] is False


def test_outsider_gets_no_hand(make_table):
    room = make_table(2)
    state = sanitize_state(room, "stranger")
    assert state["hand"] == []
    assert "you" not in state


def test_projection_covers_humans_only(engine):
    engine.join("TABLE", "Alice", "p1")
    engine.claim_host("TABLE", "p1")
    engine.configure_bots("TABLE", "p1", 2)
    engine.start_round("TABLE", "p1", seed=4)
    room = engine.get_room("TABLE")

    views = project_room(room)
    assert list(views) == ["p1"]
    assert views["p1"]["hand"] == [card.value for card in room.participants["p1"].hand]
    assert len(views["p1"]["players"]) == 3
    assert engine.project("TABLE") == views
    assert engine.project("missing") == {}


def test_eliminated_participant_still_receives_state(make_table, rig, engine):
    room = rig(make_table(3), {"p1": [H], "p2": [S], "p3": [W]}, [W, O])
    engine.draw("TABLE", "p1")

    views = project_room(room)
    assert "p1" in views
    assert views["p1"]["hand"] == []
    assert views["p1"]["players"][0]["alive"] is False


def test_public_room_info(make_table):
    room = make_table(2)
    info = get_public_room_info(room)
    assert info == {"id": "TABLE", "phase": "round", "player_count": 2, "round_number": 1}
