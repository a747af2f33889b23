"""
Shared fixtures for the Mystery Letter engine tests.
"""

import pytest

from mystery_letter.constants import full_deck
from mystery_letter.engine import LetterEngine
from mystery_letter.registry import SessionRegistry
from mystery_letter.rules import create_rules

ROOM = "TABLE"


@pytest.fixture
def rules():
    return create_rules(bot_think_delay=0)


@pytest.fixture
def engine(rules):
    return LetterEngine(SessionRegistry(rules), rules)


@pytest.fixture
def make_table(engine):
    """Seat ``count`` humans (p1..pN, p1 hosting) and start a seeded round."""
    def _make(count=2, seed=7, start=True):
        for i in range(count):
            engine.join(ROOM, f"P{i + 1}", f"p{i + 1}")
        engine.claim_host(ROOM, "p1")
        if start:
            engine.start_round(ROOM, "p1", seed=seed)
        return engine.get_room(ROOM)
    return _make


@pytest.fixture
def rig():
    """
    Replace the dealt cards with fixed hands and a fixed deck.

    The last card of ``deck`` is drawn first. Every card not placed in a
    hand or the deck goes to the discard pile, so the 16 cards stay
    accounted for.
    """
    def _rig(room, hands, deck, turn="p1"):
        pool = full_deck()
        for player_id, hand in hands.items():
            room.participants[player_id].hand = list(hand)
            for card in hand:
                pool.remove(card)
        for card in deck:
            pool.remove(card)
        for participant in room.participants.values():
            participant.protected = False
        room.deck = list(deck)
        room.discard = pool
        room.turn = turn
        return room
    return _rig
