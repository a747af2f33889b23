"""
Deck building, shuffling and dealing utilities.
"""

import random
from typing import Dict, List, Optional

from .constants import CardKind, full_deck
from .models import Participant


def shuffle_deck(deck: List[CardKind], rng: Optional[random.Random] = None) -> List[CardKind]:
    """
    Shuffle a copy of the deck with Fisher-Yates.

    Args:
        deck: Cards to shuffle
        rng: Optional random source for deterministic shuffling

    Returns:
        Shuffled copy of the deck
    """
    rng = rng or random
    deck_copy = deck.copy()
    for i in range(len(deck_copy) - 1, 0, -1):
        j = rng.randint(0, i)
        deck_copy[i], deck_copy[j] = deck_copy[j], deck_copy[i]
    return deck_copy


def build_deck(rng: Optional[random.Random] = None, seed: Optional[int] = None) -> List[CardKind]:
    """Return a full, freshly shuffled deck."""
    if rng is None and seed is not None:
        rng = random.Random(seed)
    return shuffle_deck(full_deck(), rng)


def deal_cards(deck: List[CardKind], participants: Dict[str, Participant], count: int = 1):
    """
    Deal ``count`` cards to every participant in seating order.

    Cards are taken from the end of the deck, which is mutated in place.
    """
    for _ in range(count):
        for participant in participants.values():
            participant.hand.append(deck.pop())
