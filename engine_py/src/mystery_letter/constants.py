"""Card catalog and game constants"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional


class CardKind(str, Enum):
    WATCHER = 'W1'
    SEER = 'S2'
    AEGIS = 'A3'
    DUELIST = 'D4'
    SWITCH = 'X5'
    COURIER = 'C6'
    HEIR = 'H7'
    ORACLE = 'O8'

    @property
    def rank(self) -> int:
        return CARD_CATALOG[self].rank

    @property
    def display_name(self) -> str:
        return CARD_CATALOG[self].name

    @property
    def copies(self) -> int:
        return CARD_CATALOG[self].count


@dataclass(frozen=True)
class CardInfo:
    kind: CardKind
    name: str
    rank: int
    count: int
    text: str


CARD_CATALOG: Dict[CardKind, CardInfo] = {
    CardKind.WATCHER: CardInfo(
        CardKind.WATCHER, 'Watcher', 1, 5,
        'Name a player and a card other than Watcher. If you are right, that player is out.'),
    CardKind.SEER: CardInfo(
        CardKind.SEER, 'Seer', 2, 2,
        "Look at another player's hand."),
    CardKind.AEGIS: CardInfo(
        CardKind.AEGIS, 'Aegis', 3, 2,
        'You (or a player you choose) are protected until your next turn.'),
    CardKind.DUELIST: CardInfo(
        CardKind.DUELIST, 'Duelist', 4, 2,
        'Compare hands with another player; the lower card is out.'),
    CardKind.SWITCH: CardInfo(
        CardKind.SWITCH, 'Switch', 5, 1,
        'Trade hands with another player.'),
    CardKind.COURIER: CardInfo(
        CardKind.COURIER, 'Courier', 6, 2,
        'Choose a player (or yourself): they discard their hand and draw a new card.'),
    CardKind.HEIR: CardInfo(
        CardKind.HEIR, 'Heir', 7, 1,
        'Must be played if you also hold Switch or Courier.'),
    CardKind.ORACLE: CardInfo(
        CardKind.ORACLE, 'Oracle', 8, 1,
        'If you discard this card, you are out of the round.'),
}

DECK_SIZE = sum(info.count for info in CARD_CATALOG.values())

LOSING_CARD = CardKind.ORACLE
FORCED_CARD = CardKind.HEIR
FORCING_CARDS = frozenset({CardKind.SWITCH, CardKind.COURIER})

# Target policies
TARGET_REQUIRED = frozenset({CardKind.WATCHER, CardKind.SEER, CardKind.DUELIST, CardKind.SWITCH})
TARGET_SELF_ALLOWED = frozenset({CardKind.AEGIS, CardKind.COURIER})
NO_TARGET = frozenset({CardKind.HEIR, CardKind.ORACLE})

# Phases
PHASE_LOBBY = 'lobby'
PHASE_ROUND = 'round'
PHASE_ROUND_OVER = 'round_over'
PHASE_GAME_OVER = 'game_over'

# Round end reasons
END_LAST_STANDING = 'last_standing'
END_SHOWDOWN = 'showdown'

# Forced rule outcomes
FORCED_ELIMINATION = 'forced_elimination'
FORCED_PLAY = 'forced_play'

ROOM_ID_LENGTH = 8
NAME_LENGTH = 20
DEFAULT_NAME = 'Player'
BOT_NAMES = ['Ada', 'Basil', 'Cleo']


def parse_card(value) -> Optional[CardKind]:
    """Resolve a wire key (``'W1'``) or a card name (``'watcher'``) to a kind."""
    if isinstance(value, CardKind):
        return value
    if not isinstance(value, str):
        return None
    try:
        return CardKind(value.strip().upper())
    except ValueError:
        pass
    for kind, info in CARD_CATALOG.items():
        if info.name.lower() == value.strip().lower():
            return kind
    return None


def compare_ranks(kind_a: Optional[CardKind], kind_b: Optional[CardKind]) -> int:
    rank_a = kind_a.rank if kind_a else 0
    rank_b = kind_b.rank if kind_b else 0
    return rank_a - rank_b


def full_deck() -> List[CardKind]:
    deck = []
    for kind, info in CARD_CATALOG.items():
        deck.extend([kind] * info.count)
    return deck


def normalize_room_id(room_id: Optional[str]) -> str:
    return (room_id or '').strip().upper()[:ROOM_ID_LENGTH]


def normalize_name(name: Optional[str]) -> str:
    return (name or '').strip()[:NAME_LENGTH] or DEFAULT_NAME
