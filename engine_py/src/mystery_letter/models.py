"""Game models and data structures"""

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Optional

from .constants import CardKind, PHASE_LOBBY, PHASE_ROUND


@dataclass
class Participant:
    id: str
    name: str
    seat: int
    is_bot: bool = False
    skill_level: Optional[int] = None  # 1..3, bots only
    hand: List[CardKind] = field(default_factory=list)
    alive: bool = True
    protected: bool = False
    tokens: int = 0

    def reset_for_round(self):
        self.hand = []
        self.alive = True
        self.protected = False


@dataclass
class Session:
    id: str
    version: int = 0
    phase: str = PHASE_LOBBY  # lobby|round|round_over|game_over
    host_id: Optional[str] = None
    participants: Dict[str, Participant] = field(default_factory=dict)
    turn_order: List[str] = field(default_factory=list)
    turn: Optional[str] = None
    deck: List[CardKind] = field(default_factory=list)  # draw pops from the end
    discard: List[CardKind] = field(default_factory=list)
    round_number: int = 0
    last_round_winner: Optional[str] = None
    game_winner: Optional[str] = None
    last_result: Optional["RoundResult"] = None
    log: Deque[str] = field(default_factory=lambda: deque(maxlen=50))  # most recent first

    @property
    def round_active(self) -> bool:
        return self.phase == PHASE_ROUND

    def add_log(self, message: str):
        self.log.appendleft(message)

    def increment_version(self):
        self.version += 1

    def alive_ids(self) -> List[str]:
        return [pid for pid, p in self.participants.items() if p.alive]

    def recompute_turn_order(self):
        self.turn_order = self.alive_ids()

    def humans(self) -> List[Participant]:
        return [p for p in self.participants.values() if not p.is_bot]

    def bots(self) -> List[Participant]:
        return [p for p in self.participants.values() if p.is_bot]

    def card_total(self) -> int:
        """Cards held by alive participants plus deck and discard."""
        in_hands = sum(len(p.hand) for p in self.participants.values() if p.alive)
        return in_hands + len(self.deck) + len(self.discard)


@dataclass
class RoundResult:
    winner_id: Optional[str]
    reason: str  # last_standing|showdown
    game_over: bool = False


@dataclass
class EffectOutcome:
    actor_id: str
    card: CardKind
    target_id: Optional[str] = None
    guess: Optional[CardKind] = None
    no_effect: bool = False
    eliminated: List[str] = field(default_factory=list)
    protected: Optional[str] = None
    swapped: bool = False
    # Seer result, delivered to the actor only
    reveal: Optional[Dict[str, str]] = None
    message: str = ''
    round_result: Optional[RoundResult] = None
