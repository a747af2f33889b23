"""Game engine facade: the operations the transport layer calls"""

import logging
import random
import uuid
from typing import Any, Dict, Optional, Tuple

from .constants import BOT_NAMES, CardKind, normalize_name
from .effects import play_card
from .errors import (
    GameError, HOST_ALREADY_CLAIMED, INVALID_BOT_CONFIG, INVALID_TARGET, NOT_HOST, ROOM_FULL,
    ROUND_IN_PROGRESS, UNKNOWN_PARTICIPANT, UNKNOWN_TARGET
)
from .models import EffectOutcome, Participant, RoundResult, Session
from .registry import SessionRegistry
from .rules import RuleConfig
from .serialization import project_room, sanitize_state
from . import turns

logger = logging.getLogger(__name__)


class LetterEngine:
    def __init__(self, registry: Optional[SessionRegistry] = None, rules: Optional[RuleConfig] = None):
        if registry is None:
            registry = SessionRegistry(rules)
        self.registry = registry
        self.rules = rules or registry.rules

    def get_room(self, room_id: str) -> Optional[Session]:
        return self.registry.get(room_id)

    def join(self, room_id: str, player_name: str,
             player_id: Optional[str] = None) -> Tuple[str, Dict[str, Any]]:
        """Seat a new human participant; returns their id and first projected state."""
        room = self.registry.get_or_create(room_id)
        if player_id and player_id in room.participants:
            # Same connection joining again: keep the seat
            room.participants[player_id].name = normalize_name(player_name)
            room.increment_version()
            return player_id, sanitize_state(room, player_id)
        if room.round_active:
            raise GameError(ROUND_IN_PROGRESS, "A round is in progress, wait for it to finish")
        if len(room.participants) >= self.rules.max_players:
            raise GameError(ROOM_FULL, "Room is full")

        player_id = player_id or str(uuid.uuid4())[:8]
        player = Participant(
            id=player_id,
            name=normalize_name(player_name),
            seat=len(room.participants)
        )
        room.participants[player_id] = player
        room.add_log(f"{player.name} joined.")
        room.increment_version()
        logger.info(f"Player {player.name} ({player_id}) joined room {room.id}")
        return player_id, sanitize_state(room, player_id)

    def claim_host(self, room_id: str, player_id: str):
        room = self.registry.require(room_id)
        player = room.participants.get(player_id)
        if not player or player.is_bot:
            raise GameError(UNKNOWN_PARTICIPANT, "Only a seated player can host")
        if room.host_id and room.host_id != player_id:
            raise GameError(HOST_ALREADY_CLAIMED, "This room already has a host")
        if room.host_id != player_id:
            room.host_id = player_id
            room.add_log(f"{player.name} is now the host.")
            room.increment_version()

    def configure_bots(self, room_id: str, requester_id: str, bot_count: int, skill_level: int = 1):
        """Replace the room's bots with ``bot_count`` bots of the given skill."""
        room = self._require_host(room_id, requester_id)
        if room.round_active:
            raise GameError(ROUND_IN_PROGRESS, "Bots can only change between rounds")
        if not 0 <= bot_count <= self.rules.max_bots:
            raise GameError(INVALID_BOT_CONFIG, f"Bot count must be between 0 and {self.rules.max_bots}")
        if not 1 <= skill_level <= 3:
            raise GameError(INVALID_BOT_CONFIG, "Skill level must be 1, 2 or 3")
        humans = len(room.humans())
        if humans + bot_count > self.rules.max_players:
            raise GameError(ROOM_FULL, f"Only {self.rules.max_players - humans} seats are free")

        for bot in room.bots():
            del room.participants[bot.id]
        for i in range(bot_count):
            bot_id = f"bot-{uuid.uuid4().hex[:6]}"
            room.participants[bot_id] = Participant(
                id=bot_id,
                name=f"{BOT_NAMES[i % len(BOT_NAMES)]} (bot)",
                seat=0,
                is_bot=True,
                skill_level=skill_level
            )
        for seat, participant in enumerate(room.participants.values()):
            participant.seat = seat
        room.add_log(f"Bots: {bot_count} (level {skill_level}).")
        room.increment_version()

    def new_game(self, room_id: str, requester_id: str):
        room = self._require_host(room_id, requester_id)
        turns.reset_game(room)
        room.add_log("New game. Tokens reset.")
        room.increment_version()

    def start_round(self, room_id: str, requester_id: str, seed: Optional[int] = None,
                    rng: Optional[random.Random] = None) -> Optional[RoundResult]:
        room = self._require_host(room_id, requester_id)
        return turns.start_round(room, self.rules, rng=rng, seed=seed)

    def draw(self, room_id: str, player_id: str) -> CardKind:
        room = self.registry.require(room_id)
        return turns.draw(room, player_id, self.rules)

    def play(self, room_id: str, player_id: str, card, target_id: Optional[str] = None,
             guess=None) -> EffectOutcome:
        room = self.registry.require(room_id)
        return play_card(room, player_id, card, self.rules, target_id=target_id, guess=guess)

    def leave(self, room_id: str, player_id: str, reason: str = 'left') -> Optional[RoundResult]:
        room = self.registry.get(room_id)
        if not room or player_id not in room.participants:
            return None
        result = turns.remove_participant(room, player_id, self.rules, reason)
        if not room.humans():
            # Bots alone do not keep a room alive
            room.participants.clear()
        self.registry.remove_if_empty(room.id)
        return result

    def kick(self, room_id: str, requester_id: str, target_id: str) -> Optional[RoundResult]:
        room = self._require_host(room_id, requester_id)
        if target_id not in room.participants:
            raise GameError(UNKNOWN_TARGET, f"Unknown player: {target_id}")
        if target_id == requester_id:
            raise GameError(INVALID_TARGET, "The host cannot kick themselves")
        return self.leave(room_id, target_id, reason='was kicked from')

    def disconnect(self, room_id: str, player_id: str) -> Optional[RoundResult]:
        return self.leave(room_id, player_id, reason='disconnected from')

    def project(self, room_id: str) -> Dict[str, Dict[str, Any]]:
        room = self.registry.get(room_id)
        return project_room(room) if room else {}

    def _require_host(self, room_id: str, requester_id: str) -> Session:
        room = self.registry.require(room_id)
        if room.host_id is None or room.host_id != requester_id:
            raise GameError(NOT_HOST, "Only the host can do that")
        return room
