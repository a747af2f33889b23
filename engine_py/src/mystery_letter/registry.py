"""Room registry: one live session per room id"""

import logging
from collections import deque
from typing import Dict, Iterator, Optional

from .constants import normalize_room_id
from .errors import GameError, ROOM_NOT_FOUND
from .models import Session
from .rules import RuleConfig, default_rules

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Maps room ids to sessions. Construct one per process and inject it."""

    def __init__(self, rules: Optional[RuleConfig] = None):
        self.rules = rules or default_rules
        self.rooms: Dict[str, Session] = {}

    def get_or_create(self, room_id: str) -> Session:
        room_id = normalize_room_id(room_id)
        if not room_id:
            raise GameError(ROOM_NOT_FOUND, "Room id is required")
        if room_id not in self.rooms:
            self.rooms[room_id] = Session(id=room_id, log=deque(maxlen=self.rules.log_limit))
            logger.info(f"Created room {room_id}")
        return self.rooms[room_id]

    def get(self, room_id: str) -> Optional[Session]:
        return self.rooms.get(normalize_room_id(room_id))

    def require(self, room_id: str) -> Session:
        session = self.get(room_id)
        if session is None:
            raise GameError(ROOM_NOT_FOUND, f"Room {room_id} not found")
        return session

    def remove_if_empty(self, room_id: str) -> bool:
        room_id = normalize_room_id(room_id)
        session = self.rooms.get(room_id)
        if session is not None and not session.participants:
            del self.rooms[room_id]
            logger.info(f"Removed empty room {room_id}")
            return True
        return False

    def __contains__(self, room_id: str) -> bool:
        return normalize_room_id(room_id) in self.rooms

    def __len__(self) -> int:
        return len(self.rooms)

    def __iter__(self) -> Iterator[Session]:
        return iter(list(self.rooms.values()))
