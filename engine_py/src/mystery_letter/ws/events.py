"""
WebSocket event models and validation.
"""

import time
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, ValidationError


class EventType(str, Enum):
    """Inbound event types."""
    JOIN = "join"
    CLAIM_HOST = "claim_host"
    CONFIGURE_BOTS = "configure_bots"
    NEW_GAME = "new_game"
    START_ROUND = "start_round"
    DRAW = "draw"
    PLAY = "play"
    LEAVE = "leave"
    KICK = "kick"
    REQUEST_STATE = "request_state"


class OutboundEventType(str, Enum):
    """Outbound event types."""
    JOIN_SUCCESS = "join_success"
    STATE_FULL = "state_full"
    DRAWN = "drawn"
    REVEAL = "reveal"
    ROUND_OVER = "round_over"
    ERROR = "error"


class ErrorCode(str, Enum):
    """Error codes for client events."""
    INVALID_EVENT = "INVALID_EVENT"
    NOT_IN_ROOM = "NOT_IN_ROOM"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    ROUND_NOT_ACTIVE = "ROUND_NOT_ACTIVE"
    PLAYER_ELIMINATED = "PLAYER_ELIMINATED"
    UNKNOWN_PARTICIPANT = "UNKNOWN_PARTICIPANT"
    MUST_PLAY_FORCED_CARD = "MUST_PLAY_FORCED_CARD"
    CANNOT_DISCARD_LOSING_CARD = "CANNOT_DISCARD_LOSING_CARD"
    ILLEGAL_GUESS = "ILLEGAL_GUESS"
    GUESS_REQUIRED = "GUESS_REQUIRED"
    CARD_NOT_IN_HAND = "CARD_NOT_IN_HAND"
    INVALID_TARGET = "INVALID_TARGET"
    DRAW_REQUIRED = "DRAW_REQUIRED"
    INSUFFICIENT_PLAYERS = "INSUFFICIENT_PLAYERS"
    DECK_EMPTY = "DECK_EMPTY"
    HAND_ALREADY_FULL = "HAND_ALREADY_FULL"
    ROOM_FULL = "ROOM_FULL"
    ROUND_IN_PROGRESS = "ROUND_IN_PROGRESS"
    INVALID_BOT_CONFIG = "INVALID_BOT_CONFIG"
    NOT_HOST = "NOT_HOST"
    HOST_ALREADY_CLAIMED = "HOST_ALREADY_CLAIMED"
    UNKNOWN_TARGET = "UNKNOWN_TARGET"
    ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# Inbound event models
class BaseEvent(BaseModel):
    """Base event model."""
    type: EventType


class JoinEvent(BaseEvent):
    """Join room event."""
    type: EventType = EventType.JOIN
    room_id: str = Field(..., min_length=1, max_length=50)
    name: str = Field(default="", max_length=50)


class ClaimHostEvent(BaseEvent):
    """Claim host event."""
    type: EventType = EventType.CLAIM_HOST


class ConfigureBotsEvent(BaseEvent):
    """Configure bots event (host only)."""
    type: EventType = EventType.CONFIGURE_BOTS
    bot_count: int = Field(..., ge=0, le=3)
    skill_level: int = Field(default=1, ge=1, le=3)


class NewGameEvent(BaseEvent):
    """New game event (host only)."""
    type: EventType = EventType.NEW_GAME


class StartRoundEvent(BaseEvent):
    """Start round event (host only)."""
    type: EventType = EventType.START_ROUND
    seed: Optional[int] = None


class DrawEvent(BaseEvent):
    """Draw card event."""
    type: EventType = EventType.DRAW


class PlayEvent(BaseEvent):
    """Play card event."""
    type: EventType = EventType.PLAY
    card: str = Field(..., min_length=1, max_length=20)
    target_id: Optional[str] = None
    guess: Optional[str] = None


class LeaveEvent(BaseEvent):
    """Leave room event."""
    type: EventType = EventType.LEAVE


class KickEvent(BaseEvent):
    """Kick player event (host only)."""
    type: EventType = EventType.KICK
    target_id: str = Field(..., min_length=1)


class RequestStateEvent(BaseEvent):
    """Request full state event."""
    type: EventType = EventType.REQUEST_STATE


# Union type for all inbound events
InboundEvent = Union[
    JoinEvent,
    ClaimHostEvent,
    ConfigureBotsEvent,
    NewGameEvent,
    StartRoundEvent,
    DrawEvent,
    PlayEvent,
    LeaveEvent,
    KickEvent,
    RequestStateEvent
]


# Outbound event models
class JoinSuccessEvent(BaseModel):
    """Join success confirmation event."""
    type: OutboundEventType = OutboundEventType.JOIN_SUCCESS
    player_id: str
    room_id: str
    timestamp: float


class StateFullEvent(BaseModel):
    """Full state event."""
    type: OutboundEventType = OutboundEventType.STATE_FULL
    state: Dict[str, Any]
    timestamp: float


class DrawnEvent(BaseModel):
    """Private notice of the card just drawn."""
    type: OutboundEventType = OutboundEventType.DRAWN
    card: str
    timestamp: float


class RevealEvent(BaseModel):
    """Private Seer result."""
    type: OutboundEventType = OutboundEventType.REVEAL
    target_id: str
    card: Optional[str]
    timestamp: float


class RoundOverEvent(BaseModel):
    """Round result broadcast."""
    type: OutboundEventType = OutboundEventType.ROUND_OVER
    winner_id: Optional[str]
    reason: str
    game_over: bool
    hands: Dict[str, List[str]]
    timestamp: float


class ErrorEvent(BaseModel):
    """Error event."""
    type: OutboundEventType = OutboundEventType.ERROR
    code: ErrorCode
    message: str
    timestamp: float


# Union type for all outbound events
OutboundEvent = Union[
    JoinSuccessEvent,
    StateFullEvent,
    DrawnEvent,
    RevealEvent,
    RoundOverEvent,
    ErrorEvent
]


EVENT_MAP = {
    EventType.JOIN: JoinEvent,
    EventType.CLAIM_HOST: ClaimHostEvent,
    EventType.CONFIGURE_BOTS: ConfigureBotsEvent,
    EventType.NEW_GAME: NewGameEvent,
    EventType.START_ROUND: StartRoundEvent,
    EventType.DRAW: DrawEvent,
    EventType.PLAY: PlayEvent,
    EventType.LEAVE: LeaveEvent,
    EventType.KICK: KickEvent,
    EventType.REQUEST_STATE: RequestStateEvent,
}


def parse_inbound_event(data: Dict[str, Any]) -> InboundEvent:
    """
    Parse raw event data into appropriate event model.

    Args:
        data: Raw event data from WebSocket

    Returns:
        Parsed event model

    Raises:
        ValueError: If event type is invalid or data is malformed
    """
    if not isinstance(data, dict):
        raise ValueError("Event must be a JSON object")

    event_type = data.get("type")

    if not event_type:
        raise ValueError("Missing event type")

    try:
        event_type = EventType(event_type)
    except ValueError:
        raise ValueError(f"Invalid event type: {event_type}")

    event_class = EVENT_MAP.get(event_type)
    if not event_class:
        raise ValueError(f"No handler for event type: {event_type}")

    try:
        return event_class(**data)
    except ValidationError as e:
        raise ValueError(f"Invalid event data: {str(e)}")


def create_error_event(code: ErrorCode, message: str) -> ErrorEvent:
    """Create an error event."""
    return ErrorEvent(
        code=code,
        message=message,
        timestamp=time.time()
    )


def create_join_success_event(player_id: str, room_id: str) -> JoinSuccessEvent:
    """Create a join success event."""
    return JoinSuccessEvent(
        player_id=player_id,
        room_id=room_id,
        timestamp=time.time()
    )


def create_state_full_event(state: Dict[str, Any]) -> StateFullEvent:
    """Create a full state event."""
    return StateFullEvent(
        state=state,
        timestamp=time.time()
    )


def create_drawn_event(card: str) -> DrawnEvent:
    return DrawnEvent(card=card, timestamp=time.time())


def create_reveal_event(target_id: str, card: Optional[str]) -> RevealEvent:
    return RevealEvent(target_id=target_id, card=card, timestamp=time.time())


def create_round_over_event(winner_id: Optional[str], reason: str, game_over: bool,
                            hands: Dict[str, List[str]]) -> RoundOverEvent:
    """Create a round over event; ``hands`` are the survivors' cards at the end."""
    return RoundOverEvent(
        winner_id=winner_id,
        reason=reason,
        game_over=game_over,
        hands=hands,
        timestamp=time.time()
    )
