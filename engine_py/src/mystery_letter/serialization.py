"""
State serialization and sanitization utilities.
"""

from typing import Any, Dict, Optional

from .models import Participant, Session
from .validate import legal_cards


def sanitize_state(state: Session, viewer_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Sanitize session state for transmission to one client.

    Args:
        state: Session to sanitize
        viewer_id: ID of the participant viewing the state (to show their cards)

    Returns:
        Sanitized state dictionary safe for JSON transmission
    """
    sanitized = {
        "id": state.id,
        "version": state.version,
        "phase": state.phase,
        "host_id": state.host_id,
        "round_number": state.round_number,
        "round_active": state.round_active,
        "turn": state.turn,
        "deck_count": len(state.deck),
        "discard": [card.value for card in state.discard],
        "players": [serialize_participant(p) for p in state.participants.values()],
        "hand": [],
        "must_play": None,
        "needs_draw": False,
        "last_round_winner": state.last_round_winner,
        "game_winner": state.game_winner,
        "log": list(state.log),
    }

    viewer = state.participants.get(viewer_id) if viewer_id else None
    if viewer:
        sanitized["you"] = viewer.id
        sanitized["hand"] = [card.value for card in viewer.hand]
        if state.round_active and state.turn == viewer.id:
            if len(viewer.hand) >= 2:
                sanitized["must_play"] = [card.value for card in legal_cards(viewer.hand)]
            else:
                sanitized["needs_draw"] = True

    return sanitized


def serialize_participant(participant: Participant) -> Dict[str, Any]:
    """Public roster entry; hand contents are never included."""
    return {
        "id": participant.id,
        "name": participant.name,
        "seat": participant.seat,
        "is_bot": participant.is_bot,
        "skill_level": participant.skill_level,
        "alive": participant.alive,
        "protected": participant.protected,
        "tokens": participant.tokens,
        "hand_count": len(participant.hand),
    }


def project_room(state: Session) -> Dict[str, Dict[str, Any]]:
    """One personalized state per human participant."""
    return {
        participant.id: sanitize_state(state, participant.id)
        for participant in state.humans()
    }


def get_public_room_info(state: Session) -> Dict[str, Any]:
    """Get public information about a room for listings."""
    return {
        "id": state.id,
        "phase": state.phase,
        "player_count": len(state.participants),
        "round_number": state.round_number,
    }
