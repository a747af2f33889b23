"""
Base bot interface and utilities.
"""

import logging
import random
from abc import ABC, abstractmethod
from typing import List, Optional

from ..constants import (
    CardKind, FORCED_CARD, LOSING_CARD, NO_TARGET, TARGET_SELF_ALLOWED
)
from ..errors import GameError
from ..models import EffectOutcome, Session
from ..validate import legal_cards, target_candidates

logger = logging.getLogger(__name__)


class BotAction:
    """Represents a bot action."""

    def __init__(self, action_type: str, **kwargs):
        self.type = action_type
        self.data = kwargs

    @classmethod
    def draw(cls) -> 'BotAction':
        """Create a draw action."""
        return cls('draw')

    @classmethod
    def play(cls, card: CardKind, target_id: Optional[str] = None,
             guess: Optional[CardKind] = None) -> 'BotAction':
        """Create a play action."""
        return cls('play', card=card, target_id=target_id, guess=guess)

    def __repr__(self):
        return f"BotAction({self.type}, {self.data})"


class BaseBot(ABC):
    """Abstract base class for bot players."""

    def __init__(self, player_id: str, skill_level: int = 1, rng: Optional[random.Random] = None):
        self.player_id = player_id
        self.skill_level = skill_level
        self.rng = rng or random.Random()

    @abstractmethod
    def choose_action(self, state: Session) -> Optional[BotAction]:
        """
        Choose an action based on the current game state.

        Args:
            state: Current session

        Returns:
            BotAction to take, or None if no action needed
        """
        pass

    def get_player_hand(self, state: Session) -> List[CardKind]:
        """Get this bot's current hand."""
        player = state.participants.get(self.player_id)
        return player.hand if player else []

    def is_my_turn(self, state: Session) -> bool:
        """Check if it's this bot's turn."""
        player = state.participants.get(self.player_id)
        return state.round_active and state.turn == self.player_id and bool(player and player.alive)

    def get_legal_cards(self, state: Session) -> List[CardKind]:
        return legal_cards(self.get_player_hand(state))

    def get_targets(self, state: Session) -> List[str]:
        """Alive, unprotected opponents."""
        return target_candidates(state, self.player_id)

    def take_turn(self, engine, room_id: str) -> Optional[EffectOutcome]:
        """
        Draw if needed, then play.

        A rejected play is retried once with the target dropped, then the
        bot falls back to any legal card it can play safely.
        """
        state = engine.get_room(room_id)
        if not state or not self.is_my_turn(state):
            return None

        action = self.choose_action(state)
        if action and action.type == 'draw':
            engine.draw(room_id, self.player_id)
            state = engine.get_room(room_id)
            # Drawing can end the turn (forced elimination)
            if not state or not self.is_my_turn(state):
                return None
            action = self.choose_action(state)

        if not action or action.type != 'play':
            return None

        try:
            return engine.play(room_id, self.player_id, **action.data)
        except GameError as e:
            logger.info(f"Bot {self.player_id} play {action} rejected: {e}")

        relaxed = self.relax(action)
        if relaxed is not None:
            try:
                return engine.play(room_id, self.player_id, **relaxed.data)
            except GameError as e:
                logger.info(f"Bot {self.player_id} relaxed play {relaxed} rejected: {e}")

        fallback = self.fallback_action(state)
        if fallback is None:
            logger.warning(f"Bot {self.player_id} has no legal play")
            return None
        return engine.play(room_id, self.player_id, **fallback.data)

    def relax(self, action: BotAction) -> Optional[BotAction]:
        """Same card without a target, when that could still be legal."""
        card = action.data.get('card')
        if card in NO_TARGET or action.data.get('target_id') is None:
            return None
        return BotAction.play(card)

    def fallback_action(self, state: Session) -> Optional[BotAction]:
        legal = self.get_legal_cards(state)
        hand = self.get_player_hand(state)
        targets = self.get_targets(state)
        for card in legal:
            remaining = [c for c in hand if c != card] or [card]
            if card == FORCED_CARD or card == CardKind.AEGIS:
                return BotAction.play(card)
            if card == CardKind.COURIER and remaining[0] != LOSING_CARD:
                return BotAction.play(card)
        for card in legal:
            if card in TARGET_SELF_ALLOWED:
                if targets:
                    return BotAction.play(card, target_id=targets[0])
                continue
            if not targets:
                return BotAction.play(card)
            guess = CardKind.SEER if card == CardKind.WATCHER else None
            return BotAction.play(card, target_id=targets[0], guess=guess)
        return BotAction.play(legal[0]) if legal else None
