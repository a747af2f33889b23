"""
Move validation and the forced-discard rule.
"""

from typing import List, Optional

from .constants import (
    CardKind, FORCED_CARD, FORCED_ELIMINATION, FORCED_PLAY, FORCING_CARDS, LOSING_CARD,
    NO_TARGET, TARGET_SELF_ALLOWED, parse_card
)
from .errors import (
    GameError, CANNOT_DISCARD_LOSING_CARD, CARD_NOT_IN_HAND, DRAW_REQUIRED, GUESS_REQUIRED,
    ILLEGAL_GUESS, INVALID_TARGET, MUST_PLAY_FORCED_CARD, NOT_YOUR_TURN, PLAYER_ELIMINATED,
    ROUND_NOT_ACTIVE, UNKNOWN_PARTICIPANT, UNKNOWN_TARGET
)
from .models import Session


class ValidationResult:
    """Result of move validation."""

    def __init__(
        self,
        valid: bool,
        error_code: Optional[str] = None,
        error_message: Optional[str] = None,
        card: Optional[CardKind] = None,
        target_id: Optional[str] = None,
        guess: Optional[CardKind] = None,
        no_effect: bool = False
    ):
        self.valid = valid
        self.error_code = error_code
        self.error_message = error_message
        self.card = card
        self.target_id = target_id
        self.guess = guess
        self.no_effect = no_effect

    @classmethod
    def success(cls, card: Optional[CardKind] = None, target_id: Optional[str] = None,
                guess: Optional[CardKind] = None, no_effect: bool = False) -> 'ValidationResult':
        """Create a successful validation result."""
        return cls(valid=True, card=card, target_id=target_id, guess=guess, no_effect=no_effect)

    @classmethod
    def error(cls, error_code: str, error_message: str) -> 'ValidationResult':
        """Create an error validation result."""
        return cls(valid=False, error_code=error_code, error_message=error_message)

    def raise_if_invalid(self) -> 'ValidationResult':
        if not self.valid:
            raise GameError(self.error_code, self.error_message)
        return self


def forced_rule(hand: List[CardKind]) -> Optional[str]:
    """
    Evaluate a hand against the forced-discard rule.

    Returns:
        FORCED_ELIMINATION when the hand holds the losing card together with
        the forced card, FORCED_PLAY when the forced card must be played,
        otherwise None.
    """
    if FORCED_CARD not in hand:
        return None
    if LOSING_CARD in hand:
        return FORCED_ELIMINATION
    if any(card in FORCING_CARDS for card in hand):
        return FORCED_PLAY
    return None


def legal_cards(hand: List[CardKind]) -> List[CardKind]:
    """Cards the holder may choose to play from a two-card hand."""
    rule = forced_rule(hand)
    if rule == FORCED_ELIMINATION:
        return []
    if rule == FORCED_PLAY:
        return [FORCED_CARD]
    legal = []
    for card in hand:
        if card != LOSING_CARD and card not in legal:
            legal.append(card)
    return legal


def target_candidates(state: Session, actor_id: str) -> List[str]:
    """Alive, unprotected opponents in turn order."""
    return [
        pid for pid in state.turn_order
        if pid != actor_id and pid in state.participants
        and state.participants[pid].alive and not state.participants[pid].protected
    ]


def validate_actor_turn(state: Session, player_id: str) -> ValidationResult:
    """Turn ownership guard shared by every in-round action."""
    if not state.round_active:
        return ValidationResult.error(
            ROUND_NOT_ACTIVE,
            f"No round is active (current phase: {state.phase})"
        )

    player = state.participants.get(player_id)
    if not player:
        return ValidationResult.error(
            UNKNOWN_PARTICIPANT,
            "Player not found"
        )

    if not player.alive:
        return ValidationResult.error(
            PLAYER_ELIMINATED,
            "You are out of this round"
        )

    if state.turn != player_id:
        return ValidationResult.error(
            NOT_YOUR_TURN,
            f"It's not your turn (current turn: {state.turn})"
        )

    return ValidationResult.success()


def validate_play(
    state: Session,
    player_id: str,
    card,
    target_id: Optional[str] = None,
    guess=None
) -> ValidationResult:
    """
    Validate a card play attempt without touching state.

    Args:
        state: Current session
        player_id: ID of player attempting the play
        card: Card kind (or wire key) being played
        target_id: Optional target participant
        guess: Guessed kind, Watcher only

    Returns:
        ValidationResult carrying the resolved card, target and guess
    """
    turn_check = validate_actor_turn(state, player_id)
    if not turn_check.valid:
        return turn_check

    player = state.participants[player_id]
    kind = parse_card(card)
    if kind is None:
        return ValidationResult.error(
            CARD_NOT_IN_HAND,
            f"Unknown card: {card}"
        )

    if len(player.hand) < 2:
        return ValidationResult.error(
            DRAW_REQUIRED,
            "Draw a card before playing"
        )

    if kind not in player.hand:
        return ValidationResult.error(
            CARD_NOT_IN_HAND,
            f"{kind.display_name} is not in your hand"
        )

    if forced_rule(player.hand) == FORCED_PLAY and kind != FORCED_CARD:
        return ValidationResult.error(
            MUST_PLAY_FORCED_CARD,
            f"You must play {FORCED_CARD.display_name}"
        )

    if kind == LOSING_CARD:
        return ValidationResult.error(
            CANNOT_DISCARD_LOSING_CARD,
            f"{LOSING_CARD.display_name} cannot be played"
        )

    # Cards without a target ignore whatever was sent
    if kind in NO_TARGET:
        return ValidationResult.success(card=kind)

    if kind in TARGET_SELF_ALLOWED:
        resolved = target_id or player_id
        target = state.participants.get(resolved)
        if not target:
            return ValidationResult.error(UNKNOWN_TARGET, f"Unknown target: {resolved}")
        if not target.alive:
            return ValidationResult.error(INVALID_TARGET, f"{target.name} is already out")
        # Aegis may stack on a protected player; Courier fizzles on one
        no_effect = kind == CardKind.COURIER and resolved != player_id and target.protected
        return ValidationResult.success(card=kind, target_id=resolved, no_effect=no_effect)

    if target_id is None:
        if target_candidates(state, player_id):
            return ValidationResult.error(
                INVALID_TARGET,
                f"{kind.display_name} needs a target"
            )
        return ValidationResult.success(card=kind, no_effect=True)

    target = state.participants.get(target_id)
    if not target:
        return ValidationResult.error(UNKNOWN_TARGET, f"Unknown target: {target_id}")
    if target_id == player_id:
        return ValidationResult.error(
            INVALID_TARGET,
            f"{kind.display_name} cannot target yourself"
        )
    if not target.alive:
        return ValidationResult.error(INVALID_TARGET, f"{target.name} is already out")

    guessed = None
    if kind == CardKind.WATCHER:
        if guess is None or guess == '':
            return ValidationResult.error(GUESS_REQUIRED, "Name a card to guess")
        guessed = parse_card(guess)
        if guessed is None or guessed == CardKind.WATCHER:
            return ValidationResult.error(
                ILLEGAL_GUESS,
                f"Cannot guess {guess}"
            )

    return ValidationResult.success(
        card=kind, target_id=target_id, guess=guessed, no_effect=target.protected
    )
