"""
Turn coordination: round setup, drawing, turn passing and round termination.
"""

import logging
import random
from typing import List, Optional, Tuple

from .constants import (
    CardKind, END_LAST_STANDING, END_SHOWDOWN, FORCED_CARD, FORCED_ELIMINATION, LOSING_CARD,
    PHASE_GAME_OVER, PHASE_LOBBY, PHASE_ROUND, PHASE_ROUND_OVER
)
from .errors import (
    GameError, DECK_EMPTY, HAND_ALREADY_FULL, INSUFFICIENT_PLAYERS, ROUND_IN_PROGRESS,
    ROUND_NOT_ACTIVE
)
from .models import Participant, RoundResult, Session
from .rules import RuleConfig
from .shuffle import build_deck, deal_cards
from .validate import forced_rule, validate_actor_turn

logger = logging.getLogger(__name__)


def require_actor_turn(state: Session, player_id: str) -> Participant:
    validate_actor_turn(state, player_id).raise_if_invalid()
    return state.participants[player_id]


def reset_game(state: Session):
    """Clear tokens and round state; the room goes back to the lobby."""
    for participant in state.participants.values():
        participant.reset_for_round()
        participant.tokens = 0
    state.phase = PHASE_LOBBY
    state.round_number = 0
    state.deck = []
    state.discard = []
    state.turn = None
    state.turn_order = []
    state.last_round_winner = None
    state.game_winner = None
    state.last_result = None


def start_round(state: Session, rules: RuleConfig, rng: Optional[random.Random] = None,
                seed: Optional[int] = None) -> Optional[RoundResult]:
    """
    Shuffle a fresh deck, deal one card to everyone and begin the first turn.

    Raises:
        GameError: ROUND_IN_PROGRESS or INSUFFICIENT_PLAYERS
    """
    if state.round_active:
        raise GameError(ROUND_IN_PROGRESS, "A round is already in progress")
    if not rules.validate_player_count(len(state.participants)):
        raise GameError(
            INSUFFICIENT_PLAYERS,
            f"Need at least {rules.min_players} players (have {len(state.participants)})"
        )

    if state.phase == PHASE_GAME_OVER:
        reset_game(state)
        state.add_log("New game.")

    state.deck = build_deck(rng=rng, seed=seed)
    state.discard = []
    for participant in state.participants.values():
        participant.reset_for_round()
    deal_cards(state.deck, state.participants)

    state.phase = PHASE_ROUND
    state.round_number += 1
    state.recompute_turn_order()
    state.add_log(f"Round {state.round_number} started.")
    logger.info(f"Room {state.id}: round {state.round_number} started with {len(state.turn_order)} players")

    result = begin_turn(state, state.turn_order[0], rules)
    state.increment_version()
    return result


def begin_turn(state: Session, player_id: str, rules: RuleConfig) -> Optional[RoundResult]:
    """
    Hand the turn to ``player_id``; their protection expires now.

    With ``auto_draw`` the draw can knock the actor out, and that may end
    the round; the result is returned in that case.
    """
    participant = state.participants[player_id]
    state.turn = player_id
    participant.protected = False
    if rules.auto_draw and len(participant.hand) == 1 and state.deck:
        return _draw_card(state, participant, rules)[1]
    return None


def draw(state: Session, player_id: str, rules: RuleConfig) -> CardKind:
    """
    Draw the actor's second card.

    Raises:
        GameError: turn-ownership errors, HAND_ALREADY_FULL or DECK_EMPTY
    """
    participant = require_actor_turn(state, player_id)
    if len(participant.hand) >= 2:
        raise GameError(HAND_ALREADY_FULL, "You already have two cards")
    if not state.deck:
        raise GameError(DECK_EMPTY, "The deck is empty")

    card, _ = _draw_card(state, participant, rules)
    state.increment_version()
    return card


def _draw_card(state: Session, participant: Participant,
               rules: RuleConfig) -> Tuple[CardKind, Optional[RoundResult]]:
    card = state.deck.pop()
    participant.hand.append(card)
    state.add_log(f"{participant.name} draws a card.")
    if apply_forced_rule(state, participant) == FORCED_ELIMINATION:
        return card, finish_turn(state, rules)
    return card, None


def apply_forced_rule(state: Session, participant: Participant) -> Optional[str]:
    """Eliminate the holder of the losing card paired with the forced card."""
    if not participant.alive:
        return None
    rule = forced_rule(participant.hand)
    if rule == FORCED_ELIMINATION:
        participant.hand.remove(LOSING_CARD)
        state.discard.append(LOSING_CARD)
        eliminate(
            state, participant.id,
            f"{participant.name} holds {LOSING_CARD.display_name} with {FORCED_CARD.display_name} and is out."
        )
    return rule


def eliminate(state: Session, player_id: str, reason: str):
    """Knock a participant out; their hand goes to the discard pile."""
    participant = state.participants[player_id]
    participant.alive = False
    participant.protected = False
    state.discard.extend(participant.hand)
    participant.hand = []
    state.recompute_turn_order()
    state.add_log(reason)
    logger.info(f"Room {state.id}: {participant.name} ({player_id}) eliminated")


def next_alive_after(state: Session, player_id: Optional[str],
                     seating: Optional[List[str]] = None) -> Optional[str]:
    """Next alive participant after ``player_id`` in seating order, wrapping around."""
    seating = seating if seating is not None else list(state.participants)
    if not seating:
        return None
    start = seating.index(player_id) if player_id in seating else -1
    for step in range(1, len(seating) + 1):
        candidate = seating[(start + step) % len(seating)]
        participant = state.participants.get(candidate)
        if participant and participant.alive and candidate != player_id:
            return candidate
    return None


def advance_turn(state: Session, rules: RuleConfig,
                 seating: Optional[List[str]] = None) -> Optional[RoundResult]:
    if not state.round_active:
        raise GameError(ROUND_NOT_ACTIVE, "No round is active")
    if len(state.alive_ids()) < 2:
        return check_round_end(state, rules, at_turn_end=False)

    next_id = next_alive_after(state, state.turn, seating)
    return begin_turn(state, next_id, rules)


def finish_turn(state: Session, rules: RuleConfig) -> Optional[RoundResult]:
    """End the current turn: terminate the round or pass the turn on."""
    result = check_round_end(state, rules)
    if result:
        return result
    return advance_turn(state, rules)


def check_round_end(state: Session, rules: RuleConfig, at_turn_end: bool = True) -> Optional[RoundResult]:
    """
    Apply the two termination triggers.

    The showdown trigger only fires at a turn boundary; mid-turn the actor
    still holds the card they drew last.
    """
    if not state.round_active:
        return None

    alive = state.alive_ids()
    if len(alive) <= 1:
        return end_round(state, alive[0] if alive else None, END_LAST_STANDING, rules)

    if at_turn_end and not state.deck:
        return end_round(state, showdown_winner(state), END_SHOWDOWN, rules)

    return None


def showdown_winner(state: Session) -> Optional[str]:
    """Highest card in hand wins; ties go to the earliest seat in turn order."""
    best_id = None
    best_rank = -1
    for player_id in state.turn_order:
        participant = state.participants[player_id]
        rank = max((card.rank for card in participant.hand), default=0)
        if rank > best_rank:
            best_id, best_rank = player_id, rank
    return best_id


def end_round(state: Session, winner_id: Optional[str], reason: str, rules: RuleConfig) -> RoundResult:
    state.phase = PHASE_ROUND_OVER
    state.turn = None
    game_over = False

    if winner_id is not None:
        winner = state.participants[winner_id]
        winner.tokens += 1
        state.last_round_winner = winner_id
        if reason == END_SHOWDOWN:
            state.add_log(f"Deck is empty. {winner.name} wins the showdown.")
        else:
            state.add_log(f"{winner.name} is the last one standing.")
        if winner.tokens >= rules.tokens_to_win:
            game_over = True
            state.phase = PHASE_GAME_OVER
            state.game_winner = winner_id
            state.add_log(f"{winner.name} wins the game with {winner.tokens} tokens!")
    else:
        state.add_log("Round over. Nobody is left.")

    logger.info(f"Room {state.id}: round {state.round_number} ended ({reason}), winner={winner_id}, game_over={game_over}")
    state.last_result = RoundResult(winner_id=winner_id, reason=reason, game_over=game_over)
    return state.last_result


def remove_participant(state: Session, player_id: str, rules: RuleConfig, reason: str = 'left') -> Optional[RoundResult]:
    """
    Remove a participant from the session.

    Mid-round this is an elimination first, so the hand lands on the
    discard pile and play continues for everyone else.
    """
    participant = state.participants[player_id]
    was_turn = state.round_active and state.turn == player_id
    seating = list(state.participants)
    next_id = None

    if state.round_active and participant.alive:
        eliminate(state, player_id, f"{participant.name} {reason} the room.")
        if was_turn:
            next_id = next_alive_after(state, player_id, seating)
    else:
        state.add_log(f"{participant.name} {reason} the room.")

    del state.participants[player_id]
    for seat, remaining in enumerate(state.participants.values()):
        remaining.seat = seat
    if state.host_id == player_id:
        state.host_id = None

    result = None
    if state.round_active:
        state.recompute_turn_order()
        result = check_round_end(state, rules, at_turn_end=was_turn)
        if result is None and was_turn and next_id is not None:
            result = begin_turn(state, next_id, rules)

    state.increment_version()
    return result
