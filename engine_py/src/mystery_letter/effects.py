"""
Card effect resolution.
"""

import logging
from typing import Callable, Dict, Optional

from .constants import CardKind, LOSING_CARD, compare_ranks
from .models import EffectOutcome, Participant, Session
from .rules import RuleConfig
from .turns import apply_forced_rule, eliminate, finish_turn
from .validate import validate_play

logger = logging.getLogger(__name__)


def play_card(
    state: Session,
    player_id: str,
    card,
    rules: RuleConfig,
    target_id: Optional[str] = None,
    guess=None
) -> EffectOutcome:
    """
    Play a card from the actor's hand and resolve its effect.

    Every precondition is checked before anything moves, so a rejected
    play leaves the session exactly as it was.

    Raises:
        GameError: if the play is not legal
    """
    validation = validate_play(state, player_id, card, target_id, guess).raise_if_invalid()
    kind = validation.card
    actor = state.participants[player_id]
    target = state.participants.get(validation.target_id) if validation.target_id else None

    actor.hand.remove(kind)
    state.discard.append(kind)

    outcome = EffectOutcome(
        actor_id=player_id,
        card=kind,
        target_id=validation.target_id,
        guess=validation.guess,
        no_effect=validation.no_effect
    )

    if target is None or target.id == player_id:
        state.add_log(f"{actor.name} plays {kind.display_name}.")
    else:
        state.add_log(f"{actor.name} plays {kind.display_name} on {target.name}.")

    if outcome.no_effect:
        if target is None:
            outcome.message = "No one can be targeted."
        else:
            outcome.message = f"{target.name} is protected."
        state.add_log(f"{outcome.message} Nothing happens.")
    else:
        EFFECT_HANDLERS[kind](state, actor, target, outcome)

    # Swaps and forced discards change hands; re-check them before moving on
    for participant in (actor, target):
        if participant is not None and participant.id in state.participants:
            apply_forced_rule(state, participant)

    outcome.round_result = finish_turn(state, rules)
    state.increment_version()
    logger.info(f"Room {state.id}: {actor.name} played {kind.value} target={outcome.target_id} eliminated={outcome.eliminated}")
    return outcome


def _held_card(participant: Participant) -> Optional[CardKind]:
    return participant.hand[0] if participant.hand else None


def _knock_out(state: Session, participant: Participant, outcome: EffectOutcome, reason: str):
    eliminate(state, participant.id, reason)
    outcome.eliminated.append(participant.id)


def resolve_watcher(state: Session, actor: Participant, target: Participant, outcome: EffectOutcome):
    held = _held_card(target)
    if held is not None and held == outcome.guess:
        outcome.message = f"{actor.name} correctly names {held.display_name}."
        _knock_out(state, target, outcome, f"{outcome.message} {target.name} is out.")
    else:
        outcome.message = f"{actor.name} guesses {outcome.guess.display_name}. Wrong."
        state.add_log(outcome.message)


def resolve_seer(state: Session, actor: Participant, target: Participant, outcome: EffectOutcome):
    held = _held_card(target)
    outcome.reveal = {
        'target_id': target.id,
        'card': held.value if held else None,
    }
    outcome.message = f"{actor.name} looks at {target.name}'s hand."
    state.add_log(outcome.message)


def resolve_aegis(state: Session, actor: Participant, target: Participant, outcome: EffectOutcome):
    target.protected = True
    outcome.protected = target.id
    outcome.message = f"{target.name} is protected until their next turn."
    state.add_log(outcome.message)


def resolve_duelist(state: Session, actor: Participant, target: Participant, outcome: EffectOutcome):
    diff = compare_ranks(_held_card(actor), _held_card(target))
    if diff < 0:
        outcome.message = f"{actor.name} loses the duel against {target.name}."
        _knock_out(state, actor, outcome, f"{outcome.message} {actor.name} is out.")
    elif diff > 0:
        outcome.message = f"{target.name} loses the duel against {actor.name}."
        _knock_out(state, target, outcome, f"{outcome.message} {target.name} is out.")
    else:
        outcome.message = f"{actor.name} and {target.name} tie the duel."
        state.add_log(outcome.message)


def resolve_switch(state: Session, actor: Participant, target: Participant, outcome: EffectOutcome):
    actor.hand, target.hand = target.hand, actor.hand
    outcome.swapped = True
    outcome.message = f"{actor.name} trades hands with {target.name}."
    state.add_log(outcome.message)


def resolve_courier(state: Session, actor: Participant, target: Participant, outcome: EffectOutcome):
    if not target.hand:
        outcome.message = f"{target.name} has nothing to discard."
        state.add_log(outcome.message)
        return

    discarded = target.hand.pop()
    state.discard.append(discarded)
    if discarded == LOSING_CARD:
        outcome.message = f"{target.name} discards {discarded.display_name}."
        _knock_out(state, target, outcome, f"{outcome.message} {target.name} is out.")
        return

    if state.deck:
        target.hand.append(state.deck.pop())
        outcome.message = f"{target.name} discards {discarded.display_name} and draws a new card."
    else:
        outcome.message = f"{target.name} discards {discarded.display_name}; the deck is empty."
    state.add_log(outcome.message)


def resolve_heir(state: Session, actor: Participant, target: Optional[Participant], outcome: EffectOutcome):
    outcome.message = f"{actor.name} sets {CardKind.HEIR.display_name} aside."


def resolve_oracle(state: Session, actor: Participant, target: Optional[Participant], outcome: EffectOutcome):
    outcome.message = f"{actor.name} discards {LOSING_CARD.display_name}."
    _knock_out(state, actor, outcome, f"{outcome.message} {actor.name} is out.")


EFFECT_HANDLERS: Dict[CardKind, Callable[[Session, Participant, Optional[Participant], EffectOutcome], None]] = {
    CardKind.WATCHER: resolve_watcher,
    CardKind.SEER: resolve_seer,
    CardKind.AEGIS: resolve_aegis,
    CardKind.DUELIST: resolve_duelist,
    CardKind.SWITCH: resolve_switch,
    CardKind.COURIER: resolve_courier,
    CardKind.HEIR: resolve_heir,
    CardKind.ORACLE: resolve_oracle,
}
