"""
Heuristic bot with three skill levels.
"""

from typing import List, Optional

from .base import BaseBot, BotAction
from ..constants import CARD_CATALOG, CardKind, FORCED_CARD, FORCED_PLAY, LOSING_CARD
from ..models import Session
from ..validate import forced_rule

# Level 2 plays the first card of this list it holds
PREFERENCE = [
    CardKind.AEGIS,
    CardKind.SEER,
    CardKind.WATCHER,
    CardKind.DUELIST,
    CardKind.COURIER,
    CardKind.SWITCH,
    CardKind.HEIR,
]

GUESSABLE = [kind for kind in CardKind if kind != CardKind.WATCHER]


class HeuristicBot(BaseBot):
    """
    Skill-dependent bot.

    Strategy:
    - Level 1: any legal card, random targets and guesses
    - Level 2: fixed preference for protection and information cards
    - Level 3: scores each card; shields itself when exposed, guesses the
      Oracle with Watcher, and uses Courier on itself to dump a weak card
    """

    def choose_action(self, state: Session) -> Optional[BotAction]:
        """Choose the next action for the current state."""
        if not self.is_my_turn(state):
            return None

        hand = self.get_player_hand(state)
        if len(hand) < 2:
            return BotAction.draw() if state.deck else None

        if forced_rule(hand) == FORCED_PLAY:
            return self._build_play(state, FORCED_CARD)

        legal = self.get_legal_cards(state)
        if not legal:
            return None
        return self._build_play(state, self._choose_card(state, legal))

    def _choose_card(self, state: Session, legal: List[CardKind]) -> CardKind:
        if self.skill_level <= 1:
            return self.rng.choice(legal)
        if self.skill_level == 2:
            return min(legal, key=lambda card: PREFERENCE.index(card) if card in PREFERENCE else len(PREFERENCE))
        return max(legal, key=lambda card: self._score_card(state, card))

    def _score_card(self, state: Session, card: CardKind) -> float:
        """Score playing ``card`` (level 3)."""
        me = state.participants[self.player_id]
        hand = self.get_player_hand(state)
        remaining = [c for c in hand if c != card] or [card]
        kept = remaining[0]
        targets = self.get_targets(state)

        # Keep the stronger card for the showdown
        score = kept.rank * 2.0 - card.rank

        if card == CardKind.AEGIS and not me.protected:
            score += 20
        if card == CardKind.WATCHER and targets:
            score += 4
        if card == CardKind.SEER and targets:
            score += 2
        if card == CardKind.DUELIST:
            score += 8 if kept.rank >= 5 else -8
        if card == CardKind.COURIER and kept == LOSING_CARD and not targets:
            score -= 50
        if card == CardKind.SWITCH and kept.rank >= 6:
            score -= 6
        return score

    def _build_play(self, state: Session, card: CardKind) -> BotAction:
        targets = self.get_targets(state)
        hand = self.get_player_hand(state)
        remaining = [c for c in hand if c != card] or [card]
        kept = remaining[0]

        if card == CardKind.AEGIS:
            return BotAction.play(card, target_id=self.player_id)

        if card == CardKind.COURIER:
            if kept == LOSING_CARD:
                target = self._pick(targets) or self._protected_opponent(state)
                return BotAction.play(card, target_id=target)
            if self.skill_level >= 3 and kept.rank <= 2:
                return BotAction.play(card, target_id=self.player_id)
            return BotAction.play(card, target_id=self._pick(targets) or self.player_id)

        if card in (CardKind.WATCHER, CardKind.SEER, CardKind.DUELIST, CardKind.SWITCH):
            target = self._pick(targets)
            guess = self._guess(state) if card == CardKind.WATCHER and target else None
            return BotAction.play(card, target_id=target, guess=guess)

        return BotAction.play(card)

    def _pick(self, targets: List[str]) -> Optional[str]:
        return self.rng.choice(targets) if targets else None

    def _protected_opponent(self, state: Session) -> Optional[str]:
        for pid in state.turn_order:
            if pid != self.player_id and state.participants[pid].protected:
                return pid
        return None

    def _guess(self, state: Session) -> CardKind:
        hand = self.get_player_hand(state)
        if self.skill_level >= 3:
            if LOSING_CARD not in hand and LOSING_CARD not in state.discard:
                return LOSING_CARD
            return self._likeliest_unseen(state, hand)
        return self.rng.choice(GUESSABLE)

    def _likeliest_unseen(self, state: Session, hand: List[CardKind]) -> CardKind:
        """Guessable kind with the most copies not visible to this bot."""
        def unseen(kind: CardKind) -> int:
            seen = state.discard.count(kind) + hand.count(kind)
            return CARD_CATALOG[kind].count - seen

        return max(GUESSABLE, key=lambda kind: (unseen(kind), kind.rank))
