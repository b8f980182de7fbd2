"""Deck creation and dealing."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from random import Random
from typing import Dict, List, Optional, Sequence

from .cards import Card, Suit
from .rules import DEFAULT_RULES, RuleSet

logger = logging.getLogger(__name__)


def build_deck(rules: RuleSet = DEFAULT_RULES) -> List[Card]:
    """Return the ordered canonical deck: every suit 1..max_value, then the jokers."""
    cards = [Card(suit, value) for suit in rules.ranked_suits for value in range(1, rules.max_value + 1)]
    cards.extend(Card(Suit.JOKER) for _ in range(rules.jokers))
    return cards


def shuffle(cards: Sequence[Card], rng: Optional[Random] = None) -> List[Card]:
    """Return a uniformly random permutation of ``cards`` (Fisher-Yates)."""
    shuffled = list(cards)
    (rng or Random()).shuffle(shuffled)
    return shuffled


@dataclass
class Deck:
    """Draw pile for a match; rebuilt from scratch when it cannot cover a deal."""

    rng: Random = field(default_factory=Random)
    rules: RuleSet = DEFAULT_RULES
    cards: List[Card] = field(default_factory=list)
    rebuilds: int = 0

    @property
    def remaining(self) -> int:
        return len(self.cards)

    def deal(self, hand_size: int, player_ids: Sequence[str]) -> Dict[str, List[Card]]:
        """Deal ``hand_size`` cards to each player, one card per player per pass."""
        needed = hand_size * len(player_ids)
        if len(self.cards) < needed:
            logger.info("Building new deck: needed %d, available %d", needed, len(self.cards))
            self.cards = shuffle(build_deck(self.rules), self.rng)
            self.rebuilds += 1
            if len(self.cards) < needed:
                raise ValueError(f"A fresh deck holds {len(self.cards)} cards, {needed} requested.")

        hands: Dict[str, List[Card]] = {player_id: [] for player_id in player_ids}
        for _ in range(hand_size):
            for player_id in player_ids:
                hands[player_id].append(self.cards.pop())
        logger.debug("Dealt %d cards to %d players, %d left", hand_size, len(player_ids), len(self.cards))
        return hands
