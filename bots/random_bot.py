"""Uniformly random baseline bot."""

from __future__ import annotations

import random
from typing import List, Optional, Tuple

from trickrace.cards import Card
from trickrace.match import Match, MovementChoice
from trickrace.ranking import RankingAction

from .base import BotStrategy


class RandomBot(BotStrategy):
    name = "Random"

    def __init__(self, seed: Optional[int] = None) -> None:
        self._rng = random.Random(seed)

    def choose_card(self, match: Match, player_id: str) -> Card:
        legal = match.legal_cards(player_id)
        if not legal:
            raise RuntimeError("No legal plays available for bot.")
        return self._rng.choice(legal)

    def choose_ranking(self, match: Match, player_id: str) -> Tuple[RankingAction, List]:
        action = match.ranking.offered_action()
        if action is RankingAction.ADD:
            unranked = [suit for suit in match.rules.ranked_suits if suit not in match.ranking]
            return action, [self._rng.choice(unranked)]
        return action, self._rng.sample(list(match.ranking), 2)

    def choose_movement(self, match: Match, player_id: str) -> Tuple[MovementChoice, Optional[str]]:
        targets = match.movement_targets()
        if targets and self._rng.random() < 0.5:
            return MovementChoice.PULLBACK, self._rng.choice(targets)
        return MovementChoice.FORWARD, None
