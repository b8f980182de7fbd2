"""Common bot strategy interfaces."""

from __future__ import annotations

from typing import List, Optional, Tuple

from trickrace.cards import Card
from trickrace.match import Match, MovementChoice
from trickrace.ranking import RankingAction


class BotStrategy:
    """Base class for bot policies."""

    name: str = "BaseBot"

    def choose_card(self, match: Match, player_id: str) -> Card:
        """Return the card to play; it must be one of ``match.legal_cards``."""
        legal = match.legal_cards(player_id)
        if not legal:
            raise RuntimeError("No legal plays available for bot.")
        return legal[0]

    def choose_ranking(self, match: Match, player_id: str) -> Tuple[RankingAction, List]:
        """Return the offered action and the suits it applies to."""
        action = match.ranking.offered_action()
        if action is RankingAction.ADD:
            unranked = [suit for suit in match.rules.ranked_suits if suit not in match.ranking]
            return action, unranked[:1]
        return action, list(match.ranking.suits[:2])

    def choose_movement(self, match: Match, player_id: str) -> Tuple[MovementChoice, Optional[str]]:
        """Return (choice, target); target is only used when pulling back."""
        return MovementChoice.FORWARD, None
