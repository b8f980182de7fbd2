"""Baseline greedy bot."""

from __future__ import annotations

from collections import Counter
from typing import List, Optional, Tuple

from trickrace.cards import Card, Suit
from trickrace.comparator import find_trick_winner
from trickrace.match import Match, MovementChoice
from trickrace.ranking import RankingAction

from .base import BotStrategy


def _spend_order(card: Card) -> Tuple[int, int]:
    # Jokers are kept for last; otherwise lower values go first.
    return (1, 0) if card.is_joker else (0, card.value)


def _suit_counts(match: Match, player_id: str) -> Counter:
    return Counter(card.suit for card in match.seat_of(player_id).hand if card.suit is not Suit.JOKER)


class GreedyBot(BotStrategy):
    """Wins the round as cheaply as it can, else dumps its weakest legal card."""

    name = "Greedy"

    def choose_card(self, match: Match, player_id: str) -> Card:
        legal = sorted(match.legal_cards(player_id), key=_spend_order)
        if not legal:
            raise RuntimeError("No legal plays available for bot.")
        trick = match.trick
        ranking = match.ranking.as_tuple()
        for card in legal:
            plays = list(trick.plays) + [(player_id, card)]
            lead = trick.lead_suit
            if lead is None and not card.is_joker:
                lead = card.suit
            if find_trick_winner(plays, ranking, lead) == player_id:
                return card
        return legal[0]

    def choose_ranking(self, match: Match, player_id: str) -> Tuple[RankingAction, List]:
        counts = _suit_counts(match, player_id)
        action = match.ranking.offered_action()
        if action is RankingAction.ADD:
            unranked = [suit for suit in match.rules.ranked_suits if suit not in match.ranking]
            best = max(unranked, key=lambda suit: counts.get(suit, 0))
            return action, [best]

        ranked = list(match.ranking)
        best = max(ranked, key=lambda suit: counts.get(suit, 0))
        if best is not ranked[0]:
            return action, [best, ranked[0]]
        return action, [ranked[-2], ranked[-1]]

    def choose_movement(self, match: Match, player_id: str) -> Tuple[MovementChoice, Optional[str]]:
        targets = match.movement_targets()
        if not targets:
            return MovementChoice.FORWARD, None
        positions = match.positions()
        leader = max(targets, key=lambda target: positions[target])
        if positions[leader] >= positions[player_id]:
            return MovementChoice.PULLBACK, leader
        return MovementChoice.FORWARD, None
