"""Trick resolution: pairwise card comparison and the winner fold."""

from __future__ import annotations

from enum import IntEnum
from typing import Optional, Sequence, Tuple

from .cards import Card, Suit


class Outcome(IntEnum):
    B_WINS = -1
    TIE = 0
    A_WINS = 1


def _by_value(value_a: int, value_b: int) -> Outcome:
    if value_a > value_b:
        return Outcome.A_WINS
    if value_a < value_b:
        return Outcome.B_WINS
    return Outcome.TIE


def _rank_of(suit: Suit, ranking: Sequence[Suit]) -> Optional[int]:
    try:
        return list(ranking).index(suit)
    except ValueError:
        return None


def outranks_lead(suit: Suit, lead_suit: Suit, ranking: Sequence[Suit]) -> bool:
    """Return True if an off-suit card of ``suit`` may beat a card following ``lead_suit``."""
    position = _rank_of(suit, ranking)
    if position is None:
        return False
    lead_position = _rank_of(lead_suit, ranking)
    if lead_position is None:
        return True
    return position < lead_position


def compare_by_ranking(card_a: Card, card_b: Card, ranking: Sequence[Suit]) -> Outcome:
    """Fallback ordering: ranked suits first, earlier rank wins, then value."""
    rank_a = _rank_of(card_a.suit, ranking)
    rank_b = _rank_of(card_b.suit, ranking)

    if rank_a is not None and rank_b is not None:
        if rank_a != rank_b:
            return Outcome.A_WINS if rank_a < rank_b else Outcome.B_WINS
        return _by_value(card_a.value, card_b.value)
    if rank_a is not None:
        return Outcome.A_WINS
    if rank_b is not None:
        return Outcome.B_WINS
    return _by_value(card_a.value, card_b.value)


def compare(
    card_a: Card,
    card_b: Card,
    ranking: Sequence[Suit],
    lead_suit: Optional[Suit],
    order_a: int,
    order_b: int,
) -> Outcome:
    """Decide which of two played cards is stronger.

    ``order_a`` and ``order_b`` are the play positions within the round; they
    only matter when both cards are jokers, where the later joker wins.
    """
    if card_a.is_joker and card_b.is_joker:
        return _by_value(order_a, order_b)
    if card_a.is_joker:
        return Outcome.A_WINS
    if card_b.is_joker:
        return Outcome.B_WINS

    if lead_suit is None:
        return compare_by_ranking(card_a, card_b, ranking)

    a_follows = card_a.suit is lead_suit
    b_follows = card_b.suit is lead_suit

    if a_follows and b_follows:
        return _by_value(card_a.value, card_b.value)
    if a_follows:
        return Outcome.B_WINS if outranks_lead(card_b.suit, lead_suit, ranking) else Outcome.A_WINS
    if b_follows:
        return Outcome.A_WINS if outranks_lead(card_a.suit, lead_suit, ranking) else Outcome.B_WINS

    return compare_by_ranking(card_a, card_b, ranking)


def winning_play(
    plays: Sequence[Tuple[str, Card]],
    ranking: Sequence[Suit],
    lead_suit: Optional[Suit],
) -> Optional[Tuple[int, str, Card]]:
    """Return ``(order, player, card)`` of the strongest play, or None if nothing was played."""
    if not plays:
        return None
    best_order = 0
    best_player, best_card = plays[0]
    for order, (player, card) in enumerate(plays[1:], start=1):
        if compare(card, best_card, ranking, lead_suit, order, best_order) is Outcome.A_WINS:
            best_order, best_player, best_card = order, player, card
    return best_order, best_player, best_card


def find_trick_winner(
    plays: Sequence[Tuple[str, Card]],
    ranking: Sequence[Suit],
    lead_suit: Optional[Suit],
) -> Optional[str]:
    best = winning_play(plays, ranking, lead_suit)
    return best[1] if best else None
