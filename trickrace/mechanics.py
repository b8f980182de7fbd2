"""Legal move generation."""

from __future__ import annotations

from typing import Iterable, List, Optional

from .cards import Card, Suit


def legal_moves(hand: Iterable[Card], lead_suit: Optional[Suit]) -> List[Card]:
    """Return the subset of cards that may be played once ``lead_suit`` is known."""
    cards = list(hand)
    if lead_suit is None:
        return cards
    if any(card.suit is lead_suit for card in cards):
        return [card for card in cards if card.suit is lead_suit or card.is_joker]
    return cards


def is_legal(card: Card, hand: Iterable[Card], lead_suit: Optional[Suit]) -> bool:
    cards = list(hand)
    return card in cards and card in legal_moves(cards, lead_suit)
