"""Per-match seat state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from .cards import Card, card_sort_key, serialize_card
from .players import Player


@dataclass
class Seat:
    """A player's place in one match: hand, board square and seat order."""

    player: Player
    hand: List[Card] = field(default_factory=list)
    position: int = 0
    seat: Optional[int] = None

    @property
    def player_id(self) -> str:
        return self.player.player_id

    @property
    def name(self) -> str:
        return self.player.name

    @property
    def color(self) -> Optional[str]:
        return self.player.color

    def take(self, cards: Iterable[Card]) -> None:
        self.hand = sorted(cards, key=card_sort_key)

    def remove_card(self, card: Card) -> None:
        self.hand.remove(card)


def seat_view(seat: Seat) -> Dict[str, Any]:
    return {
        "id": seat.player_id,
        "name": seat.name,
        "color": seat.color,
        "position": seat.position,
        "seat": seat.seat,
        "cardCount": len(seat.hand),
    }


def seats_view(seats: Iterable[Seat]) -> List[Dict[str, Any]]:
    return [seat_view(seat) for seat in seats]


def hand_view(cards: Iterable[Card]) -> List[Dict[str, Any]]:
    return [serialize_card(card) for card in cards]
