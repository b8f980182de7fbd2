"""Card-related data structures and helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Tuple


class Suit(Enum):
    SPADES = "spades"
    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    STARS = "stars"
    CROWNS = "crowns"
    JOKER = "joker"

    def __str__(self) -> str:
        return self.value


SUIT_ORDER: dict[Suit, int] = {suit: index for index, suit in enumerate(Suit)}


@dataclass(frozen=True)
class Card:
    """Immutable representation of a card; jokers carry no value."""

    suit: Suit
    value: Optional[int] = None

    def __post_init__(self) -> None:
        if self.suit is Suit.JOKER:
            if self.value is not None:
                raise ValueError("Jokers do not carry a value.")
        elif not isinstance(self.value, int) or self.value < 1:
            raise ValueError(f"Card of {self.suit} needs a positive value, got {self.value!r}.")

    @property
    def is_joker(self) -> bool:
        return self.suit is Suit.JOKER


JOKER = Card(Suit.JOKER)


def parse_suit(name: str, *, allow_joker: bool = False) -> Suit:
    """Return the suit called ``name``; jokers are refused unless asked for."""
    try:
        suit = Suit(str(name).lower())
    except ValueError as exc:
        raise ValueError(f"Unknown suit: {name!r}") from exc
    if suit is Suit.JOKER and not allow_joker:
        raise ValueError("Joker is not a rankable suit.")
    return suit


def card_sort_key(card: Card) -> Tuple[int, int]:
    return SUIT_ORDER[card.suit], card.value or 0


def serialize_card(card: Card) -> dict[str, object]:
    return {"suit": card.suit.value, "value": card.value}


def deserialize_card(payload: Mapping[str, object]) -> Card:
    try:
        suit_name = payload["suit"]
    except KeyError as exc:
        raise ValueError("Card payload missing 'suit'.") from exc
    suit = parse_suit(str(suit_name), allow_joker=True)
    value = payload.get("value")
    if suit is Suit.JOKER:
        if value is not None:
            raise ValueError("Jokers do not carry a value.")
        return Card(suit)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError("Card payload needs an integer 'value'.")
    return Card(suit, value)


def card_label(card: Card) -> str:
    if card.is_joker:
        return "Joker"
    return f"{card.value} of {card.suit.value.title()}"
