"""Suit ranking registry mutated during pick steps."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Tuple

from .cards import Suit


class RankingAction(Enum):
    ADD = "add"
    SWAP = "swap"


@dataclass
class SuitRanking:
    """Ordered suit preference; index 0 is the strongest suit."""

    suits: List[Suit] = field(default_factory=list)
    capacity: int = 6

    def __post_init__(self) -> None:
        self.suits = list(self.suits)
        if len(set(self.suits)) != len(self.suits):
            raise ValueError("Suit ranking entries must be unique.")
        if Suit.JOKER in self.suits:
            raise ValueError("Joker cannot be ranked.")

    def __iter__(self) -> Iterator[Suit]:
        return iter(self.suits)

    def __len__(self) -> int:
        return len(self.suits)

    def __contains__(self, suit: object) -> bool:
        return suit in self.suits

    def is_full(self) -> bool:
        return len(self.suits) >= self.capacity

    def can_add(self) -> bool:
        return not self.is_full()

    def offered_action(self) -> RankingAction:
        return RankingAction.ADD if self.can_add() else RankingAction.SWAP

    def add(self, suit: Suit) -> bool:
        """Make ``suit`` the new top rank. Returns False when nothing changed."""
        if suit is Suit.JOKER or suit in self.suits or self.is_full():
            return False
        self.suits.insert(0, suit)
        return True

    def swap(self, first: Suit, second: Suit) -> bool:
        """Exchange two ranked suits. Returns False when nothing changed."""
        if first not in self.suits or second not in self.suits or first is second:
            return False
        i, j = self.suits.index(first), self.suits.index(second)
        self.suits[i], self.suits[j] = self.suits[j], self.suits[i]
        return True

    def as_tuple(self) -> Tuple[Suit, ...]:
        return tuple(self.suits)

    def names(self) -> List[str]:
        return [suit.value for suit in self.suits]
