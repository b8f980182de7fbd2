"""Per-round turn ordering."""

from __future__ import annotations

from dataclasses import dataclass
from random import Random
from typing import List, Optional, Sequence


@dataclass
class TurnSequencer:
    order: List[str]
    index: int = 0

    def __post_init__(self) -> None:
        self.order = list(self.order)
        if len(set(self.order)) != len(self.order):
            raise ValueError("Turn order cannot repeat a player.")

    @classmethod
    def shuffled(cls, seats: Sequence[str], rng: Random) -> "TurnSequencer":
        return cls(order=rng.sample(list(seats), len(seats)))

    @classmethod
    def from_winner(
        cls,
        seats: Sequence[str],
        winner: Optional[str],
        winner_seat: Optional[int] = None,
        seat_numbers: Optional[Sequence[int]] = None,
    ) -> "TurnSequencer":
        """Start with ``winner`` and continue in seat order.

        ``seats`` lists the seated players in seat order. When the winner has
        left, ``winner_seat`` and ``seat_numbers`` locate the next seat after
        the one the winner held.
        """
        seats = list(seats)
        if not seats:
            return cls(order=[])
        if winner in seats:
            start = seats.index(winner)
        elif winner_seat is not None and seat_numbers is not None:
            later = [i for i, number in enumerate(seat_numbers) if number > winner_seat]
            start = later[0] if later else 0
        else:
            start = 0
        return cls(order=seats[start:] + seats[:start])

    @property
    def current(self) -> Optional[str]:
        if self.is_exhausted():
            return None
        return self.order[self.index]

    def is_exhausted(self) -> bool:
        return self.index >= len(self.order)

    def advance(self) -> Optional[str]:
        """Move to the next player; returns None once every player has had a turn."""
        if not self.is_exhausted():
            self.index += 1
        return self.current

    def remove(self, player_id: str) -> None:
        """Drop a departing player while keeping the pointer on the same pending player."""
        if player_id not in self.order:
            return
        position = self.order.index(player_id)
        self.order.pop(position)
        if position < self.index:
            self.index -= 1
