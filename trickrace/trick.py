"""Round (trick) representation and resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .cards import Card, Suit
from .comparator import find_trick_winner
from .turns import TurnSequencer


class TrickError(RuntimeError):
    """Raised when trick play breaks ordering constraints."""


@dataclass
class Trick:
    """One round: every seated player plays a single card."""

    number: int
    turns: TurnSequencer
    plays: List[Tuple[str, Card]] = field(default_factory=list)
    lead_suit: Optional[Suit] = None

    @property
    def current_player(self) -> Optional[str]:
        return self.turns.current

    def has_played(self, player: str) -> bool:
        return any(who == player for who, _ in self.plays)

    def add_play(self, player: str, card: Card) -> None:
        if player != self.turns.current:
            raise TrickError("Not this player's turn.")
        if self.has_played(player):
            raise TrickError("Player already played this round.")
        self.plays.append((player, card))
        if self.lead_suit is None and not card.is_joker:
            self.lead_suit = card.suit
        self.turns.advance()

    def is_complete(self) -> bool:
        return self.turns.is_exhausted()

    def winner(self, ranking: Sequence[Suit]) -> Optional[str]:
        return find_trick_winner(self.plays, ranking, self.lead_suit)
