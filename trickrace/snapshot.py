"""Serializable match snapshots and simple stores for them."""

from __future__ import annotations

import logging
from pathlib import Path
from random import Random
from typing import Dict, List, Optional, Protocol

from pydantic import BaseModel, Field

from .cards import Card, deserialize_card, parse_suit, serialize_card
from .deck import Deck
from .match import Continuation, Match, MatchPhase, MatchStep
from .players import Player
from .ranking import SuitRanking
from .rules import DEFAULT_RULES, RuleSet
from .state import Seat
from .trick import Trick
from .turns import TurnSequencer

logger = logging.getLogger(__name__)


class CardModel(BaseModel):
    suit: str
    value: Optional[int] = None

    @classmethod
    def of(cls, card: Card) -> "CardModel":
        return cls(**serialize_card(card))

    def to_card(self) -> Card:
        return deserialize_card(self.model_dump())


class PlayModel(BaseModel):
    player: str
    card: CardModel


class SeatSnapshot(BaseModel):
    player_id: str
    name: str
    color: Optional[str] = None
    hand: List[CardModel] = Field(default_factory=list)
    position: int = 0
    seat: Optional[int] = None


class RoundSnapshot(BaseModel):
    number: int
    lead_suit: Optional[str] = None
    plays: List[PlayModel] = Field(default_factory=list)
    turn_order: List[str] = Field(default_factory=list)
    turn_index: int = 0


class MatchSnapshot(BaseModel):
    match_id: str
    rules: RuleSet = DEFAULT_RULES
    phase: str
    step: Optional[str] = None
    seats: List[SeatSnapshot] = Field(default_factory=list)
    deck: Optional[List[CardModel]] = None
    deck_rebuilds: int = 0
    ranking: List[str] = Field(default_factory=list)
    round_number: int = 0
    round: Optional[RoundSnapshot] = None
    last_winner: Optional[str] = None
    last_winner_seat: Optional[int] = None
    winner: Optional[str] = None
    generation: int = 0
    pending_delay: Optional[float] = None
    pick_step_player: Optional[str] = None
    movement_player: Optional[str] = None
    departed_seats: Dict[str, int] = Field(default_factory=dict)


def snapshot_match(match: Match) -> MatchSnapshot:
    round_snapshot = None
    if match.trick is not None:
        round_snapshot = RoundSnapshot(
            number=match.trick.number,
            lead_suit=match.trick.lead_suit.value if match.trick.lead_suit else None,
            plays=[PlayModel(player=player, card=CardModel.of(card)) for player, card in match.trick.plays],
            turn_order=list(match.trick.turns.order),
            turn_index=match.trick.turns.index,
        )
    return MatchSnapshot(
        match_id=match.match_id,
        rules=match.rules,
        phase=match.phase.value,
        step=match.step.value if match.step else None,
        seats=[
            SeatSnapshot(
                player_id=seat.player_id,
                name=seat.name,
                color=seat.color,
                hand=[CardModel.of(card) for card in seat.hand],
                position=seat.position,
                seat=seat.seat,
            )
            for seat in match.seats
        ],
        deck=[CardModel.of(card) for card in match.deck.cards] if match.deck else None,
        deck_rebuilds=match.deck.rebuilds if match.deck else 0,
        ranking=match.ranking.names(),
        round_number=match.round_number,
        round=round_snapshot,
        last_winner=match.last_winner,
        last_winner_seat=match.last_winner_seat,
        winner=match.winner,
        generation=match.generation,
        pending_delay=match.pending.delay if match.pending else None,
        pick_step_player=match.pick_step_player,
        movement_player=match.movement_player,
        departed_seats=dict(match.departed_seats),
    )


def restore_match(snapshot: MatchSnapshot, rng: Optional[Random] = None) -> Match:
    """Rebuild a detached Match; player identities are recreated from the snapshot."""
    match = Match(match_id=snapshot.match_id, rules=snapshot.rules, rng=rng or Random())
    match.seats = [
        Seat(
            player=Player(player_id=item.player_id, name=item.name, color=item.color),
            hand=[card.to_card() for card in item.hand],
            position=item.position,
            seat=item.seat,
        )
        for item in snapshot.seats
    ]
    match.phase = MatchPhase(snapshot.phase)
    match.step = MatchStep(snapshot.step) if snapshot.step else None
    if snapshot.deck is not None:
        match.deck = Deck(
            rng=match.rng,
            rules=match.rules,
            cards=[card.to_card() for card in snapshot.deck],
            rebuilds=snapshot.deck_rebuilds,
        )
    match.ranking = SuitRanking(
        suits=[parse_suit(name) for name in snapshot.ranking],
        capacity=snapshot.rules.ranking_capacity,
    )
    match.round_number = snapshot.round_number
    if snapshot.round is not None:
        match.trick = Trick(
            number=snapshot.round.number,
            turns=TurnSequencer(order=snapshot.round.turn_order, index=snapshot.round.turn_index),
            plays=[(play.player, play.card.to_card()) for play in snapshot.round.plays],
            lead_suit=parse_suit(snapshot.round.lead_suit) if snapshot.round.lead_suit else None,
        )
    match.last_winner = snapshot.last_winner
    match.last_winner_seat = snapshot.last_winner_seat
    match.winner = snapshot.winner
    match.generation = snapshot.generation
    if snapshot.pending_delay is not None:
        match.pending = Continuation(
            match_id=snapshot.match_id,
            generation=snapshot.generation,
            delay=snapshot.pending_delay,
        )
    match.pick_step_player = snapshot.pick_step_player
    match.movement_player = snapshot.movement_player
    match.departed_seats = dict(snapshot.departed_seats)
    return match


class SnapshotStore(Protocol):
    def save(self, snapshot: MatchSnapshot) -> None: ...

    def load(self, match_id: str) -> Optional[MatchSnapshot]: ...

    def delete(self, match_id: str) -> None: ...


class MemorySnapshotStore:
    def __init__(self) -> None:
        self._snapshots: Dict[str, str] = {}

    def save(self, snapshot: MatchSnapshot) -> None:
        self._snapshots[snapshot.match_id] = snapshot.model_dump_json()

    def load(self, match_id: str) -> Optional[MatchSnapshot]:
        payload = self._snapshots.get(match_id)
        return MatchSnapshot.model_validate_json(payload) if payload is not None else None

    def delete(self, match_id: str) -> None:
        self._snapshots.pop(match_id, None)

    def __len__(self) -> int:
        return len(self._snapshots)


class JsonSnapshotStore:
    """One JSON file per match under ``directory``."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, match_id: str) -> Path:
        return self.directory / f"match_{match_id}.json"

    def save(self, snapshot: MatchSnapshot) -> None:
        self._path(snapshot.match_id).write_text(snapshot.model_dump_json(indent=2), encoding="utf-8")

    def load(self, match_id: str) -> Optional[MatchSnapshot]:
        path = self._path(match_id)
        if not path.exists():
            return None
        return MatchSnapshot.model_validate_json(path.read_text(encoding="utf-8"))

    def delete(self, match_id: str) -> None:
        path = self._path(match_id)
        if path.exists():
            path.unlink()
            logger.debug("Deleted snapshot %s", path)
