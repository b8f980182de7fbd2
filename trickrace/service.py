"""Command boundary around the match repository for transports and tests."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from random import Random
from typing import Any, Dict, List, Mapping, Optional

from .cards import serialize_card
from .commands import (
    ChangeName,
    Command,
    CreateMatch,
    JoinMatch,
    LeaveMatch,
    MovementChoiceCommand,
    PlayCard,
    SelectColor,
    StartMatch,
    UpdateSuitRanking,
    parse_command,
)
from .errors import GameError, IllegalActionError, NotFoundError
from .events import EventType, Notification, broadcast, targeted
from .match import Continuation, Match, MovementChoice
from .players import PlayerRegistry
from .ranking import RankingAction
from .repository import MatchRepository
from .rules import DEFAULT_RULES, RuleSet
from .snapshot import MatchSnapshot, SnapshotStore, snapshot_match
from .state import seats_view

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Envelope:
    """One outbound message addressed to one player."""

    recipient: str
    event: str
    payload: Dict[str, Any]

    def to_message(self) -> Dict[str, Any]:
        return {"event": self.event, "payload": self.payload}


@dataclass
class Dispatch:
    envelopes: List[Envelope] = field(default_factory=list)
    continuations: List[Continuation] = field(default_factory=list)
    snapshots: List[MatchSnapshot] = field(default_factory=list)
    discarded: List[str] = field(default_factory=list)

    @property
    def needs_persisting(self) -> bool:
        return bool(self.snapshots or self.discarded)

    def events_for(self, player_id: str) -> List[str]:
        return [envelope.event for envelope in self.envelopes if envelope.recipient == player_id]

    def payloads(self, player_id: str, event: EventType) -> List[Dict[str, Any]]:
        return [
            envelope.payload
            for envelope in self.envelopes
            if envelope.recipient == player_id and envelope.event == event.value
        ]


@dataclass
class MatchView:
    matchId: str
    phase: str
    step: Optional[str]
    roundNumber: int
    currentPlayer: Optional[str]
    leadSuit: Optional[str]
    plays: List[Dict[str, Any]]
    suitRanking: List[str]
    seats: List[Dict[str, Any]]
    deckRemaining: Optional[int]
    winner: Optional[str]


class MatchService:
    """Facade that validates raw commands, applies them and addresses the results."""

    def __init__(
        self,
        rules: RuleSet = DEFAULT_RULES,
        *,
        rng: Optional[Random] = None,
        store: Optional[SnapshotStore] = None,
    ) -> None:
        self.rules = rules
        self._rng = rng or Random()
        self.players = PlayerRegistry(rules, rng=Random(self._rng.random()))
        self.matches = MatchRepository(rules, rng=Random(self._rng.random()))
        self.store = store
        self._armed: Dict[str, Continuation] = {}

    # Lifecycle ---------------------------------------------------------

    def open(self) -> None:
        self.matches.open()

    def close(self) -> None:
        self.matches.close()
        self.players.clear()
        self._armed.clear()

    # Connections -------------------------------------------------------

    def connect(self, player_id: Optional[str] = None) -> Dispatch:
        player = self.players.connect(player_id)
        return Dispatch(
            [Envelope(player.player_id, EventType.CONNECTED.value, {"playerId": player.player_id, "name": player.name})]
        )

    def disconnect(self, player_id: str) -> Dispatch:
        dispatch = Dispatch()
        match = self.matches.find_by_player(player_id)
        if match is not None:
            dispatch = self._deliver(match, match.leave(player_id))
        self.players.disconnect(player_id)
        return dispatch

    # Commands ----------------------------------------------------------

    def handle(self, player_id: str, raw: Mapping[str, Any]) -> Dispatch:
        """Apply one raw command; failures come back as a single ``rejected`` envelope."""
        command_type = raw.get("type") if isinstance(raw, Mapping) else None
        try:
            command = parse_command(raw)
            self.players.get(player_id)
            return self._dispatch(player_id, command)
        except GameError as exc:
            logger.info("Rejected %s from %s: %s", command_type, player_id, exc)
            return Dispatch(
                [
                    Envelope(
                        player_id,
                        EventType.REJECTED.value,
                        {"code": exc.code, "message": str(exc), "command": command_type},
                    )
                ]
            )

    def fire(self, continuation: Continuation) -> Dispatch:
        """Resume a due continuation; stale or orphaned ones are dropped."""
        if self._armed.get(continuation.match_id) == continuation:
            del self._armed[continuation.match_id]
        try:
            match = self.matches.get(continuation.match_id)
        except NotFoundError:
            logger.debug("Continuation for vanished match %s dropped", continuation.match_id)
            return Dispatch()
        return self._deliver(match, match.resume(continuation))

    def _dispatch(self, player_id: str, command: Command) -> Dispatch:
        player = self.players.get(player_id)
        match: Optional[Match]

        if isinstance(command, CreateMatch):
            self.matches.require_unseated(player_id)
            match = self.matches.create()
            match.join(player)
            notes = [
                targeted(
                    EventType.MATCH_CREATED,
                    player_id,
                    matchId=match.match_id,
                    seats=seats_view(match.seats),
                )
            ]
        elif isinstance(command, JoinMatch):
            match = self.matches.get(command.match_id)
            current = self.matches.find_by_player(player_id)
            if current is not None and current is not match:
                raise IllegalActionError(f"Already seated in match {current.match_id}.")
            notes = match.join(player)
        elif isinstance(command, StartMatch):
            match = self._match_of(player_id)
            notes = match.start(player_id)
        elif isinstance(command, LeaveMatch):
            match = self._match_of(player_id)
            notes = match.leave(player_id)
            notes.append(targeted(EventType.SEATS_UPDATED, player_id, seats=[]))
        elif isinstance(command, PlayCard):
            match = self._match_of(player_id)
            notes = match.play_card(player_id, command.card.to_card())
        elif isinstance(command, UpdateSuitRanking):
            match = self._match_of(player_id)
            notes = match.update_suit_ranking(player_id, RankingAction(command.action), command.parsed_suits())
        elif isinstance(command, MovementChoiceCommand):
            match = self._match_of(player_id)
            notes = match.choose_movement(player_id, MovementChoice(command.choice), command.target)
        elif isinstance(command, ChangeName):
            self.players.rename(player_id, command.name)
            match = self.matches.find_by_player(player_id)
            notes = [self._player_updated(player_id)] + self._seats_changed(match)
        elif isinstance(command, SelectColor):
            self.players.select_color(player_id, command.color)
            match = self.matches.find_by_player(player_id)
            notes = [targeted(EventType.COLOR_SELECTED, player_id, color=command.color)]
            notes += self._seats_changed(match)
        else:
            raise IllegalActionError(f"Unsupported command {command!r}.")

        return self._deliver(match, notes)

    # Helpers -----------------------------------------------------------

    def _match_of(self, player_id: str) -> Match:
        match = self.matches.find_by_player(player_id)
        if match is None:
            raise NotFoundError("Player is not seated in any match.")
        return match

    def _player_updated(self, player_id: str) -> Notification:
        player = self.players.get(player_id)
        return targeted(EventType.PLAYER_UPDATED, player_id, playerId=player_id, name=player.name, color=player.color)

    def _seats_changed(self, match: Optional[Match]) -> List[Notification]:
        if match is None:
            return []
        return [broadcast(EventType.SEATS_UPDATED, seats=seats_view(match.seats))]

    def _deliver(self, match: Optional[Match], notes: List[Notification]) -> Dispatch:
        dispatch = Dispatch()
        seated = tuple(match.player_ids) if match is not None else ()
        for note in notes:
            recipients = seated if note.is_broadcast else note.recipients
            for recipient in recipients:
                dispatch.envelopes.append(Envelope(recipient, note.event.value, note.payload))

        if match is None:
            return dispatch
        if not match.seats:
            self.matches.discard(match.match_id)
            self._armed.pop(match.match_id, None)
            if self.store is not None:
                dispatch.discarded.append(match.match_id)
            return dispatch

        pending = match.pending
        if pending is not None and self._armed.get(match.match_id) != pending:
            self._armed[match.match_id] = pending
            dispatch.continuations.append(pending)
        if self.store is not None:
            dispatch.snapshots.append(snapshot_match(match))
        return dispatch

    def persist(self, dispatch: Dispatch) -> None:
        """Write the snapshot work collected on ``dispatch``; this blocks on the store."""
        if self.store is None:
            return
        for snapshot in dispatch.snapshots:
            self.store.save(snapshot)
        for match_id in dispatch.discarded:
            self.store.delete(match_id)

    # Views -------------------------------------------------------------

    def match_view(self, match_id: str) -> MatchView:
        match = self.matches.get(match_id)
        trick = match.trick
        return MatchView(
            matchId=match.match_id,
            phase=match.phase.value,
            step=match.step.value if match.step else None,
            roundNumber=match.round_number,
            currentPlayer=match.current_player,
            leadSuit=match.lead_suit.value if match.lead_suit else None,
            plays=[{"player": who, "card": serialize_card(card)} for who, card in trick.plays] if trick else [],
            suitRanking=match.ranking.names(),
            seats=seats_view(match.seats),
            deckRemaining=match.deck.remaining if match.deck else None,
            winner=match.winner,
        )

    def match_summaries(self) -> List[Dict[str, Any]]:
        return [
            {"matchId": match.match_id, "phase": match.phase.value, "players": len(match.seats)}
            for match in self.matches
        ]

    def view_payload(self, match_id: str) -> Dict[str, Any]:
        return asdict(self.match_view(match_id))
