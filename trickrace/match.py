"""Match orchestration: lobby, rounds, pick steps and movement choices."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from random import Random
from typing import Dict, List, Optional, Sequence

from .board import green_zone_rivals, has_finished, is_pick_step, next_available, pull_back
from .cards import Card, Suit, card_label, serialize_card
from .deck import Deck
from .errors import IllegalActionError, NotFoundError, ValidationError
from .events import EventType, Notification, broadcast, targeted
from .mechanics import legal_moves
from .players import Player
from .ranking import RankingAction, SuitRanking
from .rules import DEFAULT_RULES, RuleSet
from .state import Seat, hand_view, seats_view
from .trick import Trick, TrickError
from .turns import TurnSequencer

logger = logging.getLogger(__name__)


class MatchPhase(Enum):
    WAITING = "waiting"
    PLAYING = "playing"
    FINISHED = "finished"


class MatchStep(Enum):
    DEALING = "dealing"
    ROUND_IN_PROGRESS = "roundInProgress"
    ROUND_RESOLVING = "roundResolving"
    PICK_STEP_PENDING = "pickStepPending"
    MOVEMENT_CHOICE_PENDING = "movementChoicePending"


class MovementChoice(Enum):
    FORWARD = "forward"
    PULLBACK = "pullback"


@dataclass(frozen=True)
class Continuation:
    """Deferred start of the next round, valid only while ``generation`` is current."""

    match_id: str
    generation: int
    delay: float


@dataclass
class Match:
    """Authoritative state for one match. Every command either applies fully or raises."""

    match_id: str
    rules: RuleSet = DEFAULT_RULES
    rng: Random = field(default_factory=Random)

    seats: List[Seat] = field(init=False, default_factory=list)
    phase: MatchPhase = field(init=False, default=MatchPhase.WAITING)
    step: Optional[MatchStep] = field(init=False, default=None)
    ranking: SuitRanking = field(init=False)
    deck: Optional[Deck] = field(init=False, default=None)
    trick: Optional[Trick] = field(init=False, default=None)
    round_number: int = field(init=False, default=0)
    last_winner: Optional[str] = field(init=False, default=None)
    last_winner_seat: Optional[int] = field(init=False, default=None)
    winner: Optional[str] = field(init=False, default=None)
    generation: int = field(init=False, default=0)
    pending: Optional[Continuation] = field(init=False, default=None)
    pick_step_player: Optional[str] = field(init=False, default=None)
    movement_player: Optional[str] = field(init=False, default=None)
    departed_seats: Dict[str, int] = field(init=False, default_factory=dict)

    def __post_init__(self) -> None:
        self.ranking = SuitRanking(capacity=self.rules.ranking_capacity)

    # Queries -----------------------------------------------------------

    @property
    def player_ids(self) -> List[str]:
        return [seat.player_id for seat in self.seats]

    @property
    def current_player(self) -> Optional[str]:
        if self.step is not MatchStep.ROUND_IN_PROGRESS or self.trick is None:
            return None
        return self.trick.current_player

    @property
    def lead_suit(self) -> Optional[Suit]:
        return self.trick.lead_suit if self.trick else None

    def is_seated(self, player_id: str) -> bool:
        return self._find_seat(player_id) is not None

    def seat_of(self, player_id: str) -> Seat:
        seat = self._find_seat(player_id)
        if seat is None:
            raise NotFoundError(f"Player {player_id} is not seated in match {self.match_id}.")
        return seat

    def positions(self) -> Dict[str, int]:
        return {seat.player_id: seat.position for seat in self.seats}

    def legal_cards(self, player_id: str) -> List[Card]:
        if self.current_player != player_id:
            return []
        return legal_moves(self.seat_of(player_id).hand, self.lead_suit)

    def movement_targets(self) -> List[str]:
        if self.movement_player is None or not self.is_seated(self.movement_player):
            return []
        return green_zone_rivals(self.movement_player, self.positions(), self.rules)

    # Lobby -------------------------------------------------------------

    def join(self, player: Player) -> List[Notification]:
        if self.phase is not MatchPhase.WAITING:
            raise IllegalActionError("Match already started.")
        if not self.is_seated(player.player_id):
            if len(self.seats) >= self.rules.max_players:
                raise IllegalActionError("Match is full.")
            self.seats.append(Seat(player=player))
            logger.info("Player %s joined match %s", player.player_id, self.match_id)
        return [broadcast(EventType.MATCH_JOINED, matchId=self.match_id, seats=seats_view(self.seats))]

    def leave(self, player_id: str) -> List[Notification]:
        seat = self.seat_of(player_id)
        self.seats.remove(seat)
        if seat.seat is not None:
            self.departed_seats[player_id] = seat.seat
        logger.info("Player %s left match %s", player_id, self.match_id)
        notes = [broadcast(EventType.SEATS_UPDATED, seats=seats_view(self.seats))]
        if self.phase is not MatchPhase.PLAYING:
            return notes
        if len(self.seats) < self.rules.min_players:
            notes.extend(self._finish(None))
            return notes

        if self.step is MatchStep.ROUND_IN_PROGRESS:
            assert self.trick is not None
            was_current = self.trick.current_player == player_id
            self.trick.turns.remove(player_id)
            if self.trick.is_complete():
                notes.extend(self._resolve_round())
            elif was_current:
                notes.extend(self._turn_notifications(EventType.TURN_ADVANCED))
        elif self.step is MatchStep.PICK_STEP_PENDING and self.pick_step_player == player_id:
            self.pick_step_player = None
            notes.extend(self._schedule(self.rules.pick_step_delay))
        elif self.step is MatchStep.MOVEMENT_CHOICE_PENDING:
            if self.movement_player == player_id:
                self.movement_player = None
                notes.extend(self._schedule(self.rules.round_delay))
            elif not self.movement_targets():
                mover = self.seat_of(self.movement_player)
                self.movement_player = None
                notes.extend(self._offer_pick_step_or_continue(mover, self.rules.round_delay))
        return notes

    def start(self, requester: str) -> List[Notification]:
        self.seat_of(requester)
        if self.phase is not MatchPhase.WAITING:
            raise IllegalActionError("Match already started.")
        if len(self.seats) < self.rules.min_players:
            raise IllegalActionError(f"Need at least {self.rules.min_players} players to start.")

        self.rng.shuffle(self.seats)
        for index, seat in enumerate(self.seats):
            seat.seat = index
            seat.position = 0
        self.phase = MatchPhase.PLAYING
        self.step = MatchStep.DEALING
        self.deck = Deck(rng=self.rng, rules=self.rules)
        logger.info("Match %s started with %d players", self.match_id, len(self.seats))

        notes = self._deal()
        notes.append(
            broadcast(EventType.MATCH_STARTED, suitRanking=self.ranking.names(), seats=seats_view(self.seats))
        )
        notes.extend(self._open_round())
        return notes

    # Play --------------------------------------------------------------

    def play_card(self, player_id: str, card: Card) -> List[Notification]:
        self._require_playing()
        seat = self.seat_of(player_id)
        if self.step is not MatchStep.ROUND_IN_PROGRESS or self.trick is None:
            raise IllegalActionError("No round is accepting plays.")
        if self.trick.current_player != player_id:
            raise IllegalActionError("Not this player's turn.")
        if card not in seat.hand:
            raise IllegalActionError("Card not present in hand.")
        if card not in legal_moves(seat.hand, self.trick.lead_suit):
            raise IllegalActionError(f"{card_label(card)} does not follow {self.trick.lead_suit}.")

        seat.remove_card(card)
        try:
            self.trick.add_play(player_id, card)
        except TrickError as exc:
            seat.hand.append(card)
            raise IllegalActionError(str(exc)) from exc

        notes = [
            targeted(EventType.HAND_UPDATED, player_id, hand=hand_view(seat.hand)),
            broadcast(
                EventType.CARD_PLAYED,
                player=player_id,
                card=serialize_card(card),
                leadSuit=self._lead_name(),
            ),
        ]
        if self.trick.is_complete():
            notes.extend(self._resolve_round())
        else:
            notes.extend(self._turn_notifications(EventType.TURN_ADVANCED))
        return notes

    def update_suit_ranking(self, player_id: str, action: RankingAction, suits: Sequence[Suit]) -> List[Notification]:
        self._require_playing()
        if self.step is not MatchStep.PICK_STEP_PENDING or self.pick_step_player != player_id:
            raise IllegalActionError("No pick step is open for this player.")
        offered = self.ranking.offered_action()
        if action is not offered:
            raise IllegalActionError(f"This pick step only allows {offered.value}.")
        if any(suit not in self.rules.ranked_suits for suit in suits):
            raise ValidationError("Suit is not part of this deck.")

        if action is RankingAction.ADD:
            if len(suits) != 1:
                raise ValidationError("Add takes exactly one suit.")
            if suits[0] in self.ranking:
                raise IllegalActionError(f"{suits[0]} is already ranked.")
            self.ranking.add(suits[0])
        else:
            if len(suits) != 2 or suits[0] is suits[1]:
                raise ValidationError("Swap takes two different suits.")
            if not self.ranking.swap(suits[0], suits[1]):
                raise IllegalActionError("Both suits must already be ranked.")

        self.pick_step_player = None
        logger.info("Match %s ranking now %s", self.match_id, self.ranking.names())
        notes = [broadcast(EventType.RANKING_UPDATED, ranking=self.ranking.names())]
        notes.extend(self._schedule(self.rules.pick_step_delay))
        return notes

    def choose_movement(
        self, player_id: str, choice: MovementChoice, target: Optional[str] = None
    ) -> List[Notification]:
        self._require_playing()
        if self.step is not MatchStep.MOVEMENT_CHOICE_PENDING or self.movement_player != player_id:
            raise IllegalActionError("No movement choice is open for this player.")
        mover = self.seat_of(player_id)

        if choice is MovementChoice.FORWARD:
            occupied = {seat.position for seat in self.seats if seat is not mover}
            mover.position = next_available(mover.position, occupied, self.rules)
        else:
            if target is None:
                raise ValidationError("Pull back needs a target player.")
            if target not in self.movement_targets():
                raise IllegalActionError("Target is not a green zone rival.")
            victim = self.seat_of(target)
            victim.position = pull_back(victim.position, self.rules)

        self.movement_player = None
        logger.info("Match %s: %s chose %s", self.match_id, player_id, choice.value)
        notes = [broadcast(EventType.SEATS_UPDATED, seats=seats_view(self.seats))]
        if self._finish_if_crossed(notes):
            return notes
        notes.extend(self._offer_pick_step_or_continue(mover, self.rules.round_delay))
        return notes

    def resume(self, continuation: Continuation) -> List[Notification]:
        """Open the next round if ``continuation`` is still the current one."""
        if (
            self.phase is not MatchPhase.PLAYING
            or self.pending is None
            or continuation.generation != self.generation
        ):
            logger.debug(
                "Match %s ignoring stale continuation %d (current %d)",
                self.match_id,
                continuation.generation,
                self.generation,
            )
            return []
        return self._open_round()

    # Internals ---------------------------------------------------------

    def _find_seat(self, player_id: Optional[str]) -> Optional[Seat]:
        return next((seat for seat in self.seats if seat.player_id == player_id), None)

    def _require_playing(self) -> None:
        if self.phase is MatchPhase.FINISHED:
            raise IllegalActionError("Match is finished.")
        if self.phase is not MatchPhase.PLAYING:
            raise IllegalActionError("Match has not started.")

    def _lead_name(self) -> Optional[str]:
        lead = self.lead_suit
        return lead.value if lead else None

    def _deal(self) -> List[Notification]:
        assert self.deck is not None
        hands = self.deck.deal(self.rules.hand_size, self.player_ids)
        notes: List[Notification] = []
        for seat in self.seats:
            seat.take(hands[seat.player_id])
            notes.append(targeted(EventType.HAND_UPDATED, seat.player_id, hand=hand_view(seat.hand)))
        return notes

    def _open_round(self) -> List[Notification]:
        self.generation += 1
        self.pending = None
        self.round_number += 1
        if self.round_number == 1:
            turns = TurnSequencer.shuffled(self.player_ids, self.rng)
        else:
            turns = TurnSequencer.from_winner(
                self.player_ids,
                self.last_winner,
                self.last_winner_seat,
                [seat.seat for seat in self.seats],
            )
        self.trick = Trick(number=self.round_number, turns=turns)
        self.step = MatchStep.ROUND_IN_PROGRESS
        logger.info("Match %s round %d, order %s", self.match_id, self.round_number, turns.order)
        return self._turn_notifications(EventType.ROUND_STARTED)

    def _turn_notifications(self, event: EventType) -> List[Notification]:
        assert self.trick is not None
        notes: List[Notification] = []
        for seat in self.seats:
            payload: Dict[str, object] = {
                "currentPlayer": self.trick.current_player,
                "legalCards": hand_view(self.legal_cards(seat.player_id)),
            }
            if event is EventType.ROUND_STARTED:
                payload["roundNumber"] = self.trick.number
                payload["turnOrder"] = list(self.trick.turns.order)
            else:
                payload["leadSuit"] = self._lead_name()
            notes.append(Notification(event=event, payload=payload, recipients=(seat.player_id,)))
        return notes

    def _resolve_round(self) -> List[Notification]:
        assert self.trick is not None
        self.step = MatchStep.ROUND_RESOLVING
        winner_id = self.trick.winner(self.ranking.as_tuple())
        self.last_winner = winner_id
        winner = self._find_seat(winner_id)

        self.last_winner_seat = winner.seat if winner is not None else self.departed_seats.get(winner_id)
        if winner is not None:
            occupied = {seat.position for seat in self.seats if seat is not winner}
            winner.position = next_available(winner.position, occupied, self.rules)
            logger.info(
                "Match %s round %d won by %s, now on %d",
                self.match_id,
                self.trick.number,
                winner_id,
                winner.position,
            )

        notes = [
            broadcast(
                EventType.ROUND_RESOLVED,
                plays=[{"player": player, "card": serialize_card(card)} for player, card in self.trick.plays],
                winner=winner_id,
                seats=seats_view(self.seats),
            )
        ]
        if self._finish_if_crossed(notes):
            return notes

        if all(not seat.hand for seat in self.seats):
            notes.extend(self._deal())
            notes.append(broadcast(EventType.HANDS_REDEALT))

        if winner is None:
            notes.extend(self._schedule(self.rules.round_delay))
            return notes

        rivals = green_zone_rivals(winner.player_id, self.positions(), self.rules)
        if rivals:
            self.step = MatchStep.MOVEMENT_CHOICE_PENDING
            self.movement_player = winner.player_id
            logger.info("Match %s: movement choice offered to %s", self.match_id, winner.player_id)
            notes.append(targeted(EventType.MOVEMENT_CHOICE_OFFERED, winner.player_id, eligibleTargets=rivals))
            return notes

        notes.extend(self._offer_pick_step_or_continue(winner, self.rules.round_delay))
        return notes

    def _offer_pick_step_or_continue(self, seat: Seat, delay: float) -> List[Notification]:
        if is_pick_step(seat.position, self.rules):
            self.step = MatchStep.PICK_STEP_PENDING
            self.pick_step_player = seat.player_id
            logger.info("Match %s: pick step on %d for %s", self.match_id, seat.position, seat.player_id)
            return [
                targeted(
                    EventType.PICK_STEP_OFFERED,
                    seat.player_id,
                    position=seat.position,
                    canAdd=self.ranking.can_add(),
                )
            ]
        return self._schedule(delay)

    def _schedule(self, delay: float) -> List[Notification]:
        self.generation += 1
        self.step = MatchStep.ROUND_RESOLVING
        self.pending = Continuation(match_id=self.match_id, generation=self.generation, delay=delay)
        return []

    def _finish_if_crossed(self, notes: List[Notification]) -> bool:
        finisher = next((seat for seat in self.seats if has_finished(seat.position, self.rules)), None)
        if finisher is None:
            return False
        notes.extend(self._finish(finisher.player_id))
        return True

    def _finish(self, winner_id: Optional[str]) -> List[Notification]:
        winner = self._find_seat(winner_id)
        self.phase = MatchPhase.FINISHED
        self.step = None
        self.pending = None
        self.generation += 1
        self.pick_step_player = None
        self.movement_player = None
        self.winner = winner_id
        logger.info("Match %s finished, winner %s", self.match_id, winner_id)
        return [
            broadcast(
                EventType.MATCH_FINISHED,
                winner=winner_id,
                winnerName=winner.name if winner else None,
            )
        ]
