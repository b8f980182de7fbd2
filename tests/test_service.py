from random import Random

import pytest

from trickrace.cards import Card, Suit
from trickrace.events import EventType
from trickrace.rules import RuleSet
from trickrace.service import MatchService
from trickrace.snapshot import MemorySnapshotStore


def _service(store=None) -> MatchService:
    service = MatchService(RuleSet(round_delay=0, pick_step_delay=0), rng=Random(5), store=store)
    service.open()
    return service


def _connect(service: MatchService, player_id: str) -> str:
    dispatch = service.connect(player_id)
    assert dispatch.events_for(player_id) == ["connected"]
    return player_id


def _lobby(service: MatchService):
    a = _connect(service, "a")
    b = _connect(service, "b")
    created = service.handle(a, {"type": "createMatch"})
    match_id = created.payloads(a, EventType.MATCH_CREATED)[0]["matchId"]
    service.handle(b, {"type": "joinMatch", "matchId": match_id})
    return a, b, match_id


def _play_round(service: MatchService, match_id: str):
    match = service.matches.get(match_id)
    dispatch = None
    while match.current_player is not None:
        player = match.current_player
        card = match.legal_cards(player)[0]
        dispatch = service.handle(player, {"type": "playCard", "card": {"suit": card.suit.value, "value": card.value}})
    return dispatch


def test_connect_assigns_a_generated_name():
    service = _service()
    dispatch = service.connect("a")
    payload = dispatch.payloads("a", EventType.CONNECTED)[0]
    assert payload["playerId"] == "a"
    assert payload["name"]


def test_create_join_and_start():
    service = _service()
    a, b, match_id = _lobby(service)
    assert len(match_id) == 6

    dispatch = service.handle(a, {"type": "startMatch"})
    for player in (a, b):
        events = dispatch.events_for(player)
        assert events[0] == "handUpdated"
        assert "matchStarted" in events
        assert "roundStarted" in events
        assert len(dispatch.payloads(player, EventType.HAND_UPDATED)[0]["hand"]) == 7
    assert dispatch.continuations == []


def test_join_is_broadcast_to_the_whole_lobby():
    service = _service()
    a = _connect(service, "a")
    b = _connect(service, "b")
    match_id = service.handle(a, {"type": "createMatch"}).payloads(a, EventType.MATCH_CREATED)[0]["matchId"]
    dispatch = service.handle(b, {"type": "joinMatch", "matchId": match_id})
    assert dispatch.events_for(a) == ["matchJoined"]
    assert dispatch.events_for(b) == ["matchJoined"]
    assert [seat["id"] for seat in dispatch.payloads(a, EventType.MATCH_JOINED)[0]["seats"]] == [a, b]


@pytest.mark.parametrize(
    "raw, code",
    [
        ({"type": "bogus"}, "VALIDATION_ERROR"),
        ({"type": "joinMatch", "matchId": "000001"}, "NOT_FOUND"),
        ({"type": "startMatch"}, "NOT_FOUND"),
        ({"type": "changeName", "name": "   "}, "VALIDATION_ERROR"),
    ],
)
def test_failures_become_a_private_rejection(raw, code):
    service = _service()
    _connect(service, "a")
    _connect(service, "b")
    dispatch = service.handle("a", raw)
    assert len(dispatch.envelopes) == 1
    envelope = dispatch.envelopes[0]
    assert envelope.recipient == "a"
    assert envelope.event == "rejected"
    assert envelope.payload["code"] == code


def test_out_of_turn_play_is_rejected_without_side_effects():
    service = _service()
    a, b, match_id = _lobby(service)
    service.handle(a, {"type": "startMatch"})
    match = service.matches.get(match_id)
    waiting = next(player for player in (a, b) if player != match.current_player)
    card = match.seat_of(waiting).hand[0]
    hand_before = list(match.seat_of(waiting).hand)

    dispatch = service.handle(waiting, {"type": "playCard", "card": {"suit": card.suit.value, "value": card.value}})
    assert dispatch.events_for(waiting) == ["rejected"]
    assert dispatch.payloads(waiting, EventType.REJECTED)[0]["code"] == "ILLEGAL_ACTION"
    assert match.seat_of(waiting).hand == hand_before


def test_resolved_round_arms_a_continuation_once():
    service = _service()
    a, b, match_id = _lobby(service)
    service.handle(a, {"type": "startMatch"})
    dispatch = _play_round(service, match_id)

    assert "roundResolved" in dispatch.events_for(a)
    assert len(dispatch.continuations) == 1
    continuation = dispatch.continuations[0]

    fired = service.fire(continuation)
    assert "roundStarted" in fired.events_for(a)
    assert "roundStarted" in fired.events_for(b)
    assert service.matches.get(match_id).round_number == 2

    assert service.fire(continuation).envelopes == []


def test_one_match_per_player():
    service = _service()
    a, b, match_id = _lobby(service)
    dispatch = service.handle(a, {"type": "createMatch"})
    assert dispatch.payloads(a, EventType.REJECTED)[0]["code"] == "ILLEGAL_ACTION"
    assert len(service.matches) == 1


def test_profile_changes_reach_the_lobby():
    service = _service()
    a, b, _ = _lobby(service)
    dispatch = service.handle(a, {"type": "changeName", "name": "Ada"})
    assert dispatch.payloads(a, EventType.PLAYER_UPDATED)[0]["name"] == "Ada"
    assert dispatch.payloads(b, EventType.SEATS_UPDATED)[0]["seats"][0]["name"] == "Ada"

    service.handle(a, {"type": "selectColor", "color": "#FF0000"})
    dispatch = service.handle(b, {"type": "selectColor", "color": "#FF0000"})
    assert dispatch.payloads(b, EventType.REJECTED)[0]["code"] == "ILLEGAL_ACTION"


def test_leaving_and_disconnecting_discard_empty_matches():
    store = MemorySnapshotStore()
    service = _service(store)
    a, b, match_id = _lobby(service)
    assert len(store) == 0

    dispatch = service.handle(a, {"type": "leaveMatch"})
    assert dispatch.payloads(a, EventType.SEATS_UPDATED) == [{"seats": []}]
    assert [seat["id"] for seat in dispatch.payloads(b, EventType.SEATS_UPDATED)[0]["seats"]] == [b]
    assert [snapshot.match_id for snapshot in dispatch.snapshots] == [match_id]
    service.persist(dispatch)
    assert [seat.player_id for seat in store.load(match_id).seats] == [b]

    dispatch = service.disconnect(b)
    assert dispatch.discarded == [match_id]
    service.persist(dispatch)
    assert len(service.matches) == 0
    assert store.load(match_id) is None
    assert b not in service.players


def test_views_describe_live_matches():
    service = _service()
    a, _, match_id = _lobby(service)
    service.handle(a, {"type": "startMatch"})
    view = service.view_payload(match_id)
    assert view["phase"] == "playing"
    assert view["step"] == "roundInProgress"
    assert view["roundNumber"] == 1
    assert view["deckRemaining"] == 69 - 14
    assert service.match_summaries() == [{"matchId": match_id, "phase": "playing", "players": 2}]


def test_nothing_is_collected_for_persistence_without_a_store():
    service = _service()
    a, _, _ = _lobby(service)
    dispatch = service.handle(a, {"type": "startMatch"})
    assert not dispatch.needs_persisting


def _wire(card: Card):
    return {"type": "playCard", "card": {"suit": card.suit.value, "value": card.value}}


def _rigged_round(service: MatchService, match_id: str, first_position: int, second_position: int):
    """Start the match and let the first player in turn order win round one."""
    service.handle(service.matches.get(match_id).player_ids[0], {"type": "startMatch"})
    match = service.matches.get(match_id)
    first, second = match.trick.turns.order
    match.seat_of(first).take([Card(Suit.SPADES, 10), Card(Suit.HEARTS, 1)])
    match.seat_of(second).take([Card(Suit.SPADES, 2), Card(Suit.HEARTS, 2)])
    match.seat_of(first).position = first_position
    match.seat_of(second).position = second_position
    service.handle(first, _wire(Card(Suit.SPADES, 10)))
    return first, second, service.handle(second, _wire(Card(Suit.SPADES, 2)))


def test_suit_ranking_update_over_the_wire():
    service = _service()
    _, _, match_id = _lobby(service)
    first, second, dispatch = _rigged_round(service, match_id, 2, 0)
    assert dispatch.payloads(first, EventType.PICK_STEP_OFFERED) == [{"position": 3, "canAdd": True}]
    assert dispatch.payloads(second, EventType.PICK_STEP_OFFERED) == []

    rejected = service.handle(second, {"type": "updateSuitRanking", "action": "add", "suit": "crowns"})
    assert rejected.payloads(second, EventType.REJECTED)[0]["code"] == "ILLEGAL_ACTION"
    rejected = service.handle(first, {"type": "updateSuitRanking", "action": "swap", "suits": ["crowns", "stars"]})
    assert rejected.payloads(first, EventType.REJECTED)[0]["code"] == "ILLEGAL_ACTION"

    dispatch = service.handle(first, {"type": "updateSuitRanking", "action": "add", "suit": "Crowns"})
    for player in (first, second):
        assert dispatch.payloads(player, EventType.RANKING_UPDATED) == [{"ranking": ["crowns"]}]
    assert len(dispatch.continuations) == 1
    assert service.view_payload(match_id)["suitRanking"] == ["crowns"]


def test_movement_choice_over_the_wire():
    service = _service()
    _, _, match_id = _lobby(service)
    first, second, dispatch = _rigged_round(service, match_id, 19, 20)
    assert dispatch.payloads(first, EventType.MOVEMENT_CHOICE_OFFERED) == [{"eligibleTargets": [second]}]

    rejected = service.handle(second, {"type": "movementChoice", "choice": "forward"})
    assert rejected.payloads(second, EventType.REJECTED)[0]["code"] == "ILLEGAL_ACTION"

    dispatch = service.handle(first, {"type": "movementChoice", "choice": "pullback", "target": second})
    seats = {seat["id"]: seat["position"] for seat in dispatch.payloads(second, EventType.SEATS_UPDATED)[0]["seats"]}
    assert seats == {first: 21, second: 19}
    assert len(dispatch.continuations) == 1
