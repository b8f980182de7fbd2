from random import Random

from trickrace.match import Match
from trickrace.players import Player
from trickrace.rules import RuleSet
from trickrace.snapshot import JsonSnapshotStore, restore_match, snapshot_match


def _midround_match() -> Match:
    match = Match(match_id="424242", rules=RuleSet(round_delay=0), rng=Random(9))
    match.join(Player("a", "Ann"))
    match.join(Player("b", "Bob"))
    match.start("a")
    player = match.current_player
    match.play_card(player, match.legal_cards(player)[0])
    return match


def test_restored_match_continues_where_it_stopped():
    match = _midround_match()
    restored = restore_match(snapshot_match(match), rng=Random(1))

    assert restored.current_player == match.current_player
    assert restored.lead_suit == match.lead_suit
    assert restored.trick.plays == match.trick.plays
    assert [seat.hand for seat in restored.seats] == [seat.hand for seat in match.seats]
    assert restored.deck.cards == match.deck.cards
    assert restored.generation == match.generation

    player = restored.current_player
    restored.play_card(player, restored.legal_cards(player)[0])
    assert restored.pending is not None


def test_json_store_round_trip(tmp_path):
    store = JsonSnapshotStore(tmp_path / "snapshots")
    snapshot = snapshot_match(_midround_match())
    store.save(snapshot)
    assert (tmp_path / "snapshots" / "match_424242.json").exists()
    assert store.load("424242") == snapshot

    store.delete("424242")
    assert store.load("424242") is None
