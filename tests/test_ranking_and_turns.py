from random import Random

import pytest

from trickrace.cards import Suit
from trickrace.ranking import RankingAction, SuitRanking
from trickrace.turns import TurnSequencer


def test_add_puts_the_suit_on_top():
    ranking = SuitRanking()
    assert ranking.add(Suit.HEARTS)
    assert ranking.add(Suit.CLUBS)
    assert ranking.as_tuple() == (Suit.CLUBS, Suit.HEARTS)
    assert not ranking.add(Suit.HEARTS)
    assert not ranking.add(Suit.JOKER)


def test_full_ranking_offers_swap():
    ranking = SuitRanking(capacity=2)
    assert ranking.offered_action() is RankingAction.ADD
    ranking.add(Suit.HEARTS)
    ranking.add(Suit.CLUBS)
    assert ranking.is_full()
    assert ranking.offered_action() is RankingAction.SWAP
    assert not ranking.add(Suit.STARS)
    assert ranking.swap(Suit.HEARTS, Suit.CLUBS)
    assert ranking.names() == ["hearts", "clubs"]
    assert not ranking.swap(Suit.HEARTS, Suit.STARS)


def test_ranking_rejects_duplicates_and_jokers():
    with pytest.raises(ValueError):
        SuitRanking([Suit.HEARTS, Suit.HEARTS])
    with pytest.raises(ValueError):
        SuitRanking([Suit.JOKER])


def test_shuffled_order_is_a_permutation():
    turns = TurnSequencer.shuffled(["a", "b", "c", "d"], Random(4))
    assert sorted(turns.order) == ["a", "b", "c", "d"]
    assert turns.current == turns.order[0]


def test_winner_leads_and_seat_order_follows():
    turns = TurnSequencer.from_winner(["a", "b", "c"], "b")
    assert turns.order == ["b", "c", "a"]


def test_departed_winner_hands_the_lead_to_the_next_seat():
    turns = TurnSequencer.from_winner(["a", "c"], "b", winner_seat=1, seat_numbers=[0, 2])
    assert turns.order == ["c", "a"]


def test_advance_until_exhausted():
    turns = TurnSequencer(["a", "b"])
    assert turns.advance() == "b"
    assert turns.advance() is None
    assert turns.is_exhausted()
    assert turns.advance() is None


def test_remove_keeps_the_pointer_on_the_pending_player():
    turns = TurnSequencer(["a", "b", "c"], index=1)
    turns.remove("a")
    assert turns.current == "b"
    turns.remove("b")
    assert turns.current == "c"
    turns.remove("zzz")
    assert turns.order == ["c"]
