from trickrace.cards import JOKER, Card, Suit
from trickrace.mechanics import is_legal, legal_moves


def test_anything_goes_before_the_lead_is_known():
    hand = [Card(Suit.SPADES, 2), Card(Suit.HEARTS, 5), JOKER]
    assert legal_moves(hand, None) == hand


def test_must_follow_the_lead_but_may_always_play_a_joker():
    hand = [Card(Suit.SPADES, 2), Card(Suit.HEARTS, 5), JOKER]
    assert legal_moves(hand, Suit.HEARTS) == [Card(Suit.HEARTS, 5), JOKER]


def test_void_in_lead_suit_frees_the_hand():
    hand = [Card(Suit.SPADES, 2), Card(Suit.CLUBS, 5)]
    assert legal_moves(hand, Suit.HEARTS) == hand


def test_is_legal_requires_the_card_in_hand():
    hand = [Card(Suit.SPADES, 2)]
    assert is_legal(Card(Suit.SPADES, 2), hand, Suit.SPADES)
    assert not is_legal(Card(Suit.SPADES, 3), hand, None)
