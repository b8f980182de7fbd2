from itertools import product

from trickrace.cards import JOKER, Card, Suit
from trickrace.comparator import Outcome, compare, find_trick_winner, outranks_lead


def test_same_suit_higher_value_wins():
    plays = [("p1", Card(Suit.SPADES, 5)), ("p2", Card(Suit.SPADES, 7))]
    assert find_trick_winner(plays, ranking=[], lead_suit=Suit.SPADES) == "p2"


def test_higher_ranked_off_suit_beats_the_lead():
    ranking = [Suit.SPADES, Suit.HEARTS, Suit.CLUBS]
    plays = [("p1", Card(Suit.HEARTS, 3)), ("p2", Card(Suit.SPADES, 1))]
    assert find_trick_winner(plays, ranking, lead_suit=Suit.HEARTS) == "p2"


def test_later_joker_wins_regardless_of_ranking():
    plays = [("p1", JOKER), ("p2", JOKER)]
    assert find_trick_winner(plays, [Suit.SPADES], lead_suit=None) == "p2"


def test_joker_beats_any_suited_card():
    plays = [("p1", Card(Suit.SPADES, 11)), ("p2", JOKER), ("p3", Card(Suit.SPADES, 10))]
    assert find_trick_winner(plays, [Suit.SPADES], lead_suit=Suit.SPADES) == "p2"


def test_unranked_off_suit_never_beats_the_lead():
    plays = [("p1", Card(Suit.HEARTS, 1)), ("p2", Card(Suit.CROWNS, 11))]
    assert find_trick_winner(plays, [Suit.SPADES], lead_suit=Suit.HEARTS) == "p1"


def test_ranked_off_suit_beats_unranked_lead():
    assert outranks_lead(Suit.CLUBS, Suit.HEARTS, [Suit.CLUBS])
    assert not outranks_lead(Suit.HEARTS, Suit.CLUBS, [Suit.CLUBS])
    assert not outranks_lead(Suit.HEARTS, Suit.CLUBS, [Suit.CLUBS, Suit.HEARTS])


def test_off_suit_cards_fall_back_to_the_ranking():
    ranking = [Suit.STARS, Suit.CLUBS]
    plays = [
        ("p1", Card(Suit.HEARTS, 2)),
        ("p2", Card(Suit.CLUBS, 9)),
        ("p3", Card(Suit.STARS, 1)),
    ]
    assert find_trick_winner(plays, ranking, lead_suit=Suit.HEARTS) == "p3"


def test_empty_round_has_no_winner():
    assert find_trick_winner([], [], None) is None


def test_comparison_is_antisymmetric():
    cards = [
        Card(Suit.SPADES, 1),
        Card(Suit.SPADES, 9),
        Card(Suit.HEARTS, 4),
        Card(Suit.CLUBS, 11),
        Card(Suit.CROWNS, 6),
        JOKER,
    ]
    rankings = [[], [Suit.HEARTS], [Suit.CLUBS, Suit.SPADES, Suit.HEARTS]]
    leads = [None, Suit.SPADES, Suit.HEARTS]
    for a, b, ranking, lead in product(cards, cards, rankings, leads):
        forward = compare(a, b, ranking, lead, 0, 1)
        backward = compare(b, a, ranking, lead, 1, 0)
        assert forward == -backward
        if a.is_joker and b.is_joker:
            assert forward is Outcome.B_WINS
