import pytest

from trickrace.cards import Card, Suit
from trickrace.commands import JoinMatch, MovementChoiceCommand, PlayCard, UpdateSuitRanking, parse_command
from trickrace.errors import ValidationError


def test_play_card_command_carries_a_card():
    command = parse_command({"type": "playCard", "card": {"suit": "hearts", "value": 7}})
    assert isinstance(command, PlayCard)
    assert command.card.to_card() == Card(Suit.HEARTS, 7)


def test_join_accepts_numeric_match_ids():
    command = parse_command({"type": "joinMatch", "matchId": 123456})
    assert isinstance(command, JoinMatch)
    assert command.match_id == "123456"


def test_ranking_commands_are_checked_for_shape():
    swap = parse_command({"type": "updateSuitRanking", "action": "swap", "suits": ["spades", "Hearts"]})
    assert isinstance(swap, UpdateSuitRanking)
    assert swap.parsed_suits() == [Suit.SPADES, Suit.HEARTS]

    with pytest.raises(ValidationError):
        parse_command({"type": "updateSuitRanking", "action": "swap", "suits": ["spades"]})
    with pytest.raises(ValidationError):
        parse_command({"type": "updateSuitRanking", "action": "add", "suit": "joker"})
    with pytest.raises(ValidationError):
        parse_command({"type": "updateSuitRanking", "action": "remove", "suit": "spades"})


def test_pullback_needs_a_target():
    with pytest.raises(ValidationError):
        parse_command({"type": "movementChoice", "choice": "pullback"})
    command = parse_command({"type": "movementChoice", "choice": "pullback", "target": "abc"})
    assert isinstance(command, MovementChoiceCommand)


@pytest.mark.parametrize(
    "raw",
    [
        None,
        ["playCard"],
        {},
        {"type": "shuffleDeck"},
        {"type": "playCard", "card": {"suit": "joker", "value": 3}},
        {"type": "playCard", "card": {"suit": "hearts"}},
        {"type": "joinMatch"},
    ],
)
def test_malformed_commands_are_rejected(raw):
    with pytest.raises(ValidationError):
        parse_command(raw)
