"""Validation schema for trickrace rules configuration."""

from __future__ import annotations

from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .cards import Suit

SUIT_NAMES = tuple(suit.value for suit in Suit if suit is not Suit.JOKER)
DEFAULT_COLORS = ("#000000", "#FF0000", "#0000FF", "#FFFF00", "#FFFFFF", "#008000")


def _validate_suit(value: str) -> str:
    normalized = value.lower()
    if normalized not in SUIT_NAMES:
        raise ValueError(f"Unknown suit: {value!r}")
    return normalized


class RuleSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    suits: Tuple[str, ...] = Field(SUIT_NAMES, description="Suits present in the deck, in deck order.")
    max_value: int = Field(11, ge=1, description="Highest card value; each suit runs 1..max_value.")
    jokers: int = Field(3, ge=0, description="Number of jokers in a canonical deck.")
    hand_size: int = Field(7, ge=1)
    min_players: int = Field(2, ge=1)
    max_players: int = Field(5, ge=1)
    ranking_capacity: int = Field(6, ge=0, description="Maximum number of ranked suits.")
    finish_line: int = Field(25, ge=1, description="Reaching this square wins the match.")
    green_zone_start: int = Field(19, ge=0, description="First square of the green zone.")
    pick_steps: Tuple[int, ...] = Field((3, 6, 9, 14, 19, 22), description="Squares that open a pick step.")
    pull_back_floor: int = Field(1, ge=0)
    round_delay: float = Field(3.0, ge=0, description="Seconds between a resolved round and the next one.")
    pick_step_delay: float = Field(1.0, ge=0, description="Seconds between a ranking update and the next round.")
    colors: Tuple[str, ...] = DEFAULT_COLORS
    max_name_length: int = Field(24, ge=1)

    @field_validator("suits")
    @classmethod
    def validate_suits(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        if not value:
            raise ValueError("Deck configuration must not be empty.")
        normalized = tuple(_validate_suit(suit) for suit in value)
        if len(set(normalized)) != len(normalized):
            raise ValueError("Suits must be distinct.")
        return normalized

    @model_validator(mode="after")
    def validate_board(self) -> "RuleSet":
        if self.min_players > self.max_players:
            raise ValueError("min_players cannot exceed max_players.")
        if self.green_zone_start > self.finish_line:
            raise ValueError("Green zone must start on the board.")
        for step in self.pick_steps:
            if step <= 0 or step >= self.finish_line:
                raise ValueError(f"Pick step {step} lies outside the board.")
        if self.ranking_capacity > len(self.suits):
            raise ValueError("Ranking capacity cannot exceed the number of suits.")
        return self

    @property
    def ranked_suits(self) -> Tuple[Suit, ...]:
        return tuple(Suit(name) for name in self.suits)

    @property
    def deck_size(self) -> int:
        return len(self.suits) * self.max_value + self.jokers


DEFAULT_RULES = RuleSet()
