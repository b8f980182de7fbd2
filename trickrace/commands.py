"""Inbound command schemas validated at the service boundary."""

from __future__ import annotations

from typing import Annotated, Any, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, field_validator, model_validator
from pydantic import ValidationError as SchemaError

from .cards import Card, Suit, deserialize_card, parse_suit
from .errors import ValidationError


class CardPayload(BaseModel):
    suit: str
    value: Optional[int] = None

    def to_card(self) -> Card:
        return deserialize_card(self.model_dump())

    @model_validator(mode="after")
    def check_card(self) -> "CardPayload":
        self.to_card()
        return self


class CreateMatch(BaseModel):
    type: Literal["createMatch"]


class JoinMatch(BaseModel):
    type: Literal["joinMatch"]
    match_id: str = Field(alias="matchId", min_length=1)

    @field_validator("match_id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) and not isinstance(value, bool) else value


class StartMatch(BaseModel):
    type: Literal["startMatch"]


class LeaveMatch(BaseModel):
    type: Literal["leaveMatch"]


class PlayCard(BaseModel):
    type: Literal["playCard"]
    card: CardPayload


class UpdateSuitRanking(BaseModel):
    type: Literal["updateSuitRanking"]
    action: Literal["add", "swap"]
    suit: Optional[str] = None
    suits: Optional[List[str]] = None

    @model_validator(mode="after")
    def check_payload(self) -> "UpdateSuitRanking":
        if self.action == "add" and self.suit is None:
            raise ValueError("add needs 'suit'.")
        if self.action == "swap" and (self.suits is None or len(self.suits) != 2):
            raise ValueError("swap needs exactly two 'suits'.")
        for name in self.suit_names():
            parse_suit(name)
        return self

    def suit_names(self) -> List[str]:
        if self.action == "add":
            return [self.suit] if self.suit is not None else []
        return list(self.suits or [])

    def parsed_suits(self) -> List[Suit]:
        return [parse_suit(name) for name in self.suit_names()]


class MovementChoiceCommand(BaseModel):
    type: Literal["movementChoice"]
    choice: Literal["forward", "pullback"]
    target: Optional[str] = None

    @model_validator(mode="after")
    def check_target(self) -> "MovementChoiceCommand":
        if self.choice == "pullback" and not self.target:
            raise ValueError("pullback needs a 'target'.")
        return self


class ChangeName(BaseModel):
    type: Literal["changeName"]
    name: str


class SelectColor(BaseModel):
    type: Literal["selectColor"]
    color: str


Command = Annotated[
    Union[
        CreateMatch,
        JoinMatch,
        StartMatch,
        LeaveMatch,
        PlayCard,
        UpdateSuitRanking,
        MovementChoiceCommand,
        ChangeName,
        SelectColor,
    ],
    Field(discriminator="type"),
]

_COMMAND_ADAPTER: TypeAdapter[Command] = TypeAdapter(Command)


def parse_command(raw: Mapping[str, Any]) -> Command:
    """Validate a raw client message; any shape problem becomes a ValidationError."""
    if not isinstance(raw, Mapping):
        raise ValidationError("Command must be a JSON object.")
    try:
        return _COMMAND_ADAPTER.validate_python(dict(raw))
    except SchemaError as exc:
        first = exc.errors()[0] if exc.errors() else {}
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = first.get("msg", "invalid command")
        raise ValidationError(f"{location}: {message}" if location else message) from exc
