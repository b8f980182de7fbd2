"""Connection-scoped player identities."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from random import Random
from typing import Dict, Iterator, Optional

from .errors import IllegalActionError, NotFoundError, ValidationError
from .rules import DEFAULT_RULES, RuleSet

logger = logging.getLogger(__name__)

ADJECTIVES = ("Sharp", "Swift", "Bold", "Fierce", "Brave", "Quick", "Strong", "Wild")
ANIMALS = ("Fox", "Wolf", "Bear", "Eagle", "Lion", "Tiger", "Shark", "Hawk")


@dataclass
class Player:
    player_id: str
    name: str
    color: Optional[str] = None


def generate_name(rng: Random) -> str:
    return f"{rng.choice(ADJECTIVES)}{rng.choice(ANIMALS)}{rng.randrange(100)}"


class PlayerRegistry:
    """Identities for the currently open connections, keyed by player id."""

    def __init__(self, rules: RuleSet = DEFAULT_RULES, rng: Optional[Random] = None) -> None:
        self.rules = rules
        self._rng = rng or Random()
        self._players: Dict[str, Player] = {}

    def __iter__(self) -> Iterator[Player]:
        return iter(self._players.values())

    def __len__(self) -> int:
        return len(self._players)

    def __contains__(self, player_id: object) -> bool:
        return player_id in self._players

    def connect(self, player_id: Optional[str] = None) -> Player:
        player_id = player_id or uuid.uuid4().hex
        if player_id in self._players:
            raise IllegalActionError(f"Player {player_id} is already connected.")
        player = Player(player_id=player_id, name=generate_name(self._rng))
        self._players[player_id] = player
        logger.info("Player %s connected as %s", player_id, player.name)
        return player

    def disconnect(self, player_id: str) -> Optional[Player]:
        player = self._players.pop(player_id, None)
        if player is not None:
            logger.info("Player %s (%s) disconnected", player_id, player.name)
        return player

    def get(self, player_id: str) -> Player:
        player = self._players.get(player_id)
        if player is None:
            raise NotFoundError(f"Unknown player {player_id}.")
        return player

    def rename(self, player_id: str, name: str) -> Player:
        player = self.get(player_id)
        cleaned = name.strip()
        if not cleaned:
            raise ValidationError("Name cannot be empty.")
        if len(cleaned) > self.rules.max_name_length:
            raise ValidationError(f"Name longer than {self.rules.max_name_length} characters.")
        player.name = cleaned
        return player

    def select_color(self, player_id: str, color: str) -> Player:
        player = self.get(player_id)
        if color not in self.rules.colors:
            raise ValidationError(f"Unknown color {color!r}.")
        if any(other.color == color and other.player_id != player_id for other in self._players.values()):
            raise IllegalActionError("Color already taken.")
        player.color = color
        return player

    def clear(self) -> None:
        self._players.clear()
