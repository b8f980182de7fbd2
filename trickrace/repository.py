"""Owned registry of live matches."""

from __future__ import annotations

import logging
from random import Random
from typing import Dict, Iterator, Optional

from .errors import IllegalActionError, NotFoundError
from .match import Match
from .rules import DEFAULT_RULES, RuleSet

logger = logging.getLogger(__name__)

MATCH_ID_LOW = 100000
MATCH_ID_HIGH = 999999


class MatchRepository:
    """Matches indexed by id. Must be opened before use and closed on teardown."""

    def __init__(self, rules: RuleSet = DEFAULT_RULES, rng: Optional[Random] = None) -> None:
        self.rules = rules
        self._rng = rng or Random()
        self._matches: Dict[str, Match] = {}
        self._open = False

    def open(self) -> None:
        self._open = True
        logger.debug("Match repository opened")

    def close(self) -> None:
        count = len(self._matches)
        self._matches.clear()
        self._open = False
        logger.debug("Match repository closed, dropped %d matches", count)

    def __iter__(self) -> Iterator[Match]:
        return iter(list(self._matches.values()))

    def __len__(self) -> int:
        return len(self._matches)

    def _require_open(self) -> None:
        if not self._open:
            raise RuntimeError("Match repository is not open.")

    def _new_id(self) -> str:
        while True:
            match_id = str(self._rng.randint(MATCH_ID_LOW, MATCH_ID_HIGH))
            if match_id not in self._matches:
                return match_id

    def create(self) -> Match:
        self._require_open()
        match = Match(match_id=self._new_id(), rules=self.rules, rng=Random(self._rng.random()))
        self._matches[match.match_id] = match
        logger.info("Match %s created", match.match_id)
        return match

    def get(self, match_id: str) -> Match:
        self._require_open()
        match = self._matches.get(str(match_id))
        if match is None:
            raise NotFoundError(f"Match {match_id} not found.")
        return match

    def find_by_player(self, player_id: str) -> Optional[Match]:
        return next((match for match in self._matches.values() if match.is_seated(player_id)), None)

    def require_unseated(self, player_id: str) -> None:
        current = self.find_by_player(player_id)
        if current is not None:
            raise IllegalActionError(f"Already seated in match {current.match_id}.")

    def discard(self, match_id: str) -> Optional[Match]:
        match = self._matches.pop(match_id, None)
        if match is not None:
            logger.info("Match %s discarded", match_id)
        return match
