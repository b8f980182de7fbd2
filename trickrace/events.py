"""Outbound notifications produced by the match state machine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class EventType(str, Enum):
    CONNECTED = "connected"
    MATCH_CREATED = "matchCreated"
    MATCH_JOINED = "matchJoined"
    MATCH_STARTED = "matchStarted"
    ROUND_STARTED = "roundStarted"
    TURN_ADVANCED = "turnAdvanced"
    CARD_PLAYED = "cardPlayed"
    ROUND_RESOLVED = "roundResolved"
    HANDS_REDEALT = "handsRedealt"
    HAND_UPDATED = "handUpdated"
    PICK_STEP_OFFERED = "pickStepOffered"
    RANKING_UPDATED = "rankingUpdated"
    MOVEMENT_CHOICE_OFFERED = "movementChoiceOffered"
    SEATS_UPDATED = "seatsUpdated"
    PLAYER_UPDATED = "playerUpdated"
    COLOR_SELECTED = "colorSelected"
    MATCH_FINISHED = "matchFinished"
    REJECTED = "rejected"


@dataclass(frozen=True)
class Notification:
    """A message for the seated players; ``recipients`` of None means every seat."""

    event: EventType
    payload: Dict[str, Any] = field(default_factory=dict)
    recipients: Optional[Tuple[str, ...]] = None

    @property
    def is_broadcast(self) -> bool:
        return self.recipients is None


def broadcast(event: EventType, **payload: Any) -> Notification:
    return Notification(event=event, payload=payload)


def targeted(event: EventType, recipient: str, **payload: Any) -> Notification:
    return Notification(event=event, payload=payload, recipients=(recipient,))
