"""Error taxonomy shared by the engine and the command boundary."""

from __future__ import annotations


class GameError(RuntimeError):
    """Base class for recoverable command failures."""

    code = "GAME_ERROR"


class ValidationError(GameError):
    """Raised when a command is malformed."""

    code = "VALIDATION_ERROR"


class IllegalActionError(GameError):
    """Raised when a well-formed command breaks the rules in the current state."""

    code = "ILLEGAL_ACTION"


class NotFoundError(GameError):
    """Raised when a command references an unknown match or player."""

    code = "NOT_FOUND"
