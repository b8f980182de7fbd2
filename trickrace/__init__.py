"""Core rules engine package for trickrace."""

__version__ = "0.1.0"

__all__ = [
    "cards",
    "deck",
    "comparator",
    "board",
    "ranking",
    "turns",
    "trick",
    "mechanics",
    "state",
    "players",
    "events",
    "errors",
    "rules",
    "commands",
    "match",
    "repository",
    "snapshot",
    "service",
]
