"""Board movement: occupancy skipping, green zone and pick steps."""

from __future__ import annotations

from typing import Collection, List, Mapping

from .rules import DEFAULT_RULES, RuleSet


def next_available(position: int, occupied: Collection[int], rules: RuleSet = DEFAULT_RULES) -> int:
    """Return the first free square after ``position``, never past the finish line.

    ``occupied`` holds the squares of the other players only.
    """
    candidate = position + 1
    while candidate in occupied and candidate < rules.finish_line:
        candidate += 1
    return min(candidate, rules.finish_line)


def pull_back(position: int, rules: RuleSet = DEFAULT_RULES) -> int:
    if position <= rules.pull_back_floor:
        return position
    return max(rules.pull_back_floor, position - 1)


def in_green_zone(position: int, rules: RuleSet = DEFAULT_RULES) -> bool:
    return rules.green_zone_start <= position <= rules.finish_line


def is_pick_step(position: int, rules: RuleSet = DEFAULT_RULES) -> bool:
    return position in rules.pick_steps


def has_finished(position: int, rules: RuleSet = DEFAULT_RULES) -> bool:
    return position >= rules.finish_line


def green_zone_rivals(mover: str, positions: Mapping[str, int], rules: RuleSet = DEFAULT_RULES) -> List[str]:
    """Return the other players sharing the green zone with ``mover``, or [] if the mover is outside it."""
    if not in_green_zone(positions[mover], rules):
        return []
    return [player for player, square in positions.items() if player != mover and in_green_zone(square, rules)]
