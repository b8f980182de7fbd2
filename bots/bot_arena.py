"""Headless bot arena for trickrace."""

from __future__ import annotations

import argparse
import logging
from random import Random
from typing import Dict, Iterable, Optional, Sequence

from trickrace.match import Match, MatchPhase, MatchStep
from trickrace.players import Player
from trickrace.rules import DEFAULT_RULES, RuleSet

from .base import BotStrategy
from .baseline_greedy import GreedyBot
from .random_bot import RandomBot

logger = logging.getLogger(__name__)

BOT_REGISTRY: Dict[str, type[BotStrategy]] = {
    "random": RandomBot,
    "greedy": GreedyBot,
}


def _step(match: Match, bots: Dict[str, BotStrategy]) -> None:
    if match.step is MatchStep.ROUND_IN_PROGRESS:
        player = match.current_player
        match.play_card(player, bots[player].choose_card(match, player))
    elif match.step is MatchStep.PICK_STEP_PENDING:
        player = match.pick_step_player
        action, suits = bots[player].choose_ranking(match, player)
        match.update_suit_ranking(player, action, suits)
    elif match.step is MatchStep.MOVEMENT_CHOICE_PENDING:
        player = match.movement_player
        choice, target = bots[player].choose_movement(match, player)
        match.choose_movement(player, choice, target)
    elif match.pending is not None:
        # Timers are not needed headless: the next round opens immediately.
        match.resume(match.pending)
    else:
        raise RuntimeError(f"Match stuck in step {match.step}.")


def run_match(
    strategies: Sequence[BotStrategy],
    *,
    seed: Optional[int] = None,
    rules: RuleSet = DEFAULT_RULES,
    max_rounds: int = 1000,
) -> dict:
    match = Match(match_id="arena", rules=rules, rng=Random(seed))
    bots: Dict[str, BotStrategy] = {}
    for index, strategy in enumerate(strategies):
        player = Player(player_id=f"bot{index}", name=f"{strategy.name}{index}")
        bots[player.player_id] = strategy
        match.join(player)
    match.start(match.player_ids[0])

    while match.phase is MatchPhase.PLAYING:
        if match.round_number > max_rounds:
            logger.warning("Arena match abandoned after %d rounds", max_rounds)
            break
        _step(match, bots)

    return {
        "winner": match.winner,
        "rounds": match.round_number,
        "positions": match.positions(),
        "ranking": match.ranking.names(),
        "names": {seat.player_id: seat.name for seat in match.seats},
    }


def main(argv: Iterable[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run bot matches.")
    parser.add_argument("--bots", nargs="+", default=["greedy", "random"], choices=BOT_REGISTRY.keys())
    parser.add_argument("--n", type=int, default=10, help="Number of matches to play.")
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args(argv)

    wins: Dict[str, int] = {}
    total_rounds = 0
    for index in range(args.n):
        strategies = [BOT_REGISTRY[name]() for name in args.bots]
        results = run_match(strategies, seed=args.seed + index)
        total_rounds += results["rounds"]
        winner = results["names"].get(results["winner"], "none")
        wins[winner] = wins.get(winner, 0) + 1

    print(f"Wins after {args.n} matches: {wins}")
    print(f"Average rounds per match: {total_rounds / max(args.n, 1):.1f}")


if __name__ == "__main__":
    main()
