"""Bot strategies for trickrace."""

from .baseline_greedy import GreedyBot
from .random_bot import RandomBot
