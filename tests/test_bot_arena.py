from bots.baseline_greedy import GreedyBot
from bots.bot_arena import run_match
from bots.random_bot import RandomBot


def test_run_match_executes():
    results = run_match([GreedyBot(), RandomBot(seed=3)], seed=7)
    assert results["winner"] in results["positions"]
    assert results["positions"][results["winner"]] == 25
    assert results["rounds"] > 0


def test_run_match_with_a_full_table():
    results = run_match([RandomBot(seed=index) for index in range(5)], seed=11)
    assert len(results["positions"]) == 5
    assert results["winner"] is not None
