import json

import pytest

from tdl2048.agents.baseline import Player
from tdl2048.agents.random_env import RandomEnvironment
from tdl2048.environment.board import Board
from tdl2048.training.episode import Episode
from tdl2048.training.training import TrainingStats, train


def finished_game(score, exponent):
    board = Board()
    board[0] = exponent
    game = Episode(board=board, score=score)
    game.opened, game.closed = 0, 50
    return game


def test_summary_reports_block():
    stats = TrainingStats(block=4)
    for score, exponent in [(100, 7), (300, 8), (200, 8), (400, 9)]:
        stats.update(finished_game(score, exponent))
    result = stats.summary()
    assert result["episodes"] == 4
    assert result["avg"] == pytest.approx(250.0)
    assert result["max"] == 400
    assert list(result["tiles"]) == [128, 256, 512]
    assert result["tiles"][512] == pytest.approx((0.25, 0.25))
    assert result["tiles"][256] == pytest.approx((0.5, 0.75))
    assert result["tiles"][128] == pytest.approx((0.25, 1.0))


def test_summary_of_nothing():
    assert TrainingStats().summary()["episodes"] == 0


def test_summary_uses_last_episodes_only():
    stats = TrainingStats(block=0)
    for score in (10, 20, 30):
        stats.update(finished_game(score, 3))
    assert stats.summary(last=2)["avg"] == pytest.approx(25.0)


def test_train_runs_episodes_and_saves(tmp_path):
    stats = train(Player("greedy1 seed=1"), RandomEnvironment("seed=2"), total=3, block=2)
    assert len(stats) == 3
    assert all(score > 0 for score in stats.scores)
    assert all(moves > 0 for moves in stats.moves)

    path = tmp_path / "stats.json"
    stats.save(str(path))
    assert json.loads(path.read_text())["scores"] == stats.scores

    image = tmp_path / "curve.png"
    stats.plot(str(image))
    assert image.exists()
