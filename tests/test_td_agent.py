import numpy as np
import pytest

from tdl2048.agents.ntuple_network import NTupleNetwork, WeightFileError
from tdl2048.agents.td_agent import TDPlayer, Step, WORST_VALUE
from tdl2048.environment.action import Action
from tdl2048.environment.board import Board, Direction

TERMINAL = Board([[1, 2, 3, 4], [2, 3, 4, 5], [3, 4, 5, 6], [4, 5, 6, 7]])


def corner_network(weights=None):
    """Network with a single one-cell tuple on the top-left corner."""
    network = NTupleNetwork([[0]], num_values=16)
    for exponent, value in (weights or {}).items():
        network.tables[0][exponent] = value
    return network


def corner_board(exponent):
    board = Board()
    board[0] = exponent
    return board


def test_defaults():
    agent = TDPlayer("init=rows tile_values=8")
    assert agent.name() == "TD"
    assert agent.role() == "player"
    assert agent.alpha == 0
    assert agent.config.n == 1
    assert agent.config.ply == 2
    assert len(agent.network) == 8


@pytest.mark.parametrize("ply", [1, 2])
def test_take_action_prefers_reward_and_breaks_ties_in_order(ply):
    agent = TDPlayer(f"init=rows tile_values=8 ply={ply}")
    agent.open_episode()
    board = Board([[1, 1, 0, 0], [0] * 4, [0] * 4, [0] * 4])

    # UP is illegal, RIGHT and LEFT both score 4 and RIGHT comes first
    assert agent.take_action(board) == Action.slide(Direction.RIGHT)
    assert len(agent.history) == 1
    assert agent.history[0].reward == 4
    assert agent.history[0].after.cells().tolist() == [0, 0, 0, 2] + [0] * 12
    assert board[0] == 1


def test_take_action_without_legal_move():
    agent = TDPlayer("init=rows tile_values=8")
    assert agent.take_action(TERMINAL).is_null()
    assert agent.history == []


def test_take_action_follows_the_network():
    # the corner weight outweighs any immediate reward
    agent = TDPlayer("ply=1", network=corner_network({1: 100.0}))
    board = Board([[0, 1, 0, 0], [0] * 4, [0] * 4, [0] * 4])
    # only LEFT puts the tile on the corner cell
    assert agent.take_action(board) == Action.slide(Direction.LEFT)


def test_expected_value_averages_estimates_over_spawns():
    agent = TDPlayer(network=NTupleNetwork([[0]], num_values=16))
    agent.network.tables[0].weights[:] = 5.0
    after = corner_board(1)
    # rewards of the answering slide are not part of the expectation
    assert agent.expected_value(after) == pytest.approx(5.0)


def test_expected_value_penalises_dead_spawns():
    agent = TDPlayer(network=NTupleNetwork([[0]], num_values=16))
    agent.network.tables[0].weights[:] = 5.0
    # a 2-tile in the gap locks the board, a 4-tile merges with its right neighbour
    after = Board([[0, 2, 3, 4], [3, 4, 5, 6], [4, 5, 6, 7], [5, 6, 7, 8]])
    value = agent.expected_value(after)
    assert np.isfinite(value)
    assert value == pytest.approx(0.9 * WORST_VALUE + 0.1 * 5.0)


def test_dead_spawns_never_block_a_legal_move():
    agent = TDPlayer(network=NTupleNetwork([[0]], num_values=32))
    # every spawn after either legal slide locks the board
    board = Board([[0, 3, 4, 5], [6, 7, 8, 9], [10, 11, 12, 13], [14, 15, 16, 17]])
    assert agent.take_action(board) == Action.slide(Direction.UP)


def test_default_network_plays_past_its_top_tile():
    agent = TDPlayer("init=rows")
    board = Board([[15, 15, 0, 0], [0] * 4, [0] * 4, [0] * 4])
    # the merge creates exponent 16, one above the default table range
    assert agent.take_action(board) == Action.slide(Direction.RIGHT)
    assert agent.history[0].reward == 1 << 16
    assert agent.history[0].after[3] == 16


def test_open_episode_clears_history():
    agent = TDPlayer("init=rows tile_values=8")
    agent.take_action(Board([[1, 1, 0, 0], [0] * 4, [0] * 4, [0] * 4]))
    agent.open_episode()
    assert agent.history == []


def replay(agent, *steps):
    agent.open_episode()
    agent.history.extend(Step(reward, corner_board(exponent)) for reward, exponent in steps)
    agent.close_episode()
    return agent.network.tables[0].weights


def test_close_episode_one_step_td():
    agent = TDPlayer("alpha=0.5", network=corner_network())
    weights = replay(agent, (0, 1), (4, 2), (8, 3))
    assert weights[:4].tolist() == [0.0, 4.0, 4.0, 0.0]


def test_close_episode_n_step_td():
    agent = TDPlayer("alpha=0.5 n=2", network=corner_network())
    weights = replay(agent, (0, 1), (4, 2), (8, 3))
    # the first step sees both later rewards and bootstraps from the last afterstate
    assert weights[:4].tolist() == [0.0, 6.0, 4.0, 0.0]


def test_close_episode_bootstraps_from_updated_weights():
    agent = TDPlayer("alpha=0.5", network=corner_network({3: 10.0}))
    weights = replay(agent, (0, 1), (4, 2), (8, 3))
    # terminal pulled to 5, then 8 + 5 -> 6.5, then 4 + 6.5 -> 5.25
    assert weights[:4].tolist() == [0.0, 5.25, 6.5, 5.0]


def test_close_episode_without_learning_is_a_no_op():
    network = corner_network({1: 1.0, 2: 2.0})
    snapshot = network.tables[0].weights.tobytes()

    TDPlayer("alpha=0", network=network).close_episode()
    replay(TDPlayer("alpha=0", network=network), (0, 1), (4, 2))
    assert network.tables[0].weights.tobytes() == snapshot

    learner = TDPlayer("alpha=0.1", network=network)
    learner.open_episode()
    learner.close_episode()
    assert network.tables[0].weights.tobytes() == snapshot


def test_notify_updates_learning_rate():
    agent = TDPlayer("init=rows tile_values=8")
    agent.notify("alpha=0.25")
    assert agent.alpha == 0.25
    assert agent.property("alpha") == "0.25"
    agent.notify("comment=hello")
    assert agent.config.extra["comment"] == "hello"


def test_weights_load_at_construction_and_save_on_close(tmp_path):
    path = tmp_path / "weights.bin"
    agent = TDPlayer(f"init=rows tile_values=8 alpha=0.5 save={path}")
    agent.network.adjust(Board([[1, 2, 0, 0], [0] * 4, [0] * 4, [0] * 4]), 40.0, 0.5)
    with agent:
        pass
    assert path.exists()

    restored = TDPlayer(f"init=rows tile_values=8 load={path}")
    for table, source in zip(restored.network.tables, agent.network.tables):
        assert table.weights.tobytes() == source.weights.tobytes()


def test_missing_weight_file_is_fatal(tmp_path):
    with pytest.raises(WeightFileError):
        TDPlayer(f"init=rows tile_values=8 load={tmp_path / 'nope.bin'}")


def test_invalid_configuration():
    with pytest.raises(ValueError):
        TDPlayer("init=rows tile_values=8 n=0")
    with pytest.raises(ValueError):
        TDPlayer("init=rows tile_values=8 ply=3")
    with pytest.raises(ValueError):
        TDPlayer("init=triangles")
