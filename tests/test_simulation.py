import numpy as np
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from goalie.defense_arbiter import DefenseArbiter
from goalie.simulation import ScenarioConfig, ScenarioWorld
from goalie.states import DecisionState, TargetGeometry
from goalie.trace import DecisionLogger


class TestScenarioWorld:
    def test_default_scenario_runs(self):
        """The scripted play should run without diagnostics and keep the goalie finite."""
        world = ScenarioWorld(seed=0)

        game = world.run(ticks=60, dt=0.1)

        assert game.ticks == 60
        assert len(game.state_history) == 60
        assert np.all(np.isfinite(world.goalie))
        assert world.arbiter.diagnostics == []

    def test_first_tick_intercepts(self):
        """The rival drifts away slowly, so the goalie goes for the ball."""
        world = ScenarioWorld()

        _, state = world.step(0.1)

        assert state == DecisionState.INTERCEPTING

    def test_goalie_moves_toward_target(self):
        world = ScenarioWorld()
        start = world.goalie.copy()

        world.step(0.1)

        moved = np.linalg.norm(world.goalie - start)
        assert 0.0 < moved <= world.config.goalie_speed * 0.1 + 1e-9

    def test_ball_leaves_box(self):
        """Once the drifting ball is out of the box the arbiter idles."""
        config = ScenarioConfig(ball_step=(1.0, 0.0))
        world = ScenarioWorld(config=config)

        world.run(ticks=20, dt=0.1)

        assert world.game.state_history[-1] == DecisionState.IDLE

    def test_noisy_run_with_logger(self, tmp_path):
        config = ScenarioConfig(noise_std=0.05)
        sink = DecisionLogger(log_dir=str(tmp_path))
        geometry = TargetGeometry(goal_center=config.goal_center, teammates=(config.teammate,))
        world = ScenarioWorld(arbiter=DefenseArbiter(geometry=geometry, sink=sink), config=config, seed=42)

        world.run(ticks=30, dt=0.1)

        assert sink.ticks == 30
        assert sum(sink.state_counts.values()) == 30

    def test_completed_play_resets_arbiter(self):
        world = ScenarioWorld()
        world.run(ticks=200, dt=0.1)

        game = world.game
        assert game.plays_completed == game.shots + game.passes
