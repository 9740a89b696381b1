"""
Scripted scenario for exercising the defense arbiter in a closed loop.

The world moves the ball along a fixed drift, feeds noisy position samples to
the arbiter, and moves the goalie toward whatever point the arbiter asks for.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from .defense_arbiter import DefenseArbiter
from .states import (Action, BallObservation, DecisionState, GoalieObservation,
                     HoldPosition, MoveToIntercept, OpponentObservation,
                     PassToTeammate, ShootToGoal, TargetGeometry, Teammate,
                     as_vector)
from .trajectory import RobotTrajectory


@dataclass
class ScenarioConfig:
    ball_start: Tuple[float, float] = (0.0, 6.0)
    ball_step: Tuple[float, float] = (0.1, -0.2)
    enemy_start: Tuple[float, float] = (1.0, 5.0)
    enemy_velocity: Tuple[float, float] = (0.2, -0.1)
    goalie_start: Tuple[float, float] = (0.0, 0.0)
    goalie_speed: float = 2.0
    teammate: Teammate = field(default_factory=lambda: Teammate(1, (-5.0, 10.0)))
    goal_center: Tuple[float, float] = (0.0, -20.0)
    noise_std: float = 0.0


class GameState:
    """
    Tracks the outcome of the scripted plays.
    """
    def __init__(self):
        self.ticks = 0
        self.shots = 0
        self.passes = 0
        self.plays_completed = 0
        self.state_history: List[DecisionState] = []


class ScenarioWorld:
    """
    Ball, one rival, one teammate and our goalie on a 2D pitch.
    """

    def __init__(
        self,
        arbiter: DefenseArbiter | None = None,
        config: ScenarioConfig | None = None,
        seed: Optional[int] = None
    ) -> None:
        self.config = config or ScenarioConfig()
        self.geometry = TargetGeometry(goal_center=self.config.goal_center,
                                       teammates=(self.config.teammate,))
        self.arbiter = arbiter or DefenseArbiter(geometry=self.geometry)
        self.rng = np.random.default_rng(seed)
        self.game = GameState()
        self.t = 0.0
        self._reset_play()

    def _reset_play(self) -> None:
        self.ball = as_vector(self.config.ball_start)
        self.enemy = as_vector(self.config.enemy_start)
        self.goalie = as_vector(self.config.goalie_start)
        self.trajectory: Optional[RobotTrajectory] = None

    def _observe_ball(self) -> BallObservation:
        position = self.ball.copy()
        if self.config.noise_std > 0:
            position += self.rng.normal(0.0, self.config.noise_std, size=position.shape)
        return BallObservation(position=position, t=self.t)

    def step(self, dt: float) -> Tuple[Action, DecisionState]:
        """
        Advance the world by dt seconds and run one arbiter tick.
        """
        self.t += dt
        self.ball = self.ball + as_vector(self.config.ball_step)
        self.enemy = self.enemy + as_vector(self.config.enemy_velocity) * dt

        action, state = self.arbiter.tick(
            self._observe_ball(),
            [OpponentObservation(position=self.enemy.copy(),
                                 velocity=as_vector(self.config.enemy_velocity),
                                 t=self.t)],
            goalie=GoalieObservation(position=self.goalie.copy(),
                                     max_speed=self.config.goalie_speed)
        )

        self._apply(action, dt)
        self.game.ticks += 1
        self.game.state_history.append(state)
        return action, state

    def _apply(self, action: Action, dt: float) -> None:
        if isinstance(action, (HoldPosition, MoveToIntercept)):
            self._move_goalie(as_vector(action.point), dt)
        elif isinstance(action, ShootToGoal):
            self.game.shots += 1
            self._end_play()
        elif isinstance(action, PassToTeammate):
            self.game.passes += 1
            self._end_play()

    def _move_goalie(self, target: NDArray[np.float64], dt: float) -> None:
        self.trajectory = RobotTrajectory(self.goalie, target, self.config.goal_center)
        self.goalie = self.trajectory.step(self.config.goalie_speed * dt)

    def _end_play(self) -> None:
        self.game.plays_completed += 1
        self.arbiter.reset()
        self._reset_play()

    def run(self, ticks: int, dt: float = 0.1) -> GameState:
        for _ in range(ticks):
            self.step(dt)
        return self.game
