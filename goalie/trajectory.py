from dataclasses import dataclass
from typing import Tuple

import numpy as np
from numpy.typing import NDArray

from .states import as_point, as_vector


@dataclass(frozen=True)
class TrajectoryInfo:
    start_pos: Tuple[float, ...]
    ball_pos: Tuple[float, ...]
    goal_pos: Tuple[float, ...]
    control_points: Tuple[Tuple[float, ...], ...]


class RobotTrajectory:
    """
    Goalie movement path as a cubic Bezier curve from its start to the ball.

    The inner control points sit at one and two thirds of the straight line,
    so the curve moves at constant speed along that line.
    """

    def __init__(self, start_pos, ball_pos, goal_pos) -> None:
        """
        Args:
            start_pos: Goalie position when the move starts
            ball_pos: Point to reach (ball or intercept point)
            goal_pos: Where the ball is sent afterwards
        """
        self.start_pos = as_vector(start_pos)
        self.ball_pos = as_vector(ball_pos)
        self.goal_pos = as_vector(goal_pos)
        self.control_points = self._control_points(self.start_pos, self.ball_pos)

    @staticmethod
    def _control_points(start: NDArray[np.float64], end: NDArray[np.float64]) -> NDArray[np.float64]:
        third = (end - start) / 3.0
        return np.stack([start, start + third, end - third, end])

    def position_at(self, t: float) -> NDArray[np.float64]:
        """
        Position at curve parameter t in [0, 1].
        """
        c = self.control_points
        u = 1.0 - t
        return (u ** 3 * c[0]
                + 3.0 * u ** 2 * t * c[1]
                + 3.0 * u * t ** 2 * c[2]
                + t ** 3 * c[3])

    def delta_vector(self, t: float) -> NDArray[np.float64]:
        """Movement from the start of the curve to parameter t."""
        return self.position_at(t) - self.position_at(0.0)

    @property
    def length(self) -> float:
        return float(np.linalg.norm(self.ball_pos - self.start_pos))

    def step(self, distance: float) -> NDArray[np.float64]:
        """
        Point reached after travelling `distance` along the curve, capped at the end.
        """
        if self.length <= 0.0:
            return self.ball_pos.copy()
        t = min(1.0, max(0.0, distance / self.length))
        return self.position_at(t)

    def info(self) -> TrajectoryInfo:
        return TrajectoryInfo(
            start_pos=as_point(self.start_pos),
            ball_pos=as_point(self.ball_pos),
            goal_pos=as_point(self.goal_pos),
            control_points=tuple(as_point(p) for p in self.control_points),
        )
