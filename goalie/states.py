from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union

import numpy as np
from numpy.typing import NDArray


def as_vector(value) -> NDArray[np.float64]:
    """
    Convert a point-like value to a float64 numpy array (copied).
    """
    return np.array(value, dtype=np.float64)


@dataclass
class KinematicState:
    """
    Represents the tracked state of a moving object (the ball).

    Fields:
        position: 2D or 3D position in meters
        velocity: velocity in m/s
        acceleration: acceleration in m/s^2
        jerk: jerk in m/s^3
        t: Timestamp of the last accepted observation (seconds)
    """
    position: NDArray[np.float64]
    velocity: NDArray[np.float64]
    acceleration: NDArray[np.float64]
    jerk: NDArray[np.float64]
    t: float

    def __post_init__(self) -> None:
        self.position = as_vector(self.position)
        self.velocity = as_vector(self.velocity)
        self.acceleration = as_vector(self.acceleration)
        self.jerk = as_vector(self.jerk)
        self.t = float(self.t)

    def copy(self) -> "KinematicState":
        return KinematicState(
            position=self.position,
            velocity=self.velocity,
            acceleration=self.acceleration,
            jerk=self.jerk,
            t=self.t,
        )


@dataclass
class OpponentState:
    """
    Represents the current state of a rival player.

    Fields:
        position: position in meters
        velocity: velocity in m/s
        t: Timestamp in seconds
    """
    position: NDArray[np.float64]
    velocity: NDArray[np.float64]
    t: float

    def __post_init__(self) -> None:
        self.position = as_vector(self.position)
        self.velocity = as_vector(self.velocity)
        self.t = float(self.t)

    @property
    def speed(self) -> float:
        return float(np.linalg.norm(self.velocity))


@dataclass
class GoalieState:
    """
    Position of our goalie and the top speed its drive can sustain.
    """
    position: NDArray[np.float64]
    max_speed: float = 2.0

    def __post_init__(self) -> None:
        self.position = as_vector(self.position)
        self.max_speed = float(self.max_speed)


@dataclass(frozen=True)
class TargetBox:
    """Monitored region around the goal."""
    x_min: float = -10.0
    x_max: float = 10.0
    y_min: float = -20.0
    y_max: float = 20.0

    def contains(self, point) -> bool:
        x, y = float(point[0]), float(point[1])
        return (self.x_min <= x <= self.x_max and
                self.y_min <= y <= self.y_max)

    def clamp(self, point) -> NDArray[np.float64]:
        clamped = as_vector(point)
        clamped[0] = np.clip(clamped[0], self.x_min, self.x_max)
        clamped[1] = np.clip(clamped[1], self.y_min, self.y_max)
        return clamped


@dataclass(frozen=True)
class Teammate:
    teammate_id: int
    position: Tuple[float, ...]


@dataclass(frozen=True)
class TargetGeometry:
    """
    Goal geometry and teammate positions for one tick.

    Attributes:
        box: Monitored region around the goal
        goal_center: Point the goalie shoots at on a counter-attack
        teammates: Teammates that can receive a pass
    """
    box: TargetBox = field(default_factory=TargetBox)
    goal_center: Tuple[float, ...] = (0.0, -20.0)
    teammates: Tuple[Teammate, ...] = ()


@dataclass
class BallObservation:
    """
    One sample of the ball from the vision pipeline.

    When the derivatives are left as None they are estimated from the
    previous sample by finite differences.
    """
    position: NDArray[np.float64]
    t: float
    velocity: Optional[NDArray[np.float64]] = None
    acceleration: Optional[NDArray[np.float64]] = None
    jerk: Optional[NDArray[np.float64]] = None

    @property
    def has_derivatives(self) -> bool:
        return self.velocity is not None


@dataclass
class OpponentObservation:
    position: NDArray[np.float64]
    velocity: NDArray[np.float64]
    t: float


@dataclass
class GoalieObservation:
    """
    Attributes:
        position: Current goalie position
        max_speed: Top speed used for time-to-reach (m/s)
        at_intercept: External "reached the intercept point" signal;
            None lets the arbiter decide from the arrival tolerance
    """
    position: NDArray[np.float64]
    max_speed: float = 2.0
    at_intercept: Optional[bool] = None


class DecisionState(Enum):
    IDLE = "idle"
    TRACKING = "tracking"
    INTERCEPTING = "intercepting"
    SAFE_MODE = "safe_mode"
    COUNTER_ATTACK = "counter_attack"


@dataclass(frozen=True)
class HoldPosition:
    point: Tuple[float, ...]


@dataclass(frozen=True)
class MoveToIntercept:
    point: Tuple[float, ...]


@dataclass(frozen=True)
class PassToTeammate:
    teammate_id: int


@dataclass(frozen=True)
class ShootToGoal:
    pass


Action = Union[HoldPosition, MoveToIntercept, PassToTeammate, ShootToGoal]


def as_point(vector) -> Tuple[float, ...]:
    """Immutable copy of a vector, used in emitted actions."""
    return tuple(float(v) for v in vector)
