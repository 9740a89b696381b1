import math
from typing import Optional

import numpy as np

from .errors import InvalidObservation
from .kinematic_predictor import validate_timestamp, validate_vectors
from .states import GoalieState, OpponentState, as_vector

SPEED_EPSILON = 1e-6


def time_to_reach(position, speed: float, target) -> float:
    """
    Straight-line travel time from position to target at constant speed.

    Returns +inf when the speed is effectively zero.
    """
    if speed < SPEED_EPSILON:
        return math.inf
    distance = float(np.linalg.norm(as_vector(target) - as_vector(position)))
    return distance / max(speed, SPEED_EPSILON)


class OpponentModel:
    """
    Tracks one rival player and estimates how fast it can get to a point.
    """

    def __init__(self, state: Optional[OpponentState] = None) -> None:
        self._state = None
        if state is not None:
            self.update(state.position, state.velocity, state.t)

    @classmethod
    def from_observation(cls, observation) -> "OpponentModel":
        model = cls()
        model.update(observation.position, observation.velocity, observation.t)
        return model

    @property
    def state(self) -> Optional[OpponentState]:
        if self._state is None:
            return None
        return OpponentState(self._state.position, self._state.velocity, self._state.t)

    @property
    def position(self):
        return self._require_state().position.copy()

    @property
    def speed(self) -> float:
        return self._require_state().speed

    def update(self, position, velocity, t: float) -> None:
        """
        Replace the rival's state. Stale or non-finite samples raise
        InvalidObservation and leave the state unchanged.
        """
        new_state = OpponentState(position=position, velocity=velocity, t=t)
        validate_vectors(new_state.position, new_state.velocity)
        validate_timestamp(new_state.t, self._state.t if self._state else None)
        self._state = new_state

    def time_to_reach(self, target) -> float:
        state = self._require_state()
        return time_to_reach(state.position, state.speed, target)

    def _require_state(self) -> OpponentState:
        if self._state is None:
            raise InvalidObservation("no observation of this opponent yet")
        return self._state


class GoalieModel:
    """
    Our goalie: moves in a straight line at its top speed.
    """

    def __init__(self, state: GoalieState) -> None:
        validate_vectors(state.position)
        if not np.isfinite(state.max_speed) or state.max_speed < 0:
            raise InvalidObservation(f"goalie speed must be finite and non-negative, got {state.max_speed}")
        self.state = state

    @classmethod
    def from_observation(cls, observation) -> "GoalieModel":
        return cls(GoalieState(position=observation.position, max_speed=observation.max_speed))

    @property
    def position(self):
        return self.state.position.copy()

    def time_to_reach(self, target) -> float:
        return time_to_reach(self.state.position, self.state.max_speed, target)

    def distance_to(self, target) -> float:
        return float(np.linalg.norm(as_vector(target) - self.state.position))
