import logging
import numpy as np
from numpy.typing import NDArray
from typing import Optional

from .errors import InvalidObservation
from .states import KinematicState, as_vector

logger = logging.getLogger(__name__)


def validate_vectors(*vectors: NDArray[np.float64]) -> None:
    """
    Raise InvalidObservation unless all vectors are finite 2D/3D arrays of one shape.
    """
    shape = vectors[0].shape
    if shape not in ((2,), (3,)):
        raise InvalidObservation(f"expected a 2D or 3D vector, got shape {shape}")
    for vector in vectors:
        if vector.shape != shape:
            raise InvalidObservation(f"mismatched vector shapes {shape} and {vector.shape}")
        if not np.all(np.isfinite(vector)):
            raise InvalidObservation(f"non-finite value in {vector.tolist()}")


def validate_timestamp(t: float, last_t: Optional[float]) -> None:
    if not np.isfinite(t):
        raise InvalidObservation(f"non-finite timestamp {t}")
    if last_t is not None and t <= last_t:
        raise InvalidObservation(f"stale sample at t={t} (last accepted t={last_t})")


class KinematicPredictor:
    """
    Tracks the ball's position, velocity, acceleration and jerk and predicts
    where it will be a short time ahead.
    """

    def __init__(
        self,
        error_correction_factor: float = 0.1,
        jerk_coefficient: float = 0.375
    ) -> None:
        """
        Args:
            error_correction_factor: Gain k applied to the change between
                consecutive predictions
            jerk_coefficient: Weight of the jerk term
        """
        self.error_correction_factor = error_correction_factor
        self.jerk_coefficient = jerk_coefficient
        self._state: Optional[KinematicState] = None
        self._last_prediction: Optional[NDArray[np.float64]] = None

    @property
    def state(self) -> Optional[KinematicState]:
        """Copy of the current state, or None before the first update."""
        if self._state is None:
            return None
        return self._state.copy()

    @property
    def last_prediction(self) -> Optional[NDArray[np.float64]]:
        if self._last_prediction is None:
            return None
        return self._last_prediction.copy()

    def update(self, position, velocity, acceleration, jerk, t: float) -> None:
        """
        Replace the stored state with a new observation.

        Raises:
            InvalidObservation: non-finite input, or a timestamp that is not
                newer than the stored one. The prior state is kept.
        """
        new_state = KinematicState(
            position=position,
            velocity=velocity,
            acceleration=acceleration,
            jerk=jerk,
            t=t
        )
        validate_vectors(new_state.position, new_state.velocity,
                         new_state.acceleration, new_state.jerk)
        validate_timestamp(new_state.t, self._state.t if self._state else None)

        self._state = new_state

    def update_from_position(self, position, t: float) -> None:
        """
        Update from a raw position sample, estimating the derivatives by
        backward differences against the stored state.
        """
        position = as_vector(position)
        validate_vectors(position)

        if self._state is None:
            zeros = np.zeros_like(position)
            self.update(position, zeros, zeros, zeros, t)
            return

        validate_timestamp(float(t), self._state.t)
        if position.shape != self._state.position.shape:
            raise InvalidObservation(
                f"mismatched vector shapes {self._state.position.shape} and {position.shape}"
            )

        dt = float(t) - self._state.t
        velocity = (position - self._state.position) / dt
        acceleration = (velocity - self._state.velocity) / dt
        jerk = (acceleration - self._state.acceleration) / dt

        self.update(position, velocity, acceleration, jerk, t)

    def predict(self, dt: float, commit: bool = True) -> NDArray[np.float64]:
        """
        Predict the position dt seconds after the last observation.

        Args:
            dt: Non-negative look-ahead in seconds
            commit: Record the result as the previous prediction for the
                next correction step

        Returns:
            Corrected predicted position (a new array)
        """
        if self._state is None:
            raise InvalidObservation("no observation to predict from")
        if not np.isfinite(dt) or dt < 0:
            raise InvalidObservation(f"look-ahead must be finite and non-negative, got {dt}")

        s = self._state
        raw = (s.position
               + s.velocity * dt
               + 0.5 * s.acceleration * dt ** 2
               + self.jerk_coefficient * s.jerk * dt ** 3)

        if self._last_prediction is None or self._last_prediction.shape != raw.shape:
            predicted = raw
        else:
            predicted = raw + self.error_correction_factor * (raw - self._last_prediction)

        if commit:
            self._last_prediction = predicted.copy()

        logger.debug("[TRAJECTORY] Predicted ball position in %.3fs: %s", dt, predicted.tolist())
        return predicted

    def reset(self) -> None:
        """Forget the state and the correction history."""
        self._state = None
        self._last_prediction = None
