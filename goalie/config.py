"""
Tunable constants for the goalie decision core.
"""
import logging
import math
import warnings
from dataclasses import dataclass, field, fields
from typing import Tuple

from .errors import ConfigurationOutOfRange

logger = logging.getLogger(__name__)

MIN_INTERCEPT_THRESHOLD = 1e-3


@dataclass(frozen=True)
class DefenseConfig:
    """
    Immutable tunables passed explicitly into the arbiter.

    Out-of-range values are clamped to the nearest valid bound (non-finite
    values fall back to the default) and reported
    with a ConfigurationOutOfRange warning.

    Attributes:
        intercept_threshold: Ratio in (0, 1]; intercept only if the fastest
            rival needs more than this fraction of the goalie's time
        error_correction_factor: Gain k of the prediction correction step
        jerk_coefficient: Weight of the jerk term in the prediction
        prediction_horizon: Look-ahead used for the intercept point (s)
        clearance_radius: Minimum path-to-obstacle distance (m)
        curve_samples: Number of samples along the clearance curve
        guard_distance: Safe-mode standoff from the goal center (m)
        arrival_tolerance: Distance at which the goalie counts as arrived (m)
    """
    intercept_threshold: float = 0.75
    error_correction_factor: float = 0.1
    jerk_coefficient: float = 0.375
    prediction_horizon: float = 0.5
    clearance_radius: float = 1.0
    curve_samples: int = 30
    guard_distance: float = 1.0
    arrival_tolerance: float = 0.25
    adjustments: Tuple[str, ...] = field(default=(), compare=False, repr=False)

    def __post_init__(self) -> None:
        adjustments = []
        defaults = {f.name: f.default for f in fields(self)}

        for name in ("intercept_threshold", "error_correction_factor", "jerk_coefficient",
                     "prediction_horizon", "clearance_radius", "guard_distance",
                     "arrival_tolerance", "curve_samples"):
            value = float(getattr(self, name))
            if not math.isfinite(value):
                adjustments.append(self._clamp(name, value, defaults[name]))
            else:
                object.__setattr__(self, name, value)

        threshold = self.intercept_threshold
        if threshold < MIN_INTERCEPT_THRESHOLD:
            adjustments.append(self._clamp("intercept_threshold", threshold, MIN_INTERCEPT_THRESHOLD))
        elif threshold > 1.0:
            adjustments.append(self._clamp("intercept_threshold", threshold, 1.0))

        for name in ("error_correction_factor", "prediction_horizon",
                     "clearance_radius", "guard_distance", "arrival_tolerance"):
            value = getattr(self, name)
            if value < 0.0:
                adjustments.append(self._clamp(name, value, 0.0))

        samples = int(self.curve_samples)
        if samples < 2:
            adjustments.append(self._clamp("curve_samples", samples, 2))
        else:
            object.__setattr__(self, "curve_samples", samples)

        object.__setattr__(self, "adjustments", tuple(adjustments))

    def _clamp(self, name: str, value, bound) -> str:
        message = f"{name}={value} out of range, clamped to {bound}"
        object.__setattr__(self, name, bound)
        logger.warning("[CONFIG] %s", message)
        warnings.warn(message, ConfigurationOutOfRange, stacklevel=4)
        return message
