"""
Clearance checks for counter-attack paths.

The path from the goalie (P0) to a target (P2) is modelled as a quadratic
Bezier curve whose control point is the midpoint P1 = (P0 + P2) / 2:

    B(t) = (1 - t)^2 P0 + 2 (1 - t) t P1 + t^2 P2,    t in [0, 1]

The curve is sampled at a fixed resolution and a path is blocked when any
sample lies within the clearance radius of an obstacle (distance equal to
the radius counts as blocked).
"""
import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from .errors import InvalidObservation
from .states import as_vector

logger = logging.getLogger(__name__)

DEGENERATE_LENGTH = 1e-9


@dataclass(frozen=True)
class ClearanceResult:
    """
    Attributes:
        blocked: True if any sample is within the clearance radius
        min_distance: Closest sample-to-obstacle distance (inf if no obstacles)
        degenerate: True if P0 and P2 coincide
    """
    blocked: bool
    min_distance: float
    degenerate: bool = False

    def to_dict(self) -> dict:
        return {
            "blocked": self.blocked,
            "min_distance": None if np.isinf(self.min_distance) else round(self.min_distance, 4),
            "degenerate": self.degenerate,
        }


def quadratic_bezier(p0, p1, p2, t) -> NDArray[np.float64]:
    """
    Evaluate a quadratic Bezier curve at one or many parameters.

    Args:
        p0, p1, p2: Control points
        t: Scalar or 1D array of parameters

    Returns:
        Point of shape (d,) for scalar t, else (n, d)
    """
    p0, p1, p2 = as_vector(p0), as_vector(p1), as_vector(p2)
    t = np.asarray(t, dtype=np.float64)
    scalar = t.ndim == 0
    t = t.reshape(-1, 1)
    points = (1 - t) ** 2 * p0 + 2 * (1 - t) * t * p1 + t ** 2 * p2
    return points[0] if scalar else points


class PathClearanceChecker:
    """
    Tests a goalie-to-target path against a list of obstacle positions.
    """

    def __init__(self, clearance_radius: float = 1.0, samples: int = 30) -> None:
        """
        Args:
            clearance_radius: Minimum allowed obstacle distance (m)
            samples: Number of evenly spaced curve parameters, endpoints included
        """
        self.clearance_radius = clearance_radius
        self.samples = max(2, int(samples))

    def curve_points(self, p0, p2) -> NDArray[np.float64]:
        """
        Sample the path curve. The first and last rows are exactly P0 and P2.
        """
        p0, p2 = as_vector(p0), as_vector(p2)
        p1 = (p0 + p2) / 2
        t = np.linspace(0.0, 1.0, self.samples)
        return quadratic_bezier(p0, p1, p2, t)

    def evaluate(self, p0, p2, obstacles: Sequence) -> ClearanceResult:
        """
        Raises:
            InvalidObservation: If the endpoints or obstacles differ in dimension
        """
        p0, p2 = as_vector(p0), as_vector(p2)
        if p0.shape != p2.shape:
            raise InvalidObservation(f"path endpoints differ in shape: {p0.shape} vs {p2.shape}")
        degenerate = float(np.linalg.norm(p2 - p0)) < DEGENERATE_LENGTH

        if len(obstacles) == 0:
            return ClearanceResult(blocked=False, min_distance=np.inf, degenerate=degenerate)

        points = self.curve_points(p0, p2)
        obstacle_array = [as_vector(o) for o in obstacles]
        for obstacle in obstacle_array:
            if obstacle.shape != p0.shape:
                raise InvalidObservation(f"obstacle shape {obstacle.shape} does not match path shape {p0.shape}")
        obstacle_array = np.array(obstacle_array)

        # (samples, obstacles) distance matrix
        distances = np.linalg.norm(points[:, None, :] - obstacle_array[None, :, :], axis=2)
        min_distance = float(np.min(distances))
        blocked = bool(np.any(distances <= self.clearance_radius))

        if blocked:
            logger.debug("[INFO] Path %s -> %s blocked (min distance %.3f)",
                         p0.tolist(), p2.tolist(), min_distance)
        return ClearanceResult(blocked=blocked, min_distance=min_distance, degenerate=degenerate)

    def is_blocked(self, p0, p2, obstacles: Sequence) -> bool:
        return self.evaluate(p0, p2, obstacles).blocked
