import numpy as np
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from goalie.errors import InvalidObservation
from goalie.path_clearance import PathClearanceChecker, quadratic_bezier


class TestQuadraticBezier:
    def test_endpoints_exact(self):
        """B(0) == P0 and B(1) == P2 exactly."""
        p0 = np.array([0.3, -7.1])
        p2 = np.array([-12.9, 4.7])
        p1 = (p0 + p2) / 2

        np.testing.assert_array_equal(quadratic_bezier(p0, p1, p2, 0.0), p0)
        np.testing.assert_array_equal(quadratic_bezier(p0, p1, p2, 1.0), p2)

    def test_midpoint_control_gives_straight_line(self):
        points = quadratic_bezier([0.0, 0.0], [5.0, 0.0], [10.0, 0.0], np.linspace(0, 1, 11))

        np.testing.assert_array_almost_equal(points[:, 1], np.zeros(11))
        np.testing.assert_array_almost_equal(points[:, 0], np.linspace(0, 10, 11))


class TestCurvePoints:
    @pytest.mark.parametrize("p0, p2", [
        ([0.0, 0.0], [10.0, 0.0]),
        ([1.25, -3.5], [-0.1, 22.2]),
        ([0.0, 0.0, 1.0], [4.0, -3.0, 0.5]),
    ])
    def test_sampled_endpoints_exact(self, p0, p2):
        checker = PathClearanceChecker(samples=25)
        points = checker.curve_points(p0, p2)

        assert points.shape == (25, len(p0))
        np.testing.assert_array_equal(points[0], p0)
        np.testing.assert_array_equal(points[-1], p2)

    def test_resolution_is_tunable(self):
        assert len(PathClearanceChecker(samples=50).curve_points([0, 0], [1, 1])) == 50

    def test_minimum_two_samples(self):
        assert len(PathClearanceChecker(samples=0).curve_points([0, 0], [1, 1])) == 2


class TestIsBlocked:
    @pytest.fixture
    def checker(self):
        return PathClearanceChecker(clearance_radius=1.0, samples=21)

    def test_obstacle_on_path(self, checker):
        """Obstacle at the curve midpoint blocks the path."""
        assert checker.is_blocked([0.0, 0.0], [10.0, 0.0], [[5.0, 0.0]]) is True

    def test_obstacle_exactly_at_radius_blocks(self, checker):
        result = checker.evaluate([0.0, 0.0], [10.0, 0.0], [[5.0, 1.0]])

        assert result.min_distance == 1.0
        assert result.blocked is True

    def test_obstacle_just_outside_radius(self, checker):
        assert checker.is_blocked([0.0, 0.0], [10.0, 0.0], [[5.0, 1.001]]) is False

    def test_no_obstacles(self, checker):
        result = checker.evaluate([0.0, 0.0], [10.0, 0.0], [])

        assert result.blocked is False
        assert result.min_distance == np.inf

    def test_any_obstacle_blocks(self, checker):
        obstacles = [[50.0, 50.0], [-3.0, 8.0], [10.0, 0.5]]

        assert checker.is_blocked([0.0, 0.0], [10.0, 0.0], obstacles) is True

    def test_obstacle_near_endpoint(self, checker):
        assert checker.is_blocked([0.0, 0.0], [10.0, 0.0], [[-0.5, 0.0]]) is True

    def test_degenerate_path_flagged(self, checker):
        result = checker.evaluate([2.0, 2.0], [2.0, 2.0], [[20.0, 0.0]])

        assert result.degenerate is True
        assert result.blocked is False

    def test_zero_radius_only_direct_hits(self):
        checker = PathClearanceChecker(clearance_radius=0.0, samples=21)

        assert checker.is_blocked([0.0, 0.0], [10.0, 0.0], [[5.0, 0.0]]) is True
        assert checker.is_blocked([0.0, 0.0], [10.0, 0.0], [[5.0, 0.01]]) is False

    def test_obstacle_dimension_mismatch_raises(self, checker):
        """A 3D obstacle is not silently cut down to the 2D path."""
        with pytest.raises(InvalidObservation):
            checker.evaluate([0.0, 0.0], [10.0, 0.0], [[5.0, 5.0, 0.0]])

    def test_endpoint_dimension_mismatch_raises(self, checker):
        with pytest.raises(InvalidObservation):
            checker.evaluate([0.0, 0.0, 0.0], [10.0, 0.0], [[20.0, 0.0, 0.0]])
