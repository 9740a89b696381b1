import numpy as np
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from goalie.trajectory import RobotTrajectory


class TestRobotTrajectory:
    @pytest.fixture
    def trajectory(self):
        """Robot starts at (0,0), hits ball at (9,6), aiming for goal at (15,8)."""
        return RobotTrajectory((0.0, 0.0), (9.0, 6.0), (15.0, 8.0))

    def test_control_points_at_thirds(self, trajectory):
        np.testing.assert_array_almost_equal(trajectory.control_points, [
            [0.0, 0.0],
            [3.0, 2.0],
            [6.0, 4.0],
            [9.0, 6.0],
        ])

    def test_endpoints(self, trajectory):
        np.testing.assert_array_almost_equal(trajectory.position_at(0.0), [0.0, 0.0])
        np.testing.assert_array_almost_equal(trajectory.position_at(1.0), [9.0, 6.0])

    def test_straight_line_at_constant_speed(self, trajectory):
        for t in (0.25, 0.5, 0.75):
            np.testing.assert_array_almost_equal(trajectory.position_at(t), [9.0 * t, 6.0 * t])

    def test_delta_vector(self, trajectory):
        np.testing.assert_array_almost_equal(trajectory.delta_vector(0.5), [4.5, 3.0])

    def test_step_capped_at_end(self, trajectory):
        np.testing.assert_array_almost_equal(trajectory.step(100.0), [9.0, 6.0])

    def test_step_by_distance(self):
        trajectory = RobotTrajectory((0.0, 0.0), (3.0, 4.0), (0.0, -20.0))

        np.testing.assert_array_almost_equal(trajectory.step(2.5), [1.5, 2.0])

    def test_step_zero_length(self):
        trajectory = RobotTrajectory((1.0, 1.0), (1.0, 1.0), (0.0, -20.0))

        np.testing.assert_array_equal(trajectory.step(1.0), [1.0, 1.0])

    def test_info(self, trajectory):
        info = trajectory.info()

        assert info.start_pos == (0.0, 0.0)
        assert info.ball_pos == (9.0, 6.0)
        assert info.goal_pos == (15.0, 8.0)
        assert len(info.control_points) == 4
        assert info.control_points[1] == pytest.approx((3.0, 2.0))
