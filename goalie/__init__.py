"""
Decision core for a robotic goalie: ball prediction, intercept arbitration
and counter-attack path clearance.
"""

from .states import (
    KinematicState, OpponentState, GoalieState, TargetBox, TargetGeometry,
    Teammate, BallObservation, OpponentObservation, GoalieObservation,
    DecisionState, Action, HoldPosition, MoveToIntercept, PassToTeammate,
    ShootToGoal,
)
from .errors import InvalidObservation, DegenerateGeometry, ConfigurationOutOfRange, Diagnostic
from .config import DefenseConfig
from .kinematic_predictor import KinematicPredictor
from .opponent_model import OpponentModel, GoalieModel
from .path_clearance import PathClearanceChecker, ClearanceResult
from .trajectory import RobotTrajectory, TrajectoryInfo
from .trace import TraceRecord, TraceSink, NullSink, DecisionLogger
from .defense_arbiter import DefenseArbiter, should_intercept

__all__ = [
    "KinematicState",
    "OpponentState",
    "GoalieState",
    "TargetBox",
    "TargetGeometry",
    "Teammate",
    "BallObservation",
    "OpponentObservation",
    "GoalieObservation",
    "DecisionState",
    "Action",
    "HoldPosition",
    "MoveToIntercept",
    "PassToTeammate",
    "ShootToGoal",
    "InvalidObservation",
    "DegenerateGeometry",
    "ConfigurationOutOfRange",
    "Diagnostic",
    "DefenseConfig",
    "KinematicPredictor",
    "OpponentModel",
    "GoalieModel",
    "PathClearanceChecker",
    "ClearanceResult",
    "RobotTrajectory",
    "TrajectoryInfo",
    "TraceRecord",
    "TraceSink",
    "NullSink",
    "DecisionLogger",
    "DefenseArbiter",
    "should_intercept",
]
