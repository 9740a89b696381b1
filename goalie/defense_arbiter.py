import dataclasses
import logging
import math
from typing import List, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from .config import DefenseConfig
from .errors import DegenerateGeometry, Diagnostic, InvalidObservation
from .kinematic_predictor import KinematicPredictor
from .opponent_model import GoalieModel, OpponentModel
from .path_clearance import PathClearanceChecker
from .states import (Action, DecisionState, GoalieObservation, HoldPosition,
                     MoveToIntercept, PassToTeammate, ShootToGoal,
                     TargetGeometry, as_point, as_vector)
from .trace import NullSink, TraceRecord, TraceSink

logger = logging.getLogger(__name__)

GEOMETRY_EPSILON = 1e-9


def should_intercept(t_enemy: float, t_goalie: float, threshold: float) -> bool:
    """
    Contest the ball only if the fastest rival needs strictly more than
    `threshold` times the goalie's time. A tie goes to safe mode.
    """
    return t_enemy > threshold * t_goalie


def check_dimension(name: str, vector, dimension: Optional[int]) -> None:
    """
    Raises:
        InvalidObservation: If vector does not have `dimension` components
    """
    if dimension is not None and np.shape(vector) != (dimension,):
        raise InvalidObservation(f"{name} shape {np.shape(vector)} does not match ball dimension {dimension}")


def guard_point(goal_center, ball_point, guard_distance: float, geometry: TargetGeometry
                ) -> Tuple[NDArray[np.float64], bool]:
    """
    Safe-mode holding point: guard_distance out from the goal center toward
    the ball (never past the ball), clamped into the target box.

    Returns:
        (point, degenerate) where degenerate means the ball sits on the goal
        center and the direction had to be clamped
    """
    goal = as_vector(goal_center)
    direction = as_vector(ball_point) - goal
    norm = float(np.linalg.norm(direction))
    degenerate = norm < GEOMETRY_EPSILON

    unit = direction / max(norm, GEOMETRY_EPSILON)
    point = goal + min(guard_distance, norm) * unit
    return geometry.box.clamp(point), degenerate


class DefenseArbiter:
    """
    Per-tick decision maker for the goalie.

    Each tick refreshes the ball predictor and the rival models from new
    observations, computes the intercept point, compares time-to-reach, picks
    a state and an action, and checks counter-attack paths before committing
    to an offensive action.
    """

    def __init__(
        self,
        geometry: TargetGeometry | None = None,
        config: DefenseConfig | None = None,
        sink: TraceSink | None = None
    ) -> None:
        """
        Args:
            geometry: Default goal geometry, overridable per tick
            config: Default tunables, overridable per tick
            sink: Receives one TraceRecord per tick
        """
        self.geometry = geometry or TargetGeometry()
        self.config = config or DefenseConfig()
        self.sink = sink or NullSink()

        self.predictor = KinematicPredictor(
            error_correction_factor=self.config.error_correction_factor,
            jerk_coefficient=self.config.jerk_coefficient
        )
        self.state = DecisionState.IDLE
        self.last_action: Optional[Action] = None
        self.diagnostics: List[Diagnostic] = []
        self.tick_count = 0

    def tick(
        self,
        ball,
        opponents: Sequence = (),
        geometry: TargetGeometry | None = None,
        config: DefenseConfig | None = None,
        goalie: GoalieObservation | None = None
    ) -> Tuple[Action, DecisionState]:
        """
        Run one control cycle.

        Args:
            ball: BallObservation (or any object with position/t and optional
                velocity/acceleration/jerk), or None if the ball was not seen
            opponents: OpponentObservation per rival, rebuilt every tick
            geometry: Goal geometry for this tick
            config: Tunables for this tick
            goalie: Our goalie's position and speed; None if unavailable

        Returns:
            (action, state) for this tick. Problems with the inputs are
            reported in self.diagnostics, never raised.
        """
        geometry = geometry or self.geometry
        config = config or self.config
        self.predictor.error_correction_factor = config.error_correction_factor
        self.predictor.jerk_coefficient = config.jerk_coefficient

        self.tick_count += 1
        diagnostics: List[Diagnostic] = []
        trace = TraceRecord(tick=self.tick_count, t=None, state=DecisionState.IDLE,
                            action=HoldPosition(as_point(geometry.goal_center)))

        # Predictor update
        fresh_sample = False
        if ball is not None:
            try:
                self._update_ball(ball)
                fresh_sample = True
            except InvalidObservation as e:
                logger.warning("[INFO] Dropped ball sample: %s", e)
                diagnostics.append(Diagnostic.from_error(e))

        # Opponent updates, held to the ball's dimension
        ball_state = self.predictor.state
        dimension = None if ball_state is None else ball_state.position.shape[0]
        rivals = self._build_opponents(opponents, diagnostics, dimension)
        goalie_model = self._build_goalie(goalie, diagnostics, dimension)

        if ball_state is None:
            return self._emit(trace, DecisionState.IDLE, self._hold_current(goalie_model, geometry), diagnostics)
        trace.t = ball_state.t
        geometry = self._fit_geometry(geometry, dimension, diagnostics)

        # Intercept point; the correction history only advances on a new sample
        predicted = self._predict(fresh_sample, config)
        trace.predicted_point = as_point(predicted)

        if not (geometry.box.contains(predicted) or geometry.box.contains(ball_state.position)):
            logger.debug("[INFO] Ball is outside the target box. Maintaining position.")
            return self._emit(trace, DecisionState.IDLE, self._hold_current(goalie_model, geometry), diagnostics)

        intercept_point = predicted
        trace.intercept_point = as_point(intercept_point)

        if goalie_model is None:
            hold = self._hold_guard(intercept_point, geometry, config, diagnostics)
            return self._emit(trace, DecisionState.TRACKING, hold, diagnostics)

        # Time-ratio comparison
        t_goalie = goalie_model.time_to_reach(intercept_point)
        t_enemy = min((r.time_to_reach(intercept_point) for r in rivals), default=math.inf)
        trace.t_goalie, trace.t_enemy = t_goalie, t_enemy
        logger.debug("[TIME] Goalie time to intercept: %.2fs", t_goalie)
        logger.debug("[TIME] Enemy time to intercept: %.2fs", t_enemy)

        if not should_intercept(t_enemy, t_goalie, config.intercept_threshold):
            logger.debug("[INFO] Enemy might reach the ball first. Entering safe mode.")
            hold = self._hold_guard(intercept_point, geometry, config, diagnostics)
            return self._emit(trace, DecisionState.SAFE_MODE, hold, diagnostics)

        if not self._goalie_arrived(goalie, goalie_model, intercept_point, config):
            logger.debug("[ACTION] Intercepting at %s", trace.intercept_point)
            return self._emit(trace, DecisionState.INTERCEPTING,
                              MoveToIntercept(as_point(intercept_point)), diagnostics)

        # Path clearance before committing to an offensive action
        state, action = self._counter_attack(goalie_model, rivals, geometry, config, trace, diagnostics)
        return self._emit(trace, state, action, diagnostics)

    def reset(self) -> None:
        """Force Idle and drop the ball state and correction history."""
        self.predictor.reset()
        self.state = DecisionState.IDLE
        self.last_action = None
        self.diagnostics = []

    def _update_ball(self, ball) -> None:
        velocity = getattr(ball, "velocity", None)
        if velocity is None:
            self.predictor.update_from_position(ball.position, ball.t)
            return

        zeros = np.zeros_like(as_vector(ball.position))
        acceleration = getattr(ball, "acceleration", None)
        jerk = getattr(ball, "jerk", None)
        self.predictor.update(
            ball.position,
            velocity,
            zeros if acceleration is None else acceleration,
            zeros if jerk is None else jerk,
            ball.t
        )

    def _predict(self, fresh_sample: bool, config: DefenseConfig) -> NDArray[np.float64]:
        """
        Commit a new prediction only for a newly accepted sample. A rejected or
        missing sample reuses the last committed prediction so that repeated
        ticks on the same data give the same intercept point.
        """
        if fresh_sample:
            return self.predictor.predict(config.prediction_horizon)
        last = self.predictor.last_prediction
        if last is not None:
            return last
        return self.predictor.predict(config.prediction_horizon, commit=False)

    def _build_opponents(self, observations: Sequence, diagnostics: List[Diagnostic],
                         dimension: Optional[int] = None) -> List[OpponentModel]:
        rivals = []
        for observation in observations:
            try:
                rival = OpponentModel.from_observation(observation)
                check_dimension("opponent", rival.position, dimension)
                rivals.append(rival)
            except InvalidObservation as e:
                logger.warning("[INFO] Dropped opponent sample: %s", e)
                diagnostics.append(Diagnostic.from_error(e))
        return rivals

    def _build_goalie(self, goalie: GoalieObservation | None, diagnostics: List[Diagnostic],
                      dimension: Optional[int] = None) -> Optional[GoalieModel]:
        if goalie is None:
            return None
        try:
            goalie_model = GoalieModel.from_observation(goalie)
            check_dimension("goalie", goalie_model.position, dimension)
            return goalie_model
        except InvalidObservation as e:
            logger.warning("[INFO] Dropped goalie sample: %s", e)
            diagnostics.append(Diagnostic.from_error(e))
            return None

    @staticmethod
    def _fit_geometry(geometry: TargetGeometry, dimension: int,
                      diagnostics: List[Diagnostic]) -> TargetGeometry:
        """
        Bring the goal center and teammates to the ball's dimension. The goal
        center is projected (truncated or zero-padded); teammates that do not
        match are dropped.
        """
        goal = as_vector(geometry.goal_center)
        if goal.shape != (dimension,):
            projected = np.zeros(dimension)
            n = min(dimension, goal.shape[0])
            projected[:n] = goal[:n]
            e = InvalidObservation(f"goal center {as_point(goal)} projected to {dimension}D")
            logger.warning("[INFO] %s", e)
            diagnostics.append(Diagnostic.from_error(e))
            goal = projected

        teammates = []
        for mate in geometry.teammates:
            try:
                check_dimension(f"teammate {mate.teammate_id}", mate.position, dimension)
                teammates.append(mate)
            except InvalidObservation as e:
                logger.warning("[INFO] Dropped teammate: %s", e)
                diagnostics.append(Diagnostic.from_error(e))

        if len(teammates) == len(geometry.teammates) and goal.shape == np.shape(geometry.goal_center):
            return geometry
        return dataclasses.replace(geometry, goal_center=as_point(goal), teammates=tuple(teammates))

    @staticmethod
    def _goalie_arrived(goalie: GoalieObservation, goalie_model: GoalieModel, intercept_point,
                        config: DefenseConfig) -> bool:
        if goalie.at_intercept is not None:
            return bool(goalie.at_intercept)
        return goalie_model.distance_to(intercept_point) <= config.arrival_tolerance

    @staticmethod
    def _hold_guard(ball_point, geometry: TargetGeometry, config: DefenseConfig,
                    diagnostics: List[Diagnostic]) -> HoldPosition:
        guard, degenerate = guard_point(geometry.goal_center, ball_point, config.guard_distance, geometry)
        if degenerate:
            diagnostics.append(Diagnostic.from_error(
                DegenerateGeometry("ball on goal center, guard direction clamped")
            ))
        return HoldPosition(as_point(guard))

    @staticmethod
    def _hold_current(goalie_model: Optional[GoalieModel], geometry: TargetGeometry) -> HoldPosition:
        if goalie_model is None:
            return HoldPosition(as_point(geometry.goal_center))
        return HoldPosition(as_point(goalie_model.position))

    def _counter_attack(
        self,
        goalie_model: GoalieModel,
        rivals: List[OpponentModel],
        geometry: TargetGeometry,
        config: DefenseConfig,
        trace: TraceRecord,
        diagnostics: List[Diagnostic]
    ) -> Tuple[DecisionState, Action]:
        """
        Shoot if the goal path is clear, else pass to the nearest teammate
        with a clear path, else hold where the goalie stands.
        """
        checker = PathClearanceChecker(config.clearance_radius, config.curve_samples)
        obstacles = [r.position for r in rivals]
        origin = goalie_model.position

        result = checker.evaluate(origin, geometry.goal_center, obstacles)
        trace.clearance["goal"] = result
        if result.degenerate:
            diagnostics.append(Diagnostic.from_error(DegenerateGeometry("goalie already on goal center")))
        if not result.blocked:
            logger.debug("[INFO] Path to goal is clear. Shooting towards goal.")
            return DecisionState.COUNTER_ATTACK, ShootToGoal()

        logger.debug("[INFO] Path to goal is blocked. Looking for a teammate.")
        for mate in sorted(geometry.teammates, key=lambda m: goalie_model.distance_to(m.position)):
            result = checker.evaluate(origin, mate.position, obstacles)
            trace.clearance[f"teammate_{mate.teammate_id}"] = result
            if not result.blocked:
                logger.debug("[INFO] Passing to teammate %s.", mate.teammate_id)
                return DecisionState.COUNTER_ATTACK, PassToTeammate(mate.teammate_id)

        logger.debug("[INFO] No clear path. Holding position.")
        return DecisionState.SAFE_MODE, HoldPosition(as_point(origin))

    def _emit(self, trace: TraceRecord, state: DecisionState, action: Action,
              diagnostics: List[Diagnostic]) -> Tuple[Action, DecisionState]:
        if state != self.state:
            logger.info("[INFO] %s -> %s", self.state.value, state.value)

        self.state = state
        self.last_action = action
        self.diagnostics = diagnostics

        trace.state = state
        trace.action = action
        trace.diagnostics = list(diagnostics)
        self.sink.record(trace)
        return action, state
