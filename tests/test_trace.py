import json
import math

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from goalie.errors import Diagnostic
from goalie.path_clearance import ClearanceResult
from goalie.states import DecisionState, HoldPosition, MoveToIntercept, PassToTeammate
from goalie.trace import DecisionLogger, NullSink, TraceRecord, action_to_dict


def make_record(tick=1, state=DecisionState.INTERCEPTING, action=None):
    return TraceRecord(
        tick=tick,
        t=0.1 * tick,
        state=state,
        action=action or MoveToIntercept((1.0, 2.0)),
        predicted_point=(1.0, 2.0),
        intercept_point=(1.0, 2.0),
        t_goalie=1.5,
        t_enemy=math.inf,
        clearance={"goal": ClearanceResult(blocked=True, min_distance=0.25)},
        diagnostics=[Diagnostic("InvalidObservation", "stale sample")],
    )


class TestTraceRecord:
    def test_to_dict(self):
        data = make_record().to_dict()

        assert data["state"] == "intercepting"
        assert data["action"] == {"type": "move_to_intercept", "point": [1.0, 2.0]}
        assert data["times"] == {"goalie": 1.5, "enemy": None}
        assert data["clearance"]["goal"]["blocked"] is True
        assert data["diagnostics"] == [{"kind": "InvalidObservation", "message": "stale sample"}]

    def test_json_serializable(self):
        json.dumps(make_record().to_dict())

    def test_action_types(self):
        assert action_to_dict(PassToTeammate(4)) == {"type": "pass_to_teammate", "teammate_id": 4}
        assert action_to_dict(HoldPosition((0.0, -19.0)))["type"] == "hold_position"


class TestSinks:
    def test_null_sink(self):
        NullSink().record(make_record())

    def test_logger_counts(self, tmp_path):
        logger = DecisionLogger(log_dir=str(tmp_path))
        logger.record(make_record(1))
        logger.record(make_record(2, DecisionState.SAFE_MODE, HoldPosition((0.0, -19.0))))

        assert logger.ticks == 2
        assert logger.state_counts["intercepting"] == 1
        assert logger.state_counts["safe_mode"] == 1
        assert logger.state_counts["idle"] == 0
        assert logger.action_counts == {"move_to_intercept": 1, "hold_position": 1}
        assert logger.diagnostic_counts == {"InvalidObservation": 2}

    def test_logger_without_records(self, tmp_path):
        logger = DecisionLogger(log_dir=str(tmp_path), keep_records=False)
        logger.record(make_record())

        assert logger.ticks == 1
        assert logger.records == []

    def test_save_log(self, tmp_path):
        logger = DecisionLogger(log_dir=str(tmp_path / "runs"))
        logger.record(make_record())

        path = logger.save_log()

        with open(path) as f:
            data = json.load(f)
        assert data["run_info"]["ticks"] == 1
        assert data["summary"]["actions"] == {"move_to_intercept": 1}
        assert len(data["records"]) == 1

    def test_print_summary(self, tmp_path, capsys):
        logger = DecisionLogger(log_dir=str(tmp_path))
        logger.record(make_record())

        logger.print_summary()

        assert "DECISION SUMMARY" in capsys.readouterr().out
