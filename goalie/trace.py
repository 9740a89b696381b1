"""
Decision Trace - structured per-tick records from the defense arbiter.

The arbiter hands one TraceRecord per tick to an injected sink. Sinks decide
what to do with it:
- NullSink drops everything
- DecisionLogger keeps records, counts states and actions, prints a summary
  and saves the whole run to JSON
"""

import json
import math
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Tuple

from .errors import Diagnostic
from .path_clearance import ClearanceResult
from .states import (Action, DecisionState, HoldPosition, MoveToIntercept,
                     PassToTeammate, ShootToGoal)


def action_to_dict(action: Action) -> Dict:
    if isinstance(action, HoldPosition):
        return {"type": "hold_position", "point": list(action.point)}
    if isinstance(action, MoveToIntercept):
        return {"type": "move_to_intercept", "point": list(action.point)}
    if isinstance(action, PassToTeammate):
        return {"type": "pass_to_teammate", "teammate_id": action.teammate_id}
    if isinstance(action, ShootToGoal):
        return {"type": "shoot_to_goal"}
    raise TypeError(f"Unknown action: {action!r}")


def _finite_or_none(value: Optional[float]) -> Optional[float]:
    if value is None or math.isinf(value) or math.isnan(value):
        return None
    return round(value, 4)


@dataclass
class TraceRecord:
    """Everything the arbiter decided on one tick, and why."""
    tick: int
    t: Optional[float]
    state: DecisionState
    action: Action
    predicted_point: Optional[Tuple[float, ...]] = None
    intercept_point: Optional[Tuple[float, ...]] = None
    t_goalie: Optional[float] = None
    t_enemy: Optional[float] = None
    clearance: Dict[str, ClearanceResult] = field(default_factory=dict)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def to_dict(self) -> Dict:
        """Convert to a dictionary for JSON serialization."""
        return {
            "tick": self.tick,
            "t": self.t,
            "state": self.state.value,
            "action": action_to_dict(self.action),
            "predicted_point": list(self.predicted_point) if self.predicted_point else None,
            "intercept_point": list(self.intercept_point) if self.intercept_point else None,
            "times": {
                "goalie": _finite_or_none(self.t_goalie),
                "enemy": _finite_or_none(self.t_enemy),
            },
            "clearance": {target: result.to_dict() for target, result in self.clearance.items()},
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }


class TraceSink(Protocol):
    def record(self, trace: TraceRecord) -> None:
        ...


class NullSink:
    """Sink that discards every record."""

    def record(self, trace: TraceRecord) -> None:
        pass


class DecisionLogger:
    """
    Collects trace records for a run and saves them to JSON.
    """

    def __init__(self, log_dir: str = "logs", keep_records: bool = True):
        self.log_dir = Path(log_dir)
        self.keep_records = keep_records
        self.start_time = datetime.now()
        self.run_id = self.start_time.strftime("%Y%m%d_%H%M%S")

        self.records: List[TraceRecord] = []
        self.state_counts: Dict[str, int] = {state.value: 0 for state in DecisionState}
        self.action_counts: Dict[str, int] = {}
        self.diagnostic_counts: Dict[str, int] = {}
        self.ticks = 0

    def record(self, trace: TraceRecord) -> None:
        self.ticks += 1
        self.state_counts[trace.state.value] += 1

        action_type = action_to_dict(trace.action)["type"]
        self.action_counts[action_type] = self.action_counts.get(action_type, 0) + 1

        for diagnostic in trace.diagnostics:
            self.diagnostic_counts[diagnostic.kind] = self.diagnostic_counts.get(diagnostic.kind, 0) + 1

        if self.keep_records:
            self.records.append(trace)

    def to_dict(self) -> Dict:
        return {
            "run_info": {
                "run_id": self.run_id,
                "start_time": self.start_time.isoformat(),
                "ticks": self.ticks,
            },
            "summary": {
                "states": dict(self.state_counts),
                "actions": dict(self.action_counts),
                "diagnostics": dict(self.diagnostic_counts),
            },
            "records": [r.to_dict() for r in self.records],
        }

    def save_log(self) -> str:
        """
        Save the run to a JSON file.

        Returns:
            Path to saved log file
        """
        self.log_dir.mkdir(parents=True, exist_ok=True)
        log_file = self.log_dir / f"decisions_{self.run_id}.json"
        with open(log_file, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

        print(f"\n[LOGGER] Decision log saved: {log_file}")
        return str(log_file)

    def print_summary(self):
        """Print run summary to console."""
        print("\n" + "="*70)
        print("DECISION SUMMARY")
        print("="*70)
        print(f"Run ID: {self.run_id}")
        print(f"Ticks: {self.ticks}")
        print("="*70)

        print("\nSTATES:")
        for state, count in self.state_counts.items():
            share = count / self.ticks if self.ticks else 0.0
            print(f"  {state:<15} {count:>6} ({share:.1%})")

        print("\nACTIONS:")
        for action_type, count in sorted(self.action_counts.items()):
            print(f"  {action_type:<18} {count:>6}")

        if self.diagnostic_counts:
            print("\nDIAGNOSTICS:")
            for kind, count in sorted(self.diagnostic_counts.items()):
                print(f"  {kind:<25} {count:>6}")

        print("="*70 + "\n")
