"""
Error taxonomy for the decision core.

None of these stop the control loop: the arbiter catches observation errors,
reports them as diagnostics and keeps producing actions.
"""
from dataclasses import dataclass


class InvalidObservation(ValueError):
    """Non-finite, malformed, stale or out-of-order sample."""


class DegenerateGeometry(ValueError):
    """Zero-length direction vector."""


class ConfigurationOutOfRange(UserWarning):
    """A tunable was outside its valid range and has been clamped."""


@dataclass(frozen=True)
class Diagnostic:
    kind: str
    message: str

    @classmethod
    def from_error(cls, error: Exception) -> "Diagnostic":
        return cls(kind=type(error).__name__, message=str(error))

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}
