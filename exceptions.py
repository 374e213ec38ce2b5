from __future__ import annotations

from typing import Optional


class StaffingError(Exception):
    """Base class for errors raised by the staffing engine."""


class ValidationError(StaffingError, ValueError):
    """Demand, capacity or configuration input failed a precondition check."""


class OptimizationError(StaffingError, RuntimeError):
    """The LP for a scenario could not be solved to optimality."""

    def __init__(self, status: str, scenario: Optional[str] = None, message: Optional[str] = None):
        self.status = status
        self.scenario = scenario
        where = f"scenario '{scenario}'" if scenario else "linear program"
        super().__init__(message or f"{where} could not be solved (status={status})")
