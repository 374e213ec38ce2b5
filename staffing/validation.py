from __future__ import annotations

import math
from numbers import Integral, Real
from typing import Any, Iterable, Sequence

from exceptions import ValidationError
from staffing.models import StaffingConfig


def _is_number(v: Any) -> bool:
    # bool is a Real subclass; reject it explicitly
    if isinstance(v, bool) or not isinstance(v, Real):
        return False
    return math.isfinite(float(v))


def validate_demand(demand: Iterable[Any], name: str = "demand") -> None:
    try:
        values = list(demand)
    except TypeError:
        raise ValidationError(f"{name} must be a sequence of numbers, got {type(demand).__name__}") from None
    for i, v in enumerate(values):
        if not _is_number(v):
            raise ValidationError(f"{name}[{i}] is not numeric: {v!r}")
        if v < 0:
            raise ValidationError(f"{name}[{i}] is negative: {v!r}")


def validate_capacity(capacity: Any, name: str = "capacity") -> None:
    if not _is_number(capacity):
        raise ValidationError(f"{name} is not numeric: {capacity!r}")
    if capacity <= 0:
        raise ValidationError(f"{name} must be > 0, got {capacity!r}")


def validate_inputs(demands: Sequence[Iterable[Any]], capacities: Sequence[Any]) -> None:
    """Reject non-numeric or negative demand and non-positive capacity."""
    for k, demand in enumerate(demands):
        validate_demand(demand, name=f"demand vector {k}")
    for k, capacity in enumerate(capacities):
        validate_capacity(capacity, name=f"capacity {k}")


def validate_config(config: StaffingConfig) -> None:
    """Check a full configuration before any scenario is optimised."""
    validate_inputs([config.demand], [config.full_time_capacity, config.part_time_capacity])
    if len(tuple(config.demand)) == 0:
        raise ValidationError("demand must contain at least one shift")

    split = tuple(config.language_split)
    if len(split) != 2 or not all(_is_number(s) and s >= 0 for s in split):
        raise ValidationError(f"language_split must be two non-negative fractions, got {split!r}")
    if abs(sum(split) - 1.0) > 1e-9:
        raise ValidationError(f"language_split must sum to 1, got {sum(split):.6f}")

    rates = tuple(config.rates)
    if len(rates) != 2:
        raise ValidationError(f"rates must be (full_time, part_time), got {rates!r}")
    for label, r in zip(("full-time rate", "part-time rate"), rates):
        if not _is_number(r) or r <= 0:
            raise ValidationError(f"{label} must be a positive number, got {r!r}")

    if not _is_number(config.max_eng_agents) or config.max_eng_agents < 0:
        raise ValidationError(f"max_eng_agents must be a non-negative number, got {config.max_eng_agents!r}")
    if not _is_number(config.shift_hours) or config.shift_hours <= 0:
        raise ValidationError(f"shift_hours must be > 0, got {config.shift_hours!r}")

    bad = [
        s for s in config.limited_shifts
        if isinstance(s, bool) or not isinstance(s, Integral) or not 1 <= s <= config.n_shifts
    ]
    bad.sort(key=repr)
    if bad:
        raise ValidationError(f"limited_shifts outside 1..{config.n_shifts}: {bad}")
