from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple

import numpy as np


class AgentType(Enum):
    FULL_TIME = "FT"
    PART_TIME = "PT"


class Language(Enum):
    ENGLISH = "English"
    SPANISH = "Spanish"


class LimitMode(Enum):
    """How the English full-time cap is applied in limited shifts.

    COVERAGE_SCALE replaces the FT-English coverage coefficient with the cap
    value, so the cap scales what one agent covers rather than how many agents
    are scheduled. HEADCOUNT_CAP keeps the capacity coefficient and adds an
    explicit ``FT-English <= cap`` row instead.
    """

    COVERAGE_SCALE = "coverage_scale"
    HEADCOUNT_CAP = "headcount_cap"


@dataclass(frozen=True)
class Shift:
    number: int
    english_demand: float
    spanish_demand: float


@dataclass(frozen=True)
class StaffingConfig:
    demand: Tuple[float, ...]
    language_split: Tuple[float, float]
    full_time_capacity: float
    part_time_capacity: float
    rates: Tuple[float, float]
    limited_shifts: FrozenSet[int] = frozenset()
    max_eng_agents: float = 1.0
    shift_hours: float = 4.0
    limit_mode: LimitMode = LimitMode.COVERAGE_SCALE

    @property
    def n_shifts(self) -> int:
        return len(self.demand)

    @property
    def english_demand(self) -> np.ndarray:
        return np.asarray(self.demand, dtype=float) * self.language_split[0]

    @property
    def spanish_demand(self) -> np.ndarray:
        return np.asarray(self.demand, dtype=float) * self.language_split[1]

    def shifts(self) -> List[Shift]:
        eng, spa = self.english_demand, self.spanish_demand
        return [Shift(i + 1, float(eng[i]), float(spa[i])) for i in range(self.n_shifts)]

    def rate(self, agent_type: AgentType) -> float:
        return float(self.rates[0] if agent_type is AgentType.FULL_TIME else self.rates[1])

    def capacity(self, agent_type: AgentType) -> float:
        if agent_type is AgentType.FULL_TIME:
            return float(self.full_time_capacity)
        return float(self.part_time_capacity)


@dataclass(frozen=True)
class LPResult:
    status: str
    values: Optional[np.ndarray]
    objective: Optional[float]


@dataclass(frozen=True)
class StaffingSolution:
    scenario: str
    ft_english: Tuple[float, ...]
    pt_english: Tuple[float, ...]
    ft_spanish: Tuple[float, ...]
    pt_spanish: Tuple[float, ...]
    shift_costs: Tuple[float, ...]
    total_cost: float

    @property
    def n_shifts(self) -> int:
        return len(self.ft_english)


@dataclass(frozen=True)
class ScenarioOutcome:
    scenario: str
    solution: Optional[StaffingSolution] = None
    error: Optional[Exception] = field(default=None, compare=False)

    @property
    def ok(self) -> bool:
        return self.solution is not None

    @property
    def total_cost(self) -> Optional[float]:
        return self.solution.total_cost if self.solution is not None else None
