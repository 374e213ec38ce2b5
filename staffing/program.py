from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

import numpy as np

from staffing.models import AgentType, Language, LimitMode

# Column blocks, in objective/matrix order
COLUMN_BLOCKS: Tuple[Tuple[AgentType, Language], ...] = (
    (AgentType.FULL_TIME, Language.ENGLISH),
    (AgentType.FULL_TIME, Language.SPANISH),
    (AgentType.PART_TIME, Language.ENGLISH),
    (AgentType.PART_TIME, Language.SPANISH),
)


@dataclass(frozen=True)
class VariableLayout:
    """Maps (agent type, language, shift index) to a decision-variable column."""

    n_shifts: int

    @property
    def n_columns(self) -> int:
        return len(COLUMN_BLOCKS) * self.n_shifts

    def block(self, agent_type: AgentType, language: Language) -> slice:
        start = COLUMN_BLOCKS.index((agent_type, language)) * self.n_shifts
        return slice(start, start + self.n_shifts)

    def column(self, agent_type: AgentType, language: Language, shift: int) -> int:
        if not 0 <= shift < self.n_shifts:
            raise IndexError(f"shift index {shift} out of range for {self.n_shifts} shifts")
        return self.block(agent_type, language).start + shift


@dataclass(frozen=True)
class LinearProgram:
    objective: np.ndarray
    constraints: np.ndarray
    directions: Tuple[str, ...]
    rhs: np.ndarray
    layout: VariableLayout

    @property
    def shape(self) -> Tuple[int, int]:
        return self.constraints.shape


def demand_row(language: Language, shift: int, n_shifts: int) -> int:
    """Row index of the demand constraint for a language in a shift."""
    return shift if language is Language.ENGLISH else n_shifts + shift


def build_program(
    english_demand: Sequence[float],
    spanish_demand: Sequence[float],
    full_time_capacity: float,
    part_time_capacity: float,
    rates: Sequence[float],
    limited_shifts: Iterable[int],
    max_eng_agents: float,
    limit_mode: LimitMode = LimitMode.COVERAGE_SCALE,
) -> LinearProgram:
    """Build the min-cost covering LP for one demand scenario.

    Rows 0..N-1 cover English demand and rows N..2N-1 Spanish demand; each
    row is ``ft_capacity * FT + pt_capacity * PT >= demand``. Shift numbers in
    *limited_shifts* are 1-based. Under ``COVERAGE_SCALE`` the FT-English
    coefficient of a limited shift's English row becomes *max_eng_agents*;
    under ``HEADCOUNT_CAP`` one ``FT-English <= max_eng_agents`` row is
    appended per limited shift instead.
    """
    eng = np.asarray(english_demand, dtype=float)
    spa = np.asarray(spanish_demand, dtype=float)
    if eng.shape != spa.shape or eng.ndim != 1:
        raise ValueError(f"demand vectors must be 1-D and equal length, got {eng.shape} and {spa.shape}")

    n = len(eng)
    layout = VariableLayout(n)
    ft_rate, pt_rate = float(rates[0]), float(rates[1])
    capacity = {AgentType.FULL_TIME: float(full_time_capacity), AgentType.PART_TIME: float(part_time_capacity)}

    objective = np.zeros(layout.n_columns)
    for agent_type, language in COLUMN_BLOCKS:
        objective[layout.block(agent_type, language)] = ft_rate if agent_type is AgentType.FULL_TIME else pt_rate

    A = np.zeros((2 * n, layout.n_columns))
    for i in range(n):
        for language in Language:
            row = demand_row(language, i, n)
            for agent_type in AgentType:
                A[row, layout.column(agent_type, language, i)] = capacity[agent_type]

    rows: List[np.ndarray] = []
    extra_rhs: List[float] = []
    for number in sorted(limited_shifts):
        i = number - 1
        col = layout.column(AgentType.FULL_TIME, Language.ENGLISH, i)
        if limit_mode is LimitMode.COVERAGE_SCALE:
            A[demand_row(Language.ENGLISH, i, n), col] = float(max_eng_agents)
        else:
            cap_row = np.zeros(layout.n_columns)
            cap_row[col] = 1.0
            rows.append(cap_row)
            extra_rhs.append(float(max_eng_agents))

    directions = [">="] * (2 * n)
    rhs = np.concatenate([eng, spa])
    if rows:
        A = np.vstack([A] + rows)
        directions += ["<="] * len(rows)
        rhs = np.concatenate([rhs, np.asarray(extra_rhs)])

    return LinearProgram(objective=objective, constraints=A, directions=tuple(directions), rhs=rhs, layout=layout)
