from __future__ import annotations

import logging
import math
import warnings
from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from staffing.models import ScenarioOutcome, StaffingConfig, StaffingSolution
from staffing.program import LinearProgram

logger = logging.getLogger(__name__)

COUNT_COLUMNS = ["FT English", "PT English", "FT Spanish", "PT Spanish"]
COST_COLUMN = "Total cost"
WAGE_ROW = "Wage increase (%)"


def solution_to_dataframe(solution: StaffingSolution) -> pd.DataFrame:
    df = pd.DataFrame(
        {
            "FT English": solution.ft_english,
            "PT English": solution.pt_english,
            "FT Spanish": solution.ft_spanish,
            "PT Spanish": solution.pt_spanish,
            "Cost": solution.shift_costs,
        },
        index=pd.RangeIndex(1, solution.n_shifts + 1, name="Shift"),
    )
    return df


def demand_table(config: StaffingConfig) -> pd.DataFrame:
    rows = [
        {"Shift": s.number, "English": s.english_demand, "Spanish": s.spanish_demand, "Limited": s.number in config.limited_shifts}
        for s in config.shifts()
    ]
    return pd.DataFrame(rows).set_index("Shift")


def shift_table(outcomes: Sequence[ScenarioOutcome], n_shifts: Optional[int] = None) -> pd.DataFrame:
    """Scenario-by-shift agent counts; failed scenarios get NaN rows."""
    if n_shifts is None:
        n_shifts = max((o.solution.n_shifts for o in outcomes if o.ok), default=0)

    frames: List[pd.DataFrame] = []
    for o in outcomes:
        if o.ok:
            df = solution_to_dataframe(o.solution).reset_index()
        else:
            df = pd.DataFrame(np.nan, index=range(n_shifts), columns=COUNT_COLUMNS + ["Cost"])
            df.insert(0, "Shift", range(1, n_shifts + 1))
        df.insert(0, "Scenario", o.scenario)
        frames.append(df)

    if not frames:
        return pd.DataFrame(columns=["Scenario", "Shift"] + COUNT_COLUMNS + ["Cost"])
    return pd.concat(frames, ignore_index=True)


def wage_increase_pct(standard_cost: Optional[float], bilingual_cost: Optional[float]) -> float:
    """Largest wage premium (%) bilingual agents could be paid before they cost more than split staffing."""
    unavailable = (
        standard_cost is None
        or bilingual_cost is None
        or math.isnan(standard_cost)
        or math.isnan(bilingual_cost)
    )
    if unavailable or bilingual_cost == 0:
        msg = f"wage increase undefined (standard={standard_cost}, bilingual={bilingual_cost})"
        logger.warning(msg)
        warnings.warn(msg, RuntimeWarning, stacklevel=2)
        return float("nan")
    return (standard_cost - bilingual_cost) / bilingual_cost * 100.0


def scenario_summary(
    outcomes: Sequence[ScenarioOutcome],
    standard: str = "Standard",
    bilingual: str = "Bilingual",
) -> pd.DataFrame:
    """Per-scenario mean agent counts and total cost, plus a trailing wage-increase row."""
    shifts = shift_table(outcomes)
    order = [o.scenario for o in outcomes]
    means = shifts.groupby("Scenario", sort=False)[COUNT_COLUMNS].mean().reindex(order)

    costs: Dict[str, float] = {o.scenario: (o.total_cost if o.ok else np.nan) for o in outcomes}
    means[COST_COLUMN] = [costs[name] for name in means.index]
    means[WAGE_ROW] = np.nan

    pct = wage_increase_pct(costs.get(standard), costs.get(bilingual))
    means.loc[WAGE_ROW] = np.nan
    means.loc[WAGE_ROW, WAGE_ROW] = pct
    means.index.name = "Scenario"
    return means


def assert_coverage(program: LinearProgram, values: np.ndarray, tol: float = 1e-6) -> None:
    lhs = program.constraints @ np.asarray(values, dtype=float)
    for i, (d, got, need) in enumerate(zip(program.directions, lhs, program.rhs)):
        slack = tol * max(1.0, abs(need))
        if d == ">=":
            ok = got >= need - slack
        elif d == "<=":
            ok = got <= need + slack
        else:
            ok = abs(got - need) <= slack
        if not ok:
            raise ValueError(f"Constraint row {i} violated: {got:.6f} {d} {need:.6f}")
