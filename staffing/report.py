from __future__ import annotations

import math
from typing import List, Optional, Sequence

import pandas as pd

from cli_utils import fmt_float, header
from staffing.analysis import WAGE_ROW, demand_table, scenario_summary, shift_table
from staffing.models import ScenarioOutcome, StaffingConfig


def format_failures(outcomes: Sequence[ScenarioOutcome]) -> List[str]:
    return [f"{o.scenario}: {o.error}" for o in outcomes if not o.ok]


def format_summary(summary: pd.DataFrame) -> str:
    body = summary.drop(index=WAGE_ROW, columns=WAGE_ROW).to_string(float_format=fmt_float, na_rep="n/a")
    pct = summary.loc[WAGE_ROW, WAGE_ROW]
    wage = "n/a" if math.isnan(pct) else f"{pct:0.3f}%"
    return f"{body}\n\n{WAGE_ROW}: {wage}"


def format_report(outcomes: Sequence[ScenarioOutcome], config: Optional[StaffingConfig] = None) -> str:
    """Shift-level staffing table followed by the scenario summary.

    With *config*, the per-shift call demand and limited shifts are listed first.
    """
    blocks: List[str] = []
    if config is not None:
        blocks.append(header("CALL DEMAND BY SHIFT"))
        blocks.append(demand_table(config).to_string(float_format=fmt_float))

    blocks.append(header("STAFFING BY SCENARIO AND SHIFT"))
    blocks.append(shift_table(outcomes).to_string(index=False, float_format=fmt_float, na_rep="n/a"))

    failures = format_failures(outcomes)
    if failures:
        blocks.append(header("SCENARIOS WITHOUT A SOLUTION"))
        blocks.extend(failures)

    blocks.append(header("SCENARIO SUMMARY (mean agents per shift)"))
    blocks.append(format_summary(scenario_summary(outcomes)))
    return "\n".join(blocks)
