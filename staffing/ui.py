from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from audit_log import audit, get_audit_logger
from cli_utils import ask_int, fmt_float, pause, print_header
from config import AUDIT_LOG_PATH, build_default_config
from exceptions import StaffingError
from staffing.analysis import scenario_summary, shift_table, solution_to_dataframe
from staffing.models import ScenarioOutcome, StaffingConfig
from staffing.report import format_failures, format_report, format_summary
from staffing.scenarios import run_scenarios


@dataclass
class StaffingContext:
    config: StaffingConfig
    outcomes: List[ScenarioOutcome] = field(default_factory=list)


def _run(ctx: StaffingContext) -> None:
    logger = get_audit_logger(AUDIT_LOG_PATH)
    audit(logger, "run", shifts=ctx.config.n_shifts, limit_mode=ctx.config.limit_mode)
    ctx.outcomes = run_scenarios(ctx.config, logger=logger)


def _pick_outcome(ctx: StaffingContext) -> ScenarioOutcome:
    print_header("Select scenario")
    for i, o in enumerate(ctx.outcomes, 1):
        print(f"{i}) {o.scenario}{'' if o.ok else ' (no solution)'}")
    idx = ask_int("Choose: ", default=1, valid=set(range(1, len(ctx.outcomes) + 1)))
    return ctx.outcomes[idx - 1]


def staffing_menu(config: Optional[StaffingConfig] = None) -> None:
    ctx = StaffingContext(config=config or build_default_config())

    while True:
        print_header("CALL-CENTRE STAFFING")
        print("1) Run / refresh optimisation")
        print("2) Show staffing by scenario and shift")
        print("3) Show staffing for one scenario")
        print("4) Show scenario summary + wage increase")
        print("5) Full report")
        print("0) Quit")

        c = ask_int("Choose: ", default=1, valid={0, 1, 2, 3, 4, 5})
        if c == 0:
            return

        if c == 1:
            try:
                _run(ctx)
            except StaffingError as e:
                print(f"\nOptimisation failed: {e}")
            else:
                print(f"\nSolved {sum(o.ok for o in ctx.outcomes)} of {len(ctx.outcomes)} scenarios.")
                for line in format_failures(ctx.outcomes):
                    print(f"  {line}")
            pause()
            continue

        if not ctx.outcomes:
            print("\nRun the optimisation first (option 1).")
            pause()
            continue

        if c == 2:
            print_header("Staffing by scenario and shift")
            print(shift_table(ctx.outcomes).to_string(index=False, float_format=fmt_float, na_rep="n/a"))

        elif c == 3:
            o = _pick_outcome(ctx)
            print_header(f"Staffing: {o.scenario}")
            if not o.ok:
                print(f"No solution: {o.error}")
            else:
                print(solution_to_dataframe(o.solution).to_string(float_format=fmt_float))
                print(f"\nTotal cost: ${o.solution.total_cost:,.2f}")

        elif c == 4:
            print_header("Scenario summary")
            print(format_summary(scenario_summary(ctx.outcomes)))

        elif c == 5:
            print(format_report(ctx.outcomes, ctx.config))

        pause()
