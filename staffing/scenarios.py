from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from audit_log import audit, audit_failure
from exceptions import OptimizationError
from staffing.analysis import assert_coverage
from staffing.models import ScenarioOutcome, StaffingConfig, StaffingSolution
from staffing.program import LinearProgram, build_program
from staffing.solver import Solver, extract_solution, solve_program
from staffing.validation import validate_config, validate_inputs

logger = logging.getLogger(__name__)

DemandPair = Tuple[np.ndarray, np.ndarray]


@dataclass(frozen=True)
class Scenario:
    name: str
    description: str
    demand: Callable[[StaffingConfig], DemandPair]


def standard_demand(config: StaffingConfig) -> DemandPair:
    return config.english_demand, config.spanish_demand


def adjusted_demand(config: StaffingConfig) -> DemandPair:
    """English demand in limited shifts clipped to what the capped FT staff can cover."""
    eng = config.english_demand.copy()
    ceiling = float(config.full_time_capacity) * float(config.max_eng_agents)
    for number in config.limited_shifts:
        eng[number - 1] = min(eng[number - 1], ceiling)
    return eng, config.spanish_demand


def bilingual_demand(config: StaffingConfig) -> DemandPair:
    """Every agent speaks both languages: demand pooled into the English rows."""
    pooled = config.english_demand + config.spanish_demand
    return pooled, np.zeros_like(pooled)


STANDARD = Scenario("Standard", "English/Spanish split staffing", standard_demand)
ADJUSTED = Scenario("Adjusted", "English demand in limited shifts clipped to capped capacity", adjusted_demand)
BILINGUAL = Scenario("Bilingual", "Pooled demand served by bilingual agents", bilingual_demand)

SCENARIOS: Tuple[Scenario, ...] = (STANDARD, ADJUSTED, BILINGUAL)


def program_for(config: StaffingConfig, english_demand, spanish_demand) -> LinearProgram:
    return build_program(
        english_demand,
        spanish_demand,
        config.full_time_capacity,
        config.part_time_capacity,
        config.rates,
        config.limited_shifts,
        config.max_eng_agents,
        limit_mode=config.limit_mode,
    )


def optimise_scenario(config: StaffingConfig, scenario: Scenario, solver: Optional[Solver] = None) -> StaffingSolution:
    eng, spa = scenario.demand(config)
    validate_inputs([eng, spa], [config.full_time_capacity, config.part_time_capacity])

    program = program_for(config, eng, spa)
    values = solve_program(program, solver, scenario=scenario.name)
    try:
        assert_coverage(program, values)
    except ValueError as e:
        raise OptimizationError("Infeasible solution", scenario=scenario.name, message=f"scenario '{scenario.name}': {e}") from e
    return extract_solution(values, program.layout, config, scenario.name)


def run_scenarios(
    config: StaffingConfig,
    scenarios: Sequence[Scenario] = SCENARIOS,
    solver: Optional[Solver] = None,
    logger: logging.Logger = logger,
) -> List[ScenarioOutcome]:
    """Optimise each scenario in order.

    A ValidationError aborts the run before anything is solved. An
    OptimizationError is recorded on that scenario's outcome and the
    remaining scenarios still run.
    """
    validate_config(config)

    outcomes: List[ScenarioOutcome] = []
    for scenario in scenarios:
        try:
            solution = optimise_scenario(config, scenario, solver)
        except OptimizationError as e:
            audit_failure(logger, "solve_failed", e, scenario=scenario.name, limit_mode=config.limit_mode)
            outcomes.append(ScenarioOutcome(scenario.name, error=e))
            continue
        audit(logger, "solve", scenario=scenario.name, status="Optimal", cost=solution.total_cost, limit_mode=config.limit_mode)
        outcomes.append(ScenarioOutcome(scenario.name, solution=solution))
    return outcomes
