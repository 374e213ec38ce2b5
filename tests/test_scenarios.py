from __future__ import annotations

from dataclasses import replace

import numpy as np
import pytest

from exceptions import OptimizationError, ValidationError
from staffing.models import LPResult
from staffing.scenarios import (
    ADJUSTED,
    BILINGUAL,
    SCENARIOS,
    STANDARD,
    adjusted_demand,
    bilingual_demand,
    optimise_scenario,
    program_for,
    run_scenarios,
)
from staffing.solver import PulpSolver, extract_solution, solve_program


class _CountingSolver:
    def __init__(self, fail_on=()):
        self.calls = 0
        self.fail_on = set(fail_on)
        self.inner = PulpSolver()

    def solve(self, objective, constraints, directions, rhs):
        self.calls += 1
        if self.calls in self.fail_on:
            return LPResult(status="Infeasible", values=None, objective=None)
        return self.inner.solve(objective, constraints, directions, rhs)


class _UncoveredSolver:
    """Claims optimality on the first solve but returns an all-zero vector."""

    def __init__(self):
        self.calls = 0
        self.inner = PulpSolver()

    def solve(self, objective, constraints, directions, rhs):
        self.calls += 1
        if self.calls == 1:
            return LPResult(status="Optimal", values=np.zeros(len(objective)), objective=0.0)
        return self.inner.solve(objective, constraints, directions, rhs)


class TestScenarioDemand:
    def test_adjusted_clips_limited_english_only(self, reference_config):
        eng, spa = adjusted_demand(reference_config)
        np.testing.assert_allclose(eng, [64, 136, 112, 24, 24, 56, 16])
        np.testing.assert_allclose(spa, reference_config.spanish_demand)

    def test_adjusted_keeps_demand_below_ceiling(self, reference_config):
        cfg = replace(reference_config, max_eng_agents=10)
        eng, _ = adjusted_demand(cfg)
        np.testing.assert_allclose(eng, cfg.english_demand)

    def test_bilingual_pools_demand(self, reference_config):
        eng, spa = bilingual_demand(reference_config)
        np.testing.assert_allclose(eng, [80, 170, 140, 190, 160, 70, 20])
        assert not spa.any()

    def test_scenario_order(self):
        assert [s.name for s in SCENARIOS] == ["Standard", "Adjusted", "Bilingual"]


class TestOptimiseScenario:
    def test_standard_reference(self, reference_config):
        sol = optimise_scenario(reference_config, STANDARD)
        assert sol.total_cost == pytest.approx(4850.0)
        # capped shifts 4 and 5
        for i in (3, 4):
            assert sol.ft_english[i] <= 1 + 1e-9
            assert sol.pt_english[i] == pytest.approx(reference_config.english_demand[i] / 24)
        assert sol.ft_english[0] == pytest.approx(64 / 24)
        assert sum(sol.pt_spanish) == pytest.approx(0.0, abs=1e-9)

    def test_adjusted_reference(self, reference_config):
        sol = optimise_scenario(reference_config, ADJUSTED)
        assert sol.total_cost == pytest.approx(3110.0)

    def test_bilingual_reference(self, reference_config):
        sol = optimise_scenario(reference_config, BILINGUAL)
        assert sol.total_cost == pytest.approx(5025.0)
        assert sum(sol.ft_spanish) + sum(sol.pt_spanish) == pytest.approx(0.0, abs=1e-9)

    def test_bilingual_equals_pooled_single_language_lp(self, reference_config):
        pooled = reference_config.english_demand + reference_config.spanish_demand
        program = program_for(reference_config, pooled, np.zeros_like(pooled))
        direct = extract_solution(solve_program(program), program.layout, reference_config, "pooled")
        assert optimise_scenario(reference_config, BILINGUAL).total_cost == pytest.approx(direct.total_cost)

    def test_demand_is_covered(self, reference_config):
        sol = optimise_scenario(reference_config, STANDARD)
        cap = 24
        for i, shift in enumerate(reference_config.shifts()):
            ft_coeff = reference_config.max_eng_agents if shift.number in reference_config.limited_shifts else cap
            assert sol.ft_english[i] * ft_coeff + sol.pt_english[i] * cap >= shift.english_demand - 1e-6
            assert sol.ft_spanish[i] * cap + sol.pt_spanish[i] * cap >= shift.spanish_demand - 1e-6

    def test_differing_capacities(self, small_config):
        sol = optimise_scenario(small_config, STANDARD)
        # part-time is cheaper per call everywhere
        assert sol.pt_english == pytest.approx((2.0, 3.0))
        assert sol.pt_spanish == pytest.approx((2.0, 3.0))
        assert sol.total_cost == pytest.approx(200.0)

    def test_headcount_cap_mode(self, headcount_config):
        sol = optimise_scenario(headcount_config, STANDARD)
        assert sol.ft_english[3] == pytest.approx(1.0)
        assert sol.ft_english[4] == pytest.approx(1.0)
        assert sol.pt_english[3] == pytest.approx((152 - 24) / 24)

    @pytest.mark.parametrize("shift", range(7))
    def test_cost_monotone_in_demand(self, reference_config, shift):
        base = optimise_scenario(reference_config, STANDARD).total_cost
        demand = list(reference_config.demand)
        demand[shift] += 25
        bumped = optimise_scenario(replace(reference_config, demand=tuple(demand)), STANDARD).total_cost
        assert base >= 0
        assert bumped >= base - 1e-6


class TestRunScenarios:
    def test_all_scenarios_solved(self, reference_config):
        outcomes = run_scenarios(reference_config)
        assert [o.scenario for o in outcomes] == ["Standard", "Adjusted", "Bilingual"]
        assert all(o.ok for o in outcomes)
        assert [o.total_cost for o in outcomes] == pytest.approx([4850.0, 3110.0, 5025.0])

    def test_validation_aborts_before_solving(self, reference_config):
        solver = _CountingSolver()
        bad = replace(reference_config, full_time_capacity=0)
        with pytest.raises(ValidationError):
            run_scenarios(bad, solver=solver)
        assert solver.calls == 0

    def test_failed_scenario_does_not_stop_others(self, reference_config):
        outcomes = run_scenarios(reference_config, solver=_CountingSolver(fail_on={2}))
        assert [o.ok for o in outcomes] == [True, False, True]
        failed = outcomes[1]
        assert failed.scenario == "Adjusted"
        assert isinstance(failed.error, OptimizationError)
        assert failed.error.scenario == "Adjusted"
        assert failed.total_cost is None


    def test_uncovered_optimal_vector_is_a_scenario_failure(self, reference_config):
        outcomes = run_scenarios(reference_config, solver=_UncoveredSolver())
        assert [o.ok for o in outcomes] == [False, True, True]
        err = outcomes[0].error
        assert isinstance(err, OptimizationError)
        assert err.status == "Infeasible solution"
        assert err.scenario == "Standard"
        assert "violated" in str(err)

    def test_optimise_scenario_rejects_uncovered_vector(self, reference_config):
        with pytest.raises(OptimizationError, match="Standard"):
            optimise_scenario(reference_config, STANDARD, _UncoveredSolver())
