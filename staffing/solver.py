from __future__ import annotations

import logging
from typing import Optional, Protocol, Sequence

import numpy as np
import pulp
from scipy.optimize import linprog

from exceptions import OptimizationError
from staffing.models import AgentType, Language, LPResult, StaffingConfig, StaffingSolution
from staffing.program import LinearProgram, VariableLayout

logger = logging.getLogger(__name__)

DIRECTIONS = (">=", "<=", "==")
FEASIBILITY_TOL = 1e-9


class Solver(Protocol):
    """Minimise ``objective @ x`` subject to row constraints with ``x >= 0``."""

    def solve(
        self,
        objective: np.ndarray,
        constraints: np.ndarray,
        directions: Sequence[str],
        rhs: np.ndarray,
    ) -> LPResult:
        ...


def get_solver(msg: bool = False):
    solver = pulp.HiGHS_CMD(msg=msg)
    if not solver.available():
        solver = pulp.PULP_CBC_CMD(msg=msg)
    return solver


def _check_shapes(objective: np.ndarray, constraints: np.ndarray, directions: Sequence[str], rhs: np.ndarray) -> None:
    m, n = constraints.shape
    if objective.shape != (n,) or rhs.shape != (m,) or len(directions) != m:
        raise ValueError(
            f"inconsistent LP shapes: objective {objective.shape}, constraints {constraints.shape}, "
            f"directions {len(directions)}, rhs {rhs.shape}"
        )
    unknown = set(directions) - set(DIRECTIONS)
    if unknown:
        raise ValueError(f"unknown constraint directions: {sorted(unknown)}")


def _empty_row_holds(direction: str, b: float) -> bool:
    if direction == ">=":
        return 0.0 >= b - FEASIBILITY_TOL
    if direction == "<=":
        return 0.0 <= b + FEASIBILITY_TOL
    return abs(b) <= FEASIBILITY_TOL


class PulpSolver:
    """PuLP backend; HiGHS when its binary is on PATH, otherwise bundled CBC."""

    def __init__(self, msg: bool = False, name: str = "Staffing_MinCost"):
        self.msg = msg
        self.name = name

    def solve(self, objective, constraints, directions, rhs) -> LPResult:
        c = np.asarray(objective, dtype=float)
        A = np.atleast_2d(np.asarray(constraints, dtype=float))
        b = np.asarray(rhs, dtype=float)
        _check_shapes(c, A, directions, b)

        model = pulp.LpProblem(self.name, pulp.LpMinimize)
        x = pulp.LpVariable.dicts("x", range(len(c)), lowBound=0, cat="Continuous")
        model += pulp.lpSum(float(c[j]) * x[j] for j in range(len(c)) if c[j] != 0)

        for i, (row, d) in enumerate(zip(A, directions)):
            terms = [float(a) * x[j] for j, a in enumerate(row) if a != 0]
            bound = float(b[i])
            if not terms:
                # a row with no variables is decided by its rhs alone
                if not _empty_row_holds(d, bound):
                    return LPResult(status="Infeasible", values=None, objective=None)
                continue
            expr = pulp.lpSum(terms)
            if d == ">=":
                model += (expr >= bound, f"Row_{i}")
            elif d == "<=":
                model += (expr <= bound, f"Row_{i}")
            else:
                model += (expr == bound, f"Row_{i}")

        status = pulp.LpStatus[model.solve(get_solver(msg=self.msg))]
        if status != "Optimal":
            return LPResult(status=status, values=None, objective=None)

        values = np.array([float(pulp.value(x[j]) or 0.0) for j in range(len(c))])
        return LPResult(status=status, values=values, objective=float(c @ values))


class LinprogSolver:
    """SciPy ``linprog`` backend (HiGHS)."""

    STATUS = {0: "Optimal", 1: "Not Solved", 2: "Infeasible", 3: "Unbounded", 4: "Undefined"}

    def __init__(self, method: str = "highs"):
        self.method = method

    def solve(self, objective, constraints, directions, rhs) -> LPResult:
        c = np.asarray(objective, dtype=float)
        A = np.atleast_2d(np.asarray(constraints, dtype=float))
        b = np.asarray(rhs, dtype=float)
        _check_shapes(c, A, directions, b)

        dirs = np.asarray(directions)
        # linprog takes A_ub @ x <= b_ub, so >= rows are negated
        ub = dirs != "=="
        sign = np.where(dirs[ub] == ">=", -1.0, 1.0)
        A_ub = A[ub] * sign[:, None] if ub.any() else None
        b_ub = b[ub] * sign if ub.any() else None
        A_eq = A[~ub] if (~ub).any() else None
        b_eq = b[~ub] if (~ub).any() else None

        res = linprog(c, A_ub=A_ub, b_ub=b_ub, A_eq=A_eq, b_eq=b_eq, bounds=(0, None), method=self.method)
        status = self.STATUS.get(res.status, "Undefined")
        if status != "Optimal":
            logger.debug("linprog status %s: %s", res.status, res.message)
            return LPResult(status=status, values=None, objective=None)
        values = np.clip(np.asarray(res.x, dtype=float), 0.0, None)
        return LPResult(status=status, values=values, objective=float(res.fun))


def solve_program(program: LinearProgram, solver: Optional[Solver] = None, *, scenario: Optional[str] = None) -> np.ndarray:
    """Solve *program* and return the optimal column vector.

    Raises OptimizationError for any non-optimal outcome, including
    infeasible and unbounded programs.
    """
    solver = solver or PulpSolver()
    result = solver.solve(program.objective, program.constraints, program.directions, program.rhs)
    if result.status != "Optimal" or result.values is None:
        raise OptimizationError(result.status, scenario=scenario)
    logger.debug("scenario=%s objective=%.4f", scenario, result.objective)
    return result.values


def extract_solution(values: np.ndarray, layout: VariableLayout, config: StaffingConfig, scenario: str) -> StaffingSolution:
    values = np.asarray(values, dtype=float)
    if values.shape != (layout.n_columns,):
        raise ValueError(f"solution vector has shape {values.shape}, expected ({layout.n_columns},)")

    def series(agent_type: AgentType, language: Language) -> np.ndarray:
        return values[layout.block(agent_type, language)]

    ft_eng = series(AgentType.FULL_TIME, Language.ENGLISH)
    pt_eng = series(AgentType.PART_TIME, Language.ENGLISH)
    ft_spa = series(AgentType.FULL_TIME, Language.SPANISH)
    pt_spa = series(AgentType.PART_TIME, Language.SPANISH)

    hours = float(config.shift_hours)
    ft_rate, pt_rate = config.rate(AgentType.FULL_TIME), config.rate(AgentType.PART_TIME)
    shift_costs = ((ft_eng + ft_spa) * ft_rate + (pt_eng + pt_spa) * pt_rate) * hours

    return StaffingSolution(
        scenario=scenario,
        ft_english=tuple(float(v) for v in ft_eng),
        pt_english=tuple(float(v) for v in pt_eng),
        ft_spanish=tuple(float(v) for v in ft_spa),
        pt_spanish=tuple(float(v) for v in pt_spa),
        shift_costs=tuple(float(v) for v in shift_costs),
        total_cost=float(shift_costs.sum()),
    )
