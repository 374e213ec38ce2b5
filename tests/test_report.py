from __future__ import annotations

import logging

import pytest

from audit_log import audit, format_audit, get_audit_logger
from staffing.models import LimitMode, LPResult
from staffing.report import format_report
from staffing.scenarios import run_scenarios
from staffing.solver import PulpSolver


class _FailBilingual:
    def __init__(self):
        self.calls = 0
        self.inner = PulpSolver()

    def solve(self, objective, constraints, directions, rhs):
        self.calls += 1
        if self.calls == 3:
            return LPResult(status="Infeasible", values=None, objective=None)
        return self.inner.solve(objective, constraints, directions, rhs)


def test_report_contains_tables(reference_config):
    text = format_report(run_scenarios(reference_config))
    assert "STAFFING BY SCENARIO AND SHIFT" in text
    assert "SCENARIO SUMMARY" in text
    for name in ("Standard", "Adjusted", "Bilingual"):
        assert name in text
    assert "Wage increase (%): -3.483%" in text
    assert "SCENARIOS WITHOUT A SOLUTION" not in text
    assert "CALL DEMAND BY SHIFT" not in text


def test_report_lists_demand_when_config_given(reference_config):
    text = format_report(run_scenarios(reference_config), reference_config)
    assert text.index("CALL DEMAND BY SHIFT") < text.index("STAFFING BY SCENARIO AND SHIFT")
    assert "152.00" in text
    assert "True" in text


def test_report_lists_failed_scenario(reference_config):
    outcomes = run_scenarios(reference_config, solver=_FailBilingual())
    with pytest.warns(RuntimeWarning):
        text = format_report(outcomes)
    assert "SCENARIOS WITHOUT A SOLUTION" in text
    assert "Bilingual: scenario 'Bilingual' could not be solved (status=Infeasible)" in text
    assert "Wage increase (%): n/a" in text


class TestAuditLog:
    def test_audit_line_format(self, tmp_path):
        path = tmp_path / "logs" / "staffing.log"
        logger = get_audit_logger(path, name="test.audit.format")
        audit(logger, "run", scenario="Standard", cost=1.0, details="manual")
        assert "INFO | action=run | scenario=Standard | cost=1.00 | details=manual" in path.read_text(encoding="utf-8")

    def test_fields_ordered_and_none_omitted(self):
        line = format_audit("solve", limit_mode=LimitMode.HEADCOUNT_CAP, cost=4850, status="Optimal", scenario=None)
        assert line == "action=solve | status=Optimal | cost=4850 | limit_mode=headcount_cap"

    def test_handler_not_duplicated(self, tmp_path):
        path = tmp_path / "staffing.log"
        a = get_audit_logger(path, name="test.audit.dedupe")
        b = get_audit_logger(path, name="test.audit.dedupe")
        assert a is b
        assert len([h for h in a.handlers if isinstance(h, logging.FileHandler)]) == 1

    def test_runner_writes_audit_trail(self, tmp_path, reference_config):
        path = tmp_path / "staffing.log"
        logger = get_audit_logger(path, name="test.audit.runner")
        run_scenarios(reference_config, logger=logger)
        text = path.read_text(encoding="utf-8")
        assert "action=solve | scenario=Standard | status=Optimal | cost=4850.00 | limit_mode=coverage_scale" in text
        assert "scenario=Bilingual" in text

    def test_runner_audits_failures_as_warnings(self, tmp_path, reference_config):
        path = tmp_path / "staffing.log"
        logger = get_audit_logger(path, name="test.audit.failure")
        run_scenarios(reference_config, solver=_FailBilingual(), logger=logger)
        assert "WARNING | action=solve_failed | scenario=Bilingual | status=Infeasible | limit_mode=coverage_scale" in path.read_text(
            encoding="utf-8"
        )
