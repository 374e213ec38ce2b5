from __future__ import annotations

from dataclasses import replace

import pytest

from config import build_default_config
from staffing.models import LimitMode, StaffingConfig


@pytest.fixture
def reference_config() -> StaffingConfig:
    return build_default_config()


@pytest.fixture
def headcount_config(reference_config) -> StaffingConfig:
    return replace(reference_config, limit_mode=LimitMode.HEADCOUNT_CAP)


@pytest.fixture
def small_config() -> StaffingConfig:
    return StaffingConfig(
        demand=(40.0, 60.0),
        language_split=(0.5, 0.5),
        full_time_capacity=20,
        part_time_capacity=10,
        rates=(30.0, 10.0),
        limited_shifts=frozenset({2}),
        max_eng_agents=1,
        shift_hours=2.0,
    )
