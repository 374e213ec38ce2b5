from __future__ import annotations
from pathlib import Path

from staffing.models import StaffingConfig

BASE_DIR = Path(__file__).resolve().parent

# Reference call-centre instance (seven shifts)
SHIFT_DEMAND = (80, 170, 140, 190, 160, 70, 20)
LANGUAGE_SPLIT = (0.8, 0.2)  # English, Spanish
FULL_TIME_CAPACITY = 24
PART_TIME_CAPACITY = 24
HOURLY_RATES = (30.0, 45.0)  # full-time, part-time
LIMITED_SHIFTS = frozenset({4, 5})  # 1-based shift numbers
MAX_ENG_AGENTS = 1
SHIFT_HOURS = 4.0

# Audit trail for optimisation runs
LOG_DIR = BASE_DIR / "logs"
AUDIT_LOG_PATH = LOG_DIR / "staffing.log"


def build_default_config() -> StaffingConfig:
    return StaffingConfig(
        demand=tuple(float(d) for d in SHIFT_DEMAND),
        language_split=LANGUAGE_SPLIT,
        full_time_capacity=FULL_TIME_CAPACITY,
        part_time_capacity=PART_TIME_CAPACITY,
        rates=HOURLY_RATES,
        limited_shifts=LIMITED_SHIFTS,
        max_eng_agents=MAX_ENG_AGENTS,
        shift_hours=SHIFT_HOURS,
    )
