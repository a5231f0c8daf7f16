"""
Scenario arithmetic behind the slide text and charts.

Given one ICB's metrics and the model defaults (with the user's adoption
fraction), computes the savings / capacity / waiting-time figures of the
Savings slide, and localises the national series for the Activity slide.

Formulas follow the value-proposition spreadsheet:
  switched            = referrals × adoption
  baseline spend      = referrals × therapy cost per patient
  saving              = switched × (therapy cost − device cost)
  appointments freed  = switched × appointments per patient
  WTE released        = appointments freed ÷ clinical hours per WTE per year
  wait after          = max(0, baseline wait × (1 − adoption × elasticity))
"""

import math
from dataclasses import dataclass
from typing import Optional

# National mean sessions per completed course, 2021/22 to 2024/25.
# Not in the data file; taken from the deck's national chart.
NATIONAL_SESSIONS = [
    {"year": "2021/22", "sessions": 7.9},
    {"year": "2022/23", "sessions": 8.1},
    {"year": "2023/24", "sessions": 8.2},
    {"year": "2024/25", "sessions": 8.4},
]
NATIONAL_SESSIONS_LATEST = 8.4


def _value(record, key) -> Optional[float]:
    """record[key] as a float, or None when absent or NaN."""
    if not record:
        return None
    value = record.get(key)
    if value is None:
        return None
    try:
        value = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(value) else value


@dataclass
class Scenario:
    """Savings, capacity and wait impact for one ICB at one adoption level."""
    switched: float
    baseline_spend: float
    saving: float
    appointments_freed: float
    wte_released: float
    baseline_wait: float
    wait_after: float
    wait_reduction: float


def compute_scenario(icb: dict, model: dict) -> Scenario:
    """
    Evaluate the adoption scenario for one ICB.

    Args:
        icb: ICB record (annualised_referrals, median_wait_access_days).
        model: Defaults merged with the user's beam_adoption fraction.
    """
    referrals = _value(icb, "annualised_referrals") or 0.0
    adoption = model["beam_adoption"]
    therapy_cost = model["talking_therapies_cost_per_patient"]
    device_cost = model["beam_device_cost"]

    switched = referrals * adoption
    appointments_freed = switched * model["avg_appointments_per_patient"]

    baseline_wait = _value(icb, "median_wait_access_days") or 0.0
    wait_after = max(0.0, baseline_wait * (1 - adoption * model["wait_time_elasticity"]))

    return Scenario(
        switched=switched,
        baseline_spend=referrals * therapy_cost,
        saving=switched * (therapy_cost - device_cost),
        appointments_freed=appointments_freed,
        wte_released=appointments_freed / model["clinical_hours_per_wte_per_year"],
        baseline_wait=baseline_wait,
        wait_after=wait_after,
        wait_reduction=baseline_wait - wait_after,
    )


def localise_series(national_series: list[dict], icb: Optional[dict]) -> list[dict]:
    """Scale the national referrals/accessed series to one ICB.

    Only one quarter of local data exists (annualised), so the national
    shape is kept and scaled so the latest year matches the ICB's
    annualised values. A missing value scales its series to zero."""
    if not national_series:
        return []
    last = national_series[-1]

    local_ref = _value(icb, "annualised_referrals")
    local_acc = _value(icb, "annualised_accessing_services")
    share_ref = local_ref / last["referrals"] if local_ref is not None and last.get("referrals") else 0.0
    share_acc = local_acc / last["accessed"] if local_acc is not None and last.get("accessed") else 0.0

    return [
        {
            "year": d["year"],
            "referrals": d["referrals"] * share_ref,
            "accessed": d["accessed"] * share_acc,
        }
        for d in national_series
    ]


def localise_sessions(sessions_each: Optional[float]) -> list[dict]:
    """Scale the national sessions-per-course line so 2024/25 equals sessions_each."""
    factor = sessions_each / NATIONAL_SESSIONS_LATEST if sessions_each is not None else 1.0
    return [{"year": d["year"], "sessions": d["sessions"] * factor} for d in NATIONAL_SESSIONS]


def completion_rate(snapshot: dict) -> Optional[float]:
    """National completed ÷ accessed for 2024/25."""
    completed = _value(snapshot, "completed")
    accessed = _value(snapshot, "accessed")
    if completed is None or not accessed:
        return None
    return completed / accessed


def activity_snapshot(local_series: list[dict], icb: dict, snapshot: dict) -> dict:
    """Latest-year figures for the Activity slide.

    Completed courses are estimated from accessed services using the
    national completion rate."""
    last = local_series[-1] if local_series else {}
    accessed = last.get("accessed")
    rate = completion_rate(snapshot)
    return {
        "referrals": last.get("referrals"),
        "accessed": accessed,
        "completed": accessed * rate if accessed is not None and rate is not None else None,
        "sessions": _value(icb, "mean_sessions_per_course"),
        "recovery_rate": _value(icb, "recovery_rate"),
    }


def capacity_snapshot(icb: dict, snapshot: dict) -> dict:
    """Completed courses × sessions each = sessions per year, for one ICB.

    Falls back to the national average sessions when the ICB has none."""
    accessing = _value(icb, "annualised_accessing_services")
    rate = completion_rate(snapshot)
    completed = round(accessing * rate) if accessing is not None and rate is not None else None

    sessions_each = _value(icb, "mean_sessions_per_course")
    if sessions_each is None:
        sessions_each = _value(snapshot, "avg_sessions_per_course")

    total = completed * sessions_each if completed is not None and sessions_each is not None else None
    return {
        "completed": completed,
        "sessions_each": sessions_each,
        "total_sessions": total,
    }
