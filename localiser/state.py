"""
Viewer state: the selected ICB and the adoption fraction.

AppState is immutable. The two input handlers (region pick / select box and
the adoption input) each return a new state; every page renders from the
current one. The Streamlit pages keep it in st.session_state and mirror it
into the URL query string (?icb=...&adoption=...).
"""

import math
from dataclasses import dataclass, replace
from typing import Optional

from localiser.data_loader import LocaliserData


@dataclass(frozen=True)
class AppState:
    selected_name: str
    adoption: float             # fraction in [0, 1]

    @property
    def adoption_percent(self) -> int:
        return int(round(self.adoption * 100))


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def initial_state(data: LocaliserData, icb_code: Optional[str] = None,
                  adoption_percent=None) -> AppState:
    """Starting state from the data defaults, overridden by URL parameters.

    Unknown codes and unparseable percentages fall back to the defaults."""
    icb = data.get_icb_by_code(icb_code) if icb_code else None
    name = icb["icb_name"] if icb else data.default_icb_name()

    state = AppState(selected_name=name, adoption=float(data.defaults.get("beam_adoption", 0.0)))
    if adoption_percent is not None:
        state = set_adoption_percent(state, adoption_percent)
    return state


def select_region(state: AppState, data: LocaliserData, code: str) -> AppState:
    """Handle a map pick: select the ICB with this code, if it exists."""
    icb = data.get_icb_by_code(code)
    if icb is None:
        return state
    return replace(state, selected_name=icb["icb_name"])


def select_name(state: AppState, data: LocaliserData, name: str) -> AppState:
    """Handle the select box."""
    if data.get_icb_by_name(name) is None:
        return state
    return replace(state, selected_name=name)


def set_adoption_percent(state: AppState, raw) -> AppState:
    """Handle the adoption input: 0-100, clamped; non-numbers are ignored."""
    try:
        pct = float(raw)
    except (TypeError, ValueError):
        return state
    if math.isnan(pct):
        return state
    return replace(state, adoption=round(clamp(pct, 0, 100)) / 100)
