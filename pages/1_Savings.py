"""
Savings page — the adoption scenario for the selected ICB.

The user sets the BEAM adoption rate in the sidebar. The page shows:
  1. The challenge: annual referrals, completed treatments, median wait
  2. The opportunity at that adoption rate: saving, appointments freed,
     clinical WTE released, wait reduction
  3. The wait before and after, side by side

Data flow: LocaliserData → AppState → scenario.compute_scenario() → metrics
"""

import streamlit as st

from localiser.formatting import (
    format_count, format_currency_short, format_days, format_short_number,
)
from localiser.scenario import compute_scenario
from viewer import get_data, selected_icb, sidebar

st.set_page_config(page_title="Savings — ICB Localiser", layout="wide")

data = get_data()
state = sidebar(data)
icb = selected_icb(data, state)

st.title("Savings and Capacity")
st.caption(f"{icb['icb_name']} at {state.adoption_percent}% BEAM adoption")

# ── The challenge ─────────────────────────────────────────────────────────
st.subheader("The challenge")
col1, col2, col3, col4 = st.columns(4)
col1.metric("Annual referrals", format_count(icb["annualised_referrals"]))
col2.metric("Accessing services", format_count(icb["annualised_accessing_services"]))
col3.metric("Median wait to access", format_days(icb["median_wait_access_days"]))
col4.metric("Access standards", "75% / 95%", help="Seen within 6 / 18 weeks")

st.divider()

# ── The opportunity ───────────────────────────────────────────────────────
model = {**data.defaults, "beam_adoption": state.adoption}
s = compute_scenario(icb, model)

st.subheader("The opportunity")
col1, col2, col3, col4 = st.columns(4)
col1.metric("Annual saving", format_currency_short(s.saving))
col2.metric("Appointments freed", format_short_number(s.appointments_freed))
col3.metric("Clinical WTE released", format_count(s.wte_released))
col4.metric("Wait reduction", format_days(s.wait_reduction, decimals=1))

st.divider()

# ── Waiting times ─────────────────────────────────────────────────────────
st.subheader("Selected ICB median wait (Q2 2025/26)")
col1, col2 = st.columns(2)
col1.metric("Today", format_days(s.baseline_wait))
col2.metric(
    f"With {state.adoption_percent}% adoption",
    format_days(s.wait_after, decimals=1),
    delta=f"-{s.wait_reduction:.1f} days" if s.wait_reduction else None,
    delta_color="inverse",
)

with st.expander("How are these calculated?"):
    st.markdown(
        f"""
        - **Switched patients** = referrals × adoption = {format_count(s.switched)}
        - **Saving** = switched × (talking therapies cost £{data.defaults['talking_therapies_cost_per_patient']:,}
          − BEAM device cost £{data.defaults['beam_device_cost']:,})
        - **Appointments freed** = switched × {data.defaults['avg_appointments_per_patient']} appointments per patient
        - **WTE released** = appointments freed ÷ {data.defaults['clinical_hours_per_wte_per_year']:,} clinical hours per WTE per year
        - **Wait after** = wait × (1 − adoption × {data.defaults['wait_time_elasticity']} elasticity), never below zero
        - Baseline spend at 0% adoption: {format_currency_short(s.baseline_spend)}
        """
    )
