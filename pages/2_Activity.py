"""
Activity page — localised activity trends for the selected ICB.

Sections:
  1. Referrals vs accessed services, 2021/22 to 2024/25, in millions: the
     national series scaled so the latest year matches the ICB
  2. Latest-year snapshot (referrals, accessed, completed, sessions, recovery)
  3. Capacity demand: completed courses × sessions each = sessions per year,
     with the sessions-per-course trend on the deck's 7.6-8.5 axis, widened
     by whole steps when the ICB's line falls outside it

Charts are rendered to inline SVG by localiser.charts.
"""

import streamlit as st

from localiser.charts import (
    CHART_HEIGHT, CHART_WIDTH, render_referrals_chart, render_sessions_chart, sessions_axis,
)
from localiser.formatting import MISSING, format_count, format_percent, format_short_number
from localiser.scenario import activity_snapshot, capacity_snapshot, localise_series, localise_sessions
from localiser.surface import SvgSurface
from viewer import get_data, selected_icb, sidebar

st.set_page_config(page_title="Activity — ICB Localiser", layout="wide")

data = get_data()
state = sidebar(data)
icb = selected_icb(data, state)

st.title("Activity")
st.caption(icb["icb_name"])

# ── Referrals vs accessed ─────────────────────────────────────────────────
series = localise_series(data.national_series, icb)
snap = activity_snapshot(series, icb, data.snapshot)

col_chart, col_snap = st.columns([3, 1])

with col_chart:
    st.subheader("Referrals and accessed services")
    chart = render_referrals_chart(
        SvgSurface(CHART_WIDTH, CHART_HEIGHT, label="Referrals and accessed services"), series,
    )
    st.markdown(chart.to_svg(), unsafe_allow_html=True)
    st.caption("National trend scaled to this ICB's annualised 2024/25 figures.")

with col_snap:
    st.subheader("2024/25")
    st.metric("Referrals", format_short_number(snap["referrals"]))
    st.metric("Accessed services", format_short_number(snap["accessed"]))
    st.metric("Completed treatment", format_short_number(snap["completed"]))
    st.metric(
        "Sessions per course",
        MISSING if snap["sessions"] is None else f"{snap['sessions']:.1f}",
    )
    st.metric("Recovery rate", format_percent(snap["recovery_rate"]))

st.divider()

# ── Capacity demand ───────────────────────────────────────────────────────
cap = capacity_snapshot(icb, data.snapshot)

st.subheader("Capacity demand")
col1, col2, col3 = st.columns(3)
col1.metric("Completed courses", format_count(cap["completed"]))
col2.metric(
    "Sessions each (avg)",
    MISSING if cap["sessions_each"] is None else f"× {cap['sessions_each']:.1f}",
)
col3.metric("Sessions / year", format_short_number(cap["total_sessions"]))

sessions = localise_sessions(cap["sessions_each"])
sessions_chart = render_sessions_chart(
    SvgSurface(CHART_WIDTH, CHART_HEIGHT, label="Average sessions per course"),
    sessions,
    *sessions_axis(sessions),
)
st.markdown(sessions_chart.to_svg(), unsafe_allow_html=True)
st.caption("Average sessions per completed course; national line scaled so 2024/25 matches this ICB.")
