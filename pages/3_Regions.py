"""
Regions page — every ICB side by side, plus a data coverage check.

Sections:
  1. Median wait to access by ICB (Plotly bar chart), selected ICB in brand
     blue, the rest in the map's default grey
  2. Table of per-ICB metrics
  3. Coverage: ICBs with no boundary (not on the map) and boundaries with
     no data (drawn but not pickable), plus features dropped at load time
"""

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from localiser.formatting import MISSING, format_count, format_percent
from localiser.theme import BRAND_BLUE, MAP_DEFAULT_FILL
from viewer import get_data, sidebar

st.set_page_config(page_title="Regions — ICB Localiser", layout="wide")

data = get_data()
state = sidebar(data)

st.title("Regions")
st.caption("All ICBs in the data set")

# ── Wait comparison ───────────────────────────────────────────────────────
icbs = data.icbs.sort_values("median_wait_access_days", ascending=True)

fig = go.Figure(go.Bar(
    x=icbs["median_wait_access_days"],
    y=icbs["icb_name"],
    orientation="h",
    marker_color=[
        BRAND_BLUE if name == state.selected_name else MAP_DEFAULT_FILL
        for name in icbs["icb_name"]
    ],
    hovertemplate="%{y}: %{x:.0f} days<extra></extra>",
))
fig.update_layout(
    height=max(300, 40 * len(icbs)),
    margin=dict(l=20, r=20, t=30, b=20),
    xaxis_title="Median wait to access (days)",
)
st.plotly_chart(fig, use_container_width=True)

st.divider()

# ── Table ─────────────────────────────────────────────────────────────────
rows = []
for _, r in data.icbs.sort_values("icb_name").iterrows():
    rows.append({
        "ICB": r["icb_name"],
        "Code": r["icb23cd"],
        "Referrals": format_count(r["annualised_referrals"]),
        "Accessing": format_count(r["annualised_accessing_services"]),
        "Wait (days)": format_count(r["median_wait_access_days"]),
        "Recovery": format_percent(r["recovery_rate"]),
        "Sessions/course": MISSING if pd.isna(r["mean_sessions_per_course"]) else f"{r['mean_sessions_per_course']:.1f}",
    })
st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)

# ── Coverage ──────────────────────────────────────────────────────────────
st.subheader("Data coverage")
report = data.join_report()

if not any(report.values()) and not data.boundaries.skipped:
    st.success("Every ICB has both data and a boundary.")

if report["missing_boundary"]:
    names = [data.get_icb_by_code(c)["icb_name"] for c in report["missing_boundary"]]
    st.warning("Not on the map (no boundary): " + ", ".join(names))

if report["missing_data"]:
    names = [f.name for f in data.boundaries if f.code in report["missing_data"]]
    st.warning("On the map but not selectable (no data): " + ", ".join(names))

if data.boundaries.skipped:
    st.error(
        "Boundary features skipped at load: "
        + "; ".join(f"#{i}: {reason}" for i, reason in data.boundaries.skipped)
    )
