"""
ICB Localiser — Home page (Streamlit entry point).

The map slide of the BEAM value-proposition deck. It provides:
  1. The ICB map: every region clickable (or focus + Enter), the selected
     ICB highlighted in brand blue
  2. The local picture for the selected ICB: referrals, recovery rate and
     baseline talking-therapies spend
  3. Navigation cards to the other slides

Run: streamlit run app.py

Multipage app (sidebar order determined by numeric filename prefix):
  - pages/1_Savings.py   → adoption scenario: savings, capacity, waits
  - pages/2_Activity.py  → localised referrals chart + sessions-per-course chart
  - pages/3_Regions.py   → all ICBs side by side, data coverage report
"""

import streamlit as st

from localiser.formatting import format_count, format_currency_short, format_percent
from viewer import MAP_CSS, get_data, region_map, selected_icb, sidebar

st.set_page_config(
    page_title="ICB Localiser",
    layout="wide",
)

data = get_data()
state = sidebar(data)
icb = selected_icb(data, state)

st.title("BEAM Value Proposition — ICB Localiser")
st.markdown(
    "Localise the deck to one Integrated Care Board. Pick an ICB on the map "
    "or in the sidebar; every slide updates to match."
)

st.divider()

# ── Map + local picture ──────────────────────────────────────────────────────
col_map, col_facts = st.columns([3, 2])

with col_map:
    rmap = region_map(data)
    rmap.set_selected(icb["icb23cd"])
    st.markdown(MAP_CSS, unsafe_allow_html=True)
    st.markdown(rmap.to_svg(adoption=state.adoption_percent), unsafe_allow_html=True)
    if icb["icb23cd"] not in rmap.pickable_codes:
        st.caption(f"{icb['icb_name']} has no boundary on this map.")

with col_facts:
    st.subheader(icb["icb_name"])
    st.caption(f"Example shown: {icb['icb_name']} (highlighted)")

    baseline_spend = icb["annualised_referrals"] * data.defaults["talking_therapies_cost_per_patient"]
    st.metric("Annual referrals", format_count(icb["annualised_referrals"]))
    st.metric("Recovery rate", format_percent(icb["recovery_rate"]))
    st.metric("Talking therapies spend (est.)", format_currency_short(baseline_spend))

st.divider()

# ── Navigation Cards ─────────────────────────────────────────────────────────
col1, col2, col3 = st.columns(3)

with col1:
    st.subheader("Savings")
    st.markdown(
        "Set the BEAM adoption rate and see the saving, appointments freed, "
        "clinical capacity released and the effect on waits."
    )
    st.page_link("pages/1_Savings.py", label="Open Savings", icon="💷")

with col2:
    st.subheader("Activity")
    st.markdown(
        "Referrals and accessed services over four years, scaled to this ICB, "
        "and the sessions each completed course takes."
    )
    st.page_link("pages/2_Activity.py", label="Open Activity", icon="📊")

with col3:
    st.subheader("Regions")
    st.markdown("Compare every ICB and check which regions have data and boundaries.")
    st.page_link("pages/3_Regions.py", label="Open Regions", icon="🗺️")
