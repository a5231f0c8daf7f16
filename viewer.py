"""
Shared Streamlit plumbing for the ICB Localiser pages.

Every page calls sidebar() to get the current AppState. The state lives in
st.session_state and is mirrored into the URL (?icb=...&adoption=...), so
a map pick, which is a link back to this app, and a browser reload both
land on the same ICB and adoption level.

The region map is built once per session and only re-painted afterwards.
"""

import logging
import os

import streamlit as st

from localiser.data_loader import LocaliserData
from localiser.region_map import RegionMap, build_region_map
from localiser.state import (
    AppState, initial_state, select_name, select_region, set_adoption_percent,
)

logging.basicConfig(
    level=os.environ.get("LOCALISER_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(message)s",
)

# Hover and keyboard-focus feedback on map regions
MAP_CSS = """
<style>
.icb-map path { cursor: pointer; transition: opacity 120ms; }
.icb-map a:hover path { opacity: 0.8; }
.icb-map a:focus path { stroke: #141B8C; stroke-width: 3; }
</style>
"""


@st.cache_resource
def load_data():
    return LocaliserData()


def get_data() -> LocaliserData:
    """Load data once per server; stop the page with a message if it's missing."""
    try:
        return load_data()
    except FileNotFoundError as exc:
        st.error(
            f"Data file missing: {exc.filename}. Set LOCALISER_DATA_DIR or run "
            "the app from the project folder."
        )
        st.stop()


def _store(data: LocaliserData, state: AppState):
    st.session_state.app_state = state
    icb = data.get_icb_by_name(state.selected_name)
    if icb:
        st.query_params["icb"] = icb["icb23cd"]
    st.query_params["adoption"] = str(state.adoption_percent)


def region_map(data: LocaliserData) -> RegionMap:
    """This session's map, built on first use."""
    if "region_map" not in st.session_state:
        def on_pick(code):
            _store(data, select_region(st.session_state.app_state, data, code))

        st.session_state.region_map = build_region_map(
            data.boundaries, on_pick, pickable_codes=data.pickable_codes(),
        )
    return st.session_state.region_map


def current_state(data: LocaliserData) -> AppState:
    """Session state, seeded from the URL on the first run of a session."""
    if "app_state" not in st.session_state:
        params = st.query_params
        st.session_state.app_state = initial_state(data, adoption_percent=params.get("adoption"))
        code = params.get("icb")
        # Map links arrive as ?icb=CODE; ICBs not on the map (selected via
        # the select box) are restored directly
        if code and not region_map(data).pick(code):
            st.session_state.app_state = select_region(st.session_state.app_state, data, code)
    return st.session_state.app_state


def sidebar(data: LocaliserData) -> AppState:
    """Render the ICB and adoption inputs and return the updated state."""
    state = current_state(data)
    names = data.icb_names()

    with st.sidebar:
        st.header("Localise")
        name = st.selectbox(
            "ICB", names,
            index=names.index(state.selected_name) if state.selected_name in names else 0,
            help="Or click a region on the map",
        )
        pct = st.number_input(
            "BEAM adoption (%)", min_value=0, max_value=100,
            value=state.adoption_percent, step=1,
            help="Share of referrals offered BEAM instead of talking therapies",
        )

    state = set_adoption_percent(select_name(state, data, name), pct)
    _store(data, state)
    return state


def selected_icb(data: LocaliserData, state: AppState) -> dict:
    icb = data.get_icb_by_name(state.selected_name)
    if icb is None:
        st.warning(f"No data for {state.selected_name}.")
        st.stop()
    return icb
