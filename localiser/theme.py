"""
Colour tokens shared by the map, the charts and the Streamlit pages.

Matches the BEAM deck palette so the rendered SVG sits on top of the
slide artwork without visible seams.
"""

# ── Brand ────────────────────────────────────────────────────────────────────
BRAND_BLUE = "#141B8C"          # selected region, accessed bars, sessions line
REFERRALS_GREY = "#D1D5DB"      # referrals bars (neutral series)

# ── Map ──────────────────────────────────────────────────────────────────────
MAP_DEFAULT_FILL = "#c7cdd9"
MAP_STROKE = "#ffffff"

# ── Chart furniture ──────────────────────────────────────────────────────────
GRID_GREY = "#d1d5db"
AXIS_GREY = "#6b7280"
LABEL_GREY = "#d1d5db"
CHART_BACKGROUND = "#fafbfd"
