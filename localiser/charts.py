"""
Fixed-layout SVG charts for the Activity slide.

Two stateless renderers, each clearing its surface and redrawing from the
series it is given:

  - render_referrals_chart(): grouped bars, referrals vs accessed services,
    in millions, on an auto-fitted axis (nice step + 12% headroom).
  - render_sessions_chart(): one line with point markers, on a fixed axis
    supplied by the caller (the metric's range is narrow and known).

An empty series still produces a valid drawing: gridlines and axes, no marks.
"""

import math
from dataclasses import dataclass

from localiser.surface import DrawingSurface
from localiser.theme import (
    AXIS_GREY, BRAND_BLUE, CHART_BACKGROUND, GRID_GREY, LABEL_GREY, REFERRALS_GREY,
)

CHART_WIDTH = 1000
CHART_HEIGHT = 680

# (upper bound on the observed max, gridline step); above the last bound
# the step is FALLBACK_STEP
STEP_THRESHOLDS = ((0.2, 0.05), (0.5, 0.1), (1.0, 0.2))
FALLBACK_STEP = 0.5
HEADROOM = 1.12

GROUP_FRACTION = 0.62       # share of each period band taken by its two bars
BAR_GAP_FRACTION = 0.10     # gap between the bars, as a share of the group

# Deck axis for mean sessions per course
SESSIONS_Y_MIN = 7.6
SESSIONS_Y_MAX = 8.5
SESSIONS_Y_STEP = 0.1


@dataclass(frozen=True)
class Margin:
    top: float
    right: float
    bottom: float
    left: float


BAR_MARGIN = Margin(top=70, right=30, bottom=70, left=80)
LINE_MARGIN = Margin(top=40, right=30, bottom=70, left=80)


# ── Scale helpers ────────────────────────────────────────────────────────────

def nice_step(max_value: float) -> float:
    """Gridline step for an axis whose data peaks at max_value."""
    for limit, step in STEP_THRESHOLDS:
        if max_value <= limit:
            return step
    return FALLBACK_STEP


def axis_max(max_value: float, step: float = None) -> float:
    """Top of the axis: max_value plus headroom, rounded up to a whole step."""
    step = step or nice_step(max_value)
    # round() first so 3.0000000000000004 steps doesn't become 4
    steps = math.ceil(round(max_value * HEADROOM / step, 9))
    return max(step, round(steps * step, 10))


def format_tick(value: float, decimals: int = 2) -> str:
    """Tick label: integers bare, fractions without trailing zeros."""
    if abs(value - round(value)) < 1e-9:
        return str(int(round(value)))
    return f"{value:.{decimals}f}".rstrip("0").rstrip(".")


def _finite(value):
    """value as a float, or None when missing or not finite."""
    try:
        value = float(value)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


def _as_number(value) -> float:
    """Missing or NaN values plot as zero (bars only)."""
    value = _finite(value)
    return 0.0 if value is None else value


# ── Shared furniture ─────────────────────────────────────────────────────────

def _gridline(surface, margin, inner_w, y, label, font_size):
    surface.add("line", x1=margin.left, x2=margin.left + inner_w, y1=y, y2=y,
                stroke=GRID_GREY, stroke_width=1)
    surface.add("text", text=label, x=margin.left - 10, y=y + 5,
                text_anchor="end", font_size=font_size, font_weight=600, fill=LABEL_GREY)


def _axes(surface, margin, inner_w, y0):
    surface.add("line", x1=margin.left, x2=margin.left, y1=margin.top, y2=y0,
                stroke=AXIS_GREY, stroke_width=1.5)
    surface.add("line", x1=margin.left, x2=margin.left + inner_w, y1=y0, y2=y0,
                stroke=AXIS_GREY, stroke_width=1.5)


def _period_label(surface, x, y0, label):
    surface.add("text", text=label, x=x, y=y0 + 46, text_anchor="middle",
                font_size=18, font_weight=700, fill=LABEL_GREY)


# ═══════════════════════════════════════════════════════════════════════════════
# GROUPED BARS — referrals vs accessed services
# ═══════════════════════════════════════════════════════════════════════════════

def referrals_axis(series: list[dict]) -> tuple[float, float]:
    """Return (step, axis max) in millions for a referrals/accessed series."""
    max_value = max(
        [0.0] + [_as_number(d.get(k)) / 1e6 for d in series or [] for k in ("referrals", "accessed")]
    )
    step = nice_step(max_value)
    return step, axis_max(max_value, step)


def render_referrals_chart(surface: DrawingSurface, series: list[dict]) -> DrawingSurface:
    """
    Draw yearly referrals and accessed services as grouped bars.

    Args:
        surface: Target, cleared first.
        series: [{"year": "2021/22", "referrals": 1_800_000, "accessed": 1_200_000}, ...]
            in raw counts; plotted in millions.
    """
    surface.clear()
    margin = BAR_MARGIN
    inner_w = surface.width - margin.left - margin.right
    inner_h = surface.height - margin.top - margin.bottom

    data = [
        {
            "year": str(d.get("year", "")),
            "referrals": max(0.0, _as_number(d.get("referrals")) / 1e6),
            "accessed": max(0.0, _as_number(d.get("accessed")) / 1e6),
        }
        for d in series or []
    ]
    step, y_max = referrals_axis(series)

    def y_scale(v):
        return margin.top + (1 - v / y_max) * inner_h

    y0 = y_scale(0)

    for i in range(int(round(y_max / step)) + 1):
        t = i * step
        _gridline(surface, margin, inner_w, y_scale(t), format_tick(t), font_size=16)

    _axes(surface, margin, inner_w, y0)

    # Legend
    legend_y = margin.top - 40
    legend_x = margin.left + 260
    for x, color, label in [
        (legend_x, REFERRALS_GREY, "Referrals (m)"),
        (legend_x + 170, BRAND_BLUE, "Accessed services (m)"),
    ]:
        surface.add("rect", x=x, y=legend_y - 10, width=14, height=14, fill=color)
        surface.add("text", text=label, x=x + 20, y=legend_y + 2, text_anchor="start",
                    font_size=18, font_weight=700, fill=LABEL_GREY)

    if not data:
        return surface

    band = inner_w / len(data)
    group_w = band * GROUP_FRACTION
    gap = group_w * BAR_GAP_FRACTION
    bar_w = (group_w - gap) / 2
    offset = (band - group_w) / 2

    for i, d in enumerate(data):
        group_x = margin.left + i * band
        x_ref = group_x + offset
        x_acc = x_ref + bar_w + gap

        for x, value, color, cls in [
            (x_ref, d["referrals"], REFERRALS_GREY, "bar bar-referrals"),
            (x_acc, d["accessed"], BRAND_BLUE, "bar bar-accessed"),
        ]:
            top = y_scale(value)
            surface.add("rect", class_=cls, x=x, y=top, width=bar_w,
                        height=max(0.0, y0 - top), fill=color)

        _period_label(surface, group_x + band / 2, y0, d["year"])

    return surface


# ═══════════════════════════════════════════════════════════════════════════════
# LINE — mean sessions per course
# ═══════════════════════════════════════════════════════════════════════════════

def sessions_axis(
    series: list[dict],
    y_min: float = SESSIONS_Y_MIN,
    y_max: float = SESSIONS_Y_MAX,
    step: float = SESSIONS_Y_STEP,
) -> tuple[float, float, float]:
    """Widen the fixed sessions axis by whole steps until it covers the series.

    Returns (y_min, y_max, step). The deck range is kept when every value
    already fits."""
    if step <= 0:
        raise ValueError(f"axis step must be positive, got {step}")
    values = [v for v in (_finite(d.get("sessions")) for d in series or []) if v is not None]
    if values:
        low = math.floor(round(min(values) / step, 9)) * step
        high = math.ceil(round(max(values) / step, 9)) * step
        y_min = min(y_min, round(low, 10))
        y_max = max(y_max, round(high, 10))
    return y_min, y_max, step


def render_sessions_chart(
    surface: DrawingSurface,
    series: list[dict],
    y_min: float = SESSIONS_Y_MIN,
    y_max: float = SESSIONS_Y_MAX,
    step: float = SESSIONS_Y_STEP,
) -> DrawingSurface:
    """
    Draw sessions per course as a line with a marker per year.

    The axis is fixed by the caller (y_min, y_max, step) rather than fitted
    to the data; sessions_axis() gives a range that covers a series. Values
    outside the range are pinned to its edge. Missing values leave their
    period labelled but unplotted. A single point draws a marker with no line.
    """
    if step <= 0:
        raise ValueError(f"axis step must be positive, got {step}")

    surface.clear()
    margin = LINE_MARGIN
    inner_w = surface.width - margin.left - margin.right
    inner_h = surface.height - margin.top - margin.bottom

    # Opaque background hides the static chart in the slide image underneath
    surface.add("rect", x=0, y=0, width=surface.width, height=surface.height,
                fill=CHART_BACKGROUND)

    data = [
        {"year": str(d.get("year", "")), "sessions": _finite(d.get("sessions"))}
        for d in series or []
    ]

    span = (y_max - y_min) or 1.0

    def y_scale(v):
        v = min(max(v, y_min), y_max)
        return margin.top + (1 - (v - y_min) / span) * inner_h

    x_step = inner_w / max(1, len(data) - 1)

    def x_scale(i):
        return margin.left + i * x_step

    for i in range(math.floor((y_max - y_min) / step + 1e-9) + 1):
        t = y_min + i * step
        _gridline(surface, margin, inner_w, y_scale(t), format_tick(t, decimals=1), font_size=18)

    y0 = y_scale(y_min)
    _axes(surface, margin, inner_w, y0)

    for i, d in enumerate(data):
        _period_label(surface, x_scale(i), y0, d["year"])

    points = [
        (x_scale(i), y_scale(d["sessions"]))
        for i, d in enumerate(data) if d["sessions"] is not None
    ]

    if len(points) >= 2:
        path = "".join(
            ("M" if i == 0 else "L") + f"{x:.2f} {y:.2f}" for i, (x, y) in enumerate(points)
        )
        surface.add("path", d=path, fill="none", stroke=BRAND_BLUE, stroke_width=8,
                    stroke_linecap="round", stroke_linejoin="round")

    for x, y in points:
        surface.add("circle", cx=x, cy=y, r=7, fill=BRAND_BLUE)

    return surface
