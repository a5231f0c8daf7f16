"""
Compile region geometry into SVG path data.

Each ring becomes "M x y L x y ... Z". A polygon's holes follow its outer
ring in the same path string, and multipolygons concatenate their
polygons, so a single <path fill-rule="evenodd"> draws the whole feature
with holes left unfilled.
"""

from typing import Callable

from localiser.geometry import Geometry, Polygon, Ring

# (lon, lat) -> (px, py)
Projector = Callable[[float, float], tuple[float, float]]

# Two decimals avoids visible seams at the 1000 x 680 canvas size
COORD_PRECISION = 2


def _fmt(value: float) -> str:
    return f"{value:.{COORD_PRECISION}f}"


def ring_to_path(ring: Ring, project: Projector) -> str:
    """Path data for one closed ring, or "" if it has no area to draw."""
    points = list(ring)
    if len(points) > 1 and points[0] == points[-1]:
        # Z closes the ring; the repeated first point is redundant
        points = points[:-1]
    if len(set(points)) < 2:
        return ""

    parts = []
    for i, (lon, lat) in enumerate(points):
        x, y = project(lon, lat)
        parts.append(("M" if i == 0 else "L") + _fmt(x) + " " + _fmt(y))
    return "".join(parts) + "Z"


def polygon_to_path(polygon: Polygon, project: Projector) -> str:
    return "".join(ring_to_path(ring, project) for ring in polygon.rings)


def geometry_to_path(geometry: Geometry, project: Projector) -> str:
    """Path data for a Polygon or MultiPolygon."""
    if geometry is None:
        return ""
    return "".join(polygon_to_path(p, project) for p in geometry.polygons)
