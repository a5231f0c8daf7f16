"""
Mercator projection and canvas fitting for the region map.

Two pieces:
  1. MercatorProjection — the projection strategy. Maps (lon, lat) degrees
     to unbounded planar (x, y): x = lon in radians, y = ln(tan(pi/4 + lat/2)).
  2. fit_bounds() — scans every coordinate of a BoundaryCollection, takes the
     planar bounding box, and returns a ProjectionFrame that maps geographic
     coordinates straight to canvas pixels.

Screen y grows downward while projected y grows northward, so the frame
negates y before translating. Centring uses the extent midpoint on both axes,
which keeps the flip correct in every quadrant (data spanning the equator or
the prime meridian included).
"""

import math
from dataclasses import dataclass, field

import numpy as np

from localiser.geometry import BoundaryCollection, ProjectionError

# Fill ratio: the map occupies 96% of the limiting canvas dimension
DEFAULT_PADDING = 0.96

# Planar span substituted for a zero-width/height extent (single point,
# vertical line, empty collection) so the scale stays finite.
MIN_EXTENT = 1.0


class MercatorProjection:
    """Conformal cylindrical projection (spherical Mercator, unit radius)."""

    name = "mercator"

    @staticmethod
    def _check_lat(lat):
        if not -90.0 < lat < 90.0:
            raise ProjectionError(f"latitude {lat} is outside (-90, 90)")

    def project(self, lon: float, lat: float) -> tuple[float, float]:
        self._check_lat(lat)
        x = math.radians(lon)
        y = math.log(math.tan(math.pi / 4 + math.radians(lat) / 2))
        return (x, y)

    def invert(self, x: float, y: float) -> tuple[float, float]:
        lon = math.degrees(x)
        lat = math.degrees(2 * math.atan(math.exp(y)) - math.pi / 2)
        return (lon, lat)

    def project_many(self, points: np.ndarray) -> np.ndarray:
        """Project an (n, 2) array of (lon, lat) rows in one pass."""
        points = np.asarray(points, dtype=float).reshape(-1, 2)
        lat = points[:, 1]
        if np.any(~np.isfinite(lat)) or np.any(np.abs(lat) >= 90.0):
            raise ProjectionError("latitude outside (-90, 90) in projected points")
        x = np.radians(points[:, 0])
        y = np.log(np.tan(np.pi / 4 + np.radians(lat) / 2))
        return np.column_stack([x, y])


@dataclass(frozen=True)
class ProjectionFrame:
    """Scale + translation mapping (lon, lat) to canvas pixels."""
    scale: float
    tx: float
    ty: float
    width: float
    height: float
    projection: MercatorProjection = field(default_factory=MercatorProjection)

    def project(self, lon: float, lat: float) -> tuple[float, float]:
        x, y = self.projection.project(lon, lat)
        return (x * self.scale + self.tx, -y * self.scale + self.ty)

    def project_many(self, points: np.ndarray) -> np.ndarray:
        xy = self.projection.project_many(points)
        return np.column_stack([
            xy[:, 0] * self.scale + self.tx,
            -xy[:, 1] * self.scale + self.ty,
        ])


def planar_extent(collection: BoundaryCollection, projection=None):
    """Return (min_x, min_y, max_x, max_y) of every projected vertex.

    An empty collection yields a zero extent at the origin."""
    projection = projection or MercatorProjection()
    coords = [p for feature in collection for p in feature.geometry.iter_points()]
    if not coords:
        return (0.0, 0.0, 0.0, 0.0)
    xy = projection.project_many(np.array(coords, dtype=float))
    min_x, min_y = xy.min(axis=0)
    max_x, max_y = xy.max(axis=0)
    return (float(min_x), float(min_y), float(max_x), float(max_y))


def fit_bounds(
    collection: BoundaryCollection,
    width: float,
    height: float,
    padding: float = DEFAULT_PADDING,
    projection=None,
) -> ProjectionFrame:
    """
    Fit every feature of the collection into a width x height canvas.

    Args:
        collection: Boundaries to fit (all features contribute to the extent).
        width, height: Canvas size in pixels.
        padding: Fill ratio in (0, 1]; the leftover is split evenly on both
            sides of the limiting dimension.
        projection: Strategy with project()/project_many(); Mercator by default.

    Returns:
        ProjectionFrame with a single uniform scale (aspect ratio preserved).
    """
    projection = projection or MercatorProjection()
    min_x, min_y, max_x, max_y = planar_extent(collection, projection)

    dx = max_x - min_x
    dy = max_y - min_y
    if dx <= 0:
        dx = MIN_EXTENT
    if dy <= 0:
        dy = MIN_EXTENT

    scale = padding * min(width / dx, height / dy)

    # Centre the extent midpoint; y is negated at project time so the
    # northern edge (max_y) lands at the top margin.
    tx = width / 2 - (min_x + max_x) / 2 * scale
    ty = height / 2 + (min_y + max_y) / 2 * scale

    return ProjectionFrame(
        scale=scale, tx=tx, ty=ty, width=width, height=height, projection=projection,
    )
