"""
Boundary data model — typed, immutable region geometry.

Frozen dataclasses for rings, polygons and region features, plus the
GeoJSON parser that turns a FeatureCollection into a BoundaryCollection.
Validation happens here, at load time, so the projection and path code
downstream never sees a coordinate it cannot handle:

  - coordinates must be finite, lon in [-180, 180], lat in (-90, 90)
  - rings must be closed (an unclosed ring is closed by repeating its
    first point)
  - only Polygon and MultiPolygon geometries are accepted

A feature that fails validation is logged and skipped; the rest of the
collection still loads.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Iterator, Optional

logger = logging.getLogger(__name__)

Point = tuple[float, float]
Ring = tuple[Point, ...]

# Property keys in the ONS ICB boundary file
CODE_KEY = "icb23cd"
NAME_KEYS = ("icb_name_short", "icb23nm")


class GeometryError(ValueError):
    """Boundary geometry that cannot be drawn (bad type, range or shape)."""


class ProjectionError(GeometryError):
    """A coordinate outside the projection's domain (e.g. at a pole)."""


# ═══════════════════════════════════════════════════════════════════════════════
# DATA MODEL
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Polygon:
    """One polygon: the outer ring first, any holes after it."""
    rings: tuple[Ring, ...]


@dataclass(frozen=True)
class Geometry:
    """A Polygon or MultiPolygon. Single polygons hold one entry in `polygons`."""
    kind: str                       # "Polygon" or "MultiPolygon"
    polygons: tuple[Polygon, ...]

    def iter_rings(self) -> Iterator[Ring]:
        for polygon in self.polygons:
            yield from polygon.rings

    def iter_points(self) -> Iterator[Point]:
        for ring in self.iter_rings():
            yield from ring


@dataclass(frozen=True)
class RegionFeature:
    """A named region. `code` is None when the source carries no identity."""
    code: Optional[str]
    name: str
    geometry: Geometry

    @property
    def is_pickable(self) -> bool:
        return bool(self.code)


@dataclass(frozen=True)
class BoundaryCollection:
    """Ordered, immutable set of region features loaded once at startup."""
    features: tuple[RegionFeature, ...] = ()
    # (feature index, reason) for every feature dropped during parsing
    skipped: tuple[tuple[int, str], ...] = field(default=())

    def __len__(self):
        return len(self.features)

    def __iter__(self):
        return iter(self.features)

    @property
    def codes(self) -> list[str]:
        return [f.code for f in self.features if f.code]

    def get(self, code: str) -> Optional[RegionFeature]:
        for feature in self.features:
            if feature.code == code:
                return feature
        return None


# ═══════════════════════════════════════════════════════════════════════════════
# VALIDATION
# ═══════════════════════════════════════════════════════════════════════════════

def _parse_point(raw) -> Point:
    try:
        lon, lat = float(raw[0]), float(raw[1])
    except (TypeError, ValueError, IndexError) as exc:
        raise GeometryError(f"not a coordinate pair: {raw!r}") from exc
    if not (math.isfinite(lon) and math.isfinite(lat)):
        raise GeometryError(f"non-finite coordinate: {raw!r}")
    if not -180.0 <= lon <= 180.0:
        raise GeometryError(f"longitude out of range: {lon}")
    if not -90.0 < lat < 90.0:
        raise GeometryError(f"latitude out of range: {lat}")
    return (lon, lat)


def parse_ring(raw) -> Ring:
    """Validate one ring, closing it if the source left it open."""
    if not isinstance(raw, (list, tuple)) or not raw:
        raise GeometryError("empty ring")
    points = [_parse_point(p) for p in raw]
    if points[0] != points[-1]:
        logger.debug("Closing open ring of %d points", len(points))
        points.append(points[0])
    return tuple(points)


def parse_polygon(raw) -> Polygon:
    if not isinstance(raw, (list, tuple)) or not raw:
        raise GeometryError("polygon has no rings")
    return Polygon(rings=tuple(parse_ring(r) for r in raw))


def parse_geometry(raw: Optional[dict]) -> Geometry:
    """Parse a GeoJSON geometry object into a Geometry."""
    if not raw:
        raise GeometryError("feature has no geometry")
    kind = raw.get("type")
    coords = raw.get("coordinates")
    if kind == "Polygon":
        return Geometry(kind=kind, polygons=(parse_polygon(coords),))
    if kind == "MultiPolygon":
        if not coords:
            raise GeometryError("multipolygon has no polygons")
        return Geometry(kind=kind, polygons=tuple(parse_polygon(p) for p in coords))
    raise GeometryError(f"unsupported geometry type: {kind}")


def parse_feature(raw: dict) -> RegionFeature:
    if not isinstance(raw, dict):
        raise GeometryError("feature is not an object")
    props = raw.get("properties") or {}
    code = props.get(CODE_KEY) or None
    name = next((props[k] for k in NAME_KEYS if props.get(k)), None) or code or "ICB"
    return RegionFeature(code=code, name=str(name), geometry=parse_geometry(raw.get("geometry")))


def parse_feature_collection(raw: Optional[dict]) -> BoundaryCollection:
    """Build a BoundaryCollection from a GeoJSON FeatureCollection dict.

    Malformed features are skipped with a warning rather than failing the
    whole load."""
    features = []
    skipped = []
    for i, raw_feature in enumerate((raw or {}).get("features") or []):
        try:
            features.append(parse_feature(raw_feature))
        except GeometryError as exc:
            props = raw_feature.get("properties") if isinstance(raw_feature, dict) else None
            props = props or {}
            logger.warning("Skipping boundary feature %d (%s): %s",
                           i, props.get(CODE_KEY, "no code"), exc)
            skipped.append((i, str(exc)))
    return BoundaryCollection(features=tuple(features), skipped=tuple(skipped))
