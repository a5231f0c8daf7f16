"""
Interactive ICB map: one pickable SVG shape per region.

build_region_map() projects and compiles every feature once. The returned
RegionMap only re-paints on selection changes: set_selected() touches fill
and opacity of the already-built shapes, never the geometry.
"""

import logging
from typing import Callable, Optional

import numpy as np

from localiser.geometry import BoundaryCollection, GeometryError
from localiser.paths import geometry_to_path
from localiser.projection import DEFAULT_PADDING, MercatorProjection, ProjectionFrame, fit_bounds
from localiser.surface import DrawingSurface, Element, SvgSurface
from localiser.theme import BRAND_BLUE, MAP_DEFAULT_FILL, MAP_STROKE

logger = logging.getLogger(__name__)

MAP_WIDTH = 1000
MAP_HEIGHT = 680

SELECTED_OPACITY = 1
UNSELECTED_OPACITY = 0.95


class RegionMap:
    """Handle over a built map. Owns the selected-region state."""

    def __init__(self, surface: DrawingSurface, shapes: dict[str, list[Element]],
                 on_pick: Callable[[str], None], frame: ProjectionFrame,
                 inert: Optional[list[Element]] = None):
        self.surface = surface
        self.frame = frame
        self._shapes = shapes
        # Drawn but not pickable (no code, or no data row)
        self._inert = list(inert or [])
        self._on_pick = on_pick
        self.selected: Optional[str] = None

    @property
    def pickable_codes(self) -> list[str]:
        return list(self._shapes)

    def shapes_for(self, code: str) -> list[Element]:
        return self._shapes.get(code, [])

    def set_selected(self, code: Optional[str]):
        """Highlight the region with this code and dim every other shape.

        An unknown code clears the highlight."""
        self.selected = code if code in self._shapes else None
        for shape_code, shapes in self._shapes.items():
            chosen = shape_code == self.selected
            for shape in shapes:
                self.surface.set_style(
                    shape,
                    fill=BRAND_BLUE if chosen else MAP_DEFAULT_FILL,
                    opacity=SELECTED_OPACITY if chosen else UNSELECTED_OPACITY,
                )
        for shape in self._inert:
            self.surface.set_style(shape, fill=MAP_DEFAULT_FILL, opacity=UNSELECTED_OPACITY)

    def pick(self, code: Optional[str]) -> bool:
        """Activate a region as if its shape were clicked or keyed."""
        if code not in self._shapes:
            logger.warning("Ignoring pick for unknown region %r", code)
            return False
        self._on_pick(code)
        return True

    def to_svg(self, **link_params) -> str:
        return self.surface.to_svg(link_params=link_params)


def _drawable(collection: BoundaryCollection, projection) -> BoundaryCollection:
    """Drop, and log, features the projection rejects."""
    keep = []
    for feature in collection:
        points = list(feature.geometry.iter_points())
        try:
            if points:
                projection.project_many(np.array(points, dtype=float))
        except GeometryError as exc:
            logger.warning("Not drawing %s (%s): %s", feature.name, feature.code, exc)
            continue
        keep.append(feature)
    return BoundaryCollection(features=tuple(keep), skipped=collection.skipped)


def build_region_map(
    collection: BoundaryCollection,
    on_pick: Callable[[str], None],
    surface: Optional[DrawingSurface] = None,
    width: float = MAP_WIDTH,
    height: float = MAP_HEIGHT,
    padding: float = DEFAULT_PADDING,
    projection=None,
    pickable_codes=None,
) -> RegionMap:
    """
    Build the region map.

    Every feature is drawn. Features with a region code also get a pick
    affordance that calls on_pick(code); features without one stay inert.
    When pickable_codes is given, codes outside it (e.g. regions with no
    matching data row) are drawn but not pickable either.
    """
    projection = projection or MercatorProjection()
    if surface is None:
        surface = SvgSurface(width, height, label="ICB map", cls="icb-map")
    surface.clear()

    drawable = _drawable(collection, projection)
    frame = fit_bounds(drawable, surface.width, surface.height, padding, projection)

    shapes: dict[str, list[Element]] = {}
    inert: list[Element] = []
    for feature in drawable:
        path = surface.add(
            "path",
            d=geometry_to_path(feature.geometry, frame.project),
            fill=MAP_DEFAULT_FILL,
            stroke=MAP_STROKE,
            stroke_width=1,
            fill_rule="evenodd",
            data_icb23cd=feature.code or "",
        )
        surface.add("title", parent=path, text=feature.name)

        if feature.is_pickable and (pickable_codes is None or feature.code in pickable_codes):
            surface.attach_pick(path, feature.code, label=feature.name)
            shapes.setdefault(feature.code, []).append(path)
        else:
            inert.append(path)

    logger.info("Built region map: %d shapes, %d pickable regions, %d not pickable",
                len(drawable), len(shapes), len(inert))
    rmap = RegionMap(surface, shapes, on_pick, frame, inert)
    rmap.set_selected(None)
    return rmap
