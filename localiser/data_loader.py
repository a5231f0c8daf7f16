"""
Load ICB metrics and boundaries and provide lookup methods for the app.

Loads data/icb_data.json (per-ICB metrics, model defaults, national
series) into a pandas DataFrame plus plain dicts, parses
data/icb_boundaries.geojson into a BoundaryCollection, and builds
dictionary lookups for O(1) access by ICB code or name.

The ICB code (icb23cd) is the join key between the two files. Codes found
on only one side are reported by join_report() and logged at load time;
they never stop the app from loading.
"""

import json
import logging
import os
from typing import Optional

import pandas as pd

from localiser.geometry import BoundaryCollection, parse_feature_collection

logger = logging.getLogger(__name__)

DATA_FILE = "icb_data.json"
BOUNDARY_FILE = "icb_boundaries.geojson"

# Used when the data file names no default_icb
FALLBACK_ICB = "NHS Greater Manchester ICB"


def default_data_dir() -> str:
    """LOCALISER_DATA_DIR if set, else data/ next to the package."""
    return os.environ.get("LOCALISER_DATA_DIR") or os.path.join(
        os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "data"
    )


class LocaliserData:
    """Loads the ICB data and boundary files and provides query methods."""

    def __init__(self, data_dir=None):
        self._dir = data_dir or default_data_dir()
        self._load()

    def _load(self):
        # ── Load files ────────────────────────────────────────────────────
        with open(os.path.join(self._dir, DATA_FILE), encoding="utf-8") as f:
            raw = json.load(f)
        with open(os.path.join(self._dir, BOUNDARY_FILE), encoding="utf-8") as f:
            geo = json.load(f)

        self.icbs = pd.DataFrame(raw.get("icbs") or [])
        self.defaults = dict(raw.get("defaults") or {})
        national = raw.get("national") or {}
        self.national_series = list(national.get("series") or [])
        self.snapshot = dict(national.get("snapshot_2024_25") or {})

        self.boundaries: BoundaryCollection = parse_feature_collection(geo)

        # ── Build lookup dictionaries ─────────────────────────────────────
        records = self.icbs.to_dict("records")
        self._by_code = {r["icb23cd"]: r for r in records if r.get("icb23cd")}
        self._by_name = {r["icb_name"]: r for r in records if r.get("icb_name")}

        report = self.join_report()
        logger.info("Loaded %d ICBs and %d boundary features from %s",
                    len(records), len(self.boundaries), self._dir)
        if report["missing_boundary"]:
            logger.warning("ICBs with no boundary (not on the map): %s",
                           ", ".join(report["missing_boundary"]))
        if report["missing_data"]:
            logger.warning("Boundaries with no ICB data (drawn, not pickable): %s",
                           ", ".join(report["missing_data"]))

    # ── Query methods ────────────────────────────────────────────────────────

    def get_icb_by_code(self, code) -> Optional[dict]:
        return self._by_code.get(code)

    def get_icb_by_name(self, name) -> Optional[dict]:
        return self._by_name.get(name)

    def icb_names(self) -> list[str]:
        """All ICB names, alphabetical (select box order)."""
        return sorted(self._by_name)

    def default_icb_name(self) -> str:
        name = self.defaults.get("default_icb") or FALLBACK_ICB
        if name in self._by_name:
            return name
        names = self.icb_names()
        return names[0] if names else name

    def pickable_codes(self) -> set[str]:
        """Codes present in both files: the only regions a map pick can select."""
        return set(self._by_code) & set(self.boundaries.codes)

    def join_report(self) -> dict:
        """Return codes missing from either side of the code join.

        missing_boundary: ICB rows with no boundary feature
        missing_data: boundary features with no ICB row
        """
        data_codes = set(self._by_code)
        geo_codes = set(self.boundaries.codes)
        return {
            "missing_boundary": sorted(data_codes - geo_codes),
            "missing_data": sorted(geo_codes - data_codes),
        }
