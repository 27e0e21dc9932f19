"""
Location registry and national outline for the alert map.

Both are embedded assets shipped with the package:

- ``assets/ukraine.wkt``     — simplified country outline (POLYGON, lon/lat)
- ``assets/locations.json``  — GeoJSON FeatureCollection with one Point
  feature per region, in region ordinal order

They are parsed once at startup with Shapely.  The data is a build-time
constant, so a parse failure is fatal: there is no fallback.

Usage
-----
    geo = GeoIndex.load()
    geo.bounding_rect()            # BoundingRect(min_x=22.15, ...)
    geo.find_by_id(31).name_en     # "Kyiv City"
    geo.boundary().exterior.coords
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from shapely import wkt
from shapely.errors import ShapelyError
from shapely.geometry import Point, Polygon, shape

from ..state.status_codec import REGION_COUNT

log = logging.getLogger(__name__)

ASSETS_DIR = Path(__file__).resolve().parent / "assets"
BOUNDARY_WKT = ASSETS_DIR / "ukraine.wkt"
LOCATIONS_GEOJSON = ASSETS_DIR / "locations.json"


class GeoDataError(RuntimeError):
    """Embedded geometry or location data could not be loaded."""


@dataclass(frozen=True)
class BoundingRect:
    """Axis-aligned lon/lat rectangle."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def padded(self, pad: float) -> "BoundingRect":
        return BoundingRect(self.min_x - pad, self.min_y - pad,
                            self.max_x + pad, self.max_y + pad)


@dataclass(frozen=True)
class Location:
    """One region of the registry."""
    ordinal: int
    location_uid: int       # feed oblast uid
    name: str               # Ukrainian name
    name_en: str
    iso_code: str           # ISO 3166-2
    centroid: Point

    @property
    def lonlat(self) -> Tuple[float, float]:
        return (self.centroid.x, self.centroid.y)


class GeoIndex:
    """Read-only registry of the 27 locations plus the country outline."""

    def __init__(self, boundary: Polygon, locations: List[Location]):
        if len(locations) != REGION_COUNT:
            raise GeoDataError(
                f"expected {REGION_COUNT} locations, got {len(locations)}"
            )
        self._boundary = boundary
        self._locations: Tuple[Location, ...] = tuple(locations)
        minx, miny, maxx, maxy = boundary.bounds
        self._bounding_rect = BoundingRect(minx, miny, maxx, maxy)

    @classmethod
    def load(
        cls,
        wkt_path: Optional[Path] = None,
        geojson_path: Optional[Path] = None,
    ) -> "GeoIndex":
        """Parse the outline and the location registry.

        Raises
        ------
        GeoDataError
            If either file is missing or malformed.
        """
        wkt_path = wkt_path or BOUNDARY_WKT
        geojson_path = geojson_path or LOCATIONS_GEOJSON
        boundary = _load_boundary(wkt_path)
        locations = _load_locations(geojson_path)
        index = cls(boundary, locations)
        log.info(
            "GeoIndex loaded: %d outline points, %d locations, bbox=%s",
            len(boundary.exterior.coords), len(locations), index.bounding_rect(),
        )
        return index

    # ── Queries ───────────────────────────────────────────────────────

    @property
    def locations(self) -> Tuple[Location, ...]:
        return self._locations

    def bounding_rect(self) -> BoundingRect:
        return self._bounding_rect

    def boundary(self) -> Polygon:
        return self._boundary

    def find_by_id(self, location_uid: int) -> Optional[Location]:
        return self._find(lambda loc: loc.location_uid == location_uid)

    def find_by_name(self, name: str) -> Optional[Location]:
        """Match either the Ukrainian or the English name."""
        return self._find(lambda loc: name in (loc.name, loc.name_en))

    def _find(self, predicate: Callable[[Location], bool]) -> Optional[Location]:
        # 27 fixed entries; a linear scan is all this needs
        for loc in self._locations:
            if predicate(loc):
                return loc
        return None


def _load_boundary(path: Path) -> Polygon:
    try:
        geom = wkt.loads(path.read_text(encoding="utf-8"))
    except (OSError, ShapelyError) as exc:
        raise GeoDataError(f"cannot read country outline {path}: {exc}") from exc
    if not isinstance(geom, Polygon) or geom.is_empty:
        raise GeoDataError(f"{path} does not contain a polygon")
    return geom


def _load_locations(path: Path) -> List[Location]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise GeoDataError(f"cannot read locations {path}: {exc}") from exc

    locations: List[Location] = []
    for i, feat in enumerate(data.get("features", [])):
        try:
            props = feat["properties"]
            point = shape(feat["geometry"])
            locations.append(Location(
                ordinal=i,
                location_uid=int(props["location_uid"]),
                name=props["name"],
                name_en=props["name_en"],
                iso_code=props["iso_code"],
                centroid=point,
            ))
        except (KeyError, TypeError, ValueError, ShapelyError) as exc:
            raise GeoDataError(f"{path}: bad feature #{i}: {exc}") from exc
        if not isinstance(point, Point):
            raise GeoDataError(f"{path}: feature #{i} is not a Point")
    return locations
