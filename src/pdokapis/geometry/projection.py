"""Coordinate projection between Rijksdriehoek and ETRS89.

Handles conversion between:
- Rijksdriehoek / RD New (EPSG:28992) - Dutch national grid, used by BAG and BRK
- ETRS89 (EPSG:4258) - geodetic lon/lat, used by the Locatieserver

No other pair is supported. Coordinates are always (x, y); for geodetic
coordinates that is (longitude, latitude).
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pyproj import Transformer

from pdokapis.core.types import BoundingBox


class CoordinateSpace(str, Enum):
    """Coordinate reference systems a registry can be asked to answer in (Accept-Crs)."""

    RIJKSDRIEHOEK = "epsg:28992"
    GPS = "epsg:4258"

    @classmethod
    def _missing_(cls, value):
        # Accept "EPSG:28992" as well as "epsg:28992"
        if isinstance(value, str) and value.lower() != value:
            return cls(value.lower())
        return None

    @property
    def epsg(self) -> str:
        """Authority string as pyproj expects it, e.g. 'EPSG:28992'."""
        return self.value.upper()

    @property
    def is_planar(self) -> bool:
        return self is CoordinateSpace.RIJKSDRIEHOEK


@lru_cache(maxsize=None)
def _transformer(source: CoordinateSpace, target: CoordinateSpace) -> Transformer:
    return Transformer.from_crs(source.epsg, target.epsg, always_xy=True)


def project_point(
    coordinate: tuple[float, float],
    source: CoordinateSpace | str,
    target: CoordinateSpace | str,
) -> tuple[float, float]:
    """Project an (x, y) coordinate from *source* to *target*.

    Raises ValueError for a CRS outside the supported pair.
    """
    source = CoordinateSpace(source)
    target = CoordinateSpace(target)
    x, y = coordinate[0], coordinate[1]
    if source is target:
        return (x, y)
    return _transformer(source, target).transform(x, y)


def coordinate_rijksdriehoek_to_wgs84(rd_x: float, rd_y: float) -> tuple[float, float]:
    """Return (longitude, latitude) for a Rijksdriehoek coordinate."""
    return project_point((rd_x, rd_y), CoordinateSpace.RIJKSDRIEHOEK, CoordinateSpace.GPS)


def coordinate_wgs84_to_rijksdriehoek(lon: float, lat: float) -> tuple[float, float]:
    """Return (x, y) in Rijksdriehoek for a longitude/latitude pair."""
    return project_point((lon, lat), CoordinateSpace.GPS, CoordinateSpace.RIJKSDRIEHOEK)


def bbox_wgs84_to_rijksdriehoek(bbox: BoundingBox) -> BoundingBox:
    """Project the corners of a lon/lat bounding box to Rijksdriehoek."""
    x1, y1 = coordinate_wgs84_to_rijksdriehoek(bbox.min_x, bbox.min_y)
    x2, y2 = coordinate_wgs84_to_rijksdriehoek(bbox.max_x, bbox.max_y)
    return BoundingBox(min(x1, x2), min(y1, y2), max(x1, x2), max(y1, y2))
