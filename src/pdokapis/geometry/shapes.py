"""Polygon, area and bounding-box helpers.

GeoJSON geometry values arrive from BAG and BRK as plain dicts
(``{"type": "Polygon", "coordinates": [...]}``) and are turned into shapely
polygons here. Areas are planar: square meters for Rijksdriehoek input.
"""

from __future__ import annotations

import functools
import math
from collections.abc import Callable, Iterable
from typing import TypeVar

from shapely.geometry import MultiPoint, MultiPolygon, Point, Polygon, box, mapping

from pdokapis.core.errors import MalformedGeometry
from pdokapis.core.types import BoundingBox
from pdokapis.geometry.projection import CoordinateSpace

T = TypeVar("T")


# ---------------------------------------------------------------------------
# GeoJSON -> shapely
# ---------------------------------------------------------------------------

def _ring(positions: list) -> list[tuple[float, float]]:
    """Convert a GeoJSON ring to (x, y) tuples, dropping any z value."""
    if not isinstance(positions, (list, tuple)):
        raise MalformedGeometry(positions, "ring must be a list of positions")
    points = []
    for position in positions:
        if not isinstance(position, (list, tuple)) or len(position) not in (2, 3):
            raise MalformedGeometry(position)
        try:
            points.append((float(position[0]), float(position[1])))
        except (TypeError, ValueError) as e:
            raise MalformedGeometry(position, "non-numeric coordinate") from e
    return points


def geometry_value_to_polygon(value: dict) -> Polygon | None:
    """Build a polygon (outer ring plus holes) from a GeoJSON geometry value.

    Returns None for every geometry type other than Polygon. Raises
    MalformedGeometry when a position is not 2D or 3D or a ring is too short.
    """
    if value.get("type") != "Polygon":
        return None

    rings = value.get("coordinates") or []
    if not rings:
        raise MalformedGeometry(rings, "polygon without rings")

    outer, *inners = rings
    try:
        return Polygon(_ring(outer), [_ring(inner) for inner in inners])
    except ValueError as e:
        # shapely rejects rings with fewer than 4 positions
        raise MalformedGeometry(outer, str(e)) from e


def unsigned_area(polygon: Polygon) -> float:
    """Planar area of the outer ring minus its holes, independent of winding order."""
    return abs(polygon.area)


def round_area(area: float) -> int:
    """Round half away from zero to whole units."""
    return int(math.copysign(math.floor(abs(area) + 0.5), area))


# ---------------------------------------------------------------------------
# Bounding boxes
# ---------------------------------------------------------------------------

def fold_first(iterable: Iterable[T], func: Callable[[T, T], T]) -> T | None:
    """Fold *iterable* using its first element as the initial value.

    Returns None when *iterable* is empty.
    """
    iterator = iter(iterable)
    try:
        first = next(iterator)
    except StopIteration:
        return None
    return functools.reduce(func, iterator, first)


def merge_bboxes(a: BoundingBox, b: BoundingBox) -> BoundingBox:
    """Smallest box containing both *a* and *b*."""
    return BoundingBox(
        min_x=min(a.min_x, b.min_x),
        min_y=min(a.min_y, b.min_y),
        max_x=max(a.max_x, b.max_x),
        max_y=max(a.max_y, b.max_y),
    )


def merge_bbox_iter(bboxes: Iterable[BoundingBox]) -> BoundingBox | None:
    """Merge a sequence of boxes into one; None for an empty sequence."""
    return fold_first(bboxes, merge_bboxes)


def polygon_to_bbox(value: dict) -> BoundingBox:
    """Bounding box of a GeoJSON Polygon value.

    Raises ValueError for any other geometry type.
    """
    polygon = geometry_value_to_polygon(value)
    if polygon is None:
        raise ValueError(f"Expected a Polygon geometry, got {value.get('type')!r}")
    return BoundingBox(*polygon.bounds)


def stretch_to_square(rect: BoundingBox) -> BoundingBox:
    """Grow the shorter side of *rect* around its center until width equals height."""
    cx, cy = rect.center
    half = max(rect.width, rect.height) / 2
    if rect.height < rect.width:
        return BoundingBox(rect.min_x, cy - half, rect.max_x, cy + half)
    return BoundingBox(cx - half, rect.min_y, cx + half, rect.max_y)


def add_margin(rect: BoundingBox, margin: float) -> BoundingBox:
    """Add *margin* to every side of *rect*."""
    return BoundingBox(
        rect.min_x - margin,
        rect.min_y - margin,
        rect.max_x + margin,
        rect.max_y + margin,
    )


def expand_to_size(
    rect: BoundingBox,
    size: float,
    crs: CoordinateSpace = CoordinateSpace.RIJKSDRIEHOEK,
) -> BoundingBox:
    """Square *rect* and pad it so width and height both equal *size*.

    Only defined for planar (Rijksdriehoek) rectangles; *size* is in meters.
    """
    if not CoordinateSpace(crs).is_planar:
        raise ValueError(f"expand_to_size needs planar coordinates, got {crs}")

    square = stretch_to_square(rect)
    margin = (size - square.height) / 2.0
    return add_margin(square, margin)


def bbox_to_linestring(bbox: BoundingBox) -> dict:
    """Closed GeoJSON LineString tracing the outline of *bbox*."""
    ring = box(*bbox.to_tuple()).exterior
    return {"type": "LineString", "coordinates": [list(c) for c in ring.coords]}


# ---------------------------------------------------------------------------
# shapely -> GeoJSON features
# ---------------------------------------------------------------------------

def _bare_feature(geometry) -> dict:
    """GeoJSON Feature without bbox, id or properties."""
    return {"type": "Feature", "geometry": mapping(geometry), "properties": None}


def points_to_geojson_multipoint(points: Iterable[Point | tuple[float, float]]) -> dict:
    return _bare_feature(MultiPoint(list(points)))


def polygons_to_geojson_multipolygon(polygons: Iterable[Polygon]) -> dict:
    return _bare_feature(MultiPolygon(list(polygons)))
