"""Coordinate projection and polygon/bounding-box helpers. No I/O."""

from pdokapis.geometry.projection import (
    CoordinateSpace,
    bbox_wgs84_to_rijksdriehoek,
    coordinate_rijksdriehoek_to_wgs84,
    coordinate_wgs84_to_rijksdriehoek,
    project_point,
)
from pdokapis.geometry.shapes import (
    add_margin,
    bbox_to_linestring,
    expand_to_size,
    fold_first,
    geometry_value_to_polygon,
    merge_bbox_iter,
    merge_bboxes,
    points_to_geojson_multipoint,
    polygon_to_bbox,
    polygons_to_geojson_multipolygon,
    round_area,
    stretch_to_square,
    unsigned_area,
)

__all__ = [
    "CoordinateSpace",
    "add_margin",
    "bbox_to_linestring",
    "bbox_wgs84_to_rijksdriehoek",
    "coordinate_rijksdriehoek_to_wgs84",
    "coordinate_wgs84_to_rijksdriehoek",
    "expand_to_size",
    "fold_first",
    "geometry_value_to_polygon",
    "merge_bbox_iter",
    "merge_bboxes",
    "points_to_geojson_multipoint",
    "polygon_to_bbox",
    "polygons_to_geojson_multipolygon",
    "project_point",
    "round_area",
    "stretch_to_square",
    "unsigned_area",
]
