"""Piecewise-affine mapping from image space to device space.

- CellMap: calibration cells (polygon + affine transform)
- Point mapping with containment lookup and nearest-cell fallback
- ROI polygon and binary mask transformation
"""

from projector_mapping.mapping.cell_map import CalibrationCell, CellMap
from projector_mapping.mapping.mask_transformer import DEFAULT_ON_VALUE, transform_mask, transform_mask_image
from projector_mapping.mapping.point_mapper import PointMappingResult, locate_point, map_point, map_points
from projector_mapping.mapping.polygon_transformer import (
    BatchFailurePolicy,
    PolygonBatchResult,
    PolygonFailure,
    transform_polygon,
    transform_polygons,
)
from projector_mapping.mapping.rasterize import rasterize_polygons

__all__ = [
    "DEFAULT_ON_VALUE",
    "BatchFailurePolicy",
    "CalibrationCell",
    "CellMap",
    "PointMappingResult",
    "PolygonBatchResult",
    "PolygonFailure",
    "locate_point",
    "map_point",
    "map_points",
    "rasterize_polygons",
    "transform_mask",
    "transform_mask_image",
    "transform_polygon",
    "transform_polygons",
]
