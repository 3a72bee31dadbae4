"""Projector Mapping

Piecewise-affine mapping of points, ROI polygons and binary masks
from camera (image) space to light-targeting device space.
"""

__version__ = "0.1.0"

# Errors
from projector_mapping.errors import (
    InvalidMaskDimensionsError,
    ProjectorMappingError,
    UnmappablePointError,
    UnsupportedShapeError,
)

# Geometry
from projector_mapping.geometry import AffineTransform, Polygon

# Mapping
from projector_mapping.mapping import (
    BatchFailurePolicy,
    CalibrationCell,
    CellMap,
    map_point,
    map_points,
    transform_mask,
    transform_polygon,
    transform_polygons,
)

__all__ = [
    "AffineTransform",
    "BatchFailurePolicy",
    "CalibrationCell",
    "CellMap",
    "InvalidMaskDimensionsError",
    "Polygon",
    "ProjectorMappingError",
    "UnmappablePointError",
    "UnsupportedShapeError",
    "map_point",
    "map_points",
    "transform_mask",
    "transform_polygon",
    "transform_polygons",
]
