"""Geometry primitives: polygons and 2D affine transforms."""

from projector_mapping.geometry.affine import AffineTransform
from projector_mapping.geometry.polygon import Polygon

__all__ = [
    "AffineTransform",
    "Polygon",
]
