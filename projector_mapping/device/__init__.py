"""Device-facing boundary: projection device port and display helpers."""

from projector_mapping.device.actions import (
    display_center_spot,
    display_image_spot,
    display_spot,
    is_within_range,
    transform_and_set_mask,
)
from projector_mapping.device.interfaces import ProjectionDevice

__all__ = [
    "ProjectionDevice",
    "display_center_spot",
    "display_image_spot",
    "display_spot",
    "is_within_range",
    "transform_and_set_mask",
]
