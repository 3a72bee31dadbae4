"""ROI shape normalization into plain vertex polygons."""

from projector_mapping.roi.shapes import (
    FreehandRoi,
    LineRoi,
    OvalRoi,
    PointRoi,
    PolygonRoi,
    RectangleRoi,
    RoiNormalizationResult,
    UnsupportedShape,
    ellipse_to_polygon,
    normalize_roi,
    normalize_rois,
    roi_from_dict,
)

__all__ = [
    "FreehandRoi",
    "LineRoi",
    "OvalRoi",
    "PointRoi",
    "PolygonRoi",
    "RectangleRoi",
    "RoiNormalizationResult",
    "UnsupportedShape",
    "ellipse_to_polygon",
    "normalize_roi",
    "normalize_rois",
    "roi_from_dict",
]
