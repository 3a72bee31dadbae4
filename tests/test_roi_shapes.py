"""Unit tests for ROI shape normalization."""

from __future__ import annotations

import pytest

from projector_mapping.errors import UnsupportedShapeError
from projector_mapping.roi import (
    FreehandRoi,
    LineRoi,
    OvalRoi,
    PointRoi,
    PolygonRoi,
    RectangleRoi,
    ellipse_to_polygon,
    normalize_roi,
    normalize_rois,
    roi_from_dict,
)


class TestNormalizeRoi:
    """normalize_roi のテスト"""

    def test_rectangle_becomes_four_vertices(self):
        polygons = normalize_roi(RectangleRoi(x=0, y=0, width=10, height=10))
        assert len(polygons) == 1
        assert polygons[0].to_list() == [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)]

    def test_point_cluster_is_split(self):
        """点ROIのクラスタは1点ずつのポリゴンになる"""
        polygons = normalize_roi(PointRoi(points=[(1, 2), (3, 4), (5, 6)]))
        assert [p.to_list() for p in polygons] == [[(1.0, 2.0)], [(3.0, 4.0)], [(5.0, 6.0)]]

    def test_polygon_and_freehand_keep_vertices(self):
        vertices = [(0, 0), (10, 0), (5, 8)]
        assert normalize_roi(PolygonRoi(vertices))[0].to_list() == [(0.0, 0.0), (10.0, 0.0), (5.0, 8.0)]
        assert normalize_roi(FreehandRoi(vertices))[0].to_list() == [(0.0, 0.0), (10.0, 0.0), (5.0, 8.0)]

    def test_line_is_unsupported(self):
        assert normalize_roi(LineRoi(start=(0, 0), end=(10, 10))) is None

    def test_unknown_object_is_unsupported(self):
        assert normalize_roi("not a roi") is None


class TestEllipseToPolygon:
    """楕円近似のテスト"""

    def test_bounds_follow_bounding_box(self):
        polygon = ellipse_to_polygon(OvalRoi(x=0, y=0, width=20, height=10))
        x0, y0, x1, y1 = polygon.bounds()
        assert (x0, y0, x1, y1) == pytest.approx((0, 0, 20, 10), abs=1)
        assert polygon.contains((10, 5))

    def test_closing_vertex_removed(self):
        polygon = ellipse_to_polygon(OvalRoi(x=0, y=0, width=200, height=100))
        assert len(polygon) >= 3
        assert polygon.to_list()[0] != polygon.to_list()[-1]

    def test_coarser_step_gives_fewer_vertices(self):
        oval = OvalRoi(x=0, y=0, width=200, height=100)
        assert len(ellipse_to_polygon(oval, 30)) < len(ellipse_to_polygon(oval, 5))

    def test_non_positive_size(self):
        with pytest.raises(ValueError):
            ellipse_to_polygon(OvalRoi(x=0, y=0, width=0, height=10))


class TestNormalizeRois:
    """normalize_rois のテスト"""

    def test_mixed_shapes(self):
        rois = [
            RectangleRoi(0, 0, 10, 10),
            LineRoi((0, 0), (5, 5)),
            PointRoi([(1, 1), (2, 2)]),
        ]
        result = normalize_rois(rois)

        assert len(result.polygons) == 3
        assert result.source_indices == [0, 2, 2]
        assert [u.index for u in result.unsupported] == [1]
        assert result.unsupported[0].shape_type == "LineRoi"
        assert not result.is_complete

    def test_raise_for_unsupported(self):
        result = normalize_rois([LineRoi((0, 0), (5, 5))])
        with pytest.raises(UnsupportedShapeError) as exc_info:
            result.raise_for_unsupported()
        assert exc_info.value.shape_type == "LineRoi"

    def test_complete_result_does_not_raise(self):
        result = normalize_rois([RectangleRoi(0, 0, 1, 1)])
        assert result.is_complete
        result.raise_for_unsupported()

    def test_invalid_oval_reported_as_unsupported(self):
        result = normalize_rois([OvalRoi(0, 0, -1, 5)])
        assert result.polygons == []
        assert [u.shape_type for u in result.unsupported] == ["OvalRoi"]


class TestRoiFromDict:
    """roi_from_dict のテスト"""

    def test_rectangle(self):
        roi = roi_from_dict({"type": "rectangle", "x": 1, "y": 2, "width": 3, "height": 4, "name": "a"})
        assert roi == RectangleRoi(1, 2, 3, 4, "a")

    def test_point_list_converted_to_tuples(self):
        roi = roi_from_dict({"type": "Point", "points": [[3, 4], [5, 6]]})
        assert roi == PointRoi(points=[(3, 4), (5, 6)])

    def test_line(self):
        roi = roi_from_dict({"type": "line", "start": [0, 0], "end": [1, 1]})
        assert roi == LineRoi((0, 0), (1, 1))

    def test_missing_type(self):
        with pytest.raises(ValueError, match="type"):
            roi_from_dict({"x": 0})

    def test_unknown_type(self):
        with pytest.raises(ValueError, match="未知"):
            roi_from_dict({"type": "spline"})

    def test_missing_field(self):
        with pytest.raises(ValueError, match="rectangle"):
            roi_from_dict({"type": "rectangle", "x": 0})
