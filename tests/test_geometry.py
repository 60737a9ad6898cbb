import math

import numpy as np
import pytest

from docscanner import InvalidPolygonError, Point, Quadrilateral, order_corners
from docscanner.geometry import edge_lengths, has_collinear_corners, has_negligible_area


def corners_of(quad):
    return [p.as_tuple() for p in quad.corners]


class TestOrderCorners:

    def test_upright_rectangle_in_any_order(self):
        pts = [Point(300, 400), Point(10, 20), Point(10, 400), Point(300, 20)]

        tl, tr, br, bl = order_corners(pts)

        assert (tl, tr, br, bl) == (Point(10, 20), Point(300, 20), Point(300, 400), Point(10, 400))

    def test_slightly_tilted_page(self):
        quad = Quadrilateral.from_points([(680, 540), (100, 120), (80, 560), (650, 90)])

        assert corners_of(quad) == [(100, 120), (650, 90), (680, 540), (80, 560)]

    def test_requires_four_points(self):
        with pytest.raises(InvalidPolygonError):
            order_corners([Point(0, 0), Point(1, 0), Point(1, 1)])

    def test_rotation_past_45_degrees_rotates_labels(self):
        # A square turned by 60 degrees: labels come from the vertical sort,
        # so TL is the leftmost corner rather than the page's own top-left.
        quad = Quadrilateral.from_points([(200, 100), (300, 273), (127, 373), (27, 200)])

        assert corners_of(quad) == [(27, 200), (200, 100), (300, 273), (127, 373)]

    def test_steep_rotation_swaps_width_and_height(self):
        theta = math.radians(80)
        u = np.array([math.cos(theta), math.sin(theta)])
        v = np.array([-math.sin(theta), math.cos(theta)])
        origin = np.array([300.0, 100.0])
        # Long side of 200 along u, short side of 50 along v
        pts = [origin, origin + 200 * u, origin + 200 * u + 50 * v, origin + 50 * v]

        quad = Quadrilateral.from_points(pts)
        bottom, top, right, left = edge_lengths(quad)

        assert quad.tr.as_tuple() == pytest.approx(tuple(origin))
        assert max(bottom, top) == pytest.approx(50, abs=1e-6)
        assert max(right, left) == pytest.approx(200, abs=1e-6)

    def test_vertical_ties_depend_on_input_order(self):
        # A square rotated by exactly 45 degrees has two corners at the same
        # height; the stable sort keeps whichever came first.
        first = Quadrilateral.from_points([(100, 50), (150, 100), (50, 100), (100, 150)])
        second = Quadrilateral.from_points([(100, 50), (50, 100), (150, 100), (100, 150)])

        assert corners_of(first) == [(100, 50), (150, 100), (100, 150), (50, 100)]
        assert corners_of(second) == [(50, 100), (100, 50), (150, 100), (100, 150)]

    def test_horizontal_tie_takes_earlier_point_as_left(self):
        tl, tr, _, _ = order_corners([Point(10, 5), Point(10, 0), Point(0, 20), Point(20, 20)])

        assert tl == Point(10, 0)
        assert tr == Point(10, 5)


class TestQuadrilateral:

    def test_from_flat_keeps_given_order(self):
        values = [1, 2, 30, 4, 35, 40, 0, 45]

        quad = Quadrilateral.from_flat(values)

        assert quad.to_flat() == [float(v) for v in values]

    def test_from_points_accepts_contour_array(self):
        contour = np.array([[[10, 10]], [[10, 90]], [[90, 90]], [[90, 10]]], dtype=np.int32)

        quad = Quadrilateral.from_points(contour)

        assert quad.tl == Point(10, 10)
        assert quad.br == Point(90, 90)

    @pytest.mark.parametrize("values", [
        [0, 0, 1, 0, 1, 1],
        [0, 0, 1, 0, 1, 1, 0, 1, 2],
        [],
    ])
    def test_from_flat_rejects_wrong_length(self, values):
        with pytest.raises(InvalidPolygonError):
            Quadrilateral.from_flat(values)

    def test_from_flat_rejects_non_numeric_and_nan(self):
        with pytest.raises(InvalidPolygonError):
            Quadrilateral.from_flat([0, 0, "a", 0, 1, 1, 0, 1])
        with pytest.raises(InvalidPolygonError):
            Quadrilateral.from_flat([0, 0, float("nan"), 0, 1, 1, 0, 1])

    def test_from_points_rejects_five_points(self):
        with pytest.raises(InvalidPolygonError):
            Quadrilateral.from_points([(0, 0), (1, 0), (1, 1), (0, 1), (0.5, 0.5)])

    def test_invalid_polygon_is_a_value_error(self):
        with pytest.raises(ValueError):
            Quadrilateral.from_flat([1, 2, 3])

    def test_to_array_shape_and_dtype(self):
        arr = Quadrilateral.from_flat([0, 0, 4, 0, 4, 3, 0, 3]).to_array()

        assert arr.shape == (4, 2)
        assert arr.dtype == np.float32

    def test_area(self):
        assert Quadrilateral.from_flat([0, 0, 4, 0, 4, 3, 0, 3]).area() == pytest.approx(12)

    def test_is_immutable(self):
        quad = Quadrilateral.from_flat([0, 0, 4, 0, 4, 3, 0, 3])
        with pytest.raises(AttributeError):
            quad.tl = Point(1, 1)


class TestCollinearity:

    def test_rectangle_is_not_collinear(self):
        assert not has_collinear_corners(Quadrilateral.from_flat([0, 0, 100, 0, 100, 50, 0, 50]))

    def test_three_collinear_corners(self):
        assert has_collinear_corners(Quadrilateral.from_flat([0, 0, 100, 0, 200, 0, 0, 100]))

    def test_coincident_corners(self):
        assert has_collinear_corners(Quadrilateral.from_flat([5, 5] * 4))

    def test_crossed_walk_has_negligible_area(self):
        quad = Quadrilateral.from_flat([0, 0, 100, 100, 100, 0, 0, 100])

        assert not has_collinear_corners(quad)
        assert has_negligible_area(quad)

    def test_rectangle_has_area(self):
        assert not has_negligible_area(Quadrilateral.from_flat([0, 0, 1000, 0, 1000, 40, 0, 40]))
