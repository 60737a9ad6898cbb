"""Points, quadrilaterals and corner ordering."""

import math
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

import numpy as np

from .exceptions import InvalidPolygonError


@dataclass(frozen=True)
class Point:
    """A location in image space (x to the right, y downwards)."""

    x: float
    y: float

    def distance_to(self, other: "Point") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


def _to_point(value) -> Point:
    if isinstance(value, Point):
        return value
    try:
        x, y = value
        point = Point(float(x), float(y))
    except (TypeError, ValueError):
        raise InvalidPolygonError(f"Not a coordinate pair: {value!r}") from None
    if not (math.isfinite(point.x) and math.isfinite(point.y)):
        raise InvalidPolygonError(f"Coordinates must be finite: {value!r}")
    return point


def order_corners(points: Sequence[Point]) -> Tuple[Point, Point, Point, Point]:
    """Label four points as top-left, top-right, bottom-right, bottom-left.

    Points are sorted by y; the first two form the top pair and the last two
    the bottom pair. Within each pair the smaller x is the left corner.
    Sorting is stable, so points with equal y keep their input order, and on
    an x tie the earlier point of the pair is taken as the left one.

    This assumes a roughly upright page. Past about 45 degrees of rotation
    the labels rotate with the page, and some rotated shapes produce a
    crossed labeling.

    Args:
        points: Exactly four points in any order.

    Returns:
        Tuple of (tl, tr, br, bl).
    """
    if len(points) != 4:
        raise InvalidPolygonError(f"Expected 4 points, got {len(points)}")

    by_y = sorted(points, key=lambda p: p.y)
    top = by_y[:2]
    bottom = by_y[2:]

    tl, tr = (top[1], top[0]) if top[1].x < top[0].x else (top[0], top[1])
    bl, br = (bottom[1], bottom[0]) if bottom[1].x < bottom[0].x else (bottom[0], bottom[1])
    return tl, tr, br, bl


@dataclass(frozen=True)
class Quadrilateral:
    """Four labeled document corners.

    Use ``from_points`` for an unordered set of corners (for example the
    vertices of an approximated contour) and ``from_flat`` for eight
    coordinates that are already in TL, TR, BR, BL order.
    """

    tl: Point
    tr: Point
    br: Point
    bl: Point

    @classmethod
    def from_points(cls, points: Iterable) -> "Quadrilateral":
        if isinstance(points, np.ndarray):
            points = points.reshape(-1, 2).tolist()
        pts = [_to_point(p) for p in points]
        return cls(*order_corners(pts))

    @classmethod
    def from_flat(cls, values: Sequence[float]) -> "Quadrilateral":
        if isinstance(values, np.ndarray):
            values = values.ravel().tolist()
        try:
            values = list(values)
        except TypeError:
            raise InvalidPolygonError("Polygon must be a sequence of 8 numbers") from None
        if len(values) != 8:
            raise InvalidPolygonError(
                f"Polygon must contain 8 values (4 points), got {len(values)}"
            )
        corners = [_to_point(values[i:i + 2]) for i in range(0, 8, 2)]
        return cls(*corners)

    @property
    def corners(self) -> Tuple[Point, Point, Point, Point]:
        return (self.tl, self.tr, self.br, self.bl)

    def to_array(self) -> np.ndarray:
        """Corners as a (4, 2) float32 array in TL, TR, BR, BL order."""
        return np.array([p.as_tuple() for p in self.corners], dtype=np.float32)

    def to_flat(self) -> List[float]:
        return [c for p in self.corners for c in p.as_tuple()]

    def area(self) -> float:
        """Enclosed area by the shoelace formula, walking TL, TR, BR, BL."""
        pts = self.corners
        total = 0.0
        for i in range(4):
            a, b = pts[i], pts[(i + 1) % 4]
            total += a.x * b.y - b.x * a.y
        return abs(total) / 2.0


def edge_lengths(quad: Quadrilateral) -> Tuple[float, float, float, float]:
    """Lengths of the bottom, top, right and left edges."""
    return (
        quad.br.distance_to(quad.bl),
        quad.tr.distance_to(quad.tl),
        quad.tr.distance_to(quad.br),
        quad.tl.distance_to(quad.bl),
    )


def _span(quad: Quadrilateral) -> float:
    """Longest distance between any two corners."""
    pts = quad.corners
    return max(
        pts[i].distance_to(pts[j]) for i in range(4) for j in range(i + 1, 4)
    )


def has_collinear_corners(quad: Quadrilateral, tolerance: float = 1e-3) -> bool:
    """True if any three corners lie on a line.

    Each triangle's doubled area is compared against ``tolerance`` times the
    squared longest corner distance, so the test does not depend on the
    scale of the image.
    """
    scale = _span(quad)
    if scale == 0:
        return True
    limit = tolerance * scale * scale
    pts = quad.corners
    for skip in range(4):
        a, b, c = [p for i, p in enumerate(pts) if i != skip]
        cross = (b.x - a.x) * (c.y - a.y) - (b.y - a.y) * (c.x - a.x)
        if abs(cross) <= limit:
            return True
    return False


def has_negligible_area(quad: Quadrilateral, tolerance: float = 1e-3) -> bool:
    """True if the TL, TR, BR, BL walk encloses almost no area.

    Catches self-crossing corner orders whose lobes cancel out, which the
    collinearity test misses.
    """
    scale = _span(quad)
    return quad.area() <= tolerance * scale * scale / 2.0
