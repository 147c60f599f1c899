"""
Geometric utilities and the PolyLine type shared by lanes, turns and vehicle bodies.
"""

import math
from typing import List, Optional, Sequence, Tuple

import config

Point = Tuple[float, float]


def distance(a: Point, b: Point) -> float:
    """Euclidean distance between two points"""
    return math.hypot(b[0] - a[0], b[1] - a[1])


def normalize_vector(vec: Tuple[float, float]) -> Tuple[float, float]:
    """Normalize a 2D vector"""
    x, y = vec
    length = math.sqrt(x * x + y * y)
    if length == 0:
        return (0, 0)
    return (x / length, y / length)


def offset_line(start: Point, end: Point, dist: float) -> Tuple[Point, Point]:
    """
    Offset a line segment perpendicular to its direction.

    :param start: Start point (x, y)
    :param end: End point (x, y)
    :param dist: Offset distance (positive = left, negative = right)
    :return: New start and end points
    """
    dx, dy = normalize_vector((end[0] - start[0], end[1] - start[1]))
    # Perpendicular, rotated 90° counterclockwise
    ox, oy = -dy * dist, dx * dist
    return (start[0] + ox, start[1] + oy), (end[0] + ox, end[1] + oy)


def interpolate_points(start: Point, end: Point, t: float) -> Point:
    """
    Interpolate between two points.

    :param start: Start point
    :param end: End point
    :param t: Interpolation factor (0 to 1)
    :return: Interpolated point
    """
    x = start[0] + t * (end[0] - start[0])
    y = start[1] + t * (end[1] - start[1])
    return (x, y)


def quadratic_bezier(start: Point, control: Point, end: Point, resolution: int) -> List[Point]:
    """
    Samples a quadratic Bézier curve with de Casteljau's construction.

    :param start: First point of the curve
    :param control: Control point pulling the curve
    :param end: Last point of the curve
    :param resolution: Number of intervals; resolution + 1 points are returned
    """
    resolution = max(1, resolution)
    points = []
    for i in range(resolution + 1):
        t = i / resolution
        a = interpolate_points(start, control, t)
        b = interpolate_points(control, end, t)
        points.append(interpolate_points(a, b, t))
    return points


class PolyLine:
    """
    An ordered sequence of at least two distinct points.

    Consecutive duplicate points are dropped on construction, so a PolyLine
    always has a positive length.
    """

    def __init__(self, points: Sequence[Point]):
        cleaned: List[Point] = []
        for pt in points:
            pt = (float(pt[0]), float(pt[1]))
            if cleaned and distance(cleaned[-1], pt) <= config.EPSILON:
                continue
            cleaned.append(pt)

        if len(cleaned) < 2:
            raise ValueError(f"A PolyLine needs at least two distinct points, got {list(points)}")

        self._points = cleaned
        self.length = sum(distance(a, b) for a, b in zip(cleaned, cleaned[1:]))

    @property
    def points(self) -> List[Point]:
        return list(self._points)

    def first_pt(self) -> Point:
        return self._points[0]

    def last_pt(self) -> Point:
        return self._points[-1]

    def dist_along(self, dist: float) -> Tuple[Point, float]:
        """
        Finds the point at a given distance from the start.

        :param dist: Distance along the line, between 0 and its length
        :return: The point and the heading (radians) of the segment it lies on
        :raises ValueError: If dist is outside the line
        """
        if dist < -config.EPSILON or dist > self.length + config.EPSILON:
            raise ValueError(f"Distance {dist} is outside of a PolyLine of length {self.length}")
        dist = min(max(dist, 0.0), self.length)

        dist_so_far = 0.0
        for a, b in zip(self._points, self._points[1:]):
            seg_len = distance(a, b)
            angle = math.atan2(b[1] - a[1], b[0] - a[0])
            if dist <= dist_so_far + seg_len:
                return interpolate_points(a, b, (dist - dist_so_far) / seg_len), angle
            dist_so_far += seg_len

        # Rounding left us past the last segment.
        a, b = self._points[-2], self._points[-1]
        return b, math.atan2(b[1] - a[1], b[0] - a[0])

    def slice(self, start: float, end: float) -> Optional["PolyLine"]:
        """
        Returns the part of the line between two distances from its start.

        None is returned for zero-length or out-of-range requests, which callers
        treat as an empty contribution.
        """
        if start < -config.EPSILON or end > self.length + config.EPSILON:
            return None
        if end - start <= config.EPSILON:
            return None
        start = max(start, 0.0)
        end = min(end, self.length)

        result = [self.dist_along(start)[0]]
        dist_so_far = 0.0
        for a, b in zip(self._points, self._points[1:]):
            dist_so_far += distance(a, b)
            if start < dist_so_far < end:
                result.append(b)
        result.append(self.dist_along(end)[0])
        return PolyLine(result)

    @staticmethod
    def append(first: List[Point], second: List[Point]) -> List[Point]:
        """
        Concatenates two point lists, `first` being spatially before `second`.

        The shared joint point is kept only once.
        """
        if first and second and distance(first[-1], second[0]) <= config.EPSILON:
            return first + second[1:]
        return first + second

    def __eq__(self, other):
        if not isinstance(other, PolyLine):
            return NotImplemented
        return self._points == other._points

    def __repr__(self):
        return f"PolyLine({self._points!r})"
