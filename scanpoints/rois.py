"""
Regions of interest. All regions are expressed in axis coordinates, x being the fast axis and
y the slow axis of the model they constrain.
"""
import math
from dataclasses import dataclass
from typing import Tuple

import numpy
from zope.interface import implementer

from .interfaces import IROI, IPointContainer, Registry
from .models import BoundingBox, Serializable, serializable

# distance from a linear region within which a point counts as on the line
LINE_TOLERANCE = 1e-9


def _rotate(x, y, angle):
    c, s = math.cos(angle), math.sin(angle)
    return x * c - y * s, x * s + y * c


def _bounds_of(points):
    points = numpy.asarray(points, dtype=float)
    lo = points.min(axis=0)
    hi = points.max(axis=0)
    return BoundingBox(float(lo[0]), float(lo[1]), float(hi[0] - lo[0]), float(hi[1] - lo[1]))


@implementer(IROI)
class AbstractROI(Serializable):

    def contains_point(self, x, y):
        raise NotImplementedError('Must be implemented by subclasses')

    def bounds(self):
        raise NotImplementedError('Must be implemented by subclasses')


@serializable('rectangular')
@dataclass(frozen=True)
class RectangularROI(AbstractROI):
    """
    Rectangle with a corner at origin, rotated by angle radians about the origin.
    """
    origin: Tuple[float, float] = (0.0, 0.0)
    width: float = 1.0
    height: float = 1.0
    angle: float = 0.0

    required = ('origin', 'width', 'height')

    def corners(self):
        ox, oy = self.origin
        return [
            (ox + dx, oy + dy) for dx, dy in (
                _rotate(u, v, self.angle)
                for u, v in ((0, 0), (self.width, 0), (self.width, self.height), (0, self.height))
            )
        ]

    def contains_point(self, x, y):
        u, v = _rotate(x - self.origin[0], y - self.origin[1], -self.angle)
        return (
            min(0.0, self.width) <= u <= max(0.0, self.width) and
            min(0.0, self.height) <= v <= max(0.0, self.height)
        )

    def bounds(self):
        return _bounds_of(self.corners())


@serializable('linear')
@dataclass(frozen=True)
class LinearROI(AbstractROI):
    """
    Line segment from start, of the given length and angle in radians.
    """
    start: Tuple[float, float] = (0.0, 0.0)
    length: float = 1.0
    angle: float = 0.0

    required = ('start', 'length', 'angle')

    @property
    def end(self):
        dx, dy = _rotate(self.length, 0.0, self.angle)
        return self.start[0] + dx, self.start[1] + dy

    def contains_point(self, x, y):
        u, v = _rotate(x - self.start[0], y - self.start[1], -self.angle)
        return abs(v) <= LINE_TOLERANCE and -LINE_TOLERANCE <= u <= self.length + LINE_TOLERANCE

    def bounds(self):
        return _bounds_of([self.start, self.end])


@serializable('elliptical')
@dataclass(frozen=True)
class EllipticalROI(AbstractROI):
    """
    Ellipse with semi-axes (a, b) about centre, the a semi-axis rotated by angle radians.
    """
    centre: Tuple[float, float] = (0.0, 0.0)
    semi_axes: Tuple[float, float] = (1.0, 1.0)
    angle: float = 0.0

    required = ('centre', 'semi_axes')

    def contains_point(self, x, y):
        a, b = self.semi_axes
        u, v = _rotate(x - self.centre[0], y - self.centre[1], -self.angle)
        return (u / a) ** 2 + (v / b) ** 2 <= 1.0

    def bounds(self):
        a, b = self.semi_axes
        c, s = math.cos(self.angle), math.sin(self.angle)
        half_width = math.hypot(a * c, b * s)
        half_height = math.hypot(a * s, b * c)
        cx, cy = self.centre
        return BoundingBox(cx - half_width, cy - half_height, 2 * half_width, 2 * half_height)


@serializable('circular')
@dataclass(frozen=True)
class CircularROI(AbstractROI):
    centre: Tuple[float, float] = (0.0, 0.0)
    radius: float = 1.0

    required = ('centre', 'radius')

    def contains_point(self, x, y):
        return math.hypot(x - self.centre[0], y - self.centre[1]) <= self.radius

    def bounds(self):
        cx, cy = self.centre
        return BoundingBox(cx - self.radius, cy - self.radius, 2 * self.radius, 2 * self.radius)


@serializable('polygonal')
@dataclass(frozen=True)
class PolygonalROI(AbstractROI):
    """
    Closed polygon through the given vertices.
    """
    points: Tuple[Tuple[float, float], ...] = ()

    required = ('points',)

    def __post_init__(self):
        object.__setattr__(self, 'points', tuple(tuple(float(v) for v in point) for point in self.points))

    def contains_point(self, x, y):
        # even-odd ray casting
        inside = False
        count = len(self.points)
        for i in range(count):
            x1, y1 = self.points[i]
            x2, y2 = self.points[(i + 1) % count]
            if (y1 > y) != (y2 > y):
                cross = x1 + (y - y1) * (x2 - x1) / (y2 - y1)
                if x < cross:
                    inside = not inside
        return inside

    def bounds(self):
        return _bounds_of(self.points)


@implementer(IPointContainer)
class RegionContainer(object):
    """
    Adapts a region of interest into a position filter.

    The region is assumed to be in axis coordinates. Two dimensional models declare the slow
    axis first, so the x coordinate of the region is read from the second axis of the position
    and y from the first. Positions with fewer than two axes are not constrained.

    :param roi: region of interest
    """

    def __init__(self, roi):
        self.roi = roi

    def __call__(self, position):
        if len(position.names) < 2:
            return True
        y_name, x_name = position.names[0], position.names[1]
        return self.roi.contains_point(position[x_name], position[y_name])

    def __repr__(self):
        return '<RegionContainer: {!r}>'.format(self.roi)


@implementer(IPointContainer)
class PredicateContainer(object):
    """
    Wraps a plain callable taking a position and returning a bool
    """

    def __init__(self, predicate):
        self.predicate = predicate

    def __call__(self, position):
        return bool(self.predicate(position))


Registry.add_adapter([IROI], IPointContainer, '', RegionContainer)
