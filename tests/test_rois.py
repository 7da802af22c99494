import math

import pytest

from scanpoints import (
    BoundingBox, RectangularROI, LinearROI, EllipticalROI, CircularROI, PolygonalROI
)


def approx_box(box):
    return pytest.approx((box.fast_start, box.slow_start, box.fast_length, box.slow_length), abs=1e-12)


@pytest.mark.parametrize(
    "roi,inside,outside,bounds,description",
    [
        (RectangularROI((0, 0), 2, 1), [(0, 0), (1, 0.5), (2, 1)], [(2.1, 0.5), (1, -0.1)],
         (0, 0, 2, 1), "Rectangle"),
        (RectangularROI((0, 0), 2, 1, math.pi / 2), [(-0.5, 1.5)], [(0.5, 0.5)],
         (-1, 0, 1, 2), "Rotated rectangle"),
        (LinearROI((0, 0), 2, 0), [(1, 0), (2, 0)], [(1, 0.1), (2.5, 0)],
         (0, 0, 2, 0), "Line"),
        (EllipticalROI((0, 0), (2, 1)), [(1.9, 0), (0, 0.9)], [(0, 1.1), (1.5, 0.9)],
         (-2, -1, 4, 2), "Ellipse"),
        (EllipticalROI((0, 0), (2, 1), math.pi / 2), [(0, 1.9)], [(1.5, 0)],
         (-1, -2, 2, 4), "Rotated ellipse"),
        (CircularROI((1, 1), 1), [(1.5, 1.5), (2, 1)], [(0, 0)],
         (0, 0, 2, 2), "Circle"),
        (PolygonalROI([(0, 0), (4, 0), (0, 4)]), [(1, 1), (0.5, 3)], [(3, 3), (-1, 1)],
         (0, 0, 4, 4), "Triangle"),
    ],
)
def test_rois(roi, inside, outside, bounds, description):
    for x, y in inside:
        assert roi.contains_point(x, y), f'{description}: ({x}, {y}) should be inside'
    for x, y in outside:
        assert not roi.contains_point(x, y), f'{description}: ({x}, {y}) should be outside'
    assert approx_box(roi.bounds()) == bounds, f'{description}: {roi.bounds()=} != {bounds=}'


def test_line_end():
    assert LinearROI((1, 1), 2, math.pi / 2).end == pytest.approx((1, 3))


def test_box_union():
    box = BoundingBox(0, 0, 1, 1).union(BoundingBox(2, -1, 1, 1))
    assert box == BoundingBox(0, -1, 3, 2)
    assert box.contains(1.5, 0.5)
    assert not box.contains(3.5, 0.5)
    assert box.centre == (1.5, 0)


def test_negative_box_union():
    box = BoundingBox(2, 2, -2, -2).union(BoundingBox(1, 1, 2, 2))
    assert box == BoundingBox(0, 0, 3, 3)
