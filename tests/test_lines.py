import math

import pytest

from scanpoints import OneDEqualSpacingModel, OneDStepModel, BoundingLine, InvalidModel


def test_equal_spacing_inset(service):
    model = OneDEqualSpacingModel('x', 'y', BoundingLine(0, 0, 10, 0), count=5)
    points = list(service.create_generator(model))
    assert [p['x'] for p in points] == [1, 3, 5, 7, 9], 'Points must be half a step in from the ends'
    assert all(p['y'] == 0 for p in points)
    assert points[0].names == ('y', 'x')


def test_equal_spacing_angle(service):
    model = OneDEqualSpacingModel('x', 'y', BoundingLine(1, 2, 4, math.pi / 2), count=2)
    points = list(service.create_generator(model))
    assert [p['x'] for p in points] == pytest.approx([1, 1])
    assert [p['y'] for p in points] == pytest.approx([3, 5])


def test_stepped_line(service):
    model = OneDStepModel('x', 'y', BoundingLine(0, 0, 5, math.pi / 4), step=2)
    gen = service.create_generator(model)
    points = list(gen)
    assert gen.total_count() == 3
    distances = [math.hypot(p['x'], p['y']) for p in points]
    assert distances == pytest.approx([0, 2, 4]), 'Stepped line starts at the line origin'
    assert [p.index('x') for p in points] == [0, 1, 2]


def test_line_requires_bounds(service):
    with pytest.raises(InvalidModel):
        service.create_generator(OneDStepModel('x', 'y', None, step=1))
