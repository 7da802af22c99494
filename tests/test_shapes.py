import math

from scanpoints import SpiralModel, LissajousModel, BoundingBox, NOT_INDEXED


def test_spiral(service):
    gen = service.create_generator(SpiralModel('x', 'y', BoundingBox(-1, -1, 2, 2), scale=0.5))
    points = list(gen)
    assert gen.total_count() == len(points) == 25
    radius = math.sqrt(2)
    for point in points:
        assert math.hypot(point['x'], point['y']) <= radius, f'Point outside spiral radius {point=}'
        assert point.indices == (NOT_INDEXED, NOT_INDEXED)

    distances = [math.hypot(p['x'], p['y']) for p in points]
    assert distances == sorted(distances), 'Spiral must move outwards'


def test_lissajous(service):
    model = LissajousModel('x', 'y', BoundingBox(0, 0, 4, 2), a=3, b=2, delta=0, points=100)
    gen = service.create_generator(model)
    points = list(gen)
    assert gen.total_count() == len(points) == 100
    assert (points[0]['x'], points[0]['y']) == (2, 1)
    for point in points:
        assert -1e-9 <= point['x'] <= 4 + 1e-9
        assert -1e-9 <= point['y'] <= 2 + 1e-9
