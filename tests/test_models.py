import math

import msgpack
import pytest

from scanpoints import (
    StepModel, CollatedStepModel, MultiStepModel, ArrayModel, RepeatedPointModel, StaticModel,
    GridModel, RasterModel, RandomOffsetGridModel, OneDEqualSpacingModel, OneDStepModel,
    SpiralModel, LissajousModel, CompoundModel, ScanRegion, BoundingBox, BoundingLine, Position,
    RectangularROI, LinearROI, EllipticalROI, CircularROI, PolygonalROI, InvalidModel,
    to_dict, from_dict
)
from scanpoints import codec

BOX = BoundingBox(0, 1, 2, 3)

OBJECTS = [
    StepModel('x', 0, 5, 0.5, exposure_time=0.1),
    CollatedStepModel(('a', 'b'), 0, 1, 0.5),
    MultiStepModel('x', [StepModel('x', 0, 1, 0.5), StepModel('x', 3, 4, 1)]),
    ArrayModel('x', [1, 2.5, -3]),
    RepeatedPointModel('x', 2.0, 4),
    StaticModel(3),
    GridModel('x', 'y', BOX, 4, 3, snake=True),
    GridModel('x', 'y', None, 4, 3),
    RasterModel('x', 'y', BOX, 0.5, 0.75),
    RandomOffsetGridModel('x', 'y', BOX, 4, 3, seed=5, offset=10),
    OneDEqualSpacingModel('x', 'y', BoundingLine(0, 0, 5, 0.3), count=7),
    OneDStepModel('x', 'y', BoundingLine(1, 1, 2, 0), step=0.5),
    SpiralModel('x', 'y', BOX, scale=0.3),
    LissajousModel('x', 'y', BOX, a=1, b=4, delta=math.pi / 2, points=50),
    RectangularROI((1, 2), 3, 4, 0.5),
    LinearROI((0, 0), 2, 1),
    EllipticalROI((0, 0), (2, 1), 0.2),
    CircularROI((1, 1), 2),
    PolygonalROI([(0, 0), (4, 0), (0, 4)]),
    ScanRegion(CircularROI((1, 1), 2), ('x', 'y')),
    CompoundModel(
        models=(StepModel('z', 0, 1, 0.5), GridModel('x', 'y', None, 2, 2)),
        regions=(ScanRegion(RectangularROI((0, 0), 1, 1)),),
    ),
]


@pytest.mark.parametrize("obj", OBJECTS, ids=lambda obj: obj.kind)
def test_dict_conversion(obj):
    data = to_dict(obj)
    assert data['type'] == obj.kind
    restored = from_dict(data)
    assert restored == obj, f'{obj.kind}: {restored=} != {obj=}'


@pytest.mark.parametrize("obj", OBJECTS, ids=lambda obj: obj.kind)
def test_msgpack(obj):
    assert codec.decode(codec.encode(obj)) == obj


def test_wire_names():
    data = to_dict(GridModel('x', 'y', BOX, 4, 3))
    assert data['bounding_box'] == {
        'fastAxisStart': 0, 'slowAxisStart': 1, 'fastAxisLength': 2, 'slowAxisLength': 3
    }
    data = to_dict(OneDStepModel('x', 'y', BoundingLine(1, 2, 3, 0), step=1))
    assert data['bounding_line'] == {'xStart': 1, 'yStart': 2, 'length': 3, 'angle': 0}


def test_unknown_fields_ignored():
    model = from_dict({'type': 'step', 'axis': 'x', 'start': 0, 'stop': 1, 'step': 0.5, 'units': 'mm'})
    assert model == StepModel('x', 0, 1, 0.5)


def test_optional_fields():
    model = from_dict({'type': 'grid', 'fast_axis': 'x', 'slow_axis': 'y', 'fast_count': 2, 'slow_count': 3})
    assert model.bounding_box is None
    assert model.snake is False
    assert model.exposure_time == 0.0


@pytest.mark.parametrize(
    "data,description",
    [
        ({'type': 'step', 'axis': 'x', 'start': 0}, "Missing fields"),
        ({'type': 'helix', 'axis': 'x'}, "Unknown type"),
        ({'axis': 'x'}, "Missing type"),
        ([1, 2, 3], "Not a dictionary"),
        ({'type': 'grid', 'fast_axis': 'x', 'slow_axis': 'y', 'fast_count': 2, 'slow_count': 3,
          'bounding_box': {'fastAxisStart': 0}}, "Incomplete bounding box"),
        ({'type': 'array', 'axis': 'x', 'values': ['one']}, "Bad value"),
    ],
)
def test_invalid_dicts(data, description):
    with pytest.raises(InvalidModel):
        from_dict(data)


def test_models_are_immutable():
    model = StepModel('x', 0, 1, 0.5)
    with pytest.raises(AttributeError):
        model.start = 2


def test_compound_model_axes():
    model = CompoundModel(models=(StepModel('z', 0, 1, 1, exposure_time=1), GridModel('x', 'y', BOX, 2, 2, exposure_time=2)))
    assert model.axes == ('z', 'y', 'x')
    assert model.exposure_time == 2


def test_position():
    position = Position(('y', 'x'), (1.5, 2.5), (1, 2), step_index=7, exposure_time=0.2)
    assert position['x'] == 2.5
    assert position.index('y') == 1
    assert 'x' in position and 'z' not in position
    assert position.get('z', 3) == 3
    assert list(position) == ['y', 'x']
    assert dict(position.items()) == {'y': 1.5, 'x': 2.5}
    assert Position(('x',), (1,)).indices == (-1,)
    with pytest.raises(ValueError):
        Position(('x', 'y'), (1,))


def test_position_codec():
    positions = [Position(('y', 'x'), (i / 2, i * 2.0), (i, i), step_index=i, exposure_time=0.1) for i in range(5)]
    assert codec.decode(codec.encode(positions[3])) == positions[3]
    assert list(codec.decode_positions(codec.encode_positions(positions))) == positions


def test_decode_garbage():
    with pytest.raises(InvalidModel):
        codec.decode(msgpack.packb([1, 2, 3]))
