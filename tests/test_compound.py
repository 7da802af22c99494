import pytest

from scanpoints import (
    StepModel, GridModel, StaticModel, CompoundModel, ScanRegion, BoundingBox, RectangularROI,
    AxisCollision, GeneratorError
)


def test_nesting_order(service):
    outer = service.create_generator(StepModel('y', 0, 1, 1))
    inner = service.create_generator(StepModel('x', 0, 2, 1))
    gen = service.create_compound_generator(outer, inner)
    points = list(gen)
    assert gen.total_count() == 6
    assert [(p['y'], p['x']) for p in points] == [(0, 0), (0, 1), (0, 2), (1, 0), (1, 1), (1, 2)]
    assert [p.step_index for p in points] == list(range(6))
    assert [p.indices for p in points][:4] == [(0, 0), (0, 1), (0, 2), (1, 0)]
    assert all(p.names == ('y', 'x') for p in points)


def test_total_is_product(service):
    gen = service.create_compound_generator(
        service.create_generator(StepModel('z', 0, 3, 1)),
        service.create_generator(GridModel('x', 'y', BoundingBox(0, 0, 1, 1), 3, 2)),
        service.create_generator(StaticModel(2)),
    )
    assert gen.total_count() == 4 * 6 * 2
    assert len(list(gen)) == 48


def test_gated_inner_indices(service):
    grid = GridModel('x', 'y', BoundingBox(0, 0, 3, 2), fast_count=3, slow_count=2, snake=True)
    gen = service.create_compound_generator(
        service.create_generator(StepModel('z', 0, 1, 1)),
        service.create_generator(grid, [RectangularROI((1, 0), 2, 1)]),
    )
    points = list(gen)
    assert gen.total_count() == 12
    assert [p.step_index for p in points] == [1, 2, 7, 8], f'Wrong flat indices {points=}'
    assert [p['z'] for p in points] == [0, 0, 1, 1]


def test_innermost_exposure(service):
    gen = service.create_compound_generator(
        service.create_generator(StepModel('y', 0, 1, 1, exposure_time=0.5)),
        service.create_generator(StepModel('x', 0, 1, 1, exposure_time=0.1)),
    )
    assert all(p.exposure_time == 0.1 for p in gen)
    assert gen.model.exposure_time == 0.1


def test_axis_collision(service):
    with pytest.raises(AxisCollision):
        service.create_compound_generator(
            service.create_generator(StepModel('x', 0, 1, 1)),
            service.create_generator(GridModel('x', 'y', BoundingBox(0, 0, 1, 1), 2, 2)),
        )


def test_empty_compound(service):
    with pytest.raises(GeneratorError):
        service.create_compound_generator()


def test_inner_generators_reusable(service):
    outer = service.create_generator(StepModel('y', 0, 1, 1))
    inner = service.create_generator(StepModel('x', 0, 2, 1))
    first = list(service.create_compound_generator(outer, inner))
    second = list(service.create_compound_generator(outer, inner))
    assert first == second, 'Compound generators must not consume their inner generators'


def test_compound_model(service):
    model = CompoundModel(
        models=(StepModel('z', 0, 1, 1), GridModel('x', 'y', None, fast_count=3, slow_count=2)),
        regions=(ScanRegion(RectangularROI((0, 0), 3, 2), ('x', 'y')),),
    )
    gen = service.create_generator(model)
    points = list(gen)
    assert gen.total_count() == len(points) == 12
    assert gen.axes == ('z', 'y', 'x')
    step, grid = gen.generators
    assert step.regions == [], 'Region does not name the z axis'
    assert grid.model.bounding_box == BoundingBox(0, 0, 3, 2)
    assert gen.model is model


def test_nested_compound_regions(service):
    model = CompoundModel(
        models=(
            StepModel('z', 0, 1, 1),
            CompoundModel(models=(StepModel('y', 0, 1, 1), StepModel('x', 0, 2, 1))),
        ),
        regions=(ScanRegion(RectangularROI((1, 0), 2, 1)),),
    )
    gen = service.create_generator(model)
    points = list(gen)
    nested = gen.generators[1]
    assert len(nested.regions) == 1, 'Nested compound must keep its regions'
    assert gen.total_count() == 12
    assert [p.step_index for p in points] == [1, 2, 4, 5, 7, 8, 10, 11], f'Wrong points kept {points=}'
    assert all(p['x'] >= 1 for p in points)
