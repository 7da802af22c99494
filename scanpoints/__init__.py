"""
Scan path point generation.

Declarative scan models are turned into lazily evaluated sequences of positions by generators
obtained from a :class:`~scanpoints.registry.PointGeneratorService`::

    from scanpoints import create_service, StepModel, GridModel, BoundingBox

    service = create_service()
    outer = service.create_generator(StepModel('z', 0, 1, 0.5))
    inner = service.create_generator(GridModel('x', 'y', BoundingBox(0, 0, 3, 2), 3, 2, snake=True))
    for position in service.create_compound_generator(outer, inner):
        print(position.step_index, dict(position.items()))
"""

__version__ = '1.0.0'

from .errors import (
    GeneratorError, UnknownModelKind, UnknownGeneratorId, InvalidModel, AxisCollision,
    ConstructionFailed, UnsupportedOperation, IterationExhausted, Aborted
)
from .position import Position, NOT_INDEXED
from .models import (
    BoundingBox, BoundingLine, StepModel, CollatedStepModel, MultiStepModel, ArrayModel,
    RepeatedPointModel, StaticModel, GridModel, RasterModel, RandomOffsetGridModel,
    OneDEqualSpacingModel, OneDStepModel, SpiralModel, LissajousModel, ScanRegion, CompoundModel,
    to_dict, from_dict
)
from .rois import RectangularROI, LinearROI, EllipticalROI, CircularROI, PolygonalROI
from .generators import GeneratorState
from .compound import CompoundGenerator
from .registry import GeneratorInfo, RegistryBuilder, PointGeneratorService, create_service
from .plugins import MemorySource, ModuleSource, EntryPointSource
