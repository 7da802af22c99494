import math
from collections import Counter

from .errors import AxisCollision, GeneratorError
from .generators import AbstractGenerator
from .models import CompoundModel
from .position import Position
from .utils.log import get_module_logger

logger = get_module_logger(__name__)


class CompoundGenerator(AbstractGenerator):
    """
    Cartesian product of generators. The first generator is the outermost and slowest, the last
    generator the innermost and fastest; inner generators restart for every position of the
    generator outside them.

    The step index of a compound position is its flat index in the full product, computed from
    the step indices of the inner positions, so positions removed by regions of inner generators
    leave gaps in the sequence of step indices. The exposure time is that of the innermost
    generator.

    :param generators: one or more generators, outermost first
    :param model: optional CompoundModel the generators were made from
    """
    id = 'compound'
    label = 'Compound'
    description = 'Nested scan of several generators'
    model_class = CompoundModel

    def __init__(self, generators, model=None):
        self.generators = list(generators)
        if not self.generators:
            raise GeneratorError('At least one generator is required', model_id=self.id)

        names = [name for generator in self.generators for name in generator.model.axes]
        duplicates = sorted(name for name, count in Counter(names).items() if count > 1)
        if duplicates:
            raise AxisCollision(
                'Axes driven by more than one generator: {}'.format(', '.join(duplicates)), model_id=self.id
            )
        if model is None:
            model = CompoundModel(models=tuple(generator.model for generator in self.generators))
        super().__init__(model)
        logger.debug('Compound of {} generators over axes {}'.format(len(self.generators), names))

    @property
    def axes(self):
        return tuple(name for generator in self.generators for name in generator.model.axes)

    def validate(self):
        super().validate()
        for generator in self.generators:
            generator.validate()

    def total_count(self):
        return math.prod(generator.total_count() for generator in self.generators)

    def positions(self):
        sizes = [generator.total_count() for generator in self.generators]
        return self._product(0, sizes, (), 0)

    def _product(self, level, sizes, parts, offset):
        generator = self.generators[level]
        innermost = level == len(self.generators) - 1
        for position in generator.positions():
            index = offset * sizes[level] + position.step_index
            if innermost:
                combined = Position.compose(
                    parts + (position,), step_index=index, exposure_time=position.exposure_time
                )
                if self.accepts(combined):
                    yield combined
            else:
                yield from self._product(level + 1, sizes, parts + (position,), index)
