import threading
from enum import IntEnum, auto

import numpy
from zope.interface import implementer

from . import kernels
from .errors import (
    GeneratorError, InvalidModel, IterationExhausted, Aborted, UnsupportedOperation
)
from .interfaces import IPointGenerator
from .models import (
    StepModel, CollatedStepModel, MultiStepModel, ArrayModel, RepeatedPointModel, StaticModel,
    GridModel, RasterModel, RandomOffsetGridModel, OneDEqualSpacingModel, OneDStepModel,
    SpiralModel, LissajousModel
)
from .position import Position
from .regions import wrap
from .utils.log import get_module_logger
from .utils.misc import same_sign

logger = get_module_logger(__name__)


class GeneratorState(IntEnum):
    FRESH = auto()
    RUNNING = auto()
    EXHAUSTED = auto()
    ABORTED = auto()


_DONE = object()


@implementer(IPointGenerator)
class AbstractGenerator(object):
    """
    Base class for all generators.

    A generator is a single use iterator. It is created in the FRESH state, becomes RUNNING on the
    first request for a position and ends up EXHAUSTED once all positions have been produced, or
    ABORTED if abort() is called before then. Positions are only computed on demand.

    Subclasses implement :meth:`total_count` and :meth:`positions`.

    :param model: optional scan model
    """
    id = None
    label = ''
    description = ''
    model_class = None

    def __init__(self, model=None):
        self.model = None
        self.containers = []
        self.regions = []
        self.region_containers = []
        self.state = GeneratorState.FRESH
        self._aborted = threading.Event()
        self._stream = None
        self._pending = None
        self._error = None
        if model is not None:
            self.set_model(model)

    def __repr__(self):
        return '<{} | {} | {}/>'.format(self.__class__.__name__, self.id, self.state.name)

    def _check_fresh(self, operation):
        if self.state != GeneratorState.FRESH or self._aborted.is_set():
            raise GeneratorError(
                'Cannot {} after iteration has started or been aborted'.format(operation), model_id=self.id
            )

    def set_model(self, model):
        """
        Set the scan model. Only allowed before the first position is requested.

        :param model: scan model
        """
        self._check_fresh('set the model')
        self.model = model

    def set_containers(self, containers):
        """
        Attach position filters. A position is produced only if every container accepts it.
        Regions of interest are adapted to containers, callables are used as predicates.

        :param containers: sequence of containers, regions of interest or callables
        """
        self._check_fresh('set containers')
        self.containers = wrap(containers)

    def set_regions(self, regions):
        """
        Attach regions of interest. Regions filter positions in addition to any containers, a
        position is produced only if it lies within every region.

        :param regions: sequence of regions of interest
        """
        self._check_fresh('set regions')
        self.regions = list(regions or [])
        self.region_containers = wrap(self.regions)

    def validate(self):
        """
        Check the model and prepare for iteration, raises InvalidModel if the model is not valid.
        """
        if self.model is None:
            raise InvalidModel('No model has been set', model_id=self.id)

    def total_count(self):
        """
        Exact number of points calculated from the model, before any region filtering
        """
        raise NotImplementedError('Must be implemented by subclasses')

    def positions(self):
        """
        Return a fresh iterator over the positions. The iteration state of the generator itself
        is not affected.
        """
        raise NotImplementedError('Must be implemented by subclasses')

    def accepts(self, position):
        return all(
            container(position) for container in self.containers + self.region_containers
        )

    # Iteration protocol
    def abort(self):
        """
        Abort the iteration. Idempotent and safe to call from any thread. The state changes at
        once unless the generator is already exhausted, and no further position is produced.
        """
        if not self._aborted.is_set():
            logger.debug('{}: aborted'.format(self))
        self._aborted.set()
        if self.state != GeneratorState.EXHAUSTED:
            self.state = GeneratorState.ABORTED

    def is_aborted(self):
        return self._aborted.is_set()

    def _fetch(self):
        if self._pending is not None or self._error is not None:
            return
        if self.state == GeneratorState.FRESH:
            self.state = GeneratorState.RUNNING
            try:
                self.validate()
                self._stream = self.positions()
            except Exception as err:
                self._fail(err)
                return
        if self.state != GeneratorState.RUNNING:
            return
        try:
            self._pending = next(self._stream)
        except StopIteration:
            self._pending = _DONE
        except Exception as err:
            self._fail(err)

    def _fail(self, err):
        logger.error('{}: iteration failed: {}'.format(self, err))
        if isinstance(err, GeneratorError):
            self._error = err
        else:
            self._error = GeneratorError('Iteration failed: {}'.format(err), model_id=self.id)
            self._error.__cause__ = err
        self.state = GeneratorState.EXHAUSTED
        self._stream = None

    def has_next(self):
        """
        Check if another position is available
        """
        if self._aborted.is_set():
            return False
        self._fetch()
        return self._error is not None or (self._pending is not None and self._pending is not _DONE)

    def next(self):
        """
        Return the next position.

        :raises Aborted: if the generator has been aborted
        :raises IterationExhausted: when all positions have been produced
        """
        if self._aborted.is_set():
            if self.state != GeneratorState.EXHAUSTED:
                self.state = GeneratorState.ABORTED
            self._stream = None
            raise Aborted('Generator was aborted', model_id=self.id)
        self._fetch()
        if self._error is not None:
            error, self._error = self._error, None
            self._pending = _DONE
            raise error
        if self._pending is _DONE or self._pending is None:
            self.state = GeneratorState.EXHAUSTED
            self._stream = None
            raise IterationExhausted('No more positions', model_id=self.id)
        position, self._pending = self._pending, None
        return position

    def remove(self):
        raise UnsupportedOperation('remove', model_id=self.id)

    def __iter__(self):
        return self

    def __next__(self):
        return self.next()


class PointGenerator(AbstractGenerator):
    """
    A generator backed by a path kernel. Subclasses validate their model and create the kernel.
    """

    def __init__(self, model=None):
        self._kernel = None
        super().__init__(model)

    def set_model(self, model):
        super().set_model(model)
        self._kernel = None

    def validate(self):
        super().validate()
        if not isinstance(self.model, self.model_class):
            raise InvalidModel(
                'Expected {}, got {}'.format(self.model_class.__name__, type(self.model).__name__),
                model_id=self.id
            )
        if self.model.exposure_time < 0:
            raise InvalidModel('Exposure time must not be negative', model_id=self.id)
        self.validate_model(self.model)
        if self._kernel is None:
            self._kernel = self.create_kernel(self.model)

    def validate_model(self, model):
        """
        Check model specific fields, raise InvalidModel if invalid
        """

    def create_kernel(self, model):
        raise NotImplementedError('Must be implemented by subclasses')

    @property
    def kernel(self):
        if self._kernel is None:
            self.validate()
        return self._kernel

    def total_count(self):
        return self.kernel.size

    def positions(self):
        kernel = self.kernel
        names = self.model.axes
        exposure = self.model.exposure_time
        for i in range(kernel.size):
            values, indices = kernel.point(i)
            position = Position(names, values, indices, step_index=i, exposure_time=exposure)
            if self.accepts(position):
                yield position

    def invalid(self, message):
        return InvalidModel(message, model_id=self.id)

    def check_axes(self, *names):
        if not all(names):
            raise self.invalid('Axis names must not be empty')
        if len(set(names)) != len(names):
            raise self.invalid('Axis names must be distinct')

    def check_step(self, start, stop, step):
        if step == 0:
            raise self.invalid('Step must not be zero')
        if stop != start and not same_sign(stop - start, step):
            raise self.invalid('Step {} does not lead from {} to {}'.format(step, start, stop))

    def check_count(self, count, minimum=0):
        if count < minimum:
            raise self.invalid('Count must be at least {}, got {}'.format(minimum, count))

    def check_bounding_box(self, model):
        if model.bounding_box is None:
            raise self.invalid('A bounding box is required')

    def check_bounding_line(self, model):
        if model.bounding_line is None:
            raise self.invalid('A bounding line is required')


class StepGenerator(PointGenerator):
    id = 'step'
    label = 'Step'
    description = 'Equal steps of one axis from start to stop'
    model_class = StepModel

    def validate_model(self, model):
        self.check_axes(model.axis)
        self.check_step(model.start, model.stop, model.step)

    def create_kernel(self, model):
        return kernels.StepKernel(model.start, model.stop, model.step)


class CollatedStepGenerator(PointGenerator):
    id = 'collated-step'
    label = 'Collated Step'
    description = 'Equal steps driving several axes to the same value'
    model_class = CollatedStepModel

    def validate_model(self, model):
        if not model.names:
            raise self.invalid('At least one axis name is required')
        self.check_axes(*model.names)
        self.check_step(model.start, model.stop, model.step)

    def create_kernel(self, model):
        return kernels.StepKernel(model.start, model.stop, model.step, width=len(model.names), indexed=False)


class MultiStepGenerator(PointGenerator):
    id = 'multi-step'
    label = 'Multi-Step'
    description = 'Consecutive step ranges of one axis'
    model_class = MultiStepModel

    def validate_model(self, model):
        self.check_axes(model.axis)
        if not model.segments:
            raise self.invalid('At least one step range is required')
        for segment in model.segments:
            self.check_step(segment.start, segment.stop, segment.step)

    def create_kernel(self, model):
        return kernels.MultiStepKernel([
            (segment.start, segment.stop, segment.step) for segment in model.segments
        ])


class ArrayGenerator(PointGenerator):
    id = 'array'
    label = 'Array'
    description = 'Explicit list of positions of one axis'
    model_class = ArrayModel

    def validate_model(self, model):
        self.check_axes(model.axis)

    def create_kernel(self, model):
        return kernels.ArrayKernel(model.values)


class RepeatedPointGenerator(PointGenerator):
    id = 'repeated-point'
    label = 'Repeated Point'
    description = 'The same position of one axis a number of times'
    model_class = RepeatedPointModel

    def validate_model(self, model):
        self.check_axes(model.axis)
        self.check_count(model.count)

    def create_kernel(self, model):
        return kernels.RepeatedKernel(model.value, model.count)


class StaticGenerator(PointGenerator):
    id = 'static'
    label = 'Static'
    description = 'Empty positions, counting frames at a fixed location'
    model_class = StaticModel

    def validate_model(self, model):
        self.check_count(model.count)

    def create_kernel(self, model):
        return kernels.StaticKernel(model.count)


class GridGenerator(PointGenerator):
    id = 'grid'
    label = 'Grid'
    description = 'Cell centres of a box divided into rows and columns'
    model_class = GridModel

    def validate_model(self, model):
        self.check_axes(model.fast_axis, model.slow_axis)
        self.check_bounding_box(model)
        self.check_count(model.fast_count, 1)
        self.check_count(model.slow_count, 1)

    def create_kernel(self, model):
        return kernels.GridKernel.centred(
            model.bounding_box, model.fast_count, model.slow_count, snake=model.snake
        )


class RandomOffsetGridGenerator(GridGenerator):
    id = 'random-offset-grid'
    label = 'Random Offset Grid'
    description = 'Grid with reproducible random displacement of each point'
    model_class = RandomOffsetGridModel

    def validate_model(self, model):
        super().validate_model(model)
        if model.seed < 0:
            raise self.invalid('Seed must not be negative')
        if model.offset < 0:
            raise self.invalid('Offset must not be negative')

    def create_kernel(self, model):
        box = model.bounding_box
        fraction = model.offset / 100.0
        grid = kernels.GridKernel.centred(box, model.fast_count, model.slow_count)
        return kernels.RandomOffsetGridKernel(
            grid.fast, grid.slow, seed=int(model.seed), snake=model.snake,
            amplitude=(
                fraction * abs(box.fast_length) / model.fast_count,
                fraction * abs(box.slow_length) / model.slow_count,
            )
        )


class RasterGenerator(PointGenerator):
    id = 'raster'
    label = 'Raster'
    description = 'Points at fixed spacing covering a box'
    model_class = RasterModel

    def validate_model(self, model):
        self.check_axes(model.fast_axis, model.slow_axis)
        self.check_bounding_box(model)
        box = model.bounding_box
        self.check_step(0, box.fast_length, model.fast_step)
        self.check_step(0, box.slow_length, model.slow_step)

    def create_kernel(self, model):
        return kernels.GridKernel.stepped(
            model.bounding_box, model.fast_step, model.slow_step, snake=model.snake
        )


class OneDEqualSpacingGenerator(PointGenerator):
    id = 'equal-spacing'
    label = 'Line Equal Spacing'
    description = 'Equally spaced points along a line, half a step in from either end'
    model_class = OneDEqualSpacingModel

    def validate_model(self, model):
        self.check_axes(model.fast_axis, model.slow_axis)
        self.check_bounding_line(model)
        self.check_count(model.count, 1)

    def create_kernel(self, model):
        return kernels.LineKernel.equal_spacing(model.bounding_line, model.count)


class OneDStepGenerator(PointGenerator):
    id = 'line-step'
    label = 'Line Step'
    description = 'Points at fixed spacing along a line from its start'
    model_class = OneDStepModel

    def validate_model(self, model):
        self.check_axes(model.fast_axis, model.slow_axis)
        self.check_bounding_line(model)
        if model.step <= 0:
            raise self.invalid('Step must be positive')
        if model.bounding_line.length < 0:
            raise self.invalid('Line length must not be negative')

    def create_kernel(self, model):
        return kernels.LineKernel.stepped(model.bounding_line, model.step)


class SpiralGenerator(PointGenerator):
    id = 'spiral'
    label = 'Spiral'
    description = 'Fermat spiral centred on a box'
    model_class = SpiralModel

    def validate_model(self, model):
        self.check_axes(model.fast_axis, model.slow_axis)
        self.check_bounding_box(model)
        if model.scale <= 0:
            raise self.invalid('Scale must be positive')

    def create_kernel(self, model):
        return kernels.SpiralKernel(model.bounding_box, model.scale)


class LissajousGenerator(PointGenerator):
    id = 'lissajous'
    label = 'Lissajous'
    description = 'Lissajous curve filling a box'
    model_class = LissajousModel

    def validate_model(self, model):
        self.check_axes(model.fast_axis, model.slow_axis)
        self.check_bounding_box(model)
        self.check_count(model.points, 1)
        if not numpy.isfinite([model.a, model.b, model.delta]).all():
            raise self.invalid('Lissajous parameters must be finite')

    def create_kernel(self, model):
        return kernels.LissajousKernel(model.bounding_box, model.a, model.b, model.delta, model.points)
