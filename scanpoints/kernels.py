"""
Path kernels. A kernel computes the raw coordinates of a path shape for a step index, without
materializing the whole path. Values are returned ordered by the axes of the model the kernel
was made from, two dimensional kernels therefore return (slow, fast).
"""
import bisect
import math

import numpy
from zope.interface import implementer

from .interfaces import IPathKernel
from .position import NOT_INDEXED
from .utils.misc import count_steps


@implementer(IPathKernel)
class Kernel(object):
    """
    Base class for all kernels

    :param size: number of points
    """

    def __init__(self, size):
        self.size = int(size)

    def point(self, index):
        raise NotImplementedError('Must be implemented by subclasses')

    def check_index(self, index):
        if not 0 <= index < self.size:
            raise IndexError('Step index {} out of range [0, {})'.format(index, self.size))


class StepKernel(Kernel):
    """
    Equally spaced values from start to stop inclusive.

    :param start: first value
    :param stop: last value, included if it is a whole number of steps from start
    :param step: increment, must have the same sign as stop - start
    :param width: number of axes receiving the value
    :param indexed: whether the step number is the grid index of the value
    """

    def __init__(self, start, stop, step, width=1, indexed=True):
        super().__init__(count_steps(stop - start, step) + 1)
        self.start = start
        self.step = step
        self.width = width
        self.indexed = indexed

    def value(self, index):
        return float(self.start + index * self.step)

    def point(self, index):
        self.check_index(index)
        value = self.value(index)
        grid_index = index if self.indexed else NOT_INDEXED
        return (value,) * self.width, (grid_index,) * self.width


class MultiStepKernel(Kernel):
    """
    Consecutive step kernels of one axis

    :param segments: list of (start, stop, step) tuples
    """

    def __init__(self, segments):
        self.segments = [StepKernel(start, stop, step) for start, stop, step in segments]
        self.offsets = numpy.cumsum([0] + [segment.size for segment in self.segments]).tolist()
        super().__init__(self.offsets[-1])

    def point(self, index):
        self.check_index(index)
        segment = bisect.bisect_right(self.offsets, index) - 1
        value = self.segments[segment].value(index - self.offsets[segment])
        return (value,), (index,)


class ArrayKernel(Kernel):
    def __init__(self, values):
        super().__init__(len(values))
        self.values = values

    def point(self, index):
        self.check_index(index)
        return (self.values[index],), (index,)


class RepeatedKernel(Kernel):
    def __init__(self, value, count):
        super().__init__(count)
        self.value = float(value)

    def point(self, index):
        self.check_index(index)
        return (self.value,), (index,)


class StaticKernel(Kernel):
    def point(self, index):
        self.check_index(index)
        return (), ()


class GridKernel(Kernel):
    """
    Rectangular grid traversed row by row along the fast axis.

    :param fast: array of fast axis coordinates
    :param slow: array of slow axis coordinates
    :param snake: if True, odd rows are traversed in reverse
    """

    def __init__(self, fast, slow, snake=False):
        self.fast = numpy.asarray(fast, dtype=float)
        self.slow = numpy.asarray(slow, dtype=float)
        self.snake = snake
        super().__init__(len(self.fast) * len(self.slow))

    def grid_index(self, index):
        """
        Logical (row, column) of the grid point visited at the given step
        """
        row, col = divmod(index, len(self.fast))
        if self.snake and row % 2 == 1:
            col = len(self.fast) - 1 - col
        return row, col

    def offset(self, row, col):
        return 0.0, 0.0

    def point(self, index):
        self.check_index(index)
        row, col = self.grid_index(index)
        fast_offset, slow_offset = self.offset(row, col)
        return (
            (float(self.slow[row] + slow_offset), float(self.fast[col] + fast_offset)),
            (row, col)
        )

    @classmethod
    def centred(cls, box, fast_count, slow_count, **kwargs):
        """
        Grid of cell centres dividing the box into fast_count x slow_count cells
        """
        fast = box.fast_start + (numpy.arange(fast_count) + 0.5) * box.fast_length / fast_count
        slow = box.slow_start + (numpy.arange(slow_count) + 0.5) * box.slow_length / slow_count
        return cls(fast, slow, **kwargs)

    @classmethod
    def stepped(cls, box, fast_step, slow_step, **kwargs):
        """
        Grid starting at the box origin with the given spacing, ends included when reachable
        """
        fast = box.fast_start + numpy.arange(count_steps(box.fast_length, fast_step) + 1) * fast_step
        slow = box.slow_start + numpy.arange(count_steps(box.slow_length, slow_step) + 1) * slow_step
        return cls(fast, slow, **kwargs)


class RandomOffsetGridKernel(GridKernel):
    """
    Grid with each point displaced by a reproducible pseudo-random offset. The offsets of a point
    depend only on the seed and the logical grid index of the point.

    :param seed: non-negative integer seed
    :param amplitude: (fast, slow) maximum displacement along each axis
    """

    def __init__(self, fast, slow, seed=0, amplitude=(0.0, 0.0), snake=False):
        super().__init__(fast, slow, snake=snake)
        self.seed = seed
        self.amplitude = amplitude

    def offset(self, row, col):
        rng = numpy.random.default_rng([self.seed, col, row])
        fast_offset, slow_offset = rng.uniform(-1.0, 1.0, 2)
        return fast_offset * self.amplitude[0], slow_offset * self.amplitude[1]


class LineKernel(Kernel):
    """
    Points along a straight line at distances t = (index + inset) * spacing from its start

    :param line: BoundingLine
    :param count: number of points
    :param spacing: distance between points
    :param inset: offset of the first point in units of spacing
    """

    def __init__(self, line, count, spacing, inset=0.0):
        super().__init__(count)
        self.line = line
        self.spacing = spacing
        self.inset = inset
        self.direction = (math.cos(line.angle), math.sin(line.angle))

    def point(self, index):
        self.check_index(index)
        t = (index + self.inset) * self.spacing
        x = self.line.x_start + t * self.direction[0]
        y = self.line.y_start + t * self.direction[1]
        return (float(y), float(x)), (index, index)

    @classmethod
    def equal_spacing(cls, line, count):
        return cls(line, count, line.length / count, inset=0.5)

    @classmethod
    def stepped(cls, line, step):
        return cls(line, count_steps(line.length, step) + 1, step)


class SpiralKernel(Kernel):
    """
    Fermat spiral about the centre of a box, covering the circle through the box corners

    :param box: BoundingBox
    :param scale: radial distance between successive turns
    """
    ALPHA = math.sqrt(4 * math.pi)

    def __init__(self, box, scale):
        self.centre = box.centre
        self.radius = math.hypot(box.fast_length, box.slow_length) / 2
        self.beta = scale / (2 * math.pi)
        size = max(1, int((self.radius / (self.ALPHA * self.beta)) ** 2))
        super().__init__(size)

    def point(self, index):
        self.check_index(index)
        phi = self.ALPHA * math.sqrt(index + 0.5)
        rho = self.beta * phi
        x = self.centre[0] + rho * math.sin(phi)
        y = self.centre[1] + rho * math.cos(phi)
        return (y, x), (NOT_INDEXED, NOT_INDEXED)


class LissajousKernel(Kernel):
    """
    Lissajous figure filling a box, one full period of theta sampled at points positions
    """

    def __init__(self, box, a, b, delta, points):
        super().__init__(points)
        self.centre = box.centre
        self.half_width = box.fast_length / 2
        self.half_height = box.slow_length / 2
        self.a = a
        self.b = b
        self.delta = delta

    def point(self, index):
        self.check_index(index)
        theta = 2 * math.pi * index / self.size
        x = self.centre[0] + self.half_width * math.sin(self.a * theta + self.delta)
        y = self.centre[1] + self.half_height * math.sin(self.b * theta)
        return (y, x), (NOT_INDEXED, NOT_INDEXED)
