"""
Declarative scan models, bounding shapes and scan regions.

All models are frozen dataclasses. Every field has a default so that a default model can be
instantiated for any registered generator. Models are serialisable to plain dictionaries which
carry a 'type' tag identifying the variant.
"""
from dataclasses import dataclass, fields
from typing import ClassVar, Optional, Tuple, Any

from zope.interface import implementer

from .errors import InvalidModel
from .interfaces import IScanPathModel, IBoundingBoxModel, IBoundingLineModel

TYPES = {}


def serializable(kind):
    """
    Class decorator registering a serializable type under the given tag
    :param kind: type tag
    """

    def decorator(cls):
        cls.kind = kind
        TYPES[kind] = cls
        return cls

    return decorator


def _encode(value):
    if hasattr(value, 'to_dict'):
        return value.to_dict()
    elif isinstance(value, (tuple, list)):
        return [_encode(item) for item in value]
    return value


def _decode_list(items):
    return tuple(from_dict(item) for item in (items or ()))


def _decode_optional(decoder):
    def _decode(value):
        return None if value is None else decoder(value)
    return _decode


def to_dict(obj):
    """
    Convert a model, region, ROI or bounding shape into a dictionary
    """
    return obj.to_dict()


def from_dict(data):
    """
    Re-create a model, region or ROI from a dictionary produced by to_dict. Unknown fields are
    ignored.

    :param data: dictionary
    :return: model instance
    """
    if not isinstance(data, dict):
        raise InvalidModel('Expected a dictionary, got {!r}'.format(type(data).__name__))
    kind = data.get('type')
    if kind not in TYPES:
        raise InvalidModel('Unknown model type {!r}'.format(kind))
    return TYPES[kind].from_dict(data)


class Serializable(object):
    kind: ClassVar[str] = ''
    required: ClassVar[Tuple[str, ...]] = ()
    decoders: ClassVar[dict] = {}

    def __post_init__(self):
        for fld in fields(self):
            value = getattr(self, fld.name)
            if isinstance(value, list):
                object.__setattr__(self, fld.name, tuple(value))

    def to_dict(self):
        data = {'type': self.kind}
        data.update({
            fld.name: _encode(getattr(self, fld.name))
            for fld in fields(self)
        })
        return data

    @classmethod
    def from_dict(cls, data):
        missing = [name for name in cls.required if name not in data]
        if missing:
            raise InvalidModel('Missing required fields: {}'.format(', '.join(missing)), model_id=cls.kind)
        names = {fld.name for fld in fields(cls) if fld.init}
        kwargs = {
            key: cls.decoders.get(key, lambda v: v)(value)
            for key, value in data.items() if key in names
        }
        try:
            return cls(**kwargs)
        except (TypeError, ValueError) as err:
            raise InvalidModel(str(err), model_id=cls.kind) from err


@dataclass(frozen=True)
class BoundingBox:
    """
    Axis aligned rectangle in the (fast, slow) axis plane.
    """
    fast_start: float = 0.0
    slow_start: float = 0.0
    fast_length: float = 1.0
    slow_length: float = 1.0

    @property
    def fast_end(self):
        return self.fast_start + self.fast_length

    @property
    def slow_end(self):
        return self.slow_start + self.slow_length

    @property
    def centre(self):
        return self.fast_start + self.fast_length / 2, self.slow_start + self.slow_length / 2

    def union(self, other):
        """
        Smallest box containing both boxes
        """
        fast_start = min(self.fast_start, self.fast_end, other.fast_start, other.fast_end)
        slow_start = min(self.slow_start, self.slow_end, other.slow_start, other.slow_end)
        fast_end = max(self.fast_start, self.fast_end, other.fast_start, other.fast_end)
        slow_end = max(self.slow_start, self.slow_end, other.slow_start, other.slow_end)
        return BoundingBox(fast_start, slow_start, fast_end - fast_start, slow_end - slow_start)

    def contains(self, fast, slow):
        return (
            min(self.fast_start, self.fast_end) <= fast <= max(self.fast_start, self.fast_end) and
            min(self.slow_start, self.slow_end) <= slow <= max(self.slow_start, self.slow_end)
        )

    def to_dict(self):
        return {
            'fastAxisStart': self.fast_start,
            'slowAxisStart': self.slow_start,
            'fastAxisLength': self.fast_length,
            'slowAxisLength': self.slow_length,
        }

    @classmethod
    def from_dict(cls, data):
        try:
            return cls(
                data['fastAxisStart'], data['slowAxisStart'], data['fastAxisLength'], data['slowAxisLength']
            )
        except KeyError as err:
            raise InvalidModel('Bounding box missing field {}'.format(err)) from err


@dataclass(frozen=True)
class BoundingLine:
    """
    Straight line segment starting at (x_start, y_start), angle in radians.
    """
    x_start: float = 0.0
    y_start: float = 0.0
    length: float = 1.0
    angle: float = 0.0

    def to_dict(self):
        return {
            'xStart': self.x_start,
            'yStart': self.y_start,
            'length': self.length,
            'angle': self.angle,
        }

    @classmethod
    def from_dict(cls, data):
        try:
            return cls(data['xStart'], data['yStart'], data['length'], data['angle'])
        except KeyError as err:
            raise InvalidModel('Bounding line missing field {}'.format(err)) from err


@implementer(IScanPathModel)
@dataclass(frozen=True, kw_only=True)
class AbstractModel(Serializable):
    exposure_time: float = 0.0

    collated: ClassVar[bool] = False

    @property
    def axes(self):
        return ()

    @property
    def scannable_names(self):
        return list(self.axes)


@serializable('step')
@dataclass(frozen=True)
class StepModel(AbstractModel):
    axis: str = 'x'
    start: float = 0.0
    stop: float = 1.0
    step: float = 0.1

    required = ('axis', 'start', 'stop', 'step')

    @property
    def axes(self):
        return (self.axis,)


@serializable('collated-step')
@dataclass(frozen=True)
class CollatedStepModel(AbstractModel):
    """Several axes all driven to the same value at each step."""
    names: Tuple[str, ...] = ('x',)
    start: float = 0.0
    stop: float = 1.0
    step: float = 0.1

    collated = True
    required = ('names', 'start', 'stop', 'step')

    @property
    def axes(self):
        return tuple(self.names)


@serializable('multi-step')
@dataclass(frozen=True)
class MultiStepModel(AbstractModel):
    """Consecutive step ranges of a single axis."""
    axis: str = 'x'
    segments: Tuple[StepModel, ...] = ()

    required = ('axis', 'segments')
    decoders = {'segments': _decode_list}

    @property
    def axes(self):
        return (self.axis,)


@serializable('array')
@dataclass(frozen=True)
class ArrayModel(AbstractModel):
    axis: str = 'x'
    values: Tuple[float, ...] = ()

    required = ('axis', 'values')

    def __post_init__(self):
        object.__setattr__(self, 'values', tuple(float(value) for value in self.values))

    @property
    def axes(self):
        return (self.axis,)


@serializable('repeated-point')
@dataclass(frozen=True)
class RepeatedPointModel(AbstractModel):
    axis: str = 'x'
    value: float = 0.0
    count: int = 1

    required = ('axis', 'value', 'count')

    @property
    def axes(self):
        return (self.axis,)


@serializable('static')
@dataclass(frozen=True)
class StaticModel(AbstractModel):
    """Produces positions with no axes, for counting frames at a fixed location."""
    count: int = 1

    required = ('count',)


@dataclass(frozen=True)
class AbstractTwoAxisModel(AbstractModel):
    fast_axis: str = 'x'
    slow_axis: str = 'y'

    @property
    def axes(self):
        # slow axis first, the region containers depend on this order
        return self.slow_axis, self.fast_axis


@implementer(IBoundingBoxModel)
@dataclass(frozen=True)
class AbstractBoundingBoxModel(AbstractTwoAxisModel):
    bounding_box: Optional[BoundingBox] = None

    decoders = {'bounding_box': _decode_optional(BoundingBox.from_dict)}


@implementer(IBoundingLineModel)
@dataclass(frozen=True)
class AbstractBoundingLineModel(AbstractTwoAxisModel):
    bounding_line: Optional[BoundingLine] = None

    decoders = {'bounding_line': _decode_optional(BoundingLine.from_dict)}


@serializable('grid')
@dataclass(frozen=True)
class GridModel(AbstractBoundingBoxModel):
    fast_count: int = 5
    slow_count: int = 5
    snake: bool = False

    required = ('fast_axis', 'slow_axis', 'fast_count', 'slow_count')


@serializable('raster')
@dataclass(frozen=True)
class RasterModel(AbstractBoundingBoxModel):
    fast_step: float = 1.0
    slow_step: float = 1.0
    snake: bool = False

    required = ('fast_axis', 'slow_axis', 'fast_step', 'slow_step')


@serializable('random-offset-grid')
@dataclass(frozen=True)
class RandomOffsetGridModel(GridModel):
    """Grid with each point displaced by up to offset percent of the cell size."""
    seed: int = 0
    offset: float = 0.0

    required = ('fast_axis', 'slow_axis', 'fast_count', 'slow_count', 'seed', 'offset')


@serializable('spiral')
@dataclass(frozen=True)
class SpiralModel(AbstractBoundingBoxModel):
    scale: float = 1.0

    required = ('fast_axis', 'slow_axis', 'scale')


@serializable('lissajous')
@dataclass(frozen=True)
class LissajousModel(AbstractBoundingBoxModel):
    a: float = 3.0
    b: float = 2.0
    delta: float = 0.0
    points: int = 1000

    required = ('fast_axis', 'slow_axis', 'a', 'b', 'points')


@serializable('equal-spacing')
@dataclass(frozen=True)
class OneDEqualSpacingModel(AbstractBoundingLineModel):
    count: int = 5

    required = ('fast_axis', 'slow_axis', 'count')


@serializable('line-step')
@dataclass(frozen=True)
class OneDStepModel(AbstractBoundingLineModel):
    step: float = 1.0

    required = ('fast_axis', 'slow_axis', 'step')


@serializable('region')
@dataclass(frozen=True)
class ScanRegion(Serializable):
    """
    A region of interest restricted to the named scannables. An empty or missing list of
    scannables applies the region to every model.
    """
    roi: Any = None
    scannables: Optional[Tuple[str, ...]] = None

    required = ('roi',)
    decoders = {'roi': from_dict}


@implementer(IScanPathModel)
@serializable('compound')
@dataclass(frozen=True)
class CompoundModel(Serializable):
    """
    Nested models, outermost first, and the scan regions to distribute among them.
    """
    models: Tuple[Any, ...] = ()
    regions: Tuple[ScanRegion, ...] = ()

    collated = False
    required = ('models',)
    decoders = {'models': _decode_list, 'regions': _decode_list}

    @property
    def axes(self):
        return tuple(name for model in self.models for name in model.axes)

    @property
    def exposure_time(self):
        return self.models[-1].exposure_time if self.models else 0.0
