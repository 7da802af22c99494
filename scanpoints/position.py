from dataclasses import dataclass, field, replace
from typing import Tuple

NOT_INDEXED = -1


@dataclass(frozen=True)
class Position:
    """
    An immutable, ordered mapping of axis names to values.

    :param names: axis names in the order fixed by the generator
    :param values: values aligned with names
    :param indices: per-axis grid index aligned with names, -1 if not grid indexed
    :param step_index: global step index of the position within its scan
    :param exposure_time: exposure time in seconds
    """
    names: Tuple[str, ...] = ()
    values: Tuple[float, ...] = ()
    indices: Tuple[int, ...] = ()
    step_index: int = 0
    exposure_time: float = 0.0
    _lookup: dict = field(default=None, init=False, repr=False, compare=False, hash=False)

    def __post_init__(self):
        object.__setattr__(self, 'names', tuple(self.names))
        object.__setattr__(self, 'values', tuple(self.values))
        indices = tuple(self.indices) if self.indices else (NOT_INDEXED,) * len(self.names)
        object.__setattr__(self, 'indices', indices)
        if not (len(self.names) == len(self.values) == len(self.indices)):
            raise ValueError('names, values and indices must have the same length')
        object.__setattr__(self, '_lookup', {name: i for i, name in enumerate(self.names)})

    def __getitem__(self, name):
        return self.values[self._lookup[name]]

    def __contains__(self, name):
        return name in self._lookup

    def __iter__(self):
        return iter(self.names)

    def __len__(self):
        return len(self.names)

    def get(self, name, default=None):
        if name in self._lookup:
            return self[name]
        return default

    def index(self, name):
        """
        Grid index of the position along the named axis
        """
        return self.indices[self._lookup[name]]

    def items(self):
        return zip(self.names, self.values)

    def with_step(self, step_index, exposure_time=None):
        """
        Copy of the position with a different step index and optionally exposure time
        """
        exposure_time = self.exposure_time if exposure_time is None else exposure_time
        return replace(self, step_index=step_index, exposure_time=exposure_time)

    @classmethod
    def compose(cls, parts, step_index, exposure_time):
        """
        Join positions from independent axes into a single position. Axis order follows the
        order of the parts.

        :param parts: sequence of positions
        :param step_index: step index of the joined position
        :param exposure_time: exposure time of the joined position
        """
        return cls(
            names=tuple(name for part in parts for name in part.names),
            values=tuple(value for part in parts for value in part.values),
            indices=tuple(index for part in parts for index in part.indices),
            step_index=step_index,
            exposure_time=exposure_time,
        )

    def to_dict(self):
        """
        Wire representation of the position
        """
        return {
            'names': list(self.names),
            'values': list(self.values),
            'indices': list(self.indices),
            'stepIndex': self.step_index,
            'exposureTime': self.exposure_time,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            names=data.get('names', ()),
            values=data.get('values', ()),
            indices=data.get('indices', ()),
            step_index=data.get('stepIndex', 0),
            exposure_time=data.get('exposureTime', 0.0),
        )
