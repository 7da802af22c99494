import atexit

from zope.interface import Interface, Attribute, providedBy
from zope.interface.adapter import AdapterRegistry
from zope.interface.interface import adapter_hooks


class IScanPathModel(Interface):
    """
    A declarative description of a scan path.
    """
    kind = Attribute("Tag identifying the model variant.")
    axes = Attribute("Ordered tuple of axis names driven by the model.")
    exposure_time = Attribute("Exposure time in seconds, passed through to positions.")
    collated = Attribute("True if several axes advance together with the same value.")


class IBoundingBoxModel(IScanPathModel):
    """A model covering a rectangular region of a pair of axes."""

    bounding_box = Attribute("BoundingBox or None")


class IBoundingLineModel(IScanPathModel):
    """A model following a straight line in a pair of axes."""

    bounding_line = Attribute("BoundingLine or None")


class IPathKernel(Interface):
    """
    The numeric core of a path shape.
    """
    size = Attribute("Number of points on the path.")

    def point(index):
        """
        Calculate the point at the given step index.

        :param index: step index in the range [0, size)
        :return: tuple (values, indices) ordered by the axes of the model
        """


class IPointGenerator(Interface):
    """
    A single use iterator producing positions from a model.
    """
    id = Attribute("Registry identifier")
    label = Attribute("Short label")
    description = Attribute("Description")
    model = Attribute("The scan model")
    state = Attribute("GeneratorState")

    def total_count():
        """Exact number of points calculated from the model."""

    def has_next():
        """Check if another position is available."""

    def next():
        """Return the next position."""

    def abort():
        """Stop the iteration. Safe to call from any thread."""

    def positions():
        """A fresh and independent iterator over the positions."""

    def set_model(model):
        """Set the model, only allowed before iteration starts."""

    def set_containers(containers):
        """Attach point filters."""

    def set_regions(regions):
        """Attach regions of interest."""


class IPointContainer(Interface):
    """
    A predicate deciding whether a position should be visited.
    """

    def __call__(position):
        """Return True if the position is contained."""


class IROI(Interface):
    """
    A two dimensional region of interest.
    """
    kind = Attribute("Tag identifying the ROI variant.")

    def contains_point(x, y):
        """Check if the point is within the region."""

    def bounds():
        """Axis aligned BoundingBox of the region."""


class IDescriptorSource(Interface):
    """
    Provides generator descriptors for registration.
    """

    def descriptors():
        """
        Generate the descriptors. Each descriptor is a dictionary with the keys 'id', 'model',
        'generator' and optionally 'label' and 'description'. Model and generator may be classes
        or dotted import paths.
        """


class Registry(object):
    """
    Proxy class for managing the adapter registry
    """
    adapters = AdapterRegistry()

    @classmethod
    def add_adapter(cls, *args, **kwargs):
        """
        Wrapper for zope.interface.AdapterRegistry.register
        """
        cls.adapters.register(*args, **kwargs)


def _hook(provided, obj):
    """
    Support syntactic sugar for easy creation of adaptors

    :param provided: interface
    :param obj: object to adapt
    :return: adapted object
    """

    adapter = Registry.adapters.lookup1(providedBy(obj), provided, '')
    if adapter is not None:
        return adapter(obj)


def _del_hook():
    adapter_hooks.remove(_hook)


# manage hooks
adapter_hooks.append(_hook)
atexit.register(_del_hook)
