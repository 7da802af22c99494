"""
The point generator service: a registry mapping scan models to the generators which
materialize them.

The registry is assembled by a :class:`RegistryBuilder` in two phases, first the static table of
built-in generators, then descriptors read from extension sources. The resulting
:class:`PointGeneratorService` is immutable and may be shared between threads.
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Optional

from . import generators as gens
from .compound import CompoundGenerator
from .errors import (
    GeneratorError, UnknownModelKind, UnknownGeneratorId, ConstructionFailed
)
from .interfaces import IDescriptorSource
from .models import CompoundModel
from .regions import set_bounds, find_regions
from .utils.log import get_module_logger
from .utils.misc import import_string

logger = get_module_logger(__name__)


GENERATORS = (
    gens.StepGenerator,
    gens.CollatedStepGenerator,
    gens.MultiStepGenerator,
    gens.RepeatedPointGenerator,
    gens.ArrayGenerator,
    gens.GridGenerator,
    gens.OneDEqualSpacingGenerator,
    gens.OneDStepGenerator,
    gens.RasterGenerator,
    gens.StaticGenerator,
    gens.RandomOffsetGridGenerator,
    gens.SpiralGenerator,
    gens.LissajousGenerator,
)


@dataclass(frozen=True)
class GeneratorInfo:
    """
    Registry entry describing a generator
    """
    id: str
    model_class: Any
    generator_class: Any
    label: Optional[str] = None
    description: Optional[str] = None


def _resolve(value):
    return import_string(value) if isinstance(value, str) else value


class RegistryBuilder(object):
    """
    Collects generator registrations and builds an immutable service.
    """

    def __init__(self):
        self.generators = {}
        self.info = {}

    def register(self, generator_class, model_class=None, id=None, label=None, description=None):
        """
        Register a generator for a model class. A generator class may serve several model classes
        but each model class may only have one generator. Registering an identifier a second time
        replaces the earlier entry.

        :param generator_class: generator class
        :param model_class: model class, defaults to the model_class attribute of the generator
        :param id: identifier, defaults to the id attribute of the generator
        :param label: optional label
        :param description: optional description
        :return: GeneratorInfo
        """
        model_class = generator_class.model_class if model_class is None else model_class
        id = generator_class.id if id is None else id
        if not id:
            raise ConstructionFailed('Generator {} has no identifier'.format(generator_class.__name__))
        if model_class is None:
            raise ConstructionFailed('No model class for generator', model_id=id)

        existing = self.generators.get(model_class)
        if existing is not None and existing is not generator_class:
            raise ConstructionFailed(
                'Model {} already handled by {}, cannot register {}'.format(
                    model_class.__name__, existing.__name__, generator_class.__name__
                ), model_id=id
            )
        if id in self.info:
            logger.warning('Generator "{}" re-registered, replacing earlier entry'.format(id))

        self.generators[model_class] = generator_class
        info = GeneratorInfo(
            id=id, model_class=model_class, generator_class=generator_class,
            label=label, description=description
        )
        self.info[id] = info
        logger.debug('Registered generator "{}" for {}'.format(id, model_class.__name__))
        return info

    def register_static(self, generators=GENERATORS):
        for generator_class in generators:
            self.register(generator_class)
        return self

    def extend(self, source):
        """
        Register the generators described by an extension source. Descriptors without an
        identifier, or whose classes cannot be imported, are rejected and logged.

        :param source: IDescriptorSource provider
        """
        source = IDescriptorSource(source)
        for descriptor in source.descriptors():
            if not isinstance(descriptor, dict):
                logger.error('Rejected generator descriptor which is not a dictionary: {!r}'.format(descriptor))
                continue
            if not descriptor.get('id'):
                logger.error('Rejected generator descriptor without an id: {!r}'.format(descriptor))
                continue
            try:
                generator_class = _resolve(descriptor['generator'])
                model_class = _resolve(descriptor['model'])
            except Exception as err:
                logger.error('Rejected generator descriptor "{}": {}'.format(descriptor['id'], err))
                continue
            self.register(
                generator_class, model_class=model_class, id=descriptor['id'],
                label=descriptor.get('label'), description=descriptor.get('description')
            )
        return self

    def build(self):
        return PointGeneratorService(self.generators, self.info)


class PointGeneratorService(object):
    """
    Creates generators for scan models.

    :param generators: dictionary mapping model classes to generator classes
    :param info: dictionary mapping identifiers to GeneratorInfo
    """

    def __init__(self, generators, info):
        self.generators = MappingProxyType(dict(generators))
        self.info = MappingProxyType(dict(sorted(info.items())))

    def registered_generators(self):
        """
        Sorted list of registered generator identifiers
        """
        return list(self.info.keys())

    def generator_info(self, id):
        try:
            return self.info[id]
        except KeyError:
            raise UnknownGeneratorId('No generator registered with id "{}"'.format(id), model_id=id)

    def create_generator(self, model, regions=None):
        """
        Create a generator for a model. The generator is selected by the type of the model. If
        regions of interest are given, the bounding shape of the model is derived from them and
        they are attached to the generator as position filters.

        :param model: scan model
        :param regions: optional sequence of regions of interest
        :return: generator
        """
        if isinstance(model, CompoundModel):
            return self.create_compound_model_generator(model, regions)

        generator_class = self.generators.get(type(model))
        if generator_class is None:
            raise UnknownModelKind(
                'No generator registered for {}'.format(type(model).__name__),
                model_id=getattr(model, 'kind', None)
            )
        try:
            generator = generator_class()
            if regions:
                regions = list(regions)
                model = set_bounds(model, regions)
                generator.set_regions(regions)
            generator.set_model(model)
            generator.validate()
            return generator
        except GeneratorError:
            raise
        except Exception as err:
            raise ConstructionFailed(
                'Cannot make a new generator for {}: {}'.format(type(model).__name__, err),
                model_id=generator_class.id
            ) from err

    def create_generator_by_id(self, id):
        """
        Create a generator with a default model from its registry identifier. The model is not
        validated and is expected to be replaced with set_model.

        :param id: registry identifier
        :return: generator
        """
        info = self.generator_info(id)
        try:
            generator = info.generator_class()
            generator.set_model(info.model_class())
        except Exception as err:
            raise ConstructionFailed('Cannot make generator "{}": {}'.format(id, err), model_id=id) from err
        if info.label is not None:
            generator.label = info.label
        if info.description is not None:
            generator.description = info.description
        return generator

    def create_compound_generator(self, *generators):
        """
        Nest already created generators, outermost first
        """
        return CompoundGenerator(generators)

    def create_compound_model_generator(self, compound_model, regions=None):
        """
        Create a compound generator from a CompoundModel, giving each inner model only the
        regions which apply to it. Regions passed in from an enclosing compound filter the
        combined positions of this one.

        :param compound_model: CompoundModel
        :param regions: optional sequence of regions of interest
        :return: CompoundGenerator
        """
        generators = [
            self.create_generator(model, self.find_regions(model, compound_model.regions))
            for model in compound_model.models
        ]
        generator = CompoundGenerator(generators, model=compound_model)
        if regions:
            generator.set_regions(regions)
        return generator

    @staticmethod
    def find_regions(model, scan_regions):
        return find_regions(model, scan_regions)


def create_service(sources=None):
    """
    Build the point generator service from the built-in generators and extension sources.

    :param sources: sequence of descriptor sources, by default the sources enabled in the
        configuration
    :return: PointGeneratorService
    """
    from .plugins import default_sources

    builder = RegistryBuilder().register_static()
    for source in (default_sources() if sources is None else sources):
        builder.extend(source)
    return builder.build()
