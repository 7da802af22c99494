"""
Sources of generator descriptors for extending the registry.

A descriptor is a dictionary::

    {
        'id': 'my-generator',
        'model': 'package.module.MyModel',
        'generator': 'package.module.MyGenerator',
        'label': 'My Generator',            # optional
        'description': 'What it does',      # optional
    }

Model and generator may be given as classes or as dotted import paths.
"""
import os
from importlib.metadata import entry_points

from zope.interface import implementer

from . import conf
from .interfaces import IDescriptorSource
from .utils.log import get_module_logger
from .utils.misc import extract_variable

logger = get_module_logger(__name__)


@implementer(IDescriptorSource)
class MemorySource(object):
    """
    Descriptors held in memory

    :param descriptors: sequence of descriptor dictionaries
    """

    def __init__(self, descriptors=()):
        self.entries = [dict(descriptor) for descriptor in descriptors]

    def descriptors(self):
        return iter(self.entries)


@implementer(IDescriptorSource)
class ModuleSource(object):
    """
    Descriptors assigned as a literal to a variable in a python file. The file is parsed, not
    executed.

    :param path: path to the file
    :param variable: variable name
    """

    def __init__(self, path, variable=conf.DESCRIPTOR_VARIABLE):
        self.path = path
        self.variable = variable

    def descriptors(self):
        if not os.path.exists(self.path):
            logger.error('Descriptor file {} not found'.format(self.path))
            return iter(())
        try:
            entries = extract_variable(self.path, self.variable, default=[])
        except (OSError, SyntaxError, ValueError) as err:
            logger.error('Cannot read descriptors from {}: {}'.format(self.path, err))
            return iter(())
        if not isinstance(entries, (list, tuple)):
            logger.error('{} in {} is not a list of descriptors'.format(self.variable, self.path))
            return iter(())
        logger.debug('{} descriptors found in {}'.format(len(entries), self.path))
        return iter(entries)


@implementer(IDescriptorSource)
class EntryPointSource(object):
    """
    Descriptors published by installed packages through entry points. Each entry point refers
    either to a descriptor dictionary or to a generator class, in which case the id, model class,
    label and description are taken from the attributes of the class.

    :param group: entry point group
    """

    def __init__(self, group=conf.ENTRY_POINT_GROUP):
        self.group = group

    def descriptors(self):
        for entry in entry_points(group=self.group):
            try:
                target = entry.load()
            except Exception as err:
                logger.error('Cannot load generator entry point "{}": {}'.format(entry.name, err))
                continue
            if isinstance(target, dict):
                descriptor = dict(target)
            else:
                descriptor = {
                    'id': getattr(target, 'id', None) or entry.name,
                    'model': getattr(target, 'model_class', None),
                    'generator': target,
                    'label': getattr(target, 'label', None),
                    'description': getattr(target, 'description', None),
                }
            descriptor.setdefault('id', entry.name)
            yield descriptor


def default_sources():
    """
    Descriptor sources enabled by the configuration
    """
    sources = [ModuleSource(path) for path in conf.get_plugin_files()]
    if conf.entry_points_enabled():
        sources.append(EntryPointSource())
    return sources
