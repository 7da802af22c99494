"""
Configuration read from the environment.

SCANPOINTS_DEBUG
    '1' or 'true' for debug logging.
SCANPOINTS_PLUGINS
    Descriptor files, separated by os.pathsep. Each file assigns a list of descriptor
    dictionaries to a GENERATORS variable.
SCANPOINTS_ENTRY_POINTS
    '0' or 'false' disables discovery of generators through package entry points.
"""
import os

TRUE_VALUES = ['1', 'True', 'TRUE', 'true']
FALSE_VALUES = ['0', 'False', 'FALSE', 'false']

ENTRY_POINT_GROUP = 'scanpoints.generators'
DESCRIPTOR_VARIABLE = 'GENERATORS'


def debug_enabled():
    return os.environ.get('SCANPOINTS_DEBUG', '0') in TRUE_VALUES


def get_plugin_files():
    """
    List of descriptor files named in the environment
    """
    paths = os.environ.get('SCANPOINTS_PLUGINS', '')
    return [path for path in paths.split(os.pathsep) if path.strip()]


def entry_points_enabled():
    return os.environ.get('SCANPOINTS_ENTRY_POINTS', '1') not in FALSE_VALUES
