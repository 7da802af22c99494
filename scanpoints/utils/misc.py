import ast
import math

from importlib import import_module

# relative slack applied when converting a span into a whole number of steps
STEP_TOLERANCE = 1e-10


def import_string(dotted_path):
    """
    Import a dotted module path and return the attribute/class designated by the
    last name in the path. Raise ImportError if the import failed.
    """
    try:
        module_path, class_name = dotted_path.rsplit('.', 1)
    except ValueError as err:
        raise ImportError("{} doesn't look like a module path".format(dotted_path)) from err

    module = import_module(module_path)

    try:
        return getattr(module, class_name)
    except AttributeError as err:
        raise ImportError(
            'Module "{}" does not define a "{}" attribute/class'.format(module_path, class_name)
        ) from err


def extract_variable(mod_path, variable, default=None):
    """
    Read the literal value assigned to a module level variable without executing the module.

    :param mod_path: path to python source file
    :param variable: name of the variable
    :param default: value returned if the variable is not assigned in the module
    :return: the literal value
    """
    with open(mod_path, "r") as file_mod:
        data = file_mod.read()

    ast_data = ast.parse(data, filename=str(mod_path))

    if ast_data:
        for body in ast_data.body:
            proceed = (
                body.__class__ == ast.Assign and
                len(body.targets) == 1 and
                getattr(body.targets[0], "id", "") == variable
            )
            if proceed:
                return ast.literal_eval(body.value)
    return default


def count_steps(span, step):
    """
    Number of whole steps which fit in a span, tolerant of floating point round-off.

    :param span: distance to cover
    :param step: step size, same sign as span
    :return: int
    """
    return int(math.floor(span / step + STEP_TOLERANCE))


def same_sign(a, b):
    return (a >= 0) == (b >= 0)
