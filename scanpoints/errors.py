"""
Errors raised by the point generator service.

Every error carries the identifier of the model or generator it concerns, when one is
known, and a human readable message.
"""


class GeneratorError(Exception):
    """
    Base class for all point generation errors.

    :param message: human readable description
    :param model_id: identifier of the model kind or generator concerned, if known
    """

    def __init__(self, message='', model_id=None):
        super().__init__(message)
        self.message = message
        self.model_id = model_id

    def __str__(self):
        if self.model_id:
            return '[{}] {}'.format(self.model_id, self.message)
        return self.message


class UnknownModelKind(GeneratorError):
    """No generator is registered for the type of model."""


class UnknownGeneratorId(GeneratorError):
    """No generator is registered under the identifier."""


class InvalidModel(GeneratorError):
    """Malformed or out-of-range model fields."""


class AxisCollision(GeneratorError):
    """The same axis name is driven by more than one generator of a compound."""


class ConstructionFailed(GeneratorError):
    """A generator or kernel could not be created. The underlying error is chained."""


class UnsupportedOperation(GeneratorError):
    """The operation is not supported by generators."""


class IterationExhausted(GeneratorError, StopIteration):
    """No more positions. Also a StopIteration so that plain for-loops terminate."""


class Aborted(IterationExhausted):
    """The generator was aborted before it was exhausted."""
