"""Custom exception hierarchy for the measuretheory package."""


class MeasureTheoryException(Exception):
    """Base exception for measuretheory."""


class ConfigValidationError(MeasureTheoryException):
    """Exception raised when a config is invalid."""


class ShapeMismatchError(MeasureTheoryException):
    """Exception raised when an index source or an assignment has an incompatible shape."""


class ArityMismatchError(MeasureTheoryException):
    """Exception raised when the number of parameters does not match the free parameters of a family."""


class UnknownParameterError(MeasureTheoryException):
    """Exception raised when a parameter name is not declared by a measure family."""


class HeterogeneousBaseMeasureError(MeasureTheoryException):
    """Exception raised when the elements of a product measure do not share a base measure."""
