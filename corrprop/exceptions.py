"""
Error taxonomy for uncertainty propagation.
"""


class UncertaintyError(Exception):
    """Base class for every error raised by corrprop."""
    pass


class InvalidArgumentError(UncertaintyError, ValueError):
    """Raised when a standard deviation is negative."""
    pass


class DomainError(UncertaintyError, ValueError):
    """Raised when an input lies outside the domain where a function (or its derivative) is defined."""
    pass


class DivisionByZeroError(UncertaintyError, ZeroDivisionError):
    """Raised when a divisor has a zero nominal value."""
    pass


class PowerBaseError(DomainError, DivisionByZeroError):
    """Raised when the base of a power is not strictly positive."""
    pass


class VariableNotFoundError(UncertaintyError, LookupError):
    """Raised when a derivative map refers to an id the registry never issued."""
    pass
