"""
Analytic functions of uncertain values.

Each function evaluates the ordinary function at the nominal value and
scales the operand's derivative map by the local derivative (chain rule).
Domain checks happen before any derivative map is touched. Plain real
arguments are accepted and treated as exact constants.
"""

import math
from typing import Union

from ..core.value import UncertainValue, to_uncertain
from ..exceptions import DomainError

Number = Union[UncertainValue, float]

_LN10 = math.log(10.0)
_LN2 = math.log(2.0)


# Trigonometric functions

def sin(x: Number) -> UncertainValue:
    x = to_uncertain(x)
    return x._chain(math.sin(x.nominal), math.cos(x.nominal))


def cos(x: Number) -> UncertainValue:
    x = to_uncertain(x)
    return x._chain(math.cos(x.nominal), -math.sin(x.nominal))


def tan(x: Number) -> UncertainValue:
    x = to_uncertain(x)
    cos_x = math.cos(x.nominal)
    if cos_x == 0.0:
        raise DomainError(f"tan is undefined at {x.nominal} (cos(x) = 0)")
    return x._chain(math.tan(x.nominal), 1.0 / (cos_x * cos_x))


# Inverse trigonometric functions

def asin(x: Number) -> UncertainValue:
    x = to_uncertain(x)
    val = x.nominal
    if not -1.0 <= val <= 1.0:
        raise DomainError(f"asin input must be in range [-1, 1], got {val}")
    if abs(val) == 1.0:
        raise DomainError("asin derivative is undefined at x = ±1")
    return x._chain(math.asin(val), 1.0 / math.sqrt(1.0 - val * val))


def acos(x: Number) -> UncertainValue:
    x = to_uncertain(x)
    val = x.nominal
    if not -1.0 <= val <= 1.0:
        raise DomainError(f"acos input must be in range [-1, 1], got {val}")
    if abs(val) == 1.0:
        raise DomainError("acos derivative is undefined at x = ±1")
    return x._chain(math.acos(val), -1.0 / math.sqrt(1.0 - val * val))


def atan(x: Number) -> UncertainValue:
    x = to_uncertain(x)
    val = x.nominal
    return x._chain(math.atan(val), 1.0 / (1.0 + val * val))


def atan2(y: Number, x: Number) -> UncertainValue:
    """Angle of the point ``(x, y)``; undefined when both are zero."""
    y = to_uncertain(y)
    x = to_uncertain(x)
    if x.nominal == 0.0 and y.nominal == 0.0:
        raise DomainError("atan2 is undefined when both arguments are zero")
    r2 = x.nominal * x.nominal + y.nominal * y.nominal
    return UncertainValue._combine(
        math.atan2(y.nominal, x.nominal),
        y, x.nominal / r2,
        x, -y.nominal / r2
    )


# Hyperbolic functions

def sinh(x: Number) -> UncertainValue:
    x = to_uncertain(x)
    return x._chain(math.sinh(x.nominal), math.cosh(x.nominal))


def cosh(x: Number) -> UncertainValue:
    x = to_uncertain(x)
    return x._chain(math.cosh(x.nominal), math.sinh(x.nominal))


def tanh(x: Number) -> UncertainValue:
    x = to_uncertain(x)
    cosh_x = math.cosh(x.nominal)
    return x._chain(math.tanh(x.nominal), 1.0 / (cosh_x * cosh_x))


def asinh(x: Number) -> UncertainValue:
    x = to_uncertain(x)
    val = x.nominal
    return x._chain(math.asinh(val), 1.0 / math.sqrt(val * val + 1.0))


def acosh(x: Number) -> UncertainValue:
    x = to_uncertain(x)
    val = x.nominal
    if val < 1.0:
        raise DomainError(f"acosh input must be >= 1, got {val}")
    if val == 1.0:
        raise DomainError("acosh derivative is undefined at x = 1")
    return x._chain(math.acosh(val), 1.0 / math.sqrt(val * val - 1.0))


def atanh(x: Number) -> UncertainValue:
    x = to_uncertain(x)
    val = x.nominal
    if not -1.0 < val < 1.0:
        raise DomainError(f"atanh input must be in range (-1, 1), got {val}")
    return x._chain(math.atanh(val), 1.0 / (1.0 - val * val))


# Exponential and logarithmic functions

def exp(x: Number) -> UncertainValue:
    x = to_uncertain(x)
    result = math.exp(x.nominal)
    return x._chain(result, result)


def log(x: Number, base: Union[float, None] = None) -> UncertainValue:
    """Natural logarithm, or logarithm to a positive constant ``base``."""
    x = to_uncertain(x)
    if x.nominal <= 0.0:
        raise DomainError(f"Logarithm input must be greater than zero, got {x.nominal}")
    if base is None:
        return x._chain(math.log(x.nominal), 1.0 / x.nominal)
    if base <= 0.0 or base == 1.0:
        raise DomainError(f"Logarithm base must be positive and different from 1, got {base}")
    ln_base = math.log(base)
    return x._chain(math.log(x.nominal) / ln_base, 1.0 / (x.nominal * ln_base))


def log10(x: Number) -> UncertainValue:
    x = to_uncertain(x)
    if x.nominal <= 0.0:
        raise DomainError(f"log10 input must be greater than zero, got {x.nominal}")
    return x._chain(math.log10(x.nominal), 1.0 / (x.nominal * _LN10))


def log2(x: Number) -> UncertainValue:
    x = to_uncertain(x)
    if x.nominal <= 0.0:
        raise DomainError(f"log2 input must be greater than zero, got {x.nominal}")
    return x._chain(math.log2(x.nominal), 1.0 / (x.nominal * _LN2))


def sqrt(x: Number) -> UncertainValue:
    x = to_uncertain(x)
    if x.nominal <= 0.0:
        raise DomainError(f"sqrt input must be greater than zero, got {x.nominal}")
    result = math.sqrt(x.nominal)
    return x._chain(result, 0.5 / result)


def pow(base: Number, exponent: Number) -> UncertainValue:
    """General power ``base ** exponent`` for a strictly positive base."""
    return to_uncertain(base) ** exponent


# Other functions

def fabs(x: Number) -> UncertainValue:
    """Absolute value. The kink at 0 gets slope 0."""
    x = to_uncertain(x)
    val = x.nominal
    if val > 0.0:
        slope = 1.0
    elif val < 0.0:
        slope = -1.0
    else:
        slope = 0.0
    return x._chain(abs(val), slope)


def hypot(x: Number, y: Number) -> UncertainValue:
    """
    Euclidean norm ``sqrt(x**2 + y**2)``.

    At the origin the gradient does not exist; both derivative maps are then
    merged unscaled.
    """
    x = to_uncertain(x)
    y = to_uncertain(y)
    h = math.hypot(x.nominal, y.nominal)
    if h == 0.0:
        return UncertainValue._combine(0.0, x, 1.0, y, 1.0)
    return UncertainValue._combine(h, x, x.nominal / h, y, y.nominal / h)


def degrees(x: Number) -> UncertainValue:
    x = to_uncertain(x)
    return x._chain(math.degrees(x.nominal), 180.0 / math.pi)


def radians(x: Number) -> UncertainValue:
    x = to_uncertain(x)
    return x._chain(math.radians(x.nominal), math.pi / 180.0)
