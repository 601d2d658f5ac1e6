"""
corrprop - Correlated Uncertainty Propagation for Python
=======================================================

First-order propagation of measurement uncertainty that tracks correlation
between derived quantities, so that ``x - x`` is exactly ``0 ± 0``.

Main Features:
- Uncertain values with sparse derivative maps over atomic variables
- Thread-safe registry of atomic variable uncertainties
- Analytic function library (trigonometric, hyperbolic, exponential, power)
- numpy object-array interoperability, covariance and correlation matrices
- Fixed, scientific and compact notations
- Evaluation of sympy expressions on uncertain values
"""

__version__ = "0.1.0"
__author__ = "corrprop Development Team"

from .exceptions import (
    UncertaintyError, InvalidArgumentError, DomainError,
    DivisionByZeroError, PowerBaseError, VariableNotFoundError
)
from .core import UncertainValue, ufloat, to_uncertain
from .registry import VariableRegistry, get_registry
from . import umath
from .linalg import uarray, nominal_values, std_devs, covariance_matrix, correlation_matrix
from .formatting import format_fixed, format_scientific, format_compact
from .expressions import propagate_uncertainties_symbolic

__all__ = [
    'UncertainValue',
    'ufloat',
    'to_uncertain',
    'VariableRegistry',
    'get_registry',
    'umath',
    'uarray',
    'nominal_values',
    'std_devs',
    'covariance_matrix',
    'correlation_matrix',
    'format_fixed',
    'format_scientific',
    'format_compact',
    'propagate_uncertainties_symbolic',
    'UncertaintyError',
    'InvalidArgumentError',
    'DomainError',
    'DivisionByZeroError',
    'PowerBaseError',
    'VariableNotFoundError'
]
