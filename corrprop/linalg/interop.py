"""
Using uncertain values as elements of numpy arrays.

``UncertainValue`` behaves as a real scalar inside ``dtype=object`` arrays:
elementwise arithmetic, ``@``, ``np.dot``, ``np.cross``, ``np.trace``,
``.T``, ``np.sqrt`` and ``np.abs`` all dispatch to the engine, so correlation
survives matrix arithmetic. This module adds constructors, accessors, the
numeric traits a generic numeric container expects, and the decompositions
numpy only implements for floating-point dtypes.
"""

import math
from functools import reduce
from typing import Sequence, Union

import numpy as np

from ..core.value import UncertainValue, to_uncertain
from ..exceptions import DivisionByZeroError
from ..umath.functions import hypot

_FINFO = np.finfo(np.float64)


def uarray(nominals, stddevs) -> np.ndarray:
    """
    Build an object array of independent atomic values.

    Parameters
    ----------
    nominals : array_like
        Nominal values
    stddevs : array_like
        Standard deviations, broadcast against ``nominals``

    Returns
    -------
    np.ndarray
        Array of ``UncertainValue`` with ``dtype=object``
    """
    nominals, stddevs = np.broadcast_arrays(
        np.asarray(nominals, dtype=float), np.asarray(stddevs, dtype=float)
    )
    result = np.empty(nominals.shape, dtype=object)
    for index in np.ndindex(nominals.shape):
        result[index] = UncertainValue(nominals[index], stddevs[index])
    return result


def as_uncertain_array(values) -> np.ndarray:
    """Object array where every element is an UncertainValue (plain numbers become constants)."""
    values = np.asarray(values, dtype=object)
    result = np.empty(values.shape, dtype=object)
    for index in np.ndindex(values.shape):
        result[index] = to_uncertain(values[index])
    return result


def _elementwise(func, values):
    if isinstance(values, UncertainValue):
        return func(values)
    return np.vectorize(func, otypes=[float])(values)


def nominal_values(values) -> Union[float, np.ndarray]:
    """Nominal values of an array (or a single value)."""
    return _elementwise(lambda x: to_uncertain(x).nominal, values)


def std_devs(values) -> Union[float, np.ndarray]:
    """Standard deviations of an array (or a single value)."""
    return _elementwise(lambda x: to_uncertain(x).stddev, values)


# Numeric traits
# --------------

def zero() -> UncertainValue:
    """Additive identity."""
    return UncertainValue(0.0)


def one() -> UncertainValue:
    """Multiplicative identity."""
    return UncertainValue(1.0)


def epsilon() -> UncertainValue:
    return UncertainValue(float(_FINFO.eps))


def dummy_precision() -> UncertainValue:
    return UncertainValue(1e-12)


def highest() -> UncertainValue:
    return UncertainValue(float(_FINFO.max))


def lowest() -> UncertainValue:
    return UncertainValue(float(_FINFO.min))


def infinity() -> UncertainValue:
    return UncertainValue(math.inf)


def quiet_nan() -> UncertainValue:
    return UncertainValue(math.nan)


def isfinite(x) -> bool:
    x = to_uncertain(x)
    return math.isfinite(x.nominal) and math.isfinite(x.stddev)


def isnan(x) -> bool:
    x = to_uncertain(x)
    return math.isnan(x.nominal) or math.isnan(x.stddev)


def isinf(x) -> bool:
    x = to_uncertain(x)
    return math.isinf(x.nominal) or math.isinf(x.stddev)


# Decompositions
# --------------

def _square(matrix) -> np.ndarray:
    a = as_uncertain_array(matrix)
    if a.ndim != 2 or a.shape[0] != a.shape[1]:
        raise ValueError(f"Expected a square matrix, got shape {a.shape}")
    return a


def _cofactor_det(a: np.ndarray) -> UncertainValue:
    """Laplace expansion along the first row; exact in the derivatives, O(n!)."""
    n = a.shape[0]
    if n == 1:
        return a[0, 0]
    if n == 2:
        return a[0, 0] * a[1, 1] - a[0, 1] * a[1, 0]
    total = zero()
    for col in range(n):
        minor = np.delete(a[1:], col, axis=1)
        term = a[0, col] * _cofactor_det(minor)
        total = total + term if col % 2 == 0 else total - term
    return total


def det(matrix) -> UncertainValue:
    """
    Determinant of a square matrix of uncertain values.

    Small matrices and matrices whose elimination hits an exactly zero pivot
    use cofactor expansion; the rest use Gaussian elimination with partial
    pivoting on the nominal values.
    """
    a = _square(matrix)
    n = a.shape[0]
    if n == 0:
        return one()
    if n <= 3:
        return _cofactor_det(a)

    work = a.copy()
    result = one()
    sign = 1.0
    for col in range(n):
        pivot = max(range(col, n), key=lambda row: abs(work[row, col].nominal))
        if work[pivot, col].nominal == 0.0:
            return _cofactor_det(a)
        if pivot != col:
            work[[col, pivot]] = work[[pivot, col]]
            sign = -sign
        for row in range(col + 1, n):
            factor = work[row, col] / work[col, col]
            work[row, col:] = work[row, col:] - factor * work[col, col:]
        result = result * work[col, col]
    return result * sign


def inv(matrix) -> np.ndarray:
    """Inverse by Gauss-Jordan elimination with partial pivoting."""
    a = _square(matrix)
    n = a.shape[0]
    work = np.concatenate([a, as_uncertain_array(np.eye(n))], axis=1)

    for col in range(n):
        pivot = max(range(col, n), key=lambda row: abs(work[row, col].nominal))
        if work[pivot, col].nominal == 0.0:
            raise DivisionByZeroError("Matrix is singular")
        if pivot != col:
            work[[col, pivot]] = work[[pivot, col]]
        work[col] = work[col] / work[col, col]
        for row in range(n):
            if row != col:
                work[row] = work[row] - work[row, col] * work[col]

    return work[:, n:]


def norm(vector: Sequence) -> UncertainValue:
    """Euclidean norm, built from repeated ``hypot`` so a zero vector is allowed."""
    elements = list(as_uncertain_array(vector).ravel())
    if not elements:
        return zero()
    return reduce(hypot, elements, zero())
