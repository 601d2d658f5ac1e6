"""
Covariance and correlation between uncertain values.
"""

from typing import Iterable

import numpy as np

from ..core import derivatives as dmap
from ..core.value import to_uncertain
from ..registry.variables import get_registry


def covariance_matrix(values: Iterable) -> np.ndarray:
    """
    First-order covariance matrix of a collection of values.

    Entries are ``sum_k d_ik * d_jk * sigma_k**2`` over the atomic variables
    shared by values ``i`` and ``j``. Arrays are flattened in C order.
    """
    values = [to_uncertain(v) for v in np.asarray(list(values), dtype=object).ravel()]
    registry = get_registry()
    n = len(values)
    cov = np.zeros((n, n))
    for i in range(n):
        for j in range(i, n):
            cov[i, j] = cov[j, i] = dmap.covariance(
                values[i].derivatives, values[j].derivatives, registry
            )
    return cov


def correlation_matrix(values: Iterable) -> np.ndarray:
    """Correlation coefficients; every value must have a non-zero standard deviation."""
    cov = covariance_matrix(values)
    std = np.sqrt(np.diag(cov))
    if np.any(std == 0):
        raise ValueError("Correlation is undefined for values with zero standard deviation")
    corr = cov / np.outer(std, std)
    np.fill_diagonal(corr, 1.0)
    return np.clip(corr, -1.0, 1.0)
