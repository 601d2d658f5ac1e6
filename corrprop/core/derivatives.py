"""
Sparse derivative maps.

A derivative map is a ``dict`` from atomic variable id to the partial
derivative of a value with respect to that variable, i.e. one sparse row of
the Jacobian. Maps are never mutated once handed to a value; every helper
here builds a new dict.
"""

import math
from typing import Dict, Mapping

from ..registry.variables import VariableRegistry

# Entries smaller than this contribute nothing measurable to a variance
PRUNE_THRESHOLD = 1e-300

DerivativeMap = Dict[int, float]


def prune(derivatives: Mapping[int, float], threshold: float = PRUNE_THRESHOLD) -> DerivativeMap:
    """Drop entries whose magnitude is below ``threshold``."""
    return {var_id: d for var_id, d in derivatives.items() if abs(d) >= threshold}


def scale(derivatives: Mapping[int, float], factor: float) -> DerivativeMap:
    """Chain rule: multiply every partial derivative by ``factor``."""
    if factor == 1.0:
        return prune(derivatives)
    return prune({var_id: d * factor for var_id, d in derivatives.items()})


def combine(
    left: Mapping[int, float],
    left_factor: float,
    right: Mapping[int, float],
    right_factor: float
) -> DerivativeMap:
    """
    Merge two maps as ``left_factor * left + right_factor * right``.

    Ids present in both maps are summed algebraically, which is what makes
    ``x - x`` cancel exactly instead of adding in quadrature.
    """
    merged = {var_id: d * left_factor for var_id, d in left.items()}
    for var_id, d in right.items():
        merged[var_id] = merged.get(var_id, 0.0) + d * right_factor
    return prune(merged)


def components(derivatives: Mapping[int, float], registry: VariableRegistry) -> DerivativeMap:
    """Per-variable standard deviation contributions ``d_i * sigma_i``."""
    ids = list(derivatives)
    stddevs = registry.lookup_many(ids)
    return {var_id: derivatives[var_id] * sigma for var_id, sigma in zip(ids, stddevs)}


def variance(derivatives: Mapping[int, float], registry: VariableRegistry) -> float:
    """First-order variance ``sum((d_i * sigma_i)**2)``."""
    if not derivatives:
        return 0.0
    return math.fsum(c * c for c in components(derivatives, registry).values())


def covariance(
    left: Mapping[int, float],
    right: Mapping[int, float],
    registry: VariableRegistry
) -> float:
    """First-order covariance of two values from their shared variables."""
    # iterate over the smaller map
    if len(left) > len(right):
        left, right = right, left
    shared = [var_id for var_id in left if var_id in right]
    if not shared:
        return 0.0
    stddevs = registry.lookup_many(shared)
    return math.fsum(
        left[var_id] * right[var_id] * sigma * sigma
        for var_id, sigma in zip(shared, stddevs)
    )
