from .interop import (
    uarray, as_uncertain_array, nominal_values, std_devs,
    zero, one, epsilon, dummy_precision, highest, lowest, infinity, quiet_nan,
    isfinite, isnan, isinf, det, inv, norm
)
from .covariance import covariance_matrix, correlation_matrix

__all__ = [
    'uarray', 'as_uncertain_array', 'nominal_values', 'std_devs',
    'zero', 'one', 'epsilon', 'dummy_precision', 'highest', 'lowest', 'infinity', 'quiet_nan',
    'isfinite', 'isnan', 'isinf', 'det', 'inv', 'norm',
    'covariance_matrix', 'correlation_matrix'
]
