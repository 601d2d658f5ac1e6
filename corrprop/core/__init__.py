from .value import UncertainValue, ufloat, to_uncertain
from .derivatives import PRUNE_THRESHOLD

__all__ = ['UncertainValue', 'ufloat', 'to_uncertain', 'PRUNE_THRESHOLD']
