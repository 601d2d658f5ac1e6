from .notation import (
    format_fixed, format_scientific, format_compact, format_value, round_uncertainty
)

__all__ = [
    'format_fixed', 'format_scientific', 'format_compact',
    'format_value', 'round_uncertainty'
]
