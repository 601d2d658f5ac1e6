from .functions import (
    sin, cos, tan, asin, acos, atan, atan2,
    sinh, cosh, tanh, asinh, acosh, atanh,
    exp, log, log10, log2, sqrt, pow,
    fabs, hypot, degrees, radians
)

__all__ = [
    'sin', 'cos', 'tan', 'asin', 'acos', 'atan', 'atan2',
    'sinh', 'cosh', 'tanh', 'asinh', 'acosh', 'atanh',
    'exp', 'log', 'log10', 'log2', 'sqrt', 'pow',
    'fabs', 'hypot', 'degrees', 'radians'
]
