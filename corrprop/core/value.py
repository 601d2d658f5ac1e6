"""
Values with correlated, first-order uncertainty.
"""

import math
import warnings
from numbers import Real
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple, Union

from scipy import stats

from . import derivatives as dmap
from ..exceptions import DivisionByZeroError, InvalidArgumentError, PowerBaseError
from ..formatting.notation import format_value
from ..registry.variables import get_registry


def _is_real(x) -> bool:
    return isinstance(x, Real) and not isinstance(x, bool)


def _check_stddev(stddev) -> float:
    if not _is_real(stddev):
        raise TypeError(f"Standard deviation must be a real number, got {type(stddev).__name__}")
    stddev = float(stddev)
    if stddev < 0 or math.isnan(stddev):
        raise InvalidArgumentError(f"Standard deviation cannot be negative, got {stddev}")
    return stddev


class UncertainValue:
    """
    A scalar ``nominal ± stddev`` that remembers what it was computed from.

    Instead of an accumulated standard deviation, each value stores the partial
    derivatives of its nominal value with respect to every atomic variable it
    depends on. The standard deviation is assembled on demand from these
    derivatives and the original standard deviations kept in the registry, so
    values sharing an ancestor are correlated exactly:

    >>> x = UncertainValue(10.0, 0.5)
    >>> (x - x).stddev
    0.0
    >>> (x + x).stddev
    1.0
    """

    __slots__ = ('_nominal', '_derivatives')

    def __init__(self, nominal: float = 0.0, stddev: Optional[float] = None):
        if not _is_real(nominal):
            raise TypeError(f"Nominal value must be a real number, got {type(nominal).__name__}")
        self._nominal = float(nominal)
        self._derivatives: Dict[int, float] = {}
        if stddev is not None:
            stddev = _check_stddev(stddev)
            if stddev > 0:
                self._derivatives = {get_registry().register(stddev): 1.0}

    @classmethod
    def _derived(cls, nominal: float, derivatives: Dict[int, float]) -> 'UncertainValue':
        """Build a derived value; ``derivatives`` must already be pruned."""
        value = cls.__new__(cls)
        value._nominal = float(nominal)
        value._derivatives = derivatives
        return value

    def _chain(self, nominal: float, slope: float) -> 'UncertainValue':
        """Apply a unary function with local derivative ``slope``."""
        return UncertainValue._derived(nominal, dmap.scale(self._derivatives, slope))

    @staticmethod
    def _combine(
        nominal: float,
        left: 'UncertainValue',
        left_slope: float,
        right: 'UncertainValue',
        right_slope: float
    ) -> 'UncertainValue':
        """Apply a binary function with partial derivatives ``left_slope`` and ``right_slope``."""
        return UncertainValue._derived(
            nominal,
            dmap.combine(left._derivatives, left_slope, right._derivatives, right_slope)
        )

    # Accessors
    # ---------

    @property
    def nominal(self) -> float:
        """Central value."""
        return self._nominal

    n = nominal

    @property
    def stddev(self) -> float:
        """Standard deviation, recomputed from the registry on every access."""
        return math.sqrt(self.variance)

    s = stddev

    @property
    def variance(self) -> float:
        return dmap.variance(self._derivatives, get_registry())

    @property
    def derivatives(self) -> Mapping[int, float]:
        """Read-only view of ``{variable id: partial derivative}``."""
        return MappingProxyType(self._derivatives)

    def num_variables(self) -> int:
        """Number of atomic variables this value depends on."""
        return len(self._derivatives)

    def is_atomic(self) -> bool:
        """True for a value that is exactly one atomic variable."""
        if len(self._derivatives) != 1:
            return False
        return next(iter(self._derivatives.values())) == 1.0

    def is_constant(self) -> bool:
        return not self._derivatives

    def error_components(self) -> Dict[int, float]:
        """Contribution ``d_i * sigma_i`` of each atomic variable to the standard deviation."""
        return dmap.components(self._derivatives, get_registry())

    def covariance(self, other: Union['UncertainValue', float]) -> float:
        """First-order covariance with another value."""
        other = _to_value(other)
        return dmap.covariance(self._derivatives, other._derivatives, get_registry())

    def interval(self, confidence_level: float = 0.6827) -> Tuple[float, float]:
        """
        Symmetric Gaussian confidence interval around the nominal value.

        Parameters
        ----------
        confidence_level : float
            Probability mass inside the interval, in (0, 1)

        Returns
        -------
        tuple
            ``(lower, upper)``
        """
        if not 0 < confidence_level < 1:
            raise ValueError(f"Confidence level must be between 0 and 1, got {confidence_level}")
        z = stats.norm.ppf(0.5 + confidence_level / 2)
        half_width = z * self.stddev
        return self._nominal - half_width, self._nominal + half_width

    # Copies and mutation
    # -------------------

    def independent_copy(self) -> 'UncertainValue':
        """A new atomic value with the same nominal and stddev but no correlation with this one."""
        return UncertainValue(self._nominal, self.stddev)

    def set_stddev(self, stddev: float):
        """
        Replace the uncertainty, turning this into a fresh atomic variable.

        All derivative information is discarded, so any correlation with other
        values is lost.
        """
        stddev = _check_stddev(stddev)
        if self._derivatives and not self.is_atomic():
            warnings.warn(
                f"Resetting the uncertainty of a derived value drops its correlation "
                f"with {len(self._derivatives)} atomic variable(s)"
            )
        if stddev > 0:
            self._derivatives = {get_registry().register(stddev): 1.0}
        else:
            self._derivatives = {}

    # Unary operators
    # ---------------

    def __neg__(self) -> 'UncertainValue':
        return self._chain(-self._nominal, -1.0)

    def __pos__(self) -> 'UncertainValue':
        return UncertainValue._derived(self._nominal, dict(self._derivatives))

    def __abs__(self) -> 'UncertainValue':
        from ..umath.functions import fabs
        return fabs(self)

    # Binary operators
    # ----------------

    def __add__(self, other):
        if not _is_operand(other):
            return NotImplemented
        other = _to_value(other)
        return UncertainValue._combine(self._nominal + other._nominal, self, 1.0, other, 1.0)

    def __radd__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return _to_value(other).__add__(self)

    def __sub__(self, other):
        if not _is_operand(other):
            return NotImplemented
        other = _to_value(other)
        return UncertainValue._combine(self._nominal - other._nominal, self, 1.0, other, -1.0)

    def __rsub__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return _to_value(other).__sub__(self)

    def __mul__(self, other):
        if not _is_operand(other):
            return NotImplemented
        other = _to_value(other)
        # product rule
        return UncertainValue._combine(
            self._nominal * other._nominal, self, other._nominal, other, self._nominal
        )

    def __rmul__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return _to_value(other).__mul__(self)

    def __truediv__(self, other):
        if not _is_operand(other):
            return NotImplemented
        other = _to_value(other)
        if other._nominal == 0.0:
            raise DivisionByZeroError("Division by an uncertain value with zero nominal value")
        inverse = 1.0 / other._nominal
        # quotient rule
        return UncertainValue._combine(
            self._nominal * inverse,
            self, inverse,
            other, -self._nominal * inverse * inverse
        )

    def __rtruediv__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return _to_value(other).__truediv__(self)

    def __pow__(self, other):
        if not _is_operand(other):
            return NotImplemented
        exponent = _to_value(other)
        if self._nominal <= 0.0:
            raise PowerBaseError(
                f"Base of a power must be strictly positive, got {self._nominal}"
            )
        result = self._nominal ** exponent._nominal
        return UncertainValue._combine(
            result,
            self, result * exponent._nominal / self._nominal,
            exponent, result * math.log(self._nominal)
        )

    def __rpow__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return _to_value(other).__pow__(self)

    # Comparisons use nominal values only
    # -----------------------------------

    def __eq__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self._nominal == _nominal_of(other)

    def __ne__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self._nominal != _nominal_of(other)

    def __lt__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self._nominal < _nominal_of(other)

    def __le__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self._nominal <= _nominal_of(other)

    def __gt__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self._nominal > _nominal_of(other)

    def __ge__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self._nominal >= _nominal_of(other)

    __hash__ = None

    def __bool__(self):
        return self._nominal != 0.0

    # numpy object-array ufuncs look these methods up by name
    # -------------------------------------------------------

    def sqrt(self) -> 'UncertainValue':
        from ..umath.functions import sqrt
        return sqrt(self)

    def exp(self) -> 'UncertainValue':
        from ..umath.functions import exp
        return exp(self)

    def log(self) -> 'UncertainValue':
        from ..umath.functions import log
        return log(self)

    def sin(self) -> 'UncertainValue':
        from ..umath.functions import sin
        return sin(self)

    def cos(self) -> 'UncertainValue':
        from ..umath.functions import cos
        return cos(self)

    def tan(self) -> 'UncertainValue':
        from ..umath.functions import tan
        return tan(self)

    def arctan(self) -> 'UncertainValue':
        from ..umath.functions import atan
        return atan(self)

    def conjugate(self) -> 'UncertainValue':
        return self

    # Presentation
    # ------------

    def __repr__(self):
        return f"UncertainValue(nominal={self._nominal!r}, stddev={self.stddev!r})"

    def __str__(self):
        return format_value(self._nominal, self.stddev)

    def __format__(self, format_spec: str) -> str:
        return format_value(self._nominal, self.stddev, format_spec)


def _is_operand(x) -> bool:
    return isinstance(x, UncertainValue) or _is_real(x)


def _nominal_of(x) -> float:
    return x._nominal if isinstance(x, UncertainValue) else float(x)


def _to_value(x) -> UncertainValue:
    if isinstance(x, UncertainValue):
        return x
    if _is_real(x):
        return UncertainValue(x)
    raise TypeError(f"Cannot use {type(x).__name__} as an uncertain value")


def ufloat(nominal: float, stddev: float = 0.0) -> UncertainValue:
    """Shorthand for ``UncertainValue(nominal, stddev)``."""
    return UncertainValue(nominal, stddev)


def to_uncertain(x: Union[UncertainValue, float]) -> UncertainValue:
    """Return ``x`` unchanged if it is an UncertainValue, else a constant with its value."""
    return _to_value(x)
