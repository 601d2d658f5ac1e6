"""
Human-readable rendering of ``nominal ± stddev`` pairs.

Three notations are supported:

- fixed:       ``"1.500000 ± 0.100000"``
- scientific:  ``"(1.234 ± 0.056)e+03"``
- compact:     ``"1.234(56)"``, the uncertainty digits in parentheses apply to
  the last digits of the nominal value
"""

import math
import re
from decimal import Context, Decimal, ROUND_HALF_UP
from typing import Tuple

# wide enough for any double at any decimal place
_DECIMAL_CONTEXT = Context(prec=800)

_FORMAT_SPEC = re.compile(r'^(?:\.(?P<precision>\d+))?(?P<kind>[fec]?)$')


def _quantize(value: float, places: int) -> Decimal:
    """Round half-up to ``places`` decimals (negative places round to tens, hundreds...)."""
    quantum = Decimal(1).scaleb(-places)
    return Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP, context=_DECIMAL_CONTEXT)


def round_uncertainty(stddev: float, digits: int = 2) -> Tuple[str, int]:
    """
    Round an uncertainty to a number of significant digits.

    Parameters
    ----------
    stddev : float
        Positive, finite standard deviation
    digits : int
        Number of significant digits to keep

    Returns
    -------
    tuple
        ``(significant_digits, decimal_places)``, e.g. ``0.0123 -> ("12", 3)``
        and ``0.0996 -> ("10", 2)``. Negative decimal places mean the
        uncertainty is rounded to tens, hundreds and so on.
    """
    if digits < 1:
        raise ValueError(f"Number of significant digits must be at least 1, got {digits}")
    if not math.isfinite(stddev) or stddev <= 0:
        raise ValueError(f"Cannot round a non-positive or non-finite uncertainty: {stddev}")

    exponent = math.floor(math.log10(stddev))
    places = digits - 1 - exponent
    rounded = _quantize(stddev, places)

    # rounding carried into the next power of ten, e.g. 0.0996 -> 0.100
    if rounded >= Decimal(1).scaleb(exponent + 1):
        places -= 1
        rounded = _quantize(stddev, places)

    return str(int(rounded.scaleb(places))), places


def format_fixed(nominal: float, stddev: float, precision: int = 6) -> str:
    """Fixed-point notation with the same number of decimals on both parts."""
    if precision < 0:
        raise ValueError(f"Precision must be non-negative, got {precision}")
    return f"{nominal:.{precision}f} ± {stddev:.{precision}f}"


def format_scientific(nominal: float, stddev: float, precision: int = 3) -> str:
    """
    Scientific notation sharing one exponent.

    The exponent comes from the nominal value, or from the uncertainty when
    the nominal value is zero.
    """
    if precision < 0:
        raise ValueError(f"Precision must be non-negative, got {precision}")

    reference = nominal if nominal != 0 else stddev
    if reference == 0 or not math.isfinite(reference):
        exponent = 0
    else:
        exponent = math.floor(math.log10(abs(reference)))
    factor = 10.0 ** exponent

    return f"({nominal / factor:.{precision}f} ± {stddev / factor:.{precision}f})e{exponent:+03d}"


def format_compact(nominal: float, stddev: float, digits: int = 2) -> str:
    """
    Compact notation, e.g. ``1.23456 ± 0.0123 -> "1.235(12)"``.

    The uncertainty is rounded to ``digits`` significant digits and the
    nominal value is rounded to the same decimal place.
    """
    if digits < 1:
        raise ValueError(f"Number of significant digits must be at least 1, got {digits}")
    if not (math.isfinite(nominal) and math.isfinite(stddev)):
        return f"{nominal}({stddev})"
    if stddev == 0:
        return f"{nominal}(0)"

    unc_digits, places = round_uncertainty(stddev, digits)
    value = _quantize(nominal, places)

    if places > 0:
        return f"{value:.{places}f}({unc_digits})"

    # uncertainty reaches the units place: print both as integers
    return f"{int(value)}({int(_quantize(stddev, places))})"


def format_value(nominal: float, stddev: float, format_spec: str = '') -> str:
    """
    Render according to a format spec ``[.precision][f|e|c]``.

    An empty spec gives ``"nominal ± stddev"`` with full float precision.
    For ``c`` the precision is the number of significant uncertainty digits.
    """
    match = _FORMAT_SPEC.match(format_spec)
    if match is None:
        raise ValueError(f"Unknown format specification: {format_spec!r}")

    precision = match.group('precision')
    kind = match.group('kind')

    if kind == 'e':
        return format_scientific(nominal, stddev, 3 if precision is None else int(precision))
    if kind == 'c':
        return format_compact(nominal, stddev, 2 if precision is None else int(precision))
    if kind == 'f' or precision is not None:
        return format_fixed(nominal, stddev, 6 if precision is None else int(precision))
    return f"{nominal} ± {stddev}"
