import math

import pytest

from corrprop import ufloat, umath
from corrprop.core.value import UncertainValue
from corrprop.exceptions import DomainError, PowerBaseError
from corrprop.registry import get_registry


class TestTrigonometric:

    def setup_method(self):
        get_registry().clear()

    def test_sin(self):
        """Test sin value and chain rule"""
        x = ufloat(0.5, 0.1)
        result = umath.sin(x)

        assert abs(result.nominal - math.sin(0.5)) < 1e-12
        assert abs(result.stddev - abs(math.cos(0.5)) * 0.1) < 1e-12

    def test_sin_at_zero(self):
        """Test sin(0) passes the uncertainty through unchanged"""
        result = umath.sin(ufloat(0.0, 0.1))

        assert result.nominal == pytest.approx(0.0)
        assert result.stddev == pytest.approx(0.1)

    def test_cos(self):
        """Test cos value and derivative sign"""
        x = ufloat(0.5, 0.1)
        result = umath.cos(x)

        assert abs(result.nominal - math.cos(0.5)) < 1e-12
        assert abs(result.stddev - math.sin(0.5) * 0.1) < 1e-12
        assert list(result.derivatives.values())[0] < 0

    def test_cos_at_zero_has_no_first_order_uncertainty(self):
        """Test cos'(0) = 0 removes all uncertainty"""
        result = umath.cos(ufloat(0.0, 0.1))

        assert result.nominal == pytest.approx(1.0)
        assert result.stddev == pytest.approx(0.0, abs=1e-12)
        assert result.num_variables() == 0

    def test_tan(self):
        """Test tan derivative 1/cos^2"""
        x = ufloat(0.5, 0.1)
        result = umath.tan(x)

        assert abs(result.nominal - math.tan(0.5)) < 1e-12
        assert abs(result.stddev - 0.1 / math.cos(0.5) ** 2) < 1e-12

    def test_asin(self):
        """Test asin derivative 1/sqrt(1 - x^2)"""
        x = ufloat(0.5, 0.1)
        result = umath.asin(x)

        assert abs(result.nominal - math.asin(0.5)) < 1e-12
        assert abs(result.stddev - 0.1 / math.sqrt(0.75)) < 1e-12

    def test_acos(self):
        """Test acos derivative -1/sqrt(1 - x^2)"""
        x = ufloat(0.5, 0.1)
        result = umath.acos(x)

        assert abs(result.nominal - math.acos(0.5)) < 1e-12
        assert abs(result.stddev - 0.1 / math.sqrt(0.75)) < 1e-12
        # asin(x) + acos(x) = pi/2 exactly
        total = umath.asin(x) + result
        assert abs(total.nominal - math.pi / 2) < 1e-12
        assert abs(total.stddev) < 1e-12

    @pytest.mark.parametrize("func", [umath.asin, umath.acos])
    @pytest.mark.parametrize("value", [1.5, -1.01, 1.0, -1.0])
    def test_inverse_trig_domain(self, func, value):
        """Test asin/acos reject values outside (-1, 1), including the endpoints"""
        with pytest.raises(DomainError):
            func(ufloat(value, 0.1))

    def test_atan(self):
        """Test atan derivative 1/(1 + x^2)"""
        x = ufloat(1.0, 0.1)
        result = umath.atan(x)

        assert abs(result.nominal - math.pi / 4) < 1e-12
        assert abs(result.stddev - 0.05) < 1e-12

    def test_atan2(self):
        """Test atan2 partial derivatives with independent arguments"""
        y = ufloat(1.0, 0.1)
        x = ufloat(2.0, 0.2)
        result = umath.atan2(y, x)

        assert abs(result.nominal - math.atan2(1.0, 2.0)) < 1e-12
        expected = math.sqrt((2.0 / 5.0 * 0.1) ** 2 + (1.0 / 5.0 * 0.2) ** 2)
        assert abs(result.stddev - expected) < 1e-12

    def test_atan2_at_origin(self):
        """Test atan2(0 ± s, 0 ± s) is a domain error"""
        with pytest.raises(DomainError):
            umath.atan2(ufloat(0.0, 0.1), ufloat(0.0, 0.1))

    def test_atan2_with_scalar(self):
        """Test atan2 accepts plain numbers"""
        result = umath.atan2(ufloat(1.0, 0.1), 1.0)

        assert abs(result.nominal - math.pi / 4) < 1e-12
        assert abs(result.stddev - 0.05) < 1e-12

    def test_degrees_radians(self):
        """Test angle conversions scale the uncertainty"""
        x = ufloat(math.pi, 0.01)

        deg = umath.degrees(x)
        assert abs(deg.nominal - 180.0) < 1e-10
        assert abs(deg.stddev - math.degrees(0.01)) < 1e-12

        back = umath.radians(deg)
        assert abs((back - x).stddev) < 1e-12


class TestHyperbolic:

    def setup_method(self):
        get_registry().clear()

    def test_sinh(self):
        x = ufloat(0.5, 0.1)
        result = umath.sinh(x)

        assert abs(result.nominal - math.sinh(0.5)) < 1e-12
        assert abs(result.stddev - math.cosh(0.5) * 0.1) < 1e-12

    def test_cosh(self):
        x = ufloat(0.5, 0.1)
        result = umath.cosh(x)

        assert abs(result.nominal - math.cosh(0.5)) < 1e-12
        assert abs(result.stddev - math.sinh(0.5) * 0.1) < 1e-12

    def test_tanh(self):
        x = ufloat(0.5, 0.1)
        result = umath.tanh(x)

        assert abs(result.nominal - math.tanh(0.5)) < 1e-12
        assert abs(result.stddev - 0.1 / math.cosh(0.5) ** 2) < 1e-12

    def test_asinh(self):
        x = ufloat(0.5, 0.1)
        result = umath.asinh(x)

        assert abs(result.nominal - math.asinh(0.5)) < 1e-12
        assert abs(result.stddev - 0.1 / math.sqrt(1.25)) < 1e-12

    def test_acosh(self):
        x = ufloat(2.0, 0.1)
        result = umath.acosh(x)

        assert abs(result.nominal - math.acosh(2.0)) < 1e-12
        assert abs(result.stddev - 0.1 / math.sqrt(3.0)) < 1e-12

    @pytest.mark.parametrize("value", [1.0, 0.5, -2.0])
    def test_acosh_domain(self, value):
        """Test acosh requires x > 1"""
        with pytest.raises(DomainError):
            umath.acosh(ufloat(value, 0.1))

    def test_atanh(self):
        x = ufloat(0.5, 0.1)
        result = umath.atanh(x)

        assert abs(result.nominal - math.atanh(0.5)) < 1e-12
        assert abs(result.stddev - 0.1 / 0.75) < 1e-12

    @pytest.mark.parametrize("value", [1.0, -1.0, 2.0])
    def test_atanh_domain(self, value):
        """Test atanh requires -1 < x < 1"""
        with pytest.raises(DomainError):
            umath.atanh(ufloat(value, 0.1))


class TestExponentialLogarithmic:

    def setup_method(self):
        get_registry().clear()

    def test_exp(self):
        x = ufloat(1.0, 0.1)
        result = umath.exp(x)

        assert result.nominal == pytest.approx(math.e)
        assert result.stddev == pytest.approx(math.e * 0.1)

    def test_log(self):
        x = ufloat(math.e, 0.1)
        result = umath.log(x)

        assert result.nominal == pytest.approx(1.0)
        assert result.stddev == pytest.approx(0.1 / math.e)

    def test_log_with_base(self):
        """Test logarithm to an arbitrary constant base"""
        x = ufloat(8.0, 0.1)
        result = umath.log(x, 2)

        assert abs(result.nominal - 3.0) < 1e-12
        assert abs(result.stddev - 0.1 / (8.0 * math.log(2.0))) < 1e-12
        assert abs((result - umath.log2(x)).stddev) < 1e-12

        with pytest.raises(DomainError):
            umath.log(x, 1.0)
        with pytest.raises(DomainError):
            umath.log(x, -2.0)

    def test_log10(self):
        x = ufloat(100.0, 1.0)
        result = umath.log10(x)

        assert abs(result.nominal - 2.0) < 1e-12
        assert abs(result.stddev - 1.0 / (100.0 * math.log(10.0))) < 1e-12

    def test_log2(self):
        x = ufloat(4.0, 0.2)
        result = umath.log2(x)

        assert abs(result.nominal - 2.0) < 1e-12
        assert abs(result.stddev - 0.2 / (4.0 * math.log(2.0))) < 1e-12

    def test_sqrt(self):
        x = ufloat(4.0, 0.2)
        result = umath.sqrt(x)

        assert abs(result.nominal - 2.0) < 1e-12
        assert abs(result.stddev - 0.05) < 1e-12

    @pytest.mark.parametrize("func", [umath.log, umath.log10, umath.log2, umath.sqrt])
    @pytest.mark.parametrize("value", [0.0, -1.0])
    def test_positive_domain(self, func, value):
        """Test log, log10, log2 and sqrt require x > 0"""
        with pytest.raises(DomainError):
            func(ufloat(value, 0.1))

    def test_log_of_negative_is_a_value_error(self):
        """Test that domain errors can be handled as ValueError"""
        with pytest.raises(ValueError):
            umath.log(ufloat(-1.0, 0.1))

    def test_pow(self):
        """Test the library pow matches the operator"""
        a = ufloat(3.0, 0.1)
        b = ufloat(2.0, 0.2)
        result = umath.pow(a, b)

        assert abs(result.nominal - 9.0) < 1e-12
        assert result.stddev == pytest.approx(2.0665, abs=1e-4)
        assert abs((result - a ** b).stddev) < 1e-12

    def test_pow_domain(self):
        with pytest.raises(PowerBaseError):
            umath.pow(ufloat(-3.0, 0.1), 2.0)
        with pytest.raises(PowerBaseError):
            umath.pow(0.0, ufloat(2.0, 0.1))


class TestOtherFunctions:

    def setup_method(self):
        get_registry().clear()

    def test_fabs(self):
        """Test abs derivative is the sign of x"""
        pos = umath.fabs(ufloat(2.0, 0.1))
        neg = umath.fabs(ufloat(-2.0, 0.1))

        assert pos.nominal == 2.0 and neg.nominal == 2.0
        assert list(pos.derivatives.values()) == [1.0]
        assert list(neg.derivatives.values()) == [-1.0]

    def test_fabs_at_zero(self):
        """Test the kink at zero is flattened to slope 0"""
        result = umath.fabs(ufloat(0.0, 0.1))

        assert result.nominal == 0.0
        assert result.stddev == 0.0
        assert result.num_variables() == 0

    def test_hypot(self):
        """Test hypot partial derivatives x/h and y/h"""
        x = ufloat(3.0, 0.1)
        y = ufloat(4.0, 0.2)
        result = umath.hypot(x, y)

        assert abs(result.nominal - 5.0) < 1e-12
        expected = math.sqrt((3.0 / 5.0 * 0.1) ** 2 + (4.0 / 5.0 * 0.2) ** 2)
        assert abs(result.stddev - expected) < 1e-12

    def test_hypot_at_origin(self):
        """Test hypot at the origin merges both maps unscaled"""
        x = ufloat(0.0, 0.3)
        y = ufloat(0.0, 0.4)
        result = umath.hypot(x, y)

        assert result.nominal == 0.0
        assert abs(result.stddev - 0.5) < 1e-12
        assert result.num_variables() == 2


class TestScalarArguments:

    def test_plain_numbers_give_constants(self):
        """Test functions accept plain numbers and return constants"""
        get_registry().clear()
        result = umath.sin(0.5)

        assert isinstance(result, UncertainValue)
        assert abs(result.nominal - math.sin(0.5)) < 1e-12
        assert result.num_variables() == 0

    def test_domain_checked_for_constants(self):
        """Test domain checks also apply to plain numbers"""
        with pytest.raises(DomainError):
            umath.sqrt(-4.0)
        with pytest.raises(DomainError):
            umath.log(0)
