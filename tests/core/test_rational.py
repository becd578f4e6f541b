from decimal import Decimal
from fractions import Fraction
import math

import pytest

from unitsafe.core.rational import narrow, to_positive_factor, to_rational


class Meter(float):
    pass


class ExactMeter(Fraction):
    pass


@pytest.mark.parametrize("value, expected", [
    (3, Fraction(3)),
    (0.5, Fraction(1, 2)),
    (Fraction(2, 3), Fraction(2, 3)),
    (Decimal("0.1"), Fraction(1, 10)),
    ("0.3048", Fraction(381, 1250)),
    (" 1/3 ", Fraction(1, 3)),
    (Meter(2.5), Fraction(5, 2)),
])
def test_to_rational_is_exact(value, expected):
    r = to_rational(value)
    assert type(r) is Fraction
    assert r == expected


def test_float_is_taken_bit_for_bit():
    # 0.1 is not 1/10 in binary
    assert to_rational(0.1) != Fraction(1, 10)
    assert to_rational(0.1) == Fraction(*(0.1).as_integer_ratio())


@pytest.mark.parametrize("bad", [math.inf, -math.inf, math.nan, Decimal("NaN"), Decimal("Infinity")])
def test_non_finite_values_rejected(bad):
    with pytest.raises(ValueError):
        to_rational(bad)


@pytest.mark.parametrize("bad", [True, object(), None])
def test_non_numbers_rejected(bad):
    with pytest.raises(TypeError):
        to_rational(bad)


@pytest.mark.parametrize("bad", [0, -1, -0.5, "0"])
def test_factor_must_be_positive(bad):
    with pytest.raises(ValueError, match="positive"):
        to_positive_factor(bad)


def test_narrow_rounds_once_for_floats():
    out = narrow(Fraction(1, 3), Meter)
    assert type(out) is Meter
    assert out == 1 / 3


def test_narrow_keeps_fraction_subclasses_exact():
    out = narrow(Fraction(1, 3), ExactMeter)
    assert type(out) is ExactMeter
    assert out == Fraction(1, 3)


def test_narrow_overflow_gives_signed_infinity():
    assert narrow(Fraction(10) ** 400, Meter) == math.inf
    assert narrow(-Fraction(10) ** 400, Meter) == -math.inf
