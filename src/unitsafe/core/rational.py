# unitsafe.core.rational

"""
Exact rational helpers.

All factor and quantity arithmetic inside a unit system is done on
`fractions.Fraction`. Floats are taken bit for bit (``Fraction(0.1)`` is the
exact binary value, not 1/10); decimal strings and `Decimal` stay exact in
decimal. Results go back to the caller's numeric type exactly once, through
`narrow`.
"""

from __future__ import annotations

from decimal import Decimal
from fractions import Fraction
from math import inf, isfinite
from numbers import Rational
from typing import Type, TypeVar, Union

RationalLike = Union[int, float, str, Decimal, Fraction]

T = TypeVar("T")

ONE = Fraction(1)


def to_rational(value: RationalLike) -> Fraction:
    """Return `value` as an exact `Fraction`.

    Accepts ints, floats (including subclasses, e.g. unit-tagged floats),
    `Decimal`, `Fraction` and numeric strings such as ``"0.3048"`` or
    ``"1/3"``. Non-finite values raise `ValueError`.
    """
    if isinstance(value, bool):
        raise TypeError("bool is not a numeric quantity")
    if isinstance(value, Rational):
        return Fraction(value.numerator, value.denominator)
    if isinstance(value, float):
        if not isfinite(value):
            raise ValueError(f"cannot represent non-finite value {value!r} exactly")
        return Fraction(*value.as_integer_ratio())
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"cannot represent non-finite value {value!r} exactly")
        return Fraction(value)
    if isinstance(value, str):
        return Fraction(value.strip())
    # anything else exposing __float__
    try:
        f = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as e:
        raise TypeError(f"expected a real number, got {type(value).__name__}") from e
    return to_rational(f)


def to_positive_factor(value: RationalLike) -> Fraction:
    """Like `to_rational`, but the result must be strictly positive."""
    r = to_rational(value)
    if r <= 0:
        raise ValueError(f"conversion factor must be a positive, finite number, got {value!r}")
    return r


def narrow(value: Fraction, to: Type[T]) -> T:
    """Convert an exact result into `to`, the one and only rounding step.

    `float` subclasses round correctly (``Fraction.__float__``); `Fraction`
    subclasses keep the exact value. A result beyond the float range becomes
    a signed infinity, as plain float arithmetic would give.
    """
    try:
        return to(value)  # type: ignore[call-arg]
    except OverflowError:
        if not issubclass(to, float):
            raise
        return to(-inf if value < 0 else inf)  # type: ignore[call-arg]
