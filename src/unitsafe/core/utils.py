"""
unitsafe.core.utils
===================

Formatting helpers for unit names and dimension records.

Root unit lists are rendered in a readable scientific style, with repeated
names folded into unicode superscripts (e.g. ``('m', 'm'), ('s',)`` becomes
'm²/s').
"""

from __future__ import annotations

from collections import Counter
from fractions import Fraction
from typing import List, Sequence, Tuple

_SUPERSCRIPTS = str.maketrans("0123456789-", "⁰¹²³⁴⁵⁶⁷⁸⁹⁻")


def _sup(n: int) -> str:
    return "" if n == 1 else str(n).translate(_SUPERSCRIPTS)


def _powers(names: Sequence[str]) -> List[Tuple[str, int]]:
    # keep first-seen order; callers pass sorted names
    return list(Counter(names).items())


def format_vector(numerator: Sequence[str], denominator: Sequence[str]) -> str:
    """
    Turn numerator/denominator name lists into 'kg·m/s²' style.
    An empty numerator renders as '1'.
    """
    def join(parts: List[Tuple[str, int]]) -> str:
        if not parts:
            return "1"
        return "·".join(f"{s}{_sup(p)}" for s, p in parts)

    num_s = join(_powers(numerator))
    if not denominator:
        return num_s
    return f"{num_s}/{join(_powers(denominator))}"


def format_factor(factor: Fraction) -> str:
    if factor.denominator == 1:
        return str(factor.numerator)
    return f"{factor.numerator}/{factor.denominator}"


def format_record(factor: Fraction, numerator: Sequence[str], denominator: Sequence[str]) -> str:
    """Render a record as '1000 * m²/s'."""
    return f"{format_factor(factor)} * {format_vector(numerator, denominator)}"
