# unitsafe.core.dimensions

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import Iterable, Mapping, Tuple, Union

from unitsafe.core.utils import format_record, format_vector

DimLike = Union["Dimension", Iterable[int]]

# --- Exponent vector ----------------------------------------------------------

class Dimension(tuple):
    """
    Immutable vector of signed integer exponents, one slot per basic unit.

    Slot ``i`` holds the net power of the basic unit with index ``i`` in the
    owning registry. Tuple subclass => hashable, comparable, usable as dict keys.
    """

    __slots__ = ()

    def __new__(cls, data: DimLike = ()) -> "Dimension":
        if isinstance(data, Dimension):
            return data
        t = tuple(data)
        for x in t:
            if isinstance(x, bool) or not isinstance(x, int):
                raise TypeError(f"Dimension exponents must be int, got {type(x).__name__}")
        return tuple.__new__(cls, t)

    def __repr__(self) -> str:
        return f"Dimension({tuple(self)!r})"


# --- Dimension record ---------------------------------------------------------

@dataclass(frozen=True, slots=True)
class DimensionRecord:
    """Canonical form of a compound unit.

    `numerator` and `denominator` hold sorted root unit names (a name repeats
    once per power), `factor` converts 1 of this unit into root units, and
    `vector` is the net exponent per basic unit index.
    """

    numerator: Tuple[str, ...]
    denominator: Tuple[str, ...]
    factor: Fraction
    vector: Dimension

    def __post_init__(self) -> None:
        if list(self.numerator) != sorted(self.numerator) or list(self.denominator) != sorted(self.denominator):
            raise ValueError("numerator and denominator must be sorted")
        if set(self.numerator) & set(self.denominator):
            raise ValueError("numerator and denominator must not share a root unit")
        if self.factor <= 0:
            raise ValueError("factor must be positive")

    def convertible(self, other: "DimensionRecord") -> bool:
        """True when both records are spelled in the same root units."""
        return self.numerator == other.numerator and self.denominator == other.denominator

    def relayout(self, indices: Mapping[str, int], length: int) -> "DimensionRecord":
        """Rebuild the exponent vector against another registry's slot indices."""
        vec = [0] * length
        for name in self.numerator:
            vec[indices[name]] += 1
        for name in self.denominator:
            vec[indices[name]] -= 1
        return DimensionRecord(self.numerator, self.denominator, self.factor, Dimension(vec))

    @property
    def unit_name(self) -> str:
        return format_vector(self.numerator, self.denominator)

    def __str__(self) -> str:
        return format_record(self.factor, self.numerator, self.denominator)
