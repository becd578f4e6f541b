"""
unitsafe.core.system
====================

A `System` is a unified system of units: a base unit registry plus a table
associating Python types with dimension records.

Unit systems must be built in a particular order: add all basic units and
conversions, then register all types, then use them. Call `freeze()` once
setup is done; from then on a system is read-only and safe to share between
threads without locking.

Typical usage::

    s = System("physics")
    s.add_basic("m")
    s.add_basic("s")
    s.add_conversion("m", "km", 1000)

    class Meter(float): ...
    class Kilometer(float): ...
    class MetersPerSecond(float): ...
    class MetersSquaredPerSecond(float): ...

    s.register_type(Meter, ["m"])
    s.register_type(Kilometer, ["km"])
    s.register_type(MetersPerSecond, ["m"], ["s"])
    s.register_type_expr(MetersSquaredPerSecond, "m**2/s")
    s.freeze()

    s.convert(Kilometer, Meter(5000))                                # Kilometer(5.0)
    s.combine(MetersSquaredPerSecond, Meter(10), MetersPerSecond(25))  # 250.0

There is no global registry; every system is an explicitly owned value.
"""

from __future__ import annotations

import sys
import threading
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Type, TypeVar

from unitsafe.core.dimensions import Dimension, DimensionRecord
from unitsafe.core.rational import ONE, RationalLike, narrow, to_rational
from unitsafe.core.solver import MAX_COMBINE_ARGS, MULTIPLY, solve
from unitsafe.exceptions import (
    AmbiguousConversionError,
    DuplicateTypeError,
    FrozenSystemError,
    ImpossibleConversionError,
    IncompatibleUnitsError,
    InconsistentRegistryError,
    SimplifiableUnitError,
    TooManyArgumentsError,
    UnknownTypeError,
)
from unitsafe.logger import logger
from unitsafe.units.parser import parse_unit_expr
from unitsafe.units.registry import BaseUnit, UnitRegistry

T = TypeVar("T")


class System:
    """A named unit system. `name` is only used in error messages."""

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.registry = UnitRegistry(name)
        self._lock = threading.RLock()
        self._types: Dict[type, DimensionRecord] = {}
        self._frozen = False

    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "open"
        return (
            f"System({self.name!r}, units={len(self.registry)}, "
            f"types={len(self._types)}, {state})"
        )

    def __contains__(self, t: object) -> bool:
        return t in self._types

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ------------------------------------------------------------------
    # Setup, phase 1: units
    # ------------------------------------------------------------------
    def add_basic(self, name: str) -> BaseUnit:
        """Add a basic unit, e.g. ``add_basic("meter")``."""
        unit = self.registry.add_basic(name)
        if self._types:
            logger.warning(
                "%s: basic unit %r added after %d type(s) were registered; "
                "combining those types will fail",
                self.name, name, len(self._types),
            )
        return unit

    def add_conversion(self, from_name: str, to_name: str, factor: RationalLike) -> BaseUnit:
        """Add a conversion ``from_name * factor = to_name``, e.g. ``("m", "km", 1000)``."""
        return self.registry.add_conversion(from_name, to_name, factor)

    # ------------------------------------------------------------------
    # Setup, phase 2: types
    # ------------------------------------------------------------------
    def register_type(
        self,
        t: type,
        numerator: Iterable[str],
        denominator: Iterable[str] = (),
    ) -> DimensionRecord:
        """Associate type `t` with the unit ``numerator / denominator``.

        Both arguments are multisets of unit names: ``(["m"], ["s", "s"])``
        is meters per second squared. Raises `UnknownUnitError` for an
        unregistered name, `SimplifiableUnitError` when a numerator and a
        denominator unit share a root (e.g. meters per foot), and
        `DuplicateTypeError` when `t` already has a unit.
        """
        if not isinstance(t, type):
            raise TypeError(f"expected a type, got {t!r}")
        for names in (numerator, denominator):
            if isinstance(names, str):
                raise TypeError(f"expected a sequence of unit names, got the string {names!r}; use [{names!r}]")
        with self._lock:
            if self._frozen:
                raise FrozenSystemError(self.name, f"register type {t.__qualname__}")
            if t in self._types:
                raise DuplicateTypeError(self.name, t)
            record = self._build_record(list(numerator), list(denominator))
            self._types[t] = record
        logger.debug("%s: type %s -> %s", self.name, t.__qualname__, record)
        return record

    def register_type_expr(self, t: type, expr: str) -> DimensionRecord:
        """Like `register_type`, with the unit written as an expression such as 'm**2/s'."""
        numerator, denominator = parse_unit_expr(expr)
        return self.register_type(t, numerator, denominator)

    def new_type(
        self,
        name: str,
        numerator: Iterable[str],
        denominator: Iterable[str] = (),
        module: Optional[str] = None,
    ) -> Type[float]:
        """Create a `float` subclass called `name` and register it.

        The class reports `module` as its `__module__`, by default the module
        calling `new_type`, so it pickles when bound to that name there.
        """
        if module is None:
            module = sys._getframe(1).f_globals.get("__name__", "__main__")
        t = type(name, (float,), {"__module__": module, "__qualname__": name, "__slots__": ()})
        self.register_type(t, numerator, denominator)
        return t

    def freeze(self) -> None:
        """End setup. Every later mutation raises `FrozenSystemError`."""
        with self._lock:
            self.registry.freeze()
            self._frozen = True
        logger.debug("%s: frozen with %d unit(s) and %d type(s)",
                     self.name, len(self.registry), len(self._types))

    def _build_record(self, numerator: List[str], denominator: List[str]) -> DimensionRecord:
        factor = ONE
        vec = [0] * self.registry.basic_count
        spelled: Dict[str, str] = {}  # root name -> numerator spelling

        canon_num = []
        for n in numerator:
            unit = self.registry.get(n)
            canon_num.append(unit.root_name)
            factor *= unit.factor
            spelled[unit.root_name] = n
            vec[unit.index] += 1

        canon_den = []
        for d in denominator:
            unit = self.registry.get(d)
            if unit.root_name in spelled:
                raise SimplifiableUnitError(self.name, spelled[unit.root_name], d, unit.root_name)
            canon_den.append(unit.root_name)
            factor /= unit.factor
            vec[unit.index] -= 1

        return DimensionRecord(
            numerator=tuple(sorted(canon_num)),
            denominator=tuple(sorted(canon_den)),
            factor=factor,
            vector=Dimension(vec),
        )

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def dimension_of(self, t: type) -> DimensionRecord:
        record = self._types.get(t)
        if record is None:
            raise UnknownTypeError(self.name, t)
        return record

    def types(self) -> Mapping[type, DimensionRecord]:
        if self._frozen:
            return MappingProxyType(self._types)
        with self._lock:
            return dict(self._types)

    def is_convertible(self, a: type, b: type) -> bool:
        """True if values of type `a` can be converted to type `b` (and back)."""
        ra, rb = self._types.get(a), self._types.get(b)
        return ra is not None and rb is not None and ra.convertible(rb)

    # ------------------------------------------------------------------
    # Use
    # ------------------------------------------------------------------
    def convert(self, to: Type[T], value: Any) -> T:
        """Convert `value` to type `to`.

        Both ``type(value)`` and `to` must be registered, and their units must
        be spelled in the same root units (km -> m is fine, m -> m/s is not).
        """
        to_dim = self.dimension_of(to)
        from_type = type(value)
        from_dim = self.dimension_of(from_type)
        if not to_dim.convertible(from_dim):
            raise IncompatibleUnitsError(self.name, from_type, to)

        result = to_rational(value) / to_dim.factor * from_dim.factor
        return narrow(result, to)

    def combine(self, to: Type[T], *args: Any) -> T:
        """Multiply and divide `args` to get a value of type `to`.

        The computation only happens if exactly one multiply/divide
        assignment of the arguments produces the units of `to`. For example,
        requesting meters per second from a Meter and a Second value yields
        meters / seconds.

        Raises `ImpossibleConversionError` if no assignment works and
        `AmbiguousConversionError` if more than one does. Arguments are
        applied in the order given; a zero divisor raises `ZeroDivisionError`.
        """
        to_dim, records, signs = self._assign(to, [type(a) for a in args])

        result = ONE
        for value, record, sign in zip(args, records, signs):
            term = to_rational(value) * record.factor
            if sign == MULTIPLY:
                result *= term
            else:
                result /= term
        result /= to_dim.factor
        return narrow(result, to)

    def solution(self, to: type, *arg_types: type) -> Tuple[int, ...]:
        """Return the sign assignment `combine` would use for arguments of these types.

        +1 multiplies, -1 divides. Raises the same errors as `combine`.
        """
        return self._assign(to, list(arg_types))[2]

    def _assign(
        self, to: type, arg_types: List[type]
    ) -> Tuple[DimensionRecord, List[DimensionRecord], Tuple[int, ...]]:
        to_dim = self.dimension_of(to)
        if not arg_types:
            raise ValueError(f"{self.name}: combine needs at least one argument")
        if len(arg_types) > MAX_COMBINE_ARGS:
            raise TooManyArgumentsError(self.name, len(arg_types), MAX_COMBINE_ARGS)

        records: List[DimensionRecord] = []
        for at in arg_types:
            record = self.dimension_of(at)
            if len(record.vector) != len(to_dim.vector):
                raise InconsistentRegistryError(self.name, at, len(record.vector), len(to_dim.vector))
            records.append(record)

        solutions = solve([r.vector for r in records], to_dim.vector)
        if not solutions:
            raise ImpossibleConversionError(self.name, to, arg_types)
        if len(solutions) > 1:
            raise AmbiguousConversionError(self.name, to, solutions)
        return to_dim, records, solutions[0]


def merge_systems(a: System, b: System, name: Optional[str] = None) -> System:
    """Return a new system holding the units and types of both `a` and `b`.

    Units of `b` are placed after those of `a`, so `b`'s exponent slots are
    shifted by ``a.registry.basic_count``. A unit name present in both raises
    `DuplicateUnitError`; a type registered in both raises
    `DuplicateTypeError`. Neither input is modified, and the result is not
    frozen.
    """
    merged = System(name if name is not None else f"{a.name}+{b.name}")
    offset = a.registry.basic_count

    for unit in a.registry.all().values():
        merged.registry._insert(unit)
    for unit in b.registry.all().values():
        merged.registry._insert(
            BaseUnit(unit.name, unit.root_name, unit.factor, unit.index + offset)
        )

    indices = merged.registry.indices()
    length = merged.registry.basic_count
    for source in (a, b):
        for t, record in source.types().items():
            if t in merged._types:
                raise DuplicateTypeError(merged.name, t)
            merged._types[t] = record.relayout(indices, length)

    logger.debug("%s: merged %d unit(s) and %d type(s)",
                 merged.name, len(merged.registry), len(merged._types))
    return merged


__all__ = ["System", "merge_systems"]
