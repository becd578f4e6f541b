"""
unitsafe.units.registry
=======================

The base unit registry of a unit system.

- Basic units are their own root and own one exponent-vector slot each.
- Conversion units alias a root with an exact factor and share its slot.
- Factors are always relative to the root, so chains (``gm = km * 1000``)
  collapse to a single multiplication.
- Mutations take a lock; once frozen the registry is read-only and reads
  take no lock.
"""
from __future__ import annotations

import threading
from dataclasses import dataclass
from fractions import Fraction
from types import MappingProxyType
from typing import Dict, Iterator, Mapping

from unitsafe.core.rational import ONE, RationalLike, to_positive_factor
from unitsafe.exceptions import DuplicateUnitError, FrozenSystemError, UnknownUnitError
from unitsafe.logger import logger


@dataclass(frozen=True, slots=True)
class BaseUnit:
    """A named unit: `factor` of it equals one `root_name`."""

    name: str
    root_name: str
    factor: Fraction
    index: int

    @property
    def is_basic(self) -> bool:
        return self.name == self.root_name


class UnitRegistry:
    """Thread-safe registry of basic units and conversions.

    `name` is only used in error messages.
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._lock = threading.RLock()
        self._units: Dict[str, BaseUnit] = {}
        self._basic_count = 0
        self._frozen = False

    def __contains__(self, name: object) -> bool:
        return name in self._units

    def __len__(self) -> int:
        return len(self._units)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._units))

    @property
    def basic_count(self) -> int:
        """Number of basic units, i.e. the exponent-vector length."""
        return self._basic_count

    @property
    def frozen(self) -> bool:
        return self._frozen

    # -------------------------- public API ---------------------------------
    def add_basic(self, name: str) -> BaseUnit:
        """Add a basic unit. Example: ``reg.add_basic("meter")``."""
        with self._lock:
            self._check_mutable(f"add basic unit {name!r}")
            if name in self._units:
                raise DuplicateUnitError(self.name, name)
            unit = BaseUnit(name, name, ONE, self._basic_count)
            self._units[name] = unit
            self._basic_count += 1
        logger.debug("%s: basic unit %r at index %d", self.name, name, unit.index)
        return unit

    def add_conversion(self, from_name: str, to_name: str, factor: RationalLike) -> BaseUnit:
        """Add a conversion: ``from_name * factor = to_name``.

        Example: ``reg.add_conversion("meter", "kilometer", 1000)``.
        """
        with self._lock:
            self._check_mutable(f"add conversion {to_name!r}")
            source = self._units.get(from_name)
            if source is None:
                raise UnknownUnitError(self.name, from_name)
            if to_name in self._units:
                raise DuplicateUnitError(self.name, to_name)
            exact = to_positive_factor(factor)
            unit = BaseUnit(to_name, source.root_name, source.factor * exact, source.index)
            self._units[to_name] = unit
        logger.debug("%s: %r = %s %r", self.name, to_name, unit.factor, unit.root_name)
        return unit

    def get(self, name: str) -> BaseUnit:
        """Lookup a unit by name. Raises `UnknownUnitError` if unknown."""
        unit = self._units.get(name)
        if unit is None:
            raise UnknownUnitError(self.name, name)
        return unit

    def all(self) -> Mapping[str, BaseUnit]:
        if self._frozen:
            return MappingProxyType(self._units)
        with self._lock:
            return dict(self._units)

    def indices(self) -> Dict[str, int]:
        """Slot index of every basic unit, keyed by root name."""
        return {u.name: u.index for u in self._units.values() if u.is_basic}

    def freeze(self) -> None:
        with self._lock:
            self._frozen = True

    # ------------------------- internals -----------------------------------
    def _check_mutable(self, operation: str) -> None:
        if self._frozen:
            raise FrozenSystemError(self.name, operation)

    def _insert(self, unit: BaseUnit) -> None:
        """Insert a fully-formed unit; used when merging registries."""
        with self._lock:
            self._check_mutable(f"add unit {unit.name!r}")
            if unit.name in self._units:
                raise DuplicateUnitError(self.name, unit.name)
            self._units[unit.name] = unit
            if unit.is_basic:
                self._basic_count += 1


__all__ = [
    "BaseUnit",
    "UnitRegistry",
]
