"""
unitsafe.exceptions
===================

Exception types raised by unit systems.

Every error derives from `UnitSystemError` and from the builtin that best
describes it, so callers may catch either.

Exception Hierarchy
-------------------

Exception (built-in Python)
└── UnitSystemError
    ├── DuplicateUnitError          (ValueError)
    ├── UnknownUnitError            (LookupError)
    ├── SimplifiableUnitError       (ValueError)
    ├── DuplicateTypeError          (ValueError)
    ├── UnknownTypeError            (LookupError)
    ├── TooManyArgumentsError       (ValueError)
    ├── InconsistentRegistryError   (RuntimeError)
    ├── FrozenSystemError           (RuntimeError)
    └── ConversionError             (TypeError)
        ├── IncompatibleUnitsError
        ├── ImpossibleConversionError
        └── AmbiguousConversionError

`ConversionError` subclasses are the ones that can come from bad runtime
input (values of the wrong kind reaching `convert` or `combine`) and are
worth reporting to an end user. All the others indicate a mistake in how the
unit system was declared or used.
"""
from __future__ import annotations

from typing import Sequence, Tuple

__all__ = (
    'UnitSystemError',
    'DuplicateUnitError',
    'UnknownUnitError',
    'SimplifiableUnitError',
    'DuplicateTypeError',
    'UnknownTypeError',
    'TooManyArgumentsError',
    'InconsistentRegistryError',
    'FrozenSystemError',
    'ConversionError',
    'IncompatibleUnitsError',
    'ImpossibleConversionError',
    'AmbiguousConversionError',
)


def _type_name(t: object) -> str:
    return getattr(t, "__qualname__", None) or repr(t)


class UnitSystemError(Exception):
    """Base class for all unit system errors."""

    def __init__(self, system: str, message: str) -> None:
        self.system = system
        super().__init__(f"{system}: {message}")


class DuplicateUnitError(UnitSystemError, ValueError):
    """A unit with this name is already registered."""

    def __init__(self, system: str, unit: str) -> None:
        self.unit = unit
        super().__init__(system, f"already has a unit named {unit!r}")


class UnknownUnitError(UnitSystemError, LookupError):
    """No unit with this name is registered."""

    def __init__(self, system: str, unit: str) -> None:
        self.unit = unit
        super().__init__(system, f"has no unit named {unit!r}")


class SimplifiableUnitError(UnitSystemError, ValueError):
    """
    Numerator and denominator share a root unit.

    Contains:
    - numerator: the numerator spelling
    - denominator: the denominator spelling
    - root: the root unit both resolve to
    """

    def __init__(self, system: str, numerator: str, denominator: str, root: str) -> None:
        self.numerator = numerator
        self.denominator = denominator
        self.root = root
        super().__init__(
            system,
            f"unit can be simplified: numerator {numerator!r} and denominator "
            f"{denominator!r} share common unit {root!r}",
        )


class DuplicateTypeError(UnitSystemError, ValueError):
    """A unit is already associated with this type."""

    def __init__(self, system: str, type_: type) -> None:
        self.type = type_
        super().__init__(system, f"has a unit associated with type {_type_name(type_)}")


class UnknownTypeError(UnitSystemError, LookupError):
    """No unit is associated with this type."""

    def __init__(self, system: str, type_: type) -> None:
        self.type = type_
        super().__init__(system, f"has no unit associated with type {_type_name(type_)}")


class TooManyArgumentsError(UnitSystemError, ValueError):
    """More operands were passed to `combine` than the solver accepts."""

    def __init__(self, system: str, count: int, limit: int) -> None:
        self.count = count
        self.limit = limit
        super().__init__(system, f"too many arguments to combine, max is {limit}, got {count}")


class InconsistentRegistryError(UnitSystemError, RuntimeError):
    """Dimension records were built against registries of different sizes."""

    def __init__(self, system: str, type_: type, length: int, expected: int) -> None:
        self.type = type_
        self.length = length
        self.expected = expected
        super().__init__(
            system,
            f"unit of type {_type_name(type_)} spans {length} base units, expected "
            f"{expected}; add every basic unit before registering types",
        )


class FrozenSystemError(UnitSystemError, RuntimeError):
    """A mutator was called after `freeze()`."""

    def __init__(self, system: str, operation: str) -> None:
        self.operation = operation
        super().__init__(system, f"is frozen, cannot {operation}")


class ConversionError(UnitSystemError, TypeError):
    """Base class for conversions rejected because of the values' units."""


class IncompatibleUnitsError(ConversionError):
    """Source and target units are expressed in different base units."""

    def __init__(self, system: str, source: type, target: type) -> None:
        self.source = source
        self.target = target
        super().__init__(
            system, f"cannot convert from {_type_name(source)} to {_type_name(target)}"
        )


class ImpossibleConversionError(ConversionError):
    """No multiply/divide assignment of the arguments yields the target unit."""

    def __init__(self, system: str, target: type, args: Sequence[type]) -> None:
        self.target = target
        self.args_types = tuple(args)
        names = ", ".join(_type_name(a) for a in args)
        super().__init__(
            system, f"impossible conversion: cannot make {_type_name(target)} from ({names})"
        )


class AmbiguousConversionError(ConversionError):
    """
    More than one multiply/divide assignment yields the target unit.

    Contains:
    - target: the requested type
    - solutions: every feasible sign assignment, +1 multiply and -1 divide
    """

    def __init__(
        self, system: str, target: type, solutions: Sequence[Tuple[int, ...]]
    ) -> None:
        self.target = target
        self.solutions = tuple(solutions)
        super().__init__(
            system,
            f"ambiguous conversion to {_type_name(target)}: "
            f"{len(self.solutions)} sign assignments match",
        )
