"""
unitsafe: unit-safe arithmetic on unit-tagged Python types.

A `System` holds basic units, conversions between them, and an association
from Python types to compound units. Values of those types can then be
converted, or multiplied and divided together, only when the result is
dimensionally sound and unambiguous. Arithmetic is exact (`fractions.Fraction`)
until the final result is handed back in the caller's type.
"""

from importlib import metadata as _metadata

from unitsafe.core.dimensions import Dimension, DimensionRecord
from unitsafe.core.solver import MAX_COMBINE_ARGS
from unitsafe.core.system import System, merge_systems
from unitsafe.exceptions import (
    AmbiguousConversionError,
    ConversionError,
    DuplicateTypeError,
    DuplicateUnitError,
    FrozenSystemError,
    ImpossibleConversionError,
    IncompatibleUnitsError,
    InconsistentRegistryError,
    SimplifiableUnitError,
    TooManyArgumentsError,
    UnitSystemError,
    UnknownTypeError,
    UnknownUnitError,
)
from unitsafe.units.parser import UnitParseError, parse_unit_expr

__license__ = "MIT"

# Try to read the installed package version first; fall back to pyproject.toml for local dev.
try:
    __version__ = _metadata.version("unitsafe")
except _metadata.PackageNotFoundError:
    import tomllib
    with open("pyproject.toml", "rb") as f:
        __version__ = tomllib.load(f)["project"]["version"]

__all__ = [
    "__version__",
    "__license__",
    "System",
    "merge_systems",
    "parse_unit_expr",
    "Dimension",
    "DimensionRecord",
    "MAX_COMBINE_ARGS",
    "UnitSystemError",
    "DuplicateUnitError",
    "UnknownUnitError",
    "SimplifiableUnitError",
    "DuplicateTypeError",
    "UnknownTypeError",
    "TooManyArgumentsError",
    "InconsistentRegistryError",
    "FrozenSystemError",
    "ConversionError",
    "IncompatibleUnitsError",
    "ImpossibleConversionError",
    "AmbiguousConversionError",
    "UnitParseError",
]
