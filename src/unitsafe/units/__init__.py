from unitsafe.units.parser import UnitParseError, parse_unit_expr
from unitsafe.units.registry import BaseUnit, UnitRegistry

__all__ = ["BaseUnit", "UnitRegistry", "UnitParseError", "parse_unit_expr"]
