# tests/conftest.py
from types import SimpleNamespace

import pytest

from unitsafe import System


class Meter(float):
    pass


class Kilometer(float):
    pass


class Gigameter(float):
    pass


class Second(float):
    pass


class MetersPerSecond(float):
    pass


class SecondsPerMeter(float):
    pass


class MetersSquaredPerSecond(float):
    pass


_TYPES = (
    (Meter, ["m"], []),
    (Kilometer, ["km"], []),
    (Gigameter, ["gm"], []),
    (Second, ["s"], []),
    (MetersPerSecond, ["m"], ["s"]),
    (SecondsPerMeter, ["s"], ["m"]),
    (MetersSquaredPerSecond, ["m", "m"], ["s"]),
)


@pytest.fixture(scope="session")
def T():
    """The unit-tagged float types used by the `physics` system."""
    return SimpleNamespace(**{t.__name__: t for t, _, _ in _TYPES})


def _units(s: System) -> System:
    s.add_basic("m")
    s.add_basic("s")
    s.add_conversion("m", "km", 1000)
    s.add_conversion("km", "gm", 1000)
    return s


@pytest.fixture()
def units_only():
    """Open system with m, s, km and gm but no types."""
    return _units(System("test"))


@pytest.fixture()
def physics():
    """Frozen system: base units m, s; km = m * 1000; gm = km * 1000."""
    s = _units(System("test"))
    for t, num, den in _TYPES:
        s.register_type(t, num, den)
    s.freeze()
    return s
