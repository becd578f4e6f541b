# Registration of types, freezing and lookups on a System.

from fractions import Fraction
import logging
import threading

import pytest

from unitsafe import (
    DuplicateTypeError,
    DuplicateUnitError,
    FrozenSystemError,
    InconsistentRegistryError,
    SimplifiableUnitError,
    System,
    UnitParseError,
    UnknownTypeError,
    UnknownUnitError,
)


class Speed(float):
    pass


class Accel(float):
    pass


def test_register_type_builds_canonical_record(units_only):
    rec = units_only.register_type(Accel, ["km"], ["s", "s"])
    assert rec.numerator == ("m",)
    assert rec.denominator == ("s", "s")
    assert rec.factor == 1000
    assert rec.vector == (1, -2)
    assert units_only.dimension_of(Accel) is rec
    assert Accel in units_only


def test_numerator_order_does_not_matter(units_only):
    class A(float): ...
    class B(float): ...
    ra = units_only.register_type(A, ["s", "km"], [])
    rb = units_only.register_type(B, ["m", "s"], [])
    assert ra.numerator == rb.numerator == ("m", "s")
    assert ra.convertible(rb)
    assert ra.factor == 1000 * rb.factor


def test_factor_divides_by_denominator_units(units_only):
    units_only.add_conversion("s", "min", 60)
    rec = units_only.register_type(Speed, ["km"], ["min"])
    assert rec.factor == Fraction(1000, 60)
    assert rec.denominator == ("s",)


@pytest.mark.parametrize("num, den, shared", [
    (["m"], ["m"], "m"),
    (["km"], ["m"], "m"),
    (["m", "s"], ["gm"], "m"),
])
def test_simplifiable_units_rejected(units_only, num, den, shared):
    with pytest.raises(SimplifiableUnitError) as ei:
        units_only.register_type(Speed, num, den)
    assert ei.value.root == shared
    assert "simplified" in str(ei.value)
    # nothing was stored
    assert Speed not in units_only


def test_unknown_unit_in_type(units_only):
    with pytest.raises(UnknownUnitError, match="furlong"):
        units_only.register_type(Speed, ["furlong"], ["s"])
    with pytest.raises(UnknownUnitError):
        units_only.register_type(Speed, ["m"], ["fortnight"])


def test_duplicate_type_rejected(units_only):
    units_only.register_type(Speed, ["m"], ["s"])
    with pytest.raises(DuplicateTypeError, match="Speed"):
        units_only.register_type(Speed, ["km"], ["s"])


def test_register_type_requires_a_type(units_only):
    with pytest.raises(TypeError):
        units_only.register_type(Speed(1.0), ["m"])  # type: ignore[arg-type]


def test_register_type_rejects_a_bare_string(units_only):
    with pytest.raises(TypeError, match="km"):
        units_only.register_type(Speed, "km")
    with pytest.raises(TypeError, match="s"):
        units_only.register_type(Speed, ["m"], "s")
    assert Speed not in units_only


def test_register_type_expr(units_only):
    rec = units_only.register_type_expr(Accel, "km / s**2")
    assert rec.numerator == ("m",)
    assert rec.denominator == ("s", "s")
    assert rec.factor == 1000


def test_register_type_expr_still_catches_simplifiable(units_only):
    with pytest.raises(SimplifiableUnitError):
        units_only.register_type_expr(Speed, "m/km")


def test_register_type_expr_syntax_error(units_only):
    with pytest.raises(UnitParseError):
        units_only.register_type_expr(Speed, "m/(s")


def test_new_type(units_only):
    Hertz = units_only.new_type("Hertz", [], ["s"])
    assert issubclass(Hertz, float)
    assert Hertz.__name__ == "Hertz"
    assert units_only.dimension_of(Hertz).vector == (0, -1)
    assert Hertz(2.5) == 2.5


def test_new_type_belongs_to_the_calling_module(units_only):
    Hertz = units_only.new_type("Hertz", [], ["s"])
    assert Hertz.__module__ == __name__
    assert Hertz.__qualname__ == "Hertz"
    Knot = units_only.new_type("Knot", ["km"], ["s"], module="nautical")
    assert Knot.__module__ == "nautical"


def test_dimensionless_type(units_only):
    class Ratio(float): ...
    rec = units_only.register_type(Ratio, [], [])
    assert rec.vector == (0, 0)
    assert rec.factor == 1


def test_unknown_type_lookup(physics):
    with pytest.raises(UnknownTypeError) as ei:
        physics.dimension_of(Speed)
    assert ei.value.type is Speed
    assert isinstance(ei.value, LookupError)


def test_is_convertible(physics, T):
    assert physics.is_convertible(T.Meter, T.Kilometer)
    assert not physics.is_convertible(T.Meter, T.Second)
    assert not physics.is_convertible(T.Meter, Speed)

# --- Freezing -----------------------------------------------------------------

def test_freeze_blocks_every_mutator(physics):
    assert physics.frozen
    with pytest.raises(FrozenSystemError):
        physics.add_basic("kg")
    with pytest.raises(FrozenSystemError):
        physics.add_conversion("m", "mm", Fraction(1, 1000))
    with pytest.raises(FrozenSystemError):
        physics.register_type(Speed, ["m"], ["s"])
    assert "kg" not in physics.registry
    assert Speed not in physics


def test_frozen_type_table_is_read_only(physics, T):
    table = physics.types()
    assert table[T.Meter].numerator == ("m",)
    with pytest.raises(TypeError):
        table[Speed] = table[T.Meter]  # type: ignore[index]


def test_open_type_table_is_a_copy(units_only):
    units_only.register_type(Speed, ["m"], ["s"])
    table = units_only.types()
    table.clear()
    assert Speed in units_only


def test_repr(physics):
    assert repr(physics) == "System('test', units=4, types=7, frozen)"

# --- Setup order --------------------------------------------------------------

def test_basic_unit_after_types_is_detected_when_combining(caplog):
    s = System("late")
    s.add_basic("m")
    class M(float): ...
    class S(float): ...
    s.register_type(M, ["m"])
    with caplog.at_level(logging.WARNING, logger="unitsafe"):
        s.add_basic("s")
    assert "added after 1 type(s)" in caplog.text
    s.register_type(S, ["s"])

    with pytest.raises(InconsistentRegistryError) as ei:
        s.combine(S, M(1.0))
    assert ei.value.type is M
    assert (ei.value.length, ei.value.expected) == (1, 2)


def test_add_basic_twice_always_fails():
    s = System("dup")
    s.add_basic("m")
    for _ in range(3):
        with pytest.raises(DuplicateUnitError):
            s.add_basic("m")
    s.add_basic("s")
    with pytest.raises(DuplicateUnitError):
        s.add_basic("m")

# --- Concurrency --------------------------------------------------------------

def test_concurrent_reads_after_freeze(physics, T):
    results = []
    errors = []

    def worker():
        try:
            for i in range(200):
                results.append(physics.convert(T.Kilometer, T.Meter(5000)))
                results.append(physics.combine(T.MetersSquaredPerSecond, T.Meter(10), T.MetersPerSecond(25)))
        except Exception as e:  # pragma: no cover - surfaced by the assert below
            errors.append(e)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert not errors
    assert len(results) == 8 * 200 * 2
    assert set(results) == {5.0, 250.0}


def test_concurrent_registration_is_serialized():
    s = System("race")
    s.add_basic("m")
    types = [type(f"T{i}", (float,), {}) for i in range(50)]
    barrier = threading.Barrier(len(types))

    def register(t):
        barrier.wait()
        s.register_type(t, ["m"])

    threads = [threading.Thread(target=register, args=(t,)) for t in types]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(s.types()) == len(types)
