import math
import random

import pytest
from hypothesis import given
from hypothesis import strategies as st

from softint.intbase import I32, I64, U32, U128
from softint.vectors import (
    F32,
    F64,
    LARGE_F32,
    MY_F32,
    MY_F64,
    MY_I32,
    MY_U64,
    InputKind,
    gen_f32,
    gen_f64,
    gen_int,
    gen_large_f32,
    gen_large_f64,
)


def test_known_bit_patterns():
    assert F32.to_bits(1.0) == 0x3F800000
    assert F64.to_bits(1.0) == 0x3FF0000000000000
    assert F32.to_bits(-0.0) == F32.sign_mask


@given(st.integers(min_value=0, max_value=F64.mask))
def test_f64_bits_round_trip(bits):
    value = F64.from_bits(bits)
    if not math.isnan(value):
        assert F64.to_bits(value) == bits


@given(st.integers(min_value=0, max_value=F32.mask))
def test_f32_bits_round_trip(bits):
    value = F32.from_bits(bits)
    if not math.isnan(value):
        assert F32.to_bits(value) == bits
    assert math.isnan(value) == math.isnan(F32.round(value))


def test_from_bits_rejects_out_of_range():
    with pytest.raises(ValueError):
        F32.from_bits(1 << 32)
    with pytest.raises(ValueError):
        F64.from_bits(-1)


def test_round_overflows_to_infinity_and_keeps_max():
    assert F32.round(1e300) == math.inf
    assert F32.round(-1e300) == -math.inf
    assert F32.round(F32.max_value) == F32.max_value
    assert F32.to_bits(F32.max_value) == 0x7F7FFFFF


@given(st.floats(allow_nan=False))
def test_round_is_idempotent(value):
    once = F32.round(value)
    assert F32.round(once) == once


def test_make_assembles_sign_and_significand():
    assert F32.make(False, 0, 1) == F32.from_bits(1)
    assert F32.to_bits(F32.make(True, 0, 0)) == F32.sign_mask
    assert F64.to_bits(F64.make(True, 0, 7)) == F64.sign_mask | 7


def test_make_drops_exponent_bits_outside_the_word():
    assert F32.make(False, 0xFF, 5) == F32.make(False, 0, 5)
    assert F32.make(False, F32.exponent_mask, 5) == F32.make(False, 0, 5)


def test_make_rejects_oversized_fields():
    with pytest.raises(ValueError):
        F32.make(False, 1 << 32, 0)
    with pytest.raises(ValueError):
        F32.make(False, 0, -1)


def test_generated_specials_include_extremes():
    rng = random.Random(7)
    values = [gen_f64(rng) for _ in range(3000)]
    assert F64.to_bits(F64.min_positive) == 0x0010000000000000
    assert F64.min_positive in values
    assert -F64.max_value in values
    assert -math.inf in values


@pytest.mark.parametrize("generator, fmt", [(gen_f32, F32), (gen_f64, F64)])
def test_generated_floats_are_specials_or_without_exponent(generator, fmt):
    rng = random.Random(1)
    specials_bits = {fmt.to_bits(v) for v in fmt.special_values if not math.isnan(v)}
    for _ in range(2000):
        value = generator(rng)
        if math.isnan(value):
            continue
        bits = fmt.to_bits(value)
        assert bits in specials_bits or bits & fmt.exponent_mask == 0


@pytest.mark.parametrize("generator, fmt", [(gen_large_f32, F32), (gen_large_f64, F64)])
def test_large_floats_are_representable(generator, fmt):
    rng = random.Random(2)
    values = [generator(rng) for _ in range(2000)]
    for value in values:
        assert math.isnan(value) or fmt.round(value) == value
    assert any(0.0 < v < 1.0 and v > fmt.min_positive for v in values)


def test_generators_are_deterministic_for_a_seed():
    first = [gen_f32(random.Random(5)) for _ in range(3)]
    second = [gen_f32(random.Random(5)) for _ in range(3)]
    assert [F32.to_bits(v) for v in first] == [F32.to_bits(v) for v in second]


def test_generated_specials_appear():
    rng = random.Random(3)
    values = [gen_f64(rng) for _ in range(3000)]
    assert math.inf in values
    assert any(math.isnan(v) for v in values)


@pytest.mark.parametrize("int_type", [I32, U32, I64, U128])
def test_gen_int_in_range_with_empty_low_half(int_type):
    rng = random.Random(4)
    for _ in range(500):
        value = gen_int(rng, int_type)
        assert value in int_type
        assert int_type.low(value) == 0


def test_input_kind_type_names():
    assert MY_F32.type_name() == "u32"
    assert MY_F64.type_name() == "u64"
    assert MY_I32.type_name() == "i32"
    assert InputKind.pair(MY_F64, MY_I32).type_name() == "(u64, i32)"


def test_input_kind_render_and_key():
    kind = InputKind.pair(MY_F32, MY_I32)
    assert kind.render((1.0, -3)) == f"({0x3F800000}, -3)"
    assert kind.key((1.0, -3)) == (0x3F800000, -3)
    assert MY_F64.key(-0.0) == F64.sign_mask


def test_input_kind_generate_pair():
    kind = InputKind.pair(MY_U64, LARGE_F32)
    rng = random.Random(6)
    for _ in range(100):
        number, value = kind.generate(rng)
        assert number in MY_U64.scalar
        assert math.isnan(value) or F32.round(value) == value


def test_input_kind_errors():
    with pytest.raises(ValueError):
        InputKind()
    with pytest.raises(ValueError):
        InputKind(I32, large=True)
    with pytest.raises(ValueError):
        MY_I32.key(1 << 40)
    with pytest.raises(ValueError):
        InputKind.pair(MY_I32, MY_I32).render((1,))