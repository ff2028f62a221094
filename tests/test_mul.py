import pytest
from hypothesis import given, strategies as st

from softint.intbase import I32, I64, I128, U32, U64, U128, IntrinsicAbort
from softint.mul import (
    i128_mulo,
    muldi3,
    mulodi4,
    mulosi4,
    muloti4,
    mulsi3,
    multi3,
    u128_mulo,
)


def ints(t):
    return st.integers(min_value=t.min_value, max_value=t.max_value)


def test_muldi3_pinned():
    assert muldi3(2**32, 2**32) == 0
    assert muldi3(U64.max_value, U64.max_value) == 1
    assert muldi3(123456789, 1000) == 123456789000


def test_multi3_pinned():
    assert multi3(-1, -1) == 1
    assert multi3(I128.min_value, -1) == I128.min_value
    assert multi3(-3, 7) == -21


def test_mulosi4_edges():
    assert mulosi4(2**16, 2**15) == (-(2**31), True)
    assert mulosi4(-(2**16), 2**15) == (-(2**31), False)
    assert mulosi4(I32.min_value, 1) == (I32.min_value, False)
    assert mulosi4(I32.min_value, 0) == (0, False)
    assert mulosi4(I32.min_value, -1) == (I32.min_value, True)
    assert mulosi4(-1, I32.min_value) == (I32.min_value, True)


def test_mulodi4_and_muloti4_edges():
    assert mulodi4(2**32, 2**31) == (I64.min_value, True)
    assert mulodi4(-(2**32), 2**31) == (I64.min_value, False)
    assert muloti4(2**64, 2**63) == (I128.min_value, True)
    assert i128_mulo(6, -7) == (-42, False)


def test_u128_mulo():
    assert u128_mulo(2**64, 2**64) == (0, True)
    assert u128_mulo(0, 5) == (0, False)
    assert u128_mulo(3, 4) == (12, False)
    with pytest.raises(IntrinsicAbort):
        u128_mulo(5, 0)


def test_mulsi3_pinned():
    assert mulsi3(U32.max_value, 2) == U32.max_value - 1
    assert mulsi3(0, 99) == 0
    assert mulsi3(12, 13) == 156


def test_rejects_out_of_range():
    with pytest.raises(ValueError):
        muldi3(-1, 1)
    with pytest.raises(ValueError):
        mulosi4(2**31, 1)


@given(ints(U64), ints(U64))
def test_muldi3_matches_wrapping(a, b):
    assert muldi3(a, b) == (a * b) % 2**64


@given(ints(I128), ints(I128))
def test_multi3_matches_wrapping(a, b):
    assert multi3(a, b) == I128.wrap(a * b)


@given(ints(I32), ints(I32))
def test_mulosi4_matches_overflowing(a, b):
    assert mulosi4(a, b) == (I32.wrap(a * b), a * b not in I32)


@given(ints(I64), ints(I64))
def test_mulodi4_matches_overflowing(a, b):
    assert mulodi4(a, b) == (I64.wrap(a * b), a * b not in I64)


@given(ints(I128), ints(I128))
def test_muloti4_matches_overflowing(a, b):
    assert muloti4(a, b) == (I128.wrap(a * b), a * b not in I128)


@given(ints(U128), st.integers(min_value=1, max_value=U128.max_value))
def test_u128_mulo_matches_overflowing(a, b):
    assert u128_mulo(a, b) == (U128.wrap(a * b), a * b > U128.max_value)


@given(ints(U32), ints(U32))
def test_mulsi3_matches_wrapping(a, b):
    assert mulsi3(a, b) == (a * b) % 2**32