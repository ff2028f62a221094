"""Integer multiplication intrinsics, with and without overflow detection."""

from __future__ import annotations

from .intbase import I32, I64, I128, U32, U64, U128, IntType, IntrinsicAbort

__all__ = [
    "muldi3",
    "multi3",
    "mulosi4",
    "mulodi4",
    "muloti4",
    "i128_mulo",
    "u128_mulo",
    "mulsi3",
]


def _require(int_type: IntType, value: int) -> int:
    if value not in int_type:
        raise ValueError(f"{value} is not a valid {int_type.name}")
    return value


def _mul(int_type: IntType, a: int, b: int) -> int:
    """Wrapping product built from quarter-width partial products."""
    low_mask = int_type.low_type.mask
    quarter = int_type.bits // 4
    lower_mask = low_mask >> quarter
    a_low, b_low = int_type.low(a), int_type.low(b)
    a_high, b_high = int_type.high(a), int_type.high(b)

    low = (a_low & lower_mask) * (b_low & lower_mask)
    t = low >> quarter
    low &= lower_mask
    t = (t + (a_low >> quarter) * (b_low & lower_mask)) & low_mask
    low = (low + ((t & lower_mask) << quarter)) & low_mask
    high = t >> quarter
    t = low >> quarter
    low &= lower_mask
    t = (t + (b_low >> quarter) * (a_low & lower_mask)) & low_mask
    low = (low + ((t & lower_mask) << quarter)) & low_mask
    high += t >> quarter
    high += (a_low >> quarter) * (b_low >> quarter)
    high += a_high * b_low + a_low * b_high
    return int_type.from_parts(low, high)


def _signed_mulo(int_type: IntType, a: int, b: int) -> tuple[int, bool]:
    result = int_type.wrap(a * b)
    minimum, maximum = int_type.min_value, int_type.max_value
    if a == minimum:
        return result, b not in (0, 1)
    if b == minimum:
        return result, a not in (0, 1)
    abs_a, abs_b = abs(a), abs(b)
    if abs_a < 2 or abs_b < 2:
        return result, False
    if (a < 0) == (b < 0):
        overflow = abs_a > int_type.checked_div(maximum, abs_b)
    else:
        overflow = abs_a > int_type.checked_div(minimum, -abs_b)
    return result, overflow


def muldi3(a: int, b: int) -> int:
    """Wrapping product of two u64 values."""
    return _mul(U64, _require(U64, a), _require(U64, b))


def multi3(a: int, b: int) -> int:
    """Wrapping product of two i128 values."""
    return _mul(I128, _require(I128, a), _require(I128, b))


def mulosi4(a: int, b: int) -> tuple[int, bool]:
    """Wrapping product of two i32 values and whether it overflowed."""
    return _signed_mulo(I32, _require(I32, a), _require(I32, b))


def mulodi4(a: int, b: int) -> tuple[int, bool]:
    """Wrapping product of two i64 values and whether it overflowed."""
    return _signed_mulo(I64, _require(I64, a), _require(I64, b))


def muloti4(a: int, b: int) -> tuple[int, bool]:
    """Wrapping product of two i128 values and whether it overflowed."""
    return _signed_mulo(I128, _require(I128, a), _require(I128, b))


def i128_mulo(a: int, b: int) -> tuple[int, bool]:
    """Same as :func:`muloti4`."""
    return muloti4(a, b)


def u128_mulo(a: int, b: int) -> tuple[int, bool]:
    """Wrapping product of two u128 values and whether it overflowed.

    The overflow test divides by ``b``, so a zero ``b`` raises IntrinsicAbort.
    """
    _require(U128, a)
    _require(U128, b)
    result = U128.wrap(a * b)
    if b == 0:
        raise IntrinsicAbort("u128 division by zero")
    return result, a > U128.max_value // b


def mulsi3(a: int, b: int) -> int:
    """Wrapping product of two u32 values by shift and add."""
    _require(U32, a)
    _require(U32, b)
    result = 0
    while a:
        if a & 1:
            result = (result + b) & U32.mask
        a >>= 1
        b = (b << 1) & U32.mask
    return result