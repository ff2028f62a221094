"""128-bit addition and subtraction built from 64-bit halves, with overflow reporting."""

from __future__ import annotations

from .intbase import I128, U128, IntType

__all__ = [
    "u128_add",
    "i128_add",
    "u128_addo",
    "i128_addo",
    "u128_sub",
    "i128_sub",
    "u128_subo",
    "i128_subo",
]


def _require(int_type: IntType, value: int) -> int:
    if value not in int_type:
        raise ValueError(f"{value} is not a valid {int_type.name}")
    return value


def _uadd(a: int, b: int) -> int:
    """Add two unsigned 128-bit patterns limb by limb, carrying out of the low half."""
    low_sum = U128.low(a) + U128.low(b)
    carry = low_sum >> U128.half_bits
    high = U128.high(a) + U128.high(b) + carry
    return U128.from_parts(low_sum, high)


def _uadd_one(a: int) -> int:
    low_sum = U128.low(a) + 1
    carry = low_sum >> U128.half_bits
    return U128.from_parts(low_sum, U128.high(a) + carry)


def _usub(a: int, b: int) -> int:
    negated = _uadd_one(~b & U128.mask)
    return _uadd(a, negated)


def _add(int_type: IntType, a: int, b: int) -> int:
    return int_type.from_unsigned(
        _uadd(int_type.to_unsigned(a), int_type.to_unsigned(b))
    )


def _sub(int_type: IntType, a: int, b: int) -> int:
    return int_type.from_unsigned(
        _usub(int_type.to_unsigned(a), int_type.to_unsigned(b))
    )


def _addo(int_type: IntType, a: int, b: int) -> tuple[int, bool]:
    result = _add(int_type, a, b)
    overflow = result < a if b >= 0 else result >= a
    return result, overflow


def _subo(int_type: IntType, a: int, b: int) -> tuple[int, bool]:
    result = _sub(int_type, a, b)
    overflow = result > a if b >= 0 else result <= a
    return result, overflow


def u128_add(a: int, b: int) -> int:
    """Wrapping sum of two u128 values."""
    return _add(U128, _require(U128, a), _require(U128, b))


def i128_add(a: int, b: int) -> int:
    """Wrapping sum of two i128 values."""
    _require(I128, a)
    _require(I128, b)
    return I128.from_unsigned(u128_add(I128.to_unsigned(a), I128.to_unsigned(b)))


def u128_addo(a: int, b: int) -> tuple[int, bool]:
    """Wrapping sum of two u128 values and whether it overflowed."""
    return _addo(U128, _require(U128, a), _require(U128, b))


def i128_addo(a: int, b: int) -> tuple[int, bool]:
    """Wrapping sum of two i128 values and whether it overflowed."""
    return _addo(I128, _require(I128, a), _require(I128, b))


def u128_sub(a: int, b: int) -> int:
    """Wrapping difference of two u128 values."""
    return _sub(U128, _require(U128, a), _require(U128, b))


def i128_sub(a: int, b: int) -> int:
    """Wrapping difference of two i128 values."""
    _require(I128, a)
    _require(I128, b)
    return I128.from_unsigned(u128_sub(I128.to_unsigned(a), I128.to_unsigned(b)))


def u128_subo(a: int, b: int) -> tuple[int, bool]:
    """Wrapping difference of two u128 values and whether it overflowed."""
    return _subo(U128, _require(U128, a), _require(U128, b))


def i128_subo(a: int, b: int) -> tuple[int, bool]:
    """Wrapping difference of two i128 values and whether it overflowed."""
    return _subo(I128, _require(I128, a), _require(I128, b))