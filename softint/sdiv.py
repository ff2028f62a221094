"""Signed division and remainder intrinsics, truncating toward zero."""

from __future__ import annotations

from .intbase import I32, I64, I128, IntType

__all__ = [
    "divsi3",
    "divdi3",
    "divti3",
    "modsi3",
    "moddi3",
    "modti3",
    "divmodsi4",
    "divmoddi4",
]


def _require(int_type: IntType, value: int) -> int:
    if value not in int_type:
        raise ValueError(f"{value} is not a valid {int_type.name}")
    return value


def _sign_mask(int_type: IntType, value: int) -> int:
    return value >> (int_type.bits - 1)


def _abs_bits(int_type: IntType, value: int, sign: int) -> int:
    return int_type.to_unsigned(int_type.wrap((value ^ sign) - sign))


def _div(int_type: IntType, a: int, b: int) -> int:
    _require(int_type, a)
    _require(int_type, b)
    s_a = _sign_mask(int_type, a)
    s_b = _sign_mask(int_type, b)
    sign = s_a ^ s_b
    quotient = int_type.unsigned_type.checked_div(
        _abs_bits(int_type, a, s_a), _abs_bits(int_type, b, s_b)
    )
    return int_type.wrap((int_type.from_unsigned(quotient) ^ sign) - sign)


def _mod(int_type: IntType, a: int, b: int) -> int:
    _require(int_type, a)
    _require(int_type, b)
    s_b = _sign_mask(int_type, b)
    s_a = _sign_mask(int_type, a)
    remainder = int_type.unsigned_type.checked_rem(
        _abs_bits(int_type, a, s_a), _abs_bits(int_type, b, s_b)
    )
    return int_type.wrap((int_type.from_unsigned(remainder) ^ s_a) - s_a)


def _divmod(int_type: IntType, a: int, b: int) -> tuple[int, int]:
    quotient = _div(int_type, a, b)
    return quotient, int_type.wrap(a - int_type.wrap(quotient * b))


def divsi3(a: int, b: int) -> int:
    """Quotient of two i32 values."""
    return _div(I32, a, b)


def divdi3(a: int, b: int) -> int:
    """Quotient of two i64 values."""
    return _div(I64, a, b)


def divti3(a: int, b: int) -> int:
    """Quotient of two i128 values."""
    return _div(I128, a, b)


def modsi3(a: int, b: int) -> int:
    """Remainder of two i32 values, with the sign of ``a``."""
    return _mod(I32, a, b)


def moddi3(a: int, b: int) -> int:
    """Remainder of two i64 values, with the sign of ``a``."""
    return _mod(I64, a, b)


def modti3(a: int, b: int) -> int:
    """Remainder of two i128 values, with the sign of ``a``."""
    return _mod(I128, a, b)


def divmodsi4(a: int, b: int) -> tuple[int, int]:
    """Quotient and remainder of two i32 values."""
    return _divmod(I32, a, b)


def divmoddi4(a: int, b: int) -> tuple[int, int]:
    """Quotient and remainder of two i64 values."""
    return _divmod(I64, a, b)