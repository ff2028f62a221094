"""Shifts of double-width integers built from their two halves."""

from __future__ import annotations

from .intbase import I64, I128, U64, U128, IntType

__all__ = [
    "ashldi3",
    "ashlti3",
    "ashrdi3",
    "ashrti3",
    "lshrdi3",
    "lshrti3",
    "i128_shlo",
    "u128_shlo",
    "i128_shro",
    "u128_shro",
]


def _require(int_type: IntType, value: int, offset: int) -> None:
    if value not in int_type:
        raise ValueError(f"{value} is not a valid {int_type.name}")
    if not 0 <= offset < int_type.bits:
        raise ValueError(f"shift of {offset} is out of range for {int_type.name}")


def _ashl(int_type: IntType, value: int, offset: int) -> int:
    _require(int_type, value, offset)
    half = int_type.half_bits
    low, high = int_type.low(value), int_type.high(value)
    if offset & half:
        return int_type.from_parts(0, low << (offset - half))
    if offset == 0:
        return value
    return int_type.from_parts(low << offset, (high << offset) | (low >> (half - offset)))


def _ashr(int_type: IntType, value: int, offset: int) -> int:
    _require(int_type, value, offset)
    half = int_type.half_bits
    low, high = int_type.low(value), int_type.high(value)
    if offset & half:
        return int_type.from_parts(
            int_type.low_type.wrap(high >> (offset - half)), high >> (half - 1)
        )
    if offset == 0:
        return value
    high_unsigned = int_type.low_type.wrap(high)
    return int_type.from_parts(
        (high_unsigned << (half - offset)) | (low >> offset), high >> offset
    )


def _lshr(int_type: IntType, value: int, offset: int) -> int:
    _require(int_type, value, offset)
    half = int_type.half_bits
    low, high = int_type.low(value), int_type.high(value)
    if offset & half:
        return int_type.from_parts(high >> (offset - half), 0)
    if offset == 0:
        return value
    return int_type.from_parts((high << (half - offset)) | (low >> offset), high >> offset)


def ashldi3(a: int, b: int) -> int:
    """``a << b`` for a u64, with ``b`` below 64."""
    return _ashl(U64, a, b)


def ashlti3(a: int, b: int) -> int:
    """``a << b`` for a u128, with ``b`` below 128."""
    return _ashl(U128, a, b)


def ashrdi3(a: int, b: int) -> int:
    """Arithmetic ``a >> b`` for an i64, with ``b`` below 64."""
    return _ashr(I64, a, b)


def ashrti3(a: int, b: int) -> int:
    """Arithmetic ``a >> b`` for an i128, with ``b`` below 128."""
    return _ashr(I128, a, b)


def lshrdi3(a: int, b: int) -> int:
    """Logical ``a >> b`` for a u64, with ``b`` below 64."""
    return _lshr(U64, a, b)


def lshrti3(a: int, b: int) -> int:
    """Logical ``a >> b`` for a u128, with ``b`` below 128."""
    return _lshr(U128, a, b)


def _shift_amount(b: int) -> int:
    if b not in U128:
        raise ValueError(f"{b} is not a valid u128 shift amount")
    return b & (U128.bits - 1)


def i128_shlo(a: int, b: int) -> tuple[int, bool]:
    """Left shift of an i128 by ``b`` modulo 128, flagging ``b >= 128``."""
    if a not in I128:
        raise ValueError(f"{a} is not a valid i128")
    shifted = ashlti3(I128.to_unsigned(a), _shift_amount(b))
    return I128.from_unsigned(shifted), b >= 128


def u128_shlo(a: int, b: int) -> tuple[int, bool]:
    """Left shift of a u128 by ``b`` modulo 128, flagging ``b >= 128``."""
    return ashlti3(a, _shift_amount(b)), b >= 128


def i128_shro(a: int, b: int) -> tuple[int, bool]:
    """Arithmetic right shift of an i128 by ``b`` modulo 128, flagging ``b >= 128``."""
    return ashrti3(a, _shift_amount(b)), b >= 128


def u128_shro(a: int, b: int) -> tuple[int, bool]:
    """Logical right shift of a u128 by ``b`` modulo 128, flagging ``b >= 128``."""
    return lshrti3(a, _shift_amount(b)), b >= 128