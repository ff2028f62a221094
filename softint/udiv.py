"""Unsigned division and remainder by shift-and-subtract long division."""

from __future__ import annotations

from .intbase import I32, U32, U64, U128, IntType, IntrinsicAbort

__all__ = [
    "udivsi3",
    "umodsi3",
    "udivmodsi4",
    "udivdi3",
    "umoddi3",
    "udivmoddi4",
    "udivti3",
    "umodti3",
    "udivmodti4",
]

_U32_COUNT_MASK = U32.mask


def _require(int_type: IntType, value: int) -> int:
    if value not in int_type:
        raise ValueError(f"{value} is not a valid {int_type.name}")
    return value


def _is_power_of_two(value: int) -> bool:
    return value != 0 and value & (value - 1) == 0


def _trailing_zeros(value: int) -> int:
    return (value & -value).bit_length() - 1


def _long_division(int_type: IntType, n: int, d: int, sr: int) -> tuple[int, int]:
    """Restoring division of ``n`` by ``d`` over ``sr`` quotient bits."""
    bits = int_type.bits
    mask = int_type.mask
    signed = int_type.other_sign
    q = (n << (bits - sr)) & mask
    r = n >> sr
    carry = 0
    for _ in range(sr):
        r = ((r << 1) | (q >> (bits - 1))) & mask
        q = ((q << 1) | carry) & mask
        # s is all ones when r >= d, zero otherwise
        s = signed.wrap(d - r - 1) >> (bits - 1)
        carry = s & 1
        r = (r - (d & (s & mask))) & mask
    return ((q << 1) | carry) & mask, r


def _udivmod(int_type: IntType, n: int, d: int) -> tuple[int, int]:
    """Quotient and remainder of two unsigned double-width values."""
    _require(int_type, n)
    _require(int_type, d)
    half = int_type.low_type
    n_low, n_high = int_type.low(n), int_type.high(n)
    d_low, d_high = int_type.low(d), int_type.high(d)

    if n_high == 0:
        if d_high == 0:
            return half.checked_div(n_low, d_low), half.checked_rem(n_low, d_low)
        return 0, n

    if d_low == 0:
        if d_high == 0:
            raise IntrinsicAbort(f"{int_type.name} division by zero")
        if n_low == 0:
            remainder = int_type.from_parts(0, half.checked_rem(n_high, d_high))
            return half.checked_div(n_high, d_high), remainder
        if _is_power_of_two(d_high):
            remainder = int_type.from_parts(n_low, n_high & (d_high - 1))
            return n_high >> _trailing_zeros(d_high), remainder
        sr = (half.leading_zeros(d_high) - half.leading_zeros(n_high)) & _U32_COUNT_MASK
        if sr > half.bits - 2:
            return 0, n
        sr += 1
    elif d_high == 0:
        if _is_power_of_two(d_low):
            remainder = n_low & (d_low - 1)
            if d_low == 1:
                return n, remainder
            return n >> _trailing_zeros(d_low), remainder
        sr = 1 + half.bits + half.leading_zeros(d_low) - half.leading_zeros(n_high)
    else:
        sr = (half.leading_zeros(d_high) - half.leading_zeros(n_high)) & _U32_COUNT_MASK
        if sr > half.bits - 1:
            return 0, n
        sr += 1

    return _long_division(int_type, n, d, sr)


def udivsi3(n: int, d: int) -> int:
    """Quotient of two u32 values."""
    _require(U32, n)
    _require(U32, d)
    if d == 0:
        raise IntrinsicAbort("u32 division by zero")
    if n == 0:
        return 0
    sr = (U32.leading_zeros(d) - U32.leading_zeros(n)) & _U32_COUNT_MASK
    if sr > U32.bits - 1:
        return 0
    if sr == U32.bits - 1:
        return n
    sr += 1
    quotient, _ = _long_division(U32, n, d, sr)
    return quotient


def umodsi3(n: int, d: int) -> int:
    """Remainder of two u32 values."""
    q = udivsi3(n, d)
    return (n - q * d) & U32.mask


def udivmodsi4(n: int, d: int) -> tuple[int, int]:
    """Quotient and remainder of two u32 values."""
    q = udivsi3(n, d)
    return q, (n - q * d) & U32.mask


def udivmoddi4(n: int, d: int) -> tuple[int, int]:
    """Quotient and remainder of two u64 values."""
    return _udivmod(U64, n, d)


def udivdi3(n: int, d: int) -> int:
    """Quotient of two u64 values."""
    return udivmoddi4(n, d)[0]


def umoddi3(n: int, d: int) -> int:
    """Remainder of two u64 values."""
    return udivmoddi4(n, d)[1]


def udivmodti4(n: int, d: int) -> tuple[int, int]:
    """Quotient and remainder of two u128 values."""
    return _udivmod(U128, n, d)


def udivti3(n: int, d: int) -> int:
    """Quotient of two u128 values."""
    return udivmodti4(n, d)[0]


def umodti3(n: int, d: int) -> int:
    """Remainder of two u128 values."""
    return udivmodti4(n, d)[1]


# Kept for the signed view used by the inner loop at 32 bits.
assert U32.other_sign == I32