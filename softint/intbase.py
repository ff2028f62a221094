"""Fixed-width integer model shared by the integer intrinsics."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "IntrinsicAbort",
    "IntType",
    "I32",
    "U32",
    "I64",
    "U64",
    "I128",
    "U128",
    "U64x2",
    "to_u64x2",
    "clzsi2",
    "wide_mul",
    "wide_shift_left",
    "wide_shift_right_with_sticky",
]


class IntrinsicAbort(ArithmeticError):
    """Raised where an intrinsic would abort: division by zero or overflow."""


@dataclass(frozen=True)
class IntType:
    """A two's-complement integer type of a fixed width and signedness."""

    bits: int
    signed: bool

    def __post_init__(self) -> None:
        if self.bits <= 0 or self.bits % 2:
            raise ValueError(f"unsupported integer width: {self.bits}")

    @property
    def name(self) -> str:
        return f"{'i' if self.signed else 'u'}{self.bits}"

    @property
    def mask(self) -> int:
        return (1 << self.bits) - 1

    @property
    def min_value(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def max_value(self) -> int:
        return (1 << (self.bits - 1)) - 1 if self.signed else self.mask

    @property
    def unsigned_type(self) -> IntType:
        return IntType(self.bits, False)

    @property
    def other_sign(self) -> IntType:
        return IntType(self.bits, not self.signed)

    @property
    def half_bits(self) -> int:
        return self.bits // 2

    @property
    def low_type(self) -> IntType:
        """Type of the low half: always unsigned."""
        return IntType(self.half_bits, False)

    @property
    def high_type(self) -> IntType:
        """Type of the high half: same signedness as this type."""
        return IntType(self.half_bits, self.signed)

    def __contains__(self, value: object) -> bool:
        return isinstance(value, int) and self.min_value <= value <= self.max_value

    def wrap(self, value: int) -> int:
        """Reduce any integer to this type, wrapping modulo 2**bits."""
        value &= self.mask
        if self.signed and value >> (self.bits - 1):
            value -= 1 << self.bits
        return value

    def to_unsigned(self, value: int) -> int:
        """Reinterpret the bits of ``value`` as the unsigned type of this width."""
        return value & self.mask

    def from_unsigned(self, value: int) -> int:
        """Reinterpret an unsigned bit pattern as this type."""
        return self.wrap(value)

    def extract_sign(self, value: int) -> tuple[bool, int]:
        """Split ``value`` into a negative flag and its unsigned magnitude."""
        if self.signed and value < 0:
            return True, ((~self.to_unsigned(value)) + 1) & self.mask
        return False, self.to_unsigned(value)

    def leading_zeros(self, value: int) -> int:
        return self.bits - self.to_unsigned(value).bit_length()

    def low(self, value: int) -> int:
        """The low half of ``value`` as an unsigned integer."""
        return value & self.low_type.mask

    def high(self, value: int) -> int:
        """The high half of ``value``, keeping this type's signedness."""
        return self.high_type.wrap(self.wrap(value) >> self.half_bits)

    def from_parts(self, low: int, high: int) -> int:
        """Join a low and a high half into a value of this type."""
        half_mask = self.low_type.mask
        return self.wrap((low & half_mask) | ((high & half_mask) << self.half_bits))

    def _check_division(self, a: int, b: int) -> None:
        if b == 0:
            raise IntrinsicAbort(f"{self.name} division by zero")
        if self.signed and a == self.min_value and b == -1:
            raise IntrinsicAbort(f"{self.name} division overflow")

    def checked_div(self, a: int, b: int) -> int:
        """Quotient truncated toward zero; raises IntrinsicAbort where it cannot exist."""
        self._check_division(a, b)
        quotient = abs(a) // abs(b)
        return -quotient if (a < 0) != (b < 0) else quotient

    def checked_rem(self, a: int, b: int) -> int:
        """Remainder with the sign of the dividend; raises IntrinsicAbort like checked_div."""
        self._check_division(a, b)
        remainder = abs(a) % abs(b)
        return -remainder if a < 0 else remainder


I32 = IntType(32, True)
U32 = IntType(32, False)
I64 = IntType(64, True)
U64 = IntType(64, False)
I128 = IntType(128, True)
U128 = IntType(128, False)


@dataclass(frozen=True)
class U64x2:
    """A 128-bit value carried as two 64-bit lanes."""

    low: int
    high: int


def to_u64x2(value: int) -> U64x2:
    """Split a 128-bit integer, signed or unsigned, into two 64-bit lanes."""
    if not I128.min_value <= value <= U128.max_value:
        raise ValueError(f"value does not fit in 128 bits: {value}")
    bits = U128.to_unsigned(value)
    return U64x2(U128.low(bits), U128.high(bits))


_CLZ_WIDTHS = (16, 32, 64)


def clzsi2(x: int, width: int) -> int:
    """Count leading zeros of an unsigned pointer-sized value of ``width`` bits."""
    if width not in _CLZ_WIDTHS:
        raise ValueError(f"unsupported pointer width: {width}")
    if not 0 <= x < (1 << width):
        raise ValueError(f"value does not fit in {width} bits: {x}")
    n = width
    for shift in (s for s in (32, 16, 8, 4, 2) if s < width):
        y = x >> shift
        if y:
            n -= shift
            x = y
    return n - 2 if x >> 1 else n - x


def _check_wide_bits(bits: int) -> int:
    if bits not in (32, 64):
        raise ValueError(f"unsupported wide integer width: {bits}")
    return (1 << bits) - 1


def wide_mul(a: int, b: int, bits: int) -> tuple[int, int]:
    """Full product of two unsigned ``bits``-wide values as ``(high, low)``."""
    mask = _check_wide_bits(bits)
    product = ((a & mask) * (b & mask)) & ((1 << (2 * bits)) - 1)
    return product >> bits, product & mask


def wide_shift_left(high: int, low: int, count: int, bits: int) -> tuple[int, int]:
    """Shift the double-width value ``high:low`` left by ``count`` bits."""
    mask = _check_wide_bits(bits)
    if not 0 <= count < bits:
        raise ValueError(f"shift count out of range: {count}")
    new_high = ((high << count) | ((low & mask) >> (bits - count))) & mask
    new_low = (low << count) & mask
    return new_high, new_low


def wide_shift_right_with_sticky(
    high: int, low: int, count: int, bits: int
) -> tuple[int, int]:
    """Shift ``high:low`` right by ``count``, folding lost bits into the low word."""
    mask = _check_wide_bits(bits)
    if count < 0:
        raise ValueError(f"shift count out of range: {count}")
    high &= mask
    low &= mask
    if count < bits:
        sticky = (low << (bits - count)) & mask
        new_low = ((high << (bits - count)) & mask) | (low >> count) | sticky
        return high >> count, new_low
    if count < 2 * bits:
        sticky = ((high << (2 * bits - count)) & mask) | low
        return 0, (high >> (count - bits)) | sticky
    return 0, low