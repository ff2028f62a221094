"""Random test inputs for the intrinsics: float bit patterns, integers and their pairs."""

from __future__ import annotations

import math
import random
import struct
from dataclasses import dataclass

from .intbase import I32, I64, I128, U32, U64, U128, IntType

__all__ = [
    "FloatFormat",
    "F32",
    "F64",
    "gen_f32",
    "gen_f64",
    "gen_large_f32",
    "gen_large_f64",
    "gen_int",
    "InputKind",
    "MY_F32",
    "MY_F64",
    "LARGE_F32",
    "LARGE_F64",
    "MY_I32",
    "MY_I64",
    "MY_I128",
    "MY_U32",
    "MY_U64",
    "MY_U128",
]

_STRUCT_CODES = {32: "<f", 64: "<d"}


@dataclass(frozen=True)
class FloatFormat:
    """An IEEE 754 binary format, with Python floats as its values."""

    bits: int
    significand_bits: int

    def __post_init__(self) -> None:
        if self.bits not in _STRUCT_CODES:
            raise ValueError(f"unsupported float width: {self.bits}")
        if not 0 < self.significand_bits < self.bits - 1:
            raise ValueError(f"bad significand width: {self.significand_bits}")

    @property
    def name(self) -> str:
        return f"f{self.bits}"

    @property
    def mask(self) -> int:
        return (1 << self.bits) - 1

    @property
    def sign_mask(self) -> int:
        return 1 << (self.bits - 1)

    @property
    def significand_mask(self) -> int:
        return (1 << self.significand_bits) - 1

    @property
    def exponent_mask(self) -> int:
        return self.mask & ~(self.sign_mask | self.significand_mask)

    @property
    def max_value(self) -> float:
        return self.from_bits(self.exponent_mask - (1 << self.significand_bits) | self.significand_mask)

    @property
    def min_positive(self) -> float:
        return self.from_bits(1 << self.significand_bits)

    @property
    def special_values(self) -> tuple[float, ...]:
        """Zeros, extremes, NaN and infinities, in the order they are drawn from."""
        biggest = self.max_value
        return (-0.0, 0.0, -biggest, self.min_positive, biggest, math.nan, math.inf, -math.inf)

    def _pack(self, value: float) -> bytes:
        code = _STRUCT_CODES[self.bits]
        try:
            return struct.pack(code, value)
        except OverflowError:
            return struct.pack(code, math.copysign(math.inf, value))

    def _check_field(self, what: str, value: int) -> int:
        if not 0 <= value <= self.mask:
            raise ValueError(f"{what} does not fit in {self.bits} bits: {value}")
        return value

    def make(self, sign: bool, exponent: int, significand: int) -> float:
        """Assemble a value from its sign, exponent and significand.

        The exponent is masked in place with the exponent field mask and then
        shifted, and the result is cut to the format width, so only bits that
        land inside the word survive.
        """
        self._check_field("exponent", exponent)
        self._check_field("significand", significand)
        raw = (
            (int(bool(sign)) << (self.bits - 1))
            | ((exponent & self.exponent_mask) << self.significand_bits)
            | (significand & self.significand_mask)
        ) & self.mask
        return self.from_bits(raw)

    def to_bits(self, value: float) -> int:
        """The bit pattern of ``value`` rounded to this format."""
        return int.from_bytes(self._pack(value), "little")

    def from_bits(self, bits: int) -> float:
        """The value whose bit pattern in this format is ``bits``."""
        self._check_field("bit pattern", bits)
        (value,) = struct.unpack(_STRUCT_CODES[self.bits], bits.to_bytes(self.bits // 8, "little"))
        return value

    def round(self, value: float) -> float:
        """Round ``value`` to the nearest value of this format; overflow gives infinity."""
        (result,) = struct.unpack(_STRUCT_CODES[self.bits], self._pack(value))
        return result

    def _uniform(self, rng: random.Random) -> float:
        width = self.significand_bits + 1
        return rng.getrandbits(width) * 2.0 ** -width


F32 = FloatFormat(32, 23)
F64 = FloatFormat(64, 52)


def _gen_float(rng: random.Random, fmt: FloatFormat, large: bool) -> float:
    if rng.randrange(10) == 0:
        return rng.choice(fmt.special_values)
    if rng.randrange(10) == 0:
        sign = bool(rng.getrandbits(1))
        return fmt.make(sign, rng.getrandbits(fmt.bits), 0)
    if rng.getrandbits(1):
        sign = bool(rng.getrandbits(1))
        return fmt.make(sign, 0, rng.getrandbits(fmt.bits))
    if large:
        return fmt._uniform(rng)
    sign = bool(rng.getrandbits(1))
    exponent = rng.getrandbits(fmt.bits)
    return fmt.make(sign, exponent, rng.getrandbits(fmt.bits))


def gen_f32(rng: random.Random) -> float:
    """A random f32 drawn from special values and assembled bit patterns."""
    return _gen_float(rng, F32, large=False)


def gen_f64(rng: random.Random) -> float:
    """A random f64 drawn from special values and assembled bit patterns."""
    return _gen_float(rng, F64, large=False)


def gen_large_f32(rng: random.Random) -> float:
    """Like :func:`gen_f32`, but the general case is uniform in [0, 1)."""
    return _gen_float(rng, F32, large=True)


def gen_large_f64(rng: random.Random) -> float:
    """Like :func:`gen_f64`, but the general case is uniform in [0, 1)."""
    return _gen_float(rng, F64, large=True)


def gen_int(rng: random.Random, int_type: IntType) -> int:
    """A random integer of ``int_type`` built from two drawn halves."""
    half = int_type.bits // 2
    specials = (int_type.max_value >> half, 0, int_type.min_value >> half)

    def draw() -> int:
        if rng.randrange(10) == 0:
            return rng.choice(specials)
        return int_type.wrap(rng.getrandbits(int_type.bits))

    first = draw()
    second = draw()
    mask = int_type.mask
    raw = ((first << half) & mask) | (second & ((mask << half) & mask))
    return int_type.wrap(raw)


@dataclass(frozen=True)
class InputKind:
    """The kind of a test input: a float, an integer, or a tuple of kinds."""

    scalar: FloatFormat | IntType | None = None
    large: bool = False
    parts: tuple[InputKind, ...] = ()

    def __post_init__(self) -> None:
        if (self.scalar is None) == (not self.parts):
            raise ValueError("an input kind is either a scalar or a tuple of parts")
        if self.large and not isinstance(self.scalar, FloatFormat):
            raise ValueError("only float inputs can be large")

    @classmethod
    def pair(cls, first: InputKind, second: InputKind) -> InputKind:
        return cls(parts=(first, second))

    def generate(self, rng: random.Random) -> object:
        """Draw one random input of this kind."""
        if self.parts:
            return tuple(part.generate(rng) for part in self.parts)
        if isinstance(self.scalar, FloatFormat):
            return _gen_float(rng, self.scalar, self.large)
        return gen_int(rng, self.scalar)

    def type_name(self) -> str:
        """The name of the type that stores an input of this kind."""
        if self.parts:
            return "(" + ", ".join(part.type_name() for part in self.parts) + ")"
        if isinstance(self.scalar, FloatFormat):
            return f"u{self.scalar.bits}"
        return self.scalar.name

    def _check_parts(self, value: object) -> tuple:
        if not isinstance(value, tuple) or len(value) != len(self.parts):
            raise ValueError(f"expected a tuple of {len(self.parts)} values: {value!r}")
        return value

    def render(self, value: object) -> str:
        """Write ``value`` as a literal; floats are written as their bit patterns."""
        if self.parts:
            items = self._check_parts(value)
            return "(" + ", ".join(p.render(v) for p, v in zip(self.parts, items)) + ")"
        return str(self.key(value))

    def key(self, value: object) -> object:
        """A hashable identity for ``value``: floats compare by bit pattern."""
        if self.parts:
            items = self._check_parts(value)
            return tuple(p.key(v) for p, v in zip(self.parts, items))
        if isinstance(self.scalar, FloatFormat):
            return self.scalar.to_bits(value)
        if value not in self.scalar:
            raise ValueError(f"{value!r} is not a valid {self.scalar.name}")
        return value


MY_F32 = InputKind(F32)
MY_F64 = InputKind(F64)
LARGE_F32 = InputKind(F32, large=True)
LARGE_F64 = InputKind(F64, large=True)
MY_I32 = InputKind(I32)
MY_I64 = InputKind(I64)
MY_I128 = InputKind(I128)
MY_U32 = InputKind(U32)
MY_U64 = InputKind(U64)
MY_U128 = InputKind(U128)