"""Generation of randomised test tables for the intrinsics, checked against reference results."""

from __future__ import annotations

import argparse
import math
import operator
import os
import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterator, Optional, Sequence

from .intbase import I32, I64, I128, U32, U64, U128, IntrinsicAbort, IntType
from .vectors import (
    F32,
    F64,
    LARGE_F32,
    MY_F32,
    MY_F64,
    MY_I32,
    MY_I64,
    MY_I128,
    MY_U32,
    MY_U64,
    MY_U128,
    FloatFormat,
    InputKind,
)

__all__ = [
    "NTESTS",
    "OUTPUT_FILE",
    "CaseSpec",
    "catalogue",
    "generate_cases",
    "render_cases",
    "write_all",
    "main",
]

NTESTS = 1_000
OUTPUT_FILE = "generated.rs"

Reference = Callable[[Any], Optional[Any]]


@dataclass(frozen=True)
class _Output:
    """How an expected result is stored and compared in the generated table."""

    type_name: str
    float_format: FloatFormat | None = None
    parts: tuple[_Output, ...] = ()

    def render(self, value: Any) -> str:
        if self.parts:
            if not isinstance(value, tuple) or len(value) != len(self.parts):
                raise ValueError(f"expected a tuple of {len(self.parts)} values: {value!r}")
            return "(" + ", ".join(p.render(v) for p, v in zip(self.parts, value)) + ")"
        if self.float_format is not None:
            return str(self.float_format.to_bits(value))
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(int(value))

    def expr(self, container: str) -> str:
        if self.float_format is not None and not self.parts:
            return f"{self.float_format.name}::from_bits({container})"
        return container


def _int_out(int_type: IntType) -> _Output:
    return _Output(int_type.name)


def _pair_out(first: _Output, second: _Output) -> _Output:
    return _Output(f"({first.type_name}, {second.type_name})", parts=(first, second))


_O_F32 = _Output("u32", F32)
_O_F64 = _Output("u64", F64)
_O_BOOL = _Output("bool")
_O_I32 = _int_out(I32)


@dataclass(frozen=True)
class CaseSpec:
    """One intrinsic under test: the call to check, its input and output kinds, and the reference."""

    call: str
    inputs: InputKind
    output: _Output
    reference: Reference = field(compare=False)

    def test_name(self) -> str:
        """The name of the generated test module, taken from the called function."""
        return self.call.split("::")[-1].split("(")[0]


# Reference results -------------------------------------------------------


def _any_nan(*values: float) -> bool:
    return any(math.isnan(v) for v in values)


def _float_arith(fmt: FloatFormat, op: Callable[[float, float], float]) -> Reference:
    def reference(inputs: tuple[float, float]) -> float | None:
        a, b = inputs
        c = fmt.round(op(a, b))
        return None if _any_nan(a, b, c) else c

    return reference


def _float_div(fmt: FloatFormat, smallest_bits: int) -> Reference:
    threshold = fmt.from_bits(smallest_bits)

    def reference(inputs: tuple[float, float]) -> float | None:
        a, b = inputs
        if b == 0.0:
            return None
        c = fmt.round(a / b)
        if _any_nan(a, b, c) or abs(c) <= threshold:
            return None
        return c

    return reference


def _three_way(inputs: tuple[float, float]) -> int | None:
    a, b = inputs
    if _any_nan(a, b):
        return None
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def _unordered(inputs: tuple[float, float]) -> int:
    a, b = inputs
    return int(_any_nan(a, b))


def _predicate(op: Callable[[float, float], bool]) -> Reference:
    def reference(inputs: tuple[float, float]) -> int | None:
        a, b = inputs
        if _any_nan(a, b):
            return None
        return int(op(a, b))

    return reference


def _extend(a: float) -> float | None:
    return None if math.isnan(a) else a


def _to_int(int_type: IntType) -> Reference:
    def reference(a: float) -> int | None:
        if math.isnan(a) or math.isinf(a):
            return None
        truncated = math.trunc(a)
        return truncated if truncated in int_type else None

    return reference


def _int_to_float(fmt: FloatFormat, value: int) -> float:
    """Convert an integer to ``fmt`` with a single round-to-nearest-even step."""
    magnitude = abs(value)
    extra = magnitude.bit_length() - (fmt.significand_bits + 1)
    if extra > 0:
        quotient, remainder = divmod(magnitude, 1 << extra)
        half = 1 << (extra - 1)
        if remainder > half or (remainder == half and quotient & 1):
            quotient += 1
        magnitude = quotient << extra
    result = fmt.round(float(magnitude))
    return -result if value < 0 else result


def _to_float(fmt: FloatFormat, fallible: bool = False) -> Reference:
    def reference(a: int) -> float | None:
        result = _int_to_float(fmt, a)
        if fallible and math.isinf(result):
            return None
        return result

    return reference


def _powi_value(fmt: FloatFormat, a: float, b: int) -> float:
    recip = b < 0
    result = 1.0
    n = b
    while True:
        if n & 1:
            result = fmt.round(result * a)
        n = n // 2 if n >= 0 else -((-n) // 2)
        if n == 0:
            break
        a = fmt.round(a * a)
    if recip:
        if result == 0.0:
            return math.copysign(math.inf, result)
        return fmt.round(1.0 / result)
    return result


def _powi(fmt: FloatFormat) -> Reference:
    def reference(inputs: tuple[float, int]) -> float | None:
        a, b = inputs
        c = _powi_value(fmt, a, b)
        return None if _any_nan(a, c) else c

    return reference


def _wrapping(int_type: IntType, op: Callable[[int, int], int]) -> Reference:
    def reference(inputs: tuple[int, int]) -> int:
        return int_type.wrap(op(*inputs))

    return reference


def _overflowing(int_type: IntType, op: Callable[[int, int], int]) -> Reference:
    def reference(inputs: tuple[int, int]) -> tuple[int, bool]:
        exact = op(*inputs)
        return int_type.wrap(exact), exact not in int_type

    return reference


def _division(int_type: IntType, quotient: bool = True, remainder: bool = False) -> Reference:
    def reference(inputs: tuple[int, int]) -> Any:
        a, b = inputs
        try:
            q = int_type.checked_div(a, b)
            r = int_type.checked_rem(a, b)
        except IntrinsicAbort:
            return None
        if quotient and remainder:
            return q, r
        return q if quotient else r

    return reference


def _shift(int_type: IntType, left: bool) -> Reference:
    def reference(inputs: tuple[int, int]) -> int:
        a, b = inputs
        n = b % int_type.bits
        return int_type.wrap(a << n) if left else a >> n

    return reference


# Catalogue ---------------------------------------------------------------

_PAIR = InputKind.pair

_MULO_BLOCK = (
    "{{\n"
    "            let mut o = 2;\n"
    "            let c = builtins::int::mul::{name}(a, b, &mut o);\n"
    "            (c, match o {{ 0 => false, 1 => true, _ => panic!() }})\n"
    "        }}"
)
_SDIVMOD_BLOCK = (
    "{{\n"
    "            let mut r = 0;\n"
    "            (builtins::int::sdiv::{name}(a, b, &mut r), r)\n"
    "        }}"
)
_UDIVMOD_BLOCK = (
    "{{\n"
    "            let mut r = 0;\n"
    "            (builtins::int::udiv::{name}(a, b, Some(&mut r)), r)\n"
    "        }}"
)

_F64_SMALLEST = 4503599627370495
_F32_SMALLEST = 16777215

_COMPARISONS = (
    ("le", operator.le),
    ("ge", operator.ge),
    ("eq", operator.eq),
    ("lt", operator.lt),
    ("gt", operator.gt),
)

_VFP_COMPARISONS = (
    ("ge", operator.ge),
    ("gt", operator.gt),
    ("lt", operator.lt),
    ("le", operator.le),
    ("ne", operator.ne),
    ("eq", operator.eq),
)


def _float_specs(arm: bool, mips: bool) -> Iterator[CaseSpec]:
    f64_pair, f32_pair, large_pair = _PAIR(MY_F64, MY_F64), _PAIR(MY_F32, MY_F32), _PAIR(LARGE_F32, LARGE_F32)

    yield CaseSpec("builtins::float::add::__adddf3(a, b)", f64_pair, _O_F64, _float_arith(F64, operator.add))
    yield CaseSpec("builtins::float::add::__addsf3(a, b)", f32_pair, _O_F32, _float_arith(F32, operator.add))
    if arm:
        yield CaseSpec("builtins::float::add::__adddf3vfp(a, b)", f64_pair, _O_F64, _float_arith(F64, operator.add))
        yield CaseSpec("builtins::float::add::__addsf3vfp(a, b)", large_pair, _O_F32, _float_arith(F32, operator.add))

    yield CaseSpec("builtins::float::cmp::__gedf2(a, b)", f64_pair, _O_I32, _three_way)
    yield CaseSpec("builtins::float::cmp::__gesf2(a, b)", f32_pair, _O_I32, _three_way)
    yield CaseSpec("builtins::float::cmp::__ledf2(a, b)", f64_pair, _O_I32, _three_way)
    yield CaseSpec("builtins::float::cmp::__lesf2(a, b)", f32_pair, _O_I32, _three_way)
    yield CaseSpec("builtins::float::cmp::__unordsf2(a, b)", f32_pair, _O_I32, _unordered)
    yield CaseSpec("builtins::float::cmp::__unorddf2(a, b)", f64_pair, _O_I32, _unordered)
    if arm:
        for suffix, op in _COMPARISONS:
            yield CaseSpec(f"builtins::float::cmp::__aeabi_fcmp{suffix}(a, b)", f32_pair, _O_I32, _predicate(op))
        for suffix, op in _COMPARISONS:
            yield CaseSpec(f"builtins::float::cmp::__aeabi_dcmp{suffix}(a, b)", f64_pair, _O_I32, _predicate(op))
        for suffix, op in _VFP_COMPARISONS:
            yield CaseSpec(f"builtins::float::cmp::__{suffix}sf2vfp(a, b)", large_pair, _O_I32, _predicate(op))
            yield CaseSpec(f"builtins::float::cmp::__{suffix}df2vfp(a, b)", f64_pair, _O_I32, _predicate(op))

    yield CaseSpec("builtins::float::extend::__extendsfdf2(a)", MY_F32, _O_F64, _extend)
    if arm:
        yield CaseSpec("builtins::float::extend::__extendsfdf2vfp(a)", LARGE_F32, _O_F64, _extend)

    conversions = (
        ("__fixdfdi", MY_F64, I64),
        ("__fixdfsi", MY_F64, I32),
        ("__fixsfdi", MY_F32, I64),
        ("__fixsfsi", MY_F32, I32),
        ("__fixsfti", MY_F32, I128),
        ("__fixdfti", MY_F64, I128),
        ("__fixunsdfdi", MY_F64, U64),
        ("__fixunsdfsi", MY_F64, U32),
        ("__fixunssfdi", MY_F32, U64),
        ("__fixunssfsi", MY_F32, U32),
        ("__fixunssfti", MY_F32, U128),
        ("__fixunsdfti", MY_F64, U128),
    )
    for name, kind, int_type in conversions:
        yield CaseSpec(f"builtins::float::conv::{name}(a)", kind, _int_out(int_type), _to_int(int_type))

    yield CaseSpec("builtins::float::conv::__floatdidf(a)", MY_I64, _O_F64, _to_float(F64))
    yield CaseSpec("builtins::float::conv::__floatsidf(a)", MY_I32, _O_F64, _to_float(F64))
    yield CaseSpec("builtins::float::conv::__floatsisf(a)", MY_I32, _O_F32, _to_float(F32))
    yield CaseSpec("builtins::float::conv::__floatundidf(a)", MY_U64, _O_F64, _to_float(F64))
    yield CaseSpec("builtins::float::conv::__floatunsidf(a)", MY_U32, _O_F64, _to_float(F64))
    yield CaseSpec("builtins::float::conv::__floatunsisf(a)", MY_U32, _O_F32, _to_float(F32))
    yield CaseSpec("builtins::float::conv::__floatuntisf(a)", MY_U128, _O_F32, _to_float(F32, fallible=True))
    if not mips:
        yield CaseSpec("builtins::float::conv::__floattisf(a)", MY_I128, _O_F32, _to_float(F32))
        yield CaseSpec("builtins::float::conv::__floattidf(a)", MY_I128, _O_F64, _to_float(F64))
        yield CaseSpec("builtins::float::conv::__floatuntidf(a)", MY_U128, _O_F64, _to_float(F64))

    yield CaseSpec("builtins::float::pow::__powidf2(a, b)", _PAIR(MY_F64, MY_I32), _O_F64, _powi(F64))
    yield CaseSpec("builtins::float::pow::__powisf2(a, b)", _PAIR(MY_F32, MY_I32), _O_F32, _powi(F32))

    yield CaseSpec("builtins::float::sub::__subdf3(a, b)", f64_pair, _O_F64, _float_arith(F64, operator.sub))
    yield CaseSpec("builtins::float::sub::__subsf3(a, b)", f32_pair, _O_F32, _float_arith(F32, operator.sub))
    if arm:
        yield CaseSpec("builtins::float::sub::__subdf3vfp(a, b)", f64_pair, _O_F64, _float_arith(F64, operator.sub))
        yield CaseSpec("builtins::float::sub::__subsf3vfp(a, b)", large_pair, _O_F32, _float_arith(F32, operator.sub))

    yield CaseSpec("builtins::float::mul::__muldf3(a, b)", f64_pair, _O_F64, _float_arith(F64, operator.mul))
    yield CaseSpec("builtins::float::mul::__mulsf3(a, b)", large_pair, _O_F32, _float_arith(F32, operator.mul))
    if arm:
        yield CaseSpec("builtins::float::mul::__muldf3vfp(a, b)", f64_pair, _O_F64, _float_arith(F64, operator.mul))
        yield CaseSpec("builtins::float::mul::__mulsf3vfp(a, b)", large_pair, _O_F32, _float_arith(F32, operator.mul))

    yield CaseSpec("builtins::float::div::__divdf3(a, b)", f64_pair, _O_F64, _float_div(F64, _F64_SMALLEST))
    yield CaseSpec("builtins::float::div::__divsf3(a, b)", large_pair, _O_F32, _float_div(F32, _F32_SMALLEST))
    if arm:
        yield CaseSpec("builtins::float::div::__divdf3vfp(a, b)", f64_pair, _O_F64, _float_div(F64, _F64_SMALLEST))
        yield CaseSpec("builtins::float::div::__divsf3vfp(a, b)", large_pair, _O_F32, _float_div(F32, _F32_SMALLEST))


def _int_specs() -> Iterator[CaseSpec]:
    u128_pair, i128_pair = _PAIR(MY_U128, MY_U128), _PAIR(MY_I128, MY_I128)
    i64_pair, i32_pair = _PAIR(MY_I64, MY_I64), _PAIR(MY_I32, MY_I32)
    u64_pair, u32_pair = _PAIR(MY_U64, MY_U64), _PAIR(MY_U32, MY_U32)
    o_u128, o_i128 = _int_out(U128), _int_out(I128)
    o_i64, o_u64, o_u32 = _int_out(I64), _int_out(U64), _int_out(U32)

    yield CaseSpec("builtins::int::addsub::__rust_u128_add(a, b)", u128_pair, o_u128, _wrapping(U128, operator.add))
    yield CaseSpec("builtins::int::addsub::__rust_i128_add(a, b)", i128_pair, o_i128, _wrapping(I128, operator.add))
    yield CaseSpec("builtins::int::addsub::__rust_u128_addo(a, b)", u128_pair, _pair_out(o_u128, _O_BOOL), _overflowing(U128, operator.add))
    yield CaseSpec("builtins::int::addsub::__rust_i128_addo(a, b)", i128_pair, _pair_out(o_i128, _O_BOOL), _overflowing(I128, operator.add))
    yield CaseSpec("builtins::int::addsub::__rust_u128_sub(a, b)", u128_pair, o_u128, _wrapping(U128, operator.sub))
    yield CaseSpec("builtins::int::addsub::__rust_i128_sub(a, b)", i128_pair, o_i128, _wrapping(I128, operator.sub))
    yield CaseSpec("builtins::int::addsub::__rust_u128_subo(a, b)", u128_pair, _pair_out(o_u128, _O_BOOL), _overflowing(U128, operator.sub))
    yield CaseSpec("builtins::int::addsub::__rust_i128_subo(a, b)", i128_pair, _pair_out(o_i128, _O_BOOL), _overflowing(I128, operator.sub))

    yield CaseSpec("builtins::int::mul::__muldi3(a, b)", u64_pair, o_u64, _wrapping(U64, operator.mul))
    yield CaseSpec(_MULO_BLOCK.format(name="__mulodi4"), i64_pair, _pair_out(o_i64, _O_BOOL), _overflowing(I64, operator.mul))
    yield CaseSpec(_MULO_BLOCK.format(name="__mulosi4"), i32_pair, _pair_out(_O_I32, _O_BOOL), _overflowing(I32, operator.mul))
    yield CaseSpec("builtins::int::mul::__multi3(a, b)", i128_pair, o_i128, _wrapping(I128, operator.mul))
    yield CaseSpec(_MULO_BLOCK.format(name="__muloti4"), i128_pair, _pair_out(o_i128, _O_BOOL), _overflowing(I128, operator.mul))

    yield CaseSpec("builtins::int::sdiv::__divdi3(a, b)", i64_pair, o_i64, _division(I64))
    yield CaseSpec(_SDIVMOD_BLOCK.format(name="__divmoddi4"), i64_pair, _pair_out(o_i64, o_i64), _division(I64, remainder=True))
    yield CaseSpec(_SDIVMOD_BLOCK.format(name="__divmodsi4"), i32_pair, _pair_out(_O_I32, _O_I32), _division(I32, remainder=True))
    yield CaseSpec("builtins::int::sdiv::__divsi3(a, b)", i32_pair, _O_I32, _division(I32))
    yield CaseSpec("builtins::int::sdiv::__modsi3(a, b)", i32_pair, _O_I32, _division(I32, quotient=False, remainder=True))
    yield CaseSpec("builtins::int::sdiv::__moddi3(a, b)", i64_pair, o_i64, _division(I64, quotient=False, remainder=True))
    yield CaseSpec("builtins::int::sdiv::__divti3(a, b)", i128_pair, o_i128, _division(I128))
    yield CaseSpec("builtins::int::sdiv::__modti3(a, b)", i128_pair, o_i128, _division(I128, quotient=False, remainder=True))

    yield CaseSpec("builtins::int::shift::__ashldi3(a, b % 64)", _PAIR(MY_U64, MY_U32), o_u64, _shift(U64, left=True))
    yield CaseSpec("builtins::int::shift::__ashlti3(a, b % 128)", _PAIR(MY_U128, MY_U32), o_u128, _shift(U128, left=True))
    yield CaseSpec("builtins::int::shift::__ashrdi3(a, b % 64)", _PAIR(MY_I64, MY_U32), o_i64, _shift(I64, left=False))
    yield CaseSpec("builtins::int::shift::__ashrti3(a, b % 128)", _PAIR(MY_I128, MY_U32), o_i128, _shift(I128, left=False))
    yield CaseSpec("builtins::int::shift::__lshrdi3(a, b % 64)", _PAIR(MY_U64, MY_U32), o_u64, _shift(U64, left=False))
    yield CaseSpec("builtins::int::shift::__lshrti3(a, b % 128)", _PAIR(MY_U128, MY_U32), o_u128, _shift(U128, left=False))

    yield CaseSpec("builtins::int::udiv::__udivdi3(a, b)", u64_pair, o_u64, _division(U64))
    yield CaseSpec(_UDIVMOD_BLOCK.format(name="__udivmoddi4"), u64_pair, _pair_out(o_u64, o_u64), _division(U64, remainder=True))
    yield CaseSpec(_UDIVMOD_BLOCK.format(name="__udivmodsi4"), u32_pair, _pair_out(o_u32, o_u32), _division(U32, remainder=True))
    yield CaseSpec("builtins::int::udiv::__udivsi3(a, b)", u32_pair, o_u32, _division(U32))
    yield CaseSpec("builtins::int::udiv::__umodsi3(a, b)", u32_pair, o_u32, _division(U32, quotient=False, remainder=True))
    yield CaseSpec("builtins::int::udiv::__umoddi3(a, b)", u64_pair, o_u64, _division(U64, quotient=False, remainder=True))
    yield CaseSpec("builtins::int::udiv::__udivti3(a, b)", u128_pair, o_u128, _division(U128))
    yield CaseSpec("builtins::int::udiv::__umodti3(a, b)", u128_pair, o_u128, _division(U128, quotient=False, remainder=True))
    yield CaseSpec(_UDIVMOD_BLOCK.format(name="__udivmodti4"), u128_pair, _pair_out(o_u128, o_u128), _division(U128, remainder=True))


def catalogue(target: str) -> list[CaseSpec]:
    """Every intrinsic checked for ``target``, in generation order."""
    arm = "arm" in target or "thumb" in target
    mips = "mips" in target
    return [*_float_specs(arm, mips), *_int_specs()]


# Generation and rendering -------------------------------------------------


def generate_cases(spec: CaseSpec, rng: random.Random, count: int = NTESTS) -> list[tuple[Any, Any]]:
    """Draw ``count`` distinct inputs that have a reference result, with those results."""
    if count < 0:
        raise ValueError(f"negative case count: {count}")
    cases: dict[Any, tuple[Any, Any]] = {}
    while len(cases) < count:
        value = spec.inputs.generate(rng)
        key = spec.inputs.key(value)
        if key in cases:
            continue
        expected = spec.reference(value)
        if expected is None:
            continue
        cases[key] = (value, expected)
    return list(cases.values())


def _lets(kind: InputKind, container: str, letters: Iterator[str]) -> str:
    if kind.parts:
        return "".join(_lets(part, f"{container}.{i}", letters) for i, part in enumerate(kind.parts))
    letter = next(letters)
    if isinstance(kind.scalar, FloatFormat):
        return f"let {letter} = {kind.scalar.name}::from_bits({container});\n"
    return f"let {letter} = {container};\n"


def render_cases(spec: CaseSpec, cases: Sequence[tuple[Any, Any]]) -> str:
    """The test module that checks ``spec.call`` against every case."""
    letters = iter("abcdefghijklmnopqrstuvwxyz")
    rows = "".join(
        f"    ({spec.inputs.render(value)}, {spec.output.render(expected)}),\n"
        for value, expected in cases
    )
    body = (
        "\n"
        "        for &(inputs, output) in TESTS.iter() {{\n"
        "            {lets}\n"
        "            assert_eq!({expr}, {call}, \"inputs {{:?}}\", inputs)\n"
        "        }}\n"
        "    "
    ).format(
        lets=_lets(spec.inputs, "inputs", letters),
        expr=spec.output.expr("output"),
        call=spec.call,
    )
    return (
        f"mod {spec.test_name()} {{\nuse super::*;\n"
        "#[test]\n"
        "fn test() {\n"
        f"static TESTS: [({spec.inputs.type_name()}, {spec.output.type_name}); {len(cases)}] = [\n"
        f"{rows}"
        "];\n"
        f"{body}"
        "\n}\n"
        "\n}\n"
    )


def write_all(out_dir: str | os.PathLike[str], target: str, rng: random.Random, count: int = NTESTS) -> Path:
    """Write the test modules for every intrinsic of ``target`` into a fresh output file."""
    path = Path(out_dir) / OUTPUT_FILE
    path.unlink(missing_ok=True)
    for spec in catalogue(target):
        cases = generate_cases(spec, rng, count)
        with path.open("a", encoding="utf-8") as handle:
            handle.write(render_cases(spec, cases))
    return path


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Generate randomised intrinsic test tables.")
    parser.add_argument("--out-dir", default=os.environ.get("OUT_DIR"), help="output directory (default: $OUT_DIR)")
    parser.add_argument("--target", default=os.environ.get("TARGET"), help="target triple (default: $TARGET)")
    parser.add_argument("--count", type=int, default=NTESTS, help="cases per intrinsic")
    parser.add_argument("--seed", type=int, default=None, help="random seed")
    args = parser.parse_args(argv)
    if not args.out_dir:
        parser.error("an output directory is required (--out-dir or OUT_DIR)")
    if not args.target:
        parser.error("a target is required (--target or TARGET)")
    if args.count < 0:
        parser.error("--count must not be negative")
    write_all(args.out_dir, args.target, random.Random(args.seed), args.count)
    return 0