# softint

`softint` models the low-level integer routines that compilers call when the
hardware cannot do an operation directly: wide addition and subtraction with
overflow detection, multiplication, signed and unsigned division and
remainder, and shifts on 32-, 64- and 128-bit integers. Each routine works bit
for bit like its fixed-width counterpart, wrapping where the hardware would
wrap, so it can serve as a reference when checking or emulating such code.

It also has byte-buffer routines (`memcpy`, `memmove`, `memset`, `memcmp`), a
model of the stack-probe routines that touch every page of a large stack
frame, and a generator of random test tables.

## Installation

```
pip install softint
```

For running the test suite:

```
pip install "softint[test]"
pytest
```

## Integer arithmetic

Values are plain Python `int`s. Functions named after a fixed width take and
return values in that width's range: `si` is 32 bits, `di` 64 bits and `ti`
128 bits. An argument outside its type's range raises `ValueError`.

```python
from softint.sdiv import divsi3, modsi3
from softint.udiv import udivdi3, umoddi3
from softint.addsub import u128_addo
from softint.shift import ashrdi3

divsi3(-7, 2)        # -3, truncating toward zero
modsi3(-7, 2)        # -1, the sign follows the dividend
udivdi3(100, 7)      # 14
umoddi3(100, 7)      # 2

value, overflowed = u128_addo(2**128 - 1, 1)   # (0, True)
ashrdi3(-16, 2)      # -4, arithmetic shift
```

The modules:

- `softint.addsub`: `u128_add`, `i128_add`, `u128_sub`, `i128_sub` (wrapping)
  and `u128_addo`, `i128_addo`, `u128_subo`, `i128_subo` (result and overflow
  flag).
- `softint.mul`: `muldi3` (u64), `multi3` (i128), `mulsi3` (u32 by shift and
  add), and `mulosi4`, `mulodi4`, `muloti4`, `i128_mulo`, `u128_mulo`, which
  return the wrapped product and an overflow flag. `u128_mulo` raises
  `IntrinsicAbort` when the second operand is zero.
- `softint.sdiv`: `divsi3`, `divdi3`, `divti3`, `modsi3`, `moddi3`, `modti3`,
  and `divmodsi4`, `divmoddi4` returning `(quotient, remainder)`.
- `softint.udiv`: `udivsi3`, `umodsi3`, `udivmodsi4`, `udivdi3`, `umoddi3`,
  `udivmoddi4`, `udivti3`, `umodti3`, `udivmodti4`.
- `softint.shift`: `ashldi3`, `ashlti3`, `ashrdi3`, `ashrti3`, `lshrdi3`,
  `lshrti3` (the shift count must be below the width), and `i128_shlo`,
  `u128_shlo`, `i128_shro`, `u128_shro`, which shift by the count modulo 128
  and flag a count of 128 or more.

Routines that produce two results return them together as a tuple.

Division or remainder by zero raises `softint.intbase.IntrinsicAbort`.

The building blocks live in `softint.intbase`. `IntType` describes a
fixed-width integer type (`wrap`, `to_unsigned`, `from_unsigned`,
`extract_sign`, `leading_zeros`, `low`, `high`, `from_parts`, `checked_div`,
`checked_rem`), with ready-made instances `I32`, `U32`, `I64`, `U64`, `I128`
and `U128`; `checked_div` and `checked_rem` raise `IntrinsicAbort` on a zero
divisor and on signed `MIN / -1`. `clzsi2(x, width)` counts leading zeros of a
16-, 32- or 64-bit value, `wide_mul`, `wide_shift_left` and
`wide_shift_right_with_sticky` work on 32- or 64-bit double-word pairs, and
`to_u64x2` splits a 128-bit value into a `U64x2` of two 64-bit lanes.

## Memory routines

```python
from softint.mem import memcpy, memset, memcmp, memmove

buf = bytearray(8)
memset(buf, 0xDEADBEEF, 3)   # only the low byte is stored
bytes(buf)                   # b'\xef\xef\xef\x00\x00\x00\x00\x00'

dest = bytearray(4)
memcpy(dest, b"\xde\xad\xbe\xef", 2)
memcmp(dest, b"\xde\xad\x00\x00", 4)   # 0

memmove(buf, 1, 0, 3)        # copy 3 bytes from offset 0 to offset 1
```

`memmove(buffer, dest, src, n)` copies between two regions of one buffer and
handles overlap. A count larger than a buffer raises `IndexError`; a negative
count raises `ValueError`.

## Stack probes

`softint.probe` models the routines that walk a new stack frame one page
(`PAGE_SIZE`, 4096 bytes) at a time: `rust_probestack`, `chkstk_ms`, `chkstk`
and `alloca`. Each takes a stack pointer, a frame size and a word size of 4 or
8 and returns a `ProbeResult` with the addresses probed, in order, and the
stack pointer and frame size on return. `chkstk` and `alloca` leave the stack
pointer lowered by the frame size; the others leave it unchanged.

## Test vectors

`softint.vectors` produces random inputs. `FloatFormat` (with `F32` and `F64`)
assembles and decodes IEEE 754 bit patterns (`make`, `to_bits`, `from_bits`,
`round`). `gen_f32`, `gen_f64`, `gen_large_f32`, `gen_large_f64` and
`gen_int` draw values that favour edge cases from a `random.Random`.
`InputKind` describes an argument's kind, scalar or tuple, and can `generate`,
`render` and `key` values of it.

`softint.casegen` pairs every checked routine with a reference result computed
in Python (`catalogue(target)` returns the `CaseSpec`s for a target name; names
containing `arm` or `thumb` add extra cases, names containing `mips` drop the
128-bit integer-to-float ones). `generate_cases` draws distinct inputs that have
a reference result, `render_cases` writes them as a test module, and
`write_all` writes all modules for a target into `generated.rs` in a
directory.

The same generation is available from the command line:

```
softint-casegen --out-dir build --target x86_64-unknown-linux-gnu --seed 1
softint-casegen --help
```

Options: `--out-dir` (default `$OUT_DIR`), `--target` (default `$TARGET`),
`--count` (cases per routine, default 1000) and `--seed`.

## What is not included

The catalogue covers floating-point addition, subtraction, multiplication,
division, comparison, conversion and power routines, but `softint` has no
floating-point routines of its own: for those cases only the test tables and
their Python reference results are produced.