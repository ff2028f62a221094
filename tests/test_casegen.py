import math
import random

import pytest
from hypothesis import given
from hypothesis import strategies as st

from softint.casegen import (
    CaseSpec,
    catalogue,
    generate_cases,
    main,
    render_cases,
    write_all,
)
from softint.intbase import I64, U64, U128
from softint.shift import ashldi3
from softint.vectors import F64

TARGET = "x86_64-unknown-linux-gnu"
ARM = "thumbv7em-none-eabi"
MIPS = "mips-unknown-linux-gnu"


def _spec(name: str, target: str = TARGET) -> CaseSpec:
    matches = [s for s in catalogue(target) if s.test_name() == name]
    assert len(matches) == 1
    return matches[0]


def _names(target: str) -> list[str]:
    return [s.test_name() for s in catalogue(target)]


def test_test_name_of_simple_call():
    spec = _spec("__adddf3")
    assert spec.call == "builtins::float::add::__adddf3(a, b)"


def test_test_name_of_block_call():
    spec = _spec("__mulodi4")
    assert spec.call.startswith("{")
    assert "__mulodi4(a, b, &mut o)" in spec.call


def test_arm_only_intrinsics():
    plain = _names(TARGET)
    arm = _names(ARM)
    assert not any(n.endswith("vfp") or n.startswith("__aeabi_") for n in plain)
    assert "__addsf3vfp" in arm
    assert "__aeabi_dcmpgt" in arm
    assert set(plain) < set(arm)


def test_mips_excludes_wide_float_conversions():
    names = _names(MIPS)
    for excluded in ("__floattisf", "__floattidf", "__floatuntidf"):
        assert excluded not in names
        assert excluded in _names(TARGET)
    assert "__floatuntisf" in names


def test_names_unique():
    names = _names(ARM)
    assert len(names) == len(set(names))


@pytest.mark.parametrize(
    "name", ["__adddf3", "__mulsf3", "__divsf3", "__fixsfsi", "__powidf2", "__muloti4", "__udivmodti4", "__ashrti3"]
)
def test_generate_cases_distinct_and_checked(name):
    spec = _spec(name)
    cases = generate_cases(spec, random.Random(7), 20)
    assert len(cases) == 20
    keys = {spec.inputs.key(value) for value, _ in cases}
    assert len(keys) == 20
    for value, expected in cases:
        assert spec.reference(value) == expected


def test_generate_cases_deterministic():
    spec = _spec("__subdf3")
    first = render_cases(spec, generate_cases(spec, random.Random(3), 10))
    second = render_cases(spec, generate_cases(spec, random.Random(3), 10))
    assert first == second


def test_generate_cases_negative_count():
    with pytest.raises(ValueError):
        generate_cases(_spec("__adddf3"), random.Random(0), -1)


@given(st.integers(I64.min_value, I64.max_value), st.integers(I64.min_value, I64.max_value))
def test_divmoddi4_reference_invariant(a, b):
    result = _spec("__divmoddi4").reference((a, b))
    if b == 0 or (a == I64.min_value and b == -1):
        assert result is None
    else:
        q, r = result
        assert q * b + r == a
        assert abs(r) < abs(b)
        assert r == 0 or (r < 0) == (a < 0)


def test_udivmodti4_zero_divisor_skipped():
    assert _spec("__udivmodti4").reference((5, 0)) is None


def test_fix_conversion_references():
    fix = _spec("__fixdfsi").reference
    unsigned = _spec("__fixunsdfsi").reference
    assert fix(math.nan) is None
    assert fix(math.inf) is None
    assert fix(2.75) == 2
    assert unsigned(-1.5) is None


def test_float_conversion_references():
    untisf = _spec("__floatuntisf").reference
    assert untisf(U128.max_value) is None
    assert untisf(1 << 64) == float(1 << 64)
    assert _spec("__floatundidf").reference(U64.max_value) == 2.0 ** 64


def test_mulo_reference_flags():
    ref = _spec("__mulodi4").reference
    assert ref((I64.max_value, 2))[1] is True
    assert ref((3, 4)) == (12, False)


def test_div_reference_skips_zero_and_tiny():
    ref = _spec("__divdf3").reference
    assert ref((1.0, 0.0)) is None
    assert ref((F64.from_bits(1), 2.0)) is None


def test_powi_reference_identities():
    ref = _spec("__powidf2").reference
    assert ref((1.75, 1)) == 1.75
    assert ref((1.75, 0)) == 1.0
    assert ref((math.nan, 2)) is None


def test_shift_reference_wraps_amount():
    ref = _spec("__ashldi3").reference
    assert ref((U64.max_value, 65)) == ashldi3(U64.max_value, 1)


def test_render_bool_output():
    spec = _spec("__rust_u128_addo")
    text = render_cases(spec, [((U128.max_value, 1), (0, True))])
    assert f"    (({U128.max_value}, 1), (0, true)),\n" in text
    assert "static TESTS: [((u128, u128), (u128, bool)); 1]" in text


def test_write_all_replaces_file(tmp_path):
    path = write_all(tmp_path, TARGET, random.Random(1), 2)
    assert path == tmp_path / "generated.rs"
    expected = len(catalogue(TARGET))
    assert path.read_text().count("#[test]") == expected
    write_all(tmp_path, TARGET, random.Random(2), 2)
    assert path.read_text().count("#[test]") == expected


def test_main_writes_deterministic_output(tmp_path):
    first_dir = tmp_path / "one"
    second_dir = tmp_path / "two"
    first_dir.mkdir()
    second_dir.mkdir()
    args = ["--target", MIPS, "--count", "1", "--seed", "5"]
    assert main(["--out-dir", str(first_dir), *args]) == 0
    assert main(["--out-dir", str(second_dir), *args]) == 0
    first = (first_dir / "generated.rs").read_text()
    assert first == (second_dir / "generated.rs").read_text()
    assert "mod __floattisf" not in first


def test_main_requires_output_directory(monkeypatch):
    monkeypatch.delenv("OUT_DIR", raising=False)
    monkeypatch.delenv("TARGET", raising=False)
    with pytest.raises(SystemExit):
        main(["--target", TARGET])