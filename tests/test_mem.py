import pytest

from softint.mem import memcmp, memcpy, memmove, memset


def test_memcpy_prefixes():
    src = bytes([0xDE, 0xAD, 0xBE, 0xEF])
    for n in range(4):
        dest = bytearray(4)
        memcpy(dest, src, n)
        assert dest[:n] == src[:n]
        assert dest[n:] == bytearray(4 - n)


def test_memcpy4_prefixes():
    src = bytes([0xDE, 0xAD, 0xBE, 0xEF, 0xBA, 0xAD, 0xF0, 0x0D])
    for n in range(8):
        dest = bytearray(8)
        result = memcpy(dest, src, n)
        assert result is dest
        assert dest[:n] == src[:n]


@pytest.mark.parametrize("n", range(9))
def test_memset4_truncates_fill_value(n):
    zeros = memset(bytearray(8), 0xDEADBEEF, n)
    assert list(zeros) == [0xEF] * n + [0] * (8 - n)
    ones = memset(bytearray([1] * 8), 0xDEADBEEF, n)
    assert list(ones) == [0xEF] * n + [1] * (8 - n)


def test_memclr_after_memset():
    for n in range(9):
        xs = bytearray(8)
        memset(xs, 0xFF, n)
        memset(xs, 0, n)
        assert all(x == 0 for x in xs[:n])


def test_memmove_overlapping_forward_and_backward():
    assert memmove(bytearray(b"abcdef"), 2, 0, 4) == bytearray(b"ababcd")
    assert memmove(bytearray(b"abcdef"), 0, 2, 4) == bytearray(b"cdefef")


def test_memcmp():
    assert memcmp(b"abc", b"abd", 3) == -1
    assert memcmp(b"abc", b"abd", 2) == 0
    assert memcmp(b"\xff", b"\x00", 1) == 255


def test_bounds_are_checked():
    with pytest.raises(IndexError):
        memcpy(bytearray(2), b"abc", 3)
    with pytest.raises(IndexError):
        memmove(bytearray(4), 2, 0, 3)
    with pytest.raises(ValueError):
        memset(bytearray(4), 0, -1)