"""Byte-buffer copy, move, fill and compare routines."""

from __future__ import annotations

__all__ = ["memcpy", "memmove", "memset", "memcmp"]


def _check_count(n: int, *lengths: int) -> None:
    if n < 0:
        raise ValueError(f"negative byte count: {n}")
    if any(n > length for length in lengths):
        raise IndexError(f"byte count {n} exceeds buffer length")


def memcpy(dest: bytearray, src: bytes, n: int) -> bytearray:
    """Copy the first ``n`` bytes of ``src`` into ``dest`` and return ``dest``."""
    _check_count(n, len(dest), len(src))
    dest[:n] = bytes(src[:n])
    return dest


def memmove(buffer: bytearray, dest: int, src: int, n: int) -> bytearray:
    """Copy ``n`` bytes at offset ``src`` to offset ``dest`` within ``buffer``.

    The regions may overlap.
    """
    if dest < 0 or src < 0:
        raise IndexError("negative offset")
    _check_count(n, len(buffer) - dest, len(buffer) - src)
    buffer[dest : dest + n] = bytes(buffer[src : src + n])
    return buffer


def memset(s: bytearray, c: int, n: int) -> bytearray:
    """Fill the first ``n`` bytes of ``s`` with the low byte of ``c``."""
    _check_count(n, len(s))
    s[:n] = bytes([c & 0xFF]) * n
    return s


def memcmp(s1: bytes, s2: bytes, n: int) -> int:
    """Compare ``n`` bytes; the difference of the first unequal pair, or 0."""
    _check_count(n, len(s1), len(s2))
    return next((a - b for a, b in zip(s1[:n], s2[:n]) if a != b), 0)