"""Simulation of the stack-probe routines that touch every page of a new frame."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "PAGE_SIZE",
    "ProbeResult",
    "rust_probestack",
    "chkstk_ms",
    "chkstk",
    "alloca",
]

PAGE_SIZE = 0x1000


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of a probe routine.

    ``probed`` lists the addresses read, in order; ``stack_pointer`` and
    ``frame_size`` are the stack pointer and size register on return.
    """

    probed: tuple[int, ...]
    stack_pointer: int
    frame_size: int


def _word_mask(word_size: int) -> int:
    if word_size not in (4, 8):
        raise ValueError(f"unsupported word size: {word_size}")
    return (1 << (8 * word_size)) - 1


def _check(stack_pointer: int, frame_size: int, word_size: int) -> int:
    mask = _word_mask(word_size)
    if not 0 <= stack_pointer <= mask:
        raise ValueError(f"stack pointer out of range: {stack_pointer}")
    if not 0 <= frame_size <= mask:
        raise ValueError(f"frame size out of range: {frame_size}")
    return mask


def _walk(
    top: int, size: int, enter_at: int, offset: int, mask: int
) -> tuple[list[int], int]:
    """Step down from ``top`` a page at a time, then by the remainder, probing each stop."""
    probes = []
    address = top
    remaining = size
    if remaining >= enter_at:
        while True:
            address = (address - PAGE_SIZE) & mask
            probes.append((address + offset) & mask)
            remaining -= PAGE_SIZE
            if remaining <= PAGE_SIZE:
                break
    address = (address - remaining) & mask
    probes.append((address + offset) & mask)
    return probes, address


def rust_probestack(stack_pointer: int, frame_size: int, word_size: int) -> ProbeResult:
    """Probe the pages of a frame of ``frame_size`` bytes below the caller's stack.

    The return address and saved registers sit below ``stack_pointer`` on
    entry; each probe reads 8 bytes above the working stack pointer. The
    stack pointer and frame size are left as they were.
    """
    mask = _check(stack_pointer, frame_size, word_size)
    saved_words = 2 if word_size == 8 else 3
    entry = (stack_pointer - saved_words * word_size) & mask
    probes, _ = _walk(entry, frame_size, PAGE_SIZE + 1, 8, mask)
    return ProbeResult(tuple(probes), stack_pointer, frame_size)


def chkstk_ms(stack_pointer: int, frame_size: int, word_size: int) -> ProbeResult:
    """Probe every page from the caller's stack pointer down by ``frame_size``.

    Registers and the stack pointer are restored on return.
    """
    mask = _check(stack_pointer, frame_size, word_size)
    probes, _ = _walk(stack_pointer, frame_size, PAGE_SIZE, 0, mask)
    return ProbeResult(tuple(probes), stack_pointer, frame_size)


def chkstk(stack_pointer: int, frame_size: int, word_size: int) -> ProbeResult:
    """Probe like :func:`chkstk_ms`, then leave the stack lowered by ``frame_size``."""
    mask = _check(stack_pointer, frame_size, word_size)
    probes, bottom = _walk(stack_pointer, frame_size, PAGE_SIZE, 0, mask)
    return ProbeResult(tuple(probes), bottom, frame_size)


def alloca(stack_pointer: int, frame_size: int, word_size: int) -> ProbeResult:
    """Allocate ``frame_size`` bytes on the stack by way of :func:`chkstk`."""
    return chkstk(stack_pointer, frame_size, word_size)