"""Software models of fixed-width integer intrinsics, byte-buffer routines, stack probes and test-table generation."""

__version__ = "0.1.0"

__all__ = [
    "intbase",
    "addsub",
    "mul",
    "sdiv",
    "shift",
    "mem",
    "udiv",
    "probe",
    "vectors",
    "casegen",
]