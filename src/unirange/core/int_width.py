"""Helpers for fixed-width two's-complement integer arithmetic."""


def int_limits(bits: int, *, signed: bool) -> tuple[int, int]:
    if bits <= 0:
        raise ValueError(f"bits must be >= 1, got {bits}")
    if signed:
        return -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    return 0, (1 << bits) - 1


def wrap_int(value: int, bits: int, *, signed: bool) -> int:
    """Wrap an integer into the range of a `bits`-wide integer."""
    mask = (1 << bits) - 1
    if not signed:
        return value & mask
    half = 1 << (bits - 1)
    return ((value + half) & mask) - half


def step_up(value: int, bits: int | None, *, signed: bool) -> int:
    if bits is None:
        return value + 1
    return wrap_int(value + 1, bits, signed=signed)


def step_down(value: int, bits: int | None, *, signed: bool) -> int:
    if bits is None:
        return value - 1
    return wrap_int(value - 1, bits, signed=signed)
