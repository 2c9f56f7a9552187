"""Byte units and rounding of device capacities to readable sizes."""

from __future__ import annotations

KIB = 1024
MIB = 1024 * KIB
GIB = 1024 * MIB
TIB = 1024 * GIB

_READABLE_UNITS = (GIB, MIB)


def _truncating_div(value: int, unit: int) -> int:
    quotient = abs(value) // unit
    return -quotient if value < 0 else quotient


def round_down_capacity_pretty(capacity_bytes: int) -> int:
    """Round down to whole GiB or MiB when at least 10 of that unit remain.

    GiB is tried first, then MiB; a capacity below 10 MiB is returned unchanged.
    """
    for unit in _READABLE_UNITS:
        size = _truncating_div(capacity_bytes, unit)
        if size >= 10:
            return size * unit
    return capacity_bytes