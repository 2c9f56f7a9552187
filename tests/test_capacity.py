import pytest

from localstorage.capacity import GIB, KIB, MIB, TIB, round_down_capacity_pretty


@pytest.mark.parametrize(
    ("capacity", "expected"),
    [
        (100 * KIB, 100 * KIB),
        (10 * MIB, 10 * MIB),
        (100 * MIB, 100 * MIB),
        (10 * GIB, 10 * GIB),
        (10 * TIB, 10 * TIB),
        (9 * GIB + 999 * MIB, 9 * GIB + 999 * MIB),
        (10 * GIB + 5, 10 * GIB),
        (10 * MIB + 5, 10 * MIB),
        (10000 * MIB - 1, 9999 * MIB),
        (13 * GIB - 1, 12 * GIB),
        (63 * MIB - 10, 62 * MIB),
        (12345, 12345),
        (10000 * GIB - 1, 9999 * GIB),
        (3 * TIB + 2 * GIB + 1 * MIB, 3 * TIB + 2 * GIB),
    ],
)
def test_round_down_capacity_pretty(capacity, expected):
    assert round_down_capacity_pretty(capacity) == expected


def test_small_values_are_left_alone():
    assert round_down_capacity_pretty(0) == 0
    assert round_down_capacity_pretty(9 * MIB + 1) == 9 * MIB + 1