from __future__ import annotations

import pytest

from lbank_trader.core.utils.number_format import (
    get_precision,
    normalize_number_string,
    round_to_decimals,
    to_float,
)


@pytest.mark.parametrize(
    "value,expected",
    [
        ("5.883e-05", "0.00005883"),
        (1e-06, "0.000001"),
        ("123.4500", "123.45"),
        (10.0, "10"),
        (None, "0"),
        ("", "0"),
        ("not-a-number", "0"),
    ],
)
def test_normalize_number_string(value: object, expected: str) -> None:
    assert normalize_number_string(value) == expected


@pytest.mark.parametrize("decimals,expected", [(0, 1.0), (2, 0.01), (8, 0.00000001)])
def test_get_precision(decimals: int, expected: float) -> None:
    assert get_precision(decimals) == expected


@pytest.mark.parametrize(
    "value,decimals,expected",
    [
        (1000000.0, 2, 1000000.0),
        (0.125, 2, 0.13),
        (2.675, 2, 2.68),
        (9.999, 2, 10.0),
        (0.0000012345, 6, 0.000001),
        (3.7, 0, 4.0),
    ],
)
def test_round_to_decimals_half_up(value: float, decimals: int, expected: float) -> None:
    assert round_to_decimals(value, decimals) == expected


def test_to_float_handles_empty_values() -> None:
    assert to_float(None) == 0.0
    assert to_float("") == 0.0
    assert to_float("1.5") == 1.5
