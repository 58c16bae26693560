import math

import pytest

from backend.services.parsing import parse_count_or_none, parse_count_or_zero


@pytest.mark.parametrize(
    "value, expected",
    [
        (5, 5),
        ("5", 5),
        (" 12 ", 12),
        ("12abc", 12),
        (7.9, 7),
        ("abc", 0),
        ("", 0),
        (None, 0),
        (True, 0),
        (math.nan, 0),
        ({"n": 1}, 0),
        (-3, 0),
        ("-4", 0),
    ],
)
def test_parse_count_or_zero(value, expected):
    assert parse_count_or_zero(value) == expected


def test_parse_count_or_none_keeps_sign_and_misses():
    assert parse_count_or_none("-4") == -4
    assert parse_count_or_none("abc") is None
    assert parse_count_or_none(math.inf) is None
    assert parse_count_or_none("+8 units") == 8


@pytest.mark.parametrize(
    "value",
    ["99999999999999999999", 2**31, 2**63, 1e20, "1" * 5000, "2147483648 units"],
)
def test_counts_beyond_integer_column_are_zero(value):
    assert parse_count_or_zero(value) == 0
    assert parse_count_or_none(value) is None


def test_largest_storable_count_is_kept():
    assert parse_count_or_zero("2147483647") == 2**31 - 1
    assert parse_count_or_zero("000000000000042") == 42
