import pytest

from utils.formatting import format_amount, parse_number


@pytest.mark.parametrize(
    "value, expected",
    [
        ("3", 3.0),
        ("2.5", 2.5),
        (" 12 mtr", 12.0),
        (".5", 0.5),
        ("-4", -4.0),
        ("abc", 0.0),
        ("", 0.0),
        (None, 0.0),
        (7, 7.0),
        (float("nan"), 0.0),
    ],
)
def test_parse_number(value, expected):
    assert parse_number(value) == expected


def test_parse_number_custom_default():
    assert parse_number("n/a", default=-1.0) == -1.0


def test_format_amount_indian_grouping():
    assert format_amount(1234567.5) == "12,34,567.50"
    assert format_amount(999) == "999.00"
    assert format_amount(1000) == "1,000.00"
    assert format_amount(-150000) == "-1,50,000.00"
