from condo_finance.utils.formatting import (
    format_currency,
    format_large_value,
    format_percent,
    month_name,
)


def test_format_currency():
    assert format_currency(1234.5) == "$1,234.50"
    assert format_currency(-1234.5) == "-$1,234.50"
    assert format_currency(0) == "$0.00"
    assert format_currency(10, symbol="MX$") == "MX$10.00"


def test_format_percent():
    assert format_percent(23.5) == "23.50%"
    assert format_percent(100, decimals=0) == "100%"


def test_month_name():
    assert month_name("03") == "Marzo"
    assert month_name("13") == "13"


def test_format_large_value():
    assert format_large_value(1500) == "$1.5k"
    assert format_large_value(2_000_000) == "$2.0M"
    assert format_large_value(500) == "$500"
