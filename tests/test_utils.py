from datetime import date

import pytest

from errors import InvalidInputError
from utils import app_dir, format_amount, format_with_sign, parse_amount, parse_date


def test_format_amount():
    assert format_amount(10050) == "₹100.50"
    assert format_amount(0) == "₹0.00"
    assert format_amount(5) == "₹0.05"
    assert format_amount(123456789) == "₹1,234,567.89"
    assert format_amount(-500) == "-₹5.00"


def test_format_amount_other_currency():
    assert format_amount(199, symbol="$") == "$1.99"
    assert format_amount(1500, symbol="¥", decimals=0) == "¥1,500"


def test_format_with_sign():
    assert format_with_sign(500) == "+₹5.00"
    assert format_with_sign(-500) == "-₹5.00"
    assert format_with_sign(0) == "₹0.00"


def test_parse_amount():
    assert parse_amount("100.50") == 10050
    assert parse_amount("₹1,000.50") == 100050
    assert parse_amount("100") == 10000
    assert parse_amount("-2.5") == -250
    assert parse_amount("0.005") == 1


@pytest.mark.parametrize("text", ["", "abc", "1.2.3"])
def test_parse_amount_rejects_garbage(text):
    with pytest.raises(InvalidInputError):
        parse_amount(text)


def test_parse_date():
    assert parse_date(" 2024-02-29 ") == date(2024, 2, 29)


def test_app_dir_honours_env(tmp_path, monkeypatch):
    target = tmp_path / "home"
    monkeypatch.setenv("WHATS_MY_SHARE_HOME", str(target))
    assert app_dir() == str(target)
    assert target.is_dir()
