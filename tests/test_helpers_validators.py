import pytest

from utils.helpers import (
    build_payment_url, callback_arg, callback_int, format_price, generate_reference,
    stars, total_with_commission
)
from utils.validators import is_valid_description, parse_price, parse_quote, parse_rating


@pytest.mark.parametrize("net, total", [
    (10, 11.5),
    (12, 13.8),
    (5.00, 5.75),
    (0.01, 0.01),
    (19.99, 22.99),
])
def test_total_with_commission(net, total):
    assert total_with_commission(net) == total


def test_format_price():
    assert format_price(11.5) == "$11.50"
    assert format_price(None) == "$0.00"


def test_build_payment_url_without_query():
    url = build_payment_url("https://pay.example.com/checkout", 11.5, "REQ_1")
    assert url == "https://pay.example.com/checkout?amount=11.50&ref=REQ_1"


def test_build_payment_url_with_existing_query():
    url = build_payment_url("https://pay.example.com/checkout?shop=42", 13.8, "REQ_2")
    assert url == "https://pay.example.com/checkout?shop=42&amount=13.80&ref=REQ_2"


def test_generate_reference_is_unique():
    first = generate_reference("REQ", 7)
    second = generate_reference("REQ", 7)

    assert first.startswith("REQ_")
    assert "_7_" in first
    assert first != second


def test_callback_parsing():
    assert callback_arg("buy_7", "buy_") == "7"
    assert callback_int("accept_quote_12", "accept_quote_") == 12
    with pytest.raises(ValueError):
        callback_int("buy_7", "sell_")
    with pytest.raises(ValueError):
        callback_int("buy_abc", "buy_")


def test_stars():
    assert stars(3) == "⭐⭐⭐"


# ========== VALIDATORS ==========
@pytest.mark.parametrize("text, expected", [
    ("5.00", 5.0),
    (" 12 ", 12.0),
    ("abc", None),
    ("0", None),
    ("-3", None),
    ("nan", None),
    ("inf", None),
    ("", None),
])
def test_parse_price(text, expected):
    assert parse_price(text) == expected


def test_description_length_limit():
    assert is_valid_description("x" * 120)
    assert not is_valid_description("x" * 121)
    assert not is_valid_description("")


def test_parse_quote():
    assert parse_quote("25.00 Logo design") == (25.0, "Logo design")
    assert parse_quote("12.00 rush job with   extra revisions") == (12.0, "rush job with   extra revisions")
    assert parse_quote("30") == (30.0, "")


@pytest.mark.parametrize("text", ["abc logo", "", "   ", "-5 refund", "0 free"])
def test_parse_quote_rejects_bad_price(text):
    assert parse_quote(text) is None


def test_parse_rating():
    assert parse_rating("5") == 5
    assert parse_rating(1) == 1
    assert parse_rating("0") is None
    assert parse_rating("6") is None
    assert parse_rating("five") is None
