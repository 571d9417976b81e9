import pytest

from utils.currency import format_currency, format_signed, parse_amount
from utils.emoji_helpers import (
    color_for_emoji, first_grapheme, normalize_emoji, normalize_hex, tk_color,
)


def test_first_grapheme():
    assert first_grapheme("  🍕 pizza ") == "🍕"
    assert first_grapheme("👍🏽👍") == "👍🏽"
    assert first_grapheme("   ") == ""
    assert first_grapheme(None) == ""


def test_emoji_color_ignores_variation_selector():
    assert normalize_emoji("❤️") == "❤"
    assert color_for_emoji("❤️") == color_for_emoji("❤")
    assert color_for_emoji("") is None


@pytest.mark.parametrize("raw, expected", [
    ("#abc", "#AABBCC"),
    ("ff3b30", "#FF3B30"),
    ("#80FF3B30", "#80FF3B30"),
    ("#12", None),
    ("#GGGGGG", None),
    ("", None),
])
def test_normalize_hex(raw, expected):
    assert normalize_hex(raw) == expected


def test_tk_color_drops_alpha():
    assert tk_color("#80FF3B30") == "#FF3B30"
    assert tk_color("#FF3B30") == "#FF3B30"


def test_currency_formatting():
    assert format_currency(1234.5) == "₹1234.50"
    assert format_currency(3, "$") == "$3.00"
    assert format_signed(-2.5, "$") == "-$2.50"
    assert format_signed(0, "$") == "+$0.00"


def test_parse_amount():
    assert parse_amount(" 1,250.75 ") == 1250.75
    with pytest.raises(ValueError, match="enter an amount"):
        parse_amount("")
    with pytest.raises(ValueError, match="Invalid amount"):
        parse_amount("abc")
