"""Emoji and hex-color helpers for category display attributes."""
import re

import regex

from utils.constants import EMOJI_COLORS

_VARIATION_SELECTORS = re.compile("[\ufe0e\ufe0f]")
_HEX_DIGITS = re.compile(r"^[0-9A-Fa-f]+$")


def first_grapheme(text: str | None) -> str:
    """Trim whitespace and keep exactly one user-visible character."""
    trimmed = (text or "").strip()
    if not trimmed:
        return ""
    match = regex.match(r"\X", trimmed)
    return match.group(0) if match else ""


def normalize_emoji(emoji: str) -> str:
    """Strip variation selectors so '❤️' and '❤' share a table key."""
    return _VARIATION_SELECTORS.sub("", emoji or "")


def color_for_emoji(emoji: str | None) -> str | None:
    """Fixed emoji → color table lookup; None for unknown glyphs."""
    if not emoji:
        return None
    return EMOJI_COLORS.get(normalize_emoji(first_grapheme(emoji)))


def normalize_hex(value: str | None) -> str | None:
    """Return '#RRGGBB' / '#AARRGGBB' for a valid hex color, else None.

    Accepts 3, 6 or 8 hex digits with or without a leading '#'.
    """
    digits = (value or "").strip().lstrip("#")
    if not digits or not _HEX_DIGITS.match(digits):
        return None
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    if len(digits) not in (6, 8):
        return None
    return "#" + digits.upper()


def tk_color(hex_value: str) -> str:
    """Tk understands #RRGGBB only; drop the alpha byte of #AARRGGBB."""
    if len(hex_value) == 9:
        return "#" + hex_value[3:]
    return hex_value
