"""Render a numeric pairing pin as large ASCII-art digits for the console."""

from __future__ import annotations

_DIGIT_WIDTH = 10
_DIGIT_HEIGHT = 8

# Each digit is 8 rows of 10 cells; every cell is an index into _PIXELS.
_DIGITS: tuple[tuple[str, ...], ...] = (
    ("0821111380", "2114005113", "1110000111", "1110000111",
     "1110000111", "1110000111", "5113002114", "0751111470"),
    ("0002111000", "0021111000", "0000111000", "0000111000",
     "0000111000", "0000111000", "0000111000", "0011111110"),
    ("0811112800", "2114005113", "0000000111", "0000082114",
     "0862111470", "2114700000", "1117000000", "1111111111"),
    ("0821111380", "2114005113", "0000082114", "0000111170",
     "0000075130", "1110000111", "5113002114", "0751111470"),
    ("0000211110", "0001401110", "0021401110", "0214001110",
     "2110001110", "1111111111", "0000001110", "0000001110"),
    ("1111111110", "1110000000", "1110000000", "1112111380",
     "0000075113", "0000000111", "5113002114", "0711114700"),
    ("0821111380", "2114005113", "1110000000", "1112111380",
     "1114075113", "1110000111", "5113002114", "0751111470"),
    ("1111111111", "0000002114", "0000021140", "0000211400",
     "0002114000", "0021140000", "0211400000", "2114000000"),
    ("0831111280", "2114002114", "5113802114", "0751111170",
     "8214775138", "1110000111", "5113002114", "0751111470"),
    ("0821111380", "2114005113", "1110000111", "5113802111",
     "0751114111", "0000000111", "5113002114", "0751111470"),
)

# Glyph shapes follow the FIGlet "colossal" font.
_PIXELS = " 8dbPYo\"."


def create_pin_display(pin: str, margin: int, gap: int) -> str:
    """Return ``pin`` drawn as ASCII art.

    Each row starts with ``margin`` spaces and every digit is followed by
    ``gap`` spaces.  The picture starts with a newline and ends with a blank
    line.  Raises ``ValueError`` if ``pin`` contains anything but digits.
    """
    if not all(ch in "0123456789" for ch in pin):
        raise ValueError(f"pin must contain only decimal digits: {pin!r}")
    digits = [_DIGITS[int(ch)] for ch in pin]
    lines = []
    for row in range(_DIGIT_HEIGHT):
        cells = "".join(
            "".join(_PIXELS[int(cell)] for cell in digit[row]) + " " * gap
            for digit in digits
        )
        lines.append(" " * margin + cells)
    return "\n" + "\n".join(lines) + "\n\n"