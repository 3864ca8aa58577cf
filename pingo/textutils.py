"""Small text helpers shared by the builtins and the executor."""

from __future__ import annotations

LLONG_MAX = 2**63 - 1
LLONG_MIN = -(2**63)

_C_SPACE = " \t\n\v\f\r"


def split_fields(text: str, sep: str) -> list[str]:
    """Split ``text`` on ``sep``, dropping empty fields.

    Runs of separators, and separators at either end, produce no fields.
    """
    return [field for field in text.split(sep) if field]


def parse_long_long(text: str) -> int:
    """Parse a leading decimal integer the way the shell's ``exit`` reads it.

    Leading whitespace is skipped, one optional sign is accepted, and
    parsing stops at the first non-digit.  A value that does not fit in a
    signed 64-bit integer saturates to its maximum or minimum.
    """
    pos = 0
    length = len(text)
    while pos < length and text[pos] in _C_SPACE:
        pos += 1
    sign = 1
    if pos < length and text[pos] == "-":
        sign = -1
        pos += 1
    elif pos < length and text[pos] == "+":
        pos += 1
    result = 0
    while pos < length and "0" <= text[pos] <= "9":
        digit = ord(text[pos]) - ord("0")
        if result > (LLONG_MAX - digit) // 10:
            return LLONG_MAX if sign == 1 else LLONG_MIN
        result = result * 10 + digit
        pos += 1
    return result * sign