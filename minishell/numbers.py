"""Integer parsing and range checks used by the ``exit`` builtin."""

from itertools import takewhile

LONG_MAX = "9223372036854775807"
LONG_MIN = "-9223372036854775808"

_WHITESPACE = " \t\n\v\f\r"
_DIGITS = "0123456789"


def _wrap_int32(value):
    """Reduce ``value`` to a signed 32-bit integer, wrapping on overflow."""
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value >= 1 << 31 else value


def _compare_long(left, right):
    """Order two numeric strings: the longer one is larger, else lexically."""
    if len(left) != len(right):
        return -1 if len(left) < len(right) else 1
    return (left > right) - (left < right)


def atoi(text):
    """Parse a leading integer as a 32-bit C ``int``.

    Leading whitespace is skipped and one sign is accepted; parsing stops at
    the first non-digit. A ``+`` directly after a ``-`` is not a sign, so
    ``"-+5"`` yields 0. Values outside 32 bits wrap around.
    """
    rest = text.lstrip(_WHITESPACE)
    sign = 1
    if rest.startswith("-"):
        sign = -1
        rest = rest[1:]
    elif rest.startswith("+"):
        rest = rest[1:]
    digits = "".join(takewhile(lambda ch: ch in _DIGITS, rest))
    magnitude = int(digits) if digits else 0
    return _wrap_int32(sign * magnitude)


def is_numeric(text):
    """Return True if ``text`` is optional whitespace, an optional sign and digits only."""
    rest = text.lstrip(_WHITESPACE)
    if rest[:1] in ("-", "+") and rest:
        rest = rest[1:]
    return all(ch in _DIGITS for ch in rest)


def fits_long(text):
    """Return True if ``text`` is accepted as a 64-bit ``exit`` argument."""
    if not is_numeric(text):
        return False
    if not (atoi(text) != 0 or text.startswith("0") or text[:20] == LONG_MIN):
        return False
    first = text[0]
    if first in _DIGITS or first == "+":
        return _compare_long(text, LONG_MAX) <= 0
    if first == "-":
        return _compare_long(text, LONG_MIN) <= 0
    return False


def exit_code(text):
    """Return the process status (0-255) that ``exit text`` produces.

    Raises ValueError when ``text`` is not an acceptable numeric argument.
    """
    if not fits_long(text):
        raise ValueError(f"{text}: numeric argument required")
    return atoi(text) % 256