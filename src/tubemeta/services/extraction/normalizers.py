"""
Text normalizers for raw watch-page captures.

Functions
---------
approx_number
    Parse locale-tolerant counts such as ``"1.2M"``, ``"3,4K"``, ``"2 Mn"``
    or ``"1.234.567"`` into an integer.
digits_only
    Keep only the digits of a string.
format_duration
    Format seconds as ``M:SS`` or ``H:MM:SS``.
duration_text_to_seconds
    Parse ``M:SS`` / ``H:MM:SS`` back to seconds.
unescape_json_fragment / escape_json_fragment
    Undo/apply the JSON escapes seen in regex captures.
decode_html_entities
    Decode the handful of HTML entities YouTube emits in attributes.
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation

# Grouped thousands: 1.234.567 / 1,234,567 / 1 234 567
_GROUPED_NUMBER_RE = re.compile(r"(?<!\d)(\d{1,3}(?:[.,\s]\d{3})+)(?!\d)")
# Suffixed approximations: 1.2K, 3,4M, 2 Mn, 1B
_SUFFIXED_NUMBER_RE = re.compile(
    r"(?<!\d)(\d+(?:[.,]\d+)?)\s*(k|mn|m|b)\b", re.IGNORECASE
)
_PLAIN_NUMBER_RE = re.compile(r"(?<!\d)(\d{2,})(?!\d)")

_SUFFIX_MULTIPLIERS: dict[str, int] = {
    "k": 1_000,
    "m": 1_000_000,
    "mn": 1_000_000,
    "b": 1_000_000_000,
}

# Order matters: the backslash of an escaped quote must not be re-read.
_JSON_ESCAPES: tuple[tuple[str, str], ...] = (
    ("\\n", "\n"),
    ("\\u0026", "&"),
    ('\\"', '"'),
)

_HTML_ENTITIES: tuple[tuple[str, str], ...] = (
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&amp;", "&"),
)


def approx_number(text: str | None) -> int | None:
    """
    Parse an approximate integer from a localized count string.

    Tries, in order: grouped thousands (``"12,345 views"``), a number with
    a magnitude suffix (``"1.2M"``, case-insensitive, ``.`` or ``,`` as
    the decimal mark), and a plain run of two or more digits.

    Parameters
    ----------
    text : str | None
        Raw count text.

    Returns
    -------
    int | None
        The parsed count, or ``None`` if nothing matched.

    Examples
    --------
    >>> approx_number("1.2M")
    1200000
    >>> approx_number("12,345")
    12345
    >>> approx_number("") is None
    True
    """
    if text is None:
        return None
    s = text.strip().lower()
    if not s:
        return None

    grouped = _GROUPED_NUMBER_RE.search(s)
    if grouped:
        cleaned = re.sub(r"[\s.,]", "", grouped.group(1))
        if cleaned.isdigit():
            return int(cleaned)

    suffixed = _SUFFIXED_NUMBER_RE.search(s)
    if suffixed:
        try:
            value = Decimal(suffixed.group(1).replace(",", "."))
        except InvalidOperation:
            return None
        return int(value * _SUFFIX_MULTIPLIERS[suffixed.group(2).lower()])

    plain = _PLAIN_NUMBER_RE.search(s)
    if plain:
        return int(plain.group(1))

    return None


def digits_only(text: str) -> str:
    """Return only the decimal digits of ``text``."""
    return "".join(ch for ch in text if ch.isdigit())


def format_duration(seconds: int) -> str:
    """
    Format a duration for display.

    Parameters
    ----------
    seconds : int
        Non-negative duration in seconds.

    Returns
    -------
    str
        ``"M:SS"`` under one hour, otherwise ``"H:MM:SS"``.

    Examples
    --------
    >>> format_duration(75)
    '1:15'
    >>> format_duration(3725)
    '1:02:05'
    """
    if seconds < 3600:
        return f"{seconds // 60}:{seconds % 60:02d}"
    return f"{seconds // 3600}:{(seconds % 3600) // 60:02d}:{seconds % 60:02d}"


def duration_text_to_seconds(text: str) -> int | None:
    """Convert ``"9:58"`` or ``"1:02:03"`` to seconds, or ``None``."""
    trimmed = text.strip()
    if not trimmed or ":" not in trimmed:
        return None
    parts = trimmed.split(":")
    if not all(part.isdigit() for part in parts):
        return None
    numbers = [int(part) for part in parts]
    if len(numbers) == 2:
        return numbers[0] * 60 + numbers[1]
    if len(numbers) == 3:
        return numbers[0] * 3600 + numbers[1] * 60 + numbers[2]
    return None


def unescape_json_fragment(text: str) -> str:
    r"""Undo ``\n``, ``&`` and ``\"`` escapes in a raw JSON capture."""
    for escaped, plain in _JSON_ESCAPES:
        text = text.replace(escaped, plain)
    return text


def escape_json_fragment(text: str) -> str:
    r"""Apply the ``\n``, ``&`` and ``\"`` escapes; inverse of unescape."""
    for escaped, plain in reversed(_JSON_ESCAPES):
        text = text.replace(plain, escaped)
    return text


def decode_html_entities(text: str) -> str:
    """Decode ``&amp;``, ``&quot;``, ``&#39;``, ``&lt;`` and ``&gt;``."""
    for entity, plain in _HTML_ENTITIES:
        text = text.replace(entity, plain)
    return text
