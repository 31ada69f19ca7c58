"""
Text normalization for recognized field values.

Turns raw matched substrings into canonical names, registration numbers,
phone numbers and email addresses.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Optional


_NON_NAME_CHARS = re.compile(r"[^A-Za-z\s]")
_WHITESPACE = re.compile(r"\s+")
_NON_DIGITS = re.compile(r"\D")


def normalize_name(raw: str) -> str:
    """
    Clean a recognized name.

    Drops everything except letters and spaces, collapses whitespace and
    title-cases each word. An empty result means no name was detected.

    >>> normalize_name("  jOHN   o'adeyemi ")
    'John Oadeyemi'
    """
    cleaned = _NON_NAME_CHARS.sub("", raw)
    cleaned = _WHITESPACE.sub(" ", cleaned).strip()
    if not cleaned:
        return ""
    return " ".join(word[0].upper() + word[1:].lower() for word in cleaned.split(" "))


def normalize_reg_no(raw: str) -> str:
    """Uppercase and strip all whitespace. Malformed values are kept as-is."""
    return _WHITESPACE.sub("", raw.strip().upper())


def normalize_phone(raw: str) -> str:
    """
    Normalize a Nigerian phone number.

    - 13 digits starting with 234 -> +234...
    - 11 digits starting with 0   -> +234... (leading 0 dropped)
    - anything else               -> digits only
    """
    digits = _NON_DIGITS.sub("", raw)

    if digits.startswith("234") and len(digits) == 13:
        return "+" + digits

    if digits.startswith("0") and len(digits) == 11:
        return "+234" + digits[1:]

    return digits


def normalize_email(raw: str) -> str:
    return raw.strip().lower()


def synthesize_reg_no(index: int, year: Optional[int] = None) -> str:
    """
    Generate a placeholder registration number.

    ``index`` is the 1-based position among accepted candidates within
    the current strategy run, e.g. ``STD/26/007``.
    """
    if year is None:
        year = date.today().year
    return f"STD/{year % 100:02d}/{index:03d}"
