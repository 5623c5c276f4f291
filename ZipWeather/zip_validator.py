"""Postal code validation."""
import re
from typing import Tuple

INVALID_ZIP_MESSAGE = "Invalid zip({}), accepted values are 00000 to 99999"

MIN_ZIP = 0
MAX_ZIP = 99999

# same grammar as a plain base-10 integer parse: optional sign, ASCII digits
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def validate_zip(raw: str) -> Tuple[str, bool]:
    """
    Normalize and accept/reject a US postal code.

    Any integer in 00000-99999 is accepted regardless of how many digits were
    typed, so "1" and "00001" both normalize to "00001".

    Args:
        raw: Postal code as supplied by the caller

    Returns:
        (normalized, ok): normalized is the five digit key when ok is True,
        and an empty string otherwise.
    """
    if not isinstance(raw, str) or not _INTEGER_RE.fullmatch(raw):
        return "", False
    # anything with more than five significant digits is out of range
    if len(raw.lstrip("+-").lstrip("0")) > len(str(MAX_ZIP)):
        return "", False
    value = int(raw)
    if value < MIN_ZIP or value > MAX_ZIP:
        return "", False
    return f"{value:05d}", True
