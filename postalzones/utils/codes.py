"""
Postal code normalization.
"""
import re
from typing import Any, Optional

CODE_LENGTH = 4

_NON_DIGITS = re.compile(r"\D")


def normalize_code(value: Any) -> Optional[str]:
    """
    Strip everything but digits; accept the result only if exactly four remain.

    "0150" -> "0150", "NO-0150" -> "0150", "150" -> None, "01500" -> None
    """
    if value is None:
        return None
    digits = _NON_DIGITS.sub("", str(value))
    if len(digits) != CODE_LENGTH:
        return None
    return digits


def pad_code(value: Any) -> Optional[str]:
    """
    Left-pad a numeric code to four digits.

    Non-numeric codes are returned as strings unchanged; missing or blank codes
    become None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value).zfill(CODE_LENGTH)
    if isinstance(value, float):
        if not value.is_integer():
            return str(value)
        return str(int(value)).zfill(CODE_LENGTH)
    text = str(value).strip()
    if not text:
        return None
    if text.isdigit():
        return text.zfill(CODE_LENGTH)
    return text
