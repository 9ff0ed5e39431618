import re
from typing import Optional
import bleach

# leading integer for ids read by the handlers, whole string for the guard
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_WHOLE_INT = re.compile(r"\s*([+-]?\d+)\s*")


def query_to_number(value: Optional[str]) -> Optional[int]:
    """Parse the leading integer of ``value``; ``None`` when there is none.

    ``"12"`` -> 12, ``"-1"`` -> -1, ``"7abc"`` -> 7, ``"abc"`` -> None.
    """
    if value is None:
        return None
    match = _LEADING_INT.match(str(value))
    if not match:
        return None
    return int(match.group(1))


def to_number(value: Optional[str]) -> Optional[int]:
    """Parse ``value`` only when the whole string is an integer.

    ``"12"`` -> 12, ``" 12 "`` -> 12, ``"7abc"`` -> None, ``"1_000"`` -> None.
    """
    if value is None:
        return None
    match = _WHOLE_INT.fullmatch(str(value))
    if not match:
        return None
    return int(match.group(1))


def is_a_number(value: Optional[str]) -> bool:
    return query_to_number(value) is not None


def sanitize_input(value: Optional[str]) -> str:
    """Sanitize a user-supplied display string before it is stored.

    - Strips HTML tags using bleach.clean(..., strip=True)
    - Removes NUL bytes
    - Trims whitespace
    """
    if value is None:
        return ""
    val = value.replace("\x00", "")
    val = bleach.clean(val, tags=set(), strip=True)
    return val.strip()
