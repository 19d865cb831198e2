# -*- coding: utf-8 -*-

from typing import Optional

DEFAULT_PATTERN = "mm:ss"

ACCEPTED_PATTERNS = (
    "mm:ss",
    "m:s",
    "mm",
    "ss",
    "m",
    "s",
    "ss:mm",
    "s:m",
)


def normalize_pattern(pattern) -> Optional[str]:
    """Return the canonical form of an accepted pattern, or None."""
    if not isinstance(pattern, str):
        return None
    p = pattern.strip().lower()
    if p in ACCEPTED_PATTERNS:
        return p
    return None


def _field(token: str, minutes: int, seconds: int) -> str:
    value = minutes if token[0] == "m" else seconds
    if len(token) == 2:
        return f"{value:02d}"
    return str(value)


def format_countdown(minutes: int, seconds: int, pattern: str = DEFAULT_PATTERN) -> str:
    """
    Render remaining time, e.g. (1, 5, "mm:ss") -> "01:05", (1, 5, "s") -> "5".
    Minutes are not wrapped at 60.
    """
    p = normalize_pattern(pattern)
    if p is None:
        raise ValueError(f"unsupported time pattern: {pattern!r}")

    m = max(0, int(minutes))
    s = max(0, int(seconds))
    return ":".join(_field(token, m, s) for token in p.split(":"))
