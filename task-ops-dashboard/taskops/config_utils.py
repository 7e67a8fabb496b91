from __future__ import annotations

import os
from datetime import timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

_TRUE = {"1", "true", "yes", "y", "on"}
_FALSE = {"0", "false", "no", "n", "off"}


def env_str(name: str, default: str) -> str:
    """Stripped value of ``name``; blank counts as unset."""
    value = (os.environ.get(name) or "").strip()
    return value or default


def env_optional_str(name: str, default: Optional[str] = None) -> Optional[str]:
    value = (os.environ.get(name) or "").strip()
    return value or default


def env_bool(name: str, default: bool) -> bool:
    raw = (os.environ.get(name) or "").strip().lower()
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    return default


def env_int(name: str, default: int, *, minimum: Optional[int] = None) -> int:
    try:
        value = int((os.environ.get(name) or "").strip())
    except ValueError:
        value = default
    if minimum is not None:
        value = max(minimum, value)
    return value


def load_timezone(name: str) -> tzinfo:
    """IANA zone by name; unknown names fall back to UTC."""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return timezone.utc
