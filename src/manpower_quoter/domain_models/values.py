"""Domain-level value coercion helpers."""
from __future__ import annotations

import math
import re
from typing import Any

_CURRENCY_PATTERN = re.compile(r"(?i)\b(?:qar|usd|eur|qr)\b\.?")
_TRUTHY = {"true", "yes", "y", "1", "on"}


def is_blank(value: Any) -> bool:
    """Return ``True`` for ``None``, NaN and whitespace-only strings."""

    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def coerce_float_or_none(value: Any) -> float | None:
    """Attempt to coerce the given value to ``float`` returning ``None`` on failure."""

    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except (TypeError, ValueError):
            return None
    if isinstance(value, str):
        cleaned = value.strip()
        if not cleaned:
            return None
        # Salary sheets carry currency markers and thousands separators.
        cleaned = cleaned.replace("$", "").replace("\u20AC", "").replace(",", "")
        cleaned = _CURRENCY_PATTERN.sub("", cleaned)
        cleaned = cleaned.replace("\u00A0", "").strip().rstrip("%").strip()
        if not cleaned:
            return None
        try:
            return float(cleaned)
        except ValueError:
            return None
    if hasattr(value, "__float__"):
        try:
            return float(value)
        except (TypeError, ValueError):
            return None
    return None


def to_float(value: Any) -> float | None:
    """Best-effort conversion of ``value`` to a finite float."""

    if is_blank(value):
        return None
    coerced = coerce_float_or_none(value)
    if coerced is None or not math.isfinite(coerced):
        return None
    return coerced


def to_int(value: Any) -> int | None:
    """Best-effort conversion of ``value`` to an integer via rounding."""

    numeric = to_float(value)
    if numeric is None:
        return None
    return int(round(numeric))


def safe_float(value: Any, default: float = 0.0) -> float:
    """Return ``value`` coerced to ``float`` with NaN/Inf protection."""

    coerced = to_float(value)
    return default if coerced is None else coerced


def to_flag(value: Any, default: bool = False) -> bool:
    """Interpret spreadsheet-style booleans (``TRUE``, ``"yes"``, ``1``)."""

    if isinstance(value, bool):
        return value
    if is_blank(value):
        return default
    if isinstance(value, (int, float)):
        return value != 0
    return str(value).strip().lower() in _TRUTHY


def cell_text(value: Any) -> str:
    """Return the stripped text of a worksheet cell (blank cells become ``""``)."""

    if is_blank(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


__all__ = [
    "cell_text",
    "coerce_float_or_none",
    "is_blank",
    "safe_float",
    "to_flag",
    "to_float",
    "to_int",
]
