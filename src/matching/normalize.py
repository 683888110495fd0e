# src/matching/normalize.py
"""
Normalizers applied to both sides of every identity comparison.

All of them are total (None / non-strings never raise) and idempotent.
"""

from __future__ import annotations

import re
from typing import Any

_NON_DIGIT = re.compile(r"\D")


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def normalize_email(value: Any) -> str:
    return _text(value).strip().lower()


def normalize_phone(value: Any) -> str:
    return _NON_DIGIT.sub("", _text(value))


def normalize_zip(value: Any) -> str:
    # "1234 5" -> "1234", not "1234 "
    return _text(value).strip()[:5].strip()


def normalize_name(value: Any) -> str:
    return _text(value).strip().lower()
