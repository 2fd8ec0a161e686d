"""
Numeric coercion for untyped export fields.

Readers in this package answer with one of three states:

    MISSING   the record has none of the fields the reader recognises
    None      a recognised field is present but explicitly empty (null / "")
    float     a recognised field parsed to a finite number
"""
from __future__ import annotations

import math
import re
from typing import Any, Dict, Iterable, Optional, Union


class _Missing:
    """Sentinel for "field not recognised". Distinct from None."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()

# float | None | MISSING
Reading = Union[float, None, _Missing]

_NUMBER_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
_EMBEDDED_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")


def is_number(value: Any) -> bool:
    """True for int/float values (bools are not numbers here)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_number_text(text: str) -> Optional[float]:
    """Strict parse of a plain decimal/scientific string, thousands separators stripped."""
    normalized = text.replace(",", "").strip()
    if not normalized or not _NUMBER_RE.match(normalized):
        return None
    parsed = float(normalized)
    return parsed if math.isfinite(parsed) else None


def parse_numeric(value: Any) -> Optional[float]:
    """
    Coerce an export field to a finite float, or None.

    Strings are parsed strictly first, then by the first embedded number
    ("72 bpm" -> 72.0). Containers, booleans and non-finite numbers give None.
    """
    if value is None or value == "":
        return None
    if is_number(value):
        try:
            number = float(value)
        except OverflowError:
            return None
        return number if math.isfinite(number) else None
    if not isinstance(value, str):
        return None

    direct = parse_number_text(value)
    if direct is not None:
        return direct

    normalized = value.replace(",", "").strip()
    if not normalized:
        return None
    matched = _EMBEDDED_NUMBER_RE.search(normalized)
    if not matched:
        return None
    parsed = float(matched.group(0))
    return parsed if math.isfinite(parsed) else None


def pick_numeric(record: Dict[str, Any], keys: Iterable[str]) -> Reading:
    """
    Read the first recognised alias from ``record``.

    A present key holding null or "" answers None straight away. A present key
    holding something unparseable is passed over in favour of the next alias.
    """
    for key in keys:
        if key not in record:
            continue
        raw = record[key]
        parsed = parse_numeric(raw)
        if parsed is None:
            if raw is None or raw == "":
                return None
            continue
        return parsed
    return MISSING
