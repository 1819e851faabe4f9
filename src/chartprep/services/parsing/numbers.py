from __future__ import annotations

import math
import re
from typing import Optional


# 1-3 leading digits followed by one or more exact 3-digit groups
_COMMA_GROUPED_RE = re.compile(r"^-?\d{1,3}(?:,\d{3})+$")
_DOT_GROUPED_RE = re.compile(r"^-?\d{1,3}(?:\.\d{3})+$")
_COMMA_DECIMAL_RE = re.compile(r"^-?\d+,\d+$")


def _to_float(text: str) -> Optional[float]:
    # float() also accepts digit underscores ("1_000") and non-ASCII digits
    if "_" in text or not text.isascii():
        return None
    try:
        n = float(text)
    except ValueError:
        return None
    if not math.isfinite(n):
        return None
    return n


def parse_number(value: object) -> Optional[float]:
    """Parse a number written in either US (1,234.50) or EU (1.234,50) notation.

    Returns None when the value is not a number; never raises.

    Resolution order:
    1. empty or a lone "-" is not a number
    2. both separators present: whichever occurs last is the decimal point
    3. only commas: exact 3-digit groups are US thousands, otherwise a single
       comma is an EU decimal point
    4. only dots: exact 3-digit groups are EU thousands, otherwise a decimal point
    5. plain conversion of the untouched string
    """
    text = value.strip() if isinstance(value, str) else str(value).strip()
    if text == "" or text == "-":
        return None

    has_comma = "," in text
    has_dot = "." in text

    if has_comma and has_dot:
        if text.rfind(",") > text.rfind("."):
            # 1.234,50: dots group, comma is decimal
            return _to_float(text.replace(".", "").replace(",", ".", 1))
        return _to_float(text.replace(",", ""))

    if has_comma:
        if _COMMA_GROUPED_RE.match(text):
            return _to_float(text.replace(",", ""))
        if _COMMA_DECIMAL_RE.match(text):
            return _to_float(text.replace(",", "."))

    if has_dot and _DOT_GROUPED_RE.match(text):
        return _to_float(text.replace(".", ""))

    return _to_float(text)


def is_number(value: object) -> bool:
    return parse_number(value) is not None
