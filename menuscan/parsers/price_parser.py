"""
Price Parser
Recognizes currency-amount tokens in OCR text fragments and normalizes them.

Surface forms:
  $3.99    $ 12      (symbol prefix)
  3.99$              (symbol suffix)
  3.99 USD           (currency code, any case)
  3.99 dollars       (currency words, any case)
"""

from __future__ import annotations

import math
import re
from typing import List

PRICE_PATTERNS = [
    re.compile(r"\$\s*(\d+(?:\.\d{2})?)"),
    re.compile(r"(\d+(?:\.\d{2})?)\s*\$"),
    re.compile(r"(\d+(?:\.\d{2})?)\s*USD", re.I),
    re.compile(r"(\d+(?:\.\d{2})?)\s*dollars?", re.I),
]

# Upper bounds (exclusive). Free-form lines must tolerate pricey entrees;
# the known-item catalog only ever holds a narrow price band.
LINE_PRICE_CEILING = 1000.0
CATALOG_PRICE_CEILING = 100.0

DEFAULT_CURRENCY = "USD"


def _to_amount(raw: str) -> float | None:
    try:
        value = float(raw)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def extract_prices(text: str, upper_bound: float = LINE_PRICE_CEILING) -> List[float]:
    """Return the distinct amounts in `text`, ascending, each in (0, upper_bound)."""
    if not text:
        return []
    found = set()
    for pattern in PRICE_PATTERNS:
        for m in pattern.finditer(text):
            value = _to_amount(m.group(1))
            if value is None:
                continue
            if 0 < value < upper_bound:
                found.add(value)
    return sorted(found)


def contains_price(text: str) -> bool:
    """True if any price surface form appears, regardless of amount."""
    if not text:
        return False
    return any(p.search(text) for p in PRICE_PATTERNS)


def strip_prices(text: str) -> str:
    """Remove every price substring (all surface forms) from `text`."""
    for pattern in PRICE_PATTERNS:
        text = pattern.sub("", text)
    return text
