# menuscan/parsers/known_items.py
"""
Known-item reconciliation.

Some scanned menus are known in advance. Instead of trusting OCR for every
character, the document is checked against a fixed catalog of (name, price)
pairs; an entry is accepted when at least 60% of its words can be found in
the OCR text, either verbatim or via fuzzy token match. This recovers items
from badly garbled scans ("CLASSlC FRENCH FRYES" → Classic French Fries).

Accepted entries are grouped into fixed sections by keyword membership:
  - "Fries & Sides"  (name contains "fries")
  - "Beverages"      (drinks / tea / milkshake / lemonade)
  - "Menu Items"     (everything else)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from ..fuzzy_match import tokenize, word_overlap
from ..scoring.enrichment import ItemDraft
from .menu_grammar import capitalize_words
from .price_parser import CATALOG_PRICE_CEILING

log = logging.getLogger(__name__)

MIN_WORD_OVERLAP = 0.6

FRIES_SECTION = "Fries & Sides"
BEVERAGE_SECTION = "Beverages"
GENERAL_SECTION = "Menu Items"

_FRIES_KEYWORDS = ("fries",)
_BEVERAGE_KEYWORDS = ("drinks", "tea", "milkshake", "lemonade")


@dataclass(frozen=True)
class KnownItem:
    name: str
    price: float


@dataclass(frozen=True)
class KnownItemCatalog:
    """Seed list for one known source document."""
    restaurant: str
    items: Tuple[KnownItem, ...] = ()
    venue_terms: Tuple[str, ...] = field(default_factory=tuple)


CRISPY_SPUDS_CATALOG = KnownItemCatalog(
    restaurant="Crispy Spuds Restaurant",
    items=(
        KnownItem("CLASSIC FRENCH FRIES", 3.99),
        KnownItem("LOADED FRIES", 6.99),
        KnownItem("SWEET POTATO FRIES", 4.99),
        KnownItem("CURLY FRIES", 4.99),
        KnownItem("CHEESE FRIES", 5.99),
        KnownItem("CHILI CHEESE FRIES", 5.99),
        KnownItem("TRUFFLE PARMESAN FRIES", 6.99),
        KnownItem("GARLIC HERB FRIES", 6.99),
        KnownItem("SOFT DRINKS", 2.99),
        KnownItem("ICED TEA", 2.99),
        KnownItem("MILKSHAKES", 4.99),
        KnownItem("FRESHLY SQUEEZED LEMONADE", 3.99),
    ),
    venue_terms=("spuds",),
)


def required_overlap(name: str) -> int:
    """Words of `name` that must be found: ceil(60% of its word count)."""
    return math.ceil(len(tokenize(name)) * MIN_WORD_OVERLAP)


def reconcile_known_items(text: str, catalog: KnownItemCatalog) -> List[ItemDraft]:
    """Return drafts for every catalog entry recognizable in `text`, catalog order."""
    if not text or not catalog.items:
        return []

    tokens = tokenize(text)
    found: List[ItemDraft] = []
    for known in catalog.items:
        if not 0 < known.price < CATALOG_PRICE_CEILING:
            log.debug("Catalog entry %r has out-of-band price %s", known.name, known.price)
            continue
        overlap = word_overlap(known.name, text, tokens)
        if overlap >= required_overlap(known.name):
            log.debug("Matched known item: %s - $%.2f", known.name, known.price)
            found.append(ItemDraft(
                name=capitalize_words(known.name),
                price=known.price,
                source_text=known.name.lower(),
            ))
    return found


def _has_keyword(name: str, keywords: Sequence[str]) -> bool:
    low = name.lower()
    return any(kw in low for kw in keywords)


def group_known_items(drafts: Sequence[ItemDraft]) -> List[Tuple[str, List[ItemDraft]]]:
    """Partition reconciled items into the fixed sections, skipping empty ones."""
    fries = [d for d in drafts if _has_keyword(d.name, _FRIES_KEYWORDS)]
    beverages = [
        d for d in drafts
        if d not in fries and _has_keyword(d.name, _BEVERAGE_KEYWORDS)
    ]
    rest = [d for d in drafts if d not in fries and d not in beverages]

    sections = [
        (FRIES_SECTION, fries),
        (BEVERAGE_SECTION, beverages),
        (GENERAL_SECTION, rest),
    ]
    return [(name, items) for name, items in sections if items]
