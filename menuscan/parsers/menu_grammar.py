# menuscan/parsers/menu_grammar.py
"""
Menu Line Grammar — segmentation and line-based item building.

Turns line-oriented OCR text into item drafts:
  - split_lines:                 trimmed, non-empty lines
  - is_likely_category_header:   section heading ("DESSERTS", "Soup & Salad")
  - is_likely_restaurant_name:   venue name among the first three lines
  - is_likely_menu_item:         priced line or short capitalised name
  - parse_item_line:             one line → ItemDraft (name / description / price)
  - build_line_items:            all lines → drafts, with continuation merging
  - group_by_headers:            drafts → (section name, drafts) spans
  - classify_menu_lines:         per-line typing for debug views

Continuation policy:
  A line that directly follows an item line, is not a heading, carries no
  price, and does not itself look like an item name (lowercase start or
  more than 8 words) is folded into the previous item's description:

      Classic Burger $9.99
      with lettuce, tomato and pickles      ← description of Classic Burger

  A priced line or a capitalised short line is always its own item.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from ..scoring.enrichment import ItemDraft
from .price_parser import LINE_PRICE_CEILING, contains_price, extract_prices, strip_prices

log = logging.getLogger(__name__)


# ── Vocabularies ─────────────────────────────────────

CATEGORY_INDICATORS = [
    "appetizers", "starters", "apps", "small plates",
    "salads", "soups", "soup & salad",
    "mains", "entrees", "main courses", "entrées",
    "pasta", "pizza", "burgers", "sandwiches",
    "seafood", "meat", "chicken", "beef", "pork",
    "vegetarian", "vegan", "sides", "desserts",
    "beverages", "drinks", "cocktails", "wine", "beer",
    "breakfast", "lunch", "dinner", "brunch",
    "specials", "daily specials", "chef specials",
    "fries", "french fries",
]

VENUE_KEYWORDS = ["restaurant", "cafe", "bistro", "grill", "kitchen"]

# Lines mentioning these are page furniture, not dishes.
NON_ITEM_WORDS = ("menu", "page", "call", "phone")

DEFAULT_SECTION = "Menu Items"

MAX_ITEM_NAME_WORDS = 8


# ── Regex ────────────────────────────────────────────

_WHITESPACE_RE = re.compile(r"\s+")
_PUNCT_RE = re.compile(r"[^\w\s]")
_DISALLOWED_RE = re.compile(r"[^\w\s&'-]")
_DIGIT_RE = re.compile(r"\d")
_NUMERIC_RE = re.compile(r"[\d\s]+")
_TITLE_CASE_RE = re.compile(r"^[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*$")
# name / description boundary: dash, colon, em dash, or a sentence-ending dot
_NAME_DESC_SPLIT_RE = re.compile(r"[-:—]|\.(?=\s|$)")
_WORD_RE = re.compile(r"\w+(?:'\w+)?")


@dataclass
class ClassifiedLine:
    index: int
    text: str
    line_type: str   # restaurant_name | heading | menu_item | other


# ── Text helpers ─────────────────────────────────────

def capitalize_words(text: str) -> str:
    """'CLASSIC french FRIES' → 'Classic French Fries' (apostrophes kept in-word)."""
    return _WORD_RE.sub(lambda m: m.group(0)[:1].upper() + m.group(0)[1:].lower(), text)


def _collapse(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def _clean_fragment(text: str) -> str:
    """Drop characters outside letters / digits / space / & ' - and collapse whitespace."""
    return _collapse(_DISALLOWED_RE.sub("", text))


def split_lines(text: str) -> List[str]:
    if not text:
        return []
    return [ln.strip() for ln in text.splitlines() if ln.strip()]


def clean_category_name(line: str) -> str:
    return capitalize_words(_collapse(_PUNCT_RE.sub("", line)))


# ── Line predicates ──────────────────────────────────

def is_likely_category_header(line: str) -> bool:
    """
    Detect if a line names a menu section rather than an item.

    A line carrying a price is never a heading, so "SWEET POTATO FRIES $4.99"
    stays an item even though "fries" is a section word.
    """
    stripped = line.strip()
    if not stripped or contains_price(stripped):
        return False

    cleaned = _PUNCT_RE.sub("", stripped.lower())
    if any(ind in cleaned for ind in CATEGORY_INDICATORS):
        return True

    return (
        stripped == stripped.upper()
        and any(c.isalpha() for c in stripped)
        and 3 < len(stripped) < 40
        and not _DIGIT_RE.search(stripped)
    )


def is_likely_restaurant_name(
    line: str,
    index: int = 0,
    venue_terms: Sequence[str] = (),
) -> bool:
    if index >= 3:
        return False
    if not 3 < len(line) < 50:
        return False
    if contains_price(line) or is_likely_category_header(line):
        return False
    return has_venue_keyword(line, venue_terms) or bool(_TITLE_CASE_RE.match(line))


def has_venue_keyword(line: str, venue_terms: Sequence[str] = ()) -> bool:
    low = line.lower()
    keywords = list(VENUE_KEYWORDS) + [t.lower() for t in venue_terms]
    return any(kw in low for kw in keywords)


def looks_like_item_name(line: str) -> bool:
    words = line.split()
    if not 1 <= len(words) <= MAX_ITEM_NAME_WORDS:
        return False
    first = words[0]
    return first[:1].isupper()


def is_likely_menu_item(line: str) -> bool:
    if is_likely_category_header(line):
        return False
    if len(line.strip()) <= 5:
        return False
    return contains_price(line) or looks_like_item_name(line)


def _mentions_non_item_word(text: str) -> bool:
    low = text.lower()
    return any(w in low for w in NON_ITEM_WORDS)


# ── Restaurant detection ─────────────────────────────

def find_restaurant_name(
    lines: Sequence[str],
    venue_terms: Sequence[str] = (),
) -> Tuple[str, Optional[int]]:
    """Return (name, line index) of the first qualifying line among the first three."""
    for i, line in enumerate(lines[:3]):
        if is_likely_restaurant_name(line, i, venue_terms):
            return line, i
    return "", None


# ── Item building ────────────────────────────────────

def parse_item_line(line: str, index: int = -1) -> Optional[ItemDraft]:
    """
    Parse a single non-heading line into an ItemDraft, or None if the line
    does not carry a usable item name.
    """
    prices = extract_prices(line, LINE_PRICE_CEILING)

    text_no_price = _collapse(strip_prices(line))
    cleaned = _clean_fragment(text_no_price)

    if len(cleaned) < 3:
        log.debug("Skipping %r - name too short", line)
        return None
    if _NUMERIC_RE.fullmatch(cleaned) or _mentions_non_item_word(cleaned):
        log.debug("Skipping %r - not a menu item", line)
        return None

    sep = _NAME_DESC_SPLIT_RE.search(text_no_price)
    if sep:
        name = _clean_fragment(text_no_price[:sep.start()])
        description = _clean_fragment(text_no_price[sep.end():])
    else:
        name, description = cleaned, ""

    if len(name) < 2:
        log.debug("Skipping %r - invalid name after splitting", line)
        return None

    return ItemDraft(
        name=capitalize_words(name),
        description=description or None,
        price=prices[0] if prices else None,
        source_text=line,
        line_index=index,
    )


def _is_continuation(line: str) -> bool:
    if is_likely_category_header(line) or contains_price(line):
        return False
    if looks_like_item_name(line):
        return False
    return not _mentions_non_item_word(line)


def _append_continuation(draft: ItemDraft, line: str) -> bool:
    extra = _clean_fragment(line)
    if not extra:
        return False
    draft.description = f"{draft.description} {extra}" if draft.description else extra
    draft.source_text = f"{draft.source_text} {line}"
    return True


def build_line_items(
    lines: Sequence[str],
    skip: Iterable[int] = (),
) -> List[ItemDraft]:
    """Build drafts for every non-heading line; `skip` holds line indexes to ignore."""
    skipped: Set[int] = set(skip)
    drafts: List[ItemDraft] = []
    previous: Optional[ItemDraft] = None

    for i, line in enumerate(lines):
        if i in skipped or is_likely_category_header(line):
            previous = None
            continue

        if previous is not None and _is_continuation(line):
            if _append_continuation(previous, line):
                log.debug("Folded continuation %r into %r", line, previous.name)
                continue

        draft = parse_item_line(line, i)
        if draft is not None:
            drafts.append(draft)
        previous = draft

    return drafts


# ── Section grouping ─────────────────────────────────

def detect_headers(lines: Sequence[str], skip: Iterable[int] = ()) -> List[Tuple[int, str]]:
    skipped = set(skip)
    return [
        (i, clean_category_name(line))
        for i, line in enumerate(lines)
        if i not in skipped and is_likely_category_header(line)
    ]


def group_by_headers(
    lines: Sequence[str],
    drafts: Sequence[ItemDraft],
    skip: Iterable[int] = (),
) -> List[Tuple[str, List[ItemDraft]]]:
    """
    Assign drafts to the section whose span [header, next header) holds their line.

    Without headers everything lands in one "Menu Items" section. With
    headers, drafts above the first heading belong to no section and are
    dropped. Sections without items are skipped.
    """
    headers = detect_headers(lines, skip)
    if not headers:
        return [(DEFAULT_SECTION, list(drafts))] if drafts else []

    sections: List[Tuple[str, List[ItemDraft]]] = []
    for n, (start, name) in enumerate(headers):
        end = headers[n + 1][0] if n + 1 < len(headers) else len(lines)
        members = [d for d in drafts if start <= d.line_index < end]
        if members:
            sections.append((name, members))
    return sections


# ── Debug classification ─────────────────────────────

def classify_menu_lines(text: str, venue_terms: Sequence[str] = ()) -> List[ClassifiedLine]:
    lines = split_lines(text)
    _, name_idx = find_restaurant_name(lines, venue_terms)
    out: List[ClassifiedLine] = []
    for i, line in enumerate(lines):
        if i == name_idx:
            kind = "restaurant_name"
        elif is_likely_category_header(line):
            kind = "heading"
        elif is_likely_menu_item(line):
            kind = "menu_item"
        else:
            kind = "other"
        out.append(ClassifiedLine(index=i, text=line, line_type=kind))
    return out
