# menuscan/menu_parser.py
"""
Menu parser — raw OCR text to a ParsedMenu.

Public API:
- parse_menu_text(text, config=None) -> ParsedMenu
- MenuParser(config).parse(text)     -> ParsedMenu
- ParserConfig                         (known-item catalog selection)

Pipeline:
  1. split into trimmed, non-empty lines
  2. detect the restaurant name (first qualifying line of the first three);
     only a line with a venue word is kept out of the items
  3. build item drafts:
       a. known-item reconciliation against the configured catalog
       b. line-based extraction when (a) finds nothing
  4. enrich every draft into a MenuItem
  5. group into sections and aggregate each category
  6. stamp menu id + extraction time, compute the menu summary

Parsing never fails on content: text without usable lines yields a menu
with no categories, an empty restaurant name and a zeroed summary.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple

from .menu_summary import build_category, summarize_menu
from .menu_types import MenuCategory, ParsedMenu
from .parsers.known_items import (
    CRISPY_SPUDS_CATALOG,
    KnownItemCatalog,
    group_known_items,
    reconcile_known_items,
)
from .parsers.menu_grammar import (
    build_line_items,
    find_restaurant_name,
    group_by_headers,
    has_venue_keyword,
    split_lines,
)
from .scoring.enrichment import ItemDraft, enrich_item

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParserConfig:
    """
    Parser knobs that are not keyword constants.

    `catalog` is the known-item seed list tried before free-form parsing.
    Without one, every document goes through line-based extraction.
    """
    catalog: Optional[KnownItemCatalog] = None

    @property
    def venue_terms(self) -> Tuple[str, ...]:
        return self.catalog.venue_terms if self.catalog else ()

    @classmethod
    def crispy_spuds(cls) -> "ParserConfig":
        return cls(catalog=CRISPY_SPUDS_CATALOG)


DEFAULT_CONFIG = ParserConfig()

CATALOGS = {
    "crispy_spuds": CRISPY_SPUDS_CATALOG,
}


def new_menu_id() -> str:
    return f"menu_{uuid.uuid4().hex}"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _enrich_sections(sections: Sequence[Tuple[str, List[ItemDraft]]]) -> List[MenuCategory]:
    return [
        build_category(name, [enrich_item(d) for d in drafts])
        for name, drafts in sections
    ]


class MenuParser:
    def __init__(self, config: Optional[ParserConfig] = None):
        self.config = config or DEFAULT_CONFIG

    def parse(self, text: str) -> ParsedMenu:
        if not isinstance(text, str):
            raise TypeError(f"menu text must be a str, got {type(text).__name__}")

        log.debug("Parsing menu text (%d chars)", len(text))

        restaurant, categories = self._parse_known_items(text)
        if not categories:
            restaurant, categories = self._parse_lines(text)

        menu = ParsedMenu(
            restaurant=restaurant,
            categories=categories,
            extracted_at=_now_iso(),
            menu_id=new_menu_id(),
            summary=summarize_menu(categories),
        )
        log.info(
            "Parsed menu %s: %d categories, %d items",
            menu.menu_id, menu.summary.total_categories, menu.summary.total_items,
        )
        return menu

    def _parse_known_items(self, text: str) -> Tuple[str, List[MenuCategory]]:
        catalog = self.config.catalog
        if catalog is None:
            return "", []
        drafts = reconcile_known_items(text, catalog)
        if not drafts:
            return "", []
        log.debug("Known-item reconciliation matched %d items", len(drafts))
        return catalog.restaurant, _enrich_sections(group_known_items(drafts))

    def _parse_lines(self, text: str) -> Tuple[str, List[MenuCategory]]:
        lines = split_lines(text)
        if not lines:
            return "", []

        restaurant, name_idx = find_restaurant_name(lines, self.config.venue_terms)
        # a Title Case name without a venue word may just as well be a dish
        venue_line = name_idx is not None and has_venue_keyword(restaurant, self.config.venue_terms)
        skip = (name_idx,) if venue_line else ()

        drafts = build_line_items(lines, skip=skip)
        log.debug("Extracted %d items with line parsing", len(drafts))

        sections = group_by_headers(lines, drafts, skip=skip)
        log.debug("Detected sections: %s", [name for name, _ in sections])
        if not sections:
            # nothing usable: a lone venue name does not make a menu
            return "", []
        return restaurant, _enrich_sections(sections)


def parse_menu_text(text: str, config: Optional[ParserConfig] = None) -> ParsedMenu:
    """Parse one menu's OCR text."""
    return MenuParser(config).parse(text)
