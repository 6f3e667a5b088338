"""
Menu rollups.

- build_category:  per-section aggregates (healthy count, average price,
                   quality tier distribution)
- summarize_items: menu-level MenuSummary over a flat item list
- summarize_menu:  MenuSummary for one menu's categories
- combine_menus:   ProcessedMenus over several parsed menus

All averages only consider priced items; with nothing priced the menu
summary reports 0 (and a 0..0 price range) while a category omits its
average entirely.
"""
from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Optional, Sequence

from .menu_types import (
    DietaryOptions,
    MenuCategory,
    MenuItem,
    MenuSummary,
    ParsedMenu,
    PriceRange,
    ProcessedMenus,
    QualityDistribution,
)

TOP_ALLERGEN_LIMIT = 5


def _priced(items: Iterable[MenuItem]) -> List[float]:
    return [it.price for it in items if it.price]


def quality_distribution(items: Sequence[MenuItem]) -> QualityDistribution:
    tiers = Counter(it.quality for it in items)
    return QualityDistribution(
        premium=tiers.get("premium", 0),
        standard=tiers.get("standard", 0),
        budget=tiers.get("budget", 0),
    )


def average_price(items: Sequence[MenuItem]) -> Optional[float]:
    prices = _priced(items)
    if not prices:
        return None
    return sum(prices) / len(prices)


def build_category(name: str, items: Sequence[MenuItem]) -> MenuCategory:
    items = list(items)
    return MenuCategory(
        name=name,
        items=items,
        healthy_items_count=sum(1 for it in items if it.is_healthy),
        average_price=average_price(items),
        quality_distribution=quality_distribution(items),
    )


def top_allergens(items: Sequence[MenuItem], limit: int = TOP_ALLERGEN_LIMIT) -> List[str]:
    """Most frequent allergens first; ties keep first-seen order."""
    counts: Counter = Counter()
    for it in items:
        counts.update(it.allergens)
    # Counter keeps insertion order and sorted() is stable
    ranked = sorted(counts.items(), key=lambda kv: -kv[1])
    return [name for name, _ in ranked[:limit]]


def dietary_options(items: Sequence[MenuItem]) -> DietaryOptions:
    def _count(tag: str) -> int:
        return sum(1 for it in items if tag in it.dietary_tags)

    return DietaryOptions(
        vegetarian=_count("vegetarian"),
        vegan=_count("vegan"),
        gluten_free=_count("gluten-free"),
        dairy_free=_count("dairy-free"),
    )


def summarize_items(items: Sequence[MenuItem], total_categories: int) -> MenuSummary:
    prices = _priced(items)
    return MenuSummary(
        total_items=len(items),
        total_categories=total_categories,
        items_with_prices=len(prices),
        healthy_items=sum(1 for it in items if it.is_healthy),
        average_price=sum(prices) / len(prices) if prices else 0,
        price_range=PriceRange(min=min(prices), max=max(prices)) if prices else PriceRange(),
        quality_distribution=quality_distribution(items),
        top_allergens=top_allergens(items),
        dietary_options=dietary_options(items),
    )


def summarize_menu(categories: Sequence[MenuCategory]) -> MenuSummary:
    items = [it for cat in categories for it in cat.items]
    return summarize_items(items, total_categories=len(categories))


def combine_menus(menus: Sequence[ParsedMenu]) -> ProcessedMenus:
    """
    Fold several parsed menus into one combined summary.

    Category counts are summed per menu, not de-duplicated by name.
    """
    menus = list(menus)
    items = [it for menu in menus for it in menu.items]
    total_categories = sum(len(menu.categories) for menu in menus)
    return ProcessedMenus(
        menus=menus,
        combined_summary=summarize_items(items, total_categories),
    )
