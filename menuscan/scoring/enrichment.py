"""
Item Enrichment Scoring

Derives per-item metadata from keyword presence in the item's source text
(its raw OCR line, or name + description) and its price:

  - health_score / is_healthy
  - quality tier (premium | standard | budget)
  - allergens
  - dietary tags
  - calories (rough estimate)
  - nutrition_info (protein / carbs / fat / fiber, rough estimate)

Every keyword test is a plain substring test on the lowercased text, so
"fried" also hits inside "deep-fried" and "tea" inside "steak". The keyword
lists and thresholds are fixed; output compatibility depends on them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..menu_types import MenuItem, NutritionInfo
from ..parsers.price_parser import DEFAULT_CURRENCY


# ── Vocabularies ─────────────────────────────────────

HEALTHY_KEYWORDS = [
    "grilled", "steamed", "baked", "roasted", "fresh", "organic",
    "salad", "vegetables", "quinoa", "kale", "spinach", "avocado",
    "lean", "low-fat", "whole grain", "brown rice", "salmon",
    "chicken breast", "turkey", "tofu", "legumes", "beans",
]

UNHEALTHY_KEYWORDS = [
    "fried", "deep-fried", "crispy", "breaded", "battered",
    "creamy", "buttery", "cheese sauce", "bacon", "sausage",
    "processed", "smoked", "cured", "mayo", "ranch", "loaded",
]

PREMIUM_INGREDIENTS = [
    "truffle", "wagyu", "lobster", "caviar", "organic", "artisanal", "parmesan",
]

ALLERGENS = [
    "nuts", "peanuts", "dairy", "milk", "eggs", "wheat", "gluten",
    "soy", "shellfish", "fish", "sesame", "tree nuts",
]

DIETARY_TAGS = [
    "vegetarian", "vegan", "gluten-free", "dairy-free", "keto",
    "paleo", "low-carb", "sugar-free", "organic", "non-gmo",
]


# ── Thresholds ───────────────────────────────────────

HEALTHY_WEIGHT = 20
UNHEALTHY_WEIGHT = 15
HEALTH_BASELINE = 50
HEALTHY_CUTOFF = 60

PREMIUM_PRICE = 25
STANDARD_PRICE = 15

# Food-type base calories. Applied in order; a later hit overrides an
# earlier one ("chicken salad with iced tea" ends at the tea value).
CALORIE_BASE_DEFAULT = 300
CALORIE_BASES = [
    (("salad",), 200),
    (("soup",), 150),
    (("burger", "pizza"), 600),
    (("pasta",), 500),
    (("steak", "ribs"), 700),
    (("dessert", "cake"), 400),
    (("fries",), 350),
    (("drinks", "tea"), 150),
    (("milkshake",), 400),
    (("lemonade",), 120),
]

# Additive adjustments; each group applies at most once.
CALORIE_ADJUSTMENTS = [
    (("fried", "crispy"), 200),
    (("grilled", "steamed"), -50),
    (("loaded", "cheese"), 150),
    (("truffle", "parmesan"), 100),
    (("sweet potato",), 50),
]

CALORIE_FLOOR = 50


@dataclass
class ItemDraft:
    """An item as built from OCR text, before enrichment."""
    name: str
    description: Optional[str] = None
    price: Optional[float] = None
    source_text: str = ""
    line_index: int = -1


# ── Helpers ──────────────────────────────────────────

def _any_in(text: str, keywords: Sequence[str]) -> bool:
    return any(kw in text for kw in keywords)


def _hits(text: str, keywords: Sequence[str]) -> List[str]:
    """Keywords present in text, each counted once, vocabulary order."""
    return [kw for kw in keywords if kw in text]


# ── Scoring axes ─────────────────────────────────────

def health_score(text: str) -> int:
    healthy = len(_hits(text, HEALTHY_KEYWORDS))
    unhealthy = len(_hits(text, UNHEALTHY_KEYWORDS))
    raw = healthy * HEALTHY_WEIGHT - unhealthy * UNHEALTHY_WEIGHT + HEALTH_BASELINE
    return max(0, min(100, raw))


def quality_tier(text: str, price: Optional[float]) -> str:
    if price:
        if price >= PREMIUM_PRICE:
            return "premium"
        if price >= STANDARD_PRICE:
            return "standard"
        return "budget"
    return "premium" if _any_in(text, PREMIUM_INGREDIENTS) else "standard"


def detect_allergens(text: str) -> List[str]:
    found = _hits(text, ALLERGENS)
    if "cheese" in text and "dairy" not in found:
        found.append("dairy")
        found.sort(key=ALLERGENS.index)
    return found


def detect_dietary_tags(text: str) -> List[str]:
    """Tags whose spaced form ("gluten free") appears; the text itself is not normalised."""
    return [tag for tag in DIETARY_TAGS if tag.replace("-", " ") in text]


def estimate_calories(text: str, price: Optional[float] = None) -> int:
    calories = CALORIE_BASE_DEFAULT
    for keywords, base in CALORIE_BASES:
        if _any_in(text, keywords):
            calories = base

    for keywords, delta in CALORIE_ADJUSTMENTS:
        if _any_in(text, keywords):
            calories += delta

    # pricier plates tend to be bigger portions
    if price and price > 20:
        calories += 100
    if price and price < 10:
        calories -= 50

    return max(CALORIE_FLOOR, calories)


def estimate_nutrition(text: str) -> NutritionInfo:
    info = NutritionInfo(protein=15, carbs=30, fat=10, fiber=5)
    if _any_in(text, ("chicken", "beef", "fish")):
        info.protein += 20
    if _any_in(text, ("pasta", "rice", "bread", "fries")):
        info.carbs += 25
    if _any_in(text, ("avocado", "nuts", "cheese", "loaded")):
        info.fat += 15
    if _any_in(text, ("vegetables", "beans", "quinoa")):
        info.fiber += 8
    if "sweet potato" in text:
        info.fiber += 5
        info.carbs += 10
    return info


# ── Entry point ──────────────────────────────────────

def enrich_item(draft: ItemDraft) -> MenuItem:
    """Build the final MenuItem for a draft, scoring its source text."""
    text = (draft.source_text or " ".join(
        p for p in (draft.name, draft.description) if p
    )).lower()

    score = health_score(text)
    price = draft.price if draft.price else None

    return MenuItem(
        name=draft.name,
        description=draft.description or None,
        price=price,
        currency=DEFAULT_CURRENCY if price is not None else None,
        is_healthy=score >= HEALTHY_CUTOFF,
        health_score=score,
        quality=quality_tier(text, price),
        allergens=detect_allergens(text),
        dietary_tags=detect_dietary_tags(text),
        calories=estimate_calories(text, price),
        nutrition_info=estimate_nutrition(text),
    )
