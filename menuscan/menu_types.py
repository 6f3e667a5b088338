"""
menuscan Menu Types — parsed menu records handed to callers.

Every record is built once per parse / combine call and is not mutated after
it is returned. `to_dict()` produces the JSON-compatible shape consumed by
the export / display side, using camelCase keys:

  ParsedMenu
  {
    "restaurant": "Crispy Spuds Restaurant",
    "categories": [
      {
        "name": "Fries & Sides",
        "items": [{"name": "...", "price": 3.99, "currency": "USD", ...}],
        "healthyItemsCount": 0,
        "averagePrice": 4.99,
        "qualityDistribution": {"premium": 0, "standard": 0, "budget": 3}
      }
    ],
    "extractedAt": "...Z",
    "menuId": "menu_...",
    "summary": {...}
  }
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


QUALITY_TIERS = ("premium", "standard", "budget")


# ────────────────────────────────────────────────
# Item level
# ────────────────────────────────────────────────

@dataclass
class NutritionInfo:
    """Estimated macro-nutrients in grams."""
    protein: float = 15
    carbs: float = 30
    fat: float = 10
    fiber: float = 5

    def to_dict(self) -> Dict[str, Any]:
        return {
            "protein": self.protein,
            "carbs": self.carbs,
            "fat": self.fat,
            "fiber": self.fiber,
        }


@dataclass
class MenuItem:
    name: str
    description: Optional[str] = None
    price: Optional[float] = None
    currency: Optional[str] = None
    is_healthy: bool = False
    health_score: int = 50
    quality: str = "standard"
    allergens: List[str] = field(default_factory=list)
    dietary_tags: List[str] = field(default_factory=list)
    calories: int = 300
    nutrition_info: NutritionInfo = field(default_factory=NutritionInfo)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"name": self.name}
        if self.description:
            out["description"] = self.description
        if self.price is not None:
            out["price"] = self.price
            out["currency"] = self.currency
        out.update({
            "isHealthy": self.is_healthy,
            "healthScore": self.health_score,
            "quality": self.quality,
            "allergens": list(self.allergens),
            "dietaryTags": list(self.dietary_tags),
            "calories": self.calories,
            "nutritionInfo": self.nutrition_info.to_dict(),
        })
        return out


# ────────────────────────────────────────────────
# Aggregates
# ────────────────────────────────────────────────

@dataclass
class QualityDistribution:
    premium: int = 0
    standard: int = 0
    budget: int = 0

    @property
    def total(self) -> int:
        return self.premium + self.standard + self.budget

    def to_dict(self) -> Dict[str, int]:
        return {"premium": self.premium, "standard": self.standard, "budget": self.budget}


@dataclass
class PriceRange:
    min: float = 0
    max: float = 0

    def to_dict(self) -> Dict[str, float]:
        return {"min": self.min, "max": self.max}


@dataclass
class DietaryOptions:
    vegetarian: int = 0
    vegan: int = 0
    gluten_free: int = 0
    dairy_free: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "vegetarian": self.vegetarian,
            "vegan": self.vegan,
            "glutenFree": self.gluten_free,
            "dairyFree": self.dairy_free,
        }


@dataclass
class MenuCategory:
    name: str
    items: List[MenuItem] = field(default_factory=list)
    healthy_items_count: int = 0
    average_price: Optional[float] = None
    quality_distribution: QualityDistribution = field(default_factory=QualityDistribution)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "name": self.name,
            "items": [it.to_dict() for it in self.items],
            "healthyItemsCount": self.healthy_items_count,
        }
        # averagePrice is omitted (not zero) when no item carries a price
        if self.average_price is not None:
            out["averagePrice"] = self.average_price
        out["qualityDistribution"] = self.quality_distribution.to_dict()
        return out


@dataclass
class MenuSummary:
    total_items: int = 0
    total_categories: int = 0
    items_with_prices: int = 0
    healthy_items: int = 0
    average_price: float = 0
    price_range: PriceRange = field(default_factory=PriceRange)
    quality_distribution: QualityDistribution = field(default_factory=QualityDistribution)
    top_allergens: List[str] = field(default_factory=list)
    dietary_options: DietaryOptions = field(default_factory=DietaryOptions)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalItems": self.total_items,
            "totalCategories": self.total_categories,
            "itemsWithPrices": self.items_with_prices,
            "healthyItems": self.healthy_items,
            "averagePrice": self.average_price,
            "priceRange": self.price_range.to_dict(),
            "qualityDistribution": self.quality_distribution.to_dict(),
            "topAllergens": list(self.top_allergens),
            "dietaryOptions": self.dietary_options.to_dict(),
        }


# ────────────────────────────────────────────────
# Menu level
# ────────────────────────────────────────────────

@dataclass
class ParsedMenu:
    restaurant: str
    categories: List[MenuCategory]
    extracted_at: str
    menu_id: str
    summary: MenuSummary

    @property
    def items(self) -> List[MenuItem]:
        """All items across categories, in category order."""
        return [it for cat in self.categories for it in cat.items]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "restaurant": self.restaurant,
            "categories": [c.to_dict() for c in self.categories],
            "extractedAt": self.extracted_at,
            "menuId": self.menu_id,
            "summary": self.summary.to_dict(),
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


@dataclass
class ProcessedMenus:
    menus: List[ParsedMenu]
    combined_summary: MenuSummary

    def to_dict(self) -> Dict[str, Any]:
        return {
            "menus": [m.to_dict() for m in self.menus],
            "combinedSummary": self.combined_summary.to_dict(),
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)
