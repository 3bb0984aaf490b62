"""Category classifier - display icon and color for transaction/activity categories"""

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple


@dataclass(frozen=True)
class CategoryStyle:
    key: str
    label: str
    icon: str
    color: str


OTHER = "other"

CATEGORY_STYLES: Dict[str, CategoryStyle] = {
    "groceries": CategoryStyle("groceries", "Groceries", "ShoppingCart", "green"),
    "dining": CategoryStyle("dining", "Dining", "Utensils", "orange"),
    "gas": CategoryStyle("gas", "Gas & Fuel", "Fuel", "blue"),
    "shopping": CategoryStyle("shopping", "Shopping", "ShoppingBag", "purple"),
    "entertainment": CategoryStyle("entertainment", "Entertainment", "Film", "pink"),
    "travel": CategoryStyle("travel", "Travel", "Plane", "indigo"),
    "utilities": CategoryStyle("utilities", "Utilities", "Zap", "yellow"),
    "healthcare": CategoryStyle("healthcare", "Healthcare", "Heart", "red"),
    "payment": CategoryStyle("payment", "Payment", "CreditCard", "success"),
    OTHER: CategoryStyle(OTHER, "Other", "MoreHorizontal", "gray"),
}

# Choices for the transaction category filter; payments are not a spend category
CATEGORY_OPTIONS: List[Tuple[str, str]] = [
    (style.key, style.label) for style in CATEGORY_STYLES.values() if style.key != "payment"
]


def normalize_category(category: Any) -> str:
    """Table key for a free-text category, or "other" when it matches nothing"""
    if not isinstance(category, str):
        return OTHER
    key = category.strip().lower()
    return key if key in CATEGORY_STYLES else OTHER


def style_for(category: Any) -> CategoryStyle:
    return CATEGORY_STYLES[normalize_category(category)]


def icon_for(category: Any) -> str:
    return style_for(category).icon


def color_for(category: Any) -> str:
    return style_for(category).color
