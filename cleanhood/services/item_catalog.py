"""
Item catalog
Maps free-text pickup item names to a material category
"""

from typing import Iterable, Tuple

from cleanhood.models import MaterialCategory, PickupItem, PointSettings

RECYCLABLE_KEYWORDS = (
    "بلاستيك",
    "ورق",
    "كرتون",
    "زجاج",
    "معدن",
    "ألمنيوم",
    "إلكتروني",
    "plastic",
    "paper",
    "cardboard",
    "glass",
    "metal",
    "aluminum",
    "e-waste",
    "electronic",
)

ORGANIC_KEYWORDS = (
    "عضوي",
    "طعام",
    "organic",
    "food",
    "compost",
)

def resolve_category(item_name: str) -> MaterialCategory:
    """Category for an item name; unknown names are general waste"""
    name = (item_name or "").strip().lower()
    if any(keyword in name for keyword in RECYCLABLE_KEYWORDS):
        return MaterialCategory.RECYCLABLE
    if any(keyword in name for keyword in ORGANIC_KEYWORDS):
        return MaterialCategory.ORGANIC
    return MaterialCategory.GENERAL

def category_totals(items: Iterable[PickupItem]) -> Tuple[int, int]:
    """Total kilograms of recyclable and organic material"""
    recyclable = organic = 0
    for item in items:
        if item.category == MaterialCategory.RECYCLABLE:
            recyclable += item.quantity
        elif item.category == MaterialCategory.ORGANIC:
            organic += item.quantity
    return recyclable, organic

def pickup_points(items: Iterable[PickupItem], point_settings: PointSettings) -> int:
    """Points earned for a completed pickup; general waste earns nothing"""
    recyclable, organic = category_totals(items)
    return (
        recyclable * point_settings.recycling_per_kg
        + organic * point_settings.organic_per_kg
    )
