from typing import Iterable, List

from .models import Shop


def shop_matches(shop: Shop, query: str) -> bool:
    """True if query occurs in the shop's name, location, or any product name or category"""
    query = query.lower()
    return (
        query in shop.shop_name.lower()
        or query in shop.location.lower()
        or any(
            query in product.name.lower() or query in product.category.lower()
            for product in shop.products
        )
    )


def filter_shops(shops: Iterable[Shop], query: str) -> List[Shop]:
    """Case-insensitive substring search; a blank query keeps every shop"""
    query = (query or "").strip()
    if not query:
        return list(shops)
    return [shop for shop in shops if shop_matches(shop, query)]
