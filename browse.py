from typing import Dict, List, Optional

from catalog import round_rating
from schemas import Order, Product, User, UserRole

SORT_OPTIONS = ("featured", "price_low", "price_high", "rating")


def filter_products(
    products: List[Product],
    query: str = "",
    category: str = "All",
    sort_by: str = "featured",
    deals_only: bool = False,
) -> List[Product]:
    result = list(products)

    if deals_only:
        result = [p for p in result if p.original_price and p.original_price > p.price]

    q = query.lower()
    result = [
        p for p in result
        if (q in p.name.lower() or q in p.category.lower())
        and (category == "All" or p.category == category)
    ]

    if sort_by == "price_low":
        result.sort(key=lambda p: p.price)
    elif sort_by == "price_high":
        result.sort(key=lambda p: p.price, reverse=True)
    elif sort_by == "rating":
        result.sort(key=lambda p: p.rating, reverse=True)
    return result


def categories(products: List[Product]) -> List[str]:
    return list(dict.fromkeys(p.category for p in products))


def storefront_summary(products: List[Product]) -> Dict[str, Optional[float]]:
    total_reviews = sum(p.reviews_count for p in products)
    avg = round_rating(sum(p.rating for p in products) / len(products)) if products else None
    return {"products": len(products), "total_reviews": total_reviews, "average_rating": avg}


def admin_overview(users: List[User], products: List[Product], orders: List[Order]) -> Dict[str, float]:
    return {
        "total_revenue": sum(o.total for o in orders),
        "total_orders": len(orders),
        "total_products": len(products),
        "total_users": len(users),
        "buyers": sum(1 for u in users if u.role == UserRole.BUYER),
        "vendors": sum(1 for u in users if u.role == UserRole.VENDOR),
        "admins": sum(1 for u in users if u.role == UserRole.ADMIN),
    }
