"""
Browse helpers for the Discover view: category / level / price filters,
category list, headline stats, and the trending-or-search-then-filter flow.

Filter values of None, "" or the "all_*" sentinels mean "no filter".
"""

from enum import Enum
from typing import Any

from recommender.engine import RecommendationEngine
from recommender.models import Course

ALL_CATEGORIES = "all_categories"
ALL_LEVELS     = "all_levels"


class PriceFilter(str, Enum):
    ALL_PRICES = "all_prices"
    FREE       = "free"
    PAID       = "paid"
    UNDER_50   = "under50"
    UNDER_100  = "under100"


def _price_ok(course: Course, price: PriceFilter) -> bool:
    if price is PriceFilter.FREE:
        return course.price == 0
    if price is PriceFilter.PAID:
        return course.price > 0
    if price is PriceFilter.UNDER_50:
        return course.price < 50
    if price is PriceFilter.UNDER_100:
        return course.price < 100
    return True


def parse_price_filter(value: str | PriceFilter | None) -> PriceFilter:
    """Map a raw filter value to PriceFilter; raises ValueError for unknown names."""
    if not value:
        return PriceFilter.ALL_PRICES
    try:
        return PriceFilter(value)
    except ValueError:
        valid = ", ".join(p.value for p in PriceFilter)
        raise ValueError(f"Unknown price filter {value!r} (expected one of: {valid})") from None


def filter_courses(
    courses: list[Course],
    category: str | None = None,
    level: str | None = None,
    price: str | PriceFilter | None = None,
) -> list[Course]:
    """Apply equality filters on category and level plus a price band; order is kept."""
    price_filter = parse_price_filter(price)
    use_category = bool(category) and category != ALL_CATEGORIES
    use_level    = bool(level) and level != ALL_LEVELS

    results = []
    for c in courses:
        if use_category and c.category != category:
            continue
        if use_level and c.level != level:
            continue
        if not _price_ok(c, price_filter):
            continue
        results.append(c)
    return results


def list_categories(courses: list[Course]) -> list[str]:
    return sorted({c.category for c in courses})


def catalog_stats(courses: list[Course]) -> dict[str, Any]:
    if not courses:
        return {"total_courses": 0, "total_students": 0, "average_rating": 0.0}
    return {
        "total_courses":  len(courses),
        "total_students": sum(c.students for c in courses),
        "average_rating": round(sum(c.rating for c in courses) / len(courses), 1),
    }


def browse(
    engine: RecommendationEngine,
    query: str = "",
    trending: bool = False,
    category: str | None = None,
    level: str | None = None,
    price: str | PriceFilter | None = None,
    trending_limit: int = 12,
) -> list[Course]:
    """
    Courses for the Discover view.

    Starts from the trending list (or the full catalog), switches to search
    results when the query is non-blank, then applies the filters.
    """
    if query.strip():
        courses = engine.search_courses(query)
    elif trending:
        courses = engine.get_trending_courses(trending_limit)
    else:
        courses = list(engine.courses)
    return filter_courses(courses, category=category, level=level, price=price)
