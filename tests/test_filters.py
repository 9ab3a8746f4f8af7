import pytest

from recommender.filters import (
    PriceFilter,
    browse,
    catalog_stats,
    filter_courses,
    list_categories,
    parse_price_filter,
)


class TestFilterCourses:
    """Test category / level / price filtering."""

    def test_no_filters_keeps_everything(self, sample_courses):
        assert filter_courses(sample_courses) == sample_courses

    def test_all_sentinels_mean_no_filter(self, sample_courses):
        results = filter_courses(
            sample_courses, category="all_categories", level="all_levels", price="all_prices"
        )
        assert len(results) == len(sample_courses)

    def test_category(self, sample_courses):
        results = filter_courses(sample_courses, category="Programming")
        assert [c.id for c in results] == ["2"]

    def test_level(self, sample_courses):
        results = filter_courses(sample_courses, level="Beginner")
        assert [c.id for c in results] == ["1", "2"]

    @pytest.mark.parametrize(
        "price, expected",
        [
            ("free", ["1"]),
            ("paid", ["2", "3", "4"]),
            ("under50", ["1", "2"]),
            ("under100", ["1", "2", "3"]),
            (PriceFilter.PAID, ["2", "3", "4"]),
        ],
    )
    def test_price_bands(self, sample_courses, price, expected):
        assert [c.id for c in filter_courses(sample_courses, price=price)] == expected

    def test_combined_filters(self, sample_courses):
        results = filter_courses(sample_courses, level="Beginner", price="paid")
        assert [c.id for c in results] == ["2"]

    def test_unknown_price_filter(self, sample_courses):
        with pytest.raises(ValueError, match="Unknown price filter"):
            filter_courses(sample_courses, price="cheap")


class TestParsePriceFilter:

    def test_empty_means_all(self):
        assert parse_price_filter(None) is PriceFilter.ALL_PRICES
        assert parse_price_filter("") is PriceFilter.ALL_PRICES

    def test_known_value(self):
        assert parse_price_filter("under50") is PriceFilter.UNDER_50


class TestCatalogSummary:
    """Test categories and headline stats."""

    def test_categories_sorted_unique(self, sample_courses, course_factory):
        extra = course_factory("5", category="Programming")
        assert list_categories(sample_courses + [extra]) == [
            "Data Science", "Machine Learning", "Programming", "Web Development",
        ]

    def test_stats(self, sample_courses):
        stats = catalog_stats(sample_courses)
        assert stats["total_courses"] == 4
        assert stats["total_students"] == 21450 + 9000 + 29840 + 52300
        assert stats["average_rating"] == 4.7  # (4.4 + 4.7 + 4.7 + 4.9) / 4 = 4.675

    def test_stats_empty(self):
        assert catalog_stats([]) == {"total_courses": 0, "total_students": 0, "average_rating": 0.0}


class TestBrowse:
    """Test the trending-or-search-then-filter flow."""

    def test_default_is_full_catalog(self, engine):
        assert [c.id for c in browse(engine)] == ["1", "2", "3", "4"]

    def test_trending(self, engine):
        assert [c.id for c in browse(engine, trending=True, trending_limit=2)] == ["4", "3"]

    def test_search_overrides_trending(self, engine):
        results = browse(engine, query="python", trending=True)
        assert [c.id for c in results] == ["1", "2"]

    def test_whitespace_query_keeps_trending(self, engine):
        results = browse(engine, query="   ", trending=True, trending_limit=2)
        assert [c.id for c in results] == ["4", "3"]

    def test_search_then_filter(self, engine):
        results = browse(engine, query="python", price="free")
        assert [c.id for c in results] == ["1"]

    def test_trending_then_filter(self, engine):
        results = browse(engine, trending=True, level="Intermediate")
        assert [c.id for c in results] == ["3"]
