"""
Unit tests for the query/filter builder.
"""

import pytest

from app.core.errors import BadRequestError
from app.services.query_builder import (
    DEFAULT_SORT,
    build_product_query,
    build_recommendation_query,
    build_search_query,
    parse_natural_language,
    resolve_sort,
    split_csv,
)


class TestBuildProductQuery:

    def test_only_approved_by_default(self):
        query = build_product_query()

        assert query.filter == {"approved": True}
        assert query.sort == DEFAULT_SORT
        assert query.page == 1
        assert query.limit == 12
        assert query.skip == 0

    def test_price_range_and_category(self):
        query = build_product_query(category="laptop", min_price=100, max_price=600)

        assert query.filter == {
            "category": "laptop",
            "price": {"$gte": 100, "$lte": 600},
            "approved": True,
        }

    def test_open_ended_price(self):
        assert build_product_query(min_price=0).filter["price"] == {"$gte": 0}
        assert build_product_query(max_price=50).filter["price"] == {"$lte": 50}

    def test_csv_tags_become_membership(self):
        query = build_product_query(
            badges="best-value, eco-friendly",
            target_audience="teacher",
            use_case="programming,,research",
        )

        assert query.filter["badges"] == {"$in": ["best-value", "eco-friendly"]}
        assert query.filter["target_audience"] == {"$in": ["teacher"]}
        assert query.filter["use_case"] == {"$in": ["programming", "research"]}

    def test_text_search(self):
        query = build_product_query(search="  chromebook ")
        assert query.filter["$text"] == {"$search": "chromebook"}

    def test_blank_search_ignored(self):
        assert "$text" not in build_product_query(search="   ").filter

    def test_pagination(self):
        query = build_product_query(page=3, limit=5)

        assert query.skip == 10
        assert query.total_pages(11) == 3
        assert query.total_pages(0) == 0

    def test_invalid_pagination_falls_back(self):
        query = build_product_query(page=0, limit=-4)

        assert query.page == 1
        assert query.limit == 12


class TestSort:

    @pytest.mark.parametrize("mode, expected", [
        ("price-asc", [("price", 1)]),
        ("price-desc", [("price", -1)]),
        ("rating", [("rating", -1)]),
        ("newest", [("created_at", -1)]),
        ("cheapest-first", DEFAULT_SORT),
        (None, DEFAULT_SORT),
    ])
    def test_resolve_sort(self, mode, expected):
        assert resolve_sort(mode) == expected

    def test_default_is_recommended_then_rating(self):
        assert DEFAULT_SORT == [("system_recommended", -1), ("rating", -1)]


class TestNaturalLanguage:

    def test_need_item_for_purpose(self):
        assert parse_natural_language("I need a laptop for programming") == {
            "category": "laptop",
            "use_case": "programming",
        }

    def test_looking_for_skips_article(self):
        assert parse_natural_language("Looking for a tablet") == {"category": "tablet"}

    def test_purpose_phrase_is_mapped(self):
        parsed = parse_natural_language("I want to buy a webcam for teaching online.")

        assert parsed == {"category": "webcam", "use_case": "teaching-online"}

    def test_unknown_purpose_passes_through(self):
        assert parse_natural_language("need projector for robotics club")["use_case"] == "robotics club"

    def test_no_recognised_pattern(self):
        assert parse_natural_language("something quiet and cheap") == {}

    def test_search_query_is_top_twenty(self):
        query = build_search_query("I need a laptop for programming")

        assert query.filter == {"approved": True, "category": "laptop", "use_case": "programming"}
        assert query.sort == DEFAULT_SORT
        assert query.limit == 20

    @pytest.mark.parametrize("text", [None, "", "   "])
    def test_search_query_required(self, text):
        with pytest.raises(BadRequestError) as exc_info:
            build_search_query(text)
        assert exc_info.value.message == "Search query required"


class TestRecommendations:

    def test_system_recommended_only(self):
        query = build_recommendation_query()

        assert query.filter == {"approved": True, "system_recommended": True}
        assert query.sort == [("rating", -1)]
        assert query.limit == 6

    def test_profile_filters(self):
        query = build_recommendation_query(user_type="student", use_case="homework", budget=400)

        assert query.filter["target_audience"] == "student"
        assert query.filter["use_case"] == "homework"
        assert query.filter["price"] == {"$lte": 400}


def test_split_csv():
    assert split_csv(None) == []
    assert split_csv(" a, b ,,c") == ["a", "b", "c"]
