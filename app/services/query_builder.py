"""
Query/filter builder: turns request parameters into MongoDB filters, sort
orders and pagination. Pure functions, no I/O.
"""

import math
import re
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel

from app.core.errors import BadRequestError

DEFAULT_PAGE = 1
DEFAULT_PAGE_LIMIT = 12
SEARCH_RESULT_LIMIT = 20
RECOMMENDATION_LIMIT = 6

SORT_MODES: Dict[str, List[Tuple[str, int]]] = {
    "price-asc": [("price", 1)],
    "price-desc": [("price", -1)],
    "rating": [("rating", -1)],
    "newest": [("created_at", -1)],
}
DEFAULT_SORT: List[Tuple[str, int]] = [("system_recommended", -1), ("rating", -1)]

# Phrase found after a trailing "for ..." -> use-case tag
USE_CASE_PHRASES = {
    "teaching online": "teaching-online",
    "online teaching": "teaching-online",
    "presentations": "presentations",
    "programming": "programming",
    "coding": "programming",
    "design": "graphic-design",
    "video editing": "video-editing",
    "research": "research",
    "writing": "writing",
    "meetings": "meetings",
    "printing": "printing",
    "homework": "homework",
    "notes": "note-taking",
    "note taking": "note-taking",
}

ITEM_PATTERN = re.compile(
    r"\b(?:buy|looking\s+for|need)\s+(?:(?:a|an|the|some)\s+)?(\w+)",
    re.IGNORECASE,
)
PURPOSE_PATTERN = re.compile(r"^.*\bfor\s+([\w\s-]+?)[\s.!?]*$", re.IGNORECASE | re.DOTALL)


class ProductQuery(BaseModel):
    """A ready-to-run product lookup"""
    filter: Dict[str, Any]
    sort: List[Tuple[str, int]]
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_PAGE_LIMIT

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    def total_pages(self, total: int) -> int:
        return math.ceil(total / self.limit) if self.limit else 0


def split_csv(value: Optional[str]) -> List[str]:
    """'a, b,,c' -> ['a', 'b', 'c']"""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def resolve_sort(sort: Optional[str]) -> List[Tuple[str, int]]:
    """Unknown or missing sort modes fall back to the recommended-first order"""
    return list(SORT_MODES.get(sort, DEFAULT_SORT))


def build_product_query(
    category: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    search: Optional[str] = None,
    badges: Optional[str] = None,
    target_audience: Optional[str] = None,
    use_case: Optional[str] = None,
    sort: Optional[str] = None,
    page: Optional[int] = None,
    limit: Optional[int] = None,
) -> ProductQuery:
    """Public catalogue listing; only approved products are ever returned"""
    query: Dict[str, Any] = {}

    if category:
        query["category"] = category

    if min_price is not None or max_price is not None:
        price_query = {}
        if min_price is not None:
            price_query["$gte"] = min_price
        if max_price is not None:
            price_query["$lte"] = max_price
        query["price"] = price_query

    for field, raw in (("badges", badges), ("target_audience", target_audience), ("use_case", use_case)):
        values = split_csv(raw)
        if values:
            query[field] = {"$in": values}

    if search and search.strip():
        query["$text"] = {"$search": search.strip()}

    query["approved"] = True

    page = page if page and page > 0 else DEFAULT_PAGE
    limit = limit if limit and limit > 0 else DEFAULT_PAGE_LIMIT

    return ProductQuery(filter=query, sort=resolve_sort(sort), page=page, limit=limit)


def parse_natural_language(text: str) -> Dict[str, str]:
    """
    Extract a category and a use case from a free-form request.

    "I need a laptop for programming" -> {"category": "laptop", "use_case": "programming"}

    The category is the first word after "buy"/"looking for"/"need" (articles
    skipped). The use case comes from a trailing "for ..." clause after that
    word; phrases missing from USE_CASE_PHRASES pass through unchanged.
    """
    extracted: Dict[str, str] = {}
    remainder = text

    item_match = ITEM_PATTERN.search(text)
    if item_match:
        extracted["category"] = item_match.group(1).lower()
        remainder = text[item_match.end():]

    purpose_match = PURPOSE_PATTERN.search(remainder)
    if purpose_match:
        purpose = " ".join(purpose_match.group(1).lower().split())
        if purpose:
            extracted["use_case"] = USE_CASE_PHRASES.get(purpose, purpose)

    return extracted


def build_search_query(text: Optional[str]) -> ProductQuery:
    """Natural-language search over approved products, top 20"""
    if not text or not text.strip():
        raise BadRequestError("Search query required")

    query: Dict[str, Any] = {"approved": True}
    query.update(parse_natural_language(text))

    return ProductQuery(filter=query, sort=list(DEFAULT_SORT), limit=SEARCH_RESULT_LIMIT)


def build_recommendation_query(
    user_type: Optional[str] = None,
    use_case: Optional[str] = None,
    budget: Optional[float] = None,
) -> ProductQuery:
    """System-recommended approved products, best rated first, top 6"""
    query: Dict[str, Any] = {"approved": True, "system_recommended": True}

    if user_type:
        query["target_audience"] = user_type
    if use_case:
        query["use_case"] = use_case
    if budget is not None:
        query["price"] = {"$lte": budget}

    return ProductQuery(filter=query, sort=[("rating", -1)], limit=RECOMMENDATION_LIMIT)
