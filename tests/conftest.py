"""Shared test fixtures"""
import asyncio

import pytest
import pytest_asyncio
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional
from bson import ObjectId

from app.core.errors import ConflictError
from app.models.review import Review
from app.models.user import User, UserAccount
from app.schemas.product import ProductResponse
from app.services.product import ProductService
from app.services.review import ReviewService


def new_id() -> str:
    return str(ObjectId())


class InMemoryProductRepository:
    """Dict-backed stand-in for ProductRepository"""

    def __init__(self):
        self.products: Dict[str, ProductResponse] = {}

    async def create(self, product_data, added_by):
        await asyncio.sleep(0)
        now = datetime.now(timezone.utc)
        product = ProductResponse(
            **{
                **product_data,
                "id": new_id(),
                "added_by": added_by,
                "rating": 0.0,
                "review_count": 0,
                "created_at": now,
                "updated_at": now,
            }
        )
        self.products[product.id] = product
        return product

    async def get_by_id(self, product_id):
        await asyncio.sleep(0)
        return self.products.get(product_id)

    async def get_many(self, product_ids):
        await asyncio.sleep(0)
        return {pid: self.products[pid] for pid in product_ids if pid in self.products}

    async def update(self, product_id, changes):
        await asyncio.sleep(0)
        if product_id not in self.products:
            return None
        self.products[product_id] = self.products[product_id].model_copy(update=dict(changes))
        return self.products[product_id]

    async def delete(self, product_id):
        await asyncio.sleep(0)
        return self.products.pop(product_id, None) is not None

    async def set_review_aggregates(self, product_id, rating, review_count):
        await asyncio.sleep(0)
        if product_id not in self.products:
            return False
        self.products[product_id] = self.products[product_id].model_copy(
            update={"rating": rating, "review_count": review_count}
        )
        return True

    async def find(self, query, sort=None, skip=0, limit=None):
        await asyncio.sleep(0)
        products = [p for p in self.products.values() if p.approved or not query.get("approved")]
        products = products[skip:]
        return products[:limit] if limit is not None else products

    async def count(self, query):
        await asyncio.sleep(0)
        return len(await self.find(query))

    async def find_by_owner(self, user_id, limit=10):
        await asyncio.sleep(0)
        owned = [p for p in self.products.values() if p.added_by == user_id]
        return list(reversed(owned))[:limit]


class InMemoryReviewRepository:
    """
    Dict-backed stand-in for ReviewRepository, unique on (product, user).
    Every call yields to the event loop first, as a motor round trip would.
    """

    def __init__(self):
        self.reviews: Dict[str, Review] = {}
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    async def create(self, product_id, user_id, review_data):
        await asyncio.sleep(0)
        if self._find(product_id, user_id):
            raise ConflictError("You have already reviewed this product")
        now = self._tick()
        doc = dict(review_data)
        doc.setdefault("verified", False)
        review = Review(
            **{
                **doc,
                "id": new_id(),
                "product": product_id,
                "user": user_id,
                "helpful": 0,
                "helpful_votes": [],
                "created_at": now,
                "updated_at": now,
            }
        )
        self.reviews[review.id] = review
        return review

    async def get_by_id(self, review_id):
        await asyncio.sleep(0)
        return self.reviews.get(review_id)

    def _find(self, product_id, user_id) -> Optional[Review]:
        for review in self.reviews.values():
            if review.product == product_id and review.user == user_id:
                return review
        return None

    async def find_by_product_and_user(self, product_id, user_id):
        await asyncio.sleep(0)
        return self._find(product_id, user_id)

    def _for_product(self, product_id) -> List[Review]:
        reviews = [r for r in self.reviews.values() if r.product == product_id]
        return sorted(reviews, key=lambda r: r.created_at, reverse=True)

    async def list_by_product(self, product_id, skip=0, limit=None):
        await asyncio.sleep(0)
        reviews = self._for_product(product_id)[skip:]
        return reviews[:limit] if limit is not None else reviews

    async def count_by_product(self, product_id):
        await asyncio.sleep(0)
        return len(self._for_product(product_id))

    async def list_by_user(self, user_id, limit=10):
        await asyncio.sleep(0)
        reviews = [r for r in self.reviews.values() if r.user == user_id]
        return sorted(reviews, key=lambda r: r.created_at, reverse=True)[:limit]

    async def rating_stats(self, product_id):
        await asyncio.sleep(0)
        ratings = [r.rating for r in self.reviews.values() if r.product == product_id]
        if not ratings:
            return 0.0, 0
        return sum(ratings) / len(ratings), len(ratings)

    async def update(self, review_id, user_id, changes):
        await asyncio.sleep(0)
        review = self.reviews.get(review_id)
        if not review or review.user != user_id:
            return None
        self.reviews[review_id] = review.model_copy(update={**changes, "updated_at": self._tick()})
        return self.reviews[review_id]

    async def delete(self, review_id):
        await asyncio.sleep(0)
        return self.reviews.pop(review_id, None)

    async def delete_by_product(self, product_id):
        await asyncio.sleep(0)
        doomed = [rid for rid, r in self.reviews.items() if r.product == product_id]
        for rid in doomed:
            del self.reviews[rid]
        return len(doomed)

    async def toggle_helpful(self, review_id, user_id):
        await asyncio.sleep(0)
        review = self.reviews.get(review_id)
        if not review:
            return None
        votes = list(review.helpful_votes)
        if user_id in votes:
            votes.remove(user_id)
        else:
            votes.append(user_id)
        self.reviews[review_id] = review.model_copy(update={"helpful_votes": votes, "helpful": len(votes)})
        return len(votes)


class InMemoryUserRepository:
    def __init__(self, accounts: Optional[List[UserAccount]] = None):
        self.accounts: Dict[str, UserAccount] = {a.id: a for a in accounts or []}

    async def get_by_id(self, user_id):
        await asyncio.sleep(0)
        return self.accounts.get(user_id)

    async def get_by_email(self, email):
        await asyncio.sleep(0)
        for account in self.accounts.values():
            if account.email == email:
                return account
        return None

    async def get_many(self, user_ids):
        await asyncio.sleep(0)
        return {uid: self.accounts[uid] for uid in user_ids if uid in self.accounts}


@pytest.fixture
def alice():
    return User(id=new_id(), role="user")


@pytest.fixture
def bob():
    return User(id=new_id(), role="user")


@pytest.fixture
def admin():
    return User(id=new_id(), role="admin")


@pytest.fixture
def system_user():
    return User(id=new_id(), role="admin")


@pytest.fixture
def product_repository():
    return InMemoryProductRepository()


@pytest.fixture
def review_repository():
    return InMemoryReviewRepository()


@pytest.fixture
def user_repository(alice, bob, admin, system_user):
    return InMemoryUserRepository([
        UserAccount(id=alice.id, username="alice", email="alice@example.com", user_type="teacher"),
        UserAccount(id=bob.id, username="bob", email="bob@example.com", user_type="student"),
        UserAccount(id=admin.id, username="admin", email="admin@example.com", role="admin"),
        UserAccount(
            id=system_user.id,
            username="system",
            email="system@example.com",
            role="admin",
            is_system=True,
        ),
    ])


@pytest.fixture
def review_service(review_repository, product_repository, user_repository):
    return ReviewService(review_repository, product_repository, user_repository)


@pytest.fixture
def product_service(product_repository, user_repository, review_service):
    return ProductService(product_repository, user_repository, review_service)


@pytest.fixture
def laptop_data():
    """Product document as the catalogue stores it"""
    return {
        "name": "EduBook Pro",
        "category": "laptop",
        "description": "Lightweight laptop for classrooms",
        "price": 500.0,
        "brand": "Edu",
        "approved": True,
    }


@pytest_asyncio.fixture
async def laptop(product_repository, alice, laptop_data):
    return await product_repository.create(laptop_data, added_by=alice.id)
