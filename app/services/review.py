"""
Review lifecycle: create, update and delete reviews, keeping product
aggregates consistent through the rating aggregator
"""

import math
from typing import Any, Dict, List, Optional

from app.core.errors import ConflictError, ErrorResponse, ForbiddenError, InternalError, NotFoundError
from app.core.logger import logger
from app.models.review import Review
from app.models.user import User
from app.repositories.product import ProductRepository
from app.repositories.review import ReviewRepository
from app.repositories.user import UserRepository
from app.schemas.review import (
    ReviewCreate,
    ReviewListResponse,
    ReviewResponse,
    ReviewUpdate,
    ReviewerSummary,
    UserReviewSummary,
)
from app.services.rating_aggregator import RatingAggregator

DEFAULT_REVIEW_PAGE_LIMIT = 10
DASHBOARD_LIMIT = 10


class ReviewService:
    """Service layer for review business logic"""

    def __init__(
        self,
        review_repository: ReviewRepository,
        product_repository: ProductRepository,
        user_repository: UserRepository,
        aggregator: RatingAggregator = None,
    ):
        self.review_repository = review_repository
        self.product_repository = product_repository
        self.user_repository = user_repository
        self.aggregator = aggregator or RatingAggregator(review_repository, product_repository)

    async def _refresh_aggregates(self, product_id: str, operation: str) -> Optional[Dict[str, float]]:
        """Run the recompute after a committed review write"""
        try:
            return await self.aggregator.recompute(product_id)
        except ErrorResponse as e:
            logger.error(
                f"Review {operation} succeeded but rating update failed for product {product_id}",
                metadata={"event": "review_aggregate_failed", "productId": product_id, "operation": operation},
                error=e,
            )
            raise InternalError(
                f"Review {operation} saved but the product rating could not be updated",
                details={"product_id": product_id},
            )

    async def attach_reviewers(self, reviews: List[Review]) -> List[ReviewResponse]:
        """Pair reviews with their authors' public names"""
        accounts = await self.user_repository.get_many([review.user for review in reviews])
        responses = []
        for review in reviews:
            account = accounts.get(review.user)
            reviewer = ReviewerSummary(
                id=review.user,
                username=account.username if account else "Anonymous",
                user_type=account.user_type if account else None,
            )
            responses.append(ReviewResponse(**review.model_dump(), reviewer=reviewer))
        return responses

    async def list_product_reviews(
        self, product_id: str, page: int = 1, limit: int = DEFAULT_REVIEW_PAGE_LIMIT
    ) -> ReviewListResponse:
        page = page if page and page > 0 else 1
        limit = limit if limit and limit > 0 else DEFAULT_REVIEW_PAGE_LIMIT

        reviews = await self.review_repository.list_by_product(product_id, skip=(page - 1) * limit, limit=limit)
        total = await self.review_repository.count_by_product(product_id)

        return ReviewListResponse(
            reviews=await self.attach_reviewers(reviews),
            total_pages=math.ceil(total / limit),
            current_page=page,
            total=total,
        )

    async def create_review(
        self,
        product_id: str,
        user: User,
        review_data: ReviewCreate,
        extra_fields: Dict[str, Any] = None,
    ) -> ReviewResponse:
        """
        Create the acting user's review of a product.

        Raises NotFoundError for an unknown product and ConflictError when
        the user already reviewed it (the unique index catches concurrent
        duplicates that slip past the pre-check).
        """
        product = await self.product_repository.get_by_id(product_id)
        if not product:
            raise NotFoundError("Product not found")

        existing = await self.review_repository.find_by_product_and_user(product.id, user.id)
        if existing:
            raise ConflictError("You have already reviewed this product", details={"product_id": product.id})

        doc = review_data.model_dump()
        if extra_fields:
            doc.update(extra_fields)
        review = await self.review_repository.create(product.id, user.id, doc)

        aggregates = await self._refresh_aggregates(product.id, "create")
        if aggregates is None:
            # Product deleted between the existence check and the insert
            await self.review_repository.delete(review.id)
            raise NotFoundError("Product not found")

        logger.info(
            f"Added review for product {product.id} by user {user.id}",
            user_id=user.id,
            metadata={"event": "review_created", "product_id": product.id, "review_id": review.id, **aggregates}
        )

        responses = await self.attach_reviewers([review])
        return responses[0]

    async def update_review(self, review_id: str, user: User, changes: ReviewUpdate) -> ReviewResponse:
        """Only the author may update; a rating change triggers a recompute"""
        review = await self.review_repository.get_by_id(review_id)
        if not review:
            raise NotFoundError("Review not found")

        if review.user != user.id:
            raise ForbiddenError("Not authorized")

        update_data = changes.model_dump(exclude_unset=True, exclude_none=True)
        if not update_data:
            responses = await self.attach_reviewers([review])
            return responses[0]

        updated = await self.review_repository.update(review_id, user.id, update_data)
        if not updated:
            raise NotFoundError("Review not found")

        # The earlier read may be stale, so any rating write recomputes
        if "rating" in update_data:
            await self._refresh_aggregates(updated.product, "update")

        logger.info(
            f"Updated review {review_id}",
            user_id=user.id,
            metadata={"event": "review_updated", "review_id": review_id, "fields": sorted(update_data)}
        )

        responses = await self.attach_reviewers([updated])
        return responses[0]

    async def delete_review(self, review_id: str, user: User) -> None:
        """The author or an admin may delete; the product is recomputed afterwards"""
        review = await self.review_repository.get_by_id(review_id)
        if not review:
            raise NotFoundError("Review not found")

        if review.user != user.id and not user.is_admin():
            raise ForbiddenError("Not authorized")

        deleted = await self.review_repository.delete(review_id)
        if not deleted:
            raise NotFoundError("Review not found")

        await self._refresh_aggregates(review.product, "delete")

        logger.info(
            f"Deleted review {review_id}",
            user_id=user.id,
            metadata={"event": "review_deleted", "review_id": review_id, "product_id": review.product}
        )

    async def toggle_helpful(self, review_id: str, user: User) -> int:
        """Flip the user's helpful vote; returns the number of helpful votes"""
        helpful_count = await self.review_repository.toggle_helpful(review_id, user.id)
        if helpful_count is None:
            raise NotFoundError("Review not found")

        logger.info(
            f"Toggled helpful vote on review {review_id}",
            user_id=user.id,
            metadata={"event": "review_helpful_toggled", "review_id": review_id, "helpful_count": helpful_count}
        )
        return helpful_count

    async def list_user_reviews(self, user: User) -> List[UserReviewSummary]:
        """Dashboard view of the user's latest reviews"""
        reviews = await self.review_repository.list_by_user(user.id, limit=DASHBOARD_LIMIT)
        products = await self.product_repository.get_many([review.product for review in reviews])

        summaries = []
        for review in reviews:
            product = products.get(review.product)
            summary = UserReviewSummary(
                id=review.id,
                product_id=review.product,
                rating=review.rating,
                title=review.title,
                comment=review.comment,
                helpful=review.helpful,
                created_at=review.created_at,
            )
            if product:
                summary.product_name = product.name
                summary.product_image = product.image
                summary.product_price = product.price
                summary.product_category = product.category
            summaries.append(summary)
        return summaries
