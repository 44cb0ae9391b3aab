"""
Product service containing business logic layer
"""

from typing import List, Optional

from app.core.config import config
from app.core.errors import ForbiddenError, NotFoundError
from app.core.logger import logger
from app.models.user import User, UserType
from app.repositories.product import ProductRepository
from app.repositories.user import UserRepository
from app.schemas.product import (
    ProductCreate,
    ProductDetailResponse,
    ProductListResponse,
    ProductResponse,
    ProductUpdate,
)
from app.schemas.review import ReviewCreate
from app.services.query_builder import (
    build_product_query,
    build_recommendation_query,
    build_search_query,
)
from app.services.review import ReviewService

DASHBOARD_LIMIT = 10
EXPERT_ROLE = "Expert Reviewer"


class ProductService:
    """Service layer for product business logic"""

    def __init__(
        self,
        repository: ProductRepository,
        user_repository: UserRepository,
        review_service: ReviewService,
    ):
        self.repository = repository
        self.user_repository = user_repository
        self.review_service = review_service

    async def list_products(self,
                            category: str = None,
                            min_price: float = None,
                            max_price: float = None,
                            search: str = None,
                            badges: str = None,
                            target_audience: str = None,
                            use_case: str = None,
                            sort: str = None,
                            page: int = None,
                            limit: int = None) -> ProductListResponse:
        """Filtered, sorted and paginated public catalogue"""
        query = build_product_query(
            category=category, min_price=min_price, max_price=max_price, search=search,
            badges=badges, target_audience=target_audience, use_case=use_case,
            sort=sort, page=page, limit=limit,
        )

        products = await self.repository.find(query.filter, sort=query.sort, skip=query.skip, limit=query.limit)
        total = await self.repository.count(query.filter)

        logger.info(
            f"Fetched {len(products)} products",
            metadata={"event": "list_products", "count": len(products), "total": total, "filter": query.filter}
        )

        return ProductListResponse(
            products=products,
            total_pages=query.total_pages(total),
            current_page=query.page,
            total=total,
        )

    async def search_products(self, text: Optional[str]) -> List[ProductResponse]:
        """Natural-language search ("I need a laptop for programming")"""
        query = build_search_query(text)
        products = await self.repository.find(query.filter, sort=query.sort, limit=query.limit)

        logger.info(
            f"Natural language search returned {len(products)} products",
            metadata={"event": "search_products", "q": text, "filter": query.filter}
        )
        return products

    async def get_recommendations(self,
                                  user_type: str = None,
                                  use_case: str = None,
                                  budget: float = None) -> List[ProductResponse]:
        query = build_recommendation_query(user_type=user_type, use_case=use_case, budget=budget)
        return await self.repository.find(query.filter, sort=query.sort, limit=query.limit)

    async def get_product(self, product_id: str, viewer: Optional[User] = None) -> ProductDetailResponse:
        """Get a product with all of its reviews; `viewer` is the signed-in caller, if any"""
        product = await self.repository.get_by_id(product_id)
        if not product:
            raise NotFoundError("Product not found")

        reviews = await self.review_service.review_repository.list_by_product(product.id)
        logger.debug(
            f"Fetched product {product.id}",
            user_id=viewer.id if viewer else None,
            metadata={"event": "get_product", "product_id": product.id, "review_count": len(reviews)}
        )
        return ProductDetailResponse(
            **product.model_dump(),
            reviews=await self.review_service.attach_reviewers(reviews),
        )

    async def create_product(self, product_data: ProductCreate, user: User) -> ProductResponse:
        """
        Create a product owned by the acting user.

        Products of the system account are flagged system-recommended. An
        initial review, when supplied with a title and a comment, goes
        through the review lifecycle so the aggregates are computed the
        usual way.
        """
        account = await self.user_repository.get_by_id(user.id)
        is_system_user = bool(account and account.is_system)

        doc = product_data.model_dump(exclude={"initial_review"})
        doc.update({
            "approved": config.auto_approve_products or user.is_admin(),
            "system_recommended": is_system_user,
            "is_system_created": is_system_user,
        })

        product = await self.repository.create(doc, added_by=user.id)

        logger.info(
            f"Created product {product.id}",
            user_id=user.id,
            metadata={"event": "create_product", "product_id": product.id, "approved": product.approved}
        )

        initial = product_data.initial_review
        if initial and initial.title and initial.comment:
            if is_system_user:
                user_type, role = UserType.ADMINISTRATOR.value, EXPERT_ROLE
            else:
                user_type = initial.user_type or (account.user_type if account else UserType.OTHER.value)
                role = initial.role or ""

            await self.review_service.create_review(
                product.id,
                user,
                ReviewCreate(
                    rating=initial.rating,
                    title=initial.title,
                    comment=initial.comment,
                    user_type=user_type,
                    role=role,
                ),
                extra_fields={"verified": True},
            )
            product = await self.repository.get_by_id(product.id)

        return product

    def _check_owner(self, product: ProductResponse, user: User) -> None:
        if product.added_by != user.id and not user.is_admin():
            raise ForbiddenError("Not authorized")

    async def update_product(self, product_id: str, changes: ProductUpdate, user: User) -> ProductResponse:
        """Owner or admin; derived and owner fields are never writable"""
        product = await self.repository.get_by_id(product_id)
        if not product:
            raise NotFoundError("Product not found")

        self._check_owner(product, user)

        update_data = changes.model_dump(exclude_unset=True, exclude_none=True)
        if "approved" in update_data and not user.can_moderate():
            raise ForbiddenError("Only admins or moderators can change product approval")

        if not update_data:
            return product

        updated = await self.repository.update(product.id, update_data)
        if not updated:
            raise NotFoundError("Product not found")

        logger.info(
            f"Updated product {product.id}",
            user_id=user.id,
            metadata={"event": "update_product", "product_id": product.id, "fields": sorted(update_data)}
        )
        return updated

    async def delete_product(self, product_id: str, user: User) -> None:
        """Owner or admin; the product's reviews are deleted with it"""
        product = await self.repository.get_by_id(product_id)
        if not product:
            raise NotFoundError("Product not found")

        self._check_owner(product, user)

        if not await self.repository.delete(product.id):
            raise NotFoundError("Product not found")
        deleted_reviews = await self.review_service.review_repository.delete_by_product(product.id)

        logger.info(
            f"Deleted product {product.id}",
            user_id=user.id,
            metadata={"event": "delete_product", "product_id": product.id, "deleted_reviews": deleted_reviews}
        )

    async def list_user_products(self, user: User) -> List[ProductResponse]:
        """Dashboard view of the products a user added"""
        return await self.repository.find_by_owner(user.id, limit=DASHBOARD_LIMIT)
