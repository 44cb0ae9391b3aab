"""
Product and review API endpoints
Clean API layer with dependency injection
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from app.core.errors import ErrorResponseModel
from app.dependencies.auth import get_current_user, get_current_user_optional
from app.dependencies.services import get_product_service, get_review_service
from app.models.user import User
from app.schemas.product import (
    ProductCreate,
    ProductDetailResponse,
    ProductListResponse,
    ProductMessageResponse,
    ProductResponse,
    ProductUpdate,
)
from app.schemas.review import (
    HelpfulResponse,
    ReviewCreate,
    ReviewListResponse,
    ReviewMessageResponse,
    ReviewUpdate,
    UserReviewSummary,
)
from app.services.product import ProductService
from app.services.review import ReviewService

router = APIRouter()

AUTH_ERRORS = {401: {"model": ErrorResponseModel}, 403: {"model": ErrorResponseModel}}
NOT_FOUND = {404: {"model": ErrorResponseModel}}


# Catalogue
@router.get(
    "",
    response_model=ProductListResponse,
    responses={503: {"model": ErrorResponseModel}},
)
async def list_products(
    category: str = Query(None, description="Filter by category (e.g., laptop, tablet)"),
    min_price: float = Query(None, alias="minPrice", ge=0, description="Minimum price"),
    max_price: float = Query(None, alias="maxPrice", ge=0, description="Maximum price"),
    search: str = Query(None, description="Full-text search over name, description and brand"),
    badges: str = Query(None, description="Comma-separated badges"),
    target_audience: str = Query(None, alias="targetAudience", description="Comma-separated audiences"),
    use_case: str = Query(None, alias="useCase", description="Comma-separated use cases"),
    sort: str = Query(None, description="price-asc, price-desc, rating or newest"),
    page: int = Query(None, ge=1, description="Page number, starting at 1"),
    limit: int = Query(None, ge=1, le=100, description="Page size (default 12)"),
    service: ProductService = Depends(get_product_service),
):
    """
    List approved products.
    Unknown sort modes fall back to system-recommended first, then best rated.
    """
    return await service.list_products(
        category=category,
        min_price=min_price,
        max_price=max_price,
        search=search,
        badges=badges,
        target_audience=target_audience,
        use_case=use_case,
        sort=sort,
        page=page,
        limit=limit,
    )


@router.get(
    "/search",
    response_model=List[ProductResponse],
    responses={400: {"model": ErrorResponseModel}},
)
async def search_products(
    q: str = Query(None, description="Free-form request, e.g. 'I need a laptop for programming'"),
    service: ProductService = Depends(get_product_service),
):
    """Natural-language search, top 20"""
    return await service.search_products(q)


@router.get("/recommendations", response_model=List[ProductResponse])
async def get_recommendations(
    user_type: str = Query(None, alias="userType"),
    use_case: str = Query(None, alias="useCase"),
    budget: float = Query(None, ge=0),
    service: ProductService = Depends(get_product_service),
):
    """System-recommended products matching a profile, top 6"""
    return await service.get_recommendations(user_type=user_type, use_case=use_case, budget=budget)


# Dashboard
@router.get("/user/my-products", response_model=List[ProductResponse], responses=AUTH_ERRORS)
async def get_my_products(
    service: ProductService = Depends(get_product_service),
    user: User = Depends(get_current_user),
):
    """The caller's 10 newest products"""
    return await service.list_user_products(user)


@router.get("/user/my-reviews", response_model=List[UserReviewSummary], responses=AUTH_ERRORS)
async def get_my_reviews(
    service: ReviewService = Depends(get_review_service),
    user: User = Depends(get_current_user),
):
    """The caller's 10 newest reviews with a product summary"""
    return await service.list_user_reviews(user)


# Reviews
@router.put(
    "/reviews/{review_id}",
    response_model=ReviewMessageResponse,
    responses={**AUTH_ERRORS, **NOT_FOUND},
)
async def update_review(
    review_id: str,
    changes: ReviewUpdate,
    service: ReviewService = Depends(get_review_service),
    user: User = Depends(get_current_user),
):
    """Update a review. Only the author can update."""
    review = await service.update_review(review_id, user, changes)
    return ReviewMessageResponse(message="Review updated successfully", review=review)


@router.delete(
    "/reviews/{review_id}",
    response_model=dict,
    responses={**AUTH_ERRORS, **NOT_FOUND},
)
async def delete_review(
    review_id: str,
    service: ReviewService = Depends(get_review_service),
    user: User = Depends(get_current_user),
):
    """Delete a review. The author or an admin can delete."""
    await service.delete_review(review_id, user)
    return {"message": "Review deleted successfully"}


@router.post(
    "/reviews/{review_id}/helpful",
    response_model=HelpfulResponse,
    responses={**AUTH_ERRORS, **NOT_FOUND},
)
async def toggle_helpful(
    review_id: str,
    service: ReviewService = Depends(get_review_service),
    user: User = Depends(get_current_user),
):
    """Add the caller's helpful vote, or remove it if already present"""
    helpful_count = await service.toggle_helpful(review_id, user)
    return HelpfulResponse(helpful_count=helpful_count)


@router.get("/{product_id}/reviews", response_model=ReviewListResponse)
async def list_product_reviews(
    product_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    service: ReviewService = Depends(get_review_service),
):
    """Newest reviews first"""
    return await service.list_product_reviews(product_id, page=page, limit=limit)


@router.post(
    "/{product_id}/reviews",
    response_model=ReviewMessageResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponseModel}, 409: {"model": ErrorResponseModel}, **AUTH_ERRORS, **NOT_FOUND},
)
async def create_review(
    product_id: str,
    review: ReviewCreate,
    service: ReviewService = Depends(get_review_service),
    user: User = Depends(get_current_user),
):
    """
    Review a product. One review per user and product.
    Requires authentication.
    """
    created = await service.create_review(product_id, user, review)
    return ReviewMessageResponse(message="Review added successfully", review=created)


# Products
@router.get("/{product_id}", response_model=ProductDetailResponse, responses=NOT_FOUND)
async def get_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
    viewer: Optional[User] = Depends(get_current_user_optional),
):
    """Get a product with its reviews. Anonymous callers are welcome."""
    return await service.get_product(product_id, viewer=viewer)


@router.put(
    "/{product_id}",
    response_model=ProductMessageResponse,
    responses={400: {"model": ErrorResponseModel}, **AUTH_ERRORS, **NOT_FOUND},
)
async def update_product(
    product_id: str,
    product: ProductUpdate,
    service: ProductService = Depends(get_product_service),
    user: User = Depends(get_current_user),
):
    """
    Update a product. Only the creator or admin can update.
    Rating fields are derived from reviews and cannot be set.
    """
    updated = await service.update_product(product_id, product, user)
    return ProductMessageResponse(message="Product updated successfully", product=updated)


@router.delete(
    "/{product_id}",
    response_model=dict,
    responses={**AUTH_ERRORS, **NOT_FOUND},
)
async def delete_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
    user: User = Depends(get_current_user),
):
    """
    Delete a product and its reviews. Only the creator or admin can delete.
    Requires authentication.
    """
    await service.delete_product(product_id, user)
    return {"message": "Product deleted successfully"}


@router.post(
    "",
    response_model=ProductMessageResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponseModel}, 401: {"model": ErrorResponseModel}},
)
async def create_product(
    product: ProductCreate,
    service: ProductService = Depends(get_product_service),
    user: User = Depends(get_current_user),
):
    """
    Create a product, optionally with the creator's first review.
    Requires authentication.
    """
    created = await service.create_product(product, user)
    return ProductMessageResponse(message="Product created successfully", product=created)
