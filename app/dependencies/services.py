"""
Dependency injection for repositories and services
"""

from fastapi import Depends

from app.db.mongodb import get_product_collection, get_review_collection, get_user_collection
from app.repositories.product import ProductRepository
from app.repositories.review import ReviewRepository
from app.repositories.user import UserRepository
from app.services.auth import AuthService
from app.services.product import ProductService
from app.services.review import ReviewService


async def get_product_repository() -> ProductRepository:
    """Get product repository instance"""
    collection = await get_product_collection()
    return ProductRepository(collection)


async def get_review_repository() -> ReviewRepository:
    """Get review repository instance"""
    collection = await get_review_collection()
    return ReviewRepository(collection)


async def get_user_repository() -> UserRepository:
    """Get user repository instance"""
    collection = await get_user_collection()
    return UserRepository(collection)


async def get_review_service(
    review_repository: ReviewRepository = Depends(get_review_repository),
    product_repository: ProductRepository = Depends(get_product_repository),
    user_repository: UserRepository = Depends(get_user_repository),
) -> ReviewService:
    """Get review service instance"""
    return ReviewService(review_repository, product_repository, user_repository)


async def get_product_service(
    repository: ProductRepository = Depends(get_product_repository),
    user_repository: UserRepository = Depends(get_user_repository),
    review_service: ReviewService = Depends(get_review_service),
) -> ProductService:
    """Get product service instance"""
    return ProductService(repository, user_repository, review_service)


async def get_auth_service(
    repository: UserRepository = Depends(get_user_repository),
) -> AuthService:
    """Get auth service instance"""
    return AuthService(repository)
