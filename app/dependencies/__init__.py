"""
Dependencies module initialization
"""

from .auth import get_current_user, get_current_user_optional
from .services import (
    get_auth_service,
    get_product_repository,
    get_product_service,
    get_review_repository,
    get_review_service,
    get_user_repository,
)

__all__ = [
    "get_current_user",
    "get_current_user_optional",
    "get_auth_service",
    "get_product_repository",
    "get_product_service",
    "get_review_repository",
    "get_review_service",
    "get_user_repository",
]
