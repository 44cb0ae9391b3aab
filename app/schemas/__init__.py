"""
API schemas
"""

from .auth import RegisterRequest, LoginRequest, UserResponse, RegisterResponse, LoginResponse
from .review import (
    ReviewCreate,
    ReviewUpdate,
    InitialReview,
    ReviewResponse,
    ReviewListResponse,
    ReviewMessageResponse,
    UserReviewSummary,
    HelpfulResponse,
)
from .product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    ProductDetailResponse,
    ProductListResponse,
    ProductMessageResponse,
)
