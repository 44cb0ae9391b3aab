"""
API schemas for review endpoints
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from app.models.product import UseCase
from app.models.review import Review
from app.models.user import UserType
from app.validators.review_validators import ReviewValidatorMixin


class ReviewCreate(ReviewValidatorMixin, BaseModel):
    """Body of POST /products/{productId}/reviews"""
    rating: int
    title: str
    comment: str
    pros: List[str] = []
    cons: List[str] = []
    user_type: Optional[UserType] = None
    role: Optional[str] = None
    use_case: Optional[UseCase] = None
    images: List[str] = []

    class Config:
        populate_by_name = True
        alias_generator = to_camel
        use_enum_values = True


class ReviewUpdate(ReviewValidatorMixin, BaseModel):
    """Whitelist of fields an author may change"""
    rating: Optional[int] = None
    title: Optional[str] = None
    comment: Optional[str] = None
    pros: Optional[List[str]] = None
    cons: Optional[List[str]] = None
    user_type: Optional[UserType] = None
    role: Optional[str] = None
    use_case: Optional[UseCase] = None
    images: Optional[List[str]] = None

    class Config:
        populate_by_name = True
        alias_generator = to_camel
        use_enum_values = True


class InitialReview(ReviewValidatorMixin, BaseModel):
    """Optional review submitted together with a new product"""
    rating: int = 5
    title: Optional[str] = None
    comment: Optional[str] = None
    user_type: Optional[UserType] = None
    role: Optional[str] = None

    class Config:
        populate_by_name = True
        alias_generator = to_camel
        use_enum_values = True


class ReviewerSummary(BaseModel):
    id: str
    username: str = "Anonymous"
    user_type: Optional[str] = None

    class Config:
        populate_by_name = True
        alias_generator = to_camel


class ReviewResponse(Review):
    reviewer: Optional[ReviewerSummary] = None


class ReviewListResponse(BaseModel):
    reviews: List[ReviewResponse]
    total_pages: int
    current_page: int
    total: int

    class Config:
        populate_by_name = True
        alias_generator = to_camel


class ReviewMessageResponse(BaseModel):
    message: str
    review: ReviewResponse


class UserReviewSummary(BaseModel):
    """A review as shown on its author's dashboard"""
    id: str
    product_id: Optional[str] = None
    product_name: str = "Product Removed"
    product_image: str = ""
    product_price: float = 0
    product_category: str = ""
    rating: int
    title: str
    comment: str
    helpful: int = 0
    created_at: Optional[datetime] = None

    class Config:
        populate_by_name = True
        alias_generator = to_camel


class HelpfulResponse(BaseModel):
    message: str = "Review helpful status updated"
    helpful_count: int = Field(..., ge=0)

    class Config:
        populate_by_name = True
        alias_generator = to_camel
