"""
API schemas for Product endpoints
"""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from app.models.product import Audience, Badge, Category, Product, UseCase
from app.schemas.review import InitialReview, ReviewResponse
from app.validators.product_validators import ProductValidatorMixin


class ProductCreate(ProductValidatorMixin, BaseModel):
    """Schema for creating a new product; derived and owner fields are not accepted"""
    name: str = Field(..., min_length=1)
    category: Category
    description: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    brand: str = ""
    image: str = ""
    features: List[str] = []
    specifications: Dict[str, str] = {}
    badges: List[Badge] = []
    target_audience: List[Audience] = []
    educational_use: List[str] = []
    accessibility: List[str] = []
    use_case: List[UseCase] = []
    initial_review: Optional[InitialReview] = None

    class Config:
        populate_by_name = True
        alias_generator = to_camel
        use_enum_values = True


class ProductUpdate(ProductValidatorMixin, BaseModel):
    """Whitelist of mutable product fields; unset fields are left untouched"""
    name: Optional[str] = None
    category: Optional[Category] = None
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    brand: Optional[str] = None
    image: Optional[str] = None
    features: Optional[List[str]] = None
    specifications: Optional[Dict[str, str]] = None
    badges: Optional[List[Badge]] = None
    target_audience: Optional[List[Audience]] = None
    educational_use: Optional[List[str]] = None
    accessibility: Optional[List[str]] = None
    use_case: Optional[List[UseCase]] = None
    # Honoured for admins and moderators only
    approved: Optional[bool] = None

    class Config:
        populate_by_name = True
        alias_generator = to_camel
        use_enum_values = True


class ProductResponse(Product):
    """Schema for product responses including all fields"""


class ProductDetailResponse(ProductResponse):
    """A product together with its reviews, newest first"""
    reviews: List[ReviewResponse] = []


class ProductListResponse(BaseModel):
    """Paginated product listing"""
    products: List[ProductResponse]
    total_pages: int
    current_page: int
    total: int

    class Config:
        populate_by_name = True
        alias_generator = to_camel


class ProductMessageResponse(BaseModel):
    message: str
    product: ProductResponse
