from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from app.models.product import utc_now


class Review(BaseModel):
    """A user's review of one product; at most one per (product, user)"""

    id: str
    product: str
    user: str
    rating: int
    title: str
    comment: str
    pros: List[str] = []
    cons: List[str] = []
    user_type: Optional[str] = None
    role: Optional[str] = None
    use_case: Optional[str] = None
    verified: bool = False
    helpful: int = 0
    helpful_votes: List[str] = []
    images: List[str] = []
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    class Config:
        populate_by_name = True
        alias_generator = to_camel
