"""
Product domain model and the tag vocabularies shared with reviews
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


def utc_now():
    """Helper function for Pydantic default_factory to get current UTC time"""
    return datetime.now(timezone.utc)


class Category(str, Enum):
    LAPTOP = "laptop"
    DESKTOP = "desktop"
    TABLET = "tablet"
    TABLETS = "tablets"
    PRINTER = "printer"
    SOFTWARE = "software"
    MONITOR = "monitor"
    WEBCAM = "webcam"
    HEADSET = "headset"
    PROJECTOR = "projector"
    OTHER = "other"


class Badge(str, Enum):
    ECO_FRIENDLY = "eco-friendly"
    BEST_VALUE = "best-value"
    TOP_RATED = "top-rated"
    NEW_ARRIVAL = "new-arrival"
    ON_SALE = "on-sale"
    SUSTAINABLE = "sustainable"
    DURABLE = "durable"
    ACCESSIBLE = "accessible"
    ENERGY_EFFICIENT = "energy-efficient"
    STUDENT_DISCOUNT = "student-discount"
    BULK_PRICING = "bulk-pricing"
    WARRANTY = "warranty"
    LOCAL_SUPPORT = "local-support"
    CLOUD_ENABLED = "cloud-enabled"
    PORTABLE = "portable"


class Audience(str, Enum):
    STUDENT = "student"
    TEACHER = "teacher"
    DIRECTOR = "director"
    ADMINISTRATOR = "administrator"
    PARENT = "parent"


class UseCase(str, Enum):
    TEACHING_ONLINE = "teaching-online"
    PRESENTATIONS = "presentations"
    PROGRAMMING = "programming"
    GRAPHIC_DESIGN = "graphic-design"
    VIDEO_EDITING = "video-editing"
    RESEARCH = "research"
    WRITING = "writing"
    MEETINGS = "meetings"
    PRINTING = "printing"
    HOMEWORK = "homework"
    NOTE_TAKING = "note-taking"


class ProductBase(BaseModel):
    """Fields common to every product representation"""

    name: str
    category: str
    description: str
    price: float
    brand: str = ""
    image: str = ""
    features: List[str] = []
    specifications: Dict[str, str] = {}

    # Tag sets
    badges: List[str] = []
    target_audience: List[str] = []
    educational_use: List[str] = []
    accessibility: List[str] = []
    use_case: List[str] = []

    # Derived from the review collection, written only by the rating aggregator
    rating: float = Field(default=0.0, ge=0.0, le=5.0)
    review_count: int = Field(default=0, ge=0)

    system_recommended: bool = False
    is_system_created: bool = False
    approved: bool = False
    added_by: Optional[str] = None

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    class Config:
        populate_by_name = True
        alias_generator = to_camel


class Product(ProductBase):
    """Product model with ID for database operations"""
    id: str
