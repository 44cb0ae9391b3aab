"""
Services module initialization
"""

from .auth import AuthService
from .product import ProductService
from .rating_aggregator import RatingAggregator
from .review import ReviewService

__all__ = [
    "AuthService",
    "ProductService",
    "RatingAggregator",
    "ReviewService",
]
