"""
Repositories module initialization
"""

from .product import ProductRepository
from .review import ReviewRepository
from .user import UserRepository

__all__ = [
    "ProductRepository",
    "ReviewRepository",
    "UserRepository",
]
