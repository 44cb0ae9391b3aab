"""
Models module initialization
"""

from .product import Product, ProductBase, Category, Badge, Audience, UseCase
from .review import Review
from .user import User, UserAccount, Role, UserType

__all__ = [
    "Product",
    "ProductBase",
    "Category",
    "Badge",
    "Audience",
    "UseCase",
    "Review",
    "User",
    "UserAccount",
    "Role",
    "UserType",
]
