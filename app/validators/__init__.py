"""
Validators package
"""

from .product_validators import ProductValidatorMixin
from .review_validators import ReviewValidatorMixin
from .user_validators import RegistrationValidatorMixin

__all__ = [
    "ProductValidatorMixin",
    "ReviewValidatorMixin",
    "RegistrationValidatorMixin",
]
