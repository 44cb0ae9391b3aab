"""
API module initialization
"""

from . import auth, health, home, products

__all__ = ["auth", "health", "home", "products"]
