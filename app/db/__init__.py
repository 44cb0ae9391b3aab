"""
Database module initialization
"""

from .mongodb import (
    db,
    connect_to_mongo,
    close_mongo_connection,
    ensure_indexes,
    get_user_collection,
    get_product_collection,
    get_review_collection,
)

__all__ = [
    "db",
    "connect_to_mongo",
    "close_mongo_connection",
    "ensure_indexes",
    "get_user_collection",
    "get_product_collection",
    "get_review_collection",
]
