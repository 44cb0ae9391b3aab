"""
Middleware modules for the Review Marketplace service
"""

from .correlation_id import CorrelationIdMiddleware

__all__ = ["CorrelationIdMiddleware"]
