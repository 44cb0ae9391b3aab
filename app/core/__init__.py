"""
Core module initialization
"""

from .config import config
from .logger import logger
from .errors import (
    ErrorResponse,
    ErrorResponseModel,
    BadRequestError,
    ForbiddenError,
    NotFoundError,
    ConflictError,
    InternalError,
)

__all__ = [
    "config",
    "logger",
    "ErrorResponse",
    "ErrorResponseModel",
    "BadRequestError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "InternalError",
]
