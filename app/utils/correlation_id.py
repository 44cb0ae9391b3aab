"""
Correlation ID context shared by the request middleware and the logger
"""

import uuid
from contextvars import ContextVar
from typing import Optional

correlation_id_context: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> Optional[str]:
    """Get the correlation ID of the request being served, if any"""
    return correlation_id_context.get()


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID in the current context"""
    correlation_id_context.set(correlation_id)


def create_correlation_id() -> str:
    return str(uuid.uuid4())
