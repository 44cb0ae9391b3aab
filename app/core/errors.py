"""
Error handling for the Review Marketplace service.

Business-rule violations raise an ErrorResponse subclass carrying the HTTP
status; the handlers below turn them into JSON bodies with an "error" field.
"""

import traceback
from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.core.config import config
from app.core.logger import logger


class ErrorResponse(Exception):
    """Custom exception for application errors"""

    def __init__(self, message: str, status_code: int = 400, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class BadRequestError(ErrorResponse):
    """Missing or malformed request field"""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=400, details=details)


class ForbiddenError(ErrorResponse):
    """Actor is neither the owner nor an admin"""

    def __init__(self, message: str = "Not authorized", details: dict = None):
        super().__init__(message, status_code=403, details=details)


class NotFoundError(ErrorResponse):
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=404, details=details)


class ConflictError(ErrorResponse):
    """Duplicate email or duplicate (product, user) review"""

    def __init__(self, message: str, status_code: int = 409, details: dict = None):
        super().__init__(message, status_code=status_code, details=details)


class InternalError(ErrorResponse):
    def __init__(self, message: str = "Internal server error", details: dict = None):
        super().__init__(message, status_code=500, details=details)


class ErrorResponseModel(BaseModel):
    """Pydantic model for error responses"""
    error: str
    details: dict = None


def error_response_handler(request: Request, exc: ErrorResponse):
    """Handler for ErrorResponse exceptions"""
    metadata = {
        "event": "error_response",
        "status_code": exc.status_code,
        "url": str(request.url),
        "method": request.method,
        **exc.details,
    }

    if exc.status_code >= 500:
        logger.error(f"Error: {exc.message}", metadata=metadata)
    else:
        logger.warning(f"Error: {exc.message}", metadata=metadata)

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "details": exc.details}
    )


def http_exception_handler(request: Request, exc: HTTPException):
    """Handler for FastAPI HTTPException"""
    logger.warning(
        f"HTTPException: {exc.detail}",
        metadata={
            "event": "http_exception",
            "status_code": exc.status_code,
            "url": str(request.url),
            "method": request.method,
        }
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Schema violations are reported as 400 Bad Request"""
    errors = [
        {"loc": list(err.get("loc", [])), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    logger.warning(
        "Request validation failed",
        metadata={"event": "validation_error", "url": str(request.url), "errors": errors}
    )
    return JSONResponse(
        status_code=400,
        content={"error": "Validation error", "details": errors}
    )


def unhandled_exception_handler(request: Request, exc: Exception):
    """Last-resort handler: log everything, leak nothing"""
    metadata = {
        "event": "unhandled_exception",
        "url": str(request.url),
        "method": request.method,
    }
    if config.environment == "development":
        metadata["traceback"] = "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        )

    logger.error("Unhandled exception", error=exc, metadata=metadata)

    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"}
    )
