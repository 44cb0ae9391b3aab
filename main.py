"""
FastAPI Application - Review Marketplace
Product comparison and review API with clean layering
"""

# Load environment variables from .env file FIRST before any other imports
from dotenv import load_dotenv
load_dotenv()

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import config
from app.core.errors import (
    ErrorResponse,
    error_response_handler,
    http_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from app.core.logger import logger
from app.core.telemetry import instrument_app
from app.db.mongodb import connect_to_mongo, close_mongo_connection
from app.api import auth, health, home, products
from app.middleware import CorrelationIdMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    logger.info("Starting Review Marketplace...")
    await connect_to_mongo()

    logger.info(
        "Review Marketplace started successfully",
        metadata={
            "service_name": config.service_name,
            "version": config.service_version,
            "environment": config.environment,
            "port": config.port
        }
    )

    yield

    # Shutdown
    logger.info("Shutting down Review Marketplace...")
    await close_mongo_connection()


# Create FastAPI application with lifespan management
app = FastAPI(
    title="Review Marketplace",
    description="Product comparison and review API",
    version=config.service_version,
    lifespan=lifespan
)

# Instrument app with OpenTelemetry for automatic tracing
instrument_app(app)

# Configure error handlers
app.add_exception_handler(ErrorResponse, error_response_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# Correlation id on every request and response
app.add_middleware(CorrelationIdMiddleware)

# Include API routers
app.include_router(home.router, tags=["home"])
app.include_router(health.router, prefix="/api", tags=["health"])
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(products.router, prefix="/api/products", tags=["products"])


if __name__ == "__main__":
    import uvicorn

    logger.info(
        f"Starting {config.service_name} on port {config.port}",
        metadata={
            "service_name": config.service_name,
            "version": config.service_version,
            "environment": config.environment,
            "port": config.port
        }
    )

    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.environment == "development"
    )
