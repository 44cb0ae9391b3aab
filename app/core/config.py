"""
Core configuration and settings for the Review Marketplace service
"""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration with environment variable support"""

    # Service information
    service_name: str = Field(default="review-marketplace")
    service_version: str = Field(default="1.0.0")
    api_version: str = Field(default="1.0.0")
    environment: str = Field(default="development")

    # Server configuration
    port: int = Field(default=5050)
    host: str = Field(default="0.0.0.0")

    # Database configuration
    mongodb_uri: Optional[str] = Field(default=None)
    mongodb_host: str = Field(default="localhost")
    mongodb_port: int = Field(default=27017)
    mongodb_username: Optional[str] = Field(default=None)
    mongodb_password: Optional[str] = Field(default=None)
    mongodb_database: str = Field(default="marketplace")

    @property
    def mongodb_url(self) -> str:
        """Construct MongoDB connection URL (MONGODB_URI wins when set)"""
        if self.mongodb_uri:
            return self.mongodb_uri
        if self.mongodb_username and self.mongodb_password:
            return (
                f"mongodb://{self.mongodb_username}:{self.mongodb_password}"
                f"@{self.mongodb_host}:{self.mongodb_port}/{self.mongodb_database}?authSource=admin"
            )
        return f"mongodb://{self.mongodb_host}:{self.mongodb_port}/{self.mongodb_database}"

    # Logging configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")

    # Request tracing
    correlation_id_header: str = Field(default="X-Correlation-ID")

    # JWT Authentication configuration
    jwt_secret: str = Field(default="your_jwt_secret_key")
    jwt_algorithm: str = Field(default="HS256")
    jwt_expiration: int = Field(default=30 * 24 * 3600)  # seconds

    # Catalogue moderation: when disabled only admins publish directly
    auto_approve_products: bool = Field(default=True)

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


# Global config instance
config = Config()
