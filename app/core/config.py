"""
app/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (DB URI, token secret, upload paths)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, validator
from pydantic_settings import BaseSettings
from typing import Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Validates all required configs on startup.
    """
    
    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"
    
    # MongoDB
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    MONGODB_DB_NAME: str = Field(
        default="accounts",
        description="MongoDB database name"
    )
    
    # Access tokens
    TOKEN_KEY: str = Field(
        default="change-me-in-production",
        description="Secret used to sign access tokens"
    )
    TOKEN_ALGORITHM: str = Field(
        default="HS256",
        description="JWT signing algorithm"
    )
    TOKEN_EXPIRE_HOURS: int = Field(
        default=2,
        description="Access token lifetime in hours"
    )
    
    # Passwords
    PASSWORD_HASH_ITERATIONS: int = Field(
        default=10000,
        description="PBKDF2 iterations used when hashing passwords"
    )
    
    # Avatar uploads
    SERVER_URL: str = Field(
        default="localhost:8000",
        description="Public host (and port) used to build avatar URLs"
    )
    UPLOAD_DIR: str = Field(
        default="uploads",
        description="Directory where uploaded avatars are written"
    )
    UPLOADS_ROUTE: str = Field(
        default="/uploads",
        description="URL path the upload directory is served from"
    )
    MAX_AVATAR_BYTES: int = Field(
        default=5 * 1024 * 1024,
        description="Maximum accepted avatar size in bytes"
    )
    
    # Application
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    API_PREFIX: str = Field(
        default="",
        description="API route prefix"
    )
    CORS_ORIGINS: list = Field(
        default=["*"],
        description="Allowed CORS origins"
    )
    
    @validator("TOKEN_KEY")
    def validate_token_key(cls, v, values):
        """Ensure the token key is changed in production."""
        if values.get("ENVIRONMENT") == "production" and v == "change-me-in-production":
            raise ValueError("TOKEN_KEY must be changed in production environment")
        return v
    
    @validator("TOKEN_EXPIRE_HOURS")
    def validate_token_expiry(cls, v):
        if v <= 0:
            raise ValueError("TOKEN_EXPIRE_HOURS must be positive")
        return v
    
    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"
    
    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"
    
    class Config:
        env_file = ".env"
        case_sensitive = True
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()


def validate_settings():
    """
    Validates critical settings on application startup.
    Raises ValueError if any required setting is missing or invalid.
    """
    errors = []
    
    if not settings.MONGODB_URL:
        errors.append("MONGODB_URL is required")
    
    if not settings.MONGODB_DB_NAME:
        errors.append("MONGODB_DB_NAME is required")
    
    if not settings.UPLOADS_ROUTE.startswith("/"):
        errors.append("UPLOADS_ROUTE must start with '/'")
    
    # Production-specific validations
    if settings.is_production:
        if settings.TOKEN_KEY == "change-me-in-production":
            errors.append("TOKEN_KEY must be set in production")
        if settings.DEBUG:
            errors.append("DEBUG must be disabled in production")
    
    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")
    
    return True
