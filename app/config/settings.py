"""
Configuration settings for Sarathi
Handles environment variables and application settings
"""
import os
from typing import Annotated, List
from pydantic_settings import BaseSettings, NoDecode
from pydantic import field_validator


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "SARATHI"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"

    # JWT Settings
    JWT_SECRET: str = os.getenv("JWT_SECRET", "change-this-in-production")
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRY_MINUTES: int = 1440  # 24 hrs

    # OTP
    OTP_LENGTH: int = 6
    OTP_TTL_SECONDS: int = 300  # 5 minutes
    OTP_MAX_ATTEMPTS: int = 5

    # Languages offered on the login screen
    DEFAULT_LANGUAGE: str = "en"
    SUPPORTED_LANGUAGES: Annotated[List[str], NoDecode] = ["en", "hi"]

    # CORS
    ALLOWED_ORIGINS: Annotated[List[str], NoDecode] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    # Client
    API_BASE_URL: str = os.getenv("API_BASE_URL", "http://localhost:8000")

    # Security
    BCRYPT_ROUNDS: int = 12

    @field_validator("ALLOWED_ORIGINS", "SUPPORTED_LANGUAGES", mode="before")
    @classmethod
    def split_comma_list(cls, v):
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields from .env file


# Create settings instance
settings = Settings()


if settings.ENVIRONMENT == "development":
    settings.DEBUG = True


def validate_settings(current: Settings = settings):
    """Validate critical settings"""
    issues = []

    if current.ENVIRONMENT == "production":
        if current.JWT_SECRET == "change-this-in-production":
            issues.append("JWT_SECRET must be set in production")
        if current.BCRYPT_ROUNDS < 10:
            issues.append("BCRYPT_ROUNDS must be at least 10 in production")

    if current.DEFAULT_LANGUAGE not in current.SUPPORTED_LANGUAGES:
        issues.append(f"DEFAULT_LANGUAGE '{current.DEFAULT_LANGUAGE}' is not in SUPPORTED_LANGUAGES")

    if issues:
        raise ValueError(f"Configuration issues: {', '.join(issues)}")


# Auto-validate on import in production
if settings.ENVIRONMENT == "production":
    validate_settings()
