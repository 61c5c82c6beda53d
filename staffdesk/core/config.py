"""
Configuration management for the staffdesk backend
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from typing import Optional, List
from staffdesk.core.constants import MAX_SUSPENSION_DAYS


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    DATABASE_URL: str = Field(default="sqlite:///./staffdesk.db", description="Database URL")
    JWT_SECRET_KEY: str = Field(default="change-me-local-only", description="JWT secret key for token signing")

    JWT_ALGORITHM: str = Field(default="HS256", description="JWT algorithm")
    JWT_EXPIRE_MINUTES: int = Field(default=120, description="JWT token expiration in minutes")

    APP_ENV: str = Field(default="local", description="Application environment: local, staging, prod")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level: DEBUG, INFO, WARNING, ERROR")

    ALLOWED_ORIGINS: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins. Use '*' for local only."
    )

    VERSION: Optional[str] = Field(default=None, description="Application version (git SHA or semver)")

    # Super-admin created on startup when the profiles table has none
    INITIAL_ADMIN_EMAIL: str = Field(default="admin@company.com")
    INITIAL_ADMIN_PASSWORD: str = Field(default="Admin@12345")

    DEFAULT_SUSPENSION_DAYS: int = Field(default=7, ge=1, le=MAX_SUSPENSION_DAYS, description="Suspension length when none is given")
    CURRENCY: str = Field(default="NGN", description="Currency code stored on new salary rows")

    @field_validator("APP_ENV")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        """Validate APP_ENV"""
        allowed = ["local", "staging", "prod"]
        if v not in allowed:
            raise ValueError(f"APP_ENV must be one of {allowed}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate LOG_LEVEL"""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"LOG_LEVEL must be one of {allowed}")
        return v.upper()

    def validate_production(self) -> None:
        """
        Validate settings for production environment

        Raises:
            ValueError: If production settings are invalid
        """
        if self.APP_ENV == "prod":
            if len(self.JWT_SECRET_KEY) < 32:
                raise ValueError(
                    "JWT_SECRET_KEY must be at least 32 characters in production environment"
                )
            if self.ALLOWED_ORIGINS == "*" or not self.ALLOWED_ORIGINS:
                raise ValueError(
                    "ALLOWED_ORIGINS must be explicitly set (not '*') in production environment"
                )

    def get_allowed_origins_list(self) -> List[str]:
        """
        Get list of allowed CORS origins

        Returns:
            List of allowed origins (or ['*'] for local)
        """
        if self.ALLOWED_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]


settings = Settings()

if settings.APP_ENV == "prod":
    settings.validate_production()
