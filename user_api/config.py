"""Configuration management for the application."""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", frozen=True
    )

    # Database: either a full URL or discrete components
    database_url: str | None = Field(default=None)
    database_host: str = Field(default="localhost")
    database_port: int = Field(default=5432)
    database_name: str = Field(default="user_api")
    database_user: str = Field(default="postgres")
    database_password: str = Field(default="postgres")

    # JWT (no default secret; token operations fail until one is provided)
    jwt_secret: str = Field(default="")
    jwt_algorithm: str = Field(default="HS256")
    jwt_expires_in: str = Field(default="24h")

    # Password hashing cost factor
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # API
    environment: str = Field(default="development")
    cors_origin: str = Field(default="http://localhost:3000")
    log_level: str = Field(default="INFO")

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Validate that production has secure settings."""
        if self.environment == "production":
            if not self.jwt_secret:
                raise ValueError("JWT_SECRET must be set in production")
            if "localhost" in self.sqlalchemy_database_url:
                raise ValueError("DATABASE_URL should not use localhost in production")
        return self

    @property
    def sqlalchemy_database_url(self) -> str:
        """Connection string, built from the discrete components when no URL is set."""
        if self.database_url:
            return self.database_url
        return (
            f"postgresql://{self.database_user}:{self.database_password}"
            f"@{self.database_host}:{self.database_port}/{self.database_name}"
        )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
