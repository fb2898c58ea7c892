"""
Application settings loaded from environment variables.
Uses pydantic-settings for type-safe configuration.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with defaults for development."""

    # Database
    database_url: str = "sqlite:///./cafe_orders.db"
    sql_echo: bool = False  # Log every SQL statement (development only)

    # Environment
    environment: str = "development"
    debug: bool = True

    # Order numbers: retries before giving up on finding an unused number
    order_number_max_attempts: int = 10

    # Inventory reports
    low_stock_report_limit: int = 200

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    def validate_production_settings(self) -> list[str]:
        """
        Validate that the configuration is usable in production.
        Returns a list of validation errors. Empty list means all checks pass.
        """
        errors = []

        if self.environment == "production":
            if self.debug:
                errors.append("DEBUG must be False in production")

            if self.sql_echo:
                errors.append("SQL_ECHO must be False in production")

            if self.database_url.startswith("sqlite"):
                errors.append("DATABASE_URL must point to a server database in production")

        if self.order_number_max_attempts < 1:
            errors.append("ORDER_NUMBER_MAX_ATTEMPTS must be at least 1")

        return errors


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
