"""
Library settings loaded from environment variables.
Uses pydantic-settings for type-safe configuration.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Settings with defaults for development."""

    # Database
    database_url: str = "sqlite:///./entity_service.db"
    echo_sql: bool = False  # Log every SQL statement emitted by the engine

    # Environment
    environment: str = "development"
    debug: bool = True
    log_level: str = ""  # Empty = DEBUG when debug is on, INFO otherwise

    # Service behavior
    # Commit after every mutation. Disable to let the caller own the transaction;
    # mutations are then only flushed.
    autocommit: bool = True
    # Reject malformed references (foreign entities, transient entities,
    # non-mapping attribute sources) instead of silently filtering them out.
    strict_references: bool = False
    # Column used by latest()/oldest()
    default_created_column: str = "created_at"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    def validate_production(self) -> list[str]:
        """
        Validate settings that must not keep their development defaults in production.
        Returns a list of validation errors. Empty list means all checks pass.
        """
        errors = []

        if self.environment == "production":
            if self.debug:
                errors.append("DEBUG must be False in production")

            if self.database_url.startswith("sqlite"):
                errors.append("DATABASE_URL must point to a server database in production")

            if self.echo_sql:
                errors.append("ECHO_SQL must be False in production")

        return errors


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience exports
settings = get_settings()

DATABASE_URL = settings.database_url
