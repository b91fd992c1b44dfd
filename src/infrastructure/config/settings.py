from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    app_name: str = "Hunting Permits Registry"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database
    database_url: str = "sqlite+aiosqlite:///./hunting_registry.db"
    database_echo: bool = False
    database_pool_size: int = 20
    database_max_overflow: int = 30
    database_auto_create: bool = False  # Schema is normally managed by migrations

    # CORS - comma-separated list of allowed origins
    allowed_origins: str = "http://localhost:3000,http://localhost:5173"

    # Requests
    request_timeout_seconds: float = 30.0

    # Maintenance operations (id resequencing) are refused unless enabled
    maintenance_enabled: bool = False

    @model_validator(mode="after")
    def validate_database_config(self) -> "Settings":
        """Validate that the database URL uses an asyncio driver"""
        if not self.database_url:
            raise ValueError(
                "database_url is required. "
                "Set DATABASE_URL environment variable or update .env file."
            )
        driver = self.database_url.split("://", 1)[0]
        if driver not in ("postgresql+asyncpg", "sqlite+aiosqlite"):
            raise ValueError(
                f"Invalid database driver '{driver}'. "
                f"Must be one of: 'postgresql+asyncpg', 'sqlite+aiosqlite'"
            )
        return self

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="allow",
        case_sensitive=False,
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
