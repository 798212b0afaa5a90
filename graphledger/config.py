"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache): single instance per process
    - smoothing_alpha is strictly between 0 and 1 (one value for the whole system)
    - initial_user_tokens is never negative

Design Decisions:
    - Defaults provided for every setting so a local docker-compose works out of the box
    - Tests override through environment variables before the first get_settings() call
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://graph:graph@db:5432/graphledger"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres hands out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Moderation: EMA blend factor applied on approval
    smoothing_alpha: float = 0.9

    @field_validator("smoothing_alpha")
    @classmethod
    def check_alpha_bounds(cls, v: float) -> float:
        if not 0 < v < 1:
            raise ValueError("smoothing_alpha must be strictly between 0 and 1")
        return v

    # Tokens granted when a user is provisioned
    initial_user_tokens: float = 0.0

    @field_validator("initial_user_tokens")
    @classmethod
    def check_initial_tokens(cls, v: float) -> float:
        if v < 0:
            raise ValueError("initial_user_tokens cannot be negative")
        return v

    # Simulation
    simulation_max_steps: int = 10_000

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
