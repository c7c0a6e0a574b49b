"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache): single instance per process
    - format_rules() is the only way settings reach the functional core

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
    - Digit bounds are configurable; the date pattern is fixed (yyyy-MM-dd HH:mm:ss)
"""

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

from rfid_ledger.core.domain_types import FormatRules


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://rfid:rfid@db:5432/rfid_ledger"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Formats
    epc_digits: int = 3
    tag_min_digits: int = 1
    tag_max_digits: int = 10
    refcode_digits: int = 5

    @model_validator(mode="after")
    def check_tag_bounds(self) -> "Settings":
        if not 0 < self.tag_min_digits <= self.tag_max_digits:
            raise ValueError("tag_min_digits must be positive and <= tag_max_digits")
        return self

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    def format_rules(self) -> FormatRules:
        return FormatRules(
            epc_digits=self.epc_digits,
            tag_min_digits=self.tag_min_digits,
            tag_max_digits=self.tag_max_digits,
            refcode_digits=self.refcode_digits,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
