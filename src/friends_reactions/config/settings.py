"""Runtime settings loaded from environment variables."""

from functools import lru_cache
from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

NonEmptyStr = Annotated[str, Field(min_length=1)]


class Settings(BaseSettings):
    """Environment-driven application settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: NonEmptyStr = Field(validation_alias="DATABASE_URL")
    sync_hmac_secret: NonEmptyStr = Field(validation_alias="SYNC_HMAC_SECRET")
    emoji_catalog_path: NonEmptyStr | None = Field(
        default=None,
        validation_alias="EMOJI_CATALOG_PATH",
    )
    selected_emojis: str | None = Field(
        default=None,
        validation_alias="REACTIONS_SELECTED_EMOJIS",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Load and cache application settings."""

    return Settings()  # type: ignore[call-arg]
