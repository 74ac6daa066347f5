from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="TALINGCHAN_")

    app_name: str = "Battle of Talingchan Deck Builder"
    debug: bool = False

    # Card data service that serves /api/cards and /api/generate-tournament-pdf
    api_url: str = "http://127.0.0.1:8000"

    request_timeout: float = 30.0

    # TrueType font with Thai glyphs for the decklist image; known system
    # locations are searched when unset
    font_path: Path | None = None

    # When False the service starts with an empty catalog (tests, offline use)
    load_catalog_on_startup: bool = True


settings = Settings()
