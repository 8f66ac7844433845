from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Loads keys from process env, and also from a local .env file for convenience.
    model_config = SettingsConfigDict(env_prefix="", extra="ignore", env_file=".env", env_file_encoding="utf-8")

    # Keys
    openai_api_key: str | None = None
    supabase_url: str | None = None
    supabase_anon_key: str | None = None

    # Generation
    openai_text_model: str = "gpt-4o"
    generation_max_tokens: int = 800
    follow_up_max_tokens: int = 1600

    # Storage proxy
    storage_default_bucket: str = "property-images"
    signed_url_expires_in: int = 60 * 60
    asset_fetch_timeout: float = 30.0

    log_level: str = "INFO"


settings = Settings()
