from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "BrandSweep"
    debug: bool = False

    database_url: str = "sqlite:///./brandsweep.db"

    encryption_secret_key: Optional[str] = None
    credential_key_name: str = "geminiApiKey"

    gemini_api_key: Optional[str] = None
    gemini_api_base: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_model: str = "gemini-2.0-flash"
    gemini_timeout: Optional[float] = None

    listing_selector: str = 'div[role="listitem"]'
    title_selector: str = 'div[data-cy="title-recipe"]'
    brand_selector_chain: List[str] = [".s-title-instructions-style h2 span"]

    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_reload: bool = False


settings = Settings()
