"""
Application Settings
Load from environment variables
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings from environment"""

    # ======================
    # Application
    # ======================
    APP_ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # ======================
    # Narrative enrichment (Mistral)
    # ======================
    NARRATIVE_ENABLED: bool = True
    MISTRAL_API_KEY: Optional[str] = None
    MISTRAL_BASE_URL: str = "https://api.mistral.ai"
    MISTRAL_MODEL: str = "mistral-large-latest"
    NARRATIVE_TEMPERATURE: float = 0.3
    NARRATIVE_MAX_TOKENS: int = 1200
    NARRATIVE_TIMEOUT_SECONDS: float = 30.0

    # ======================
    # Contact sync (HubSpot)
    # ======================
    HUBSPOT_ENABLED: bool = True
    HUBSPOT_ACCESS_TOKEN: Optional[str] = None
    HUBSPOT_BASE_URL: str = "https://api.hubapi.com"
    CONTACT_SYNC_TIMEOUT_SECONDS: float = 15.0

    # ======================
    # Pydantic v2 config
    # ======================
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="forbid",
    )

    @property
    def narrative_configured(self) -> bool:
        return self.NARRATIVE_ENABLED and bool(self.MISTRAL_API_KEY)

    @property
    def contact_sync_configured(self) -> bool:
        return self.HUBSPOT_ENABLED and bool(self.HUBSPOT_ACCESS_TOKEN)


settings = Settings()
