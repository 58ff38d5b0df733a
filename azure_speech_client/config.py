"""
Configuration settings for the Azure Speech client.
Loads environment variables (and an optional .env file) into typed settings.
"""
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    # Azure Speech credentials
    AZURE_SPEECH_KEY: str = ""
    AZURE_SPEECH_REGION: str = ""

    # Override for non-standard deployments (defaults to the regional issueToken URI)
    AZURE_SPEECH_AUTH_URI: Optional[str] = None

    # HTTP (seconds)
    SPEECH_HTTP_TIMEOUT: float = 30.0
    SPEECH_TOKEN_TIMEOUT: float = 10.0

    # Sent as User-Agent on synthesis requests
    SPEECH_USER_AGENT: str = "TextToSpeechClient"

    LOG_LEVEL: str = "info"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    @property
    def is_configured(self) -> bool:
        """True when both the subscription key and the region are present."""
        return bool(self.AZURE_SPEECH_KEY.strip() and self.AZURE_SPEECH_REGION.strip())


# Global settings instance
settings = Settings()
