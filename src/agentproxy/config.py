"""Process configuration, read once from the environment (and ``.env``)."""
from __future__ import annotations

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

REQUIRED_SETTINGS: tuple[str, ...] = ("FOUNDRY_PROJECT_ENDPOINT", "AGENT_ID")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Required: every non-diagnostic request fails fast without these.
    FOUNDRY_PROJECT_ENDPOINT: str | None = None
    AGENT_ID: str | None = None

    CORS_ORIGIN: str = "*"
    TIMEOUT_MS: int = 60000
    POLL_INTERVAL_MS: int = 1000
    API_VERSION: str = "v1"
    TOKEN_SCOPE: str = "https://ai.azure.com/.default"
    HTTP_TIMEOUT_S: float = 30.0

    # Static bearer token for local runs; managed identity is used when unset.
    AGENT_BEARER_TOKEN: SecretStr | None = None

    @property
    def project_endpoint(self) -> str:
        return (self.FOUNDRY_PROJECT_ENDPOINT or "").rstrip("/")


def missing_settings(cfg: Settings) -> list[str]:
    """Return the names of required settings that are absent or blank."""
    return [name for name in REQUIRED_SETTINGS if not (getattr(cfg, name) or "").strip()]


settings = Settings()
