# afsverify/core/config.py
from __future__ import annotations

import logging
from typing import Any, List

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from afsverify.core.errors import ConfigError

log = logging.getLogger("afsverify.config")

DEFAULT_ENDPOINT = "https://afs.aliyuncs.com"
DEFAULT_TIMEOUT_MS = 5000


class Settings(BaseSettings):
    """Runtime configuration loaded from .env / environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # --- Credentials ---
    AFS_ACCESS_KEY_ID: str = ""
    AFS_APP_KEY: str = ""
    AFS_ACCESS_KEY_SECRET: str = ""

    # --- Endpoint ---
    AFS_ENDPOINT: str = DEFAULT_ENDPOINT
    AFS_TIMEOUT_MS: int = DEFAULT_TIMEOUT_MS

    def model_post_init(self, __context: Any) -> None:
        # Normalize
        self.AFS_ACCESS_KEY_ID = (self.AFS_ACCESS_KEY_ID or "").strip()
        self.AFS_APP_KEY = (self.AFS_APP_KEY or "").strip()
        self.AFS_ACCESS_KEY_SECRET = (self.AFS_ACCESS_KEY_SECRET or "").strip()
        self.AFS_ENDPOINT = (self.AFS_ENDPOINT or DEFAULT_ENDPOINT).strip().rstrip("/")

    def validate_runtime(self) -> List[str]:
        """
        Fail-fast validation. Returns warnings (non-fatal).
        Raises ConfigError for fatal misconfiguration.
        """
        errors: List[str] = []
        warnings: List[str] = []

        # Credentials (values are never echoed)
        if not self.AFS_ACCESS_KEY_ID:
            errors.append("AFS_ACCESS_KEY_ID is required.")
        if not self.AFS_APP_KEY:
            errors.append("AFS_APP_KEY is required.")
        if not self.AFS_ACCESS_KEY_SECRET:
            errors.append("AFS_ACCESS_KEY_SECRET is required.")

        # Endpoint sanity
        if not self.AFS_ENDPOINT.startswith(("https://", "http://")):
            errors.append("AFS_ENDPOINT must be an http(s) URL.")
        elif self.AFS_ENDPOINT != DEFAULT_ENDPOINT:
            warnings.append(
                f"AFS_ENDPOINT is {self.AFS_ENDPOINT}, not {DEFAULT_ENDPOINT}. "
                "Requests will not reach the production verifier."
            )

        # Timeout sanity
        if self.AFS_TIMEOUT_MS <= 0:
            errors.append("AFS_TIMEOUT_MS must be > 0.")
        elif self.AFS_TIMEOUT_MS > DEFAULT_TIMEOUT_MS:
            warnings.append(
                f"AFS_TIMEOUT_MS ({self.AFS_TIMEOUT_MS}) is above {DEFAULT_TIMEOUT_MS}; "
                "slow verifier calls will hold the caller longer."
            )

        if errors:
            msg = "Config validation failed:\n" + "\n".join([f"- {e}" for e in errors])
            raise ConfigError(msg)

        for w in warnings:
            log.warning(w)
        return warnings


def get_settings() -> Settings:
    """
    Load Settings from the environment / .env on demand.
    Malformed values (e.g. AFS_TIMEOUT_MS=5s) raise ConfigError.
    """
    try:
        return Settings()
    except ValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
        raise ConfigError(
            "Config validation failed:\n" + "\n".join([f"- {f} is invalid." for f in fields])
        ) from e
