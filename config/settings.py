from __future__ import annotations

import os
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv


load_dotenv()

PLACEHOLDER_API_KEY = "your_gemini_api_key_here"


class Settings:
    """Application settings loaded from environment variables.

    Keep all credentials and config centralized here. The server reads the
    Gemini credential and listen address, the client reads the backend URL
    and where its chat history lives on disk.
    """

    def __init__(self) -> None:
        self.app_env: str = os.getenv("APP_ENV", "development")
        self.gemini_api_key: Optional[str] = os.getenv("GEMINI_API_KEY") or os.getenv(
            "GOOGLE_API_KEY"
        )
        self.gemini_model: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
        self.host: str = os.getenv("HOST", "0.0.0.0")
        self.port: int = int(os.getenv("PORT", "3000"))
        self.upstream_timeout: float = float(os.getenv("UPSTREAM_TIMEOUT", "60"))
        self.cors_origins: List[str] = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "*").split(",")
            if origin.strip()
        ]

        self.backend_url: str = os.getenv("THUNDER_BACKEND_URL", "http://localhost:3000")
        self.client_timeout: float = float(os.getenv("THUNDER_CLIENT_TIMEOUT", "90"))
        self.storage_path: str = os.path.expanduser(
            os.getenv("THUNDER_STORAGE", "~/.thunder/storage.json")
        )

    @property
    def is_development(self) -> bool:
        return self.app_env.lower() in {"dev", "development", "local"}

    @property
    def credential_configured(self) -> bool:
        return bool(self.gemini_api_key) and self.gemini_api_key != PLACEHOLDER_API_KEY


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
