from __future__ import annotations

import os
from functools import lru_cache
from typing import Mapping, Optional

from dotenv import load_dotenv


load_dotenv()


class Settings:
    """Application settings loaded from environment variables.

    Keep all credentials and config centralized here.
    """

    def __init__(self, env: Optional[Mapping[str, str]] = None) -> None:
        source = os.environ if env is None else env
        self.app_env: str = source.get("APP_ENV", "development")
        self.google_api_key: Optional[str] = (
            source.get("GOOGLE_API_KEY") or source.get("GEMINI_API_KEY") or None
        )
        self.gemini_model: str = source.get("GEMINI_MODEL", "gemini-2.0-flash")
        self.temperature: float = float(source.get("MODEL_TEMPERATURE", "0.7"))
        self.top_p: float = float(source.get("MODEL_TOP_P", "0.95"))
        self.host: str = source.get("HOST", "0.0.0.0")
        self.port: int = int(source.get("PORT", "3000"))
        self.max_history: int = int(source.get("MAX_HISTORY", "20"))
        self._validate()

    @property
    def is_development(self) -> bool:
        return self.app_env.lower() in {"dev", "development", "local"}

    def _validate(self) -> None:
        if not 0 < self.port < 65536:
            raise ValueError("PORT must be between 1 and 65535")
        if self.max_history <= 0:
            raise ValueError("MAX_HISTORY must be positive")
        if not 0.0 <= self.temperature <= 2.0:
            raise ValueError("MODEL_TEMPERATURE must be in [0, 2]")
        if not 0.0 <= self.top_p <= 1.0:
            raise ValueError("MODEL_TOP_P must be in [0, 1]")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
