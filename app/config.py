import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


@dataclass(frozen=True)
class Settings:
    gemini_api_key: Optional[str]
    gemini_model: str = DEFAULT_GEMINI_MODEL
    gemini_base_url: str = DEFAULT_GEMINI_BASE_URL
    gemini_timeout: float = 30.0
    log_level: str = "INFO"
    cors_origins: Tuple[str, ...] = ("*",)


def _split_origins(raw: Optional[str]) -> Tuple[str, ...]:
    if not raw:
        return ("*",)
    origins = tuple(o.strip() for o in raw.split(",") if o.strip())
    return origins or ("*",)


def load_settings() -> Settings:
    """
    Build settings from the environment.

    GEMINI_API_KEY wins over API_KEY (the variable older front-ends exported).
    """
    return Settings(
        gemini_api_key=os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or None,
        gemini_model=os.getenv("GEMINI_MODEL", DEFAULT_GEMINI_MODEL),
        gemini_base_url=os.getenv("GEMINI_BASE_URL", DEFAULT_GEMINI_BASE_URL).rstrip("/"),
        gemini_timeout=float(os.getenv("GEMINI_TIMEOUT", "30")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        cors_origins=_split_origins(os.getenv("CORS_ORIGINS")),
    )


@lru_cache
def get_settings() -> Settings:
    return load_settings()
