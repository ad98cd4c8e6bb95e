# environment driven settings for the api, cli and completion client
import functools
import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int, minimum: int = 1) -> int:
    raw = os.getenv(name)
    if raw is None:
        return int(default)
    try:
        value = int(raw)
    except ValueError:
        return int(default)
    return max(minimum, value)


def _env_float(name: str, default: float, minimum: float = 0.0) -> float:
    raw = os.getenv(name)
    if raw is None:
        return float(default)
    try:
        value = float(raw)
    except ValueError:
        return float(default)
    return max(float(minimum), value)


def _env_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class Settings:
    openai_api_key: str = ""
    openai_api_base: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-3.5-turbo"
    openai_max_tokens: int = 500
    openai_timeout: float = 60.0
    cors_origins: List[str] = field(default_factory=lambda: ["http://localhost:3000"])
    log_level: str = "INFO"
    max_sessions: int = 1000

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY", ""),
            openai_api_base=os.getenv("OPENAI_API_BASE", "https://api.openai.com/v1").rstrip("/"),
            openai_model=os.getenv("OPENAI_MODEL", "gpt-3.5-turbo"),
            openai_max_tokens=_env_int("OPENAI_MAX_TOKENS", 500),
            openai_timeout=_env_float("OPENAI_TIMEOUT", 60.0, minimum=1.0),
            cors_origins=_env_list("CORS_ORIGINS", "http://localhost:3000"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            max_sessions=_env_int("MAX_SESSIONS", 1000),
        )


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Settings read once from the environment (and .env if present)"""
    return Settings.from_env()
