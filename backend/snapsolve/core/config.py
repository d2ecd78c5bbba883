from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv


def _load_dotenv() -> None:
    if os.getenv("SNAPSOLVE_SKIP_DOTENV") == "1":
        return

    env_path = Path(__file__).resolve().parents[2] / ".env"
    if not env_path.exists():
        return

    load_dotenv(env_path, override=True)


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _parse_positive_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    raw = value.strip()
    if not raw:
        return default
    try:
        parsed = int(raw)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _normalize_prefix(value: str) -> str:
    prefix = "/" + value.strip().strip("/")
    return "" if prefix == "/" else prefix


@dataclass(frozen=True)
class Settings:
    env: str
    app_name: str
    api_prefix: str
    cors_origins: list[str]
    database_url: str | None
    llm_backend: str
    gemini_api_key: str | None
    gemini_model: str
    llm_timeout_seconds: int
    max_media_bytes: int
    render_workers: int
    log_level: str


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    _load_dotenv()

    env = os.getenv("SNAPSOLVE_ENV", "development")
    cors = os.getenv("SNAPSOLVE_CORS_ORIGINS", "http://localhost:5173")
    api_prefix = _normalize_prefix(os.getenv("SNAPSOLVE_API_PREFIX", "/api/mcq"))
    llm_backend = os.getenv("SNAPSOLVE_LLM_BACKEND", "mock").strip().lower() or "mock"
    llm_timeout_seconds = _parse_positive_int(os.getenv("SNAPSOLVE_LLM_TIMEOUT_SECONDS"), default=60)
    max_media_bytes = _parse_positive_int(os.getenv("SNAPSOLVE_MAX_MEDIA_BYTES"), default=3_500_000)
    render_workers = _parse_positive_int(os.getenv("SNAPSOLVE_RENDER_WORKERS"), default=2)
    log_level = os.getenv("SNAPSOLVE_LOG_LEVEL", "INFO").strip().upper() or "INFO"

    return Settings(
        env=env,
        app_name="SnapSolve API",
        api_prefix=api_prefix,
        cors_origins=_split_csv(cors),
        database_url=os.getenv("DATABASE_URL") or None,
        llm_backend=llm_backend,
        gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
        gemini_model=os.getenv("GEMINI_MODEL", "gemini-2.5-flash"),
        llm_timeout_seconds=llm_timeout_seconds,
        max_media_bytes=max_media_bytes,
        render_workers=render_workers,
        log_level=log_level,
    )
