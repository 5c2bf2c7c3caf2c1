# src/todoscribe/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time (the Gemini key is optional and never hard-coded).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ENV_PREFIX = "TODOSCRIBE"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Remote task API ----
    api_base_url: str
    http_timeout_seconds: float
    logout_on_unauthorized: bool

    # ---- Generative text (Gemini) ----
    gemini_api_key: Optional[str]
    gemini_base_url: str
    gemini_model: str
    gen_temperature: float
    gen_max_output_tokens: int

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    session_path: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "todoscribe") or "todoscribe"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        api_base_url = _env(_k("API_BASE_URL"), "https://fastapi-clean-api.onrender.com").rstrip("/")
        http_timeout_seconds = _env_float(_k("HTTP_TIMEOUT_SECONDS"), 30.0)
        logout_on_unauthorized = _env_bool(_k("LOGOUT_ON_UNAUTHORIZED"), False)

        gemini_api_key = _first_env(_k("GEMINI_API_KEY"), "GEMINI_API_KEY", default=None)
        gemini_base_url = _env(
            _k("GEMINI_BASE_URL"), "https://generativelanguage.googleapis.com/v1beta"
        ).rstrip("/")
        gemini_model = _env(_k("GEMINI_MODEL"), "gemini-1.5-flash")
        gen_temperature = _env_float(_k("GEN_TEMPERATURE"), 0.7)
        gen_max_output_tokens = _env_int(_k("GEN_MAX_OUTPUT_TOKENS"), 500)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/todoscribe"))
        session_path = _env_path(_k("SESSION_PATH"), data_dir / "session.json")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            api_base_url=api_base_url,
            http_timeout_seconds=http_timeout_seconds,
            logout_on_unauthorized=logout_on_unauthorized,
            gemini_api_key=gemini_api_key,
            gemini_base_url=gemini_base_url,
            gemini_model=gemini_model,
            gen_temperature=gen_temperature,
            gen_max_output_tokens=gen_max_output_tokens,
            data_dir=data_dir,
            session_path=session_path,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    """Return the process-wide settings, built from the environment on first use."""
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
