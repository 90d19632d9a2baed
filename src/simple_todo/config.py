# src/simple_todo/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Every value has a usable default; the app runs with no configuration at all.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

ENV_PREFIX = "TODO"

STORAGE_BACKENDS = ("sqlite", "file", "memory")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


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


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _env_choice(name: str, default: str, choices: tuple[str, ...]) -> str:
    raw = _env(name, default).strip().lower()
    if raw in choices:
        return raw
    logger.warning("%s=%r is not one of %s; using %r", name, raw, ", ".join(choices), default)
    return default


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Console ----
    console_enabled: bool
    highlight_renders: int

    # ---- Storage ----
    storage_backend: str
    storage_key: str
    persist_async: bool
    timestamp_format: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    db_path: Path
    blob_dir: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "simple-todo").strip() or "simple-todo"
        log_level = _env(_k("LOG_LEVEL"), "WARNING")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)
        highlight_renders = max(0, _env_int(_k("HIGHLIGHT_RENDERS"), 2))

        storage_backend = _env_choice(_k("STORAGE_BACKEND"), "sqlite", STORAGE_BACKENDS)
        storage_key = _env(_k("STORAGE_KEY"), "tasks").strip() or "tasks"
        persist_async = _env_bool(_k("PERSIST_ASYNC"), True)
        timestamp_format = _env(_k("TIMESTAMP_FORMAT"), "%Y-%m-%d %H:%M:%S") or "%Y-%m-%d %H:%M:%S"

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/simple_todo"))
        db_path = _env_path(_k("DB_PATH"), data_dir / "tasks.sqlite3")
        blob_dir = _env_path(_k("BLOB_DIR"), data_dir / "blobs")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            highlight_renders=highlight_renders,
            storage_backend=storage_backend,
            storage_key=storage_key,
            persist_async=persist_async,
            timestamp_format=timestamp_format,
            data_dir=data_dir,
            db_path=db_path,
            blob_dir=blob_dir,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
