"""Configuration helpers for the live-ops web application."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from secrets import token_urlsafe

from dotenv import load_dotenv

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(slots=True)
class AppConfig:
    """Settings loaded from environment variables."""

    database_url: str
    secret_key: str
    max_content_length: int
    max_attachment_bytes: int = 5 * 1024 * 1024
    distinct_koc_count: bool = False


def _resolve_secret_key() -> str:
    """Return ``LIVEOPS_SECRET_KEY`` or a one-time generated key."""

    configured = os.getenv("LIVEOPS_SECRET_KEY")
    if configured:
        return configured
    logging.getLogger("liveops.config").warning(
        "LIVEOPS_SECRET_KEY environment variable is not set; generated a one-time key."
    )
    return token_urlsafe(32)


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in _TRUTHY


def load_config() -> AppConfig:
    """Create an :class:`AppConfig` instance from environment variables.

    Values from a local ``.env`` file are loaded first without overriding
    variables already present in the environment.
    """

    load_dotenv()
    default_db = Path("instance/liveops.db")
    database = os.getenv("LIVEOPS_DATABASE")
    if not database:
        default_db.parent.mkdir(parents=True, exist_ok=True)
        database = "sqlite:///" + str(default_db)
    return AppConfig(
        database_url=database,
        secret_key=_resolve_secret_key(),
        max_content_length=int(os.getenv("LIVEOPS_MAX_CONTENT_LENGTH", "16777216")),
        max_attachment_bytes=int(os.getenv("LIVEOPS_MAX_ATTACHMENT_BYTES", "5242880")),
        distinct_koc_count=_env_flag("LIVEOPS_DISTINCT_KOC_COUNT"),
    )
