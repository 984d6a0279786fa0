"""
config.py — Runtime settings, read from the environment (and ``.env``).

Required:
    GEMINI_API_KEY=...

Optional:
    LANDSCAPER_VISION_MODEL=gemini-3-flash-preview
    LANDSCAPER_IMAGE_MODEL=gemini-2.5-flash-image
    LANDSCAPER_CHAT_MODEL=gemini-3-flash-preview
    LANDSCAPER_DATA_DIR=~/.landscaper          # key-value store location
    LANDSCAPER_EXPORT_DIR=outputs              # where renders are written
    LANDSCAPER_STORAGE_QUOTA=5242880           # bytes, 0 = unlimited
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from .errors import ConfigError

DEFAULT_VISION_MODEL = "gemini-3-flash-preview"
DEFAULT_IMAGE_MODEL = "gemini-2.5-flash-image"
DEFAULT_CHAT_MODEL = "gemini-3-flash-preview"
DEFAULT_DATA_DIR = Path.home() / ".landscaper"
DEFAULT_EXPORT_DIR = Path("outputs")


@dataclass
class Settings:
    api_key: str = ""
    vision_model: str = DEFAULT_VISION_MODEL
    image_model: str = DEFAULT_IMAGE_MODEL
    chat_model: str = DEFAULT_CHAT_MODEL
    data_dir: Path = DEFAULT_DATA_DIR
    export_dir: Path = DEFAULT_EXPORT_DIR
    storage_quota: int = 0

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``environ`` (defaults to ``os.environ`` after loading .env)."""
        if environ is None:
            load_dotenv()
            environ = os.environ

        quota_raw = environ.get("LANDSCAPER_STORAGE_QUOTA", "").strip()
        try:
            quota = int(quota_raw) if quota_raw else 0
        except ValueError:
            raise ConfigError(f"LANDSCAPER_STORAGE_QUOTA must be an integer, got {quota_raw!r}")

        return cls(
            api_key=environ.get("GEMINI_API_KEY", ""),
            vision_model=environ.get("LANDSCAPER_VISION_MODEL") or DEFAULT_VISION_MODEL,
            image_model=environ.get("LANDSCAPER_IMAGE_MODEL") or DEFAULT_IMAGE_MODEL,
            chat_model=environ.get("LANDSCAPER_CHAT_MODEL") or DEFAULT_CHAT_MODEL,
            data_dir=Path(environ.get("LANDSCAPER_DATA_DIR") or DEFAULT_DATA_DIR).expanduser(),
            export_dir=Path(environ.get("LANDSCAPER_EXPORT_DIR") or DEFAULT_EXPORT_DIR).expanduser(),
            storage_quota=max(quota, 0),
        )

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigError("GEMINI_API_KEY not set in environment / .env")
        return self.api_key
