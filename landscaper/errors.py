"""
errors.py — Exceptions raised by the adapters and the store, and the tagged
result the session controller hands back to the front-end.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .models import DesignProject


class LandscaperError(Exception):
    """Base class for all errors raised by this package."""


class ConfigError(LandscaperError):
    """Required configuration (e.g. the API key) is missing."""


class DesignGenerationError(LandscaperError):
    """The image model returned no usable image."""


class StorageError(LandscaperError):
    """The key-value store could not be written."""


class StorageQuotaError(StorageError):
    """A write would exceed the configured storage quota."""


# ── Result model ──────────────────────────────────────────────────────────────

@dataclass
class ActionResult:
    """Outcome of one controller action.

    ``skipped`` is set when the action was a no-op (empty input, nothing
    active, or a request of the same kind already in flight).
    """
    success: bool
    error: str = ""
    skipped: bool = False
    project: Optional[DesignProject] = None
    image_updated: bool = False

    @classmethod
    def ok(cls, project: Optional[DesignProject] = None, image_updated: bool = False) -> "ActionResult":
        return cls(success=True, project=project, image_updated=image_updated)

    @classmethod
    def failed(cls, error: str) -> "ActionResult":
        return cls(success=False, error=error)

    @classmethod
    def skip(cls, reason: str = "") -> "ActionResult":
        return cls(success=False, error=reason, skipped=True)
