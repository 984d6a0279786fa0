"""
store.py — Local persistence for design projects.

  KeyValueStorage — a directory of small JSON files, one per key, with an
                    optional byte quota (like a browser's local storage)
  ProjectStore    — the ordered project list, kept under one key

The in-memory list is authoritative. Load problems start the session with an
empty list; save problems are logged and otherwise ignored.
"""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from .errors import StorageError, StorageQuotaError
from .models import DesignProject

logger = logging.getLogger(__name__)

PROJECTS_KEY = "garden_projects"

_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


# ── Key-value storage ─────────────────────────────────────────────────────────

class KeyValueStorage:
    """String values stored as ``<directory>/<key>.json``."""

    def __init__(self, directory: Path, quota_bytes: int = 0) -> None:
        self.directory = Path(directory)
        self.quota_bytes = quota_bytes   # 0 = unlimited

    def _path(self, key: str) -> Path:
        if not _KEY_RE.match(key):
            raise ValueError(f"invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        encoded = value.encode("utf-8")

        if self.quota_bytes:
            used = sum(
                p.stat().st_size
                for p in self.directory.glob("*.json")
                if p != path
            ) if self.directory.exists() else 0
            if used + len(encoded) > self.quota_bytes:
                raise StorageQuotaError(
                    f"writing {key!r} needs {used + len(encoded)} bytes, quota is {self.quota_bytes}"
                )

        tmp_name = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}_", suffix=".tmp")
            with os.fdopen(fd, "wb") as handle:
                handle.write(encoded)
            os.replace(tmp_name, path)
        except OSError as exc:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(f"could not write {path}: {exc}") from exc

    def remove(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()


# ── Project list ──────────────────────────────────────────────────────────────

class ProjectStore:
    """Owns the ordered list of projects (newest first)."""

    def __init__(self, storage: KeyValueStorage, key: str = PROJECTS_KEY) -> None:
        self.storage = storage
        self.key = key
        self._projects: List[DesignProject] = []

    @property
    def projects(self) -> List[DesignProject]:
        return list(self._projects)

    def __len__(self) -> int:
        return len(self._projects)

    def load(self) -> List[DesignProject]:
        """Read the persisted list. Never raises."""
        self._projects = []
        try:
            raw = self.storage.get(self.key)
            if raw is None:
                return self.projects
            records = json.loads(raw)
            if not isinstance(records, list):
                raise ValueError(f"expected a JSON array under {self.key!r}")
        except (OSError, ValueError) as exc:
            logger.error("Failed to load projects: %s", exc)
            return self.projects

        for record in records:
            try:
                self._projects.append(DesignProject.model_validate(record))
            except ValidationError as exc:
                logger.warning(
                    "Skipping unreadable project %s: %d validation error(s)",
                    record.get("id", "?") if isinstance(record, dict) else "?",
                    exc.error_count(),
                )
        logger.info("Loaded %d project(s)", len(self._projects))
        return self.projects

    def save(self) -> bool:
        """Persist the current list. Returns False (and logs) on failure."""
        payload = json.dumps([p.model_dump(mode="json") for p in self._projects])
        try:
            self.storage.set(self.key, payload)
        except StorageQuotaError as exc:
            logger.warning("Project list is too large for local storage: %s", exc)
            return False
        except (StorageError, OSError, ValueError) as exc:
            logger.error("Failed to save projects: %s", exc)
            return False
        return True

    def get(self, project_id: str) -> Optional[DesignProject]:
        return next((p for p in self._projects if p.id == project_id), None)

    def add(self, project: DesignProject) -> None:
        """Prepend a new project and persist."""
        self._projects.insert(0, project)
        self.save()

    def replace(self, project: DesignProject) -> bool:
        """Swap in ``project`` for the stored project with the same id and persist."""
        for idx, existing in enumerate(self._projects):
            if existing.id == project.id:
                self._projects[idx] = project
                self.save()
                return True
        logger.warning("Project %s not found, nothing replaced", project.id)
        return False
