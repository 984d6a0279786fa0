"""
models.py — Domain model for garden design projects.

  GardenStyle        — the seven named aesthetics
  DesignComplexity   — Simple / Balanced / Premium transformation tiers
  ChatMessage        — one immutable turn of the architect conversation
  DesignProject      — a yard photo, its current render and chat history
  View               — which screen the studio is showing

Images are carried as data URLs (``data:image/png;base64,...``) so a project
serialises to plain JSON without side files.
"""

from __future__ import annotations

import time
import uuid
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


# ── Enums ─────────────────────────────────────────────────────────────────────

class GardenStyle(str, Enum):
    MODERN = "Modern Minimalist"
    TRADITIONAL = "Traditional English"
    ZEN = "Japanese Zen"
    MEDITERRANEAN = "Mediterranean"
    TROPICAL = "Tropical Lush"
    DESERT = "Modern Desert"
    COTTAGE = "English Cottage"


class DesignComplexity(str, Enum):
    SIMPLE = "Simple & Low Maintenance"
    BALANCED = "Balanced & Practical"
    PREMIUM = "Luxury & High-End"

    @property
    def label(self) -> str:
        """Short button label, e.g. 'Premium'."""
        return _COMPLEXITY_LABELS[self][0]

    @property
    def sub_label(self) -> str:
        """How destructive the tier is, e.g. 'Maximum Overhaul'."""
        return _COMPLEXITY_LABELS[self][1]


_COMPLEXITY_LABELS = {
    DesignComplexity.SIMPLE: ("Simple", "Least Destructive"),
    DesignComplexity.BALANCED: ("Balanced", "Moderate Change"),
    DesignComplexity.PREMIUM: ("Premium", "Maximum Overhaul"),
}


class View(str, Enum):
    LANDING = "landing"
    STUDIO = "studio"
    GALLERY = "gallery"


# ── Conversation ──────────────────────────────────────────────────────────────

class ChatMessage(BaseModel):
    """A single chat turn. Frozen: messages are never edited after append."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str
    image_url: Optional[str] = None   # data URL of a render attached to the reply


# ── Project ───────────────────────────────────────────────────────────────────

def _new_project_id() -> str:
    return uuid.uuid4().hex


def _now_ms() -> int:
    return int(time.time() * 1000)


class DesignProject(BaseModel):
    id: str = Field(default_factory=_new_project_id)
    name: str
    original_image: str                     # yard photo as uploaded
    reference_image: Optional[str] = None   # style inspiration, if any
    current_image: str                      # latest successful render
    style: GardenStyle
    complexity: DesignComplexity
    kept_features: List[str] = Field(default_factory=list)
    history: List[ChatMessage] = Field(default_factory=list)
    created_at: int = Field(default_factory=_now_ms)   # epoch milliseconds

    def append_message(self, message: ChatMessage) -> None:
        """Append a turn to the history. History only ever grows."""
        self.history.append(message)

    def transcript(self) -> List[dict]:
        """Role-tagged text history, images stripped."""
        return [{"role": m.role, "content": m.content} for m in self.history]
