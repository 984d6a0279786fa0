"""
architect.py — Advisory chat with the "senior landscape architect".

Used for chat turns that should not change the render: the model sees the
latest image plus a Client/Architect transcript and answers in text.
"""

from __future__ import annotations

import logging
from typing import Iterable

from google import genai
from google.genai import types

from .config import DEFAULT_CHAT_MODEL
from .images import to_part
from .prompts import ADVISORY_FALLBACK, build_advisory_prompt

logger = logging.getLogger(__name__)


class ArchitectChat:
    def __init__(self, client: genai.Client, model: str = DEFAULT_CHAT_MODEL) -> None:
        self.client = client
        self.model = model

    def reply(self, history: Iterable[dict], latest_image: str, message: str) -> str:
        """Return the architect's advice, or a fixed fallback if the model is silent."""
        response = self.client.models.generate_content(
            model=self.model,
            contents=[
                to_part(latest_image),
                types.Part.from_text(text=build_advisory_prompt(history, message)),
            ],
        )
        text = (response.text or "").strip()
        if not text:
            logger.warning("Architect returned an empty reply, using fallback")
            return ADVISORY_FALLBACK
        return text
