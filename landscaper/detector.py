"""
detector.py — Finds the yard features a homeowner may want to keep or hide.

  ObjectDetector.detect(image) → ["Oak Tree", "Utility Box", ...]

The response is schema-constrained to a JSON array of strings. Anything that
does not parse is logged and treated as "nothing detected"; transport errors
propagate to the caller.
"""

from __future__ import annotations

import json
import logging
from typing import List

from google import genai
from google.genai import types

from .config import DEFAULT_VISION_MODEL
from .images import to_part
from .prompts import DETECTION_PROMPT

logger = logging.getLogger(__name__)

_LABEL_LIST_SCHEMA = types.Schema(
    type=types.Type.ARRAY,
    items=types.Schema(type=types.Type.STRING),
)


def parse_labels(raw: str) -> List[str]:
    """Parse the model's JSON array into a de-duplicated list of labels."""
    data = json.loads(raw or "[]")
    if not isinstance(data, list):
        raise ValueError(f"expected a JSON array, got {type(data).__name__}")

    labels: List[str] = []
    for item in data:
        if not isinstance(item, str):
            continue
        label = item.strip()
        if label and label not in labels:
            labels.append(label)
    return labels


class ObjectDetector:
    """Vision call that lists removable / keepable yard features."""

    def __init__(self, client: genai.Client, model: str = DEFAULT_VISION_MODEL) -> None:
        self.client = client
        self.model = model

    def detect(self, image: str) -> List[str]:
        response = self.client.models.generate_content(
            model=self.model,
            contents=[to_part(image), types.Part.from_text(text=DETECTION_PROMPT)],
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=_LABEL_LIST_SCHEMA,
            ),
        )
        try:
            labels = parse_labels(response.text or "[]")
        except ValueError as exc:
            # json.JSONDecodeError is a ValueError
            logger.error("Failed to parse object detection results: %s", exc)
            return []

        logger.info("Detected %d feature(s): %s", len(labels), ", ".join(labels))
        return labels
