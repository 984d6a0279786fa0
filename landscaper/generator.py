"""
generator.py — Renders a landscape redesign with the Gemini image model.

Inputs: the yard photo, an optional style reference image, and an instruction.
The instruction is wrapped in the fixed rubric from prompts.py (boundaries,
complexity tier, planting principles, kept features) before it is sent.

Returns the first inline image of the response as a PNG data URL, or raises
DesignGenerationError when the model sends back no image.
"""

from __future__ import annotations

import base64
import logging
from typing import Optional, Sequence

from google import genai
from google.genai import types

from .config import DEFAULT_IMAGE_MODEL
from .errors import DesignGenerationError
from .images import to_data_url, to_part
from .models import DesignComplexity
from .prompts import build_generation_prompt

logger = logging.getLogger(__name__)

NO_CANDIDATES_MESSAGE = (
    "The AI Architect could not generate a design. "
    "Please try a different photo or description."
)
NO_IMAGE_MESSAGE = "No image data found in the response."


def extract_image(response) -> str:
    """Pull the first inline image out of a generate_content response."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates or not candidates[0].content or not candidates[0].content.parts:
        raise DesignGenerationError(NO_CANDIDATES_MESSAGE)

    for part in candidates[0].content.parts:
        inline = getattr(part, "inline_data", None)
        if inline and inline.data:
            data = inline.data
            if isinstance(data, str):
                data = base64.b64decode(data)
            return to_data_url(data, inline.mime_type or "image/png")

    raise DesignGenerationError(NO_IMAGE_MESSAGE)


class DesignGenerator:
    """Image-to-image redesign call."""

    def __init__(self, client: genai.Client, model: str = DEFAULT_IMAGE_MODEL) -> None:
        self.client = client
        self.model = model

    def generate(
        self,
        base_image: str,
        instruction: str,
        reference_image: Optional[str] = None,
        style: Optional[str] = None,
        kept_features: Sequence[str] = (),
        complexity: DesignComplexity = DesignComplexity.BALANCED,
    ) -> str:
        """
        Generate a redesign of ``base_image``.

        Args:
            base_image:      Yard photo as a data URL
            instruction:     What to do, e.g. from build_start_instruction()
            reference_image: Optional inspiration image (data URL)
            style:           Named style the render must follow, if any
            kept_features:   Detected features that must stay untouched
            complexity:      Transformation tier

        Returns:
            The rendered image as a data URL.
        """
        parts = [to_part(base_image)]
        if reference_image:
            parts.append(to_part(reference_image))

        prompt = build_generation_prompt(
            instruction,
            style=style,
            kept_features=kept_features,
            complexity=complexity,
            has_reference=bool(reference_image),
        )
        parts.append(types.Part.from_text(text=prompt))

        logger.info(
            "Generating design (%s, %s, %d kept feature(s)%s)",
            style or "no named style",
            complexity.name.lower(),
            len(kept_features),
            ", with reference" if reference_image else "",
        )
        response = self.client.models.generate_content(
            model=self.model,
            contents=parts,
            config=types.GenerateContentConfig(
                response_modalities=["IMAGE", "TEXT"],
            ),
        )
        return extract_image(response)
