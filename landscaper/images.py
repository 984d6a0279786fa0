"""
images.py — Image plumbing between files, data URLs and Gemini parts.

Uploads are decoded with Pillow and re-encoded as PNG so every image sent to
the model has a known mime type. Renders coming back from the model are kept
as data URLs and only written to disk on export.
"""

from __future__ import annotations

import base64
import binascii
import io
from pathlib import Path
from typing import Tuple, Union

from google.genai import types
from PIL import Image, UnidentifiedImageError

DEFAULT_MIME = "image/png"
IMAGE_EXTS = {".jpg", ".jpeg", ".png", ".webp", ".bmp", ".gif"}

# Longest edge sent to the model; larger photos are downscaled on upload
MAX_UPLOAD_EDGE = 2048


def to_data_url(data: bytes, mime: str = DEFAULT_MIME) -> str:
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def split_data_url(value: str) -> Tuple[bytes, str]:
    """
    Decode a data URL (or a bare base64 string) into ``(bytes, mime_type)``.

    Bare base64 is assumed to be PNG. Raises ValueError on malformed input.
    """
    if not value:
        raise ValueError("empty image data")

    mime = DEFAULT_MIME
    payload = value
    if "," in value:
        header, payload = value.split(",", 1)
        if header.startswith("data:"):
            declared = header[len("data:"):].split(";", 1)[0].strip()
            if declared:
                mime = declared

    try:
        return base64.b64decode(payload, validate=True), mime
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"invalid base64 image data: {exc}") from exc


def to_part(value: str) -> types.Part:
    """Wrap a data URL as an inline-data part for generate_content."""
    data, mime = split_data_url(value)
    return types.Part.from_bytes(data=data, mime_type=mime)


def normalize_image(data: bytes, max_edge: int = MAX_UPLOAD_EDGE) -> bytes:
    """Decode any Pillow-readable image and return it as PNG bytes."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            if img.mode not in ("RGB", "RGBA"):
                img = img.convert("RGBA" if "A" in img.getbands() else "RGB")
            if max(img.size) > max_edge:
                img.thumbnail((max_edge, max_edge))
            out = io.BytesIO()
            img.save(out, format="PNG")
            return out.getvalue()
    except (UnidentifiedImageError, OSError) as exc:
        raise ValueError(f"not a readable image: {exc}") from exc


def load_image_file(path: Union[str, Path]) -> str:
    """Read an image file from disk and return it as a PNG data URL."""
    path = Path(path).expanduser()
    if path.suffix.lower() not in IMAGE_EXTS:
        raise ValueError(f"unsupported image type: {path.suffix or '(none)'}")
    return to_data_url(normalize_image(path.read_bytes()))


def export_image(value: str, save_path: Path) -> Path:
    """Write a data URL to ``save_path``; the format follows the file suffix."""
    data, _ = split_data_url(value)
    save_path.parent.mkdir(parents=True, exist_ok=True)
    with Image.open(io.BytesIO(data)) as img:
        if save_path.suffix.lower() in (".jpg", ".jpeg") and img.mode != "RGB":
            img = img.convert("RGB")
        img.save(save_path)
    return save_path
