"""Shared fixtures: tiny real PNGs, fake adapters and a fake genai client."""

from __future__ import annotations

import io
import threading
from types import SimpleNamespace
from typing import List, Optional

import pytest
from PIL import Image

from landscaper.images import to_data_url
from landscaper.session import SessionController
from landscaper.store import KeyValueStorage, ProjectStore


def make_png(color=(34, 139, 34), size=(4, 4)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


def make_data_url(color=(34, 139, 34)) -> str:
    return to_data_url(make_png(color))


# ── Fake adapters ─────────────────────────────────────────────────────────────

class FakeDetector:
    def __init__(self, labels: Optional[List[str]] = None, error: Optional[Exception] = None) -> None:
        self.labels = labels or []
        self.error = error
        self.calls: List[str] = []
        self.gate: Optional[threading.Event] = None

    def detect(self, image: str) -> List[str]:
        self.calls.append(image)
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if self.error:
            raise self.error
        return list(self.labels)


class FakeGenerator:
    def __init__(self, images: Optional[List[str]] = None, error: Optional[Exception] = None) -> None:
        self.images = list(images or [])
        self.error = error
        self.calls: List[dict] = []
        self.gate: Optional[threading.Event] = None

    def generate(self, base_image, instruction, reference_image=None, style=None,
                 kept_features=(), complexity=None) -> str:
        self.calls.append({
            "base_image": base_image,
            "instruction": instruction,
            "reference_image": reference_image,
            "style": style,
            "kept_features": list(kept_features),
            "complexity": complexity,
        })
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if self.error:
            raise self.error
        return self.images.pop(0)


class FakeArchitect:
    def __init__(self, reply: str = "Consider a gravel path.", error: Optional[Exception] = None) -> None:
        self.reply_text = reply
        self.error = error
        self.calls: List[dict] = []

    def reply(self, history, latest_image, message) -> str:
        self.calls.append({"history": list(history), "latest_image": latest_image, "message": message})
        if self.error:
            raise self.error
        return self.reply_text


# ── Fake genai client ─────────────────────────────────────────────────────────

class FakeModels:
    def __init__(self, response) -> None:
        self.response = response
        self.calls: List[dict] = []

    def generate_content(self, model, contents, config=None):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


def fake_client(response) -> SimpleNamespace:
    return SimpleNamespace(models=FakeModels(response))


def text_response(text: Optional[str]) -> SimpleNamespace:
    return SimpleNamespace(text=text, candidates=[])


def image_response(data: bytes, mime_type: str = "image/png") -> SimpleNamespace:
    parts = [
        SimpleNamespace(inline_data=None, text="Here is your design."),
        SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type=mime_type)),
    ]
    return SimpleNamespace(text=None, candidates=[SimpleNamespace(content=SimpleNamespace(parts=parts))])


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def yard_photo() -> str:
    return make_data_url((120, 110, 90))


@pytest.fixture
def storage(tmp_path) -> KeyValueStorage:
    return KeyValueStorage(tmp_path / "storage")


@pytest.fixture
def store(storage) -> ProjectStore:
    return ProjectStore(storage)


@pytest.fixture
def detector() -> FakeDetector:
    return FakeDetector(["Oak Tree", "Utility Box"])


@pytest.fixture
def generator() -> FakeGenerator:
    return FakeGenerator([make_data_url((0, 200, 0)), make_data_url((0, 150, 0)), make_data_url((0, 100, 0))])


@pytest.fixture
def architect() -> FakeArchitect:
    return FakeArchitect()


@pytest.fixture
def controller(store, detector, generator, architect) -> SessionController:
    return SessionController(store, detector, generator, architect)
