"""Landscaper Studio — AI landscape redesigns from a photo of your yard."""

from .models import ChatMessage, DesignComplexity, DesignProject, GardenStyle, View
from .session import SessionController, needs_image_update
from .store import KeyValueStorage, ProjectStore

__all__ = [
    "ChatMessage",
    "DesignComplexity",
    "DesignProject",
    "GardenStyle",
    "KeyValueStorage",
    "ProjectStore",
    "SessionController",
    "View",
    "needs_image_update",
]
