"""
session.py — Session controller: the single owner of studio state.

Flow:
  upload_yard_photo   → detector → selection defaults to every detected feature
  toggle / style / reference / complexity / requirements
  start_design        → generator → new project, prepended, active, STUDIO view
  send_message        → keyword routing:
                          image-changing → generator (from the ORIGINAL photo)
                          advisory       → architect chat
                        → history appended → persisted

Adapter calls are blocking google-genai requests; they run in the default
executor so the event loop stays free. One busy flag per request kind
(detecting / generating / chatting): a second request of the same kind while
one is in flight is skipped, not queued.

Every action returns an ActionResult instead of raising.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import Callable, List, Optional, Set, TypeVar

from .architect import ArchitectChat
from .detector import ObjectDetector
from .errors import ActionResult
from .generator import DesignGenerator
from .models import ChatMessage, DesignComplexity, DesignProject, GardenStyle, View
from .prompts import (
    REFINEMENT_REPLY,
    build_refine_instruction,
    build_start_instruction,
    project_name,
    welcome_message,
)
from .store import ProjectStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Case-insensitive substrings that mark a chat message as a request to change the image
IMAGE_KEYWORDS = (
    "generate", "change", "add", "remove", "replace",
    "make it", "show me", "update", "put", "plant",
)


def needs_image_update(message: str) -> bool:
    """True when the message should regenerate the render rather than get advice."""
    lowered = message.lower()
    return any(keyword in lowered for keyword in IMAGE_KEYWORDS)


class SessionController:
    """Holds view state, the active project and the landing-page selections."""

    def __init__(
        self,
        store: ProjectStore,
        detector: ObjectDetector,
        generator: DesignGenerator,
        architect: ArchitectChat,
        load: bool = True,
    ) -> None:
        self.store = store
        self.detector = detector
        self.generator = generator
        self.architect = architect

        self.view: View = View.LANDING
        self.active_project: Optional[DesignProject] = None
        self.last_error: str = ""

        # Landing inputs
        self.upload_image: str = ""
        self.reference_image: str = ""
        self.detected_features: List[str] = []
        self.selected_features: Set[str] = set()
        self.selected_style: Optional[GardenStyle] = GardenStyle.MODERN
        self.selected_complexity: DesignComplexity = DesignComplexity.BALANCED
        self.requirements: str = ""

        # Busy flags
        self.is_detecting = False
        self.is_generating = False
        self.is_chatting = False

        if load:
            self.store.load()

    @property
    def projects(self) -> List[DesignProject]:
        return self.store.projects

    @property
    def kept_features(self) -> List[str]:
        """Selected features, in detection order (manual additions last, sorted)."""
        kept = [f for f in self.detected_features if f in self.selected_features]
        extras = sorted(self.selected_features - set(self.detected_features))
        return kept + extras

    async def _run(self, fn: Callable[..., T], *args, **kwargs) -> T:
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, functools.partial(fn, *args, **kwargs))

    # ── Landing inputs ────────────────────────────────────────────────────────

    async def upload_yard_photo(self, image: str) -> ActionResult:
        """Store the yard photo and pre-select every feature the detector finds."""
        if self.is_detecting:
            return ActionResult.skip("Feature detection already in progress")

        self.upload_image = image
        self.detected_features = []
        self.selected_features = set()

        self.is_detecting = True
        try:
            features = await self._run(self.detector.detect, image)
        except Exception as exc:
            # Non-fatal: the user can still design without detected features
            logger.error("Object detection failed: %s", exc)
            return ActionResult.failed(f"Object detection failed: {exc}")
        finally:
            self.is_detecting = False

        self.detected_features = list(features)
        self.selected_features = set(features)
        return ActionResult.ok()

    def upload_reference_image(self, image: str) -> None:
        """A reference image replaces the named style."""
        self.reference_image = image
        if image:
            self.selected_style = None

    def select_style(self, style: Optional[GardenStyle]) -> None:
        """Pick a named style, or None for auto. Either way the reference is dropped."""
        self.selected_style = style
        self.reference_image = ""

    def set_complexity(self, complexity: DesignComplexity) -> None:
        self.selected_complexity = complexity

    def set_requirements(self, text: str) -> None:
        self.requirements = text

    def toggle_feature(self, label: str) -> bool:
        """Flip whether ``label`` is kept. Returns the new membership."""
        if label in self.selected_features:
            self.selected_features.discard(label)
            return False
        self.selected_features.add(label)
        return True

    # ── Design generation ────────────────────────────────────────────────────

    async def start_design(self) -> ActionResult:
        """Generate the first render and open it as a new project."""
        if not self.upload_image:
            return ActionResult.skip("Upload a photo of your yard first")
        if self.is_generating:
            return ActionResult.skip("A design is already being generated")

        self.last_error = ""
        style = self.selected_style
        has_reference = bool(self.reference_image)
        complexity = self.selected_complexity
        requirements = self.requirements.strip()
        kept = self.kept_features

        self.is_generating = True
        try:
            image = await self._run(
                self.generator.generate,
                self.upload_image,
                build_start_instruction(style, has_reference, requirements),
                reference_image=self.reference_image or None,
                style=style.value if style else None,
                kept_features=kept,
                complexity=complexity,
            )
        except Exception as exc:
            logger.error("Design generation failed: %s", exc)
            self.last_error = str(exc) or "Design generation failed."
            return ActionResult.failed(self.last_error)
        finally:
            self.is_generating = False

        project = DesignProject(
            name=project_name(style, has_reference),
            original_image=self.upload_image,
            reference_image=self.reference_image or None,
            current_image=image,
            style=style or GardenStyle.MODERN,
            complexity=complexity,
            kept_features=kept,
            history=[
                ChatMessage(
                    role="assistant",
                    content=welcome_message(style, complexity, has_reference, requirements),
                )
            ],
        )
        self.store.add(project)
        self.active_project = project
        self.view = View.STUDIO
        logger.info("Created project %s (%s)", project.id, project.name)
        return ActionResult.ok(project, image_updated=True)

    # ── Chat ──────────────────────────────────────────────────────────────────

    async def send_message(self, text: str) -> ActionResult:
        """Append the user's message, then either regenerate the image or ask for advice."""
        project = self.active_project
        if not text.strip() or project is None or self.is_chatting:
            return ActionResult.skip()
        refine = needs_image_update(text)
        if refine and self.is_generating:
            return ActionResult.skip("A design is already being generated")

        self.last_error = ""
        self.is_chatting = True
        # Shown immediately; stays even if the reply fails
        project.append_message(ChatMessage(role="user", content=text))

        try:
            if refine:
                return await self._refine_image(project, text)
            return await self._advise(project, text)
        except Exception as exc:
            logger.error("Chat request failed: %s", exc)
            self.last_error = str(exc) or "The architect could not respond."
            return ActionResult.failed(self.last_error)
        finally:
            self.is_chatting = False

    async def _refine_image(self, project: DesignProject, text: str) -> ActionResult:
        self.is_generating = True
        try:
            image = await self._run(
                self.generator.generate,
                project.original_image,
                build_refine_instruction(text),
                reference_image=project.reference_image,
                style=project.style.value,
                kept_features=project.kept_features,
                complexity=project.complexity,
            )
        finally:
            self.is_generating = False

        project.append_message(
            ChatMessage(role="assistant", content=REFINEMENT_REPLY, image_url=image)
        )
        project.current_image = image
        self.store.replace(project)
        return ActionResult.ok(project, image_updated=True)

    async def _advise(self, project: DesignProject, text: str) -> ActionResult:
        reply = await self._run(
            self.architect.reply,
            project.transcript(),
            project.current_image,
            text,
        )
        project.append_message(ChatMessage(role="assistant", content=reply))
        self.store.replace(project)
        return ActionResult.ok(project)

    # ── Navigation ────────────────────────────────────────────────────────────

    def show_gallery(self) -> None:
        self.view = View.GALLERY

    def open_project(self, project_id: str) -> ActionResult:
        project = self.store.get(project_id)
        if project is None:
            return ActionResult.failed(f"No project with id {project_id}")
        self.active_project = project
        self.view = View.STUDIO
        return ActionResult.ok(project)

    def start_new_project(self) -> None:
        """Back to landing. The inspiration image and notes belong to the last design."""
        self.reference_image = ""
        self.requirements = ""
        self.view = View.LANDING
