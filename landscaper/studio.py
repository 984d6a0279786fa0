"""
Landscaper Studio — terminal front-end.

Usage:
  python run_studio.py
  python -m landscaper.studio --export-dir renders --verbose

Views:
  landing  — yard photo → detected features → style / reference → level → notes
  studio   — chat with the architect; renders are written to the export dir
  gallery  — every saved project, newest first
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from google import genai
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.rule import Rule
from rich.table import Table

from .architect import ArchitectChat
from .config import Settings
from .detector import ObjectDetector
from .errors import ConfigError
from .generator import DesignGenerator
from .images import export_image, load_image_file
from .models import DesignComplexity, DesignProject, GardenStyle, View
from .session import SessionController
from .store import KeyValueStorage, ProjectStore

console = Console()

STUDIO_COMMANDS = {
    "/gallery": "browse saved projects",
    "/new": "start a new project",
    "/export": "write the current render to the export folder",
    "/quit": "exit",
}


# ── Helpers ───────────────────────────────────────────────────────────────────

def parse_indices(raw: str, count: int) -> List[int]:
    """
    Parse '1, 3 4' into zero-based indices, ignoring anything out of range.

    >>> parse_indices("1, 3 9", 3)
    [0, 2]
    """
    indices: List[int] = []
    for token in raw.replace(",", " ").split():
        if not token.isdigit():
            continue
        idx = int(token) - 1
        if 0 <= idx < count and idx not in indices:
            indices.append(idx)
    return indices


def format_created(created_at_ms: int) -> str:
    return datetime.fromtimestamp(created_at_ms / 1000).strftime("%Y-%m-%d")


def render_path(export_dir: Path, project: DesignProject, turn: Optional[int] = None) -> Path:
    name = "current.png" if turn is None else f"render_{turn:02d}.png"
    return export_dir / project.id / name


def style_label(project: DesignProject) -> str:
    return "Custom Reference" if project.reference_image else project.style.value


def build_controller(settings: Settings) -> SessionController:
    client = genai.Client(api_key=settings.require_api_key())
    storage = KeyValueStorage(settings.data_dir, quota_bytes=settings.storage_quota)
    return SessionController(
        store=ProjectStore(storage),
        detector=ObjectDetector(client, model=settings.vision_model),
        generator=DesignGenerator(client, model=settings.image_model),
        architect=ArchitectChat(client, model=settings.chat_model),
    )


# ── Studio app ────────────────────────────────────────────────────────────────

class Studio:
    """Interactive loop over the controller's three views."""

    def __init__(self, controller: SessionController, export_dir: Path) -> None:
        self.controller = controller
        self.export_dir = export_dir

    async def run(self) -> None:
        console.print(Rule("[bold green]Landscaper Studio[/bold green]"))
        console.print(
            "  [dim]Upload a photo. The AI architect keeps your house, driveway and "
            "fencing intact while transforming the landscape.[/dim]\n"
        )
        keep_going = True
        while keep_going:
            view = self.controller.view
            if view == View.LANDING:
                keep_going = await self.landing()
            elif view == View.STUDIO:
                keep_going = await self.studio()
            else:
                keep_going = self.gallery()
        console.print("[dim]Goodbye.[/dim]")

    # ── Landing ───────────────────────────────────────────────────────────────

    async def landing(self) -> bool:
        ctl = self.controller
        console.print(Rule("[bold]New Design[/bold]"))

        raw = Prompt.ask(
            "1. Path to a photo of your current yard [dim](g = gallery, q = quit)[/dim]"
        ).strip()
        if raw.lower() in ("q", "quit", "exit"):
            return False
        if raw.lower() in ("g", "gallery"):
            ctl.show_gallery()
            return True

        image = self._load_image(raw)
        if image is None:
            return True

        with console.status("Detecting features & utilities..."):
            detection = await ctl.upload_yard_photo(image)
        if not detection.success:
            console.print("  [yellow]⚠ Feature detection unavailable — continuing without it[/yellow]")
        self._choose_features()

        ref_raw = Prompt.ask(
            "2. Style inspiration image [dim](optional, Enter to skip)[/dim]", default=""
        ).strip()
        if ref_raw:
            reference = self._load_image(ref_raw)
            if reference:
                ctl.upload_reference_image(reference)
        else:
            ctl.upload_reference_image("")

        if ctl.reference_image:
            console.print("3. Preferred style: [green]determined by inspiration[/green]")
        else:
            self._choose_style()

        self._choose_complexity()
        ctl.set_requirements(
            Prompt.ask("5. Special requirements [dim](optional)[/dim]", default="")
        )

        with console.status("[bold green]The AI architect is drafting your design...[/bold green]"):
            result = await ctl.start_design()

        if not result.success:
            console.print(Panel(result.error or "Design generation failed.", title="Design failed", border_style="red"))
            if not Confirm.ask("Try another photo?", default=True):
                return False
            return True

        path = self._export(result.project)
        if path:
            console.print(f"  [green]✓ Design ready[/green] → {path}")
        return True

    def _export(self, project: DesignProject, turn: Optional[int] = None) -> Optional[Path]:
        target = render_path(self.export_dir, project, turn)
        try:
            return export_image(project.current_image, target)
        except (OSError, ValueError) as exc:
            console.print(f"  [yellow]⚠ Could not write {target}: {exc}[/yellow]")
            return None

    def _load_image(self, raw: str) -> Optional[str]:
        try:
            return load_image_file(raw)
        except (OSError, ValueError) as exc:
            console.print(f"  [red]✗ Could not read {raw}: {exc}[/red]")
            return None

    def _choose_features(self) -> None:
        ctl = self.controller
        features = ctl.detected_features
        if not features:
            return
        while True:
            table = Table(title="Preserve / Hide Elements", caption="House & driveway are always kept")
            table.add_column("#", justify="right")
            table.add_column("Feature")
            table.add_column("Keep", justify="center")
            for idx, label in enumerate(features, 1):
                table.add_row(str(idx), label, "✓" if label in ctl.selected_features else "")
            console.print(table)

            raw = Prompt.ask("Toggle by number [dim](Enter when done)[/dim]", default="")
            indices = parse_indices(raw, len(features))
            if not indices:
                return
            for idx in indices:
                ctl.toggle_feature(features[idx])

    def _choose_style(self) -> None:
        styles = list(GardenStyle)
        for idx, style in enumerate(styles, 1):
            console.print(f"  [bold cyan]{idx}[/bold cyan] {style.value}")
        console.print(f"  [bold cyan]{len(styles) + 1}[/bold cyan] Auto / Flexible")

        current = self.controller.selected_style
        default = styles.index(current) + 1 if current else len(styles) + 1
        choice = IntPrompt.ask(
            "3. Preferred style",
            choices=[str(i) for i in range(1, len(styles) + 2)],
            default=default,
        )
        self.controller.select_style(styles[choice - 1] if choice <= len(styles) else None)

    def _choose_complexity(self) -> None:
        levels = list(DesignComplexity)
        for idx, level in enumerate(levels, 1):
            console.print(f"  [bold cyan]{idx}[/bold cyan] {level.label} [dim]— {level.sub_label}[/dim]")
        choice = IntPrompt.ask(
            "4. Transformation level",
            choices=[str(i) for i in range(1, len(levels) + 1)],
            default=levels.index(self.controller.selected_complexity) + 1,
        )
        self.controller.set_complexity(levels[choice - 1])

    # ── Studio ────────────────────────────────────────────────────────────────

    async def studio(self) -> bool:
        ctl = self.controller
        project = ctl.active_project
        if project is None:
            ctl.start_new_project()
            return True

        console.print(
            Panel(
                f"[bold]Style:[/bold] {style_label(project)}\n"
                f"[bold]Level:[/bold] {project.complexity.label} ({project.complexity.sub_label})\n"
                f"[bold]Kept:[/bold] {', '.join(project.kept_features) or '—'}\n"
                f"[bold]Render:[/bold] {render_path(self.export_dir, project)}",
                title=f"[bold]{project.name}[/bold]",
                border_style="green",
            )
        )
        self._print_history(project.history[-6:])
        console.print(
            "  [dim]" + "  ".join(f"{cmd} {desc}" for cmd, desc in STUDIO_COMMANDS.items()) + "[/dim]"
        )

        while ctl.view == View.STUDIO:
            message = Prompt.ask("💬 Ask the architect").strip()
            if not message:
                continue
            if message.startswith("/"):
                if not self._studio_command(message.lower(), project):
                    return False
                continue

            with console.status("[bold green]Architect is working...[/bold green]"):
                result = await ctl.send_message(message)

            if result.skipped:
                continue
            if not result.success:
                console.print(f"  [yellow]⚠ No reply ({result.error})[/yellow]")
                continue

            reply = project.history[-1]
            self._print_history([reply])
            if result.image_updated:
                turn = sum(1 for m in project.history if m.image_url)
                self._export(project)
                path = self._export(project, turn)
                if path:
                    console.print(f"  [green]✓ New render[/green] → {path}")
        return True

    def _studio_command(self, command: str, project: DesignProject) -> bool:
        ctl = self.controller
        if command == "/quit":
            return False
        if command == "/gallery":
            ctl.show_gallery()
        elif command == "/new":
            ctl.start_new_project()
        elif command == "/export":
            path = self._export(project)
            if path:
                console.print(f"  [green]✓ Exported[/green] → {path}")
        else:
            console.print(
                "  [yellow]Unknown command.[/yellow] "
                + ", ".join(STUDIO_COMMANDS)
            )
        return True

    def _print_history(self, messages: Sequence) -> None:
        for msg in messages:
            who = "[bold cyan]You[/bold cyan]" if msg.role == "user" else "[bold green]Architect[/bold green]"
            suffix = " [dim](new render attached)[/dim]" if msg.image_url else ""
            console.print(f"{who}: {msg.content}{suffix}")

    # ── Gallery ───────────────────────────────────────────────────────────────

    def gallery(self) -> bool:
        ctl = self.controller
        projects = ctl.projects
        console.print(Rule("[bold]Project Gallery[/bold]"))
        if not projects:
            console.print("  [dim]No projects yet.[/dim]")
            ctl.start_new_project()
            return True

        table = Table()
        table.add_column("#", justify="right")
        table.add_column("Name")
        table.add_column("Style")
        table.add_column("Level")
        table.add_column("Created")
        for idx, project in enumerate(projects, 1):
            table.add_row(
                str(idx), project.name, style_label(project),
                project.complexity.label, format_created(project.created_at),
            )
        console.print(table)

        raw = Prompt.ask("Open project # [dim](n = new, q = quit)[/dim]", default="n").strip().lower()
        if raw in ("q", "quit"):
            return False
        indices = parse_indices(raw, len(projects))
        if indices:
            ctl.open_project(projects[indices[0]].id)
        else:
            ctl.start_new_project()
        return True


# ── Entry point ───────────────────────────────────────────────────────────────

def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Landscaper Studio — AI garden redesign")
    parser.add_argument("--data-dir", default=None, help="Where projects are stored")
    parser.add_argument("--export-dir", default=None, help="Where renders are written")
    parser.add_argument("--verbose", action="store_true", help="Log adapter calls")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        format="%(asctime)s — %(levelname)s — %(name)s — %(message)s",
        level=logging.INFO if args.verbose else logging.WARNING,
    )

    settings = Settings.from_env()
    if args.data_dir:
        settings.data_dir = Path(args.data_dir).expanduser()
    if args.export_dir:
        settings.export_dir = Path(args.export_dir).expanduser()

    try:
        controller = build_controller(settings)
    except ConfigError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        console.print("Create a .env file from .env.example and add your key.")
        sys.exit(1)

    try:
        asyncio.run(Studio(controller, settings.export_dir).run())
    except KeyboardInterrupt:
        console.print("\n[dim]Interrupted.[/dim]")


if __name__ == "__main__":
    main()
