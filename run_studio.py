#!/usr/bin/env python3
"""
run_studio.py — Landscaper Studio entry point.

Usage:
    python run_studio.py [--export-dir renders] [--verbose]

Required env vars (in .env):
    GEMINI_API_KEY=...

Optional:
    LANDSCAPER_DATA_DIR=~/.landscaper     # saved projects
    LANDSCAPER_EXPORT_DIR=outputs         # rendered images
"""

from __future__ import annotations

from dotenv import load_dotenv

load_dotenv()

from landscaper.studio import main  # noqa: E402


if __name__ == "__main__":
    main()
