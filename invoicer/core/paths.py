from __future__ import annotations

import os
import sys
from pathlib import Path


def is_frozen() -> bool:
    return bool(getattr(sys, "frozen", False))


def base_path() -> Path:
    """Return the base path for bundled resources (assets) depending on runtime.

    - In PyInstaller onefile, resources are extracted to sys._MEIPASS.
    - Otherwise, use the project root (the directory holding ``invoicer/``).
    """
    if is_frozen():
        meipass = getattr(sys, "_MEIPASS", None)
        if meipass:
            return Path(meipass)
    return Path(__file__).resolve().parents[2]


def resource_path(rel: str | Path) -> Path:
    """Resolve a resource path (e.g., 'assets/fonts/Inter-Regular.ttf') for current runtime."""
    rel = Path(rel)
    return base_path() / rel


def settings_path() -> Path:
    """Location of settings.json; ``INVOICER_SETTINGS`` wins over ~/.invoicer."""
    override = os.environ.get("INVOICER_SETTINGS")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".invoicer" / "settings.json"
