from __future__ import annotations

import sys
from pathlib import Path


def is_frozen() -> bool:
    return bool(getattr(sys, "frozen", False))


def base_path() -> Path:
    """Return the base path for bundled resources (fonts) depending on runtime.

    - In PyInstaller onefile, resources are extracted to sys._MEIPASS.
    - Otherwise, use the project root (the directory holding invoicegen/).
    """
    if is_frozen():
        meipass = getattr(sys, "_MEIPASS", None)
        if meipass:
            return Path(meipass)
    return Path(__file__).resolve().parents[2]


def resource_path(rel: str | Path) -> Path:
    """Resolve a resource path (e.g., 'assets/fonts/NotoSans-Regular.ttf').

    Absolute paths are returned unchanged.
    """
    rel = Path(rel)
    if rel.is_absolute():
        return rel
    return base_path() / rel


def settings_path() -> Path:
    """Default location of settings.json."""
    return base_path() / "settings.json"
