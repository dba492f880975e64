"""Path utilities for OfficePilot, compatible with PyInstaller."""

import sys
from pathlib import Path


def get_resources_dir() -> Path:
    """Get the resources directory path.

    This function returns the correct path for both:
    - Development/installed package: src/officepilot/resources
    - PyInstaller packaged environment: <MEIPASS>/officepilot/resources

    Returns:
        Path to the resources directory
    """
    if getattr(sys, "frozen", False):
        base_path = Path(sys._MEIPASS)  # type: ignore[attr-defined]
        return base_path / "officepilot" / "resources"
    # This file is at src/officepilot/utils/paths.py
    return Path(__file__).parent.parent / "resources"


def get_default_catalog_file() -> Path:
    """Get the packaged catalog.json path."""
    return get_resources_dir() / "catalog.json"
