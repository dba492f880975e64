"""Utilities for OfficePilot."""

from officepilot.utils.paths import get_default_catalog_file, get_resources_dir
from officepilot.utils.subprocess_executor import SubprocessExecutor

__all__ = ["SubprocessExecutor", "get_default_catalog_file", "get_resources_dir"]
