"""Render and write installer configuration files.

``settings.ini`` for the oldest generation, ``config.xml`` for the rest.
"""

import configparser
import io
import os
import shutil
import sys
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any

from officepilot.logger import get_logger
from officepilot.models.deployment import ConfigFileContent, ConfigKind

logger = get_logger(__name__)


def render_ini(entries: dict[str, Any]) -> str:
    """Render ``{section: {key: value}}`` as an ini document with CRLF line endings."""
    parser = configparser.ConfigParser(interpolation=None)
    parser.optionxform = str  # type: ignore[assignment,method-assign]  # Keys are case-sensitive for setup.exe
    for section, values in entries.items():
        parser[section] = {k: str(v) for k, v in values.items() if v is not None}

    buffer = io.StringIO()
    parser.write(buffer, space_around_delimiters=False)
    return buffer.getvalue().strip().replace("\n", "\r\n") + "\r\n"


def _indent_xml(elem: ET.Element, level: int = 0) -> None:
    """Indent an element tree in place for readable output."""
    indent = "\n" + level * "  "
    if len(elem):
        if not elem.text or not elem.text.strip():
            elem.text = indent + "  "
        for child in elem:
            _indent_xml(child, level + 1)
        if not child.tail or not child.tail.strip():
            child.tail = indent
    if level and (not elem.tail or not elem.tail.strip()):
        elem.tail = indent


def render_xml(entries: dict[str, Any]) -> str:
    """Render config.xml content for setup.exe /config."""
    root = ET.Element("Configuration", {"Product": str(entries["product"])})

    display = entries.get("display")
    if display:
        ET.SubElement(root, "Display", {k: str(v) for k, v in display.items()})

    if entries.get("pidkey"):
        ET.SubElement(root, "PIDKEY", {"Value": str(entries["pidkey"])})
    if entries.get("user_name"):
        ET.SubElement(root, "USERNAME", {"Value": str(entries["user_name"])})
    if entries.get("company_name"):
        ET.SubElement(root, "COMPANYNAME", {"Value": str(entries["company_name"])})

    for feature, state in (entries.get("options") or {}).items():
        ET.SubElement(root, "OptionState", {"Id": feature, "State": state, "Children": "force"})

    if entries.get("add_language"):
        ET.SubElement(root, "AddLanguage", {"Id": str(entries["add_language"])})

    for setting_id, value in (entries.get("settings") or {}).items():
        ET.SubElement(root, "Setting", {"Id": setting_id, "Value": str(value)})

    _indent_xml(root)
    return ET.tostring(root, encoding="unicode") + "\n"


def render(content: ConfigFileContent) -> str:
    if content.kind is ConfigKind.INI:
        return render_ini(content.entries)
    return render_xml(content.entries)


class ConfigFileWriter:
    """Writes rendered configuration files, applying mode and ownership when given."""

    def write(self, content: ConfigFileContent) -> Path:
        """
        Render and write a configuration file.

        Args:
            content: Logical configuration content

        Returns:
            Path written
        """
        path = Path(content.path)
        path.parent.mkdir(parents=True, exist_ok=True)
        text = render(content)
        # setup.exe of the ini generation expects ANSI text
        encoding = "mbcs" if content.kind is ConfigKind.INI and sys.platform == "win32" else "utf-8"
        with open(path, "w", encoding=encoding, newline="") as f:
            f.write(text)

        if content.mode:
            os.chmod(path, int(content.mode, 8))
        if (content.owner or content.group) and sys.platform != "win32":
            shutil.chown(path, user=content.owner, group=content.group)

        logger.info("Wrote installer config", path=str(path), kind=content.kind.value)
        return path
