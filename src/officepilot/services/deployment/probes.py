"""External state probes used by the idempotency guard."""

import os
import sys
from typing import Protocol

from officepilot.exceptions import ProbeUnavailableError
from officepilot.logger import get_logger
from officepilot.models.deployment import Architecture, RegistryProbeKey

logger = get_logger(__name__)


class StateProbe(Protocol):
    """Read-only view of the target machine's installed-software state."""

    def read_installed_build(self, key: RegistryProbeKey) -> str | None:
        """Return the recorded build number, or None if nothing is recorded.

        Raises:
            ProbeUnavailableError: If the state cannot be read at all
        """
        ...

    def file_exists(self, path: str) -> bool:
        """Return whether a file or directory exists.

        Raises:
            ProbeUnavailableError: If the state cannot be read at all
        """
        ...


class WindowsStateProbe:
    """Probes the local Windows registry and filesystem."""

    def __init__(self) -> None:
        if sys.platform != "win32":
            raise ProbeUnavailableError("Windows registry", f"not available on {sys.platform}")

    def read_installed_build(self, key: RegistryProbeKey) -> str | None:
        import winreg

        hive = winreg.HKEY_LOCAL_MACHINE if key.hive == "HKLM" else winreg.HKEY_CURRENT_USER
        view = winreg.KEY_WOW64_32KEY if key.view is Architecture.X86 else winreg.KEY_WOW64_64KEY
        try:
            with winreg.OpenKey(hive, key.path, 0, winreg.KEY_READ | view) as handle:
                value, _ = winreg.QueryValueEx(handle, key.value_name)
        except FileNotFoundError:
            return None
        except OSError as e:
            # Access denied and similar: state exists but cannot be read
            raise ProbeUnavailableError(str(key), str(e)) from e

        build = str(value).strip()
        logger.debug("Read installed build", key=str(key), build=build)
        return build or None

    def file_exists(self, path: str) -> bool:
        expanded = os.path.expandvars(path)
        if "%" in expanded:
            # An unexpanded variable means the location is unknown on this host
            raise ProbeUnavailableError(path, "environment variable not defined")
        try:
            os.stat(expanded)
        except FileNotFoundError:
            return False
        except OSError as e:
            raise ProbeUnavailableError(path, str(e)) from e
        return True


class StaticStateProbe:
    """In-memory probe for dry runs and tests.

    Args:
        builds: Registry key string (``str(RegistryProbeKey)``) -> build number
        files: Paths that exist
        unreadable: Keys or paths that raise ProbeUnavailableError when read
    """

    def __init__(
        self,
        builds: dict[str, str] | None = None,
        files: set[str] | None = None,
        unreadable: set[str] | None = None,
    ) -> None:
        self.builds = dict(builds or {})
        self.files = set(files or ())
        self.unreadable = set(unreadable or ())

    def read_installed_build(self, key: RegistryProbeKey) -> str | None:
        name = str(key)
        if name in self.unreadable:
            raise ProbeUnavailableError(name, "access denied")
        return self.builds.get(name)

    def file_exists(self, path: str) -> bool:
        if path in self.unreadable:
            raise ProbeUnavailableError(path, "access denied")
        return path in self.files

    def record_build(self, key: RegistryProbeKey, build: str | None) -> None:
        """Update the recorded build, as an installer would."""
        if build is None:
            self.builds.pop(str(key), None)
        else:
            self.builds[str(key)] = build
