"""Deployment data models: install requests, resolved variants and planned operations."""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class OfficeVersion(str, Enum):
    """Supported Office generations, oldest first."""

    V2003 = "2003"
    V2007 = "2007"
    V2010 = "2010"
    V2013 = "2013"


class Architecture(str, Enum):
    X86 = "x86"
    X64 = "x64"


class EnsureState(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"


class ConfigKind(str, Enum):
    """Installer configuration file format."""

    INI = "ini"  # Flat key/value settings file (/settings)
    XML = "xml"  # Structured config.xml (/config)


class UninstallShape(str, Enum):
    MSI = "msi"  # msiexec /x <product code>
    SETUP = "setup"  # setup.exe /uninstall <product> /config <file>


class OperationKind(str, Enum):
    INSTALL_BASE = "InstallBase"
    APPLY_SERVICE_PACK = "ApplyServicePack"
    APPLY_LANGUAGE_PACK = "ApplyLanguagePack"
    UNINSTALL = "Uninstall"


class InstallRequest(BaseModel):
    """Raw, unvalidated install request as collected from a caller.

    Field types are deliberately loose; ``SpecValidator`` performs the checks so
    that every violation can be reported at once.
    """

    version: Any = None
    edition: Any = None
    service_pack: Any = 0
    license_key: Any = None
    architecture: Any = "x86"
    products: Any = None
    language: Any = None
    ensure: Any = "Present"
    deployment_root: Any = None
    setup_id: Any = None
    auto_activate: Any = False
    company_name: Any = None
    user_name: Any = None
    file_owner: Any = None
    file_group: Any = None
    file_mode: Any = None


class Violation(BaseModel):
    """One violated constraint in an install request."""

    code: str  # e.g. InvalidEdition
    field: str
    message: str


class RunOverrides(BaseModel):
    """Optional per-run values written into the installer configuration file."""

    model_config = ConfigDict(frozen=True)

    company_name: str | None = None
    user_name: str | None = None
    file_owner: str | None = None
    file_group: str | None = None
    file_mode: str | None = None  # Octal string, e.g. "0644"


class InstallSpec(BaseModel):
    """Validated, normalized install request."""

    model_config = ConfigDict(frozen=True)

    version: OfficeVersion
    edition: str
    service_pack: int = 0
    license_key: str | None = None
    architecture: Architecture = Architecture.X86
    products: frozenset[str]
    language: str
    ensure: EnsureState = EnsureState.PRESENT
    deployment_root: str
    setup_id: str
    auto_activate: bool = False
    overrides: RunOverrides = Field(default_factory=RunOverrides)


class RegistryProbeKey(BaseModel):
    """Registry location holding the installed build number."""

    model_config = ConfigDict(frozen=True)

    hive: Literal["HKLM", "HKCU"] = "HKLM"
    path: str
    value_name: str
    view: Architecture  # 32-bit installs on 64-bit Windows live in the WOW6432Node view

    def __str__(self) -> str:
        return f"{self.hive}\\{self.path}\\{self.value_name}"


class ConfigFileContent(BaseModel):
    """Logical content of an installer configuration file; rendering happens elsewhere."""

    model_config = ConfigDict(frozen=True)

    kind: ConfigKind
    path: str
    entries: dict[str, Any]
    owner: str | None = None
    group: str | None = None
    mode: str | None = None


class ResolvedVariant(BaseModel):
    """Version-specific realization of an InstallSpec."""

    model_config = ConfigDict(frozen=True)

    version: OfficeVersion
    version_tag: str
    installer_root: str
    setup_exe: str
    product_id: str
    probe: RegistryProbeKey
    base_build: str
    target_build: str
    locale_id: int
    default_language: str
    config_kind: ConfigKind
    config_flag: str
    uninstall_shape: UninstallShape
    config: ConfigFileContent
    language_pack_config: ConfigFileContent
    language_marker: str


class CommandSpec(BaseModel):
    """Concrete command handed to the executor."""

    model_config = ConfigDict(frozen=True)

    argv: tuple[str, ...]
    required_files: tuple[str, ...] = ()

    def __str__(self) -> str:
        return " ".join(f'"{a}"' if " " in a else a for a in self.argv)


class IdempotencyProbe(BaseModel):
    """External condition which, when already true, means an operation is skipped."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["build_at_least", "build_present", "file_exists"]
    registry_key: RegistryProbeKey | None = None
    target_build: str | None = None
    path: str | None = None


class Operation(BaseModel):
    """One unit of planned work."""

    model_config = ConfigDict(frozen=True)

    id: str
    kind: OperationKind
    command: CommandSpec
    config: ConfigFileContent | None = None  # Written before the command runs
    prerequisites: tuple[str, ...] = ()
    probe: IdempotencyProbe
    target_build: str | None = None


class GuardAction(str, Enum):
    APPLY = "Apply"
    SKIP = "Skip"


class GuardDecision(BaseModel):
    """Outcome of an idempotency check."""

    action: GuardAction
    reason: str
    observed: str | None = None
    probe_unavailable: bool = False


class ExecutionResult(BaseModel):
    """Result reported by an executor for a single operation."""

    exit_code: int
    output: str = ""
    reboot_required: bool = False

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0 or self.reboot_required


class OperationOutcome(BaseModel):
    """What happened to one operation during a run."""

    operation_id: str
    kind: OperationKind
    status: Literal["applied", "skipped", "would_apply", "failed", "aborted"]
    reason: str = ""
    exit_code: int | None = None
    reboot_required: bool = False


class DeploymentReport(BaseModel):
    """Summary of a planning/execution run."""

    run_id: str
    spec: InstallSpec
    dry_run: bool = False
    outcomes: list[OperationOutcome] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return all(o.status in ("applied", "skipped", "would_apply") for o in self.outcomes)

    @property
    def reboot_required(self) -> bool:
        return any(o.reboot_required for o in self.outcomes)
