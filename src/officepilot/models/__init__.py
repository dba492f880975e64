"""Data models for OfficePilot."""

from officepilot.models.catalog import Catalog, VersionEntry
from officepilot.models.config import AppConfig
from officepilot.models.deployment import (
    Architecture,
    ConfigFileContent,
    ConfigKind,
    DeploymentReport,
    EnsureState,
    GuardAction,
    GuardDecision,
    InstallRequest,
    InstallSpec,
    OfficeVersion,
    Operation,
    OperationKind,
    ResolvedVariant,
    UninstallShape,
    Violation,
)

__all__ = [
    "AppConfig",
    "Architecture",
    "Catalog",
    "ConfigFileContent",
    "ConfigKind",
    "DeploymentReport",
    "EnsureState",
    "GuardAction",
    "GuardDecision",
    "InstallRequest",
    "InstallSpec",
    "OfficeVersion",
    "Operation",
    "OperationKind",
    "ResolvedVariant",
    "UninstallShape",
    "VersionEntry",
    "Violation",
]
