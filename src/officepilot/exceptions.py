"""Centralized exception hierarchy for OfficePilot.

Errors carry a dot-path message key plus parameters; the English message is
rendered from the key for logging and API responses.
"""

from typing import Any

_MESSAGES: dict[str, str] = {
    "spec.invalid": "Install request is invalid: {summary}",
    "variant.unresolved_install_root": "Cannot resolve installer root for Office {version}: {reason}",
    "catalog.load_failed": "Failed to load catalog from {path}: {reason}",
    "catalog.version_not_found": "Office version {version} is not in the catalog",
    "probe.unavailable": "Cannot read {target}: {reason}",
    "execution.failed": "Operation {operation_id} ({kind}) failed with exit code {exit_code}",
}


class AppBaseError(Exception):
    """Base exception for all application-specific errors."""

    def __init__(
        self,
        error_key: str,
        status_code: int = 500,
        retriable: bool = False,
        **params: Any,  # noqa: ANN401
    ) -> None:
        """
        Initialize the error.

        Args:
            error_key: Dot-path message key (e.g., 'probe.unavailable')
            status_code: Recommended HTTP status code
            retriable: Whether the operation can be retried
            **params: Parameters for message formatting
        """
        super().__init__(error_key)
        self.error_key = error_key
        self.status_code = status_code
        self.retriable = retriable
        self.params = params

    def __str__(self) -> str:
        """Returns the English version of the error message."""
        template = _MESSAGES.get(self.error_key)
        if template is None:
            params_str = ", ".join(f"{k}={v}" for k, v in self.params.items())
            return f"[{self.error_key}] {params_str} (retriable: {self.retriable})"
        try:
            return template.format(**self.params)
        except (KeyError, IndexError):
            return f"[{self.error_key}] {template}"


class ResourceNotFoundError(AppBaseError):
    """Raised when a requested resource (catalog version, edition, etc.) is not found."""

    def __init__(self, error_key: str, **params: Any) -> None:  # noqa: ANN401
        super().__init__(error_key, status_code=404, **params)


class ValidationError(AppBaseError):
    """Raised when input validation fails."""

    def __init__(self, error_key: str, **params: Any) -> None:  # noqa: ANN401
        super().__init__(error_key, status_code=400, **params)


class OperationalError(AppBaseError):
    """Raised when an operational failure occurs (probe, process execution, catalog I/O)."""

    def __init__(self, error_key: str, retriable: bool = False, **params: Any) -> None:  # noqa: ANN401
        super().__init__(error_key, status_code=500, retriable=retriable, **params)


class SpecValidationError(ValidationError):
    """Aggregated validation failure listing every violated constraint."""

    def __init__(self, violations: list[Any]) -> None:
        self.violations = list(violations)
        summary = "; ".join(f"{v.code} ({v.field})" for v in self.violations)
        super().__init__("spec.invalid", summary=summary)

    @property
    def codes(self) -> list[str]:
        return [v.code for v in self.violations]


class UnresolvedInstallRootError(ValidationError):
    """Raised when the installer root cannot be derived from the deployment root."""

    def __init__(self, version: str, reason: str) -> None:
        super().__init__("variant.unresolved_install_root", version=version, reason=reason)


class CatalogLoadError(OperationalError):
    """Raised when the catalog file cannot be read or parsed."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__("catalog.load_failed", path=path, reason=reason)


class ProbeUnavailableError(OperationalError):
    """Raised when external state cannot be read at all (permissions, missing API)."""

    def __init__(self, target: str, reason: str) -> None:
        super().__init__("probe.unavailable", retriable=True, target=target, reason=reason)


class ExecutionFailureError(OperationalError):
    """Raised when an operation's command reports failure; the rest of the plan is aborted."""

    def __init__(self, operation_id: str, kind: str, exit_code: int | None, report: Any = None) -> None:  # noqa: ANN401
        super().__init__("execution.failed", operation_id=operation_id, kind=kind, exit_code=exit_code)
        self.operation_id = operation_id
        self.exit_code = exit_code
        self.report = report
