"""Install request validation against the catalog."""

import re
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from officepilot.exceptions import SpecValidationError
from officepilot.logger import get_logger
from officepilot.models.catalog import Catalog, VersionEntry
from officepilot.models.config import DeploymentDefaultsConfig
from officepilot.models.deployment import (
    Architecture,
    EnsureState,
    InstallRequest,
    InstallSpec,
    OfficeVersion,
    RunOverrides,
    Violation,
)

logger = get_logger(__name__)

LICENSE_KEY_PATTERN = re.compile(r"^[A-Z0-9]{5}(?:-[A-Z0-9]{5}){4}$", re.IGNORECASE)
FILE_MODE_PATTERN = re.compile(r"^[0-7]{3,4}$")
# Product ids are either setup.exe ids ("ProPlus") or braced MSI product codes
SETUP_ID_PATTERN = re.compile(r"^(?:\{[0-9A-Fa-f-]+\}|[A-Za-z0-9_.-]+)$")
OVERRIDE_FIELDS = ("company_name", "user_name", "file_owner", "file_group", "file_mode")
MAX_SERVICE_PACK = 3


class SpecValidator:
    """Normalizes raw install requests into InstallSpecs.

    Every rule is checked and all violations are raised together in a single
    SpecValidationError, so a caller can fix the whole request in one pass.
    """

    def __init__(self, catalog: Catalog, defaults: DeploymentDefaultsConfig | None = None) -> None:
        """
        Initialize validator.

        Args:
            catalog: Variant catalog to validate against
            defaults: Fallback company/user names for the per-run overrides
        """
        self.catalog = catalog
        self.defaults = defaults or DeploymentDefaultsConfig()

    def validate(self, raw: InstallRequest | Mapping[str, Any]) -> InstallSpec:
        """
        Validate a raw request.

        Args:
            raw: Request model or plain mapping

        Returns:
            Validated install spec

        Raises:
            SpecValidationError: If any constraint is violated
        """
        violations: list[Violation] = []

        if isinstance(raw, InstallRequest):
            request = raw
        else:
            try:
                request = InstallRequest.model_validate(raw)
            except PydanticValidationError as e:
                for err in e.errors():
                    field = ".".join(str(p) for p in err["loc"]) or "request"
                    violations.append(Violation(code="InvalidRequest", field=field, message=err["msg"]))
                raise SpecValidationError(violations) from e

        version = self._check_version(request.version, violations)
        entry = self.catalog.get_version(version.value) if version else None

        edition = self._check_edition(request.edition, entry, version, violations)
        service_pack = self._check_service_pack(request.service_pack, entry, version, violations)
        ensure = self._check_ensure(request.ensure, violations)
        license_key = self._check_license_key(request.license_key, ensure, violations)
        architecture = self._check_architecture(request.architecture, violations)
        language = self._check_language(request.language, entry, violations)
        products = self._check_products(request.products, entry, violations)
        deployment_root = self._check_deployment_root(request.deployment_root, violations)
        setup_id = self._resolve_setup_id(request.setup_id, entry, edition, violations)

        if not isinstance(request.auto_activate, bool):
            violations.append(
                Violation(code="InvalidAutoActivate", field="auto_activate", message="auto_activate must be a boolean")
            )
        overrides = self._check_overrides(request, violations)
        if isinstance(request.file_mode, str) and not FILE_MODE_PATTERN.match(request.file_mode):
            violations.append(
                Violation(
                    code="InvalidFileMode",
                    field="file_mode",
                    message=f"File mode '{request.file_mode}' is not a 3-4 digit octal string",
                )
            )

        if violations:
            logger.debug("Install request rejected", codes=[v.code for v in violations])
            raise SpecValidationError(violations)

        # Every value below was checked above
        assert version is not None and edition is not None and service_pack is not None
        assert ensure is not None and architecture is not None and language is not None
        assert products is not None and deployment_root is not None and setup_id is not None

        return InstallSpec(
            version=version,
            edition=edition,
            service_pack=service_pack,
            license_key=license_key,
            architecture=architecture,
            products=products,
            language=language,
            ensure=ensure,
            deployment_root=deployment_root,
            setup_id=setup_id,
            auto_activate=request.auto_activate,
            overrides=RunOverrides(
                company_name=overrides["company_name"] or self.defaults.company_name or None,
                user_name=overrides["user_name"] or self.defaults.user_name or None,
                file_owner=overrides["file_owner"],
                file_group=overrides["file_group"],
                file_mode=overrides["file_mode"],
            ),
        )

    def _check_overrides(self, request: InstallRequest, violations: list[Violation]) -> dict[str, str | None]:
        overrides: dict[str, str | None] = {}
        for name in OVERRIDE_FIELDS:
            value = getattr(request, name)
            if value is None or isinstance(value, str):
                overrides[name] = value
                continue
            violations.append(
                Violation(code="InvalidOverride", field=name, message=f"{name} must be a string, got {value!r}")
            )
            overrides[name] = None
        return overrides

    def _check_version(self, value: Any, violations: list[Violation]) -> OfficeVersion | None:  # noqa: ANN401
        text = str(value).strip() if isinstance(value, (str, int)) and not isinstance(value, bool) else ""
        supported = [v.value for v in OfficeVersion]
        if text in supported and self.catalog.get_version(text) is not None:
            return OfficeVersion(text)
        violations.append(
            Violation(
                code="InvalidVersion",
                field="version",
                message=f"Version '{value}' is not one of {', '.join(supported)}",
            )
        )
        return None

    def _check_edition(
        self,
        value: Any,  # noqa: ANN401
        entry: VersionEntry | None,
        version: OfficeVersion | None,
        violations: list[Violation],
    ) -> str | None:
        if not isinstance(value, str) or not value.strip():
            violations.append(Violation(code="InvalidEdition", field="edition", message="Edition is required"))
            return None
        edition = value.strip()
        if entry is None:
            # Cannot be checked without a valid version; the version violation covers it
            return edition
        if edition not in entry.editions:
            violations.append(
                Violation(
                    code="InvalidEdition",
                    field="edition",
                    message=f"Edition '{edition}' is not available for Office {version.value if version else ''}. "
                    f"Known editions: {', '.join(sorted(entry.editions))}",
                )
            )
            return None
        return edition

    def _check_service_pack(
        self,
        value: Any,  # noqa: ANN401
        entry: VersionEntry | None,
        version: OfficeVersion | None,
        violations: list[Violation],
    ) -> int | None:
        level: int | None = None
        if isinstance(value, int) and not isinstance(value, bool):
            level = value
        elif isinstance(value, str) and value.strip().isdigit():
            level = int(value.strip())

        if level is None or not 0 <= level <= MAX_SERVICE_PACK:
            violations.append(
                Violation(
                    code="InvalidServicePack",
                    field="service_pack",
                    message=f"Service pack '{value}' must be an integer between 0 and {MAX_SERVICE_PACK}",
                )
            )
            return None
        if entry is not None and entry.build_for(level) is None:
            violations.append(
                Violation(
                    code="InvalidServicePack",
                    field="service_pack",
                    message=f"Office {version.value if version else ''} has no service pack {level}",
                )
            )
            return None
        return level

    def _check_ensure(self, value: Any, violations: list[Violation]) -> EnsureState | None:  # noqa: ANN401
        if isinstance(value, str):
            for state in EnsureState:
                if state.value.lower() == value.strip().lower():
                    return state
        violations.append(
            Violation(code="InvalidEnsureState", field="ensure", message=f"Ensure '{value}' must be Present or Absent")
        )
        return None

    def _check_license_key(
        self,
        value: Any,  # noqa: ANN401
        ensure: EnsureState | None,
        violations: list[Violation],
    ) -> str | None:
        if ensure is EnsureState.ABSENT:
            return None
        if isinstance(value, str) and LICENSE_KEY_PATTERN.match(value.strip()):
            return value.strip().upper()
        violations.append(
            Violation(
                code="InvalidLicenseKey",
                field="license_key",
                message="License key must be five groups of five letters or digits separated by hyphens",
            )
        )
        return None

    def _check_architecture(self, value: Any, violations: list[Violation]) -> Architecture | None:  # noqa: ANN401
        if value in (Architecture.X86.value, Architecture.X64.value):
            return Architecture(value)
        violations.append(
            Violation(
                code="InvalidArchitecture",
                field="architecture",
                message=f"Architecture '{value}' must be x86 or x64",
            )
        )
        return None

    def _check_language(
        self,
        value: Any,  # noqa: ANN401
        entry: VersionEntry | None,
        violations: list[Violation],
    ) -> str | None:
        if value is None:
            if entry is None:
                return None
            value = entry.default_language
        code = value.strip().lower() if isinstance(value, str) else ""
        if not self.catalog.has_language(code):
            violations.append(
                Violation(code="InvalidLanguage", field="language", message=f"Language '{value}' is not in the catalog")
            )
            return None
        return code

    def _check_products(
        self,
        value: Any,  # noqa: ANN401
        entry: VersionEntry | None,
        violations: list[Violation],
    ) -> frozenset[str] | None:
        if value is None or (isinstance(value, (list, tuple, set, frozenset)) and not value):
            # Empty means the catalog default for the generation
            return frozenset(entry.default_products) if entry else None
        if not isinstance(value, (list, tuple, set, frozenset)) or not all(isinstance(p, str) for p in value):
            violations.append(
                Violation(code="InvalidProducts", field="products", message="Products must be a list of names")
            )
            return None
        products = frozenset(p.strip() for p in value)
        if entry is not None:
            unknown = sorted(p for p in products if p not in entry.components)
            if unknown:
                violations.append(
                    Violation(
                        code="InvalidProducts",
                        field="products",
                        message=f"Unknown products: {', '.join(unknown)}",
                    )
                )
                return None
        return products

    def _check_deployment_root(self, value: Any, violations: list[Violation]) -> str | None:  # noqa: ANN401
        if isinstance(value, str) and value.strip():
            return value.strip()
        violations.append(
            Violation(
                code="InvalidDeploymentRoot",
                field="deployment_root",
                message="Deployment root (installation media location) is required",
            )
        )
        return None

    def _resolve_setup_id(
        self,
        value: Any,  # noqa: ANN401
        entry: VersionEntry | None,
        edition: str | None,
        violations: list[Violation],
    ) -> str | None:
        """Use the explicit setup id, or default to the edition's product identifier."""
        if isinstance(value, str) and value.strip():
            setup_id = value.strip()
            # The id becomes a directory name under the installer root
            if not SETUP_ID_PATTERN.match(setup_id):
                violations.append(
                    Violation(
                        code="InvalidSetupId",
                        field="setup_id",
                        message=f"Setup id '{setup_id}' may only contain letters, digits, '_', '-' and '.'",
                    )
                )
                return None
            return setup_id
        if entry is None or edition is None:
            return None
        setup_id = entry.editions.get(edition) or entry.product_code
        if not setup_id:
            violations.append(
                Violation(
                    code="UnresolvedSetupId",
                    field="setup_id",
                    message=f"No product identifier in the catalog for edition '{edition}'",
                )
            )
            return None
        return setup_id
