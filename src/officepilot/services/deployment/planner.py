"""Operation planning: expands one InstallSpec into ordered operations."""

from collections.abc import Sequence

from officepilot.logger import get_logger
from officepilot.models.deployment import (
    CommandSpec,
    EnsureState,
    IdempotencyProbe,
    InstallSpec,
    Operation,
    OperationKind,
    ResolvedVariant,
    UninstallShape,
)

logger = get_logger(__name__)

MSIEXEC = "msiexec.exe"


class PlanOrderError(ValueError):
    """Raised when an operation appears before one of its prerequisites."""


class OperationPlanner:
    """Builds the operation sequence for a resolved spec.

    Pure function of (spec, variant): no probing, no execution.
    """

    def plan(self, spec: InstallSpec, variant: ResolvedVariant) -> list[Operation]:
        """
        Plan operations.

        Args:
            spec: Validated install spec
            variant: Variant resolved for the spec

        Returns:
            Operations in execution order
        """
        if spec.ensure is EnsureState.ABSENT:
            # Removal takes the whole product; sub-components go with it
            operations = [self._uninstall(variant)]
        else:
            operations = [self._install_base(variant)]
            if spec.service_pack > 0:
                operations.append(self._apply_service_pack(spec, variant))
            if not self._is_default_language(spec, variant):
                operations.append(self._apply_language_pack(spec, variant))

        validate_order(operations)
        logger.info(
            f"Planned {len(operations)} operations",
            version=spec.version.value,
            ensure=spec.ensure.value,
            operations=[op.kind.value for op in operations],
        )
        return operations

    def _is_default_language(self, spec: InstallSpec, variant: ResolvedVariant) -> bool:
        # The base media always carries the default language
        return spec.language == variant.default_language

    def _install_base(self, variant: ResolvedVariant) -> Operation:
        """Base install, skipped once the base (level 0) build is recorded.

        The check deliberately uses the base build rather than the requested
        service-pack build: a machine that already has the product but lacks
        the service pack only needs ApplyServicePack, never a reinstall.
        """
        return Operation(
            id="install-base",
            kind=OperationKind.INSTALL_BASE,
            command=CommandSpec(
                argv=(variant.setup_exe, variant.config_flag, variant.config.path),
                required_files=(variant.setup_exe,),
            ),
            config=variant.config,
            probe=IdempotencyProbe(
                kind="build_at_least",
                registry_key=variant.probe,
                target_build=variant.base_build,
            ),
            target_build=variant.base_build,
        )

    def _apply_service_pack(self, spec: InstallSpec, variant: ResolvedVariant) -> Operation:
        return Operation(
            id=f"service-pack-{spec.service_pack}",
            kind=OperationKind.APPLY_SERVICE_PACK,
            command=CommandSpec(
                argv=(variant.setup_exe, "/modify", variant.product_id, variant.config_flag, variant.config.path),
                required_files=(variant.setup_exe,),
            ),
            config=variant.config,
            prerequisites=("install-base",),
            probe=IdempotencyProbe(
                kind="build_at_least",
                registry_key=variant.probe,
                target_build=variant.target_build,
            ),
            target_build=variant.target_build,
        )

    def _apply_language_pack(self, spec: InstallSpec, variant: ResolvedVariant) -> Operation:
        config = variant.language_pack_config
        return Operation(
            id=f"language-pack-{spec.language}",
            kind=OperationKind.APPLY_LANGUAGE_PACK,
            command=CommandSpec(
                argv=(variant.setup_exe, "/modify", variant.product_id, variant.config_flag, config.path),
                required_files=(variant.setup_exe,),
            ),
            config=config,
            # Sibling of the service pack: gated only by the base install
            prerequisites=("install-base",),
            probe=IdempotencyProbe(kind="file_exists", path=variant.language_marker),
        )

    def _uninstall(self, variant: ResolvedVariant) -> Operation:
        if variant.uninstall_shape is UninstallShape.MSI:
            command = CommandSpec(argv=(MSIEXEC, "/x", variant.product_id, "/qn", "/norestart"))
            config = None
        else:
            command = CommandSpec(
                argv=(variant.setup_exe, "/uninstall", variant.product_id, "/config", variant.config.path),
                required_files=(variant.setup_exe,),
            )
            config = variant.config
        return Operation(
            id="uninstall",
            kind=OperationKind.UNINSTALL,
            command=command,
            config=config,
            probe=IdempotencyProbe(kind="build_present", registry_key=variant.probe),
        )


def validate_order(operations: Sequence[Operation]) -> None:
    """
    Check that every operation comes after all of its prerequisites.

    Raises:
        PlanOrderError: If a prerequisite is missing or appears later
    """
    seen: set[str] = set()
    for op in operations:
        missing = [p for p in op.prerequisites if p not in seen]
        if missing:
            raise PlanOrderError(f"Operation {op.id} is planned before its prerequisites: {', '.join(missing)}")
        seen.add(op.id)
