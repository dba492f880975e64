"""Deployment runner: validate, resolve, plan, then guard and execute each operation."""

import uuid
from collections.abc import Mapping
from typing import Any

import structlog

from officepilot.exceptions import ExecutionFailureError
from officepilot.logger import get_logger
from officepilot.models.catalog import Catalog
from officepilot.models.config import DeploymentDefaultsConfig
from officepilot.models.deployment import (
    DeploymentReport,
    GuardAction,
    InstallRequest,
    InstallSpec,
    Operation,
    OperationOutcome,
    ResolvedVariant,
)

from .executor import OperationExecutor
from .guard import IdempotencyGuard
from .planner import OperationPlanner
from .probes import StateProbe
from .validator import SpecValidator
from .variants import VariantResolver

logger = get_logger(__name__)


class DeploymentRunner:
    """Converges one machine toward one install request.

    Operations run strictly in plan order. The first failed operation aborts the
    rest of the plan: later operations depend on it, so nothing is retried or
    continued past it.
    """

    def __init__(
        self,
        catalog: Catalog,
        probe: StateProbe,
        executor: OperationExecutor | None = None,
        defaults: DeploymentDefaultsConfig | None = None,
    ) -> None:
        """
        Initialize runner.

        Args:
            catalog: Variant catalog
            probe: External state probe used by the idempotency guard
            executor: Executor for applied operations; required unless every run is a dry run
            defaults: Fallback company/user names
        """
        self.validator = SpecValidator(catalog, defaults)
        self.resolver = VariantResolver(catalog)
        self.planner = OperationPlanner()
        self.guard = IdempotencyGuard(probe)
        self.executor = executor

    def prepare(self, raw: InstallRequest | Mapping[str, Any]) -> tuple[InstallSpec, ResolvedVariant, list[Operation]]:
        """
        Validate, resolve and plan without touching the machine.

        Raises:
            SpecValidationError: If the request is invalid
            UnresolvedInstallRootError: If no installer root can be derived
        """
        spec = self.validator.validate(raw)
        variant = self.resolver.resolve(spec)
        return spec, variant, self.planner.plan(spec, variant)

    def run(self, raw: InstallRequest | Mapping[str, Any], dry_run: bool = False) -> DeploymentReport:
        """
        Converge the machine toward the request.

        Args:
            raw: Install request
            dry_run: Only record guard decisions; never execute

        Returns:
            Report with one outcome per planned operation

        Raises:
            SpecValidationError: If the request is invalid
            UnresolvedInstallRootError: If no installer root can be derived
            ExecutionFailureError: If an operation fails; the report is attached
        """
        if not dry_run and self.executor is None:
            raise ValueError("An executor is required unless dry_run is set")

        run_id = str(uuid.uuid4())
        structlog.contextvars.bind_contextvars(run_id=run_id)
        try:
            spec, _variant, operations = self.prepare(raw)
            report = DeploymentReport(run_id=run_id, spec=spec, dry_run=dry_run)
            logger.info(
                "Starting deployment run",
                version=spec.version.value,
                ensure=spec.ensure.value,
                dry_run=dry_run,
                operations=len(operations),
            )

            for index, op in enumerate(operations):
                outcome = self._run_operation(op, dry_run)
                report.outcomes.append(outcome)
                if outcome.status == "failed":
                    for pending in operations[index + 1 :]:
                        report.outcomes.append(
                            OperationOutcome(
                                operation_id=pending.id,
                                kind=pending.kind,
                                status="aborted",
                                reason=f"prerequisite run halted at {op.id}",
                            )
                        )
                    logger.error("Deployment run aborted", failed_operation=op.id, exit_code=outcome.exit_code)
                    raise ExecutionFailureError(op.id, op.kind.value, outcome.exit_code, report=report)

            logger.info("Deployment run finished", reboot_required=report.reboot_required)
            return report
        finally:
            structlog.contextvars.unbind_contextvars("run_id")

    def _run_operation(self, op: Operation, dry_run: bool) -> OperationOutcome:
        decision = self.guard.should_apply(op)
        if decision.action is GuardAction.SKIP:
            logger.info(f"Skipping {op.kind.value}", operation_id=op.id, reason=decision.reason)
            return OperationOutcome(operation_id=op.id, kind=op.kind, status="skipped", reason=decision.reason)

        if dry_run:
            return OperationOutcome(operation_id=op.id, kind=op.kind, status="would_apply", reason=decision.reason)

        assert self.executor is not None
        result = self.executor.execute(op)
        if not result.succeeded:
            logger.error(
                f"{op.kind.value} failed",
                operation_id=op.id,
                exit_code=result.exit_code,
                output=result.output[-2000:],
            )
            return OperationOutcome(
                operation_id=op.id,
                kind=op.kind,
                status="failed",
                reason=decision.reason,
                exit_code=result.exit_code,
            )

        logger.info(f"Applied {op.kind.value}", operation_id=op.id, reboot_required=result.reboot_required)
        return OperationOutcome(
            operation_id=op.id,
            kind=op.kind,
            status="applied",
            reason=decision.reason,
            exit_code=result.exit_code,
            reboot_required=result.reboot_required,
        )
