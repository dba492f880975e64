"""Idempotency guard: decides whether a planned operation still needs to run."""

from officepilot.exceptions import ProbeUnavailableError
from officepilot.logger import get_logger
from officepilot.models.deployment import GuardAction, GuardDecision, Operation

from .probes import StateProbe

logger = get_logger(__name__)


class BuildNumberError(ValueError):
    """Raised when a build number is not a dotted sequence of integers."""


def parse_build(build: str) -> tuple[int, ...]:
    """
    Parse a dotted build number ("14.0.6029.1000") into a comparable tuple.

    Raises:
        BuildNumberError: If any part is not an integer
    """
    parts = build.strip().split(".")
    try:
        return tuple(int(p) for p in parts)
    except ValueError as e:
        raise BuildNumberError(f"Invalid build number: {build!r}") from e


def build_at_least(observed: str, target: str) -> bool:
    """Compare builds numerically; missing trailing parts count as zero."""
    left, right = parse_build(observed), parse_build(target)
    width = max(len(left), len(right))
    return left + (0,) * (width - len(left)) >= right + (0,) * (width - len(right))


class IdempotencyGuard:
    """Probes external state before each mutation.

    Never mutates anything. An unreadable probe yields Apply: attempting the
    change is preferred over silently leaving the machine in the wrong state.
    """

    def __init__(self, probe: StateProbe) -> None:
        self.probe = probe

    def should_apply(self, op: Operation) -> GuardDecision:
        """
        Decide whether an operation must run.

        Args:
            op: Planned operation

        Returns:
            Apply or Skip decision with the observed value
        """
        try:
            decision = self._decide(op)
        except (ProbeUnavailableError, BuildNumberError) as e:
            logger.warning(
                "Probe unavailable, applying operation",
                operation_id=op.id,
                kind=op.kind.value,
                error=str(e),
            )
            return GuardDecision(action=GuardAction.APPLY, reason=f"probe unavailable: {e}", probe_unavailable=True)

        logger.debug(
            "Guard decision",
            operation_id=op.id,
            action=decision.action.value,
            observed=decision.observed,
            reason=decision.reason,
        )
        return decision

    def _decide(self, op: Operation) -> GuardDecision:
        probe = op.probe

        if probe.kind == "file_exists":
            assert probe.path is not None
            if self.probe.file_exists(probe.path):
                return GuardDecision(action=GuardAction.SKIP, reason=f"{probe.path} already present")
            return GuardDecision(action=GuardAction.APPLY, reason=f"{probe.path} not present")

        assert probe.registry_key is not None
        observed = self.probe.read_installed_build(probe.registry_key)

        if probe.kind == "build_present":
            # Any recorded build means something is installed
            if observed is None:
                return GuardDecision(action=GuardAction.SKIP, reason="no installed build recorded")
            return GuardDecision(action=GuardAction.APPLY, reason=f"installed build {observed}", observed=observed)

        assert probe.target_build is not None
        if observed is None:
            return GuardDecision(action=GuardAction.APPLY, reason="no installed build recorded")
        if build_at_least(observed, probe.target_build):
            return GuardDecision(
                action=GuardAction.SKIP,
                reason=f"installed build {observed} satisfies {probe.target_build}",
                observed=observed,
            )
        return GuardDecision(
            action=GuardAction.APPLY,
            reason=f"installed build {observed} is older than {probe.target_build}",
            observed=observed,
        )
