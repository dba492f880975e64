"""Tests for end-to-end deployment runs with a fake executor."""

from typing import Any

import pytest

from officepilot.exceptions import ExecutionFailureError, SpecValidationError
from officepilot.models.catalog import Catalog
from officepilot.models.deployment import ExecutionResult, Operation, OperationKind
from officepilot.services.catalog import CatalogService
from officepilot.services.deployment import DeploymentRunner, StaticStateProbe
from officepilot.utils import get_default_catalog_file

PROBE_KEY = r"HKLM\SOFTWARE\Microsoft\Office\14.0\Common\ProductVersion\LastProduct"
GERMAN_MARKER = r"%ProgramFiles(x86)%\Microsoft Office\Office14\1031"


@pytest.fixture(scope="module")
def catalog() -> Catalog:
    return CatalogService(get_default_catalog_file()).catalog


class FakeExecutor:
    """Records executed operations and simulates installer side effects."""

    def __init__(self, probe: StaticStateProbe, exit_codes: dict[str, int] | None = None) -> None:
        self.probe = probe
        self.exit_codes = exit_codes or {}
        self.executed: list[str] = []

    def execute(self, op: Operation) -> ExecutionResult:
        self.executed.append(op.id)
        exit_code = self.exit_codes.get(op.id, 0)
        if exit_code in (0, 3010):
            if op.kind is OperationKind.UNINSTALL:
                self.probe.builds.pop(PROBE_KEY, None)
            elif op.target_build:
                self.probe.builds[PROBE_KEY] = op.target_build
            elif op.probe.path:
                self.probe.files.add(op.probe.path)
        return ExecutionResult(exit_code=exit_code, reboot_required=exit_code == 3010)


def _request(**overrides: Any) -> dict[str, Any]:
    request: dict[str, Any] = {
        "version": "2010",
        "edition": "Professional Pro",
        "service_pack": 1,
        "license_key": "ABCDE-FGHIJ-KLMNO-PQRST-UVWXY",
        "architecture": "x86",
        "products": ["Word", "Excel"],
        "language": "en-us",
        "deployment_root": r"\\fileserver\office",
    }
    request.update(overrides)
    return request


def test_fresh_machine_applies_everything(catalog: Catalog) -> None:
    probe = StaticStateProbe()
    executor = FakeExecutor(probe)
    report = DeploymentRunner(catalog, probe, executor).run(_request(language="de-de"))

    assert executor.executed == ["install-base", "service-pack-1", "language-pack-de-de"]
    assert [o.status for o in report.outcomes] == ["applied", "applied", "applied"]
    assert report.succeeded
    assert probe.builds[PROBE_KEY] == "14.0.6029.1000"


def test_second_run_is_a_no_op(catalog: Catalog) -> None:
    probe = StaticStateProbe()
    executor = FakeExecutor(probe)
    runner = DeploymentRunner(catalog, probe, executor)
    runner.run(_request(language="de-de"))
    executor.executed.clear()

    report = runner.run(_request(language="de-de"))

    assert executor.executed == []
    assert {o.status for o in report.outcomes} == {"skipped"}


def test_installed_base_only_applies_service_pack(catalog: Catalog) -> None:
    probe = StaticStateProbe(builds={PROBE_KEY: "14.0.4763.1000"})
    executor = FakeExecutor(probe)
    report = DeploymentRunner(catalog, probe, executor).run(_request())

    assert executor.executed == ["service-pack-1"]
    assert [o.status for o in report.outcomes] == ["skipped", "applied"]


def test_newer_build_is_never_downgraded(catalog: Catalog) -> None:
    probe = StaticStateProbe(builds={PROBE_KEY: "14.0.7015.1000"})
    executor = FakeExecutor(probe)
    DeploymentRunner(catalog, probe, executor).run(_request())

    assert executor.executed == []


def test_dry_run_never_executes(catalog: Catalog) -> None:
    probe = StaticStateProbe(builds={PROBE_KEY: "14.0.4763.1000"})
    report = DeploymentRunner(catalog, probe).run(_request(), dry_run=True)

    assert report.dry_run
    assert [o.status for o in report.outcomes] == ["skipped", "would_apply"]
    assert probe.builds == {PROBE_KEY: "14.0.4763.1000"}


def test_executor_required_for_real_runs(catalog: Catalog) -> None:
    with pytest.raises(ValueError):
        DeploymentRunner(catalog, StaticStateProbe()).run(_request())


def test_failure_aborts_remaining_operations(catalog: Catalog) -> None:
    probe = StaticStateProbe()
    executor = FakeExecutor(probe, exit_codes={"install-base": 1603})
    runner = DeploymentRunner(catalog, probe, executor)

    with pytest.raises(ExecutionFailureError) as exc_info:
        runner.run(_request(language="de-de"))

    assert executor.executed == ["install-base"]
    report = exc_info.value.report
    assert report is not None
    assert [o.status for o in report.outcomes] == ["failed", "aborted", "aborted"]
    assert report.outcomes[0].exit_code == 1603
    assert not report.succeeded
    assert exc_info.value.operation_id == "install-base"


def test_reboot_required_is_success(catalog: Catalog) -> None:
    probe = StaticStateProbe(builds={PROBE_KEY: "14.0.4763.1000"})
    executor = FakeExecutor(probe, exit_codes={"service-pack-1": 3010})
    report = DeploymentRunner(catalog, probe, executor).run(_request())

    assert report.succeeded
    assert report.reboot_required


def test_absent_removes_installed_product(catalog: Catalog) -> None:
    probe = StaticStateProbe(builds={PROBE_KEY: "14.0.6029.1000"})
    executor = FakeExecutor(probe)
    runner = DeploymentRunner(catalog, probe, executor)

    report = runner.run(_request(ensure="Absent"))
    assert executor.executed == ["uninstall"]
    assert [o.status for o in report.outcomes] == ["applied"]

    # Already absent: nothing left to remove
    report = runner.run(_request(ensure="Absent"))
    assert executor.executed == ["uninstall"]
    assert [o.status for o in report.outcomes] == ["skipped"]


def test_invalid_request_never_reaches_executor(catalog: Catalog) -> None:
    probe = StaticStateProbe()
    executor = FakeExecutor(probe)

    with pytest.raises(SpecValidationError):
        DeploymentRunner(catalog, probe, executor).run(_request(edition="Ultimate", license_key="bad"))
    assert executor.executed == []


def test_prepare_returns_plan_without_probing(catalog: Catalog) -> None:
    probe = StaticStateProbe(unreadable={PROBE_KEY})
    spec, variant, operations = DeploymentRunner(catalog, probe).prepare(_request())

    assert spec.setup_id == "ProPlus"
    assert variant.version_tag == "14"
    assert [op.id for op in operations] == ["install-base", "service-pack-1"]
