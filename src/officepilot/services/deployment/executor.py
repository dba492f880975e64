"""Operation execution: writes config files and runs installer commands."""

import subprocess
from pathlib import Path
from typing import Protocol

from officepilot.logger import get_logger
from officepilot.models.deployment import ExecutionResult, Operation
from officepilot.utils.subprocess_executor import SubprocessExecutor, decode_output

from .renderers import ConfigFileWriter

logger = get_logger(__name__)

ERROR_FILE_NOT_FOUND = 2
# Windows Installer: success, restart required to complete
ERROR_SUCCESS_REBOOT_REQUIRED = 3010
# Exit code reported when the installer process was killed on timeout
EXIT_TIMEOUT = -1


class OperationExecutor(Protocol):
    """Runs the concrete command for one operation."""

    def execute(self, op: Operation) -> ExecutionResult: ...


class SubprocessOperationExecutor:
    """Executes operations on the local machine."""

    def __init__(self, timeout: float | None = None, writer: ConfigFileWriter | None = None) -> None:
        """
        Initialize executor.

        Args:
            timeout: Seconds before an installer process is killed (config advanced.execution_timeout)
            writer: Config file writer
        """
        if timeout is None:
            from officepilot.config import get_config

            timeout = get_config().advanced.execution_timeout
        self.timeout = timeout
        self.writer = writer or ConfigFileWriter()

    def execute(self, op: Operation) -> ExecutionResult:
        """
        Write the operation's config file, then run its command.

        Args:
            op: Operation to execute

        Returns:
            Execution result; 3010 counts as success with a pending reboot
        """
        missing = [f for f in op.command.required_files if not Path(f).exists()]
        if missing:
            logger.error("Required installer files missing", operation_id=op.id, missing=missing)
            return ExecutionResult(exit_code=ERROR_FILE_NOT_FOUND, output=f"missing: {', '.join(missing)}")

        if op.config is not None:
            self.writer.write(op.config)

        logger.info(f"Executing {op.kind.value}", operation_id=op.id, command=str(op.command))
        try:
            result = SubprocessExecutor.run_sync(*op.command.argv, timeout=self.timeout)
        except subprocess.TimeoutExpired:
            return ExecutionResult(exit_code=EXIT_TIMEOUT, output=f"timed out after {self.timeout}s")

        output = decode_output(result.stdout) + decode_output(result.stderr)
        return ExecutionResult(
            exit_code=result.returncode,
            output=output,
            reboot_required=result.returncode == ERROR_SUCCESS_REBOOT_REQUIRED,
        )
