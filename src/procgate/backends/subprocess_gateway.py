"""Subprocess process gateway implementation."""

import subprocess
from typing import List, Optional, Sequence, Union

from ..interfaces.process import LaunchError, ProcessGateway, ProcessHandle, ProcessResult
from ..logging import get_logger, log_operation
from ..models import GatewaySettings

log = get_logger(__name__)


def build_command(
    executable: str, arguments: Sequence[str], run_in_shell: bool
) -> Union[str, List[str]]:
    """Argument vector, or a single space-joined command line for the shell."""
    if run_in_shell:
        return " ".join([executable, *arguments])
    return [executable, *arguments]


class SubprocessGateway(ProcessGateway):
    """Run processes using the subprocess module."""

    def __init__(self, settings: Optional[GatewaySettings] = None):
        self.settings = settings or GatewaySettings()

    def start(
        self,
        executable: str,
        arguments: Sequence[str],
        working_directory: Optional[str] = None,
        run_in_shell: bool = False,
    ) -> ProcessHandle:
        """Start a process with piped stdin/stdout/stderr."""
        if not executable:
            raise LaunchError.empty_executable(arguments)

        with log_operation(
            log, "process.start", executable=executable, run_in_shell=run_in_shell
        ) as op_log:
            try:
                process = subprocess.Popen(
                    build_command(executable, arguments, run_in_shell),
                    stdin=subprocess.PIPE,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                    cwd=working_directory,
                    shell=run_in_shell,
                    text=True,
                    encoding=self.settings.encoding,
                    errors=self.settings.errors,
                )
            except OSError as e:
                raise LaunchError(executable, arguments, e) from e
            op_log.debug("process.spawned", pid=process.pid)
            return process

    def run(
        self,
        executable: str,
        arguments: Sequence[str],
        run_in_shell: bool = False,
    ) -> ProcessResult:
        """Run a process and wait for it, capturing its output."""
        if not executable:
            raise LaunchError.empty_executable(arguments)

        with log_operation(
            log, "process.run", executable=executable, run_in_shell=run_in_shell
        ) as op_log:
            try:
                result = subprocess.run(
                    build_command(executable, arguments, run_in_shell),
                    capture_output=True,
                    check=False,
                    shell=run_in_shell,
                    text=True,
                    encoding=self.settings.encoding,
                    errors=self.settings.errors,
                )
            except OSError as e:
                raise LaunchError(executable, arguments, e) from e
            op_log.debug("process.exited", exit_code=result.returncode)
            return ProcessResult(
                exit_code=result.returncode,
                stdout=result.stdout,
                stderr=result.stderr,
            )
