"""
Pytest fixtures and configuration for procgate tests.
"""

import sys
from typing import List, Optional, Sequence
from unittest.mock import MagicMock

import pytest

from procgate.di import GatewayRegistry, set_registry
from procgate.interfaces.process import ProcessGateway, ProcessResult


class StaticGateway(ProcessGateway):
    """Gateway double that records calls and returns a fixed result."""

    def __init__(self, result: ProcessResult = None):
        self.result = result or ProcessResult(exit_code=0, stdout="Mocked output", stderr="")
        self.calls: List[tuple] = []

    def start(
        self,
        executable: str,
        arguments: Sequence[str],
        working_directory: Optional[str] = None,
        run_in_shell: bool = False,
    ):
        self.calls.append(("start", executable, list(arguments), working_directory, run_in_shell))
        handle = MagicMock()
        handle.pid = 4242
        handle.returncode = self.result.exit_code
        handle.communicate.return_value = (self.result.stdout, self.result.stderr)
        handle.wait.return_value = self.result.exit_code
        return handle

    def run(self, executable: str, arguments: Sequence[str], run_in_shell: bool = False):
        self.calls.append(("run", executable, list(arguments), run_in_shell))
        return self.result


@pytest.fixture(autouse=True)
def fresh_registry():
    """Give every test its own process-wide registry."""
    registry = GatewayRegistry()
    set_registry(registry)
    yield registry
    set_registry(None)


@pytest.fixture
def static_gateway():
    return StaticGateway()


@pytest.fixture
def python_exe():
    return sys.executable


@pytest.fixture
def make_gateway():
    """Factory for gateway doubles returning a given result."""

    def _make(exit_code: int = 0, stdout: str = "Mocked output", stderr: str = ""):
        return StaticGateway(ProcessResult(exit_code=exit_code, stdout=stdout, stderr=stderr))

    return _make
