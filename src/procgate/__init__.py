"""
procgate - Replaceable gateway for launching operating-system processes.

Start a process and get a handle back, or run it to completion and get its
exit code and captured output. The implementation doing the work can be
swapped process-wide, which is how tests substitute fakes.
"""

__version__ = "0.1.0"

from procgate.backends.subprocess_gateway import SubprocessGateway
from procgate.di import GatewayRegistry, current_gateway, override_gateway, set_gateway
from procgate.interfaces.process import LaunchError, ProcessGateway, ProcessHandle, ProcessResult
from procgate.models import GatewaySettings

__all__ = [
    "GatewayRegistry",
    "GatewaySettings",
    "LaunchError",
    "ProcessGateway",
    "ProcessHandle",
    "ProcessResult",
    "SubprocessGateway",
    "current_gateway",
    "override_gateway",
    "set_gateway",
    "__version__",
]
