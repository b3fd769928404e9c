"""Abstract interface for process execution."""

import errno
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import IO, Any, Optional, Protocol, Sequence, Tuple, runtime_checkable


class LaunchError(OSError):
    """The platform refused to create the process.

    Carries the ``errno``/``strerror``/``filename`` of the underlying
    ``OSError``, which is kept as ``__cause__``.
    """

    def __init__(self, executable: str, arguments: Sequence[str], cause: OSError):
        super().__init__(
            cause.errno,
            cause.strerror or str(cause),
            cause.filename if cause.filename is not None else executable,
        )
        self.executable = executable
        self.arguments = list(arguments)

    def __reduce__(self):
        # OSError.__reduce__ would call cls(errno, strerror, filename)
        cause = OSError(self.errno, self.strerror, self.filename)
        return type(self), (self.executable, self.arguments, cause)

    @classmethod
    def empty_executable(cls, arguments: Sequence[str]) -> "LaunchError":
        cause = FileNotFoundError(
            errno.ENOENT, "Executable must be a non-empty string", ""
        )
        return cls("", arguments, cause)


@dataclass(frozen=True)
class ProcessResult:
    """Outcome of a process that has fully terminated."""

    exit_code: int
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        return self.exit_code == 0


@runtime_checkable
class ProcessHandle(Protocol):
    """A started process, as returned by the platform."""

    pid: int
    returncode: Optional[int]
    stdin: Optional[IO[Any]]
    stdout: Optional[IO[Any]]
    stderr: Optional[IO[Any]]

    def poll(self) -> Optional[int]: ...

    def wait(self, timeout: Optional[float] = None) -> int: ...

    def communicate(
        self, input: Any = None, timeout: Optional[float] = None
    ) -> Tuple[Any, Any]: ...

    def terminate(self) -> None: ...

    def kill(self) -> None: ...


class ProcessGateway(ABC):
    """Abstract interface for process execution.

    Obtain the active implementation with :func:`procgate.di.current_gateway`
    and replace it with :func:`procgate.di.set_gateway`.
    """

    @abstractmethod
    def start(
        self,
        executable: str,
        arguments: Sequence[str],
        working_directory: Optional[str] = None,
        run_in_shell: bool = False,
    ) -> ProcessHandle:
        """
        Start a process without waiting for it.

        Args:
            executable: Name or path of the executable
            arguments: Arguments, passed through unescaped
            working_directory: Directory to start the process in
            run_in_shell: Interpret the command through the system shell

        Raises:
            LaunchError: If the process could not be created
        """
        pass

    @abstractmethod
    def run(
        self,
        executable: str,
        arguments: Sequence[str],
        run_in_shell: bool = False,
    ) -> ProcessResult:
        """
        Run a process to completion and capture its output.

        A non-zero exit code is returned in the result, not raised.

        Raises:
            LaunchError: If the process could not be created
        """
        pass
