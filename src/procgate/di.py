"""Process-wide selection of the active process gateway."""

import threading
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from .interfaces.process import ProcessGateway
from .logging import get_logger

log = get_logger(__name__)


def _default_factory() -> ProcessGateway:
    from .backends.subprocess_gateway import SubprocessGateway

    return SubprocessGateway()


class GatewayRegistry:
    """
    Holds the active ProcessGateway.

    Usage:
        registry = GatewayRegistry()
        registry.resolve().run("git", ["status"])

        # Swap the implementation, e.g. in tests
        registry.install(FakeGateway())
    """

    def __init__(self, factory: Callable[[], ProcessGateway] = None):
        self._factory = factory or _default_factory
        self._instance: Optional[ProcessGateway] = None
        self._lock = threading.RLock()

    def resolve(self) -> ProcessGateway:
        """Return the installed gateway, creating the default on first use."""
        with self._lock:
            if self._instance is None:
                instance = self._factory()
                if not isinstance(instance, ProcessGateway):
                    raise TypeError(f"Factory returned {type(instance).__name__}, not a ProcessGateway")
                self._instance = instance
                log.debug("gateway.default_installed", gateway=type(instance).__name__)
            return self._instance

    def install(self, gateway: Optional[ProcessGateway]) -> Optional[ProcessGateway]:
        """Replace the active gateway and return the previous one.

        ``None`` clears it; the next ``resolve`` recreates the default.
        """
        if gateway is not None and not isinstance(gateway, ProcessGateway):
            raise TypeError(f"Expected a ProcessGateway, got {type(gateway).__name__}")
        with self._lock:
            previous = self._instance
            self._instance = gateway
        log.debug(
            "gateway.installed",
            gateway=type(gateway).__name__ if gateway is not None else None,
        )
        return previous

    def is_installed(self) -> bool:
        with self._lock:
            return self._instance is not None

    def reset(self) -> None:
        """Forget the installed gateway."""
        self.install(None)

    @contextmanager
    def override(self, gateway: ProcessGateway) -> Iterator[ProcessGateway]:
        """Install ``gateway`` for the duration of the block."""
        with self._lock:
            previous = self._instance
            self.install(gateway)
        try:
            yield gateway
        finally:
            with self._lock:
                self._instance = previous


# Global registry instance
_registry: Optional[GatewayRegistry] = None
_registry_lock = threading.Lock()


def get_registry() -> GatewayRegistry:
    """Get the global registry instance."""
    global _registry
    with _registry_lock:
        if _registry is None:
            _registry = GatewayRegistry()
        return _registry


def set_registry(registry: Optional[GatewayRegistry]) -> None:
    """Set the global registry (useful for testing)."""
    global _registry
    with _registry_lock:
        _registry = registry


def current_gateway() -> ProcessGateway:
    """Return the process-wide active gateway."""
    return get_registry().resolve()


def set_gateway(gateway: Optional[ProcessGateway]) -> None:
    """Replace the process-wide active gateway."""
    get_registry().install(gateway)


@contextmanager
def override_gateway(gateway: ProcessGateway) -> Iterator[ProcessGateway]:
    """Install ``gateway`` process-wide for the duration of the block."""
    with get_registry().override(gateway) as installed:
        yield installed
