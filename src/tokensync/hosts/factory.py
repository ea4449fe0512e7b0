"""Factory for creating host instances.

The CLI instantiates hosts by name through this registry and never imports a
concrete host directly.
"""

from __future__ import annotations

from tokensync.contracts.host import Host
from tokensync.hosts.memory import MemoryHost

_REGISTRY: dict[str, type[Host]] = {"memory": MemoryHost}


def register(name: str, host_cls: type[Host]) -> None:
    """Register a host class by name.

    Args:
        name: Host name (e.g. "memory").
        host_cls: Class implementing the Host ABC.
    """
    _REGISTRY[name] = host_cls


def create_host(name: str, **kwargs: object) -> Host:
    """Create a host instance by name.

    The returned host is an async context manager:

        async with create_host("memory") as host:
            collections = await host.list_collections()

    Raises:
        ValueError: If the host name is not registered.
    """
    if name not in _REGISTRY:
        available = ", ".join(sorted(_REGISTRY)) or "(none registered)"
        raise ValueError(f"Unknown host: {name!r}. Available: {available}")
    return _REGISTRY[name](**kwargs)
