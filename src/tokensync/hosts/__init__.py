"""Host implementations."""

from tokensync.hosts.factory import create_host, register
from tokensync.hosts.memory import HostOperation, MemoryCollection, MemoryHost, MemoryVariable

__all__ = ["HostOperation", "MemoryCollection", "MemoryHost", "MemoryVariable", "create_host", "register"]
