"""
MountAssign Storage Backends.

The asynchronous storage service interface and the simulated
implementations used by the CLI, the GUI and the tests.
"""

from __future__ import annotations

from pathlib import Path

from mountassign.backend.base import StorageBackend
from mountassign.backend.file import JsonFileStorageBackend
from mountassign.backend.memory import InMemoryStorageBackend


def get_storage_backend(state_file: Path | None = None) -> StorageBackend:
    """Get a file backed storage service, or an empty in-memory one."""
    if state_file is None:
        return InMemoryStorageBackend()
    return JsonFileStorageBackend(state_file)


__all__ = [
    "StorageBackend",
    "InMemoryStorageBackend",
    "JsonFileStorageBackend",
    "get_storage_backend",
]
