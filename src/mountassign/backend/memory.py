"""
MountAssign in-memory storage backend.

Simulates the installer storage service: discovered devices, the boot
loader drive and the partitioning objects created during a run.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Sequence
from dataclasses import replace
from typing import Any

from mountassign.backend.base import StorageBackend
from mountassign.core.errors import BackendError
from mountassign.core.logging import get_logger
from mountassign.core.models import (
    PartitioningData,
    PartitioningMethod,
    PartitionRequest,
)

logger = get_logger(__name__)

PARTITIONING_PATH_PREFIX = "/org/fedoraproject/Anaconda/Modules/Storage/Partitioning/"


class InMemoryStorageBackend(StorageBackend):
    """Storage backend keeping all state in memory.

    Every call is appended to :attr:`calls` as ``(operation, *args)``. Calls
    to an operation registered with :meth:`fail` raise ``BackendError``.
    Duplicate mount points are accepted; the editor only gates on them.
    """

    def __init__(
        self,
        devices: Iterable[PartitionRequest] = (),
        bootloader_drive: str = "",
        latency: float = 0.0,
    ) -> None:
        self.devices: tuple[PartitionRequest, ...] = tuple(devices)
        self.bootloader_drive = bootloader_drive
        self.latency = latency
        self.partitionings: dict[str, PartitioningData] = {}
        self.current_path: str | None = None
        self.calls: list[tuple[Any, ...]] = []
        self.failures: dict[str, str] = {}

    @property
    def name(self) -> str:
        return "memory"

    def fail(self, operation: str, message: str = "Operation rejected") -> None:
        """Make every following call to ``operation`` fail."""
        self.failures[operation] = message

    def clear_failures(self) -> None:
        self.failures.clear()

    def current_partitioning(self) -> PartitioningData | None:
        """Get the most recently created partitioning object."""
        if self.current_path is None:
            return None
        return self.partitionings[self.current_path]

    async def _call(self, operation: str, *args: Any) -> None:
        self.calls.append((operation, *args))
        await asyncio.sleep(self.latency)
        if operation in self.failures:
            logger.debug("Rejecting backend call", operation=operation)
            raise BackendError(operation, self.failures[operation])

    def _get(self, partitioning: str, operation: str) -> PartitioningData:
        try:
            return self.partitionings[partitioning]
        except KeyError:
            raise BackendError(
                operation, f"Unknown partitioning object {partitioning!r}"
            ) from None

    async def set_bootloader_drive(self, drive: str) -> None:
        await self._call("set_bootloader_drive", drive)
        self.bootloader_drive = drive

    async def create_partitioning(self, method: PartitioningMethod) -> str:
        await self._call("create_partitioning", method)
        path = f"{PARTITIONING_PATH_PREFIX}{len(self.partitionings) + 1}"
        requests = self.devices if method is PartitioningMethod.MANUAL else ()
        self.partitionings[path] = PartitioningData(path=path, method=method, requests=requests)
        self.current_path = path
        logger.debug("Created partitioning", path=path, method=method.value)
        return path

    async def set_manual_partitioning_requests(
        self, partitioning: str, requests: Sequence[PartitionRequest]
    ) -> None:
        operation = "set_manual_partitioning_requests"
        await self._call(operation, partitioning, tuple(requests))
        data = self._get(partitioning, operation)
        if not data.is_manual:
            raise BackendError(operation, f"{partitioning} is not a manual partitioning")
        self.partitionings[partitioning] = replace(data, requests=tuple(requests))

    async def get_partitioning_data(self, partitioning: str) -> PartitioningData:
        operation = "get_partitioning_data"
        await self._call(operation, partitioning)
        return self._get(partitioning, operation)
