"""
MountAssign Storage Backend Base.

Defines the asynchronous interface of the installer storage service the
editor drives.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mountassign.core.models import (
        PartitioningData,
        PartitioningMethod,
        PartitionRequest,
    )


class StorageBackend(ABC):
    """Abstract base class for the installer storage service.

    All operations are coroutines. Implementations signal a rejected call
    by raising :class:`mountassign.core.errors.BackendError`.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name (e.g., 'memory', 'file')."""

    @abstractmethod
    async def set_bootloader_drive(self, drive: str) -> None:
        """Set the boot loader target drive; an empty value resets it."""

    @abstractmethod
    async def create_partitioning(self, method: PartitioningMethod) -> str:
        """Create a partitioning object and return its path."""

    @abstractmethod
    async def set_manual_partitioning_requests(
        self, partitioning: str, requests: Sequence[PartitionRequest]
    ) -> None:
        """Replace the full request list of a manual partitioning object."""

    @abstractmethod
    async def get_partitioning_data(self, partitioning: str) -> PartitioningData:
        """Read the current state of a partitioning object."""
