"""
MountAssign JSON file storage backend.

Persists the simulated storage service state to a JSON file so that
separate CLI invocations work on the same partitioning session.
"""

from __future__ import annotations

import contextlib
import json
import os
import tempfile
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from mountassign.backend.memory import PARTITIONING_PATH_PREFIX, InMemoryStorageBackend
from mountassign.core.errors import BackendError
from mountassign.core.logging import get_logger
from mountassign.core.models import (
    PartitioningData,
    PartitioningMethod,
    PartitionRequest,
)

logger = get_logger(__name__)

_Snapshot = tuple[str, str | None, dict[str, PartitioningData]]


class JsonFileStorageBackend(InMemoryStorageBackend):
    """In-memory backend whose state is loaded from and saved to a file."""

    def __init__(self, state_file: Path) -> None:
        super().__init__()
        self.state_file = state_file
        self._load()

    @property
    def name(self) -> str:
        return "file"

    @classmethod
    def create(
        cls,
        state_file: Path,
        devices: Iterable[PartitionRequest],
        method: PartitioningMethod = PartitioningMethod.AUTOMATIC,
        bootloader_drive: str = "",
    ) -> JsonFileStorageBackend:
        """Write a fresh state file with the given discovered devices.

        A partitioning object of ``method`` is created up front, mirroring
        an installer that has already run its default disk selection.
        """
        devices = tuple(devices)
        path = f"{PARTITIONING_PATH_PREFIX}1"
        state = {
            "devices": [d.to_backend() for d in devices],
            "bootloader-drive": bootloader_drive,
            "current": path,
            "partitionings": {
                path: PartitioningData(
                    path=path,
                    method=method,
                    requests=devices if method is PartitioningMethod.MANUAL else (),
                ).to_backend(),
            },
        }
        try:
            state_file.parent.mkdir(parents=True, exist_ok=True)
            _write_state(state_file, state)
        except OSError as e:
            raise BackendError("create", f"Cannot write state file {state_file}: {e}") from e
        logger.info("Storage state created", state_file=str(state_file), devices=len(devices))
        return cls(state_file)

    def _load(self) -> None:
        if not self.state_file.exists():
            raise BackendError("load", f"State file {self.state_file} does not exist")
        try:
            with open(self.state_file) as f:
                state: dict[str, Any] = json.load(f)
            self.devices = tuple(
                PartitionRequest.from_backend(d) for d in state.get("devices", [])
            )
            self.bootloader_drive = state.get("bootloader-drive", "")
            self.current_path = state.get("current")
            self.partitionings = {
                path: PartitioningData.from_backend(data)
                for path, data in state.get("partitionings", {}).items()
            }
        except OSError as e:
            raise BackendError("load", f"Cannot read state file {self.state_file}: {e}") from e
        except (json.JSONDecodeError, ValueError) as e:
            raise BackendError("load", f"Invalid state file {self.state_file}: {e}") from e

    def _snapshot(self) -> _Snapshot:
        return self.bootloader_drive, self.current_path, dict(self.partitionings)

    def _restore(self, snapshot: _Snapshot) -> None:
        self.bootloader_drive, self.current_path, self.partitionings = snapshot

    def _save(self, operation: str, snapshot: _Snapshot) -> None:
        """Write the state file, undoing the in-memory change if that fails."""
        state = {
            "devices": [d.to_backend() for d in self.devices],
            "bootloader-drive": self.bootloader_drive,
            "current": self.current_path,
            "partitionings": {
                path: data.to_backend() for path, data in self.partitionings.items()
            },
        }
        try:
            _write_state(self.state_file, state)
        except OSError as e:
            self._restore(snapshot)
            logger.error("Failed to save storage state", operation=operation, error=str(e))
            raise BackendError(
                operation, f"Cannot write state file {self.state_file}: {e}"
            ) from e

    async def set_bootloader_drive(self, drive: str) -> None:
        snapshot = self._snapshot()
        await super().set_bootloader_drive(drive)
        self._save("set_bootloader_drive", snapshot)

    async def create_partitioning(self, method: PartitioningMethod) -> str:
        snapshot = self._snapshot()
        path = await super().create_partitioning(method)
        self._save("create_partitioning", snapshot)
        return path

    async def set_manual_partitioning_requests(
        self, partitioning: str, requests: Sequence[PartitionRequest]
    ) -> None:
        snapshot = self._snapshot()
        await super().set_manual_partitioning_requests(partitioning, requests)
        self._save("set_manual_partitioning_requests", snapshot)


def _write_state(state_file: Path, state: dict[str, Any]) -> None:
    """Replace ``state_file`` atomically with ``state``."""
    fd, tmp_name = tempfile.mkstemp(
        dir=state_file.parent, prefix=f".{state_file.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w") as f:
            json.dump(state, f, indent=2)
        os.replace(tmp_name, state_file)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_name)
        raise
