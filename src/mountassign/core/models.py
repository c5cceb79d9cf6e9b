"""
MountAssign data models.

Defines the partition requests exchanged with the partitioning backend
and the per-row view state derived from them.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any


class PartitioningMethod(Enum):
    """Partitioning methods known to the storage backend."""

    AUTOMATIC = "AUTOMATIC"
    MANUAL = "MANUAL"
    INTERACTIVE = "INTERACTIVE"
    BLIVET = "BLIVET"
    CUSTOM = "CUSTOM"

    @classmethod
    def from_string(cls, value: str) -> PartitioningMethod:
        """Create PartitioningMethod from a backend string."""
        try:
            return cls(value.strip().upper())
        except ValueError:
            raise ValueError(f"Unknown partitioning method: {value!r}") from None


class SessionState(Enum):
    """State of the manual partitioning handshake."""

    UNINITIALIZED = auto()
    INITIALIZING = auto()
    READY = auto()
    FAILED = auto()


@dataclass(frozen=True)
class PartitionRequest:
    """Mount point assignment for one discovered partition or filesystem."""

    device_spec: str
    format_type: str
    mount_point: str = ""
    reformat: bool = False

    @property
    def is_assigned(self) -> bool:
        return self.mount_point != ""

    @classmethod
    def from_backend(cls, data: Mapping[str, Any]) -> PartitionRequest:
        """Create a request from the backend's dictionary form."""
        if "device-spec" not in data:
            raise ValueError("Partition request is missing 'device-spec'")
        reformat = data.get("reformat", False)
        if not isinstance(reformat, bool):
            raise ValueError(f"Partition request 'reformat' must be a boolean, got {reformat!r}")
        return cls(
            device_spec=str(data["device-spec"]),
            format_type=str(data.get("format-type", "")),
            mount_point=str(data.get("mount-point", "")),
            reformat=reformat,
        )

    def to_backend(self) -> dict[str, Any]:
        return {
            "device-spec": self.device_spec,
            "format-type": self.format_type,
            "mount-point": self.mount_point,
            "reformat": self.reformat,
        }


@dataclass(frozen=True)
class PartitioningData:
    """Snapshot of a backend partitioning object."""

    path: str = ""
    method: PartitioningMethod | None = None
    requests: tuple[PartitionRequest, ...] = ()

    @classmethod
    def from_backend(cls, data: Mapping[str, Any]) -> PartitioningData:
        method = data.get("method")
        return cls(
            path=str(data.get("path", "")),
            method=PartitioningMethod.from_string(method) if method else None,
            requests=tuple(
                PartitionRequest.from_backend(r) for r in data.get("requests", [])
            ),
        )

    def to_backend(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "method": self.method.value if self.method else None,
            "requests": [r.to_backend() for r in self.requests],
        }

    @property
    def is_manual(self) -> bool:
        return self.method is PartitioningMethod.MANUAL


@dataclass(frozen=True)
class MountPointOption:
    """An entry offered by the mount point selector."""

    value: str
    name: str | None = None


@dataclass(frozen=True)
class RowState:
    """Everything the editing surface needs to render one request."""

    request: PartitionRequest
    duplicate: bool
    is_root: bool
    mount_point_editable: bool
    reformat_editable: bool
    options: tuple[MountPointOption, ...] = field(default_factory=tuple)

    @property
    def device_spec(self) -> str:
        return self.request.device_spec

    @property
    def format_type(self) -> str:
        return self.request.format_type

    @property
    def mount_point(self) -> str:
        return self.request.mount_point

    @property
    def reformat(self) -> bool:
        return self.request.reformat


@dataclass(frozen=True)
class StepNotification:
    """Error message the hosting page attaches to an installer step."""

    step: str
    message: str


def requests_to_backend(requests: Iterable[PartitionRequest]) -> list[dict[str, Any]]:
    """Convert requests into the list form accepted by the backend."""
    return [r.to_backend() for r in requests]
