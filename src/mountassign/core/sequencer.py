"""
MountAssign Mutation Sequencer.

Turns a single user edit into a new full request list and submits that
list to the backend in one replace call.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import replace

from mountassign.backend.base import StorageBackend
from mountassign.core.errors import BackendError, UnknownDeviceError
from mountassign.core.logging import OperationLogger, get_logger
from mountassign.core.models import PartitionRequest
from mountassign.core.validator import (
    ROOT_MOUNT_POINT,
    compute_reformat_on_mount_point_change,
)

logger = get_logger(__name__)

ErrorCallback = Callable[[str], None]


def _index_of(requests: Sequence[PartitionRequest], device: str) -> int:
    for i, request in enumerate(requests):
        if request.device_spec == device:
            return i
    raise UnknownDeviceError(device)


def _replace_at(
    requests: Sequence[PartitionRequest], index: int, request: PartitionRequest
) -> tuple[PartitionRequest, ...]:
    return (*requests[:index], request, *requests[index + 1 :])


def apply_mount_point_change(
    requests: Sequence[PartitionRequest],
    device: str,
    new_mount_point: str,
    root: str = ROOT_MOUNT_POINT,
) -> tuple[PartitionRequest, ...]:
    """Assign ``new_mount_point`` to ``device`` and return the new request list."""
    index = _index_of(requests, device)
    current = requests[index]
    updated = replace(
        current,
        mount_point=new_mount_point,
        reformat=compute_reformat_on_mount_point_change(
            current.mount_point, new_mount_point, current.reformat, root=root
        ),
    )
    return _replace_at(requests, index, updated)


def apply_reformat_toggle(
    requests: Sequence[PartitionRequest],
    device: str,
    checked: bool,
) -> tuple[PartitionRequest, ...]:
    """Set the reformat flag of ``device`` and return the new request list.

    Whether the flag may be toggled at all is decided by the caller through
    :func:`mountassign.core.validator.is_reformat_editable`.
    """
    index = _index_of(requests, device)
    return _replace_at(requests, index, replace(requests[index], reformat=checked))


class MutationSequencer:
    """Submits complete request lists to the backend."""

    def __init__(
        self,
        backend: StorageBackend,
        on_error: ErrorCallback | None = None,
    ) -> None:
        self.backend = backend
        self.on_error = on_error

    async def submit(
        self, partitioning: str, requests: Sequence[PartitionRequest]
    ) -> bool:
        """Replace the backend request list with ``requests``.

        A rejected call is reported through ``on_error`` and not retried.
        Any exception raised by the backend counts as a rejection.
        Returns whether the backend accepted the list.
        """
        try:
            with OperationLogger(
                "submit manual partitioning requests",
                logger,
                partitioning=partitioning,
                request_count=len(requests),
            ):
                await self.backend.set_manual_partitioning_requests(
                    partitioning, tuple(requests)
                )
        except Exception as e:
            error = BackendError.wrap("set_manual_partitioning_requests", e)
            if self.on_error is not None:
                self.on_error(str(error))
            return False
        return True
