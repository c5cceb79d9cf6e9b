"""
MountAssign Mount Point Editor.

Binds the session initializer, the request store and the mutation
sequencer to the callbacks of the hosting installer page.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from mountassign.backend.base import StorageBackend
from mountassign.core.config import EditorConfig
from mountassign.core.errors import (
    BackendError,
    EditorNotReadyError,
    LockedFieldError,
    SetupError,
)
from mountassign.core.logging import get_logger
from mountassign.core.models import (
    PartitioningData,
    PartitionRequest,
    RowState,
    SessionState,
    StepNotification,
)
from mountassign.core.sequencer import (
    MutationSequencer,
    apply_mount_point_change,
    apply_reformat_toggle,
)
from mountassign.core.session import SessionInitializer
from mountassign.core.validator import (
    evaluate_row,
    is_mount_point_editable,
    is_reformat_editable,
    is_set_valid,
)

logger = get_logger(__name__)

STEP_ID = "custom-mountpoint"
PAGE_TITLE = "Select a custom mount point"
PAGE_DESCRIPTION = (
    "We discovered your partitioned and formatted filesystems, so now you can "
    "select your own custom mount point for each filesystem."
)
DUPLICATE_MOUNT_POINT_TEXT = "Duplicate mount point."
ROOT_REFORMAT_HELP_TEXT = "The root partition is always re-formatted by the installer."

ValidityCallback = Callable[[bool], None]
ErrorCallback = Callable[[str], None]


class PartitionRecordStore:
    """Request list of the current partitioning session.

    The list is a tuple and is only ever swapped for a new one.
    """

    def __init__(self) -> None:
        self.path = ""
        self._requests: tuple[PartitionRequest, ...] = ()

    @property
    def requests(self) -> tuple[PartitionRequest, ...]:
        return self._requests

    def load(self, data: PartitioningData) -> None:
        if data.path:
            self.path = data.path
        self._requests = tuple(data.requests)

    def replace(self, requests: Sequence[PartitionRequest]) -> None:
        self._requests = tuple(requests)

    def get(self, device: str) -> PartitionRequest | None:
        for request in self._requests:
            if request.device_spec == device:
                return request
        return None

    def __len__(self) -> int:
        return len(self._requests)


class MountPointEditor:
    """
    Mount point editing surface logic for one mount of the installer page.

    The hosting page passes two callbacks: ``on_validity_changed`` receives
    whether the page may proceed whenever the request set changes, and
    ``on_error`` receives a readable message for every rejected backend
    call. Navigating away calls :meth:`unmount`; any backend call still in
    flight is then abandoned and its outcome ignored.
    """

    def __init__(
        self,
        backend: StorageBackend,
        config: EditorConfig | None = None,
        on_validity_changed: ValidityCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> None:
        self.backend = backend
        self.config = config or EditorConfig()
        self.on_validity_changed = on_validity_changed
        self.on_error = on_error
        self.store = PartitionRecordStore()
        self.initializer = SessionInitializer(backend)
        self.sequencer = MutationSequencer(backend, on_error=self._notify_error)
        self.step_notification: StepNotification | None = None
        self._mounted = True

    # ==================== State ====================

    @property
    def state(self) -> SessionState:
        return self.initializer.state

    @property
    def is_loading(self) -> bool:
        return self.state in (SessionState.UNINITIALIZED, SessionState.INITIALIZING)

    @property
    def is_editable(self) -> bool:
        return self._mounted and self.state is SessionState.READY

    @property
    def is_mounted(self) -> bool:
        return self._mounted

    @property
    def requests(self) -> tuple[PartitionRequest, ...]:
        return self.store.requests

    @property
    def is_valid(self) -> bool:
        return is_set_valid(self.store.requests)

    @property
    def rows(self) -> tuple[RowState, ...]:
        requests = self.store.requests
        return tuple(evaluate_row(r, requests, self.config) for r in requests)

    @property
    def alert_message(self) -> str | None:
        """Message of a step notification addressed to this page, if any."""
        notification = self.step_notification
        if notification is not None and notification.step == STEP_ID:
            return notification.message
        return None

    def set_step_notification(self, notification: StepNotification | None) -> None:
        self.step_notification = notification

    # ==================== Lifecycle ====================

    async def mount(self, data: PartitioningData | None) -> SessionState:
        """Run the manual partitioning handshake and load the requests.

        Setup failures are reported through ``on_error``; the editor then
        stays in the FAILED state and refuses edits.
        """
        try:
            await self.initializer.initialize(data)
        except SetupError as e:
            logger.error("Manual partitioning setup failed", error=str(e))
            self._notify_error(str(e))
            return self.state

        if not self._mounted:
            return self.state

        if self.initializer.created_partitioning:
            path = self.initializer.partitioning_path or ""
            try:
                data = await self.backend.get_partitioning_data(path)
            except Exception as e:
                self._notify_error(str(BackendError.wrap("get_partitioning_data", e)))
                data = PartitioningData(path=path)
            if not self._mounted:
                return self.state
            if not data.path:
                data = PartitioningData(path=path, method=data.method, requests=data.requests)

        if data is not None:
            self.refresh(data)
        return self.state

    def unmount(self) -> None:
        """Abandon this editing session."""
        self._mounted = False
        logger.debug("Mount point editor unmounted", state=self.state.name)

    def refresh(self, data: PartitioningData) -> None:
        """Replace the local view with data read from the backend."""
        if not self._mounted:
            return
        self.store.load(data)
        self._publish_validity()

    # ==================== Edits ====================

    async def change_mount_point(self, device: str, mount_point: str) -> bool:
        """Assign a mount point to ``device``; an empty string unassigns it.

        Returns whether the backend accepted the new request list.
        """
        self._require_ready()
        self._require_editable(device, is_mount_point_editable, "mount point")
        requests = apply_mount_point_change(
            self.store.requests, device, mount_point, root=self.config.root_mount_point
        )
        logger.info("Mount point changed", device=device, mount_point=mount_point)
        return await self._commit(requests)

    async def toggle_reformat(self, device: str, checked: bool) -> bool:
        """Set whether ``device`` is reformatted during installation."""
        self._require_ready()
        self._require_editable(device, is_reformat_editable, "reformat")
        requests = apply_reformat_toggle(self.store.requests, device, checked)
        logger.info("Reformat toggled", device=device, reformat=checked)
        return await self._commit(requests)

    async def _commit(self, requests: tuple[PartitionRequest, ...]) -> bool:
        self.store.replace(requests)
        self._publish_validity()
        return await self.sequencer.submit(self.store.path, requests)

    def _require_ready(self) -> None:
        if not self.is_editable:
            raise EditorNotReadyError(
                f"Edits are not accepted in state {self.state.name}"
            )

    def _require_editable(
        self,
        device: str,
        check: Callable[[PartitionRequest, EditorConfig], bool],
        field: str,
    ) -> None:
        request = self.store.get(device)
        # Unknown devices are reported by the sequencer
        if request is not None and not check(request, self.config):
            raise LockedFieldError(device, field)

    # ==================== Notifications ====================

    def _publish_validity(self) -> None:
        if self.on_validity_changed is not None and self._mounted:
            self.on_validity_changed(self.is_valid)

    def _notify_error(self, message: str) -> None:
        if not self._mounted:
            logger.debug("Dropping error of abandoned editor", error=message)
            return
        if self.on_error is not None:
            self.on_error(message)
