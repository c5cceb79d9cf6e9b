"""
MountAssign Session Initializer.

Puts the storage backend into manual partitioning mode before the editor
accepts any edits.
"""

from __future__ import annotations

from mountassign.backend.base import StorageBackend
from mountassign.core.errors import BackendError, SessionStateError, SetupError
from mountassign.core.logging import OperationLogger, get_logger
from mountassign.core.models import PartitioningData, PartitioningMethod, SessionState

logger = get_logger(__name__)


class SessionInitializer:
    """
    Two-step handshake creating a manual partitioning object.

    The boot loader drive is reset first. The backend selects it again
    automatically while partitioning, and a stale value left over from a
    previous disk selection makes that selection fail. Only once the reset
    has completed is the manual partitioning object requested.

    One initializer serves one editing session; a remounted editor gets a
    new one.
    """

    def __init__(self, backend: StorageBackend) -> None:
        self.backend = backend
        self.state = SessionState.UNINITIALIZED
        self.partitioning_path: str | None = None
        self.error: BackendError | None = None

    @property
    def is_ready(self) -> bool:
        return self.state is SessionState.READY

    @property
    def created_partitioning(self) -> bool:
        """Whether the handshake created a new partitioning object."""
        return self.is_ready and self.partitioning_path is not None

    async def initialize(self, data: PartitioningData | None) -> SessionState:
        """Ensure manual partitioning is in place.

        Raises:
            SessionStateError: The initializer has already run.
            SetupError: The backend rejected either handshake step.
        """
        if self.state is not SessionState.UNINITIALIZED:
            raise SessionStateError(
                f"Session initializer already used (state={self.state.name})"
            )

        if data is not None and data.is_manual:
            logger.debug("Manual partitioning already active", path=data.path)
            self.state = SessionState.READY
            return self.state

        self.state = SessionState.INITIALIZING
        operation = "set_bootloader_drive"
        try:
            with OperationLogger("reset bootloader drive", logger):
                await self.backend.set_bootloader_drive("")
            operation = "create_partitioning"
            with OperationLogger("create manual partitioning", logger):
                path = await self.backend.create_partitioning(PartitioningMethod.MANUAL)
        except Exception as e:
            self.state = SessionState.FAILED
            self.error = BackendError.wrap(operation, e)
            raise SetupError(
                f"Failed to set up manual partitioning: {self.error}"
            ) from e

        self.partitioning_path = path
        self.state = SessionState.READY
        logger.info("Manual partitioning ready", path=path)
        return self.state
