"""
MountAssign Core - Assignment and validation engine.

Contains the request models, validation rules, mutation sequencing,
the manual partitioning handshake and the editor glue binding them to a
hosting page.
"""

from mountassign.core.config import MountAssignConfig
from mountassign.core.editor import MountPointEditor, PartitionRecordStore
from mountassign.core.errors import BackendError, MountAssignError, SetupError
from mountassign.core.logging import get_logger, setup_logging
from mountassign.core.models import (
    PartitioningData,
    PartitioningMethod,
    PartitionRequest,
    SessionState,
)
from mountassign.core.session import SessionInitializer

__all__ = [
    "MountAssignConfig",
    "MountPointEditor",
    "PartitionRecordStore",
    "BackendError",
    "MountAssignError",
    "SetupError",
    "get_logger",
    "setup_logging",
    "PartitioningData",
    "PartitioningMethod",
    "PartitionRequest",
    "SessionState",
    "SessionInitializer",
]
