"""
MountAssign - Manual mount point assignment for installer front-ends.

Keeps the mapping from discovered partitions to user-chosen mount points
and reformat flags consistent, and drives the partitioning backend into
manual mode before edits are allowed.
"""

__version__ = "1.0.0"
__author__ = "MountAssign Team"

from mountassign.core.config import MountAssignConfig
from mountassign.core.editor import MountPointEditor

__all__ = ["MountAssignConfig", "MountPointEditor", "__version__"]
