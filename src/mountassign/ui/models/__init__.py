"""
MountAssign UI Models.

Qt model/view models for partition request data.
"""

from mountassign.ui.models.mount_point_model import MountPointModel

__all__ = ["MountPointModel"]
