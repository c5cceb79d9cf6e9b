"""
MountAssign GUI Module.

Provides the PySide6-based graphical user interface.
"""

from mountassign.ui.main import main, MountAssignApp

__all__ = ["main", "MountAssignApp"]
