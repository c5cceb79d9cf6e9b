"""Views for the mount point editor."""

from mountassign.ui.views.main_window import MainWindow
from mountassign.ui.views.mount_point_page import MountPointDelegate, MountPointPage

__all__ = ["MainWindow", "MountPointDelegate", "MountPointPage"]
