"""
MountAssign GUI Entry Point.

Launches the PySide6 mount point editor over the configured state file.
"""

from __future__ import annotations

import sys

from PySide6.QtWidgets import QApplication, QMessageBox

from mountassign import __version__
from mountassign.backend.file import JsonFileStorageBackend
from mountassign.core.config import load_config
from mountassign.core.editor import MountPointEditor
from mountassign.core.logging import get_logger, setup_logging
from mountassign.ui.models.mount_point_model import MountPointModel
from mountassign.ui.views.main_window import MainWindow

logger = get_logger(__name__)


class MountAssignApp:
    """Main application class."""

    def __init__(self, args: list[str] | None = None) -> None:
        self.args = args or sys.argv
        self.app: QApplication | None = None
        self.window: MainWindow | None = None
        self.editor: MountPointEditor | None = None

    def run(self) -> int:
        """Run the application."""
        self.app = QApplication(self.args)
        self.app.setApplicationName("MountAssign")
        self.app.setApplicationVersion(__version__)
        self.app.setOrganizationName("MountAssign")
        self.app.setStyle("Fusion")

        try:
            config = load_config()
            setup_logging(config.logging)

            backend = JsonFileStorageBackend(config.backend.state_file)
            self.editor = MountPointEditor(backend, config.editor)
            model = MountPointModel(self.editor)

            self.window = MainWindow(model)
            self.window.show()
            self.window.load(backend.current_partitioning())

            return self.app.exec()

        except Exception as e:
            logger.exception("Startup failed")
            QMessageBox.critical(
                None,
                "Startup Error",
                f"Failed to start MountAssign:\n\n{e}",
            )
            return 1

        finally:
            if self.editor is not None:
                self.editor.unmount()


def main() -> None:
    """Main entry point for GUI."""
    app = MountAssignApp()
    sys.exit(app.run())


if __name__ == "__main__":
    main()
