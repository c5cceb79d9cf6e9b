"""
MountAssign Main Window.

Hosts the custom mount point page and gates the Next button on the
validity the page reports.
"""

from __future__ import annotations

from PySide6.QtCore import Slot
from PySide6.QtWidgets import (
    QHBoxLayout,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QStatusBar,
    QVBoxLayout,
    QWidget,
)

from mountassign import __version__
from mountassign.core.models import PartitioningData
from mountassign.ui.models.mount_point_model import MountPointModel
from mountassign.ui.views.mount_point_page import MountPointPage


class MainWindow(QMainWindow):
    """Main application window."""

    def __init__(self, model: MountPointModel, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWindowTitle(f"MountAssign v{__version__}")
        self.setMinimumSize(800, 500)

        self._page = MountPointPage(model, self)
        self._page.validityChanged.connect(self._on_validity_changed)
        self._page.errorOccurred.connect(self._on_error)

        central = QWidget()
        layout = QVBoxLayout(central)
        layout.addWidget(self._page)

        buttons = QHBoxLayout()
        buttons.addStretch()
        self._next_button = QPushButton("Next")
        self._next_button.setEnabled(False)
        self._next_button.clicked.connect(self.close)
        buttons.addWidget(self._next_button)
        layout.addLayout(buttons)

        self.setCentralWidget(central)
        self.setStatusBar(QStatusBar())

    @property
    def page(self) -> MountPointPage:
        return self._page

    def load(self, data: PartitioningData | None) -> None:
        self.statusBar().showMessage("Preparing manual partitioning...")
        self._page.mount(data)
        editor = self._page.model.editor
        self._next_button.setEnabled(editor.is_editable and editor.is_valid)
        self.statusBar().showMessage(f"Partitioning: {editor.store.path}")

    @Slot(bool)
    def _on_validity_changed(self, valid: bool) -> None:
        self._next_button.setEnabled(valid and self._page.model.editor.is_editable)

    @Slot(str)
    def _on_error(self, message: str) -> None:
        QMessageBox.warning(self, "Storage Error", message)
