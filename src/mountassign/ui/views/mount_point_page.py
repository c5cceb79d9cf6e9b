"""
MountAssign Mount Point Page.

Installer page listing discovered filesystems with a mount point selector
and a reformat checkbox per row.
"""

from __future__ import annotations

from typing import Any

from PySide6.QtCore import QModelIndex, Qt, QTimer, Signal
from PySide6.QtWidgets import (
    QAbstractItemView,
    QComboBox,
    QHeaderView,
    QLabel,
    QStackedWidget,
    QStyledItemDelegate,
    QStyleOptionViewItem,
    QTableView,
    QVBoxLayout,
    QWidget,
)

from mountassign.core.editor import PAGE_DESCRIPTION, PAGE_TITLE
from mountassign.core.models import PartitioningData, RowState, StepNotification
from mountassign.ui.models.mount_point_model import MountPointModel


class MountPointDelegate(QStyledItemDelegate):
    """Typeahead combo box accepting both offered and custom mount points."""

    def createEditor(
        self, parent: QWidget, option: QStyleOptionViewItem, index: QModelIndex
    ) -> QWidget:
        combo = QComboBox(parent)
        combo.setEditable(True)
        combo.setInsertPolicy(QComboBox.NoInsert)
        combo.lineEdit().setPlaceholderText("Select a mount point")
        return combo

    def setEditorData(self, editor: QWidget, index: QModelIndex) -> None:
        row: RowState | None = index.data(Qt.UserRole)
        if not isinstance(editor, QComboBox) or row is None:
            return
        editor.clear()
        for option in row.options:
            editor.addItem(option.value)
        editor.setCurrentText(row.mount_point)

    def setModelData(self, editor: QWidget, model: Any, index: QModelIndex) -> None:
        if isinstance(editor, QComboBox):
            model.setData(index, editor.currentText(), Qt.EditRole)


class MountPointPage(QWidget):
    """Custom mount point page bound to a :class:`MountPointModel`."""

    validityChanged = Signal(bool)
    errorOccurred = Signal(str)

    def __init__(self, model: MountPointModel, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._model = model
        self._setup_ui()

        model.validityChanged.connect(self.validityChanged)
        model.errorOccurred.connect(self.errorOccurred)
        model.stateChanged.connect(self._update_state)
        self._update_state()

    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)

        title = QLabel(PAGE_TITLE)
        title.setStyleSheet("font-size: 18px; font-weight: bold;")
        layout.addWidget(title)

        self._alert = QLabel()
        self._alert.setWordWrap(True)
        self._alert.setStyleSheet(
            "background-color: #f8d7da; border: 1px solid #f5c6cb; "
            "border-radius: 4px; color: #721c24; padding: 6px;"
        )
        self._alert.hide()
        layout.addWidget(self._alert)

        description = QLabel(PAGE_DESCRIPTION)
        description.setWordWrap(True)
        layout.addWidget(description)

        self._stack = QStackedWidget()

        self._loading = QLabel("Loading...")
        self._loading.setAlignment(Qt.AlignCenter)
        self._stack.addWidget(self._loading)

        self._table = QTableView()
        self._table.setObjectName("custom-mountpoint-table")
        self._table.setModel(self._model)
        self._table.setItemDelegateForColumn(
            MountPointModel.COLUMN_MOUNT_POINT, MountPointDelegate(self._table)
        )
        self._table.setSelectionBehavior(QAbstractItemView.SelectRows)
        self._table.setEditTriggers(
            QAbstractItemView.DoubleClicked | QAbstractItemView.SelectedClicked
        )
        self._table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self._table.verticalHeader().hide()
        self._stack.addWidget(self._table)

        layout.addWidget(self._stack)

    @property
    def model(self) -> MountPointModel:
        return self._model

    @property
    def is_loading(self) -> bool:
        return self._stack.currentWidget() is self._loading

    def mount(self, data: PartitioningData | None) -> None:
        """Show the loading state, then run the editor setup.

        Setup starts from the event loop so the loading state is painted
        before the backend is called.
        """
        self._stack.setCurrentWidget(self._loading)
        QTimer.singleShot(0, lambda: self._model.mount(data))

    def set_step_notification(self, notification: StepNotification | None) -> None:
        self._model.editor.set_step_notification(notification)
        self._update_alert()

    def _update_state(self) -> None:
        editor = self._model.editor
        if editor.is_loading:
            self._stack.setCurrentWidget(self._loading)
        else:
            self._stack.setCurrentWidget(self._table)
        self._table.setEnabled(editor.is_editable)
        self._update_alert()

    def _update_alert(self) -> None:
        message = self._model.editor.alert_message
        self._alert.setText(message or "")
        self._alert.setVisible(message is not None)
