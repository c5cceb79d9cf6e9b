"""
MountAssign Mount Point Model.

Qt table model presenting the partition requests of a mount point editor.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from typing import Any

from PySide6.QtCore import QAbstractTableModel, QModelIndex, Qt, Signal
from PySide6.QtGui import QBrush, QColor

from mountassign.core.editor import (
    DUPLICATE_MOUNT_POINT_TEXT,
    ROOT_REFORMAT_HELP_TEXT,
    MountPointEditor,
)
from mountassign.core.errors import MountAssignError
from mountassign.core.logging import get_logger
from mountassign.core.models import PartitioningData, RowState

logger = get_logger(__name__)

CoroutineRunner = Callable[[Coroutine[Any, Any, Any]], Any]


class MountPointModel(QAbstractTableModel):
    """Table model for the custom mount point page.

    Edits are forwarded to the editor and ``runner`` drives the resulting
    coroutine. The default ``asyncio.run`` blocks until the backend answers
    and cannot be used while an asyncio loop is already running. When the Qt
    event loop also runs asyncio, pass a scheduling runner such as
    ``asyncio.ensure_future``; rows refresh once the coroutine completes.
    """

    validityChanged = Signal(bool)
    errorOccurred = Signal(str)
    stateChanged = Signal()

    HEADERS = ["Partition", "Format type", "Mount point", "Reformat"]
    COLUMN_DEVICE = 0
    COLUMN_FORMAT = 1
    COLUMN_MOUNT_POINT = 2
    COLUMN_REFORMAT = 3

    def __init__(
        self,
        editor: MountPointEditor,
        runner: CoroutineRunner = asyncio.run,
        parent: Any = None,
    ) -> None:
        super().__init__(parent)
        self._editor = editor
        self._runner = runner
        self._rows: tuple[RowState, ...] = ()
        editor.on_validity_changed = self.validityChanged.emit
        editor.on_error = self.errorOccurred.emit

    @property
    def editor(self) -> MountPointEditor:
        return self._editor

    def mount(self, data: PartitioningData | None) -> None:
        """Set up manual partitioning and load the requests."""
        self._runner(self._mount(data))

    async def _mount(self, data: PartitioningData | None) -> None:
        await self._editor.mount(data)
        self.stateChanged.emit()
        self.reload()

    def setPartitioningData(self, data: PartitioningData) -> None:
        """Show data read from the backend."""
        self._editor.refresh(data)
        self.reload()

    def reload(self) -> None:
        self.beginResetModel()
        self._rows = self._editor.rows
        self.endResetModel()

    def _rowsChanged(self) -> None:
        self._rows = self._editor.rows
        if self._rows:
            self.dataChanged.emit(
                self.index(0, 0),
                self.index(len(self._rows) - 1, len(self.HEADERS) - 1),
            )

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return len(self._rows)

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:
        return len(self.HEADERS)

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole) -> Any:
        if not index.isValid() or index.row() >= len(self._rows):
            return None

        row = self._rows[index.row()]
        column = index.column()

        if role in (Qt.DisplayRole, Qt.EditRole):
            if column == self.COLUMN_DEVICE:
                return row.device_spec
            if column == self.COLUMN_FORMAT:
                return row.format_type
            if column == self.COLUMN_MOUNT_POINT:
                return row.mount_point
            return None

        if role == Qt.CheckStateRole and column == self.COLUMN_REFORMAT:
            return Qt.Checked if row.reformat else Qt.Unchecked

        if role == Qt.ToolTipRole:
            if column == self.COLUMN_MOUNT_POINT and row.duplicate:
                return DUPLICATE_MOUNT_POINT_TEXT
            if column == self.COLUMN_REFORMAT and row.is_root:
                return ROOT_REFORMAT_HELP_TEXT

        if role == Qt.ForegroundRole and column == self.COLUMN_MOUNT_POINT and row.duplicate:
            return QBrush(QColor(200, 0, 0))

        if role == Qt.UserRole:
            return row

        return None

    def headerData(
        self,
        section: int,
        orientation: Qt.Orientation,
        role: int = Qt.DisplayRole,
    ) -> Any:
        if orientation == Qt.Horizontal and role == Qt.DisplayRole:
            return self.HEADERS[section] if section < len(self.HEADERS) else None
        return None

    def flags(self, index: QModelIndex) -> Qt.ItemFlags:
        if not index.isValid() or index.row() >= len(self._rows):
            return Qt.NoItemFlags

        row = self._rows[index.row()]
        editable = self._editor.is_editable
        column = index.column()

        if column == self.COLUMN_MOUNT_POINT:
            if editable and row.mount_point_editable:
                return Qt.ItemIsEnabled | Qt.ItemIsSelectable | Qt.ItemIsEditable
            return Qt.ItemIsSelectable

        if column == self.COLUMN_REFORMAT:
            if editable and row.reformat_editable:
                return Qt.ItemIsEnabled | Qt.ItemIsSelectable | Qt.ItemIsUserCheckable
            return Qt.ItemIsSelectable | Qt.ItemIsUserCheckable

        return Qt.ItemIsEnabled | Qt.ItemIsSelectable

    def setData(self, index: QModelIndex, value: Any, role: int = Qt.EditRole) -> bool:
        if not index.isValid() or index.row() >= len(self._rows):
            return False

        device = self._rows[index.row()].device_spec
        column = index.column()

        if column == self.COLUMN_MOUNT_POINT and role == Qt.EditRole:
            edit = self._editor.change_mount_point(device, str(value or "").strip())
        elif column == self.COLUMN_REFORMAT and role == Qt.CheckStateRole:
            checked = Qt.CheckState(value) == Qt.Checked
            edit = self._editor.toggle_reformat(device, checked)
        else:
            return False

        return self._runner(self._apply(device, edit)) is not False

    async def _apply(self, device: str, edit: Coroutine[Any, Any, bool]) -> bool:
        try:
            await edit
        except MountAssignError as e:
            logger.warning("Edit rejected", device=device, error=str(e))
            return False
        self._rowsChanged()
        return True

    def getRowAtIndex(self, index: QModelIndex) -> RowState | None:
        """Get the row state at the given index."""
        if not index.isValid() or index.row() >= len(self._rows):
            return None
        return self._rows[index.row()]
