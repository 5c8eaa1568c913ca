"""
Read-only tree model over SideBarAbstractItem nodes.

Every index carries its item as the internal pointer, which is what the
proxy model reads back.
"""
from typing import Any, Iterable, Optional

from PySide6.QtCore import QAbstractItemModel, QModelIndex, QObject, Qt

from ui.sidebar.items import ItemType, SideBarAbstractItem


class SideBarModel(QAbstractItemModel):
    """Single-column tree of sidebar items."""

    def __init__(self, items: Iterable[SideBarAbstractItem] = (),
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self._root = SideBarAbstractItem("", ItemType.SEPARATOR)
        for item in items:
            self._root.append_child(item)

    def root_item(self) -> SideBarAbstractItem:
        return self._root

    def add_item(self, item: SideBarAbstractItem,
                 parent_item: Optional[SideBarAbstractItem] = None) -> QModelIndex:
        """Append *item* under *parent_item* (top level when omitted)."""
        owner = parent_item or self._root
        parent_index = self.index_for_item(owner)
        row = len(owner.children())
        self.beginInsertRows(parent_index, row, row)
        owner.append_child(item)
        self.endInsertRows()
        return self.index(row, 0, parent_index)

    def index_for_item(self, item: SideBarAbstractItem) -> QModelIndex:
        if item is self._root:
            return QModelIndex()
        return self.createIndex(item.row(), 0, item)

    def _item(self, index: QModelIndex) -> SideBarAbstractItem:
        if index.isValid():
            return index.internalPointer()
        return self._root

    def index(self, row: int, column: int, parent: QModelIndex = QModelIndex()) -> QModelIndex:
        if not self.hasIndex(row, column, parent):
            return QModelIndex()
        children = self._item(parent).children()
        return self.createIndex(row, column, children[row])

    def parent(self, index: QModelIndex) -> QModelIndex:
        if not index.isValid():
            return QModelIndex()
        owner = index.internalPointer().parent_item()
        if owner is None or owner is self._root:
            return QModelIndex()
        return self.createIndex(owner.row(), 0, owner)

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        if parent.column() > 0:
            return 0
        return len(self._item(parent).children())

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:
        return 1

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        if not index.isValid():
            return None
        if role == Qt.ItemDataRole.DisplayRole:
            return index.internalPointer().display_name()
        if role == Qt.ItemDataRole.ToolTipRole:
            return index.internalPointer().uri() or None
        return None

    def flags(self, index: QModelIndex) -> Qt.ItemFlag:
        if not index.isValid():
            return Qt.ItemFlag.NoItemFlags
        return Qt.ItemFlag.ItemIsEnabled | Qt.ItemFlag.ItemIsSelectable
