"""
Filter/sort proxy for the sidebar tree.

Hidden entries (names starting with ".") are filtered out. Ordering only
compares file-system items by name; whenever either side is another kind
of item, lessThan() answers True. That answer is not a strict weak
ordering (a < b and b < a can both hold), so the relative order of mixed
rows depends on the sort algorithm. Callers that need a stable multi-kind
order must sort those rows themselves.
"""
from typing import Optional

from PySide6.QtCore import QModelIndex, QObject, QSortFilterProxyModel

from ui.sidebar.items import ItemType, SideBarAbstractItem

HIDDEN_PREFIX = "."


class SideBarProxyFilterSortModel(QSortFilterProxyModel):
    """
    Proxy over a SideBarModel that hides dot-prefixed entries.

    lessThan() orders file-system items by display name and answers True
    whenever either row is another kind of item (or has no item at all),
    so mixed rows have no well-defined relative order.
    """

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)

    def filterAcceptsRow(self, source_row: int, source_parent: QModelIndex) -> bool:
        index = self.sourceModel().index(source_row, 0, source_parent)
        item = index.internalPointer()
        if item is not None and item.display_name().startswith(HIDDEN_PREFIX):
            return False
        return True

    def lessThan(self, left: QModelIndex, right: QModelIndex) -> bool:
        left_item = left.internalPointer()
        right_item = right.internalPointer()
        if (left_item is None or right_item is None
                or left_item.type() != ItemType.FILE_SYSTEM
                or right_item.type() != ItemType.FILE_SYSTEM):
            return True
        return left_item.display_name() < right_item.display_name()

    def item_from_index(self, proxy_index: QModelIndex) -> Optional[SideBarAbstractItem]:
        """Return the source item behind *proxy_index*, or None if invalid."""
        source_index = self.mapToSource(proxy_index)
        if not source_index.isValid():
            return None
        return source_index.internalPointer()
