"""
Sidebar items.

Each row in the sidebar tree is backed by one SideBarAbstractItem. Only
file-system backed items take part in name ordering.
"""
from enum import Enum
from typing import List, Optional


class ItemType(Enum):
    """Kinds of sidebar entries"""
    FILE_SYSTEM = "file_system"
    FAVORITE = "favorite"
    PERSONAL = "personal"
    NETWORK = "network"
    SEPARATOR = "separator"
    VFS = "vfs"


class SideBarAbstractItem:
    """One node of the sidebar tree."""

    def __init__(self, display_name: str, item_type: ItemType = ItemType.FILE_SYSTEM,
                 uri: str = "", parent: Optional["SideBarAbstractItem"] = None):
        self._display_name = display_name
        self._type = item_type
        self._uri = uri
        self._parent = parent
        self._children: List["SideBarAbstractItem"] = []

    def display_name(self) -> str:
        return self._display_name

    def type(self) -> ItemType:
        return self._type

    def uri(self) -> str:
        return self._uri

    def parent_item(self) -> Optional["SideBarAbstractItem"]:
        return self._parent

    def children(self) -> List["SideBarAbstractItem"]:
        return self._children

    def append_child(self, child: "SideBarAbstractItem") -> "SideBarAbstractItem":
        child._parent = self
        self._children.append(child)
        return child

    def row(self) -> int:
        if self._parent is None:
            return 0
        return self._parent._children.index(self)

    def __repr__(self) -> str:
        return f"SideBarAbstractItem({self._display_name!r}, {self._type.name})"
