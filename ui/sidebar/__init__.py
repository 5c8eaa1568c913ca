"""Sidebar item tree and its filter/sort proxy."""

from .items import ItemType, SideBarAbstractItem
from .model import SideBarModel
from .proxy_model import SideBarProxyFilterSortModel

__all__ = ['ItemType', 'SideBarAbstractItem', 'SideBarModel', 'SideBarProxyFilterSortModel']
