"""Widgets composing the items grid."""
from .items_table_view import ItemCellDelegate, ItemsTableView

__all__ = ["ItemCellDelegate", "ItemsTableView"]
