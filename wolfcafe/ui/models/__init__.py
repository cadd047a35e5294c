"""Qt item models."""
from .items_table_model import ItemsTableModel

__all__ = ["ItemsTableModel"]
