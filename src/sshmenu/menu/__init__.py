"""Menu tree model and editing operations."""

from .items import (
    DEFAULT_FACTORIES,
    HostItem,
    Item,
    ItemFactories,
    MenuItem,
    SeparatorItem,
    each_item,
    host_from_text,
    item_from_record,
    item_to_record,
    iter_items,
    tree_from_records,
    tree_to_records,
)
from .reorder import MoveResult, move_down, move_up

__all__ = [
    "DEFAULT_FACTORIES",
    "each_item",
    "host_from_text",
    "HostItem",
    "Item",
    "item_from_record",
    "item_to_record",
    "ItemFactories",
    "iter_items",
    "MenuItem",
    "move_down",
    "move_up",
    "MoveResult",
    "SeparatorItem",
    "tree_from_records",
    "tree_to_records",
]
