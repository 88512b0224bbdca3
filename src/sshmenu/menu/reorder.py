"""Up/down reordering of menu tree nodes, independent of any widget."""

from __future__ import annotations

import copy
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from sshmenu.errors import MenuItemError
from sshmenu.menu.items import MenuItem

T = TypeVar("T")

TreePath = tuple[int, ...]
ChildrenOf = Callable[[object], list | None]


@dataclass(frozen=True)
class MoveResult(Generic[T]):
    """Reordered copy of the tree plus the node's new location."""

    items: list[T]
    path: TreePath
    moved: bool


def menu_children(node: object) -> list | None:
    """Children of a sub-menu node, ``None`` for leaves."""
    if isinstance(node, MenuItem):
        return node.items
    return None


def _container(tree: list[T], parent_path: Sequence[int], children_of: ChildrenOf) -> list[T]:
    container = tree
    for index in parent_path:
        if index < 0 or index >= len(container):
            raise MenuItemError(f"No menu item at path {tuple(parent_path)}")
        node = container[index]
        children = children_of(node)
        if children is None:
            raise MenuItemError(f"Menu item at path {tuple(parent_path)} has no children")
        container = children
    return container


def _prepare(
    tree: list[T],
    path: Sequence[int],
    children_of: ChildrenOf,
) -> tuple[list[T], TreePath, int, list[T]]:
    if not path:
        raise MenuItemError("Empty tree path")
    working = copy.deepcopy(tree)
    parent_path = tuple(path[:-1])
    index = path[-1]
    siblings = _container(working, parent_path, children_of)
    if index < 0 or index >= len(siblings):
        raise MenuItemError(f"No menu item at path {tuple(path)}")
    return working, parent_path, index, siblings


def move_up(
    tree: list[T],
    path: Sequence[int],
    *,
    children_of: ChildrenOf = menu_children,
) -> MoveResult[T]:
    """Move the node at ``path`` one step up; the input tree is not modified.

    * first child of a sub-menu: becomes the sibling just before that menu
    * preceded by a sub-menu: becomes that menu's last (or only) child
    * otherwise: swaps with the preceding sibling

    The first top-level node cannot move and is returned in place.
    """
    working, parent_path, index, siblings = _prepare(tree, path, children_of)
    target = siblings[index]

    if index == 0:
        if not parent_path:
            return MoveResult(working, tuple(path), False)
        del siblings[0]
        outer = _container(working, parent_path[:-1], children_of)
        outer.insert(parent_path[-1], target)
        return MoveResult(working, parent_path, True)

    previous = siblings[index - 1]
    previous_children = children_of(previous)
    if previous_children is not None:
        del siblings[index]
        previous_children.append(target)
        return MoveResult(working, (*parent_path, index - 1, len(previous_children) - 1), True)

    siblings[index - 1], siblings[index] = target, previous
    return MoveResult(working, (*parent_path, index - 1), True)


def move_down(
    tree: list[T],
    path: Sequence[int],
    *,
    children_of: ChildrenOf = menu_children,
) -> MoveResult[T]:
    """Move the node at ``path`` one step down; mirror image of :func:`move_up`.

    * followed by a sub-menu: becomes that menu's first child
    * last child of a sub-menu: becomes the sibling just after that menu
    * otherwise: swaps with the following sibling

    The last top-level node cannot move and is returned in place.
    """
    working, parent_path, index, siblings = _prepare(tree, path, children_of)
    target = siblings[index]

    if index + 1 < len(siblings):
        following = siblings[index + 1]
        following_children = children_of(following)
        if following_children is not None:
            del siblings[index]
            following_children.insert(0, target)
            return MoveResult(working, (*parent_path, index, 0), True)
        siblings[index], siblings[index + 1] = following, target
        return MoveResult(working, (*parent_path, index + 1), True)

    if not parent_path:
        return MoveResult(working, tuple(path), False)
    del siblings[index]
    outer = _container(working, parent_path[:-1], children_of)
    outer.insert(parent_path[-1] + 1, target)
    return MoveResult(working, (*parent_path[:-1], parent_path[-1] + 1), True)
