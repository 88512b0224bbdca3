from __future__ import annotations

import pytest

from sshmenu.errors import MenuItemError
from sshmenu.menu.items import HostItem, MenuItem, SeparatorItem, tree_to_records
from sshmenu.menu.reorder import move_down, move_up


def _host(title: str) -> HostItem:
    return HostItem(title=title, sshparams=title.lower())


def _tree() -> list:
    return [
        _host("A"),
        MenuItem(title="M", items=[_host("B"), _host("C")]),
        _host("D"),
    ]


def _shape(items: list) -> list:
    shape: list = []
    for item in items:
        if isinstance(item, MenuItem):
            shape.append({item.title: _shape(item.items)})
        elif isinstance(item, SeparatorItem):
            shape.append("---")
        else:
            shape.append(item.title)
    return shape


def test_move_up_swaps_with_previous_leaf() -> None:
    tree = [_host("A"), _host("B")]

    result = move_up(tree, (1,))

    assert _shape(result.items) == ["B", "A"]
    assert result.path == (0,)
    assert result.moved is True


def test_move_up_into_preceding_menu_as_last_child() -> None:
    result = move_up(_tree(), (2,))

    assert _shape(result.items) == ["A", {"M": ["B", "C", "D"]}]
    assert result.path == (1, 2)


def test_move_up_into_empty_preceding_menu() -> None:
    tree = [MenuItem(title="M"), _host("A")]

    result = move_up(tree, (1,))

    assert _shape(result.items) == [{"M": ["A"]}]
    assert result.path == (0, 0)


def test_move_up_first_child_leaves_its_menu() -> None:
    result = move_up(_tree(), (1, 0))

    assert _shape(result.items) == ["A", "B", {"M": ["C"]}, "D"]
    assert result.path == (1,)


def test_move_up_first_top_level_node_is_a_no_op() -> None:
    tree = _tree()

    result = move_up(tree, (0,))

    assert result.moved is False
    assert result.path == (0,)
    assert _shape(result.items) == _shape(tree)


def test_move_down_swaps_with_next_leaf() -> None:
    result = move_down(_tree(), (1, 0))

    assert _shape(result.items) == ["A", {"M": ["C", "B"]}, "D"]
    assert result.path == (1, 1)


def test_move_down_into_following_menu_as_first_child() -> None:
    result = move_down(_tree(), (0,))

    assert _shape(result.items) == [{"M": ["A", "B", "C"]}, "D"]
    assert result.path == (0, 0)


def test_move_down_last_child_leaves_its_menu() -> None:
    result = move_down(_tree(), (1, 1))

    assert _shape(result.items) == ["A", {"M": ["B"]}, "C", "D"]
    assert result.path == (2,)


def test_move_down_last_top_level_node_is_a_no_op() -> None:
    result = move_down(_tree(), (2,))

    assert result.moved is False
    assert result.path == (2,)


def test_menus_move_with_their_children() -> None:
    tree = [_host("A"), MenuItem(title="M", items=[_host("B")]), SeparatorItem()]

    result = move_down(tree, (1,))

    assert _shape(result.items) == ["A", "---", {"M": ["B"]}]
    assert result.path == (2,)


def test_nested_menu_exit_lands_in_parent_menu() -> None:
    tree = [MenuItem(title="Outer", items=[MenuItem(title="Inner", items=[_host("X")])])]

    up = move_up(tree, (0, 0, 0))
    down = move_down(tree, (0, 0, 0))

    assert _shape(up.items) == [{"Outer": ["X", {"Inner": []}]}]
    assert up.path == (0, 0)
    assert _shape(down.items) == [{"Outer": [{"Inner": []}, "X"]}]
    assert down.path == (0, 1)


def test_input_tree_is_not_modified() -> None:
    tree = _tree()
    before = tree_to_records(tree)

    move_up(tree, (2,))
    move_down(tree, (0,))

    assert tree_to_records(tree) == before


def test_up_then_down_restores_sibling_swap() -> None:
    tree = [_host("A"), _host("B"), _host("C")]

    up = move_up(tree, (2,))
    down = move_down(up.items, up.path)

    assert _shape(down.items) == ["A", "B", "C"]
    assert down.path == (2,)


def test_works_on_plain_nested_lists() -> None:
    tree = ["a", ["b"], "c"]

    def children_of(node: object) -> list | None:
        return node if isinstance(node, list) else None

    result = move_up(tree, (2,), children_of=children_of)

    assert result.items == ["a", ["b", "c"]]
    assert result.path == (1, 1)


@pytest.mark.parametrize("path", [(), (5,), (0, 0), (-1,), (-1, 0), (-2, 0), (7, 0)])
def test_invalid_paths_raise(path: tuple[int, ...]) -> None:
    with pytest.raises(MenuItemError):
        move_up(_tree(), path)


def test_sole_top_level_item_cannot_move() -> None:
    tree = [MenuItem(title="Only", items=[_host("A")])]

    assert move_up(tree, (0,)).moved is False
    assert move_down(tree, (0,)).items == tree


def test_negative_menu_index_does_not_wrap() -> None:
    tree = [_host("A"), MenuItem(title="M", items=[_host("B"), _host("C")])]

    with pytest.raises(MenuItemError):
        move_down(tree, (-1, 0))
