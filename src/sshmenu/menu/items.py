"""Menu item model: separators, host entries and sub-menus."""

from __future__ import annotations

import logging as py_logging
import warnings
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Annotated, Any, Literal, Union, cast

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing_extensions import TypedDict

from sshmenu.errors import UnknownItemTypeWarning
from sshmenu.quoting import split_env

logger = py_logging.getLogger(__name__)

ALT_TRANSPORT_KEY = "enable_bcvi"


class SeparatorRecord(TypedDict):
    type: Literal["separator"]


class HostRecord(TypedDict, total=False):
    type: Literal["host"]
    title: str
    sshparams: str
    geometry: str
    enable_bcvi: bool


class MenuRecord(TypedDict):
    type: Literal["menu"]
    title: str
    items: list[dict[str, Any]]


def _text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, (Mapping, list, tuple)):
        raise ValueError(f"expected text, got {type(value).__name__}")
    return str(value)


class SeparatorItem(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: Literal["separator"] = "separator"

    @property
    def title(self) -> str:
        return ""

    def to_record(self) -> SeparatorRecord:
        return SeparatorRecord(type="separator")


class HostItem(BaseModel):
    """A host entry.

    Record keys the model does not know about (a terminal ``profile`` for
    instance) are kept as pydantic extras and written back unchanged, so
    ``host.profile`` works whenever the record carried one.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: Literal["host"] = "host"
    title: str = ""
    sshparams: str = ""
    geometry: str = ""
    enable_alt_transport: bool = Field(default=False, alias=ALT_TRANSPORT_KEY)

    @field_validator("title", "sshparams", "geometry", mode="before")
    @classmethod
    def _coerce_text(cls, value: object) -> str:
        return _text(value)

    @field_validator("enable_alt_transport", mode="before")
    @classmethod
    def _coerce_flag(cls, value: object) -> bool:
        return bool(value)

    @property
    def env_settings(self) -> str:
        return split_env(self.sshparams)[0]

    @property
    def sshparams_noenv(self) -> str:
        return split_env(self.sshparams)[1]

    def extra(self, name: str, default: Any = "") -> Any:
        value = (self.model_extra or {}).get(name)
        return default if value is None else value

    def copy_item(self) -> HostItem:
        return self.model_copy(deep=True)

    def to_record(self) -> HostRecord:
        record = self.model_dump(by_alias=True)
        # Older readers treat any enable_bcvi key as set.
        if not self.enable_alt_transport:
            record.pop(ALT_TRANSPORT_KEY, None)
        return cast(HostRecord, record)


class MenuItem(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: Literal["menu"] = "menu"
    title: str = ""
    items: list[Item] = Field(default_factory=list)

    @field_validator("title", mode="before")
    @classmethod
    def _coerce_title(cls, value: object) -> str:
        return _text(value)

    @field_validator("items", mode="before")
    @classmethod
    def _build_children(cls, value: object) -> list[object]:
        if value is None:
            return []
        if not isinstance(value, list):
            return value  # type: ignore[return-value]
        children: list[object] = []
        for entry in value:
            if isinstance(entry, Mapping):
                built = item_from_record(entry)
                if built is not None:
                    children.append(built)
            else:
                children.append(entry)
        return children

    def has_children(self) -> bool:
        return len(self.items) > 0

    def append_item(self, item: Item) -> None:
        self.items.append(item)

    def clear_items(self) -> None:
        self.items = []

    def host_children(self) -> list[HostItem]:
        """Direct host children only; nested menus are not searched."""
        return [item for item in self.items if isinstance(item, HostItem)]

    def to_record(self) -> MenuRecord:
        return MenuRecord(
            type="menu",
            title=self.title,
            items=cast(list[dict[str, Any]], tree_to_records(self.items)),
        )


Item = Annotated[
    Union[SeparatorItem, HostItem, MenuItem],
    Field(discriminator="type"),
]

MenuItem.model_rebuild()


@dataclass(frozen=True)
class ItemFactories:
    """Constructors used when building items from records.

    Each factory receives the record mapping. The menu factory gets a copy
    whose ``items`` entry already holds built children.
    """

    separator: Callable[[Mapping[str, Any]], SeparatorItem] = SeparatorItem.model_validate
    host: Callable[[Mapping[str, Any]], HostItem] = HostItem.model_validate
    menu: Callable[[Mapping[str, Any]], MenuItem] = MenuItem.model_validate


DEFAULT_FACTORIES = ItemFactories()


def item_from_record(
    record: Mapping[str, Any],
    factories: ItemFactories | None = None,
) -> Item | None:
    """Build one item, or return ``None`` for a record of unknown type."""
    makers = factories or DEFAULT_FACTORIES
    raw_type = record.get("type") if isinstance(record, Mapping) else None
    item_type = "" if raw_type is None else str(raw_type)
    if item_type == "separator":
        return makers.separator(record)
    if item_type == "host":
        return makers.host(record)
    if item_type == "menu":
        nested = record.get("items")
        children = tree_from_records(nested if isinstance(nested, list) else [], makers)
        return makers.menu({**record, "items": children})

    logger.warning("menu-item skipped unknown-type=%r", item_type)
    warnings.warn(UnknownItemTypeWarning(item_type), stacklevel=2)
    return None


def tree_from_records(
    records: Iterable[Mapping[str, Any]],
    factories: ItemFactories | None = None,
) -> list[Item]:
    items: list[Item] = []
    for record in records:
        item = item_from_record(record, factories)
        if item is not None:
            items.append(item)
    return items


def item_to_record(item: Item) -> dict[str, Any]:
    return cast(dict[str, Any], item.to_record())


def tree_to_records(items: Iterable[Item]) -> list[dict[str, Any]]:
    return [item_to_record(item) for item in items]


def host_from_text(text: str, factories: ItemFactories | None = None) -> HostItem:
    """Treat free text typed by the user as a raw hostname."""
    makers = factories or DEFAULT_FACTORIES
    return makers.host({"type": "host", "title": text, "sshparams": text})


def each_item(items: list[Item], visit: Callable[[list[MenuItem], Item], None]) -> None:
    """Depth-first, pre-order walk calling ``visit(ancestors, item)``.

    ``ancestors`` is the live chain from the top level down to the item's
    parent. The visitor must not add or remove children of any item on that
    chain while the walk is in progress.
    """
    _walk(items, [], visit)


def _walk(
    items: list[Item],
    parents: list[MenuItem],
    visit: Callable[[list[MenuItem], Item], None],
) -> None:
    for item in items:
        visit(parents, item)
        if isinstance(item, MenuItem):
            parents.append(item)
            _walk(item.items, parents, visit)
            parents.pop()


def iter_items(items: list[Item]) -> Iterator[tuple[tuple[MenuItem, ...], Item]]:
    """Generator form of :func:`each_item` yielding snapshot ancestor tuples."""
    stack: list[tuple[tuple[MenuItem, ...], Iterator[Item]]] = [((), iter(items))]
    while stack:
        parents, children = stack[-1]
        item = next(children, None)
        if item is None:
            stack.pop()
            continue
        yield parents, item
        if isinstance(item, MenuItem):
            stack.append(((*parents, item), iter(item.items)))
