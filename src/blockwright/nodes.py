"""Node model for component trees handed over by a markup front end."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Final, NoReturn

from blockwright.errors import InvalidPropError

Component = Callable[..., Any]


class NodeKind(StrEnum):
    # Document roots.
    BLOCKS = "blocks"
    MODAL = "modal"
    HOME = "home"

    # Layout blocks.
    SECTION = "section"
    CONTEXT = "context"
    ACTIONS = "actions"
    DIVIDER = "divider"
    IMAGE = "image"
    HEADER = "header"
    INPUT = "input"
    TEXTAREA = "textarea"
    FIELD = "field"

    # Interactive elements.
    BUTTON = "button"
    SELECT = "select"
    EXTERNAL_SELECT = "external_select"
    USERS_SELECT = "users_select"
    CHANNELS_SELECT = "channels_select"
    CONVERSATIONS_SELECT = "conversations_select"
    DATE_PICKER = "date_picker"
    TIME_PICKER = "time_picker"
    RADIO_BUTTON_GROUP = "radio_button_group"
    CHECKBOX_GROUP = "checkbox_group"

    # Composition objects.
    OPTION = "option"
    OPTION_GROUP = "option_group"
    RADIO_BUTTON = "radio_button"
    CHECKBOX = "checkbox"

    # Inline formatting.
    BOLD = "bold"
    ITALIC = "italic"
    STRIKE = "strike"
    CODE = "code"
    LINK = "link"
    LINE_BREAK = "line_break"


TAG_NAMES: Final[dict[NodeKind, str]] = {
    NodeKind.BLOCKS: "Blocks",
    NodeKind.MODAL: "Modal",
    NodeKind.HOME: "Home",
    NodeKind.SECTION: "Section",
    NodeKind.CONTEXT: "Context",
    NodeKind.ACTIONS: "Actions",
    NodeKind.DIVIDER: "Divider",
    NodeKind.IMAGE: "Image",
    NodeKind.HEADER: "Header",
    NodeKind.INPUT: "Input",
    NodeKind.TEXTAREA: "Textarea",
    NodeKind.FIELD: "Field",
    NodeKind.BUTTON: "Button",
    NodeKind.SELECT: "Select",
    NodeKind.EXTERNAL_SELECT: "ExternalSelect",
    NodeKind.USERS_SELECT: "UsersSelect",
    NodeKind.CHANNELS_SELECT: "ChannelsSelect",
    NodeKind.CONVERSATIONS_SELECT: "ConversationsSelect",
    NodeKind.DATE_PICKER: "DatePicker",
    NodeKind.TIME_PICKER: "TimePicker",
    NodeKind.RADIO_BUTTON_GROUP: "RadioButtonGroup",
    NodeKind.CHECKBOX_GROUP: "CheckboxGroup",
    NodeKind.OPTION: "Option",
    NodeKind.OPTION_GROUP: "Optgroup",
    NodeKind.RADIO_BUTTON: "RadioButton",
    NodeKind.CHECKBOX: "Checkbox",
    NodeKind.BOLD: "Bold",
    NodeKind.ITALIC: "Italic",
    NodeKind.STRIKE: "Strike",
    NodeKind.CODE: "Code",
    NodeKind.LINK: "Link",
    NodeKind.LINE_BREAK: "LineBreak",
}

ROOT_KINDS: Final[frozenset[NodeKind]] = frozenset(
    {NodeKind.BLOCKS, NodeKind.MODAL, NodeKind.HOME}
)
INPUT_BLOCK_KINDS: Final[frozenset[NodeKind]] = frozenset({NodeKind.INPUT, NodeKind.TEXTAREA})
INPUT_CAPABLE_KINDS: Final[frozenset[NodeKind]] = frozenset(
    {
        NodeKind.SELECT,
        NodeKind.EXTERNAL_SELECT,
        NodeKind.USERS_SELECT,
        NodeKind.CHANNELS_SELECT,
        NodeKind.CONVERSATIONS_SELECT,
        NodeKind.DATE_PICKER,
        NodeKind.TIME_PICKER,
        NodeKind.RADIO_BUTTON_GROUP,
        NodeKind.CHECKBOX_GROUP,
    }
)
INTERACTIVE_KINDS: Final[frozenset[NodeKind]] = INPUT_CAPABLE_KINDS | {NodeKind.BUTTON}
RESPONSE_URL_KINDS: Final[frozenset[NodeKind]] = frozenset(
    {NodeKind.CHANNELS_SELECT, NodeKind.CONVERSATIONS_SELECT}
)
INLINE_KINDS: Final[frozenset[NodeKind]] = frozenset(
    {
        NodeKind.BOLD,
        NodeKind.ITALIC,
        NodeKind.STRIKE,
        NodeKind.CODE,
        NodeKind.LINK,
        NodeKind.LINE_BREAK,
    }
)


@dataclass(frozen=True, slots=True)
class Node:
    """One component instance: a kind, its props and its ordered children."""

    kind: NodeKind | Component
    props: dict[str, Any] = field(default_factory=dict)
    children: tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", _as_kind(self.kind))
        if not isinstance(self.props, Mapping):
            _fail("Node.props", f"expected mapping, got {type(self.props).__name__}")
        object.__setattr__(self, "props", dict(self.props))
        object.__setattr__(self, "children", tuple(_replayable(child) for child in self.children))

    @property
    def is_component(self) -> bool:
        return not isinstance(self.kind, NodeKind)

    @property
    def tag(self) -> str:
        if isinstance(self.kind, NodeKind):
            return TAG_NAMES[self.kind]
        return getattr(self.kind, "__name__", type(self.kind).__name__)

    def prop(self, name: str, default: Any = None) -> Any:
        value = self.props.get(name)
        return default if value is None else value


def h(
    kind: NodeKind | str | Component,
    props: Mapping[str, Any] | None = None,
    *children: Any,
) -> Node:
    """Build a node the way a markup front end would."""

    return Node(kind=kind, props=dict(props or {}), children=children)


def render_component(node: Node) -> Any:
    """Invoke a component node and return whatever it renders."""

    if not node.is_component:
        _fail("Node.kind", f"{node.tag} is a built-in kind, not a component")
    component: Component = node.kind  # type: ignore[assignment]
    return component(children=node.children, **node.props)


def _as_kind(value: object) -> NodeKind | Component:
    if isinstance(value, NodeKind):
        return value
    if isinstance(value, str):
        try:
            return NodeKind(value)
        except ValueError:
            _fail("Node.kind", f"unknown kind {value!r}")
    if callable(value):
        return value
    _fail("Node.kind", f"expected NodeKind, string or component, got {type(value).__name__}")


def _replayable(value: Any) -> Any:
    # Children are walked more than once, so one-shot iterators become tuples.
    if isinstance(value, Iterator):
        return tuple(_replayable(item) for item in value)
    return value


def _fail(path: str, message: str) -> NoReturn:
    raise InvalidPropError(f"{path}: {message}")


__all__ = [
    "INLINE_KINDS",
    "INPUT_BLOCK_KINDS",
    "INPUT_CAPABLE_KINDS",
    "INTERACTIVE_KINDS",
    "RESPONSE_URL_KINDS",
    "ROOT_KINDS",
    "TAG_NAMES",
    "Component",
    "Node",
    "NodeKind",
    "h",
    "render_component",
]
