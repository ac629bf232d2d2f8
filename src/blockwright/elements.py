"""Interactive element compilation (select menus, pickers, option groups, buttons)."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, replace
from datetime import date, datetime, time
from typing import Any, Final

from blockwright.constants import MAX_GROUP_OPTIONS, MAX_SELECT_OPTIONS
from blockwright.errors import (
    InvalidContainerError,
    InvalidPropError,
    MissingRequiredPropError,
    StructuralLimitError,
)
from blockwright.mrkdwn import (
    coerce_plain,
    format_children,
    mrkdwn_object,
    plain_children,
    plain_text_object,
)
from blockwright.nodes import INTERACTIVE_KINDS, RESPONSE_URL_KINDS, Node, NodeKind
from blockwright.normalizer import Element, RawElement, TextRun, normalize_children
from blockwright.state import CompileState

_BUTTON_STYLES: Final[frozenset[str]] = frozenset({"primary", "danger"})


@dataclass(frozen=True, slots=True)
class InputField:
    """Input block fields declared on a component; ``None`` means undeclared."""

    label: str | None = None
    hint: str | None = None
    optional: bool | None = None
    dispatch_action: bool | None = None
    block_id: str | None = None

    def fill_from(self, fallback: InputField | None) -> InputField:
        if fallback is None:
            return self
        return replace(
            self,
            label=self.label if self.label is not None else fallback.label,
            hint=self.hint if self.hint is not None else fallback.hint,
            optional=self.optional if self.optional is not None else fallback.optional,
            dispatch_action=(
                self.dispatch_action
                if self.dispatch_action is not None
                else fallback.dispatch_action
            ),
            block_id=self.block_id if self.block_id is not None else fallback.block_id,
        )


@dataclass(slots=True)
class CompiledElement:
    """An element payload plus the placement facts the resolver needs."""

    tag: str
    kind: NodeKind
    payload: dict[str, Any]
    field: InputField | None = None
    wants_response_url: bool = False


def input_field_from_props(props: Mapping[str, Any], *, tag: str) -> InputField:
    optional = props.get("optional")
    if optional is None and props.get("required") is not None:
        optional = not props["required"]
    dispatch_action = props.get("dispatch_action")
    hint = props.get("hint")
    if hint is None:
        hint = props.get("title")
    return InputField(
        label=coerce_plain(props.get("label"), container=tag),
        hint=coerce_plain(hint, container=tag),
        optional=None if optional is None else bool(optional),
        dispatch_action=None if dispatch_action is None else bool(dispatch_action),
        block_id=block_id_of(props),
    )


def block_id_of(props: Mapping[str, Any]) -> str | None:
    value = props.get("id")
    if value is None:
        value = props.get("block_id")
    return None if value is None else str(value)


def compile_element(node: Node, state: CompileState) -> CompiledElement:
    """Compile one interactive node into its Block Kit element payload."""

    builder = _BUILDERS.get(node.kind)  # type: ignore[arg-type]
    if builder is None:
        raise InvalidPropError(f"<{node.tag}> is not an interactive element")
    assert isinstance(node.kind, NodeKind)

    payload = builder(node, state)
    field = None
    if node.props.get("label") is not None:
        field = input_field_from_props(node.props, tag=node.tag)

    wants_response_url = bool(node.props.get("response_url_enabled"))
    if wants_response_url and node.kind not in RESPONSE_URL_KINDS:
        raise InvalidPropError(f'<{node.tag}> does not support "response_url_enabled" prop.')
    if wants_response_url and _multiple(node):
        state.logger.debug("response_url_enabled_dropped", tag=node.tag, element=payload["type"])
        wants_response_url = False

    return CompiledElement(
        tag=node.tag,
        kind=node.kind,
        payload=payload,
        field=field,
        wants_response_url=wants_response_url,
    )


def is_interactive(node: Node) -> bool:
    return node.kind in INTERACTIVE_KINDS


def plain_text_input(node: Node, *, multiline: bool = False) -> dict[str, Any]:
    props = node.props
    payload: dict[str, Any] = {"type": "plain_text_input"}
    _put(payload, "action_id", action_id_of(props))
    _put(payload, "placeholder", _placeholder(node))
    _put(payload, "initial_value", None if props.get("value") is None else str(props["value"]))
    if multiline:
        payload["multiline"] = True
    _put(payload, "min_length", props.get("min_length"))
    _put(payload, "max_length", props.get("max_length"))
    return payload


def action_id_of(props: Mapping[str, Any]) -> str | None:
    value = props.get("action_id")
    if value is None:
        value = props.get("name")
    return None if value is None else str(value)


def _button(node: Node, state: CompileState) -> dict[str, Any]:
    text = plain_children(node.children, container=node.tag)
    if not text:
        raise MissingRequiredPropError(
            f"<{node.tag}> requires text content.", tag=node.tag, prop="children"
        )
    style = node.prop("style")
    if style is not None and style not in _BUTTON_STYLES:
        expected = ", ".join(sorted(_BUTTON_STYLES))
        raise InvalidPropError(f"<{node.tag}> style must be one of: {expected}")

    payload: dict[str, Any] = {"type": "button", "text": plain_text_object(text)}
    _put(payload, "action_id", action_id_of(node.props))
    _put(payload, "url", node.prop("url"))
    _put(payload, "value", node.prop("value"))
    _put(payload, "style", style)
    return payload


def _static_select(node: Node, state: CompileState) -> dict[str, Any]:
    multiple = _multiple(node)
    payload = _select_base(node, "static_select")

    options: list[dict[str, Any]] = []
    groups: list[dict[str, Any]] = []
    loose = 0
    for child in _element_children(node, {NodeKind.OPTION, NodeKind.OPTION_GROUP}):
        if child.kind is NodeKind.OPTION:
            options.append(_option(child))
            loose += 1
        else:
            group_options = [
                _option(item) for item in _element_children(child, {NodeKind.OPTION})
            ]
            groups.append(
                {
                    "label": plain_text_object(
                        coerce_plain(child.prop("label", ""), container=child.tag) or ""
                    ),
                    "options": group_options,
                }
            )
            options.extend(group_options)

    if groups and loose:
        raise InvalidContainerError(
            f"<{node.tag}> cannot mix <Option> and <Optgroup> children.",
            container=node.tag,
            tag="Option",
        )
    _check_option_count(node, len(options), MAX_SELECT_OPTIONS)

    if groups:
        payload["option_groups"] = groups
    else:
        payload["options"] = options

    selected = _selected(options, node.props.get("value"))
    if multiple:
        _put(payload, "initial_options", selected or None)
        _put(payload, "max_selected_items", node.prop("max_selected_items"))
    elif selected:
        payload["initial_option"] = selected[0]
    return payload


def _external_select(node: Node, state: CompileState) -> dict[str, Any]:
    payload = _select_base(node, "external_select")
    initial = node.prop("initial_option")
    if initial is not None:
        initial_options = [
            _option(child) for child in _option_nodes(initial, container=node.tag)
        ]
        if _multiple(node):
            _put(payload, "initial_options", initial_options or None)
        elif initial_options:
            payload["initial_option"] = initial_options[0]
    _put(payload, "min_query_length", node.prop("min_query_length"))
    if _multiple(node):
        _put(payload, "max_selected_items", node.prop("max_selected_items"))
    return payload


def _users_select(node: Node, state: CompileState) -> dict[str, Any]:
    return _conversation_like(node, "users_select", "initial_user")


def _channels_select(node: Node, state: CompileState) -> dict[str, Any]:
    return _conversation_like(node, "channels_select", "initial_channel")


def _conversations_select(node: Node, state: CompileState) -> dict[str, Any]:
    payload = _conversation_like(node, "conversations_select", "initial_conversation")
    if node.prop("default_to_current_conversation") is not None:
        payload["default_to_current_conversation"] = bool(
            node.props["default_to_current_conversation"]
        )

    conversation_filter: dict[str, Any] = {}
    include = node.prop("include")
    if include is not None:
        conversation_filter["include"] = [include] if isinstance(include, str) else list(include)
    for flag in ("exclude_external_shared_channels", "exclude_bot_users"):
        if node.prop(flag) is not None:
            conversation_filter[flag] = bool(node.props[flag])
    if conversation_filter:
        payload["filter"] = conversation_filter
    return payload


def _date_picker(node: Node, state: CompileState) -> dict[str, Any]:
    payload: dict[str, Any] = {"type": "datepicker"}
    _put(payload, "action_id", action_id_of(node.props))
    _put(payload, "placeholder", _placeholder(node))
    value = node.prop("value")
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        value = value.isoformat()
    _put(payload, "initial_date", value)
    return payload


def _time_picker(node: Node, state: CompileState) -> dict[str, Any]:
    payload: dict[str, Any] = {"type": "timepicker"}
    _put(payload, "action_id", action_id_of(node.props))
    _put(payload, "placeholder", _placeholder(node))
    value = node.prop("value")
    if isinstance(value, (time, datetime)):
        value = value.strftime("%H:%M")
    _put(payload, "initial_time", value)
    return payload


def _radio_button_group(node: Node, state: CompileState) -> dict[str, Any]:
    options, checked = _group_options(node, NodeKind.RADIO_BUTTON, state)
    payload: dict[str, Any] = {"type": "radio_buttons"}
    _put(payload, "action_id", action_id_of(node.props))
    payload["options"] = options

    selected = _selected(options, node.props.get("value")) or checked
    if selected:
        payload["initial_option"] = selected[0]
    return payload


def _checkbox_group(node: Node, state: CompileState) -> dict[str, Any]:
    options, checked = _group_options(node, NodeKind.CHECKBOX, state)
    payload: dict[str, Any] = {"type": "checkboxes"}
    _put(payload, "action_id", action_id_of(node.props))
    payload["options"] = options

    selected = _selected(options, node.props.get("values")) or checked
    _put(payload, "initial_options", selected or None)
    return payload


_BUILDERS: Final[dict[NodeKind, Callable[[Node, CompileState], dict[str, Any]]]] = {
    NodeKind.BUTTON: _button,
    NodeKind.SELECT: _static_select,
    NodeKind.EXTERNAL_SELECT: _external_select,
    NodeKind.USERS_SELECT: _users_select,
    NodeKind.CHANNELS_SELECT: _channels_select,
    NodeKind.CONVERSATIONS_SELECT: _conversations_select,
    NodeKind.DATE_PICKER: _date_picker,
    NodeKind.TIME_PICKER: _time_picker,
    NodeKind.RADIO_BUTTON_GROUP: _radio_button_group,
    NodeKind.CHECKBOX_GROUP: _checkbox_group,
}


def _select_base(node: Node, element_type: str) -> dict[str, Any]:
    prefix = "multi_" if _multiple(node) else ""
    payload: dict[str, Any] = {"type": f"{prefix}{element_type}"}
    _put(payload, "action_id", action_id_of(node.props))
    _put(payload, "placeholder", _placeholder(node))
    return payload


def _conversation_like(node: Node, element_type: str, initial_field: str) -> dict[str, Any]:
    payload = _select_base(node, element_type)
    value = node.prop("value")
    if _multiple(node):
        if value is not None:
            payload[f"{initial_field}s"] = _as_list(value)
        _put(payload, "max_selected_items", node.prop("max_selected_items"))
    elif value is not None:
        payload[initial_field] = str(value)
    return payload


def _option(node: Node) -> dict[str, Any]:
    text = plain_children(node.children, container=node.tag)
    value = node.prop("value", text)
    option: dict[str, Any] = {"text": plain_text_object(text), "value": str(value)}
    description = coerce_plain(node.prop("description"), container=node.tag)
    _put(option, "description", None if description is None else plain_text_object(description))
    return option


def _group_options(
    node: Node, option_kind: NodeKind, state: CompileState
) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    options: list[dict[str, Any]] = []
    checked: list[dict[str, Any]] = []
    for child in _element_children(node, {option_kind}):
        content = normalize_children(child.children)
        text = format_children(content, exact_mode=state.exact_mode, container=child.tag)
        value = child.prop("value")
        if value is None:
            value = plain_children(content, container=child.tag)
        option: dict[str, Any] = {"text": mrkdwn_object(text, verbatim=None), "value": str(value)}
        description = child.prop("description")
        if description is not None:
            option["description"] = mrkdwn_object(
                format_children(description, exact_mode=state.exact_mode, container=child.tag),
                verbatim=None,
            )
        options.append(option)
        if child.prop("checked"):
            checked.append(option)

    _check_option_count(node, len(options), MAX_GROUP_OPTIONS)
    return options, checked


def _element_children(node: Node, allowed: set[NodeKind]) -> list[Node]:
    found: list[Node] = []
    for child in normalize_children(node.children):
        if isinstance(child, TextRun) and child.is_blank:
            continue
        if isinstance(child, Element) and child.node.kind in allowed:
            found.append(child.node)
            continue
        tag = child.node.tag if isinstance(child, Element) else None
        raise InvalidContainerError(
            f"<{node.tag}> cannot include {_describe(child)}.", container=node.tag, tag=tag
        )
    return found


def _describe(child: Element | RawElement | TextRun) -> str:
    if isinstance(child, Element):
        return f"<{child.node.tag}>"
    if isinstance(child, RawElement):
        return f"an element for {child.type!r} type"
    return "text"


def _option_nodes(value: object, *, container: str) -> list[Node]:
    nodes: list[Node] = []
    for child in normalize_children(value):
        if isinstance(child, Element) and child.node.kind is NodeKind.OPTION:
            nodes.append(child.node)
        else:
            raise InvalidPropError(f"<{container}> initial_option must be <Option> nodes")
    return nodes


def _selected(options: list[dict[str, Any]], value: object) -> list[dict[str, Any]]:
    if value is None:
        return []
    wanted = [str(item) for item in _as_list(value)]
    by_value = {option["value"]: option for option in options}
    return [by_value[item] for item in wanted if item in by_value]


def _check_option_count(node: Node, count: int, limit: int) -> None:
    if count > limit:
        raise StructuralLimitError(
            f"The number of options in <{node.tag}> is {count}. "
            f"It's going over the limit. ({limit})",
            actual=count,
            limit=limit,
        )


def _placeholder(node: Node) -> dict[str, Any] | None:
    text = coerce_plain(node.prop("placeholder"), container=node.tag)
    if text is None:
        return None
    return plain_text_object(text, emoji=False)


def _multiple(node: Node) -> bool:
    return bool(node.prop("multiple", False))


def _as_list(value: object) -> list[Any]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        return [value]
    return list(value)


def _put(payload: dict[str, Any], key: str, value: object) -> None:
    if value is not None:
        payload[key] = value


__all__ = [
    "CompiledElement",
    "InputField",
    "action_id_of",
    "block_id_of",
    "compile_element",
    "input_field_from_props",
    "is_interactive",
    "plain_text_input",
]
