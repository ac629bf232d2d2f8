"""Block transformers: one per layout block kind.

Each transformer consumes a node, normalizes its children and returns one
schema-compliant block object. Pseudo-inputs (``<Input type="hidden">`` and
``<Input type="submit">``) record into the compile state and return ``None``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Final

from blockwright.constants import (
    MAX_ACTIONS_ELEMENTS,
    MAX_CONTEXT_ELEMENTS,
    MAX_HEADER_TEXT_LENGTH,
    MAX_SECTION_ACCESSORIES,
    MAX_SECTION_FIELDS,
    MAX_SECTION_TEXT_LENGTH,
)
from blockwright.elements import (
    block_id_of,
    compile_element,
    input_field_from_props,
    is_interactive,
    plain_text_input,
)
from blockwright.errors import (
    InvalidContainerError,
    InvalidPropError,
    MissingRequiredPropError,
    StructuralLimitError,
)
from blockwright.mrkdwn import (
    coerce_plain,
    format_children,
    format_run,
    mrkdwn_object,
    plain_children,
    plain_text_object,
)
from blockwright.nodes import INPUT_CAPABLE_KINDS, Node, NodeKind
from blockwright.normalizer import (
    Element,
    NormalizedChild,
    RawElement,
    TextRun,
    normalize_children,
)
from blockwright.resolver import (
    build_input_block,
    place_element,
    reject_input_child,
    wrap_in_place,
)
from blockwright.state import CompileState

_CONTEXT_RAW_TYPES: Final[frozenset[str]] = frozenset({"mrkdwn", "plain_text", "image"})
_INPUT_TYPES: Final[frozenset[str]] = frozenset({"text", "hidden", "submit"})

Block = dict[str, Any]


def transform_block(node: Node, state: CompileState) -> Block | None:
    transformer = BLOCK_TRANSFORMERS.get(node.kind)  # type: ignore[arg-type]
    if transformer is None:
        raise InvalidContainerError(
            f"<{state.root_tag}> cannot include <{node.tag}>.",
            container=state.root_tag,
            tag=node.tag,
        )
    return transformer(node, state)


def transform_section(node: Node, state: CompileState) -> Block:
    texts: list[str] = []
    fields: list[dict[str, Any]] = []
    accessories: list[dict[str, Any]] = []

    for child in normalize_children(node.children):
        reject_input_child(child, container=node.tag)
        if isinstance(child, TextRun):
            texts.append(format_run(child, exact_mode=state.exact_mode))
        elif isinstance(child, RawElement):
            accessories.append(dict(child.payload))
        elif child.node.kind is NodeKind.FIELD:
            fields.append(
                mrkdwn_object(
                    format_children(
                        child.node.children, exact_mode=state.exact_mode, container="Field"
                    )
                )
            )
        elif child.node.kind is NodeKind.IMAGE:
            accessories.append(image_element(child.node))
        elif is_interactive(child.node):
            accessories.append(
                place_element(compile_element(child.node, state), container=node.tag, state=state)
            )
        else:
            raise _cannot_include(node, child)

    text = "".join(texts)
    _check_length(node, "text", len(text), MAX_SECTION_TEXT_LENGTH)
    _check_count(node, "fields", len(fields), MAX_SECTION_FIELDS)
    _check_count(node, "accessories", len(accessories), MAX_SECTION_ACCESSORIES)
    if not text.strip() and not fields:
        raise MissingRequiredPropError(
            f"<{node.tag}> requires text content or <Field> children.",
            tag=node.tag,
            prop="children",
        )

    block = _block_base("section", node)
    if text.strip():
        block["text"] = mrkdwn_object(text)
    if fields:
        block["fields"] = fields
    if accessories:
        block["accessory"] = accessories[0]
    return block


def transform_context(node: Node, state: CompileState) -> Block:
    """Merge text runs into single mrkdwn elements, split by images."""

    elements: list[dict[str, Any]] = []
    pending: list[str] = []

    def flush() -> None:
        if pending:
            elements.append(mrkdwn_object("".join(pending), verbatim=False))
            pending.clear()

    for child in normalize_children(node.children):
        reject_input_child(child, container=node.tag)
        if isinstance(child, TextRun):
            if not child.is_blank:
                pending.append(format_run(child, exact_mode=state.exact_mode))
            continue

        flush()
        if isinstance(child, RawElement) and child.type in _CONTEXT_RAW_TYPES:
            elements.append(dict(child.payload))
        elif isinstance(child, Element) and child.node.kind is NodeKind.IMAGE:
            elements.append(image_element(child.node))
        else:
            raise _cannot_include(node, child)
    flush()

    if len(elements) > MAX_CONTEXT_ELEMENTS:
        raise StructuralLimitError(
            f"The number of elements generated by <{node.tag}> is {len(elements)}. "
            f"It's going over the limit. ({MAX_CONTEXT_ELEMENTS})",
            actual=len(elements),
            limit=MAX_CONTEXT_ELEMENTS,
        )

    block = _block_base("context", node)
    block["elements"] = elements
    return block


def transform_actions(node: Node, state: CompileState) -> Block:
    elements: list[dict[str, Any]] = []
    for child in normalize_children(node.children):
        reject_input_child(child, container=node.tag)
        if isinstance(child, TextRun):
            if child.is_blank:
                continue
            raise _cannot_include(node, child)
        if isinstance(child, RawElement):
            elements.append(dict(child.payload))
        elif is_interactive(child.node):
            elements.append(
                place_element(compile_element(child.node, state), container=node.tag, state=state)
            )
        else:
            raise _cannot_include(node, child)

    _check_count(node, "elements", len(elements), MAX_ACTIONS_ELEMENTS)
    block = _block_base("actions", node)
    block["elements"] = elements
    return block


def transform_divider(node: Node, state: CompileState) -> Block:
    return _block_base("divider", node)


def transform_image(node: Node, state: CompileState) -> Block:
    element = image_element(node)
    block = _block_base("image", node)
    block["image_url"] = element["image_url"]
    block["alt_text"] = element["alt_text"]
    title = coerce_plain(node.prop("title"), container=node.tag)
    if title is not None:
        block["title"] = plain_text_object(title)
    return block


def transform_header(node: Node, state: CompileState) -> Block:
    text = plain_children(node.children, container=node.tag)
    if not text.strip():
        raise MissingRequiredPropError(
            f"<{node.tag}> requires text content.", tag=node.tag, prop="children"
        )
    _check_length(node, "text", len(text), MAX_HEADER_TEXT_LENGTH)
    block = _block_base("header", node)
    block["text"] = plain_text_object(text)
    return block


def transform_input(node: Node, state: CompileState) -> Block | None:
    input_type = node.prop("type", "text") if node.kind is NodeKind.INPUT else "text"
    if input_type not in _INPUT_TYPES:
        expected = ", ".join(sorted(_INPUT_TYPES))
        raise InvalidPropError(f"<{node.tag}> type must be one of: {expected}")

    if input_type == "hidden":
        _collect_hidden(node, state)
        return None
    if input_type == "submit":
        _collect_submit(node, state)
        return None

    field = input_field_from_props(node.props, tag=node.tag)
    children = [
        child
        for child in normalize_children(node.children)
        if not (isinstance(child, TextRun) and child.is_blank)
    ]
    if not children:
        return build_input_block(
            field,
            plain_text_input(node, multiline=node.kind is NodeKind.TEXTAREA),
            tag=node.tag,
            state=state,
        )
    if len(children) > 1:
        raise StructuralLimitError(
            f"<{node.tag}> can include only one element, but {len(children)} were found.",
            actual=len(children),
            limit=1,
        )

    child = children[0]
    if isinstance(child, Element) and child.node.kind in INPUT_CAPABLE_KINDS:
        return wrap_in_place(
            field, compile_element(child.node, state), container=node.tag, state=state
        )
    if isinstance(child, RawElement) and child.type != "input":
        return build_input_block(field, dict(child.payload), tag=node.tag, state=state)
    raise _cannot_include(node, child)


def image_element(node: Node) -> dict[str, Any]:
    src = node.prop("src")
    alt = node.prop("alt")
    if src is None:
        raise MissingRequiredPropError(
            f'<{node.tag}> is missing the definition of "src" prop.', tag=node.tag, prop="src"
        )
    if alt is None:
        raise MissingRequiredPropError(
            f'<{node.tag}> is missing the definition of "alt" prop.', tag=node.tag, prop="alt"
        )
    return {"type": "image", "image_url": str(src), "alt_text": str(alt)}


BLOCK_TRANSFORMERS: Final[dict[NodeKind, Callable[[Node, CompileState], Block | None]]] = {
    NodeKind.SECTION: transform_section,
    NodeKind.CONTEXT: transform_context,
    NodeKind.ACTIONS: transform_actions,
    NodeKind.DIVIDER: transform_divider,
    NodeKind.IMAGE: transform_image,
    NodeKind.HEADER: transform_header,
    NodeKind.INPUT: transform_input,
    NodeKind.TEXTAREA: transform_input,
}


def _collect_hidden(node: Node, state: CompileState) -> None:
    if state.root is NodeKind.BLOCKS:
        raise InvalidContainerError(
            f'<{state.root_tag}> cannot include <{node.tag} type="hidden">. '
            "Hidden values are stored in private metadata of <Modal> or <Home>.",
            container=state.root_tag,
            tag=node.tag,
        )
    name = node.prop("name")
    if not isinstance(name, str) or not name:
        raise MissingRequiredPropError(
            f'<{node.tag} type="hidden"> is missing the definition of "name" prop.',
            tag=node.tag,
            prop="name",
        )
    state.metadata.add(name, node.props.get("value"))


def _collect_submit(node: Node, state: CompileState) -> None:
    if state.root is not NodeKind.MODAL:
        raise InvalidContainerError(
            f'<{state.root_tag}> cannot include <{node.tag} type="submit">. '
            "Submit buttons are only available in <Modal>.",
            container=state.root_tag,
            tag=node.tag,
        )
    label = coerce_plain(node.props.get("value"), container=node.tag)
    if not label:
        raise MissingRequiredPropError(
            f'<{node.tag} type="submit"> is missing the definition of "value" prop.',
            tag=node.tag,
            prop="value",
        )
    state.submit_label = label


def _block_base(block_type: str, node: Node) -> Block:
    block: Block = {"type": block_type}
    block_id = block_id_of(node.props)
    if block_id is not None:
        block["block_id"] = block_id
    return block


def _cannot_include(node: Node, child: NormalizedChild) -> InvalidContainerError:
    if isinstance(child, Element):
        return InvalidContainerError(
            f"<{node.tag}> cannot include <{child.node.tag}>.",
            container=node.tag,
            tag=child.node.tag,
        )
    if isinstance(child, RawElement):
        return InvalidContainerError(
            f"<{node.tag}> cannot include the element for {child.type!r} type.",
            container=node.tag,
        )
    return InvalidContainerError(f"<{node.tag}> cannot include text.", container=node.tag)


def _check_count(node: Node, what: str, count: int, limit: int) -> None:
    if count > limit:
        raise StructuralLimitError(
            f"The number of {what} in <{node.tag}> is {count}. "
            f"It's going over the limit. ({limit})",
            actual=count,
            limit=limit,
        )


def _check_length(node: Node, what: str, length: int, limit: int) -> None:
    if length > limit:
        raise StructuralLimitError(
            f"The {what} of <{node.tag}> has {length} characters. "
            f"It's going over the limit. ({limit})",
            actual=length,
            limit=limit,
        )


__all__ = [
    "BLOCK_TRANSFORMERS",
    "Block",
    "image_element",
    "transform_actions",
    "transform_block",
    "transform_context",
    "transform_divider",
    "transform_header",
    "transform_image",
    "transform_input",
    "transform_section",
]
