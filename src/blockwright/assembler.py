"""Document assembly: the ``compile_tree`` entrypoint.

The assembler normalizes the top-level content, dispatches on the root kind,
hands each top-level child to its block transformer, resolves labelled
elements into input blocks, then wraps the result in the document envelope
and validates the whole document (block count and ``block_id`` uniqueness).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog

from blockwright.blocks import BLOCK_TRANSFORMERS, Block, transform_block
from blockwright.config import assert_valid_config, default_config, merge_config
from blockwright.constants import MAX_MESSAGE_BLOCKS, MAX_VIEW_BLOCKS, MAX_VIEW_TITLE_LENGTH
from blockwright.elements import compile_element, is_interactive
from blockwright.errors import (
    DuplicateBlockIdError,
    InvalidContainerError,
    MissingRequiredPropError,
    StructuralLimitError,
)
from blockwright.metadata import MetadataCollector, serialize_private_metadata
from blockwright.mrkdwn import coerce_plain, plain_text_object
from blockwright.nodes import ROOT_KINDS, Node, NodeKind
from blockwright.normalizer import (
    Element,
    NormalizedChild,
    RawElement,
    TextRun,
    normalize_children,
)
from blockwright.resolver import RootSlot, reject_input_child, resolve_root_slots
from blockwright.state import CompileState

_LOGGER = structlog.get_logger(__name__)

Document = list[Block] | dict[str, Any]


def compile_tree(
    tree: object,
    *,
    config: Mapping[str, object] | None = None,
    logger: Any = None,
) -> Document:
    """Compile a component tree into a Block Kit document.

    ``tree`` is a ``Blocks``, ``Modal`` or ``Home`` node, or any other content
    (a node, a sequence of nodes) which is then treated as a ``Blocks`` root.
    ``config`` is an optional partial configuration mapping overlaid on the
    defaults. Raises a ``BlockKitError`` subclass on the first violation.
    """

    settings = _resolve_config(config)
    log = logger if logger is not None else _LOGGER
    compiler_settings = settings["compiler"]

    root, children = _find_root(tree)
    kind = root.kind if root is not None else NodeKind.BLOCKS
    props: dict[str, Any] = dict(root.props) if root is not None else {}

    metadata_source = props.get("private_metadata")
    state = CompileState(
        root=kind,  # type: ignore[arg-type]
        exact_mode=bool(compiler_settings["exact_mode"]),
        metadata=MetadataCollector(enabled=not isinstance(metadata_source, str)),
        logger=log,
    )

    blocks = resolve_root_slots(_root_slots(children, state), state)
    _check_block_count(blocks, state)
    if compiler_settings["validate_block_ids"]:
        _check_unique_block_ids(blocks)

    document: Document
    if state.root is NodeKind.MODAL:
        document = _modal_view(props, blocks, state)
    elif state.root is NodeKind.HOME:
        document = _home_view(props, blocks, state)
    else:
        document = blocks

    if settings["logging"]["log_events"]:
        log.info(
            "blockkit_document_compiled",
            root=state.root_tag,
            blocks=len(blocks),
            exact_mode=state.exact_mode,
        )
    return document


def _resolve_config(config: Mapping[str, object] | None) -> dict[str, Any]:
    if config is None:
        return dict(default_config())
    return assert_valid_config(merge_config(default_config(), config))


def _find_root(tree: object) -> tuple[Node | None, object]:
    """Return the view root node, if any, and the content to compile under it."""

    if isinstance(tree, Node) and tree.kind in ROOT_KINDS:
        return tree, tree.children
    normalized = normalize_children(tree)
    significant = [
        child
        for child in normalized
        if not (isinstance(child, TextRun) and child.is_blank)
    ]
    if len(significant) == 1:
        only = significant[0]
        if isinstance(only, Element) and only.node.kind in ROOT_KINDS:
            return only.node, only.node.children
    for child in significant:
        if isinstance(child, Element) and child.node.kind in ROOT_KINDS:
            raise InvalidContainerError(
                f"<{child.node.tag}> must be the root of the document.",
                container="Blocks",
                tag=child.node.tag,
            )
    return None, normalized


def _root_slots(children: object, state: CompileState) -> list[RootSlot]:
    slots: list[RootSlot] = []
    for child in normalize_children(children):
        slot = _root_slot(child, state)
        if slot is not None:
            slots.append(slot)
    return slots


def _root_slot(child: NormalizedChild, state: CompileState) -> RootSlot | None:
    if isinstance(child, RawElement):
        if not state.accepts_input_blocks:
            reject_input_child(child, container=state.root_tag)
        return dict(child.payload)
    if isinstance(child, Element):
        node = child.node
        if node.kind in BLOCK_TRANSFORMERS:
            return transform_block(node, state)
        if is_interactive(node):
            return compile_element(node, state)
        raise InvalidContainerError(
            f"<{state.root_tag}> cannot include <{node.tag}>.",
            container=state.root_tag,
            tag=node.tag,
        )
    if child.is_blank:
        return None
    raise InvalidContainerError(
        f"<{state.root_tag}> cannot include text. Wrap it in <Section> or <Context>.",
        container=state.root_tag,
    )


def _modal_view(
    props: Mapping[str, Any], blocks: list[Block], state: CompileState
) -> dict[str, Any]:
    title = coerce_plain(props.get("title"), container=state.root_tag)
    if not title:
        raise MissingRequiredPropError(
            f'<{state.root_tag}> is missing the definition of "title" prop.',
            tag=state.root_tag,
            prop="title",
        )
    _check_view_label(state, "title", title)

    view: dict[str, Any] = {"type": "modal", "title": plain_text_object(title), "blocks": blocks}

    close = coerce_plain(props.get("close"), container=state.root_tag)
    if close is not None:
        _check_view_label(state, "close", close)
        view["close"] = plain_text_object(close)

    submit = coerce_plain(props.get("submit"), container=state.root_tag)
    if submit is None:
        submit = state.submit_label
    if submit is not None:
        _check_view_label(state, "submit", submit)
        view["submit"] = plain_text_object(submit)

    _put_private_metadata(view, props, state)
    for key in ("clear_on_close", "notify_on_close"):
        if props.get(key) is not None:
            view[key] = bool(props[key])
    _put_identifiers(view, props)
    return view


def _home_view(
    props: Mapping[str, Any], blocks: list[Block], state: CompileState
) -> dict[str, Any]:
    view: dict[str, Any] = {"type": "home", "blocks": blocks}
    _put_private_metadata(view, props, state)
    _put_identifiers(view, props)
    return view


def _put_private_metadata(
    view: dict[str, Any], props: Mapping[str, Any], state: CompileState
) -> None:
    value = serialize_private_metadata(state.metadata.values(), props.get("private_metadata"))
    if value is not None:
        view["private_metadata"] = value


def _put_identifiers(view: dict[str, Any], props: Mapping[str, Any]) -> None:
    for key in ("callback_id", "external_id"):
        if props.get(key) is not None:
            view[key] = str(props[key])


def _check_view_label(state: CompileState, what: str, text: str) -> None:
    if len(text) > MAX_VIEW_TITLE_LENGTH:
        raise StructuralLimitError(
            f"The {what} of <{state.root_tag}> has {len(text)} characters. "
            f"It's going over the limit. ({MAX_VIEW_TITLE_LENGTH})",
            actual=len(text),
            limit=MAX_VIEW_TITLE_LENGTH,
        )


def _check_block_count(blocks: list[Block], state: CompileState) -> None:
    limit = MAX_VIEW_BLOCKS if state.accepts_input_blocks else MAX_MESSAGE_BLOCKS
    if len(blocks) > limit:
        raise StructuralLimitError(
            f"The number of blocks in <{state.root_tag}> is {len(blocks)}. "
            f"It's going over the limit. ({limit})",
            actual=len(blocks),
            limit=limit,
        )


def _check_unique_block_ids(blocks: list[Block]) -> None:
    seen: set[str] = set()
    for block in blocks:
        block_id = block.get("block_id")
        if block_id is None:
            continue
        if block_id in seen:
            raise DuplicateBlockIdError(block_id)
        seen.add(block_id)


__all__ = ["Document", "compile_tree"]
