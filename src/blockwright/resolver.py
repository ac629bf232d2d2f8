"""Input-capability resolution for interactive elements.

Every interactive element ends in one of these placements:

- ``BARE``: no ``label`` prop, kept in its original container unchanged.
- ``WRAPPED_IN_PLACE``: already inside an ``<Input>`` block; the element's
  input fields fill whatever the block left undeclared.
- ``LIFTED``: a labelled element at the top level of a view; a new input block
  is built around it and spliced into the element's position.

Invalid placements raise ``InvalidContainerError`` or
``MissingRequiredPropError`` at the point of detection.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum
from typing import Any

from blockwright.elements import CompiledElement, InputField
from blockwright.errors import InvalidContainerError, MissingRequiredPropError
from blockwright.mrkdwn import plain_text_object
from blockwright.nodes import INPUT_BLOCK_KINDS, NodeKind
from blockwright.normalizer import Element, NormalizedChild, RawElement
from blockwright.state import CompileState

RootSlot = dict[str, Any] | CompiledElement


class Placement(StrEnum):
    BARE = "bare"
    WRAPPED_IN_PLACE = "wrapped_in_place"
    LIFTED = "lifted"


def reject_input_child(child: NormalizedChild, *, container: str) -> None:
    """Raise when an input block, or anything claiming to be one, sits in ``container``."""

    if isinstance(child, Element) and child.node.kind in INPUT_BLOCK_KINDS:
        tag = child.node.tag
        raise InvalidContainerError(
            f'<{container}> cannot include the element for "input" type: <{tag}>. '
            "Input blocks are only available as direct children of <Modal> or <Home>.",
            container=container,
            tag=tag,
        )
    if isinstance(child, RawElement) and child.type == "input":
        raise InvalidContainerError(
            f'<{container}> cannot include the element for "input" type.',
            container=container,
        )


def place_element(
    compiled: CompiledElement,
    *,
    container: str,
    state: CompileState,
) -> dict[str, Any]:
    """Resolve a bare element placed inside a non-input block (Section, Actions)."""

    if compiled.field is not None:
        raise InvalidContainerError(
            f'<{container}> cannot include the input component. Please remove "label" prop '
            f'from <{compiled.tag} label="...">.',
            container=container,
            tag=compiled.tag,
        )
    if compiled.wants_response_url:
        _reject_response_url(compiled, container=container)

    _log(state, compiled, Placement.BARE, container)
    return dict(compiled.payload)


def wrap_in_place(
    block_field: InputField,
    compiled: CompiledElement,
    *,
    container: str,
    state: CompileState,
) -> dict[str, Any]:
    """Build the input block for an element written inside ``<Input>``."""

    _log(state, compiled, Placement.WRAPPED_IN_PLACE, container)
    return build_input_block(
        block_field.fill_from(compiled.field),
        _element_for_input(compiled, container=container, state=state),
        tag=container,
        state=state,
    )


def resolve_root_slots(slots: Sequence[RootSlot], state: CompileState) -> list[dict[str, Any]]:
    """Replace every top-level element slot with its input block, preserving order."""

    blocks: list[dict[str, Any]] = []
    for slot in slots:
        if not isinstance(slot, CompiledElement):
            blocks.append(slot)
            continue
        blocks.append(_lift(slot, state))
    return blocks


def build_input_block(
    field: InputField,
    element: dict[str, Any],
    *,
    tag: str,
    state: CompileState,
) -> dict[str, Any]:
    require_input_root(tag, state)
    if not field.label:
        raise MissingRequiredPropError(
            f'<{tag}> is missing the definition of "label" prop.', tag=tag, prop="label"
        )

    block: dict[str, Any] = {"type": "input"}
    if field.block_id is not None:
        block["block_id"] = field.block_id
    block["label"] = plain_text_object(field.label)
    if field.hint is not None:
        block["hint"] = plain_text_object(field.hint)
    block["optional"] = True if field.optional is None else field.optional
    if field.dispatch_action is not None:
        block["dispatch_action"] = field.dispatch_action
    block["element"] = element
    return block


def require_input_root(tag: str, state: CompileState) -> None:
    if not state.accepts_input_blocks:
        raise InvalidContainerError(
            f'<{state.root_tag}> cannot include the element for "input" type: <{tag}>. '
            "Input blocks are only available in <Modal> and <Home>.",
            container=state.root_tag,
            tag=tag,
        )


def _lift(compiled: CompiledElement, state: CompileState) -> dict[str, Any]:
    if compiled.field is None or not compiled.field.label:
        if not state.accepts_input_blocks:
            raise InvalidContainerError(
                f"<{state.root_tag}> cannot include <{compiled.tag}> directly. "
                "Place it in <Actions> or <Section>.",
                container=state.root_tag,
                tag=compiled.tag,
            )
        if compiled.kind is NodeKind.BUTTON:
            raise _not_an_input(compiled, container=state.root_tag)
        raise MissingRequiredPropError(
            f"<{compiled.tag}> is used as an input block inside <{state.root_tag}>. "
            'Are you missing the definition of "label" prop?',
            tag=compiled.tag,
            prop="label",
        )

    _log(state, compiled, Placement.LIFTED, state.root_tag)
    return build_input_block(
        compiled.field,
        _element_for_input(compiled, container=state.root_tag, state=state),
        tag=compiled.tag,
        state=state,
    )


def _element_for_input(
    compiled: CompiledElement, *, container: str, state: CompileState
) -> dict[str, Any]:
    if compiled.kind is NodeKind.BUTTON:
        raise _not_an_input(compiled, container=container)
    element = dict(compiled.payload)
    if compiled.wants_response_url:
        if state.root is not NodeKind.MODAL:
            _reject_response_url(compiled, container=state.root_tag)
        element["response_url_enabled"] = True
    return element


def _not_an_input(compiled: CompiledElement, *, container: str) -> InvalidContainerError:
    return InvalidContainerError(
        f"<{compiled.tag}> cannot be used as an input element.",
        container=container,
        tag=compiled.tag,
    )


def _reject_response_url(compiled: CompiledElement, *, container: str) -> None:
    raise InvalidContainerError(
        f'<{compiled.tag}> with "response_url_enabled" prop is only available as an input '
        f"element of <Modal>, but it was used in <{container}>.",
        container=container,
        tag=compiled.tag,
    )


def _log(
    state: CompileState,
    compiled: CompiledElement,
    placement: Placement,
    container: str,
) -> None:
    state.logger.debug(
        "input_capability_resolved",
        tag=compiled.tag,
        element=compiled.payload.get("type"),
        placement=placement.value,
        container=container,
    )


__all__ = [
    "Placement",
    "RootSlot",
    "build_input_block",
    "place_element",
    "reject_input_child",
    "require_input_root",
    "resolve_root_slots",
    "wrap_in_place",
]
