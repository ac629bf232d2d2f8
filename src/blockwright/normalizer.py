"""Child normalization: flatten, drop empties, expand components, coalesce text runs."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from blockwright.errors import InvalidPropError
from blockwright.nodes import INLINE_KINDS, Node, render_component

TextPart = str | Node


@dataclass(frozen=True, slots=True)
class TextRun:
    """Consecutive text-like children: strings and inline formatting nodes."""

    parts: tuple[TextPart, ...]

    @property
    def is_blank(self) -> bool:
        return all(isinstance(part, str) and not part.strip() for part in self.parts)


@dataclass(frozen=True, slots=True)
class Element:
    """A non-inline built-in node."""

    node: Node


@dataclass(frozen=True, slots=True)
class RawElement:
    """A mapping emitted as-is; only its ``type`` field is known to the compiler."""

    payload: Mapping[str, Any]

    @property
    def type(self) -> object:
        return self.payload.get("type")


NormalizedChild = TextRun | Element | RawElement


def normalize_children(children: object) -> tuple[NormalizedChild, ...]:
    """Flatten ``children`` into text runs and elements in document order.

    Re-applying the function to its own output returns an equal tuple.
    """

    normalized: list[NormalizedChild] = []
    pending: list[TextPart] = []

    def flush() -> None:
        if pending:
            normalized.append(TextRun(tuple(pending)))
            pending.clear()

    for item in _flatten(children):
        if isinstance(item, str):
            _push_text(pending, item)
        elif isinstance(item, Node):
            if item.kind in INLINE_KINDS:
                pending.append(item)
            else:
                flush()
                normalized.append(Element(item))
        else:
            flush()
            normalized.append(RawElement(dict(item)))

    flush()
    return tuple(normalized)


def _flatten(value: object) -> Iterator[str | Node | Mapping[str, Any]]:
    if value is None or isinstance(value, bool):
        return
    if isinstance(value, str):
        if value:
            yield value
        return
    if isinstance(value, (int, float)):
        yield str(value)
        return
    if isinstance(value, TextRun):
        for part in value.parts:
            yield from _flatten(part)
        return
    if isinstance(value, Element):
        yield value.node
        return
    if isinstance(value, RawElement):
        yield value.payload
        return
    if isinstance(value, Node):
        if value.is_component:
            yield from _flatten(render_component(value))
        else:
            yield value
        return
    if isinstance(value, Mapping):
        yield value
        return
    if isinstance(value, Iterable) and not isinstance(value, (bytes, bytearray)):
        for item in value:
            yield from _flatten(item)
        return
    raise InvalidPropError(f"unsupported child of type {type(value).__name__}")


def _push_text(pending: list[TextPart], text: str) -> None:
    if pending and isinstance(pending[-1], str):
        pending[-1] = pending[-1] + text
    else:
        pending.append(text)


__all__ = [
    "Element",
    "NormalizedChild",
    "RawElement",
    "TextPart",
    "TextRun",
    "normalize_children",
]
