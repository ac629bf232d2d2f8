"""Text run formatting into Slack mrkdwn and plain-text composition objects.

Escaping is applied exactly once, to raw string fragments, while a run is
rendered. ``escape`` is intentionally not idempotent: feeding it an escaped
string escapes the entities again.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Final

from blockwright.constants import ZERO_WIDTH_SPACE
from blockwright.errors import InvalidContainerError
from blockwright.nodes import NodeKind
from blockwright.normalizer import Element, RawElement, TextPart, TextRun, normalize_children

_ESCAPES: Final[tuple[tuple[str, str], ...]] = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
)

_MARKERS: Final[dict[NodeKind, str]] = {
    NodeKind.BOLD: "*",
    NodeKind.ITALIC: "_",
    NodeKind.STRIKE: "~",
    NodeKind.CODE: "`",
}


def escape(text: str) -> str:
    for raw, entity in _ESCAPES:
        text = text.replace(raw, entity)
    return text


def format_run(run: TextRun | Iterable[TextPart], *, exact_mode: bool = False) -> str:
    """Render a text run as an escaped mrkdwn string."""

    parts = run.parts if isinstance(run, TextRun) else tuple(run)
    return "".join(_format_part(part, exact_mode) for part in parts)


def format_children(children: object, *, exact_mode: bool = False, container: str) -> str:
    """Normalize arbitrary children that may only hold text and render them."""

    return "".join(
        format_run(run, exact_mode=exact_mode) for run in _text_runs(children, container)
    )


def plain_text(run: TextRun | Iterable[TextPart]) -> str:
    """Return the unformatted text content of a run."""

    parts = run.parts if isinstance(run, TextRun) else tuple(run)
    return "".join(_plain_part(part) for part in parts)


def plain_children(children: object, *, container: str) -> str:
    return "".join(plain_text(run) for run in _text_runs(children, container))


def coerce_plain(value: object, *, container: str) -> str | None:
    """Turn a text-valued prop (string, number or child nodes) into plain text."""

    if value is None:
        return None
    if isinstance(value, str):
        return value
    return plain_children(value, container=container)


def plain_text_object(text: str, *, emoji: bool = True) -> dict[str, Any]:
    return {"type": "plain_text", "text": text, "emoji": emoji}


def mrkdwn_object(text: str, *, verbatim: bool | None = False) -> dict[str, Any]:
    payload: dict[str, Any] = {"type": "mrkdwn", "text": text}
    if verbatim is not None:
        payload["verbatim"] = verbatim
    return payload


def _format_part(part: TextPart, exact_mode: bool) -> str:
    if isinstance(part, str):
        return escape(part)

    kind = part.kind
    if kind is NodeKind.LINE_BREAK:
        return "\n"

    inner = format_children(part.children, exact_mode=exact_mode, container=part.tag)
    if kind is NodeKind.LINK:
        href = part.prop("href")
        if href is None:
            return inner
        target = escape(str(href))
        return f"<{target}|{inner}>" if inner else f"<{target}>"

    marker = _MARKERS[kind]  # type: ignore[index]
    if not inner:
        return ""
    if exact_mode:
        return f"{ZERO_WIDTH_SPACE}{marker}{inner}{marker}{ZERO_WIDTH_SPACE}"
    return f"{marker}{inner}{marker}"


def _plain_part(part: TextPart) -> str:
    if isinstance(part, str):
        return part
    if part.kind is NodeKind.LINE_BREAK:
        return "\n"
    return plain_children(part.children, container=part.tag)


def _text_runs(children: object, container: str) -> list[TextRun]:
    runs: list[TextRun] = []
    for child in normalize_children(children):
        if isinstance(child, TextRun):
            runs.append(child)
        elif isinstance(child, Element):
            raise InvalidContainerError(
                f"<{container}> can only include text, but found <{child.node.tag}>.",
                container=container,
                tag=child.node.tag,
            )
        elif isinstance(child, RawElement):
            raise InvalidContainerError(
                f"<{container}> can only include text, but found an element for "
                f"{child.type!r} type.",
                container=container,
            )
    return runs


__all__ = [
    "coerce_plain",
    "escape",
    "format_children",
    "format_run",
    "mrkdwn_object",
    "plain_children",
    "plain_text",
    "plain_text_object",
]
