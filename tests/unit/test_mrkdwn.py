"""
blockwright — unit tests for text run formatting

File: tests/unit/test_mrkdwn.py

Purpose
- Validate mrkdwn rendering of text runs and composition-object helpers.

What this test file should cover
- Escaping of ``&``, ``<`` and ``>`` applied exactly once.
- Inline formatting markers, links, and line breaks.
- Exact mode wrapping markers in zero-width spaces.
- Plain-text extraction and text-only container checks.
"""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from blockwright.constants import ZERO_WIDTH_SPACE
from blockwright.errors import InvalidContainerError
from blockwright.mrkdwn import (
    coerce_plain,
    escape,
    format_children,
    format_run,
    mrkdwn_object,
    plain_children,
    plain_text_object,
)
from blockwright.nodes import NodeKind, h
from blockwright.normalizer import TextRun


@pytest.mark.unit
def test_escape_replaces_control_characters() -> None:
    assert escape("a & b <c> d") == "a &amp; b &lt;c&gt; d"


@pytest.mark.unit
def test_escape_is_not_idempotent() -> None:
    assert escape(escape("&")) == "&amp;amp;"


@pytest.mark.unit
def test_formatted_text_is_escaped_exactly_once() -> None:
    rendered = format_children(
        ["1 < 2 & ", h(NodeKind.BOLD, None, "3 > 2")], container="Section"
    )

    assert rendered == "1 &lt; 2 &amp; *3 &gt; 2*"


@pytest.mark.unit
def test_inline_markers() -> None:
    run = TextRun(
        (
            h(NodeKind.BOLD, None, "b"),
            h(NodeKind.ITALIC, None, "i"),
            h(NodeKind.STRIKE, None, "s"),
            h(NodeKind.CODE, None, "c"),
            h(NodeKind.LINE_BREAK),
            h(NodeKind.LINK, {"href": "https://example.com/?a=1&b=2"}, "link"),
        )
    )

    assert format_run(run) == "*b*_i_~s~`c`\n<https://example.com/?a=1&amp;b=2|link>"


@pytest.mark.unit
def test_nested_markers_and_empty_markers() -> None:
    rendered = format_children(
        [h(NodeKind.BOLD, None, h(NodeKind.ITALIC, None, "both")), h(NodeKind.BOLD)],
        container="Section",
    )

    assert rendered == "*_both_*"


@pytest.mark.unit
def test_link_without_text_renders_bare_url() -> None:
    assert format_children(h(NodeKind.LINK, {"href": "https://a.b"}), container="Section") == (
        "<https://a.b>"
    )


@pytest.mark.unit
def test_exact_mode_wraps_markers_in_zero_width_spaces() -> None:
    rendered = format_children(
        ["in", h(NodeKind.BOLD, None, "word"), "s"], exact_mode=True, container="Section"
    )

    assert rendered == f"in{ZERO_WIDTH_SPACE}*word*{ZERO_WIDTH_SPACE}s"


@pytest.mark.unit
def test_emoji_and_surrogate_pairs_pass_through() -> None:
    assert format_children(["🎉 ok :tada: 𝒜"], container="Section") == "🎉 ok :tada: 𝒜"


@pytest.mark.unit
def test_plain_children_drops_formatting() -> None:
    text = plain_children(
        ["a ", h(NodeKind.BOLD, None, "b"), h(NodeKind.LINE_BREAK), "<c>"], container="Header"
    )

    assert text == "a b\n<c>"


@pytest.mark.unit
def test_block_elements_inside_text_only_containers_are_rejected() -> None:
    with pytest.raises(InvalidContainerError, match="<Bold> can only include text"):
        format_children(h(NodeKind.BOLD, None, h(NodeKind.DIVIDER)), container="Section")


@pytest.mark.unit
def test_coerce_plain_accepts_strings_and_nodes() -> None:
    assert coerce_plain(None, container="Modal") is None
    assert coerce_plain("Title", container="Modal") == "Title"
    assert coerce_plain(["A", h(NodeKind.ITALIC, None, "B")], container="Modal") == "AB"


@pytest.mark.unit
def test_composition_objects() -> None:
    assert plain_text_object("x") == {"type": "plain_text", "text": "x", "emoji": True}
    assert plain_text_object("x", emoji=False)["emoji"] is False
    assert mrkdwn_object("x") == {"type": "mrkdwn", "text": "x", "verbatim": False}
    assert mrkdwn_object("x", verbatim=None) == {"type": "mrkdwn", "text": "x"}


@pytest.mark.unit
@given(text=st.text())
def test_unformatted_text_is_escaped_once(text: str) -> None:
    assert format_run(TextRun((text,))) == escape(text)
