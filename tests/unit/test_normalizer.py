"""
blockwright — unit tests for child normalization

File: tests/unit/test_normalizer.py

Purpose
- Validate flattening, text coalescing, and component expansion.

What this test file should cover
- Nested sequences flatten in document order.
- ``None``/booleans/empty strings are dropped; numbers are stringified.
- Strings and inline nodes coalesce into one text run.
- Mappings become raw elements.
- Idempotence on arbitrary child trees (property-based).
"""

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from blockwright.errors import InvalidPropError
from blockwright.nodes import Node, NodeKind, h
from blockwright.normalizer import Element, RawElement, TextRun, normalize_children


@pytest.mark.unit
def test_nested_sequences_flatten_in_order() -> None:
    divider = h(NodeKind.DIVIDER)
    image = h(NodeKind.IMAGE, {"src": "a.png", "alt": "a"})

    result = normalize_children([["a", ("b", None)], divider, (x for x in ["c"]), image])

    assert result == (TextRun(("ab",)), Element(divider), TextRun(("c",)), Element(image))


@pytest.mark.unit
def test_empty_values_are_dropped_and_numbers_stringified() -> None:
    result = normalize_children([None, True, False, "", 1, " ", 2.5])

    assert result == (TextRun(("1 2.5",)),)


@pytest.mark.unit
def test_inline_nodes_join_the_surrounding_run() -> None:
    bold = h(NodeKind.BOLD, None, "x")
    link = h(NodeKind.LINK, {"href": "https://example.com"}, "y")

    result = normalize_children(["a ", bold, " b", link])

    assert result == (TextRun(("a ", bold, " b", link)),)


@pytest.mark.unit
def test_mappings_become_raw_elements() -> None:
    raw = {"type": "mrkdwn", "text": "*raw*"}

    result = normalize_children(["before", raw])

    assert result == (TextRun(("before",)), RawElement(raw))
    assert result[1].type == "mrkdwn"


@pytest.mark.unit
def test_components_are_expanded_in_place() -> None:
    def Pair(*, children: tuple[object, ...]) -> list[object]:
        return ["left", h(NodeKind.DIVIDER), *children]

    result = normalize_children(["start ", h(Pair, None, "right")])

    assert result == (
        TextRun(("start left",)),
        Element(h(NodeKind.DIVIDER)),
        TextRun(("right",)),
    )


@pytest.mark.unit
def test_component_returning_none_renders_nothing() -> None:
    def Nothing(*, children: tuple[object, ...]) -> None:
        return None

    assert normalize_children([h(Nothing), "text"]) == (TextRun(("text",)),)


@pytest.mark.unit
def test_unsupported_child_type_is_rejected() -> None:
    with pytest.raises(InvalidPropError, match="unsupported child of type object"):
        normalize_children([object()])


@pytest.mark.unit
@pytest.mark.parametrize("raw", [b"ab", bytearray(b"ab")], ids=["bytes", "bytearray"])
def test_binary_children_are_rejected(raw: bytes | bytearray) -> None:
    with pytest.raises(InvalidPropError, match=f"unsupported child of type {type(raw).__name__}"):
        normalize_children(["text", raw])


_leaf = st.one_of(
    st.none(),
    st.booleans(),
    st.integers(min_value=-1000, max_value=1000),
    st.text(max_size=5),
    st.just(h(NodeKind.DIVIDER)),
    st.just(h(NodeKind.BOLD, None, "b")),
    st.just(h(NodeKind.LINE_BREAK)),
    st.just({"type": "mrkdwn", "text": "raw"}),
)
_children = st.recursive(_leaf, lambda inner: st.lists(inner, max_size=4), max_leaves=20)


@pytest.mark.unit
@settings(max_examples=150, deadline=None)
@given(children=_children)
def test_normalize_is_idempotent(children: object) -> None:
    once = normalize_children(children)

    assert normalize_children(once) == once


@pytest.mark.unit
@settings(max_examples=150, deadline=None)
@given(children=_children)
def test_runs_never_hold_adjacent_strings_or_empty_parts(children: object) -> None:
    for child in normalize_children(children):
        if not isinstance(child, TextRun):
            continue
        assert child.parts
        for left, right in zip(child.parts, child.parts[1:], strict=False):
            assert not (isinstance(left, str) and isinstance(right, str))
        assert all(part != "" for part in child.parts)
        assert all(isinstance(part, (str, Node)) for part in child.parts)
