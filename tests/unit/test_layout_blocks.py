"""
blockwright — unit tests for layout block transformers

File: tests/unit/test_layout_blocks.py

Purpose
- Validate Section, Actions, Divider, Image and Header transformers.

What this test file should cover
- Section text/fields/accessory assembly and their limits.
- Actions element list and limit.
- Required props for Image and Header.
- Labelled elements rejected inside non-input blocks.
"""

from __future__ import annotations

import pytest

from blockwright import compile_tree
from blockwright.errors import (
    InvalidContainerError,
    InvalidPropError,
    MissingRequiredPropError,
    StructuralLimitError,
)
from blockwright.nodes import NodeKind, h


def _blocks(*children: object) -> list[dict[str, object]]:
    result = compile_tree(h(NodeKind.BLOCKS, None, *children))
    assert isinstance(result, list)
    return result


def _button(text: str = "Click", **props: object) -> object:
    return h(NodeKind.BUTTON, props, text)


@pytest.mark.unit
def test_section_with_text_fields_and_accessory() -> None:
    [block] = _blocks(
        h(
            NodeKind.SECTION,
            {"id": "summary"},
            "Hello ",
            h(NodeKind.BOLD, None, "team"),
            h(NodeKind.FIELD, None, "*A* & B"),
            h(NodeKind.FIELD, None, h(NodeKind.CODE, None, "x")),
            _button(action_id="go", style="primary"),
        )
    )

    assert block == {
        "type": "section",
        "block_id": "summary",
        "text": {"type": "mrkdwn", "text": "Hello *team*", "verbatim": False},
        "fields": [
            {"type": "mrkdwn", "text": "*A* &amp; B", "verbatim": False},
            {"type": "mrkdwn", "text": "`x`", "verbatim": False},
        ],
        "accessory": {
            "type": "button",
            "text": {"type": "plain_text", "text": "Click", "emoji": True},
            "action_id": "go",
            "style": "primary",
        },
    }


@pytest.mark.unit
def test_section_image_accessory() -> None:
    [block] = _blocks(
        h(NodeKind.SECTION, None, "With image", h(NodeKind.IMAGE, {"src": "s.png", "alt": "s"}))
    )

    assert block["accessory"] == {"type": "image", "image_url": "s.png", "alt_text": "s"}


@pytest.mark.unit
def test_section_requires_text_or_fields() -> None:
    with pytest.raises(MissingRequiredPropError, match="requires text content or <Field>"):
        _blocks(h(NodeKind.SECTION, None, "   ", _button()))


@pytest.mark.unit
def test_section_allows_only_one_accessory() -> None:
    with pytest.raises(StructuralLimitError) as excinfo:
        _blocks(h(NodeKind.SECTION, None, "text", _button("a"), _button("b")))

    assert (excinfo.value.actual, excinfo.value.limit) == (2, 1)


@pytest.mark.unit
def test_section_field_limit() -> None:
    fields = [h(NodeKind.FIELD, None, str(index)) for index in range(11)]

    with pytest.raises(StructuralLimitError, match=r"fields in <Section> is 11"):
        _blocks(h(NodeKind.SECTION, None, *fields))


@pytest.mark.unit
def test_section_text_length_limit() -> None:
    _blocks(h(NodeKind.SECTION, None, "x" * 3000))

    with pytest.raises(StructuralLimitError, match=r"has 3001 characters"):
        _blocks(h(NodeKind.SECTION, None, "x" * 3001))


@pytest.mark.unit
def test_labelled_element_inside_section_is_rejected() -> None:
    select = h(NodeKind.SELECT, {"label": "Pick"}, h(NodeKind.OPTION, {"value": "a"}, "A"))

    with pytest.raises(InvalidContainerError) as excinfo:
        _blocks(h(NodeKind.SECTION, None, "text", select))

    assert 'Please remove "label" prop from <Select label="...">' in str(excinfo.value)


@pytest.mark.unit
def test_actions_collects_interactive_elements() -> None:
    [block] = _blocks(
        h(
            NodeKind.ACTIONS,
            {"block_id": "acts"},
            _button("One", action_id="one"),
            "\n  ",
            h(NodeKind.DATE_PICKER, {"action_id": "when", "value": "2024-02-29"}),
        )
    )

    assert block == {
        "type": "actions",
        "block_id": "acts",
        "elements": [
            {
                "type": "button",
                "text": {"type": "plain_text", "text": "One", "emoji": True},
                "action_id": "one",
            },
            {"type": "datepicker", "action_id": "when", "initial_date": "2024-02-29"},
        ],
    }


@pytest.mark.unit
def test_actions_rejects_text_and_images() -> None:
    with pytest.raises(InvalidContainerError, match="<Actions> cannot include text"):
        _blocks(h(NodeKind.ACTIONS, None, "words"))
    with pytest.raises(InvalidContainerError, match="<Actions> cannot include <Image>"):
        _blocks(h(NodeKind.ACTIONS, None, h(NodeKind.IMAGE, {"src": "a", "alt": "b"})))


@pytest.mark.unit
def test_actions_element_limit() -> None:
    _blocks(h(NodeKind.ACTIONS, None, *[_button(str(index)) for index in range(25)]))

    with pytest.raises(StructuralLimitError, match=r"elements in <Actions> is 26"):
        _blocks(h(NodeKind.ACTIONS, None, *[_button(str(index)) for index in range(26)]))


@pytest.mark.unit
def test_button_style_is_validated() -> None:
    with pytest.raises(InvalidPropError, match="style must be one of: danger, primary"):
        _blocks(h(NodeKind.ACTIONS, None, _button(style="loud")))


@pytest.mark.unit
def test_divider_image_and_header() -> None:
    blocks = _blocks(
        h(NodeKind.DIVIDER, {"id": "d"}),
        h(NodeKind.IMAGE, {"src": "https://a/b.png", "alt": "B", "title": "Title"}),
        h(NodeKind.HEADER, None, "Heads ", h(NodeKind.BOLD, None, "up"), " & on"),
    )

    assert blocks == [
        {"type": "divider", "block_id": "d"},
        {
            "type": "image",
            "image_url": "https://a/b.png",
            "alt_text": "B",
            "title": {"type": "plain_text", "text": "Title", "emoji": True},
        },
        {
            "type": "header",
            "text": {"type": "plain_text", "text": "Heads up & on", "emoji": True},
        },
    ]


@pytest.mark.unit
def test_image_requires_src_and_alt() -> None:
    with pytest.raises(MissingRequiredPropError, match='"src" prop'):
        _blocks(h(NodeKind.IMAGE, {"alt": "x"}))
    with pytest.raises(MissingRequiredPropError, match='"alt" prop'):
        _blocks(h(NodeKind.IMAGE, {"src": "x"}))


@pytest.mark.unit
def test_header_limits() -> None:
    with pytest.raises(MissingRequiredPropError):
        _blocks(h(NodeKind.HEADER))
    with pytest.raises(StructuralLimitError, match=r"has 151 characters"):
        _blocks(h(NodeKind.HEADER, None, "h" * 151))
