"""Fixed Block Kit schema limits shared across transformers."""

from __future__ import annotations

from typing import Final

# Schema versions for persisted contracts.
CONFIG_SCHEMA_VERSION: Final[int] = 1

# Document-level block counts.
MAX_MESSAGE_BLOCKS: Final[int] = 50
MAX_VIEW_BLOCKS: Final[int] = 100

# Block-level element counts.
MAX_CONTEXT_ELEMENTS: Final[int] = 10
MAX_ACTIONS_ELEMENTS: Final[int] = 25
MAX_SECTION_FIELDS: Final[int] = 10
MAX_SECTION_ACCESSORIES: Final[int] = 1
MAX_SELECT_OPTIONS: Final[int] = 100
MAX_GROUP_OPTIONS: Final[int] = 10

# Text lengths.
MAX_SECTION_TEXT_LENGTH: Final[int] = 3000
MAX_HEADER_TEXT_LENGTH: Final[int] = 150
MAX_VIEW_TITLE_LENGTH: Final[int] = 24

ZERO_WIDTH_SPACE: Final[str] = "\u200b"

__all__ = [
    "CONFIG_SCHEMA_VERSION",
    "MAX_ACTIONS_ELEMENTS",
    "MAX_CONTEXT_ELEMENTS",
    "MAX_GROUP_OPTIONS",
    "MAX_HEADER_TEXT_LENGTH",
    "MAX_MESSAGE_BLOCKS",
    "MAX_SECTION_ACCESSORIES",
    "MAX_SECTION_FIELDS",
    "MAX_SECTION_TEXT_LENGTH",
    "MAX_SELECT_OPTIONS",
    "MAX_VIEW_BLOCKS",
    "MAX_VIEW_TITLE_LENGTH",
    "ZERO_WIDTH_SPACE",
]
