"""Diagnostics raised while compiling a component tree."""

from __future__ import annotations


class BlockKitError(ValueError):
    """Base class for every compile-time diagnostic."""


class StructuralLimitError(BlockKitError):
    """Raised when a block-kind-specific cardinality or length rule is violated."""

    def __init__(self, message: str, *, actual: int, limit: int) -> None:
        self.actual = actual
        self.limit = limit
        super().__init__(message)


LimitExceededError = StructuralLimitError


class InvalidContainerError(BlockKitError):
    """Raised when an element is placed in a block kind that cannot host it."""

    def __init__(self, message: str, *, container: str, tag: str | None = None) -> None:
        self.container = container
        self.tag = tag
        super().__init__(message)


class MissingRequiredPropError(BlockKitError):
    """Raised when a component lacks a prop the schema requires."""

    def __init__(self, message: str, *, tag: str, prop: str) -> None:
        self.tag = tag
        self.prop = prop
        super().__init__(message)


class DuplicateBlockIdError(BlockKitError):
    """Raised when two blocks of one document share a ``block_id``."""

    def __init__(self, block_id: str) -> None:
        self.block_id = block_id
        super().__init__(f"block_id {block_id!r} is used by more than one block in the document")


class InvalidPropError(BlockKitError):
    """Raised for malformed prop values."""


__all__ = [
    "BlockKitError",
    "DuplicateBlockIdError",
    "InvalidContainerError",
    "InvalidPropError",
    "LimitExceededError",
    "MissingRequiredPropError",
    "StructuralLimitError",
]
