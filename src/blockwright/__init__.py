"""
blockwright — Block Kit compiler for component trees.

File: src/blockwright/__init__.py

Purpose
- Package root. Compiles a declarative component tree (``Node`` values built
  by any markup front end) into Slack Block Kit JSON: a flat block list, a
  modal view or a home tab view.

What should be included in this file
- Minimal public API surface: ``compile_tree``, the node model and the
  diagnostic taxonomy.

Functional requirements
- Must not have side effects at import time (no config loading, no logging init).
"""

from blockwright.assembler import Document, compile_tree
from blockwright.errors import (
    BlockKitError,
    DuplicateBlockIdError,
    InvalidContainerError,
    InvalidPropError,
    LimitExceededError,
    MissingRequiredPropError,
    StructuralLimitError,
)
from blockwright.nodes import Node, NodeKind, h

__version__ = "0.1.0"

__all__ = [
    "BlockKitError",
    "Document",
    "DuplicateBlockIdError",
    "InvalidContainerError",
    "InvalidPropError",
    "LimitExceededError",
    "MissingRequiredPropError",
    "Node",
    "NodeKind",
    "StructuralLimitError",
    "__version__",
    "compile_tree",
    "h",
]
