"""Per-compile state threaded through every transformer call."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import structlog

from blockwright.metadata import MetadataCollector
from blockwright.nodes import TAG_NAMES, NodeKind


@dataclass(slots=True)
class CompileState:
    root: NodeKind
    exact_mode: bool = False
    metadata: MetadataCollector = field(default_factory=MetadataCollector)
    submit_label: str | None = None
    logger: Any = None

    def __post_init__(self) -> None:
        if self.logger is None:
            self.logger = structlog.get_logger(__name__)

    @property
    def root_tag(self) -> str:
        return TAG_NAMES[self.root]

    @property
    def accepts_input_blocks(self) -> bool:
        return self.root in (NodeKind.MODAL, NodeKind.HOME)


__all__ = ["CompileState"]
