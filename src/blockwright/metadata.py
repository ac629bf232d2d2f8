"""Private metadata aggregation for hidden pseudo-inputs of a view root."""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from typing import Any

from blockwright.errors import InvalidPropError

MetadataTransform = Callable[[dict[str, Any] | None], Any]
MetadataSource = str | MetadataTransform | None


class MetadataCollector:
    """Ordered accumulator for ``<Input type="hidden">`` values of one view.

    A disabled collector ignores every value; it is used when the view root
    already carries an explicit metadata string.
    """

    __slots__ = ("_enabled", "_values")

    def __init__(self, *, enabled: bool = True) -> None:
        self._enabled = enabled
        self._values: dict[str, Any] = {}

    @property
    def enabled(self) -> bool:
        return self._enabled

    def add(self, name: str, value: Any) -> None:
        if self._enabled:
            self._values[name] = value

    def values(self) -> dict[str, Any] | None:
        """Return collected values, or ``None`` when nothing was collected."""

        if not self._values:
            return None
        return dict(self._values)


def serialize_private_metadata(
    hidden: Mapping[str, Any] | None,
    source: MetadataSource = None,
) -> Any:
    """Produce the ``private_metadata`` value for a view.

    - An explicit string ``source`` is returned verbatim.
    - A callable ``source`` is invoked exactly once with the collected mapping,
      or ``None`` when there are no hidden values, and its result is returned.
    - Otherwise the mapping is encoded as compact JSON in collection order, and
      ``None`` is returned when nothing was collected.
    """

    if isinstance(source, str):
        return source

    collected = dict(hidden) if hidden else None
    if source is not None:
        if not callable(source):
            raise InvalidPropError(
                f"private_metadata must be a string or callable, got {type(source).__name__}"
            )
        return source(collected)

    if collected is None:
        return None
    return json.dumps(collected, separators=(",", ":"), ensure_ascii=False)


__all__ = [
    "MetadataCollector",
    "MetadataSource",
    "MetadataTransform",
    "serialize_private_metadata",
]
