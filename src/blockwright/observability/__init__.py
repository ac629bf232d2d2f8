"""Public observability primitives: structlog setup for compiler events."""

from blockwright.observability.logging import setup_logging

__all__ = ["setup_logging"]
