"""
blockwright config package public API.

File: src/blockwright/config/__init__.py

Purpose
- Export config defaults, validation entrypoints and public error types.

Functional requirements
- ``compile_tree`` overlays a partial config mapping on the defaults and
  validates it here before compiling.
- Fail fast with clear structured validation errors.
"""

from blockwright.config.schema import (
    DEFAULT_CONFIG,
    LOG_FORMATS,
    LOG_LEVELS,
    BlockwrightConfig,
    ConfigSchemaVersion,
    ConfigValidationError,
    ConfigValidationIssue,
    ConfigValidationResult,
    assert_valid_config,
    default_config,
    merge_config,
    migration_guidance,
    validate_config,
)

__all__ = [
    "BlockwrightConfig",
    "ConfigSchemaVersion",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "ConfigValidationResult",
    "DEFAULT_CONFIG",
    "LOG_FORMATS",
    "LOG_LEVELS",
    "assert_valid_config",
    "default_config",
    "merge_config",
    "migration_guidance",
    "validate_config",
]
