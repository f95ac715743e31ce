"""Exceptions raised by the generator.

Only fatal conditions are exceptions. Resolution gaps (unknown refs, odd
schemas) are logged and degrade to open types instead.
"""

from __future__ import annotations


class CodegenError(Exception):
    """Base class for every fatal generator error."""


class SpecLoadError(CodegenError):
    """The specification document could not be read, fetched or parsed."""


class ConfigError(CodegenError):
    """The configuration file or merged configuration is invalid."""


class SchemaDepthError(CodegenError):
    """Inline schema nesting exceeded the resolver's depth limit."""

    def __init__(self, origin: str, max_depth: int) -> None:
        super().__init__(
            f"Schema nesting deeper than {max_depth} levels at {origin or '<root>'}"
        )
        self.origin = origin
        self.max_depth = max_depth
