"""
Error hierarchy shared by the context, encoder and filter builders.
"""

from __future__ import annotations


class SpatialError(Exception):
    """Base error for spatial context operations."""


class ConfigurationError(SpatialError):
    """Unresolvable unit, calculator, factory or operation name, or bad world bounds."""


class ShapeParseError(SpatialError):
    """A shape literal could not be parsed."""


class EncodingTooLargeError(SpatialError):
    """
    Geometry could not be simplified below the configured byte budget.

    Attributes:
        length: WKB length of the last attempt
        max_bytes: the budget that was not met
    """

    def __init__(self, length: int, max_bytes: int, reason: str | None = None) -> None:
        self.length = length
        self.max_bytes = max_bytes
        msg = f"Can not simplify geometry smaller than max {max_bytes} bytes (last={length})"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class UnsupportedOperationError(SpatialError, NotImplementedError):
    """The requested capability is intentionally not implemented."""
