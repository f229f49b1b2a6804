"""Exceptions raised while building, converting and parsing shapes.

The lenient entry points of :mod:`shapeops` catch :class:`ShapeError`,
log it and return an empty result.  The strict helpers let it through.
"""

from typing import Optional


class ShapeError(Exception):
    """Base exception for shape construction and conversion errors."""
    pass


class MalformedInputError(ShapeError, ValueError):
    """Input data violates a size, count or bounds requirement."""
    pass


class UnsupportedVariantError(ShapeError, TypeError):
    """Operation requested on a shape variant it does not handle."""
    pass


class ShapeParseError(ShapeError, ValueError):
    """Text or JSON input could not be parsed into a shape."""

    def __init__(self, message: str, token: Optional[str] = None):
        self.token = token
        super().__init__(message)


__all__ = [
    "ShapeError",
    "MalformedInputError",
    "UnsupportedVariantError",
    "ShapeParseError",
]
