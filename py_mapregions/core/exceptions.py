"""Errors raised by the partitioning engine."""


class GeometryInputError(ValueError):
    """Raised for invalid numeric input such as non-finite coordinates."""


class OutlineFormatError(ValueError):
    """Raised when geographic boundary data cannot be parsed into polygons."""
