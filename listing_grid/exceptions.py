"""Grid generation exceptions for consistent error handling."""

from typing import Optional


class GridGenerationError(Exception):
    """Base grid generation error."""
    def __init__(self, message: str, original_exception: Optional[Exception] = None):
        super().__init__(message)
        self.original_exception = original_exception


class InputFileError(GridGenerationError):
    """Raised when an input file is missing or cannot be read."""
    pass


class ParseError(GridGenerationError):
    """Raised when a geometry or tabular document is malformed."""
    pass


class UnsupportedGeometryError(ParseError):
    """Raised when a boundary geometry is neither Polygon nor MultiPolygon."""
    def __init__(self, geometry_type: Optional[str]):
        super().__init__(f"Unsupported geometry type: {geometry_type}")
        self.geometry_type = geometry_type


class ValidationError(GridGenerationError):
    """Raised when a run parameter is invalid."""
    pass
