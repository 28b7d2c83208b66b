"""
Custom exceptions for the pixel analysis engine.

Provides a consistent error taxonomy across all components. Absence of a pixel
at a buffer edge is NOT an error: neighbor lookups return None instead.
"""

from typing import Any, Dict, Optional


class PixelBlobException(Exception):
    """Base exception for the pixel analysis engine."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a serializable dictionary."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class InvalidGeometryError(PixelBlobException):
    """Exception raised when buffer dimensions or a rectangle are inconsistent."""

    def __init__(self, reason: str, **details: Any):
        super().__init__(message=f"Invalid geometry: {reason}", details=details)


class EmptyRegionError(PixelBlobException):
    """Exception raised when a computation needs at least one pixel and has none."""

    def __init__(self, operation: str, reason: str):
        super().__init__(
            message=f"Empty region in {operation}: {reason}",
            details={"operation": operation, "reason": reason},
        )


class UnclosedBoundaryError(PixelBlobException):
    """Exception raised when a traced boundary does not close into a loop."""

    def __init__(self, path_length: int, reason: str):
        super().__init__(
            message=f"Boundary did not close after {path_length} pixels: {reason}",
            details={"path_length": path_length, "reason": reason},
        )


class ProcessingError(PixelBlobException):
    """Exception raised when an image processing step or collaborator fails."""

    def __init__(self, operation: str, reason: str):
        super().__init__(
            message=f"Processing failed for {operation}: {reason}",
            details={"operation": operation, "reason": reason},
        )


class ConfigurationError(PixelBlobException):
    """Exception raised when configuration is invalid."""

    def __init__(self, config_key: str, reason: str):
        super().__init__(
            message=f"Invalid configuration for {config_key}: {reason}",
            details={"config_key": config_key, "reason": reason},
        )
