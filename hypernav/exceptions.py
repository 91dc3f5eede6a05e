"""
Exception classes for hypernav.

The geometric core never raises on finite, non-degenerate input: degenerate
normalizations produce NaN/Inf and are documented preconditions. The classes
below cover the seams around the core: malformed inputs at construction
time, configuration loading, and the optional invariant checks.
"""

import json
from typing import Optional, Dict
from pathlib import Path


class HyperNavError(Exception):
    """Base exception for all hypernav errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class ConfigurationError(HyperNavError):
    """Raised when there's an error in configuration."""
    pass


class ConfigFileNotFoundError(ConfigurationError):
    """Raised when a configuration file does not exist."""

    def __init__(self, file_path: Path, message: Optional[str] = None):
        self.file_path = file_path
        if message is None:
            message = f"Configuration file not found: {file_path}"
        super().__init__(message, {"file_path": str(file_path)})


class InvalidInputError(HyperNavError):
    """Raised when an input has the wrong shape, type or name."""
    pass


class InvariantViolationError(HyperNavError):
    """Raised in strict mode when a frame drifts past the configured tolerance."""

    def __init__(self, message: str, residuals: Optional[Dict[str, float]] = None):
        self.residuals = dict(residuals or {})
        worst = max(self.residuals.items(), key=lambda item: item[1]) if self.residuals else None
        details = {"worst": f"{worst[0]}={worst[1]:.3e}"} if worst else None
        super().__init__(message, details)


def handle_error(error: Exception, context: str = "") -> HyperNavError:
    """
    Convert generic exceptions to hypernav exceptions.

    Args:
        error: The original exception
        context: Additional context about where the error occurred

    Returns:
        An appropriate HyperNavError subclass
    """
    if isinstance(error, HyperNavError):
        return error

    error_type = type(error).__name__
    message = f"{context}: {error_type}: {str(error)}" if context else f"{error_type}: {str(error)}"

    # JSONDecodeError is a ValueError, so it has to be matched first
    if isinstance(error, json.JSONDecodeError):
        return ConfigurationError(message)
    elif isinstance(error, FileNotFoundError):
        return ConfigFileNotFoundError(Path(error.filename or str(error)), message)
    elif isinstance(error, (ValueError, TypeError)):
        return InvalidInputError(message)
    elif isinstance(error, OSError):
        return ConfigurationError(message)
    else:
        return HyperNavError(message)


class ErrorHandler:
    """Context manager for handling errors in a consistent way."""

    def __init__(self, context: str, reraise: bool = True):
        self.context = context
        self.reraise = reraise
        self.error: Optional[Exception] = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            self.error = handle_error(exc_val, self.context)
            if self.reraise:
                raise self.error from exc_val
            return True  # Suppress the exception
        return False

    def has_error(self) -> bool:
        """Check if an error occurred."""
        return self.error is not None
