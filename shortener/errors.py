"""
Error classes for the URL shortener core.

Every error carries a default message and the HTTP status code the web
layer answers with when the error reaches a request handler.
"""

from typing import Optional, Dict, Any


class ShortenerError(Exception):
    """
    Base error class.
    
    Attributes:
        status_code: HTTP status code (default: 500)
        message: Error message (default: "Internal server error")
        details: Optional additional error details
    """
    status_code: int = 500
    message: str = "Internal server error"
    
    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        """
        Initialize error.
        
        Args:
            message: Error message (overrides default)
            details: Optional additional error details
        """
        self.message = message or self.message
        self.details = details or {}
        super().__init__(self.message)


class URLValidationError(ShortenerError, ValueError):
    """Submitted URL is malformed, schemeless or hostless."""
    status_code = 400
    message = "Invalid URL"


class NotFoundError(ShortenerError):
    """Short code (or long URL) has no mapping."""
    status_code = 404
    message = "Not found"


class DuplicateKeyError(ShortenerError):
    """Short code already exists in the store."""
    status_code = 409
    message = "Short code already exists"


class StorageError(ShortenerError):
    """Backend unavailable or I/O failure."""
    status_code = 500
    message = "Storage error"


class CodeGenerationError(ShortenerError):
    """Random source failed or no free short code was found."""
    status_code = 500
    message = "Unable to generate short code"


class StartupError(ShortenerError):
    """Storage backend could not be opened at launch."""
    status_code = 500
    message = "Storage backend unavailable at startup"
