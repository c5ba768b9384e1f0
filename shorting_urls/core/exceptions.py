"""
Custom Exceptions

This module defines the error taxonomy of the service. The API layer maps
each type to an HTTP status code and a client-facing message; the message
passed to the exception itself is meant for logs.
"""

from typing import Optional


class URLShortenerException(Exception):
    """Base exception for URL shortener service."""
    pass


class InvalidURLError(URLShortenerException):
    """Raised when URL validation fails."""

    def __init__(self, url: str, reason: str = "Invalid URL format"):
        self.url = url
        self.reason = reason
        super().__init__(f"{reason}: {url}")


class InvalidShortCodeError(URLShortenerException):
    """Raised when a caller-supplied short code cannot be used as a path segment."""

    def __init__(self, short_code: str, reason: str = "Invalid short code format"):
        self.short_code = short_code
        self.reason = reason
        super().__init__(f"{reason}: '{short_code}'")


class DuplicateCodeError(URLShortenerException):
    """Raised when a requested custom code is already taken."""

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(f"Custom code '{short_code}' already exists")


class GenerationExhaustedError(URLShortenerException):
    """Raised when every generated candidate collided with an existing code."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Failed to generate unique short code after {attempts} attempts")


class ShortCodeNotFoundError(URLShortenerException):
    """Raised when a short code is not found in the database."""

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(f"Short code '{short_code}' not found")


class ShortCodeConflictError(URLShortenerException):
    """Raised by the store when an insert violates the short code unique constraint."""

    def __init__(self, short_code: str, original_error: Optional[Exception] = None):
        self.short_code = short_code
        self.original_error = original_error
        super().__init__(f"Short code '{short_code}' is already stored")


class DatabaseError(URLShortenerException):
    """Raised when database operations fail."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.original_error = original_error
        super().__init__(f"Database error: {message}")
