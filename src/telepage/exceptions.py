class TelepageError(Exception):
    """Base exception for telepage."""
    pass

class DependencyError(TelepageError):
    """Raised when an optional dependency is missing."""
    pass

class TransportError(TelepageError):
    """Raised when the HTTP request fails (network error or bad status)."""

    def __init__(self, message: str, original: Exception = None):
        super().__init__(message)
        self.original = original

class ParseError(TelepageError):
    """Raised when HTML or JSON content cannot be parsed."""
    pass

class ApiError(TelepageError):
    """Raised when Telegraph answers with ok=false."""
    pass

class UploadError(TelepageError):
    """Raised when the upload endpoint rejects a file."""
    pass

class ConversionError(TelepageError):
    """Raised when image compression fails."""
    pass

class ValidationError(TelepageError):
    """Raised when arguments are invalid before any request is made (e.g. missing token, limits exceeded)."""
    pass
