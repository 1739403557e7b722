"""Custom exceptions for the cache facade and its storage backends."""


class CacheError(Exception):
    """Base exception for cache errors."""

    def __init__(self, message: str, backend: str = "unknown") -> None:
        """Initialize error.

        Args:
            message: Error message
            backend: Name of the component that raised the error
        """
        self.backend = backend
        super().__init__(f"[{backend}] {message}")


class InvalidArgumentError(CacheError, ValueError):
    """Raised when a caller passes a malformed key or TTL."""

    def __init__(self, message: str) -> None:
        super().__init__(message, backend="cache")


class StorageError(CacheError):
    """Raised when a storage backend fails to reach or decode its medium."""

    def __init__(
        self,
        message: str,
        backend: str = "unknown",
        code: str | None = None,
    ) -> None:
        """Initialize error.

        Args:
            message: Error message
            backend: Backend name
            code: Backend-specific result code, when the medium reports one
        """
        self.code = code
        super().__init__(message, backend=backend)
