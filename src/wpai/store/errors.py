"""Errors raised by the settings/content store adapters.

Handlers report every store failure as ``upstream_error``; the subclass only
decides the HTTP status.
"""


class StoreError(Exception):
    """Base exception for store failures.

    ``status`` is the HTTP status the failure maps to when surfaced to a caller.
    """

    def __init__(self, message: str, status: int = 500):
        self.status = status
        super().__init__(message)


class NotFoundError(StoreError):
    """Raised when a referenced record does not exist."""

    def __init__(self, message: str, status: int = 404):
        super().__init__(message, status)


class DuplicateError(StoreError):
    """Raised when a unique key (slug, menu name) is already taken."""

    def __init__(self, message: str, status: int = 409):
        super().__init__(message, status)


class DirectoryError(StoreError):
    """Raised when the extension directory cannot resolve or serve a package."""

    def __init__(self, message: str, status: int = 502):
        super().__init__(message, status)
