"""
Custom Exceptions.

Errors raised by the note store and service. Each carries a stable
``code`` that the exception handlers copy into the error envelope.
"""

from pathlib import Path


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    """Raised when a note or checklist item does not exist."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class ValidationError(ApplicationError):
    """
    Raised when a note payload is rejected.

    ``errors`` holds one readable message per rejected field and ``fields``
    the matching wire names (``title``, ``fontSize``, ...), in payload order.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        errors: list[str] | None = None,
        fields: list[str] | None = None,
    ) -> None:
        self.errors = list(errors or [])
        self.fields = list(fields or [])
        super().__init__(message, code="VAL_VALIDATION_ERROR")


class PersistenceError(ApplicationError):
    """
    Raised when the notes file cannot be read, parsed or written.

    ``path`` is kept for logs only; the message shown to clients names the
    file but not its location.
    """

    def __init__(self, message: str = "Persistence error", path: Path | None = None) -> None:
        self.path = path
        super().__init__(message, code="SYS_PERSISTENCE_ERROR")
