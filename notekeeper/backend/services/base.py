"""
Base Service.

Base class for all services providing common patterns for business logic.
Services orchestrate repositories, validate input, and implement
business rules.

Usage:
    from notekeeper.backend.services.base import BaseService

    class NoteService(BaseService):
        field_messages = FIELD_ERROR_MESSAGES

        def __init__(self, repo: NoteRepository) -> None:
            super().__init__(repo)

        async def create_note(self, payload: dict) -> Note:
            data = self._parse_payload(NoteCreate, payload)
            ...
"""

from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from notekeeper.backend.core.exceptions import ValidationError
from notekeeper.backend.core.logging import get_logger
from notekeeper.backend.repositories.base import JsonFileRepository

logger = get_logger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class BaseService:
    """
    Base class for all services.

    Provides:
    - Repository access
    - Logging context
    - Payload validation that reports every bad field at once

    Subclasses should:
    - Call super().__init__(repo) in their __init__
    - Set field_messages to map wire field names to user-facing messages
    - Implement business logic methods
    """

    field_messages: dict[str, str] = {}

    def __init__(self, repo: JsonFileRepository) -> None:
        """
        Initialize the service with its repository.

        Args:
            repo: Repository the service reads and writes through
        """
        self._repo = repo
        self._logger = get_logger(self.__class__.__module__)

    @property
    def repo(self) -> JsonFileRepository:
        """Get the repository."""
        return self._repo

    def _parse_payload(self, schema: type[SchemaT], payload: Any) -> SchemaT:
        """
        Validate a raw payload against a schema.

        Errors are collected, not short-circuited: every violated field
        contributes one message.

        Args:
            schema: Pydantic schema to validate against
            payload: Raw request data, or an already-built schema instance

        Returns:
            Validated schema instance

        Raises:
            ValidationError: If any field is invalid
        """
        if isinstance(payload, schema):
            return payload

        try:
            return schema.model_validate(payload)
        except PydanticValidationError as e:
            fields: list[str] = []
            messages: list[str] = []
            for err in e.errors():
                loc = err.get("loc", ())
                field = str(loc[0]) if loc else ""
                message = self.field_messages.get(field) or (
                    f"{'.'.join(str(part) for part in loc) or 'payload'}: "
                    f"{err.get('msg', 'invalid value')}"
                )
                if field and field not in fields:
                    fields.append(field)
                if message not in messages:
                    messages.append(message)

            self._logger.warning(
                "Payload validation failed",
                extra={"service": self.__class__.__name__, "fields": fields},
            )
            raise ValidationError("Validation failed", errors=messages, fields=fields) from e

    def _log_operation(
        self,
        operation: str,
        **context: Any,
    ) -> None:
        """
        Log a service operation with context.

        Args:
            operation: Description of the operation
            **context: Additional context to include in log
        """
        self._logger.info(
            operation,
            extra={"service": self.__class__.__name__, **context},
        )

    def _log_debug(
        self,
        message: str,
        **context: Any,
    ) -> None:
        """
        Log debug information.

        Args:
            message: Debug message
            **context: Additional context to include in log
        """
        self._logger.debug(
            message,
            extra={"service": self.__class__.__name__, **context},
        )
