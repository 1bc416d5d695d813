"""
Base Schemas.

Every notes endpoint answers with the same envelope:

    {"success": true, "data": ..., "error": null,
     "metadata": {"timestamp": ..., "request_id": ...}}

On failure ``data`` is null and ``error`` carries a stable code, a
summary message and, for rejected notes, ``errors`` with one readable
message per invalid field.
"""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from notekeeper.backend.core.utils import utc_now

DataT = TypeVar("DataT")


class ResponseMetadata(BaseModel):
    timestamp: datetime = Field(default_factory=utc_now)
    request_id: str | None = None


class ErrorDetail(BaseModel):
    """Error body: stable code, summary, per-field messages."""

    code: str
    message: str
    errors: list[str] = Field(default_factory=list)
    details: dict[str, Any] | None = None


class ApiResponse(BaseModel, Generic[DataT]):
    """Successful response envelope."""

    success: bool = True
    data: DataT | None = None
    error: ErrorDetail | None = None
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)

    @classmethod
    def wrap(cls, data: DataT, request_id: str | None = None) -> "ApiResponse[DataT]":
        """Envelope ``data`` for the request identified by ``request_id``."""
        return cls(data=data, metadata=ResponseMetadata(request_id=request_id))


class ErrorResponse(BaseModel):
    """Failed response envelope."""

    success: bool = False
    data: None = None
    error: ErrorDetail
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)

    @classmethod
    def build(
        cls,
        code: str,
        message: str,
        request_id: str | None = None,
        errors: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> "ErrorResponse":
        return cls(
            error=ErrorDetail(
                code=code, message=message, errors=list(errors or []), details=details
            ),
            metadata=ResponseMetadata(request_id=request_id),
        )
