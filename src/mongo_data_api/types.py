"""
Type definitions for mongo-data-api.

Provides result types that mirror PyMongo's result objects for
insert, update, and delete operations, along with the exception
hierarchy raised by the client.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence


@dataclass
class InsertOneResult:
    """
    Result of an insert_one operation.

    Attributes:
        inserted_id: The _id of the inserted document.
        acknowledged: Whether the write was acknowledged.
    """

    inserted_id: Any
    acknowledged: bool = True


@dataclass
class InsertManyResult:
    """
    Result of an insert_many operation.

    Attributes:
        inserted_ids: List of _ids of the inserted documents.
        acknowledged: Whether the write was acknowledged.
    """

    inserted_ids: list[Any] = field(default_factory=list)
    acknowledged: bool = True


@dataclass
class UpdateResult:
    """
    Result of an update_one, update_many or replace_one operation.

    Attributes:
        matched_count: Number of documents matched.
        modified_count: Number of documents modified.
        upserted_id: The _id of the upserted document (if any).
        acknowledged: Whether the write was acknowledged.
    """

    matched_count: int = 0
    modified_count: int = 0
    upserted_id: Any = None
    acknowledged: bool = True

    @property
    def raw_result(self) -> dict[str, Any]:
        """Return the result in the gateway's field names."""
        raw: dict[str, Any] = {
            "matchedCount": self.matched_count,
            "modifiedCount": self.modified_count,
        }
        if self.upserted_id is not None:
            raw["upsertedId"] = self.upserted_id
        return raw


@dataclass
class DeleteResult:
    """
    Result of a delete_one or delete_many operation.

    Attributes:
        deleted_count: Number of documents deleted.
        acknowledged: Whether the write was acknowledged.
    """

    deleted_count: int = 0
    acknowledged: bool = True

    @property
    def raw_result(self) -> dict[str, Any]:
        """Return the result in the gateway's field names."""
        return {"deletedCount": self.deleted_count}


# Type aliases for clarity
Document = Mapping[str, Any]
MutableDocument = dict[str, Any]
Filter = Mapping[str, Any]
Update = Mapping[str, Any]
Pipeline = Sequence[Mapping[str, Any]]
Projection = Mapping[str, Any] | Sequence[str] | None
Sort = Mapping[str, int] | Sequence[tuple[str, int]] | None


class MongoError(Exception):
    """Base exception for Data API operations."""

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class ConfigurationError(MongoError):
    """Raised when the client is constructed with unusable options."""

    pass


class OperationFailure(MongoError):
    """
    Raised when the gateway answers with a non-success status.

    Attributes:
        code: HTTP status code of the response.
        status_text: HTTP reason phrase of the response.
        body: Raw response body, exactly as received.
    """

    def __init__(self, status_text: str, body: str, code: int | None = None) -> None:
        super().__init__(f"{status_text}: {body}", code)
        self.status_text = status_text
        self.body = body


class EJSONDecodeError(MongoError, ValueError):
    """Raised when a response body is not valid extended JSON."""

    def __init__(self, message: str, text: str) -> None:
        super().__init__(message)
        self.text = text
