"""
Collection - Data API collection operations.

Provides a PyMongo-style Collection interface. Every operation is one
Data API action; the count helpers are emulated with aggregation
pipelines because the gateway has no count action.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, Mapping, TypeVar

from .cursor import Cursor, normalize_projection
from .types import DeleteResult, InsertManyResult, InsertOneResult, UpdateResult

if TYPE_CHECKING:
    from .client import MongoClient
    from .database import Database
    from .types import Filter, Pipeline, Projection, Sort, Update

T = TypeVar("T", bound=dict[str, Any])

__all__ = ["Collection"]


def _first_count(rows: list[dict[str, Any]]) -> int:
    """Read ``n`` from the first row of a counting pipeline."""
    if rows:
        return rows[0].get("n", 0)
    return 0


def _update_result(result: dict[str, Any]) -> UpdateResult:
    return UpdateResult(
        matched_count=result.get("matchedCount", 0),
        modified_count=result.get("modifiedCount", 0),
        upserted_id=result.get("upsertedId"),
    )


class Collection(Generic[T]):
    """
    Data API collection with async CRUD operations.

    Example:
        users = db.collection("users")

        # Insert
        result = await users.insert_one({"name": "Alice"})
        print(result.inserted_id)

        # Find
        user = await users.find_one({"name": "Alice"})
        docs = await users.find({"status": "active"}, limit=10)
        async for user in users.find({"status": "active"}).sort("name"):
            print(user)

        # Update
        await users.update_one({"name": "Alice"}, {"$set": {"status": "vip"}})

        # Delete
        await users.delete_one({"name": "Alice"})

        # Count
        total = await users.count_documents({"status": "active"})
    """

    __slots__ = ("_database", "_name", "_full_name")

    def __init__(self, database: Database, name: str) -> None:
        """
        Initialize a collection.

        Args:
            database: Parent database instance.
            name: Collection name.
        """
        self._database = database
        self._name = name
        self._full_name = f"{database.name}.{name}"

    @property
    def name(self) -> str:
        """Get the collection name."""
        return self._name

    @property
    def full_name(self) -> str:
        """Get the full collection name (database.collection)."""
        return self._full_name

    @property
    def database(self) -> Database:
        """Get the parent database."""
        return self._database

    @property
    def client(self) -> MongoClient:
        """Get the client that sends this collection's requests."""
        return self._database.client

    async def _call_api(self, action: str, **params: Any) -> dict[str, Any]:
        """
        Invoke an action against this collection.

        Parameters that are None are left out of the request body. A
        response body that is not a document reads as an empty one, so
        each operation falls back to its documented defaults.
        """
        client = self._database.client
        envelope: dict[str, Any] = {
            "collection": self._name,
            "database": self._database.name,
            "dataSource": client.data_source,
        }
        for key, value in params.items():
            if value is not None:
                envelope[key] = value
        result = await client.call_api(action, envelope)
        return result if isinstance(result, dict) else {}

    async def insert_one(self, document: T) -> InsertOneResult:
        """
        Insert a single document.

        Args:
            document: The document to insert. The gateway generates an
                      ObjectId ``_id`` if the document has none.

        Returns:
            InsertOneResult with the inserted ID.
        """
        result = await self._call_api("insertOne", document=document)
        return InsertOneResult(inserted_id=result.get("insertedId"))

    async def insert_many(self, documents: list[T]) -> InsertManyResult:
        """
        Insert multiple documents.

        Args:
            documents: List of documents to insert.

        Returns:
            InsertManyResult with the inserted IDs.
        """
        result = await self._call_api("insertMany", documents=list(documents))
        return InsertManyResult(inserted_ids=list(result.get("insertedIds") or []))

    async def find_one(
        self,
        filter: Filter | None = None,
        projection: Projection = None,
    ) -> T | None:
        """
        Find a single document.

        Args:
            filter: Query filter.
            projection: Fields to include/exclude, as a projection
                        document or a list of field names.

        Returns:
            The matching document, or None if not found.
        """
        result = await self._call_api(
            "findOne",
            filter=filter if filter is not None else {},
            projection=normalize_projection(projection),
        )
        return result.get("document")

    def find(
        self,
        filter: Filter | None = None,
        projection: Projection = None,
        sort: Sort = None,
        limit: int | None = None,
        skip: int | None = None,
    ) -> Cursor[T]:
        """
        Find documents matching the filter.

        Args:
            filter: Query filter.
            projection: Fields to include/exclude.
            sort: Sort document, or list of (field, direction) tuples.
            limit: Maximum number of documents to return.
            skip: Number of documents to skip.

        Returns:
            Cursor over the results. Awaiting it yields a list.

        Example:
            docs = await collection.find({"status": "active"})

            # With chaining
            cursor = collection.find({}).sort("name").limit(10)
            docs = await cursor.to_list()
        """
        return Cursor[T](self, filter, projection, sort, limit, skip)

    async def update_one(
        self,
        filter: Filter,
        update: Update,
        upsert: bool | None = None,
    ) -> UpdateResult:
        """
        Update a single document.

        Args:
            filter: Query filter to match the document.
            update: Update operations ($set, $unset, $inc, etc.).
            upsert: If True, insert if no document matches.

        Returns:
            UpdateResult with match/modify counts.
        """
        result = await self._call_api("updateOne", filter=filter, update=update, upsert=upsert)
        return _update_result(result)

    async def update_many(
        self,
        filter: Filter,
        update: Update,
        upsert: bool | None = None,
    ) -> UpdateResult:
        """
        Update multiple documents.

        Args:
            filter: Query filter to match documents.
            update: Update operations ($set, $unset, $inc, etc.).
            upsert: If True, insert if no document matches.

        Returns:
            UpdateResult with match/modify counts.
        """
        result = await self._call_api("updateMany", filter=filter, update=update, upsert=upsert)
        return _update_result(result)

    async def replace_one(
        self,
        filter: Filter,
        replacement: T,
        upsert: bool | None = None,
    ) -> UpdateResult:
        """
        Replace a single document.

        Args:
            filter: Query filter to match the document.
            replacement: The replacement document.
            upsert: If True, insert if no document matches.

        Returns:
            UpdateResult with match/modify counts.
        """
        result = await self._call_api(
            "replaceOne", filter=filter, replacement=replacement, upsert=upsert
        )
        return _update_result(result)

    async def delete_one(self, filter: Filter) -> DeleteResult:
        """
        Delete a single document.

        Args:
            filter: Query filter to match the document.

        Returns:
            DeleteResult with the deleted count.
        """
        result = await self._call_api("deleteOne", filter=filter)
        return DeleteResult(deleted_count=result.get("deletedCount", 0))

    async def delete_many(self, filter: Filter) -> DeleteResult:
        """
        Delete multiple documents.

        Args:
            filter: Query filter to match documents.

        Returns:
            DeleteResult with the deleted count.
        """
        result = await self._call_api("deleteMany", filter=filter)
        return DeleteResult(deleted_count=result.get("deletedCount", 0))

    async def aggregate(self, pipeline: Pipeline) -> list[dict[str, Any]]:
        """
        Run an aggregation pipeline.

        Args:
            pipeline: List of aggregation stages.

        Returns:
            List of aggregation results.
        """
        result = await self._call_api("aggregate", pipeline=list(pipeline))
        return list(result.get("documents") or [])

    async def count_documents(
        self,
        filter: Filter | None = None,
        limit: int | None = None,
        skip: int | None = None,
    ) -> int:
        """
        Count documents matching the filter.

        Runs ``[$match] [$skip] [$limit] $group`` through ``aggregate``.

        Args:
            filter: Query filter. No ``$match`` stage is added without one.
            limit: Maximum number of documents to count.
            skip: Number of matching documents to skip before counting.

        Returns:
            Number of matching documents.
        """
        pipeline: list[dict[str, Any]] = []
        if filter is not None:
            pipeline.append({"$match": filter})
        if skip is not None:
            pipeline.append({"$skip": skip})
        if limit is not None:
            pipeline.append({"$limit": limit})
        pipeline.append({"$group": {"_id": 1, "n": {"$sum": 1}}})

        return _first_count(await self.aggregate(pipeline))

    async def estimated_document_count(self) -> int:
        """
        Get an estimated count of documents in the collection.

        Reads collection statistics instead of scanning documents, so it
        is faster than count_documents() but may not be accurate.

        Returns:
            Estimated number of documents.
        """
        pipeline = [
            {"$collStats": {"count": {}}},
            {"$group": {"_id": 1, "n": {"$sum": "$count"}}},
        ]
        return _first_count(await self.aggregate(pipeline))

    async def distinct(
        self,
        key: str,
        filter: Filter | None = None,
    ) -> list[Any]:
        """
        Get distinct values for a field.

        Array values are unwound, so each element counts as a value.

        Args:
            key: Field name (dotted paths allowed).
            filter: Query filter.

        Returns:
            List of distinct values.
        """
        pipeline: list[Mapping[str, Any]] = []
        if filter is not None:
            pipeline.append({"$match": filter})
        pipeline.append({"$unwind": f"${key}"})
        pipeline.append({"$group": {"_id": f"${key}"}})

        return [row["_id"] for row in await self.aggregate(pipeline)]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Collection):
            return NotImplemented
        return self._database == other._database and self._name == other._name

    def __hash__(self) -> int:
        return hash((self._database, self._name))

    def __repr__(self) -> str:
        return f"Collection({self._full_name!r})"
