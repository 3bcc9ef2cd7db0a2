"""
Cursor - Lazy wrapper around the ``find`` action.

Provides a PyMongo-style cursor. Options can be chained until the
cursor is first read; reading sends a single ``find`` action and keeps
the returned documents.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, AsyncIterator, Generator, Generic, Mapping, TypeVar

if TYPE_CHECKING:
    from .collection import Collection
    from .types import Filter, Projection, Sort

T = TypeVar("T", bound=dict[str, Any])

__all__ = ["Cursor", "normalize_projection", "normalize_sort"]


def normalize_projection(projection: Projection) -> dict[str, Any] | None:
    """Convert a list of field names into a projection document."""
    if projection is None:
        return None
    if isinstance(projection, Mapping):
        return dict(projection)
    return {field: 1 for field in projection}


def normalize_sort(sort: Sort) -> dict[str, int] | None:
    """Convert (field, direction) pairs into an ordered sort document."""
    if sort is None:
        return None
    if isinstance(sort, Mapping):
        return dict(sort)
    return {key: direction for key, direction in sort}


class Cursor(Generic[T]):
    """
    Lazy cursor over ``find`` results.

    Example:
        docs = await collection.find({"status": "active"})

        # With chaining
        cursor = collection.find({}).sort("created_at", -1).limit(10)
        async for doc in cursor:
            print(doc)
    """

    __slots__ = (
        "_collection",
        "_filter",
        "_projection",
        "_sort",
        "_limit",
        "_skip",
        "_results",
        "_exhausted",
        "_position",
    )

    def __init__(
        self,
        collection: Collection[Any],
        filter: Filter | None = None,
        projection: Projection = None,
        sort: Sort = None,
        limit: int | None = None,
        skip: int | None = None,
    ) -> None:
        """
        Initialize a cursor.

        Args:
            collection: Collection to query.
            filter: Query filter.
            projection: Fields to include/exclude.
            sort: Sort document or list of (field, direction) tuples.
            limit: Maximum number of documents to return.
            skip: Number of documents to skip.
        """
        self._collection = collection
        self._filter = filter
        self._projection = normalize_projection(projection)
        self._sort = normalize_sort(sort)
        self._limit = limit
        self._skip = skip
        self._results: list[T] | None = None
        self._exhausted = False
        self._position = 0

    def _check_unused(self) -> None:
        if self._results is not None:
            raise RuntimeError("Cannot modify a cursor after it has been read")

    def sort(self, key_or_list: str | Sort, direction: int = 1) -> Cursor[T]:
        """
        Sort the results.

        Args:
            key_or_list: Field name, sort document, or list of
                         (field, direction) tuples.
            direction: Sort direction (1 for ascending, -1 for descending).
                       Only used if key_or_list is a string.

        Returns:
            Self for chaining.
        """
        self._check_unused()
        if isinstance(key_or_list, str):
            self._sort = {key_or_list: direction}
        else:
            self._sort = normalize_sort(key_or_list)
        return self

    def limit(self, limit: int) -> Cursor[T]:
        """Limit the number of results. Returns self for chaining."""
        self._check_unused()
        self._limit = limit
        return self

    def skip(self, skip: int) -> Cursor[T]:
        """Skip the first N results. Returns self for chaining."""
        self._check_unused()
        self._skip = skip
        return self

    def project(self, projection: Projection) -> Cursor[T]:
        """Set field projection. Returns self for chaining."""
        self._check_unused()
        self._projection = normalize_projection(projection)
        return self

    async def _execute(self) -> list[T]:
        """Run the ``find`` action once and keep the results."""
        if self._results is not None:
            return self._results

        result = await self._collection._call_api(
            "find",
            filter=self._filter,
            projection=self._projection,
            sort=self._sort,
            limit=self._limit,
            skip=self._skip,
        )

        self._results = list(result.get("documents") or [])
        return self._results

    async def to_list(self, length: int | None = None) -> list[T]:
        """
        Convert cursor to a list.

        Args:
            length: Maximum number of documents to return.
                    If None, returns all documents.

        Returns:
            List of documents.
        """
        results = await self._execute()
        if length is not None:
            return results[:length]
        return list(results)

    def __await__(self) -> Generator[Any, None, list[T]]:
        return self.to_list().__await__()

    def __aiter__(self) -> AsyncIterator[T]:
        """Return async iterator."""
        return self

    async def __anext__(self) -> T:
        """
        Get the next document.

        Raises:
            StopAsyncIteration: When all documents have been iterated.
        """
        results = await self._execute()

        if self._position >= len(results):
            self._exhausted = True
            raise StopAsyncIteration

        doc = results[self._position]
        self._position += 1
        return doc

    async def next(self) -> T:
        """Get the next document."""
        return await self.__anext__()

    async def count(self) -> int:
        """
        Count documents matching the cursor's filter, limit and skip.

        Returns:
            Number of documents.
        """
        return await self._collection.count_documents(
            self._filter,
            limit=self._limit,
            skip=self._skip,
        )

    def clone(self) -> Cursor[T]:
        """
        Clone this cursor.

        Returns:
            An unread cursor with the same query parameters.
        """
        return Cursor[T](
            self._collection,
            self._filter,
            self._projection,
            self._sort,
            self._limit,
            self._skip,
        )

    @property
    def alive(self) -> bool:
        """Check if the cursor can still yield documents."""
        return not self._exhausted

    def rewind(self) -> Cursor[T]:
        """
        Rewind the cursor to the beginning.

        Returns:
            Self for chaining.
        """
        self._position = 0
        self._exhausted = False
        return self

    def __repr__(self) -> str:
        return f"Cursor({self._collection.full_name!r}, {self._filter!r})"
