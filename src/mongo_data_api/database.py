"""
Database - Data API database handle.

Provides a PyMongo-style Database interface. A database handle only
names a database; every operation goes through its collections.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from .collection import Collection

if TYPE_CHECKING:
    from .client import MongoClient

T = TypeVar("T", bound=dict[str, Any])

__all__ = ["Database"]


class Database:
    """
    Database handle.

    Collections can be accessed using the ``collection`` method,
    attribute access, or subscript notation.

    Example:
        db = client.database("myapp")

        # Access collections
        users = db.collection("users")
        users = db.users
        orders = db["orders"]
    """

    __slots__ = ("_client", "_name")

    def __init__(self, client: MongoClient, name: str) -> None:
        """
        Initialize a database.

        Args:
            client: Parent MongoClient instance.
            name: Database name.
        """
        self._client = client
        self._name = name

    @property
    def name(self) -> str:
        """Get the database name."""
        return self._name

    @property
    def client(self) -> MongoClient:
        """Get the parent client."""
        return self._client

    def collection(self, name: str) -> Collection[Any]:
        """
        Get a collection handle.

        Args:
            name: Collection name.

        Returns:
            Collection instance.
        """
        return Collection(self, name)

    def __getitem__(self, name: str) -> Collection[Any]:
        """
        Get a collection by name using subscript notation.

        Example:
            users = db["users"]
        """
        return self.collection(name)

    def __getattr__(self, name: str) -> Collection[Any]:
        """
        Get a collection by name using attribute access.

        Example:
            users = db.users
        """
        if name.startswith("_"):
            raise AttributeError(f"'{type(self).__name__}' has no attribute '{name}'")

        return self.collection(name)

    def get_collection(
        self,
        name: str,
        document_class: type[T] | None = None,
    ) -> Collection[T]:
        """
        Get a typed collection.

        Args:
            name: Collection name.
            document_class: Optional document type for type hints.

        Returns:
            Typed Collection instance.

        Example:
            from typing import TypedDict

            class User(TypedDict):
                _id: ObjectId
                name: str
                email: str

            users = db.get_collection("users", User)
            user: User | None = await users.find_one({"email": "alice@example.com"})
        """
        return Collection(self, name)  # type: ignore

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Database):
            return NotImplemented
        return self._client is other._client and self._name == other._name

    def __hash__(self) -> int:
        return hash((id(self._client), self._name))

    def __repr__(self) -> str:
        return f"Database({self._name!r})"
