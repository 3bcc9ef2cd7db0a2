"""
mongo-data-api - MongoDB Atlas Data API client with a PyMongo-style surface.

This package lets code that cannot open a MongoDB wire-protocol
connection (serverless functions, restricted runtimes) work with Atlas
over HTTPS:
- CRUD operations (insert, find, update, replace, delete)
- Async/await native API
- Aggregation pipelines and emulated document counts
- Extended JSON round-tripping of ObjectId, dates, binary and decimals
- API key, custom JWT and email/password authentication

Example usage:
    from bson import ObjectId
    from mongo_data_api import ApiKeyAuth, MongoClient

    async def main():
        async with MongoClient(
            "Cluster0",
            auth=ApiKeyAuth("..."),
            endpoint="https://data.mongodb-api.com/app/data-abcde/endpoint/data/v1",
        ) as client:
            users = client.database("myapp").collection("users")

            # Insert documents
            result = await users.insert_one({"_id": ObjectId(), "name": "Alice"})
            print(result.inserted_id)

            # Find documents
            user = await users.find_one({"name": "Alice"})
            for user in await users.find({"status": "active"}, limit=10):
                print(user["name"])

            # Update documents
            await users.update_one({"name": "Alice"}, {"$set": {"status": "vip"}})

            # Count documents
            print(await users.count_documents({"status": "vip"}))

            # Delete documents
            await users.delete_one({"name": "Alice"})

    import asyncio
    asyncio.run(main())
"""

from __future__ import annotations

__version__ = "0.1.0"

from . import ejson
from .auth import ApiKeyAuth, Credential, CustomJwtAuth, EmailPasswordAuth
from .client import MongoClient
from .collection import Collection
from .cursor import Cursor
from .database import Database
from .gateway import DATA_API, Gateway
from .types import (
    ConfigurationError,
    DeleteResult,
    EJSONDecodeError,
    InsertManyResult,
    InsertOneResult,
    MongoError,
    OperationFailure,
    UpdateResult,
)

__all__ = [
    # Main classes
    "MongoClient",
    "Database",
    "Collection",
    "Cursor",
    # Configuration
    "ApiKeyAuth",
    "CustomJwtAuth",
    "EmailPasswordAuth",
    "Credential",
    "Gateway",
    "DATA_API",
    # Codec
    "ejson",
    # Result types
    "InsertOneResult",
    "InsertManyResult",
    "UpdateResult",
    "DeleteResult",
    # Exceptions
    "MongoError",
    "ConfigurationError",
    "OperationFailure",
    "EJSONDecodeError",
    # Version
    "__version__",
]
