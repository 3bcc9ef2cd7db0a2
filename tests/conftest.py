"""
Pytest fixtures for mongo-data-api tests.

Provides an in-memory fake of the Data API gateway, served through
``httpx.MockTransport``, and client fixtures wired to it, so tests run
without network connections.
"""

from __future__ import annotations

from typing import Any

import httpx
import pytest

from mongo_data_api import ApiKeyAuth, MongoClient, ejson

ENDPOINT = "https://data.example.test/app/data-abcde/endpoint/data/v1"
API_KEY = "API_KEY"


class FakeDataApi:
    """In-memory stand-in for the Data API's ``action/*`` routes."""

    def __init__(self, api_key: str = API_KEY) -> None:
        self.api_key = api_key
        self.requests: list[httpx.Request] = []
        self._data: dict[tuple[str, str, str], list[dict[str, Any]]] = {}
        self._next_id = 0

    def handle(self, request: httpx.Request) -> httpx.Response:
        """MockTransport handler."""
        self.requests.append(request)

        if request.headers.get("api-key") != self.api_key:
            return httpx.Response(401, text='{"error":"invalid session"}')

        action = request.url.path.rsplit("/", 1)[-1]
        body = ejson.decode(request.content)
        docs = self._get_collection_data(body["dataSource"], body["database"], body["collection"])

        handler = getattr(self, f"_do_{action}", None)
        if handler is None:
            return httpx.Response(404, text=f"no such action: {action}")

        payload = handler(docs, body)
        return httpx.Response(
            200,
            content=ejson.encode(payload),
            headers={"Content-Type": "application/ejson"},
        )

    @property
    def last_body(self) -> dict[str, Any]:
        """Decoded body of the most recent request."""
        return ejson.decode(self.requests[-1].content)

    def _get_collection_data(self, source: str, database: str, collection: str) -> list[dict[str, Any]]:
        """Get or create collection data."""
        return self._data.setdefault((source, database, collection), [])

    def _new_id(self) -> str:
        self._next_id += 1
        return f"generated-{self._next_id}"

    def _do_insertOne(self, docs: list[dict[str, Any]], body: dict[str, Any]) -> dict[str, Any]:
        doc = dict(body["document"])
        doc.setdefault("_id", self._new_id())
        docs.append(doc)
        return {"insertedId": doc["_id"]}

    def _do_insertMany(self, docs: list[dict[str, Any]], body: dict[str, Any]) -> dict[str, Any]:
        ids = []
        for document in body["documents"]:
            ids.append(self._do_insertOne(docs, {"document": document})["insertedId"])
        return {"insertedIds": ids}

    def _do_findOne(self, docs: list[dict[str, Any]], body: dict[str, Any]) -> dict[str, Any]:
        for doc in docs:
            if self._matches(doc, body.get("filter", {})):
                return {"document": self._project(doc, body.get("projection"))}
        return {"document": None}

    def _do_find(self, docs: list[dict[str, Any]], body: dict[str, Any]) -> dict[str, Any]:
        results = [doc for doc in docs if self._matches(doc, body.get("filter", {}))]

        sort = body.get("sort")
        if sort:
            for field, direction in reversed(list(sort.items())):
                results.sort(key=lambda x: x.get(field, ""), reverse=(direction == -1))

        skip = body.get("skip", 0)
        if skip:
            results = results[skip:]

        limit = body.get("limit", 0)
        if limit:
            results = results[:limit]

        return {"documents": [self._project(doc, body.get("projection")) for doc in results]}

    def _update(self, docs: list[dict[str, Any]], body: dict[str, Any], many: bool) -> dict[str, Any]:
        matched = 0
        modified = 0

        for doc in docs:
            if self._matches(doc, body["filter"]):
                matched += 1
                if self._apply_update(doc, body["update"]):
                    modified += 1
                if not many:
                    break

        result: dict[str, Any] = {"matchedCount": matched, "modifiedCount": modified}
        if matched == 0 and body.get("upsert"):
            new_doc = {k: v for k, v in body["filter"].items() if not k.startswith("$")}
            self._apply_update(new_doc, body["update"])
            result["upsertedId"] = self._do_insertOne(docs, {"document": new_doc})["insertedId"]
        return result

    def _do_updateOne(self, docs: list[dict[str, Any]], body: dict[str, Any]) -> dict[str, Any]:
        return self._update(docs, body, many=False)

    def _do_updateMany(self, docs: list[dict[str, Any]], body: dict[str, Any]) -> dict[str, Any]:
        return self._update(docs, body, many=True)

    def _do_replaceOne(self, docs: list[dict[str, Any]], body: dict[str, Any]) -> dict[str, Any]:
        for i, doc in enumerate(docs):
            if self._matches(doc, body["filter"]):
                replacement = dict(body["replacement"])
                replacement.setdefault("_id", doc.get("_id"))
                docs[i] = replacement
                return {"matchedCount": 1, "modifiedCount": 1}

        result: dict[str, Any] = {"matchedCount": 0, "modifiedCount": 0}
        if body.get("upsert"):
            inserted = self._do_insertOne(docs, {"document": body["replacement"]})
            result["upsertedId"] = inserted["insertedId"]
        return result

    def _do_deleteOne(self, docs: list[dict[str, Any]], body: dict[str, Any]) -> dict[str, Any]:
        for i, doc in enumerate(docs):
            if self._matches(doc, body["filter"]):
                del docs[i]
                return {"deletedCount": 1}
        return {"deletedCount": 0}

    def _do_deleteMany(self, docs: list[dict[str, Any]], body: dict[str, Any]) -> dict[str, Any]:
        keep = [doc for doc in docs if not self._matches(doc, body["filter"])]
        deleted = len(docs) - len(keep)
        docs[:] = keep
        return {"deletedCount": deleted}

    def _do_aggregate(self, docs: list[dict[str, Any]], body: dict[str, Any]) -> dict[str, Any]:
        """Run the handful of stages the client synthesizes."""
        rows = [dict(doc) for doc in docs]

        for stage in body["pipeline"]:
            (op, arg), = stage.items()
            if op == "$match":
                rows = [row for row in rows if self._matches(row, arg)]
            elif op == "$skip":
                rows = rows[arg:]
            elif op == "$limit":
                rows = rows[:arg]
            elif op == "$collStats":
                rows = [{"ns": "fake", "count": len(docs)}]
            elif op == "$unwind":
                field = arg[1:]
                unwound = []
                for row in rows:
                    value = row.get(field)
                    if isinstance(value, list):
                        unwound.extend({**row, field: item} for item in value)
                    elif field in row:
                        unwound.append(row)
                rows = unwound
            elif op == "$group":
                rows = self._group(rows, arg)
            else:
                raise AssertionError(f"unsupported stage {op}")

        return {"documents": rows}

    def _group(self, rows: list[dict[str, Any]], stage: dict[str, Any]) -> list[dict[str, Any]]:
        key = stage["_id"]
        if isinstance(key, str) and key.startswith("$"):
            seen: list[Any] = []
            for row in rows:
                if row.get(key[1:]) not in seen:
                    seen.append(row.get(key[1:]))
            return [{"_id": value} for value in seen]

        if not rows:
            return []
        summed = stage["n"]["$sum"]
        if isinstance(summed, str):
            total = sum(row.get(summed[1:], 0) for row in rows)
        else:
            total = summed * len(rows)
        return [{"_id": key, "n": total}]

    def _matches(self, doc: dict[str, Any], filter: dict[str, Any]) -> bool:
        """Check if document matches filter."""
        for key, value in filter.items():
            if key == "$and":
                if not all(self._matches(doc, f) for f in value):
                    return False
                continue
            if key == "$or":
                if not any(self._matches(doc, f) for f in value):
                    return False
                continue

            doc_value = doc.get(key)

            if isinstance(value, dict) and value and all(op.startswith("$") for op in value):
                for op, op_value in value.items():
                    if op == "$eq" and doc_value != op_value:
                        return False
                    if op == "$ne" and doc_value == op_value:
                        return False
                    if op == "$gt" and (doc_value is None or doc_value <= op_value):
                        return False
                    if op == "$gte" and (doc_value is None or doc_value < op_value):
                        return False
                    if op == "$lt" and (doc_value is None or doc_value >= op_value):
                        return False
                    if op == "$in" and doc_value not in op_value:
                        return False
                    if op == "$exists" and (key in doc) != bool(op_value):
                        return False
            elif doc_value != value:
                return False

        return True

    def _apply_update(self, doc: dict[str, Any], update: dict[str, Any]) -> bool:
        """Apply update operators to document."""
        modified = False

        for op, fields in update.items():
            if op == "$set":
                for key, value in fields.items():
                    if doc.get(key) != value:
                        doc[key] = value
                        modified = True
            elif op == "$unset":
                for key in fields:
                    if key in doc:
                        del doc[key]
                        modified = True
            elif op == "$inc":
                for key, value in fields.items():
                    doc[key] = doc.get(key, 0) + value
                    modified = True

        return modified

    def _project(self, doc: dict[str, Any], projection: dict[str, int] | None) -> dict[str, Any]:
        """Apply an inclusion projection to document."""
        if not projection:
            return doc

        result = {key: doc[key] for key, include in projection.items() if include and key in doc}
        if "_id" in doc and projection.get("_id", 1) != 0:
            result["_id"] = doc["_id"]
        return result


@pytest.fixture
def gateway() -> FakeDataApi:
    """Create a fake Data API gateway."""
    return FakeDataApi()


@pytest.fixture
async def http_client(gateway: FakeDataApi):
    """Create an httpx client that talks to the fake gateway."""
    async with httpx.AsyncClient(transport=httpx.MockTransport(gateway.handle)) as http:
        yield http


@pytest.fixture
def client(http_client: httpx.AsyncClient) -> MongoClient:
    """Create a MongoClient bound to the fake gateway."""
    return MongoClient(
        "dataSource",
        auth=ApiKeyAuth(API_KEY),
        endpoint=ENDPOINT,
        http_client=http_client,
    )


@pytest.fixture
def database(client: MongoClient):
    """Create a database."""
    return client.database("testdb")


@pytest.fixture
def collection(database):
    """Create a collection."""
    return database.collection("testcollection")
