"""
Shared pytest fixtures for all tests.

Provides an in-memory stand-in for the pymongo async database, and a DocumentClient wired to it.
"""

import copy
from typing import Any

import pytest
from pymongo.errors import CollectionInvalid, DuplicateKeyError

from mongoable import DocumentCatalog, DocumentClient, DocumentStoreConfiguration, ResilientExecutor

from .documents import Account, Auditable, Person, User


# =============================================================================
# IN-MEMORY DATABASE
# =============================================================================

def matches(document: dict[str, Any], filter: dict[str, Any]) -> bool:
    """ Supports equality and $in, which is all the client sends. """
    for key, expected in filter.items():
        actual = document.get(key)
        if isinstance(expected, dict) and "$in" in expected:
            if actual not in expected["$in"]:
                return False
        elif actual != expected:
            return False
    return True


class FakeCursor:
    def __init__(self, documents: list[dict[str, Any]]):
        self._documents = documents

    async def to_list(self, length: int | None = None) -> list[dict[str, Any]]:
        return copy.deepcopy(self._documents[:length] if length else self._documents)


class FakeCollection:
    def __init__(self, database: "FakeDatabase", name: str):
        self.database = database
        self.name = name
        self.documents: dict[str, dict[str, Any]] = {}
        self.indexes: list[tuple[list, bool]] = []

    def _record(self, method: str, *args: Any) -> None:
        self.database.calls.append((self.name, method, args))
        if self.database.faults:
            raise self.database.faults.pop(0)

    def _insert(self, document: dict[str, Any]) -> None:
        if document["_id"] in self.documents:
            raise DuplicateKeyError(f"E11000 duplicate key error collection: {self.name} dup key: {{ _id: \"{document['_id']}\" }}", 11000)
        self.documents[document["_id"]] = copy.deepcopy(document)
        self.database.existing.add(self.name)

    def find(self, filter: dict[str, Any]) -> FakeCursor:
        self._record("find", filter)
        return FakeCursor([document for document in self.documents.values() if matches(document, filter)])

    async def find_one(self, filter: dict[str, Any]) -> dict[str, Any] | None:
        self._record("find_one", filter)
        for document in self.documents.values():
            if matches(document, filter):
                return copy.deepcopy(document)
        return None

    async def insert_one(self, document: dict[str, Any]) -> None:
        self._record("insert_one", document)
        self._insert(document)

    async def insert_many(self, documents: list[dict[str, Any]]) -> None:
        self._record("insert_many", documents)
        for document in documents:
            self._insert(document)

    async def replace_one(self, filter: dict[str, Any], replacement: dict[str, Any]) -> None:
        self._record("replace_one", filter, replacement)
        for _id, document in self.documents.items():
            if matches(document, filter):
                self.documents[_id] = copy.deepcopy(replacement)
                return

    async def find_one_and_replace(self, filter: dict[str, Any], replacement: dict[str, Any]) -> dict[str, Any] | None:
        self._record("find_one_and_replace", filter, replacement)
        for _id, document in self.documents.items():
            if matches(document, filter):
                self.documents[_id] = {**copy.deepcopy(replacement), "_id": _id}
                return copy.deepcopy(document)
        return None

    async def delete_one(self, filter: dict[str, Any]) -> None:
        self._record("delete_one", filter)
        for _id, document in list(self.documents.items()):
            if matches(document, filter):
                del self.documents[_id]
                return

    async def delete_many(self, filter: dict[str, Any]) -> None:
        self._record("delete_many", filter)
        for _id, document in list(self.documents.items()):
            if matches(document, filter):
                del self.documents[_id]

    async def bulk_write(self, requests: list) -> None:
        self._record("bulk_write", requests)
        for request in requests:
            for _id, document in self.documents.items():
                if matches(document, request._filter):
                    self.documents[_id] = copy.deepcopy(request._doc)
                    break

    async def count_documents(self, filter: dict[str, Any]) -> int:
        self._record("count_documents", filter)
        return sum(1 for document in self.documents.values() if matches(document, filter))

    async def create_index(self, keys: list, unique: bool = False) -> str:
        self._record("create_index", keys, unique)
        self.indexes.append((keys, unique))
        return "_".join(f"{field_name}_{direction}" for field_name, direction in keys)


class FakeDatabase:
    """ Records every call. Exceptions queued in .faults are raised by the next collection calls, one per call. """

    def __init__(self):
        self.collections: dict[str, FakeCollection] = {}
        self.existing: set[str] = set()
        self.collection_options: dict[str, dict[str, Any]] = {}
        self.calls: list[tuple] = []
        self.commands: list[dict[str, Any]] = []
        self.faults: list[BaseException] = []

    def __getitem__(self, name: str) -> FakeCollection:
        if name not in self.collections:
            self.collections[name] = FakeCollection(self, name)
        return self.collections[name]

    async def list_collection_names(self) -> list[str]:
        self.calls.append((None, "list_collection_names", ()))
        return sorted(self.existing)

    async def create_collection(self, name: str, **kwargs: Any) -> FakeCollection:
        self.calls.append((None, "create_collection", (name,)))
        if name in self.existing:
            raise CollectionInvalid(f"collection {name} already exists")
        self.existing.add(name)
        self.collection_options[name] = kwargs
        return self[name]

    async def command(self, command: dict[str, Any]) -> dict[str, Any]:
        self.calls.append((None, "command", (command,)))
        self.commands.append(command)
        if "collMod" in command:
            options = {key: value for key, value in command.items() if key != "collMod"}
            self.collection_options[command["collMod"]] = options
        return {"ok": 1.0}


# =============================================================================
# CLIENT FIXTURES
# =============================================================================

class RecordingSleep:
    """ Replaces asyncio.sleep. Records the delays without waiting. """

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def catalog() -> DocumentCatalog:
    return DocumentCatalog([User, Account, Auditable, Person])


@pytest.fixture
def configuration() -> DocumentStoreConfiguration:
    return DocumentStoreConfiguration(
        connection_string="mongodb://localhost:27017",
        database_name="mongoable_test",
        collections={"users": "User"}
    )


@pytest.fixture
def client(configuration, catalog, fake_db, recording_sleep) -> DocumentClient:
    return DocumentClient(
        configuration,
        catalog=catalog,
        executor=ResilientExecutor(sleep=recording_sleep),
        database=fake_db
    )
