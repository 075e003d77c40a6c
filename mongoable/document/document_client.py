import asyncio
from typing import Any, Awaitable, Callable, Iterable, Mapping, TypeVar, TYPE_CHECKING

from pymongo import ASCENDING, ReplaceOne

from .collection_registry import CollectionRegistry
from .configuration import DocumentStoreConfiguration
from .document import Document
from .document_catalog import DocumentCatalog
from .mongo_db import create_mongo_db, translate_store_errors
from .resilient_executor import ResilientExecutor
from ..utilities.errors import ConfigurationError, StoreConnectionError
from ..utilities.logger import logger

if TYPE_CHECKING:
    from pymongo.asynchronous.collection import AsyncCollection
    from pymongo.asynchronous.database import AsyncDatabase


T = TypeVar('T', bound=Document)
R = TypeVar('R')


class DocumentClient:
    """ Typed CRUD access to the collections of one MongoDB database.

    Every operation takes the Document class first. The class must be registered to a collection, either through the collection map
    of the configuration, through register_collection(), or by SchemaSynthesizer. Operations for unregistered classes raise
    MappingNotFoundError before anything is sent to the store.

    Every store call runs through the ResilientExecutor, so connectivity faults are retried. Store errors surface as
    TransientStoreError (after the retries are exhausted) or StoreOperationError.
    """

    def __init__(
            self,
            configuration: DocumentStoreConfiguration,
            *,
            catalog: DocumentCatalog | None = None,
            executor: ResilientExecutor | None = None,
            database: 'AsyncDatabase | None' = None
        ) -> None:
        if configuration is None:
            raise ConfigurationError("A DocumentStoreConfiguration is required.")
        configuration.validate()

        self.configuration = configuration
        self.catalog = catalog if catalog is not None else DocumentCatalog()
        self.executor = executor or ResilientExecutor()
        self.registry = CollectionRegistry()

        if database is None:
            try:
                database = create_mongo_db(configuration.connection_string, configuration.database_name)
            except Exception as e:
                message = f"Failed to connect to MongoDB: {e}"
                logger.error(message)
                raise StoreConnectionError(message, e) from e
        self.database = database

        unmatched = self.registry.register_from_configuration(configuration.collections, self.catalog)
        for collection_name in unmatched:
            logger.warning(f"No Document class named '{configuration.collections[collection_name]}' found for collection '{collection_name}'. Skipping.")

    def register_collection(self, document_cls: type[Document], collection_name: str) -> bool:
        """ Manually map the Document class to a collection. Returns False if the class was already registered. """
        return self.registry.register(document_cls, collection_name)

    def get_collection(self, document_cls: type[Document]) -> 'AsyncCollection':
        """ Raises MappingNotFoundError if the class is not registered. """
        return self.database[self.registry.resolve(document_cls)]

    async def _execute(self, operation_name: str, operation: Callable[[], Awaitable[R]], cancellation: asyncio.Event | None) -> R:
        async def attempt() -> R:
            with translate_store_errors(operation_name):
                return await operation()

        return await self.executor.execute(attempt, cancellation=cancellation, operation_name=operation_name)

    # region: Reads
    async def get(self, document_cls: type[T], document_id: str, *, cancellation: asyncio.Event | None = None) -> T | None:
        collection = self.get_collection(document_cls)
        raw = await self._execute(f"get {document_cls.__name__}", lambda: collection.find_one({"_id": document_id}), cancellation)
        return document_cls.from_document(raw) if raw is not None else None

    async def get_all(self, document_cls: type[T], *, cancellation: asyncio.Event | None = None) -> list[T]:
        """ All documents in the collection, in no particular order. """
        collection = self.get_collection(document_cls)
        raws = await self._execute(f"get_all {document_cls.__name__}", lambda: collection.find({}).to_list(), cancellation)
        return [document_cls.from_document(raw) for raw in raws]

    async def find(self, document_cls: type[T], filter: Mapping[str, Any], *, cancellation: asyncio.Event | None = None) -> list[T]:
        """ The filter is a native MongoDB filter document, passed to the driver as is. """
        collection = self.get_collection(document_cls)
        raws = await self._execute(f"find {document_cls.__name__}", lambda: collection.find(filter).to_list(), cancellation)
        return [document_cls.from_document(raw) for raw in raws]

    async def find_one(self, document_cls: type[T], filter: Mapping[str, Any], *, cancellation: asyncio.Event | None = None) -> T | None:
        collection = self.get_collection(document_cls)
        raw = await self._execute(f"find_one {document_cls.__name__}", lambda: collection.find_one(filter), cancellation)
        return document_cls.from_document(raw) if raw is not None else None

    async def exists(self, document_cls: type[Document], document_id: str, *, cancellation: asyncio.Event | None = None) -> bool:
        return await self.get(document_cls, document_id, cancellation=cancellation) is not None

    async def count(self, document_cls: type[Document], filter: Mapping[str, Any] | None = None, *, cancellation: asyncio.Event | None = None) -> int:
        collection = self.get_collection(document_cls)
        return await self._execute(f"count {document_cls.__name__}", lambda: collection.count_documents(filter or {}), cancellation)
    # endregion

    # region: Writes
    async def create(self, document_cls: type[T], document: T, *, cancellation: asyncio.Event | None = None) -> None:
        """ Inserts the document. A new unique _id is assigned to the document first if it has none.
        Inserting an _id which already exists raises StoreOperationError. """
        collection = self.get_collection(document_cls)
        self._check_instance(document_cls, document)
        document.assign_id_if_missing()
        raw = document.to_document()
        await self._execute(f"create {document_cls.__name__}", lambda: collection.insert_one(raw), cancellation)

    async def update(self, document_cls: type[T], document_id: str, document: T, *, cancellation: asyncio.Event | None = None) -> None:
        """ Replaces the stored document with this _id. The document's _id is set to document_id. """
        collection = self.get_collection(document_cls)
        self._check_instance(document_cls, document)
        document._id = document_id
        raw = document.to_document()
        await self._execute(f"update {document_cls.__name__}", lambda: collection.replace_one({"_id": document_id}, raw), cancellation)

    async def delete(self, document_cls: type[Document], document_id: str, *, cancellation: asyncio.Event | None = None) -> None:
        """ Succeeds even when no document has this _id. """
        collection = self.get_collection(document_cls)
        await self._execute(f"delete {document_cls.__name__}", lambda: collection.delete_one({"_id": document_id}), cancellation)

    async def find_one_and_replace(
            self,
            document_cls: type[T],
            filter: Mapping[str, Any],
            replacement: T,
            *,
            cancellation: asyncio.Event | None = None
        ) -> T | None:
        """ Replaces the first document matching the filter. Returns the document as it was before the replacement, or None if nothing matched. """
        collection = self.get_collection(document_cls)
        self._check_instance(document_cls, replacement)
        raw_replacement = replacement.to_document()
        if not replacement.has_id():
            # The stored document keeps its own _id
            del raw_replacement["_id"]
        raw = await self._execute(
            f"find_one_and_replace {document_cls.__name__}",
            lambda: collection.find_one_and_replace(filter, raw_replacement),
            cancellation
        )
        return document_cls.from_document(raw) if raw is not None else None
    # endregion

    # region: Batches
    # NOTE: Each batch is sent as a single store call, and is retried as a whole.
    async def create_many(self, document_cls: type[T], documents: Iterable[T], *, cancellation: asyncio.Event | None = None) -> None:
        collection = self.get_collection(document_cls)
        documents = list(documents)
        if not documents:
            return
        for document in documents:
            self._check_instance(document_cls, document)
            document.assign_id_if_missing()
        raws = [document.to_document() for document in documents]
        await self._execute(f"create_many {document_cls.__name__}", lambda: collection.insert_many(raws), cancellation)

    async def update_many(self, document_cls: type[T], documents: Iterable[T], *, cancellation: asyncio.Event | None = None) -> None:
        """ Replaces each stored document with the document which has the same _id. """
        collection = self.get_collection(document_cls)
        documents = list(documents)
        if not documents:
            return
        writes = []
        for document in documents:
            self._check_instance(document_cls, document)
            if not document.has_id():
                raise ValueError(f"Cannot update a {document_cls.__name__} which has no _id.")
            writes.append(ReplaceOne({"_id": document._id}, document.to_document()))
        await self._execute(f"update_many {document_cls.__name__}", lambda: collection.bulk_write(writes), cancellation)

    async def delete_many(self, document_cls: type[Document], document_ids: Iterable[str], *, cancellation: asyncio.Event | None = None) -> None:
        collection = self.get_collection(document_cls)
        document_ids = list(document_ids)
        await self._execute(f"delete_many {document_cls.__name__}", lambda: collection.delete_many({"_id": {"$in": document_ids}}), cancellation)
    # endregion

    async def create_index(self, document_cls: type[Document], field_name: str, unique: bool = False, *, cancellation: asyncio.Event | None = None) -> str:
        """ Creates an ascending index on the field. Returns the index name. """
        collection = self.get_collection(document_cls)
        return await self._execute(
            f"create_index {document_cls.__name__}.{field_name}",
            lambda: collection.create_index([(field_name, ASCENDING)], unique=unique),
            cancellation
        )

    @staticmethod
    def _check_instance(document_cls: type[Document], document: Any) -> None:
        if not isinstance(document, document_cls):
            raise TypeError(f"Expected an instance of {document_cls.__name__}, got {type(document).__name__}.")
