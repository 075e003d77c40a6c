from contextlib import contextmanager
from typing import Iterator

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import ConnectionFailure, PyMongoError

from ..utilities.errors import StoreOperationError, TransientStoreError


def create_mongo_db(connection_string: str, database_name: str) -> AsyncDatabase:
    """ Creates the async MongoDB client and returns the database handle.
    The driver connects lazily, so only malformed connection strings and invalid options fail here. """
    mongo_client: AsyncMongoClient = AsyncMongoClient(connection_string)
    return mongo_client[database_name]


def is_transient_fault(exception: BaseException) -> bool:
    """ The closed set of failures which are worth retrying: connectivity faults.
    ConnectionFailure covers AutoReconnect, NetworkTimeout and ServerSelectionTimeoutError. """
    return isinstance(exception, (TransientStoreError, ConnectionFailure))


@contextmanager
def translate_store_errors(operation_name: str) -> Iterator[None]:
    """ Converts driver exceptions raised within the block into TransientStoreError or StoreOperationError.
    The driver exception is kept as __cause__ and as .cause. """
    try:
        yield
    except ConnectionFailure as e:
        raise TransientStoreError(f"{operation_name} failed due to a connectivity fault: {e}", e) from e
    except PyMongoError as e:
        raise StoreOperationError(f"{operation_name} failed: {e}", e) from e
