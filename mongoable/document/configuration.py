import json
import os
from dataclasses import dataclass, field
from typing import Self

from ..utilities.errors import ConfigurationError


@dataclass
class DocumentStoreConfiguration:
    """ Connection settings and the collection map used by the DocumentClient.

    collections maps a collection name to the (case-insensitive) class name of the Document stored in it. The class is looked up in
    the DocumentCatalog passed to the client.
    """
    connection_string: str
    database_name: str
    collections: dict[str, str] = field(default_factory=dict)

    def validate(self) -> None:
        if not self.connection_string:
            raise ConfigurationError("MongoDB connection string is not configured.")
        if not self.database_name:
            raise ConfigurationError("MongoDB database name is not configured.")

    @classmethod
    def from_env(cls) -> Self:
        """ Reads MONGO_URL, MONGO_DB_NAME and the optional MONGO_COLLECTIONS (a JSON object of collection name -> type name). """
        collections_json = os.environ.get("MONGO_COLLECTIONS", "")
        collections: dict[str, str] = {}
        if collections_json:
            try:
                collections = json.loads(collections_json)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"MONGO_COLLECTIONS is not valid JSON: {e}", e) from e
            if not isinstance(collections, dict) or not all(isinstance(k, str) and isinstance(v, str) for k, v in collections.items()):
                raise ConfigurationError("MONGO_COLLECTIONS must be a JSON object mapping collection names to type names.")

        return cls(
            connection_string=os.environ.get("MONGO_URL", ""),
            database_name=os.environ.get("MONGO_DB_NAME", ""),
            collections=collections
        )
