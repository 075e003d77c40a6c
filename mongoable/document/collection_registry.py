import threading
from typing import Mapping, TYPE_CHECKING

from ..utilities.errors import ConfigurationError, MappingNotFoundError
from ..utilities.logger import logger

if TYPE_CHECKING:
    from .document import Document
    from .document_catalog import DocumentCatalog


class CollectionRegistry:
    """ A registry of which collection each Document class is stored in.

    Registration is first-write-wins: once a Document class is mapped to a collection, later registrations for the same class are no-ops.
    Several classes may share a collection (a subclass inheriting __collection_name__, for example). Safe to use from multiple threads.
    """

    def __init__(self) -> None:
        self._collection_names: dict[type['Document'], str] = {}
        # Collection name -> the first class registered to it
        self._first_types: dict[str, type['Document']] = {}
        self._lock = threading.Lock()

    def register(self, document_cls: type['Document'], collection_name: str) -> bool:
        """ Map the Document class to the collection. Returns True if a new mapping was added, False if the class was already registered. """
        if not collection_name:
            raise ConfigurationError(f"Collection name for {document_cls.__name__} cannot be empty.")

        with self._lock:
            if document_cls in self._collection_names:
                return False
            self._collection_names[document_cls] = collection_name
            self._first_types.setdefault(collection_name, document_cls)

        logger.info(f"Registered collection mapping: {document_cls.__name__} -> {collection_name}")
        return True

    def resolve(self, document_cls: type['Document']) -> str:
        """ Returns the collection name for the Document class. Raises MappingNotFoundError if the class was never registered. """
        collection_name = self._collection_names.get(document_cls)
        if collection_name is None:
            raise MappingNotFoundError(document_cls)
        return collection_name

    def is_registered(self, document_cls: type['Document']) -> bool:
        return document_cls in self._collection_names

    def lookup_type(self, collection_name: str) -> type['Document'] | None:
        """ Returns the first Document class registered to this collection, or None if there is none. """
        return self._first_types.get(collection_name)

    def mappings(self) -> dict[type['Document'], str]:
        """ Returns a snapshot of all registered mappings. """
        with self._lock:
            return dict(self._collection_names)

    def register_from_configuration(self, collections: Mapping[str, str], catalog: 'DocumentCatalog') -> list[str]:
        """ Registers each collection-name -> type-name entry of the configuration.

        Type names are matched against the names of the concrete classes in the catalog, ignoring case.
        Returns the collection names of entries which did not match any class in the catalog. These entries are skipped.
        """
        unmatched: list[str] = []
        for collection_name, type_name in collections.items():
            document_cls = catalog.find_by_name(type_name)
            if document_cls is None:
                unmatched.append(collection_name)
                continue
            self.register(document_cls, collection_name)
        return unmatched

    def __len__(self) -> int:
        return len(self._collection_names)

    def __contains__(self, document_cls: object) -> bool:
        return document_cls in self._collection_names
