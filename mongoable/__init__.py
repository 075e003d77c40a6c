"""
mongoable: typed document access for MongoDB.

- Declare Document classes with annotated fields and SchemaConfig constraints
- DocumentClient: typed CRUD operations, retried on connectivity faults
- SchemaSynthesizer: pushes a validator generated from each Document class to its collection
"""

from .document.collection_registry import CollectionRegistry
from .document.configuration import DocumentStoreConfiguration
from .document.document import Document
from .document.document_catalog import DocumentCatalog
from .document.document_client import DocumentClient
from .document.document_id import DocumentId
from .document.mongo_db import is_transient_fault
from .document.resilient_executor import ResilientExecutor, RetryPolicy
from .schema import SchemaSynthesisResult, SchemaSynthesizer, ValidatorDocument
from .typing import BsonableDataclass, SchemaConfig
from .utilities.errors import (
    ConfigurationError,
    DocumentStoreError,
    MappingNotFoundError,
    StoreConnectionError,
    StoreOperationError,
    TransientStoreError,
    ValidationError,
)
from .utilities.special_values import ABSTRACT, AUTO
