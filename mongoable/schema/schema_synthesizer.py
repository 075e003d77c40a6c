from typing import TYPE_CHECKING

from .collection_name import get_collection_name
from .property_schema import build_object_schema
from .synthesis_result import SchemaSynthesisResult
from .validator_document import ValidatorDocument
from ..document.document import Document
from ..utilities.logger import logger

if TYPE_CHECKING:
    from ..document.document_catalog import DocumentCatalog
    from ..document.document_client import DocumentClient


VALIDATION_ACTION = "error"
VALIDATION_LEVEL = "strict"


class SchemaSynthesizer:
    """ Generates a validator for each Document class from its field schemas, pushes it to MongoDB, and registers the class with the client.

    The collection is created with the validator if it does not exist yet. Otherwise the validator of the existing collection is replaced
    with collMod. Either way, writes which do not match the validator are rejected (validationAction "error", validationLevel "strict").

    Synthesis is not retried, and driver errors are raised as is.
    """

    def __init__(self, client: 'DocumentClient') -> None:
        self.client = client

    def collection_name_for(self, document_cls: type[Document]) -> str:
        return get_collection_name(document_cls)

    def build_validator(self, document_cls: type[Document]) -> ValidatorDocument:
        if not isinstance(document_cls, type) or not issubclass(document_cls, Document):
            raise TypeError(f"Expected a Document class. Got {document_cls!r}.")
        return build_object_schema(document_cls)

    async def synthesize_for_type(self, document_cls: type[Document]) -> SchemaSynthesisResult:
        collection_name = self.collection_name_for(document_cls)
        validator_document = self.build_validator(document_cls)
        validator = validator_document.to_dict()
        for field_path in validator_document.skipped_fields:
            logger.warning(f"Field '{field_path}' of {document_cls.__name__} has no bson type. It is not included in the validator of '{collection_name}'.")

        registry = self.client.registry
        if registry.is_registered(document_cls) and registry.resolve(document_cls) != collection_name:
            logger.warning(
                f"{document_cls.__name__} is already registered to '{registry.resolve(document_cls)}'. "
                f"Its validator is pushed to '{collection_name}', but the client keeps using '{registry.resolve(document_cls)}'."
            )

        database = self.client.database
        existing_collection_names = await database.list_collection_names()
        if collection_name not in existing_collection_names:
            await database.create_collection(
                collection_name,
                validator=validator,
                validationAction=VALIDATION_ACTION,
                validationLevel=VALIDATION_LEVEL
            )
            created = True
            logger.info(f"Created collection '{collection_name}' with schema validation")
        else:
            await database.command({
                "collMod": collection_name,
                "validator": validator,
                "validationAction": VALIDATION_ACTION,
                "validationLevel": VALIDATION_LEVEL,
            })
            created = False
            logger.info(f"Updated schema validation for collection '{collection_name}'")

        registered = self.client.register_collection(document_cls, collection_name)

        return SchemaSynthesisResult(
            document_cls=document_cls,
            collection_name=collection_name,
            validator=validator,
            created=created,
            registered=registered,
            skipped_fields=list(validator_document.skipped_fields)
        )

    async def synthesize_for_catalog(self, catalog: 'DocumentCatalog | None' = None) -> list[SchemaSynthesisResult]:
        """ Synthesizes every non-abstract class of the catalog, in catalog order. Defaults to the catalog of the client. """
        if catalog is None:
            catalog = self.client.catalog

        results: list[SchemaSynthesisResult] = []
        for document_cls in catalog.concrete():
            results.append(await self.synthesize_for_type(document_cls))
        return results
