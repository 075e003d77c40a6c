from dataclasses import dataclass, field
from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from ..document.document import Document


@dataclass
class SchemaSynthesisResult:
    """ The outcome of synthesizing the validator of one Document class. """
    document_cls: 'type[Document]'
    collection_name: str
    validator: dict[str, Any]
    created: bool
    """ True if the collection was created, False if the validator of an existing collection was replaced. """
    registered: bool = True
    """ False if the class was already registered with the client, possibly to a different collection. """
    skipped_fields: list[str] = field(default_factory=list)
