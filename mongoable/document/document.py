from typing import Any, ClassVar, Self

from ..typing.bsonable_dataclass.bsonable_dataclass import BsonableDataclass
from ..typing.fields.schema_config import SchemaConfig
from ..utilities.special_values import ABSTRACT, AUTO
from .document_id import DocumentId


class Document(BsonableDataclass):
	""" A BsonableDataclass that implements this class can be saved to MongoDB as a document.

	Retrieved objects will have the _id from the database. Newly created objects have an empty _id; the DocumentClient assigns a
	new globally unique _id on creation unless you specify one yourself.

	The collection is named after the class (User -> "users") unless __collection_name__ is set. Set __collection_name__ to ABSTRACT
	for base classes which are never stored themselves.
	"""
	# Class fields
	__collection_name__: ClassVar[str] = AUTO

	# Instance fields
	# Setting kw_only=True allows for subclasses to add other fields without the type checker complaining that non-default fields appear after default fields.
	_id: str = SchemaConfig(default="", kw_only=True)

	@classmethod
	def is_abstract(cls) -> bool:
		""" Abstract Documents do not map to a collection. Make sure to check the class attr (from __dict__), and not any inherited attributes. """
		return cls is Document or cls.__dict__.get("__collection_name__") == ABSTRACT

	def has_id(self) -> bool:
		return bool(self._id)

	def assign_id_if_missing(self) -> str:
		""" Assigns a new random id to itself when it does not have one. Returns the (possibly new) id. """
		if not self._id:
			self._id = DocumentId.generate()
		return self._id

	# region: Document <> Bson
	# NOTE: When converting a Python Document into a mongo document, use to_document and from_document. These wrap to_bson and from_bson.
	def to_document(self) -> dict[str, Any]:
		""" Returns the dict passed to the driver. The _id is always stored as a plain string. """
		document = self.to_bson()
		document["_id"] = str(self._id)
		return document

	@classmethod
	def from_document(cls, document: Any) -> Self:
		if not isinstance(document, dict):
			raise ValueError(f"Expected a dict from the database, received {type(document).__name__}.")
		if not document.get("_id"):
			raise ValueError(f"Document of type '{cls.__name__}' retrieved from the database has no _id.")

		obj = cls.from_bson(document)
		if not isinstance(obj, cls):
			raise ValueError(f"Expected document to be deserialized into {cls.__name__}. Instead, document was deserialized into {type(obj).__name__}")
		return obj
	# endregion
