from collections.abc import Sequence
from typing import Iterable, Iterator, overload, TYPE_CHECKING

if TYPE_CHECKING:
	from .document import Document


class DocumentCatalog(Sequence['type[Document]']):
	""" The explicit list of Document classes an application works with.

	The catalog is supplied by the application (no runtime scan of loaded classes). It is used to resolve the type names in the
	collection map of a DocumentStoreConfiguration, and as the source of Document classes for SchemaSynthesizer.synthesize_for_catalog().
	"""

	def __init__(self, document_classes: 'Iterable[type[Document]]' = ()):
		self._document_classes: 'list[type[Document]]' = []
		for document_cls in document_classes:
			self.add(document_cls)

	def add(self, document_cls: 'type[Document]') -> None:
		""" Raises TypeError for anything but a Document class, and for classes already in the catalog. """
		from .document import Document
		if not isinstance(document_cls, type) or not issubclass(document_cls, Document):
			raise TypeError(f"DocumentCatalog only accepts Document classes. Got {document_cls!r}.")
		if document_cls in self._document_classes:
			raise TypeError(f"Document class {document_cls.__name__} is already in the catalog.")
		self._document_classes.append(document_cls)

	def find_by_name(self, cls_name: str) -> 'type[Document] | None':
		""" Case-insensitive lookup by class name among the concrete classes. Returns None when no class matches. """
		for document_cls in self.concrete():
			if document_cls.__name__.lower() == cls_name.lower():
				return document_cls
		return None

	def concrete(self) -> list['type[Document]']:
		""" Returns the Document classes which are stored in their own collection (skipping ABSTRACT ones), in catalog order. """
		return [document_cls for document_cls in self._document_classes if not document_cls.is_abstract()]

	@overload
	def __getitem__(self, index: int) -> 'type[Document]': ...

	@overload
	def __getitem__(self, index: slice) -> 'DocumentCatalog': ...

	def __getitem__(self, index: int | slice) -> 'type[Document] | DocumentCatalog':
		if isinstance(index, slice):
			return DocumentCatalog(self._document_classes[index])
		return self._document_classes[index]

	def __len__(self) -> int:
		return len(self._document_classes)

	def __iter__(self) -> 'Iterator[type[Document]]':
		return iter(self._document_classes)

	def __repr__(self) -> str:
		return f"DocumentCatalog([{', '.join(document_cls.__name__ for document_cls in self._document_classes)}])"
