import inflect

from ..utilities.special_values import ABSTRACT, AUTO
from ..utilities.errors import ConfigurationError
from typing import TYPE_CHECKING
if TYPE_CHECKING:
	from ..document.document import Document


_inflect_engine = inflect.engine()


def get_collection_name(document_cls: 'type[Document]') -> str:
	""" The explicit __collection_name__ of the class if it sets one, else the lower-cased, pluralized class name (User -> "users"). """
	if document_cls.is_abstract():
		raise ConfigurationError(f"{document_cls.__name__} is abstract and is not stored in a collection.")

	collection_name = getattr(document_cls, "__collection_name__", AUTO)
	if collection_name and collection_name not in (AUTO, ABSTRACT):
		return collection_name

	return _inflect_engine.plural(document_cls.__name__.lower())
