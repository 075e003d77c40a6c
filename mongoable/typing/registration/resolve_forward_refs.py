import sys
from typing import Any, ForwardRef, TYPE_CHECKING

from .type_expectation import TypeExpectation, TypeInfo
from ...utilities.logger import logger
if TYPE_CHECKING:
	from ..bsonable_dataclass.bsonable_dataclass import BsonableDataclass


def get_type_namespace(cls: type) -> dict[str, Any]:
	""" The names the annotations of cls can refer to: the globals of the modules of cls and its bases, and the classes themselves.
	The class being created is not in its module yet, so it is added by name. """
	namespace: dict[str, Any] = {}
	for base in reversed(cls.__mro__):
		if base is object:
			continue
		module = sys.modules.get(base.__module__)
		if module is not None:
			namespace.update(vars(module))
		namespace[base.__name__] = base
	return namespace


def resolve_forward_refs(bsonable_cls: 'type[BsonableDataclass]') -> bool:
	""" Evaluates the forward references left in the element types of sequence fields, like list["Category"], and updates the field
	schemas in __bsonable_fields__. References to classes which do not exist yet are left as they are.

	Returns True if no forward reference is left. """
	namespace: dict[str, Any] | None = None
	resolved = True
	for field_name, field_schema in bsonable_cls.__bsonable_fields__.items():
		type_expectation = field_schema.type_expectation
		sub_type = type_expectation.type_info.sub_type
		if not isinstance(sub_type, ForwardRef):
			continue

		if namespace is None:
			namespace = get_type_namespace(bsonable_cls)
		try:
			evaluated_type = eval(sub_type.__forward_arg__, namespace)
		except NameError:
			resolved = False
			continue

		field_schema.type_expectation = TypeExpectation(
			type_info=TypeInfo(type_=type_expectation.type_info.type_, sub_type=evaluated_type),
			is_nullable=type_expectation.is_nullable
		)
		logger.debug(f"Evaluated ForwardRef {bsonable_cls.__name__}.{field_name} to {field_schema.type_expectation}.")

	return resolved
