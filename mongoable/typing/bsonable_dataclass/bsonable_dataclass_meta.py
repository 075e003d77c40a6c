from abc import ABCMeta
import inspect
from typing import Any, ClassVar, dataclass_transform, get_origin

from ..fields.schema_config import SchemaConfig, _SchemaConfig
from ..fields.field_schema import FieldSchema
from ..registration.get_type_expectation_from_type_annotation import get_type_expectation_from_type_annotation
from ..registration.resolve_forward_refs import get_type_namespace, resolve_forward_refs
from ...utilities.special_values import UNDEFINED


def _is_dunder(name: str) -> bool:
	return name.startswith("__") and name.endswith("__")


def _collect_field_annotations(cls: type) -> dict[str, Any]:
	""" Annotations of the class and all of its bases, fields of base classes first. Dunder names and ClassVars are not fields. """
	annotations: dict[str, Any] = {}
	namespace = get_type_namespace(cls)
	for base in reversed(cls.__mro__):
		if base is object:
			continue
		for field_name, annotation in inspect.get_annotations(base).items():
			# String annotations may name cls itself, which its module does not hold until the class statement completes
			if isinstance(annotation, str):
				annotation = eval(annotation, namespace, dict(vars(base)))
			annotations[field_name] = annotation

	return {
		field_name: annotation
		for field_name, annotation in annotations.items()
		if not _is_dunder(field_name) and get_origin(annotation) is not ClassVar
	}


def _get_field_config(cls: type, field_name: str) -> _SchemaConfig:
	""" The SchemaConfig declared for the field on the class or inherited from a parent class. A plain class value is the default. """
	declared = getattr(cls, field_name, UNDEFINED)
	if declared is UNDEFINED:
		return SchemaConfig()
	if isinstance(declared, _SchemaConfig):
		return declared
	# A parent class has already turned its declaration into a FieldSchema
	if isinstance(declared, FieldSchema):
		return declared.schema_config
	return SchemaConfig(default=declared)


def _build_field_schema(cls: type, field_name: str, annotation: Any) -> FieldSchema:
	type_expectation = get_type_expectation_from_type_annotation(annotation)
	field_config = _get_field_config(cls, field_name)

	if field_config.has_default():
		default = field_config.get_default()
		if not type_expectation.accepts(default):
			raise ValueError(f"Field '{cls.__name__}.{field_name}' has a default of {default!r}, which does not match its declared type '{type_expectation}'.")

	return FieldSchema(
		field_name=field_name,
		containing_cls=cls, #type: ignore
		type_expectation=type_expectation,
		configuration=field_config
	)


def _bsonable_init(self, *args: Any, **kwargs: Any) -> None:
	""" The __init__ of every BsonableDataclass.
	Fields are filled from positional args (kw_only fields excluded), then kwargs, then defaults, and each value is validated.
	Extra kwargs are stored on the object as loose fields. """
	cls_name = type(self).__name__
	fields: dict[str, FieldSchema] = type(self).__bsonable_fields__

	positional_field_names = [field_name for field_name, field_schema in fields.items() if not field_schema.schema_config.kw_only]
	if len(args) > len(positional_field_names):
		raise ValueError(f"Error creating instance of '{cls_name}'. Got {len(args)} positional arguments, but only {len(positional_field_names)} fields can be passed positionally.")
	positional_values = dict(zip(positional_field_names, args))

	for field_name, field_schema in fields.items():
		if field_name in positional_values:
			if field_name in kwargs:
				raise TypeError(f"Error creating instance of '{cls_name}'. Got multiple values for field '{field_name}'.")
			field_value = positional_values[field_name]
		elif field_name in kwargs:
			field_value = kwargs.pop(field_name)
		elif field_schema.schema_config.has_default():
			field_value = field_schema.schema_config.get_default()
		else:
			raise ValueError(f"Error creating instance of '{cls_name}'. Field '{field_name}' was not supplied.")

		field_schema.validate_field_value(field_value)
		setattr(self, field_name, field_value)

	for loose_field_name, loose_field_value in kwargs.items():
		setattr(self, loose_field_name, loose_field_value)

	self.__post_init__()


@dataclass_transform(field_specifiers=(SchemaConfig, ), kw_only_default=False)
class BsonableDataclassMeta(ABCMeta):
	"""Metaclass for BsonableDataclass that handles field registration and validation.

	Example usage:
		class Address(BsonableDataclass):
			# Plain default
			city: str = "Columbus"

			# Field with declared constraints
			zip_code: str = SchemaConfig(required=True, pattern=r"^[0-9]{5}$")

	For each annotated field, in declaration order (fields of parent classes first), the metaclass builds a FieldSchema from the
	annotation and the SchemaConfig. The FieldSchema replaces the class attribute and is registered in cls.__bsonable_fields__.
	"""

	def __new__(mcs, name, bases, namespace):
		new_cls = super().__new__(mcs, name, bases, namespace)

		bsonable_fields: dict[str, FieldSchema] = {}
		for field_name, annotation in _collect_field_annotations(new_cls).items():
			field_schema = _build_field_schema(new_cls, field_name, annotation)
			setattr(new_cls, field_name, field_schema)
			bsonable_fields[field_name] = field_schema

		new_cls.__bsonable_fields__ = bsonable_fields #type: ignore
		# Sequences of classes defined later in the module are resolved on first use
		resolve_forward_refs(new_cls) #type: ignore
		new_cls.__init__ = _bsonable_init #type: ignore
		return new_cls
