from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from bson import Int64, ObjectId

from .validator_document import ValidatorDocument
from ..typing.bsonable_dataclass.bsonable_dataclass import BsonableDataclass
from ..typing.fields.field_schema import FieldSchema
from ..typing.fields.schema_config import _SchemaConfig
from ..typing.registration.type_expectation import SEQUENCE_TYPES
from ..typing.registration.resolve_forward_refs import resolve_forward_refs


# Checked along the MRO of the declared type, so bool is found before int and Int64 before int.
BSON_TYPE_NAMES: dict[type, str] = {
	bool: "bool",
	Int64: "long",
	int: "int",
	float: "double",
	Decimal: "double",
	str: "string",
	datetime: "date",
	ObjectId: "objectId",
}


def build_object_schema(cls: type[BsonableDataclass], field_path: str = "", skipped_fields: list[str] | None = None, _visiting: tuple[type, ...] = ()) -> ValidatorDocument:
	"""
	Walks cls.__bsonable_fields__ in declaration order and adds a property for every field which has a bson type.
	Fields that cannot be described are recorded in skipped_fields by their dotted path, and are neither typed nor required.

	:param skipped_fields: Embedded objects share the skipped_fields list of the enclosing object.
	"""
	resolve_forward_refs(cls)
	validator = ValidatorDocument(skipped_fields=skipped_fields if skipped_fields is not None else [])
	_visiting = _visiting + (cls,)

	for field_name, field_schema in cls.__bsonable_fields__.items():
		path = f"{field_path}.{field_name}" if field_path else field_name
		property_schema = get_field_property_schema(field_schema, path, validator.skipped_fields, _visiting)
		if property_schema is None:
			validator.skip(path)
			continue
		validator.add_property(field_name, property_schema, required=field_schema.schema_config.required)

	return validator


def get_field_property_schema(field_schema: FieldSchema, field_path: str, skipped_fields: list[str], _visiting: tuple[type, ...] = ()) -> dict[str, Any] | None:
	""" The schema of a single field: the schema of its declared type, plus its declared constraints. Nullable fields also accept null. """
	type_info = field_schema.type_expectation.type_info
	property_schema = get_type_schema(type_info.type_, type_info.sub_type, field_path, skipped_fields, _visiting)
	if property_schema is None:
		return None

	_add_constraints(property_schema, field_schema.schema_config)
	if field_schema.type_expectation.is_nullable:
		_allow_null(property_schema)
	return property_schema


def get_type_schema(type_: Any, sub_type: Any, field_path: str, skipped_fields: list[str], _visiting: tuple[type, ...] = ()) -> dict[str, Any] | None:
	""" Returns None for types which have no bson equivalent. """
	if not isinstance(type_, type):
		return None

	if issubclass(type_, Enum):
		return {"enum": [member.name for member in type_]}

	if type_ in SEQUENCE_TYPES:
		array_schema: dict[str, Any] = {"bsonType": "array"}
		if sub_type is not None:
			items_schema = get_type_schema(sub_type, None, f"{field_path}[]", skipped_fields, _visiting)
			if items_schema is not None:
				array_schema["items"] = items_schema
		return array_schema

	if issubclass(type_, BsonableDataclass):
		# A class which contains itself (directly or through other classes) is not expanded again
		if type_ in _visiting:
			return {"bsonType": "object"}
		return build_object_schema(type_, field_path, skipped_fields, _visiting).to_dict()

	for base in type_.__mro__:
		bson_type_name = BSON_TYPE_NAMES.get(base)
		if bson_type_name is not None:
			return {"bsonType": bson_type_name}

	return None


def _add_constraints(property_schema: dict[str, Any], config: _SchemaConfig) -> None:
	bson_type_name = property_schema.get("bsonType")
	if bson_type_name == "string":
		if config.min_length is not None:
			property_schema["minLength"] = config.min_length
		if config.max_length is not None:
			property_schema["maxLength"] = config.max_length
		if config.pattern is not None:
			property_schema["pattern"] = config.pattern
	elif bson_type_name == "int":
		if config.minimum is not None:
			property_schema["minimum"] = config.minimum
		if config.maximum is not None:
			property_schema["maximum"] = config.maximum


def _allow_null(property_schema: dict[str, Any]) -> None:
	if "enum" in property_schema:
		property_schema["enum"] = [*property_schema["enum"], None]
		return
	bson_type_name = property_schema["bsonType"]
	property_schema["bsonType"] = [bson_type_name, "null"]
