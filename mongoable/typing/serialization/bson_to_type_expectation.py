from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, ForwardRef

from bson import Decimal128, Int64, ObjectId

from ..bsonable_dataclass.bsonable_dataclass import BsonableDataclass
from ..registration.type_expectation import TypeExpectation, SEQUENCE_TYPES
from ..registration.get_type_expectation_from_type_annotation import get_type_expectation_from_type_annotation


def bson_to_type_expectation(bson: Any, type_expectation: TypeExpectation, field_path: str | None = None) -> Any:
	""" Deserializes a bson value into the specified type expectation. """

	# Handle valid null cases
	if bson is None:
		if type_expectation.is_nullable:
			return None
		else:
			raise ValueError(f"Received None for type expectation {type_expectation} which is not nullable. Field: {field_path}")

	expected_type = type_expectation.type_info.type_

	### Once we have narrowed down to a single expected type, parse the value into this type. ###
	# Handle types from specific (complex) to general (simple)
	if issubclass(expected_type, BsonableDataclass):
		return expected_type.from_bson(bson)

	elif issubclass(expected_type, Enum):
		# Enums are stored by member name. Fall back to the value for data written by other clients.
		if isinstance(bson, str) and bson in expected_type.__members__:
			return expected_type[bson]
		try:
			return expected_type(bson)
		except ValueError:
			raise ValueError(f"'{bson}' is not a valid member of {expected_type.__name__}. Field: {field_path}")

	elif expected_type in SEQUENCE_TYPES:
		if not isinstance(bson, list):
			raise ValueError(f"{bson} not of the expected type list. Field: {field_path}")
		sub_type = type_expectation.type_info.sub_type
		if sub_type is None:
			return expected_type(bson)
		if isinstance(sub_type, ForwardRef):
			raise ValueError(f"The element type {sub_type.__forward_arg__} of {type_expectation} is not defined. Field: {field_path}")
		element_type_expectation = get_type_expectation_from_type_annotation(sub_type) # type: ignore
		return expected_type(
			bson_to_type_expectation(element, element_type_expectation, f"{field_path}[{idx}]")
			for idx, element in enumerate(bson)
		)

	elif expected_type is Decimal:
		if isinstance(bson, Decimal128):
			return bson.to_decimal()
		if isinstance(bson, bool) or not isinstance(bson, (int, float)):
			raise ValueError(f"{bson} not convertible to expected type Decimal. Field: {field_path}")
		return Decimal(str(bson))

	elif expected_type is Int64:
		if isinstance(bson, bool) or not isinstance(bson, int):
			raise ValueError(f"{bson} not of the expected type Int64. Field: {field_path}")
		return Int64(bson)

	elif expected_type is int:
		if isinstance(bson, bool) or not isinstance(bson, int):
			raise ValueError(f"{bson} not of the expected type int. Field: {field_path}")
		return int(bson)

	elif expected_type is float:
		if isinstance(bson, bool) or not isinstance(bson, (int, float)):
			raise ValueError(f"{bson} not convertible to expected type float. Field: {field_path}")
		return float(bson)

	elif expected_type in (str, bool, datetime, ObjectId, dict):
		if not isinstance(bson, expected_type):
			raise ValueError(f"{bson} not of the expected type {expected_type.__name__}. Field: {field_path}")
		return bson

	# str subclasses (like DocumentId)
	elif issubclass(expected_type, str):
		if not isinstance(bson, str):
			raise ValueError(f"{bson} not of the expected type {expected_type.__name__}. Field: {field_path}")
		return expected_type(bson)

	else:
		raise ValueError(f"Unable to deserialize unsupported expected type {expected_type}. Field: {field_path}")
