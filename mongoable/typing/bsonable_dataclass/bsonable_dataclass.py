from abc import ABC
from typing import Any, ClassVar, Self

from .bsonable_dataclass_meta import BsonableDataclassMeta
from ..fields.field_schema import FieldSchema
from ...utilities.logger import logger


class BsonableDataclass(ABC, metaclass=BsonableDataclassMeta):
	""" A dataclass which can be converted to and from the bson dicts exchanged with the MongoDB driver.

	Attributes which are not declared fields ("loose fields") are kept: they come from extra keyword arguments, or from keys in the
	bson that the class does not declare. They are written back by to_bson(), so data written by newer code is not lost.
	"""
	__bsonable_fields__: ClassVar[dict[str, FieldSchema]]
	""" Field name -> FieldSchema, in declaration order. Set by BsonableDataclassMeta. """

	def __repr__(self) -> str:
		fields = ", ".join(f"{field_name}={field_value!r}" for field_name, field_value in vars(self).items())
		return f"{type(self).__name__}({fields})"

	def __eq__(self, other: object) -> bool:
		if type(other) is not type(self):
			return NotImplemented
		return vars(self) == vars(other)

	def __post_init__(self) -> None:
		""" Runs at the end of __init__. Override to validate across fields. """

	def loose_fields(self) -> dict[str, Any]:
		declared = type(self).__bsonable_fields__
		return {key: value for key, value in vars(self).items() if key not in declared and not key.startswith("__")}

	def to_bson(self) -> dict[str, Any]:
		""" Declared fields in declaration order, followed by loose fields. """
		from ..serialization.obj_to_bson import obj_to_bson

		bson = {field_name: obj_to_bson(getattr(self, field_name)) for field_name in type(self).__bsonable_fields__}
		for key, value in self.loose_fields().items():
			bson[key] = obj_to_bson(value)
		return bson

	@classmethod
	def from_bson(cls, bson: Any) -> Self:
		""" Instantiate this BsonableDataclass from a bson dict returned by the driver. Fields missing from the bson get their default. """
		from ..serialization.bson_to_type_expectation import bson_to_type_expectation
		from ..registration.resolve_forward_refs import resolve_forward_refs

		if not isinstance(bson, dict):
			raise ValueError(f"Error converting bson to object of type {cls.__name__}. Expected a dict, received {type(bson).__name__}.")
		resolve_forward_refs(cls)

		kwargs: dict[str, Any] = {}
		for field_name, field_schema in cls.__bsonable_fields__.items():
			if field_name in bson:
				kwargs[field_name] = bson_to_type_expectation(bson[field_name], field_schema.type_expectation, f"{cls.__name__}.{field_name}")
			elif field_schema.schema_config.has_default():
				logger.debug(f"{cls.__name__}.{field_name} is missing from the bson. Using its default.")
			else:
				raise ValueError(f"Error converting bson to object of type {cls.__name__}. Bson missing a value for field {field_name}.")

		for key, value in bson.items():
			if key not in cls.__bsonable_fields__:
				kwargs[key] = value

		return cls(**kwargs)
