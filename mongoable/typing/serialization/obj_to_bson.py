from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from bson import Int64, ObjectId

from ..bsonable_dataclass.bsonable_dataclass import BsonableDataclass


PRIMITIVES = (str, int, float, bool, datetime, Int64, ObjectId)
""" Types which the MongoDB driver encodes natively. """

SEQUENCES = (list, tuple, set, frozenset)


def obj_to_bson(obj: Any) -> Any:
	"""
	Serializes Python object into Bson.
	"""

	# Handle types from specific (complex) to general (simple)
	if obj is None:
		return None

	elif isinstance(obj, BsonableDataclass):
		return obj.to_bson()

	# Enums are stored by member name, which is what the collection validator's "enum" lists
	elif isinstance(obj, Enum):
		return obj.name

	# Decimals are stored as doubles
	elif isinstance(obj, Decimal):
		return float(obj)

	# Catch primitives based on an exact type match. This should not allow for inheritance.
	elif type(obj) in PRIMITIVES:
		return obj

	elif type(obj) is dict:
		return { str(key): obj_to_bson(value) for key, value in obj.items() }

	elif type(obj) in SEQUENCES:
		return [obj_to_bson(item) for item in obj]

	# str subclasses (like DocumentId) are stored as plain strings
	elif isinstance(obj, str):
		return str(obj)

	else:
		raise TypeError(f"Type {type(obj)} not serializable.")
