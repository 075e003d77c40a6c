from dataclasses import dataclass
from typing import Any, ForwardRef


SEQUENCE_TYPES = (list, tuple, set, frozenset)


def _type_name(type_: Any) -> str:
	# ForwardRefs and typing special forms have no __name__
	return type_.__name__ if isinstance(type_, type) else str(type_)


@dataclass(frozen=True)
class TypeInfo:
	""" A single declared type. For sequences, the element type is stored in sub_type.
	For example list[str] will produce: type_ = list, sub_type = str
	"""
	type_: type
	sub_type: type | ForwardRef | None = None

	@property
	def is_sequence(self) -> bool:
		return self.type_ in SEQUENCE_TYPES

	def __str__(self) -> str:
		if self.sub_type is None:
			return _type_name(self.type_)
		return f"{_type_name(self.type_)}[{_type_name(self.sub_type)}]"


@dataclass(frozen=True)
class TypeExpectation:
	""" The declared type of a field, and whether the field accepts None. """
	type_info: TypeInfo
	is_nullable: bool = False

	def __str__(self) -> str:
		return f"{self.type_info} | None" if self.is_nullable else str(self.type_info)

	def validate(self, value: Any, field_name: str | None = None) -> None:
		""" Raises ValueError if the value does not match this TypeExpectation. """
		if not self.accepts(value):
			raise ValueError(f"Value {value!r} does not match the declared type '{self}'. Field: {field_name}")

	def accepts(self, value: Any) -> bool:
		if value is None:
			return self.is_nullable

		expected_type = self.type_info.type_
		if not isinstance(value, expected_type):
			return False

		# bool is a subclass of int, but a bool is only accepted by bool fields
		if isinstance(value, bool) and expected_type is not bool:
			return False

		if self.type_info.is_sequence and isinstance(self.type_info.sub_type, type):
			element_type = self.type_info.sub_type
			return all(isinstance(element, element_type) and not (isinstance(element, bool) and element_type is not bool) for element in value)

		return True
