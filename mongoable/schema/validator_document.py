from dataclasses import dataclass, field
from typing import Any


@dataclass
class ValidatorDocument:
	""" Builds the validator which MongoDB enforces on every write to a collection:
		{"bsonType": "object", "required": [...], "properties": {...}}

	required keeps the order in which fields were added. skipped_fields lists the fields which have no schema (they are not validated by the store).
	"""
	required: list[str] = field(default_factory=list)
	properties: dict[str, dict[str, Any]] = field(default_factory=dict)
	skipped_fields: list[str] = field(default_factory=list)

	def add_property(self, field_name: str, property_schema: dict[str, Any], required: bool = False) -> None:
		if field_name in self.properties:
			raise ValueError(f"Property '{field_name}' was already added to the validator.")
		self.properties[field_name] = property_schema
		if required:
			self.required.append(field_name)

	def skip(self, field_path: str) -> None:
		self.skipped_fields.append(field_path)

	def to_dict(self) -> dict[str, Any]:
		""" The wire format. skipped_fields is not part of it. """
		return {
			"bsonType": "object",
			"required": list(self.required),
			"properties": {field_name: dict(property_schema) for field_name, property_schema in self.properties.items()}
		}
