from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from .schema_config import _SchemaConfig
from ...utilities.errors import ValidationError
if TYPE_CHECKING:
    from ..bsonable_dataclass.bsonable_dataclass import BsonableDataclass
    from ..registration.type_expectation import TypeExpectation


class FieldSchema:
    """ Stores the schema for the field: its declared type and its declared constraints. """
    def __init__(self,
                 field_name: str,
                 containing_cls: type[BsonableDataclass],
                 type_expectation: TypeExpectation,
                 configuration: _SchemaConfig
                ) -> None:
        self.field_name = field_name
        self.containing_cls = containing_cls
        self.type_expectation = type_expectation
        self.schema_config = configuration

    def __repr__(self) -> str:
        return f"FieldSchema({self.containing_cls.__name__}.{self.field_name}: {self.type_expectation})"

    def validate_field_value(self, field_value: Any) -> None:
        """ Validates the field value first against the type expectation, then against the declared constraints, then against the validation func, if any.
        These should raise a ValidationError with a client-shareable error mesage. """

        # Validate against type expectation
        self.type_expectation.validate(field_value, self.field_name)

        # Validate against declared constraints
        self._validate_constraints(field_value)

        # Validate against validation func
        if self.schema_config.validation_func is not None:
            self.schema_config.validation_func(field_value)

    def _validate_constraints(self, field_value: Any) -> None:
        config = self.schema_config
        if field_value is None:
            if config.required:
                raise ValidationError(f"Field '{self.field_name}' is required.")
            return

        if isinstance(field_value, str):
            if config.required and not field_value:
                raise ValidationError(f"Field '{self.field_name}' is required.")
            if config.min_length is not None and len(field_value) < config.min_length:
                raise ValidationError(f"Field '{self.field_name}' must be at least {config.min_length} characters long.")
            if config.max_length is not None and len(field_value) > config.max_length:
                raise ValidationError(f"Field '{self.field_name}' must be at most {config.max_length} characters long.")
            if config.pattern is not None and not re.search(config.pattern, field_value):
                raise ValidationError(f"Field '{self.field_name}' does not match the pattern '{config.pattern}'.")

        elif isinstance(field_value, int) and not isinstance(field_value, bool):
            if config.minimum is not None and field_value < config.minimum:
                raise ValidationError(f"Field '{self.field_name}' must be at least {config.minimum}.")
            if config.maximum is not None and field_value > config.maximum:
                raise ValidationError(f"Field '{self.field_name}' must be at most {config.maximum}.")
