from dataclasses import dataclass
from typing import Any, Callable

from ...utilities.special_values import Undefined, UNDEFINED


@dataclass(frozen=True)
class _SchemaConfig:
    """ Do not instantiate this directly. Use SchemaConfig() instead. """
    default_value: Any | Undefined = UNDEFINED
    default_factory: Callable[[], Any] | None = None
    kw_only: bool = False
    validation_func: Callable[[Any], None] | None = None
    """ Called with the field value after the type and the declared constraints have been checked. Raise ValidationError to reject it. """

    # Declared constraints. These are enforced when instances are created and are
    # written into the collection validator by the SchemaSynthesizer.
    required: bool = False
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    minimum: int | None = None
    maximum: int | None = None

    def __post_init__(self) -> None:
        if self.default_value is not UNDEFINED and self.default_factory is not None:
            raise ValueError("Cannot specify both default and default_factory.")
        if None not in (self.min_length, self.max_length) and self.min_length > self.max_length: # type: ignore
            raise ValueError(f"min_length ({self.min_length}) cannot be greater than max_length ({self.max_length}).")
        if None not in (self.minimum, self.maximum) and self.minimum > self.maximum: # type: ignore
            raise ValueError(f"minimum ({self.minimum}) cannot be greater than maximum ({self.maximum}).")

    def has_default(self) -> bool:
        return self.default_value is not UNDEFINED or self.default_factory is not None

    def get_default(self) -> Any:
        """ A factory is called for every new instance, so mutable defaults are not shared. """
        if self.default_value is not UNDEFINED:
            return self.default_value
        if self.default_factory is not None:
            return self.default_factory()
        raise ValueError("No default value set.")


def SchemaConfig(
        # dataclass_transform treats default, default_factory and kw_only of a field specifier specially
        *,
        default: Any | Undefined = UNDEFINED,
        default_factory: Callable[[], Any] | None = None,
        kw_only: bool = False,
        validation_func: Callable[[Any], None] | None = None,
        required: bool = False,
        min_length: int | None = None,
        max_length: int | None = None,
        pattern: str | None = None,
        minimum: int | None = None,
        maximum: int | None = None
    ) -> Any:
    """ Declares the default and the constraints of a BsonableDataclass or Document field.

    Example:
        class User(Document):
            name: str = SchemaConfig(required=True, max_length=50)
            age: int = SchemaConfig(default=0, minimum=0, maximum=150)

    required rejects None and the empty string. min_length, max_length and pattern (re.search) apply to str values.
    minimum and maximum apply to int values.

    The return type is Any so that type checkers accept `name: str = SchemaConfig(...)`. """
    return _SchemaConfig(
        default_value=default,
        default_factory=default_factory,
        kw_only=kw_only,
        validation_func=validation_func,
        required=required,
        min_length=min_length,
        max_length=max_length,
        pattern=pattern,
        minimum=minimum,
        maximum=maximum
    )
