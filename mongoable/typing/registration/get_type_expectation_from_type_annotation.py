from types import UnionType
from typing import Annotated, Any, ClassVar, ForwardRef, Union, get_args, get_origin

from .type_expectation import TypeExpectation, TypeInfo


def _strip_annotated(annotation: Any) -> Any:
	""" Annotated[list[str], ...] -> list[str] """
	while get_origin(annotation) is Annotated:
		annotation = get_args(annotation)[0]
	return annotation


def _element_type(arg: Any) -> Any:
	""" list["Category"] keeps "Category" as a str. It becomes a ForwardRef, which resolve_forward_refs() evaluates later. """
	return ForwardRef(arg) if isinstance(arg, str) else arg


def get_type_info(annotation: Any) -> TypeInfo:
	""" The TypeInfo of a single (non-Union) annotation. """
	annotation = _strip_annotated(annotation)
	origin = get_origin(annotation)
	args = get_args(annotation)

	if origin is None:
		return TypeInfo(type_=annotation)

	if origin in (Union, UnionType):
		raise ValueError(f"Expected a single type, got the union {annotation}.")

	if origin is ClassVar:
		return get_type_info(args[0])

	# Key and value types of dicts are not tracked
	if origin is dict:
		return TypeInfo(type_=dict)

	# tuple[int, ...] is a homogeneous sequence of int
	if origin is tuple:
		element_types = {arg for arg in args if arg is not Ellipsis}
		if len(element_types) != 1:
			raise ValueError(f"Only homogeneous tuple annotations are supported. Got {annotation}.")
		return TypeInfo(type_=tuple, sub_type=_element_type(element_types.pop()))

	# list, set, frozenset and other generics with one type parameter
	if len(args) != 1:
		raise ValueError(f"Expected exactly one type argument for {annotation}.")
	return TypeInfo(type_=origin, sub_type=_element_type(args[0]))


def get_type_expectation_from_type_annotation(type_annotation: Any) -> TypeExpectation:
	"""	Interprets a field annotation. The only supported union is a nullable type, `X | None` (or Optional[X]). """
	type_annotation = _strip_annotated(type_annotation)

	if get_origin(type_annotation) not in (Union, UnionType):
		return TypeExpectation(type_info=get_type_info(type_annotation), is_nullable=False)

	members = get_args(type_annotation)
	non_none_members = [member for member in members if member is not type(None)]
	if len(members) != 2 or len(non_none_members) != 1:
		raise NotImplementedError(f"Unsupported union annotation {type_annotation}. Only `X | None` is supported.")

	return TypeExpectation(type_info=get_type_info(non_none_members[0]), is_nullable=True)
