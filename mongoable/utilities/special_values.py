ABSTRACT = "ABSTRACT"
""" 
This keyword is used for Documents (__collection_name__) to indicate a base class
which is never stored in its own collection and is skipped during schema synthesis.
"""

AUTO = "AUTO_1234"
"""
This is used with Documents (__collection_name__) to derive the collection name from the class name.
(The lower-cased class name is pluralized, so User is stored in "users".)
"""


class Undefined:
	""" Type of UNDEFINED. Create no other instances. """
	__slots__ = ()

	def __repr__(self) -> str:
		return "UNDEFINED"

	def __bool__(self) -> bool:
		return False

	def __copy__(self) -> 'Undefined':
		return self

	def __deepcopy__(self, memo: dict) -> 'Undefined':
		return self


UNDEFINED = Undefined()
"""
Marks a SchemaConfig which has no default, as distinct from a default of None.
Compare with `is`.
"""
