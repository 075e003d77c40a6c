from uuid import uuid4


class DocumentId(str):
	""" Used for a document's own _id field. Stored in MongoDB as a plain string. """
	def __new__(cls, _id: str | None = None):
		if not _id:
			_id = str(uuid4())
		instance = super().__new__(cls, _id)
		return instance

	@classmethod
	def generate(cls) -> 'DocumentId':
		""" Returns a new globally unique id. """
		return cls()
