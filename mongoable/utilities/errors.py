class DocumentStoreError(Exception):
    """ Base class for every error raised by mongoable. """

    def __init__(self, message: str, cause: BaseException | None = None):
        self.message = message
        self.cause = cause
        super().__init__(self.message)


class ConfigurationError(DocumentStoreError):
    """ Exception raised for configuration errors (missing connection settings, conflicting collection mappings). """


class StoreConnectionError(DocumentStoreError):
    """ Raised when the MongoDB client cannot be created. The driver error is stored in .cause. """


class MappingNotFoundError(DocumentStoreError):
    """ Raised when an operation is issued for a Document class that was never registered to a collection. """

    def __init__(self, document_cls: type):
        self.document_cls = document_cls
        super().__init__(f"Collection mapping not found for type {document_cls.__name__}. Please register the collection first.")


class TransientStoreError(DocumentStoreError):
    """ A connectivity fault that is likely to succeed on retry. The ResilientExecutor retries these. """


class StoreOperationError(DocumentStoreError):
    """ Any other failure reported by the store (validation rejection, duplicate key, command error). Never retried. """


class ValidationError(DocumentStoreError):
    """Exception raised when field validation fails.
    NOTE: Messages in these errors should be shareable to the user. """
