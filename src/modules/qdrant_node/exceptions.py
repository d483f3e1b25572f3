"""Qdrant node exceptions."""


class OperationError(Exception):
    """Base exception for a failed item, tagged with its index."""

    def __init__(self, message: str, *, item_index: int) -> None:
        self.item_index = item_index
        super().__init__(message)


class OperationValidationError(OperationError):
    """Raised when a parameter is missing, blank or out of range."""


class UnsupportedOperationError(OperationValidationError):
    """Raised when the operation parameter names no known operation."""

    def __init__(self, operation: object, *, item_index: int) -> None:
        self.operation = operation
        super().__init__(f'Unsupported operation "{operation}"', item_index=item_index)


class RemoteCallError(OperationError):
    """Raised when parsing a JSON field or calling Qdrant fails.

    The failing exception is chained as ``__cause__`` and kept on ``cause``.
    For parse failures that is the ``json.JSONDecodeError`` itself. For
    Qdrant calls it is the gateway's ``QdrantGatewayError``, whose own
    ``__cause__`` holds the client exception.
    """

    def __init__(self, cause: BaseException, *, item_index: int) -> None:
        self.cause = cause
        super().__init__(str(cause) or type(cause).__name__, item_index=item_index)
