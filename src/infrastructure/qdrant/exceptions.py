"""Exceptions for the Qdrant gateway."""


class QdrantGatewayError(Exception):
    """Base exception for failed Qdrant calls."""

    def __init__(self, message: str, *, provider: str = "qdrant") -> None:
        self.provider = provider
        super().__init__(message)


class QdrantConfigurationError(QdrantGatewayError):
    """Raised when the client cannot be built from the given credentials."""
