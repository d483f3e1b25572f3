"""Qdrant gateway infrastructure.

The node talks to Qdrant only through the QdrantGateway protocol, which
keeps the dispatcher testable without a running server.
"""

from src.infrastructure.qdrant.client import QdrantRestGateway, create_gateway, to_json
from src.infrastructure.qdrant.exceptions import (
    QdrantConfigurationError,
    QdrantGatewayError,
)
from src.infrastructure.qdrant.protocol import PointId, QdrantGateway

__all__ = [
    "PointId",
    "QdrantConfigurationError",
    "QdrantGateway",
    "QdrantGatewayError",
    "QdrantRestGateway",
    "create_gateway",
    "to_json",
]
