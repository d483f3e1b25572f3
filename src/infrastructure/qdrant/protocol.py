"""Protocol definition for the Qdrant gateway."""

from typing import Any, Protocol

# Point identifiers are unsigned integers or UUID strings
PointId = int | str


class QdrantGateway(Protocol):
    """Outbound calls the node issues against a Qdrant service.

    Every method returns a JSON-serializable value. Implementations raise
    QdrantGatewayError when the call fails.
    """

    async def create_collection(
        self, collection_name: str, config: dict[str, Any]
    ) -> Any:
        """Create a collection from a REST-style config body."""
        ...

    async def update_collection(
        self, collection_name: str, config: dict[str, Any]
    ) -> Any:
        """Update collection parameters from a REST-style config body."""
        ...

    async def delete_collection(self, collection_name: str) -> Any:
        """Delete a collection."""
        ...

    async def list_collections(self) -> Any:
        """List all collections."""
        ...

    async def get_collection(self, collection_name: str) -> Any:
        """Fetch collection metadata."""
        ...

    async def count(
        self, collection_name: str, filter: dict[str, Any] | None = None
    ) -> Any:
        """Count points matching a filter, or all points when filter is None."""
        ...

    async def retrieve(self, collection_name: str, ids: list[PointId]) -> Any:
        """Retrieve points by ID."""
        ...

    async def delete(self, collection_name: str, ids: list[PointId]) -> Any:
        """Delete points by ID."""
        ...

    async def upsert(
        self, collection_name: str, points: list[dict[str, Any]]
    ) -> Any:
        """Insert or replace points keyed by ID."""
        ...

    async def search(
        self,
        collection_name: str,
        vector: list[float],
        *,
        filter: dict[str, Any] | None = None,
        limit: int,
    ) -> Any:
        """Similarity search returning ranked matches."""
        ...

    async def close(self) -> None:
        """Release the underlying connection."""
        ...
