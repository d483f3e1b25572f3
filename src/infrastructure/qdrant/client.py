"""Qdrant gateway implementation over the async REST client."""

from collections.abc import Awaitable, Callable
from typing import Any

import structlog
from pydantic import BaseModel
from qdrant_client import AsyncQdrantClient, models

from src.infrastructure.observability import get_tracer
from src.infrastructure.qdrant.exceptions import (
    QdrantConfigurationError,
    QdrantGatewayError,
)
from src.infrastructure.qdrant.protocol import PointId

logger = structlog.get_logger()
tracer = get_tracer(__name__)

# REST body keys that the Python client exposes under a different keyword
_CREATE_COLLECTION_KEYS = {
    "vectors": "vectors_config",
    "sparse_vectors": "sparse_vectors_config",
}
_UPDATE_COLLECTION_KEYS = {
    **_CREATE_COLLECTION_KEYS,
    "params": "collection_params",
}


def to_json(value: Any) -> Any:
    """Convert a client response into plain JSON-serializable data."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, list | tuple):
        return [to_json(item) for item in value]
    if isinstance(value, dict):
        return {key: to_json(item) for key, item in value.items()}
    return value


def _collection_kwargs(
    config: dict[str, Any], renames: dict[str, str]
) -> dict[str, Any]:
    if not isinstance(config, dict):
        raise TypeError(
            f"Collection config must be a JSON object, got {type(config).__name__}"
        )
    return {renames.get(key, key): value for key, value in config.items()}


def _to_filter(filter: dict[str, Any] | None) -> models.Filter | None:
    if filter is None:
        return None
    return models.Filter.model_validate(filter)


def _to_points(points: list[dict[str, Any]]) -> list[models.PointStruct]:
    if not isinstance(points, list):
        raise TypeError(f"Points must be a JSON array, got {type(points).__name__}")
    return [models.PointStruct.model_validate(point) for point in points]


class QdrantRestGateway:
    """Gateway forwarding node operations to a single AsyncQdrantClient.

    The client is created once per execution and shared by every item; the
    gateway never mutates it. Timeouts are the client's own.
    """

    PROVIDER_NAME = "qdrant"

    def __init__(self, client: AsyncQdrantClient) -> None:
        self._client = client

    async def _run(
        self,
        call: str,
        collection_name: str | None,
        request: Callable[[], Awaitable[Any]],
    ) -> Any:
        """Run one client call inside a span, translating failures."""
        with tracer.start_as_current_span(f"qdrant.{call}") as span:
            span.set_attribute("qdrant.provider", self.PROVIDER_NAME)
            if collection_name is not None:
                span.set_attribute("qdrant.collection", collection_name)

            try:
                result = await request()
            except Exception as e:
                span.record_exception(e)
                logger.error(
                    "qdrant_call_failed",
                    provider=self.PROVIDER_NAME,
                    call=call,
                    collection=collection_name,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise QdrantGatewayError(
                    f"Qdrant {call} failed: {e}",
                    provider=self.PROVIDER_NAME,
                ) from e

            logger.debug(
                "qdrant_call_success",
                provider=self.PROVIDER_NAME,
                call=call,
                collection=collection_name,
            )
            return result

    async def create_collection(
        self, collection_name: str, config: dict[str, Any]
    ) -> Any:
        """Create a collection from a REST-style config body."""
        return await self._run(
            "create_collection",
            collection_name,
            lambda: self._client.create_collection(
                collection_name=collection_name,
                **_collection_kwargs(config, _CREATE_COLLECTION_KEYS),
            ),
        )

    async def update_collection(
        self, collection_name: str, config: dict[str, Any]
    ) -> Any:
        """Update a collection from a REST-style config body."""
        return await self._run(
            "update_collection",
            collection_name,
            lambda: self._client.update_collection(
                collection_name=collection_name,
                **_collection_kwargs(config, _UPDATE_COLLECTION_KEYS),
            ),
        )

    async def delete_collection(self, collection_name: str) -> Any:
        """Delete a collection."""
        return await self._run(
            "delete_collection",
            collection_name,
            lambda: self._client.delete_collection(collection_name=collection_name),
        )

    async def list_collections(self) -> Any:
        """List all collections."""
        response = await self._run(
            "get_collections", None, self._client.get_collections
        )
        return to_json(response)

    async def get_collection(self, collection_name: str) -> Any:
        """Get a collection's details."""
        response = await self._run(
            "get_collection",
            collection_name,
            lambda: self._client.get_collection(collection_name=collection_name),
        )
        return to_json(response)

    async def count(
        self, collection_name: str, filter: dict[str, Any] | None = None
    ) -> Any:
        """Count points, optionally restricted by a filter."""
        response = await self._run(
            "count",
            collection_name,
            lambda: self._client.count(
                collection_name=collection_name,
                count_filter=_to_filter(filter),
                exact=True,
            ),
        )
        return to_json(response)

    async def retrieve(self, collection_name: str, ids: list[PointId]) -> Any:
        """Retrieve points by ID."""
        response = await self._run(
            "retrieve",
            collection_name,
            lambda: self._client.retrieve(collection_name=collection_name, ids=ids),
        )
        return to_json(response)

    async def delete(self, collection_name: str, ids: list[PointId]) -> Any:
        """Delete points by ID."""
        response = await self._run(
            "delete",
            collection_name,
            lambda: self._client.delete(
                collection_name=collection_name,
                points_selector=models.PointIdsList(points=ids),
            ),
        )
        return to_json(response)

    async def upsert(
        self, collection_name: str, points: list[dict[str, Any]]
    ) -> Any:
        """Insert or overwrite points."""
        response = await self._run(
            "upsert",
            collection_name,
            lambda: self._client.upsert(
                collection_name=collection_name,
                points=_to_points(points),
            ),
        )
        return to_json(response)

    async def search(
        self,
        collection_name: str,
        vector: list[float],
        *,
        filter: dict[str, Any] | None = None,
        limit: int,
    ) -> Any:
        """Run a nearest-neighbour query and return the ranked points."""
        response = await self._run(
            "query_points",
            collection_name,
            lambda: self._client.query_points(
                collection_name=collection_name,
                query=vector,
                query_filter=_to_filter(filter),
                limit=limit,
            ),
        )
        return to_json(response.points)

    async def close(self) -> None:
        """Close the underlying client."""
        await self._client.close()


def create_gateway(
    url: str,
    *,
    api_key: str | None = None,
    timeout_seconds: int = 30,
) -> QdrantRestGateway:
    """Build a gateway around a new AsyncQdrantClient.

    Args:
        url: Qdrant base URL, e.g. "http://localhost:6333".
        api_key: Optional API key for Qdrant Cloud or secured deployments.
        timeout_seconds: Request timeout applied by the client.

    Raises:
        QdrantConfigurationError: If the URL is missing or the client
            rejects the connection settings.
    """
    if not url:
        raise QdrantConfigurationError(
            "Qdrant URL is required", provider=QdrantRestGateway.PROVIDER_NAME
        )

    try:
        client = AsyncQdrantClient(url=url, api_key=api_key, timeout=timeout_seconds)
    except Exception as e:
        logger.error("qdrant_client_init_failed", url=url, error=str(e))
        raise QdrantConfigurationError(
            f"Failed to initialize Qdrant client: {e}",
            provider=QdrantRestGateway.PROVIDER_NAME,
        ) from e

    logger.info(
        "qdrant_client_initialized",
        provider=QdrantRestGateway.PROVIDER_NAME,
        url=url,
        authenticated=api_key is not None,
    )
    return QdrantRestGateway(client)
