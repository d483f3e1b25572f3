"""Operation dispatcher: one Qdrant call per input item."""

from collections.abc import Sequence
from typing import Any, assert_never

import structlog

from src.infrastructure.observability import add_span_attributes, traced
from src.infrastructure.qdrant import QdrantGateway
from src.modules.qdrant_node.context import ParameterSource
from src.modules.qdrant_node.description import render_subtitle
from src.modules.qdrant_node.exceptions import (
    OperationValidationError,
    RemoteCallError,
    UnsupportedOperationError,
)
from src.modules.qdrant_node.fields import (
    is_blank,
    json_field,
    normalize,
    parse_optional,
)
from src.modules.qdrant_node.operations import (
    CountPoints,
    CreateCollection,
    DeleteCollection,
    DeletePoints,
    GetCollection,
    GetPoints,
    ListCollections,
    Operation,
    OperationRequest,
    SearchPoints,
    UpdateCollection,
    UpdatePoints,
    UpsertPoints,
)
from src.modules.qdrant_node.schemas import OutputItem

logger = structlog.get_logger()


class OperationDispatcher:
    """Maps each item's (operation, parameters) pair to one gateway call.

    Items are processed strictly in order, one awaited call at a time. The
    first failing item aborts the run: nothing after it is dispatched.

    Failures are classified as:
    - OperationValidationError: a required parameter is missing or invalid.
    - RemoteCallError: JSON parsing or the Qdrant call itself failed; the
      original exception is chained as the cause.
    """

    def __init__(
        self,
        gateway: QdrantGateway,
        *,
        default_limit: int = 50,
        max_limit: int | None = None,
        collapse_validation_errors: bool = False,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            gateway: Shared gateway, built once per execution.
            default_limit: Search limit used when the parameter is unset.
            max_limit: Optional upper bound for the search limit.
            collapse_validation_errors: Re-raise validation failures as
                RemoteCallError instead of keeping them distinct.
        """
        self._gateway = gateway
        self._default_limit = default_limit
        self._max_limit = max_limit
        self._collapse_validation_errors = collapse_validation_errors

    @traced(span_name="qdrant_node.run")
    async def run(
        self, items: Sequence[Any], parameters: ParameterSource
    ) -> list[OutputItem]:
        """Process all items in order and return one output per item."""
        results: list[OutputItem] = []
        for item_index in range(len(items)):
            results.append(await self.run_item(item_index, parameters))
            add_span_attributes({"qdrant_node.items_processed": len(results)})
        return results

    async def run_item(
        self, item_index: int, parameters: ParameterSource
    ) -> OutputItem:
        """Resolve, validate and dispatch a single item."""
        operation = parameters.get_node_parameter("operation", item_index)
        collection_name = parameters.get_node_parameter("collectionName", item_index)
        log = logger.bind(
            item_index=item_index,
            step=render_subtitle(
                str(getattr(operation, "value", operation)), str(collection_name)
            ),
        )

        try:
            request = self.build_request(
                item_index, operation, collection_name, parameters
            )
            payload = await self.dispatch(request)
        except OperationValidationError as e:
            log.warning("qdrant_node_validation_failed", error=str(e))
            if self._collapse_validation_errors:
                raise RemoteCallError(e, item_index=item_index) from e
            raise
        except Exception as e:
            log.error(
                "qdrant_node_call_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise RemoteCallError(e, item_index=item_index) from e

        log.debug("qdrant_node_item_processed")
        return OutputItem(payload=payload, item_index=item_index)

    def build_request(
        self,
        item_index: int,
        operation: Any,
        collection_name: Any,
        parameters: ParameterSource,
    ) -> OperationRequest:
        """Build the request variant for one item.

        Raises:
            OperationValidationError: If a required field is missing or the
                limit is out of range.
            UnsupportedOperationError: If the operation is unknown.
            json.JSONDecodeError: If a JSON field holds malformed text.
        """
        if not collection_name:
            raise OperationValidationError(
                "Collection Name is required", item_index=item_index
            )

        try:
            op = Operation(operation)
        except ValueError:
            raise UnsupportedOperationError(operation, item_index=item_index) from None

        def required(name: str, label: str) -> Any:
            field = json_field(parameters.get_node_parameter(name, item_index))
            if field is None:
                raise OperationValidationError(
                    f"{label} for {op.value}", item_index=item_index
                )
            return normalize(field)

        def optional(name: str) -> Any:
            return parse_optional(parameters.get_node_parameter(name, item_index))

        match op:
            case Operation.CREATE_COLLECTION:
                return CreateCollection(
                    collection_name,
                    required("collectionConfig", "Collection Config is required"),
                )
            case Operation.UPDATE_COLLECTION:
                return UpdateCollection(
                    collection_name,
                    required("collectionConfig", "Collection Config is required"),
                )
            case Operation.DELETE_COLLECTION:
                return DeleteCollection(collection_name)
            case Operation.LIST_COLLECTIONS:
                return ListCollections(collection_name)
            case Operation.GET_COLLECTION:
                return GetCollection(collection_name)
            case Operation.COUNT_POINTS:
                return CountPoints(collection_name, filter=optional("filter"))
            case Operation.GET_POINTS:
                return GetPoints(
                    collection_name, required("pointIds", "Point IDs are required")
                )
            case Operation.DELETE_POINTS:
                return DeletePoints(
                    collection_name, required("pointIds", "Point IDs are required")
                )
            case Operation.UPSERT_POINTS:
                return UpsertPoints(
                    collection_name, required("points", "Points are required")
                )
            case Operation.UPDATE_POINTS:
                return UpdatePoints(
                    collection_name, required("points", "Points are required")
                )
            case Operation.SEARCH_POINTS:
                vector_field = json_field(
                    parameters.get_node_parameter("searchVector", item_index)
                )
                if vector_field is None:
                    raise OperationValidationError(
                        "Search Vector is required for searchPoints",
                        item_index=item_index,
                    )
                limit = self._resolve_limit(
                    parameters.get_node_parameter("limit", item_index), item_index
                )
                return SearchPoints(
                    collection_name,
                    vector=normalize(vector_field),
                    limit=limit,
                    filter=optional("filter"),
                )
            case _:
                assert_never(op)

    async def dispatch(self, request: OperationRequest) -> Any:
        """Issue the single gateway call for a request and return its payload."""
        gateway = self._gateway
        match request:
            case CreateCollection(collection_name=name, config=config):
                return await gateway.create_collection(name, config)
            case UpdateCollection(collection_name=name, config=config):
                return await gateway.update_collection(name, config)
            case DeleteCollection(collection_name=name):
                await gateway.delete_collection(name)
                return {"success": True}
            case ListCollections():
                return await gateway.list_collections()
            case GetCollection(collection_name=name):
                return await gateway.get_collection(name)
            case CountPoints(collection_name=name, filter=count_filter):
                return await gateway.count(name, count_filter)
            case GetPoints(collection_name=name, ids=ids):
                return await gateway.retrieve(name, ids)
            case DeletePoints(collection_name=name, ids=ids):
                return await gateway.delete(name, ids)
            case UpsertPoints(collection_name=name, points=points) | UpdatePoints(
                collection_name=name, points=points
            ):
                return await gateway.upsert(name, points)
            case SearchPoints(collection_name=name, vector=vector, limit=limit):
                return await gateway.search(
                    name, vector, filter=request.filter, limit=limit
                )
            case _:
                assert_never(request)

    def _resolve_limit(self, value: Any, item_index: int) -> int:
        if is_blank(value):
            return self._default_limit

        limit = _as_int(value)
        if limit is None:
            raise OperationValidationError(
                f"Limit must be a whole number for searchPoints, got {value!r}",
                item_index=item_index,
            )
        if limit < 1:
            raise OperationValidationError(
                "Limit must be at least 1 for searchPoints", item_index=item_index
            )
        if self._max_limit is not None and limit > self._max_limit:
            raise OperationValidationError(
                f"Limit must not exceed {self._max_limit} for searchPoints",
                item_index=item_index,
            )
        return limit


def _as_int(value: Any) -> int | None:
    """Coerce numbers and numeric strings to int; None if not integral."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None
