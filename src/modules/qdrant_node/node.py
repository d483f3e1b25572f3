"""Qdrant (Advanced) node entry point."""

from collections.abc import Callable

import structlog

from src.config import Settings, get_settings
from src.infrastructure.qdrant import QdrantGateway, create_gateway
from src.modules.qdrant_node.context import ExecutionContext
from src.modules.qdrant_node.description import CREDENTIALS_NAME, NODE_DESCRIPTION
from src.modules.qdrant_node.dispatcher import OperationDispatcher
from src.modules.qdrant_node.schemas import OutputItem, QdrantCredentials

logger = structlog.get_logger()

GatewayFactory = Callable[..., QdrantGateway]


class QdrantAdvancedNode:
    """Workflow node exposing Qdrant collection and point operations.

    One execution resolves the ``qdrantApi`` credentials once, builds one
    gateway, dispatches every input item through it in order and closes it
    afterwards, whether the run succeeded or not.
    """

    description = NODE_DESCRIPTION

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        gateway_factory: GatewayFactory = create_gateway,
    ) -> None:
        """Initialize the node.

        Args:
            settings: Node settings. Defaults to the cached application settings.
            gateway_factory: Builds a gateway from a URL, ``api_key`` and
                ``timeout_seconds``. Overridden in tests.
        """
        self._settings = settings or get_settings()
        self._gateway_factory = gateway_factory

    async def execute(self, context: ExecutionContext) -> list[list[OutputItem]]:
        """Run the node over all input items.

        Returns:
            A single output branch holding one item per input item.

        Raises:
            OperationValidationError: If an item has missing or invalid
                parameters.
            RemoteCallError: If parsing a JSON field or a Qdrant call fails.
            QdrantConfigurationError: If the credentials cannot be used to
                build a client.
        """
        items = context.get_input_data()
        credentials = QdrantCredentials.from_mapping(
            context.get_credentials(CREDENTIALS_NAME)
        )
        gateway = self._gateway_factory(
            credentials.url,
            api_key=credentials.api_key_value(),
            timeout_seconds=self._settings.qdrant_timeout_seconds,
        )
        dispatcher = OperationDispatcher(
            gateway,
            default_limit=self._settings.search_default_limit,
            max_limit=self._settings.search_max_limit,
            collapse_validation_errors=self._settings.collapse_validation_errors,
        )

        logger.info("qdrant_node_execution_started", item_count=len(items))
        try:
            results = await dispatcher.run(items, context)
        finally:
            await gateway.close()

        logger.info("qdrant_node_execution_finished", item_count=len(results))
        return [results]
