"""Qdrant (Advanced) workflow node."""

from src.modules.qdrant_node.context import (
    ExecutionContext,
    ParameterSource,
    StaticExecutionContext,
)
from src.modules.qdrant_node.description import (
    NODE_DESCRIPTION,
    NodeProperty,
    get_property,
    render_subtitle,
    visible_properties,
)
from src.modules.qdrant_node.dispatcher import OperationDispatcher
from src.modules.qdrant_node.exceptions import (
    OperationError,
    OperationValidationError,
    RemoteCallError,
    UnsupportedOperationError,
)
from src.modules.qdrant_node.node import QdrantAdvancedNode
from src.modules.qdrant_node.operations import Operation, OperationRequest
from src.modules.qdrant_node.schemas import OutputItem, QdrantCredentials

__all__ = [
    "NODE_DESCRIPTION",
    "ExecutionContext",
    "NodeProperty",
    "Operation",
    "OperationDispatcher",
    "OperationError",
    "OperationRequest",
    "OperationValidationError",
    "OutputItem",
    "ParameterSource",
    "QdrantAdvancedNode",
    "QdrantCredentials",
    "RemoteCallError",
    "StaticExecutionContext",
    "UnsupportedOperationError",
    "get_property",
    "render_subtitle",
    "visible_properties",
]
