"""Static description of the Qdrant node as shown in the workflow editor."""

from dataclasses import dataclass, field
from typing import Any

from src.modules.qdrant_node.operations import Operation

CREDENTIALS_NAME = "qdrantApi"


@dataclass(frozen=True)
class NodeProperty:
    """One user-configurable parameter of the node.

    Attributes:
        name: Parameter key used by the host to resolve values.
        display_name: Label shown in the editor.
        type: Editor widget type ("options", "string", "json" or "number").
        default: Value used when the user leaves the parameter untouched.
        description: Help text.
        required: Whether the editor marks the parameter as required.
        show_for: Operations for which the parameter is visible; None means
            always visible.
        options: Choices for "options" parameters as (name, value) pairs.
        min_value: Lower bound for "number" parameters.
    """

    name: str
    display_name: str
    type: str
    default: Any
    description: str = ""
    required: bool = False
    show_for: frozenset[Operation] | None = None
    options: tuple[tuple[str, str], ...] = ()
    min_value: int | None = None

    def is_visible(self, operation: Operation) -> bool:
        return self.show_for is None or operation in self.show_for


@dataclass(frozen=True)
class NodeDescription:
    display_name: str
    name: str
    group: tuple[str, ...]
    version: int
    description: str
    credentials: tuple[str, ...]
    properties: tuple[NodeProperty, ...] = field(default_factory=tuple)


NODE_DESCRIPTION = NodeDescription(
    display_name="Qdrant (Advanced)",
    name="qdrantAdvanced",
    group=("input",),
    version=1,
    description=(
        "Full Qdrant API: collections & points, with JSON expressions everywhere"
    ),
    credentials=(CREDENTIALS_NAME,),
    properties=(
        NodeProperty(
            name="operation",
            display_name="Operation",
            type="options",
            default=Operation.SEARCH_POINTS.value,
            options=tuple(
                sorted((op.display_name, op.value) for op in Operation)
            ),
        ),
        NodeProperty(
            name="collectionName",
            display_name="Collection Name",
            type="string",
            default="",
            required=True,
            description="The Qdrant collection to operate on (expressions supported)",
        ),
        NodeProperty(
            name="collectionConfig",
            display_name="Collection Config (JSON)",
            type="json",
            default="{}",
            show_for=frozenset(
                {Operation.CREATE_COLLECTION, Operation.UPDATE_COLLECTION}
            ),
            description=(
                "Raw Qdrant collection config (vectors, replication_factor, etc)."
            ),
        ),
        NodeProperty(
            name="pointIds",
            display_name="Point IDs (JSON Array)",
            type="json",
            default="[]",
            show_for=frozenset({Operation.GET_POINTS, Operation.DELETE_POINTS}),
            description="Array of point IDs, e.g. [1,2,3].",
        ),
        NodeProperty(
            name="points",
            display_name="Points (JSON Array)",
            type="json",
            default="[]",
            show_for=frozenset({Operation.UPSERT_POINTS, Operation.UPDATE_POINTS}),
            description="Array of point objects: {id, vector: [...], payload: {...}}.",
        ),
        NodeProperty(
            name="searchVector",
            display_name="Search Vector (JSON Array)",
            type="json",
            default="[]",
            show_for=frozenset({Operation.SEARCH_POINTS}),
            description="Embedding vector to search against.",
        ),
        NodeProperty(
            name="filter",
            display_name="Filter (JSON)",
            type="json",
            default="{}",
            show_for=frozenset({Operation.SEARCH_POINTS, Operation.COUNT_POINTS}),
            description="Qdrant filter object.",
        ),
        NodeProperty(
            name="limit",
            display_name="Limit",
            type="number",
            default=50,
            show_for=frozenset({Operation.SEARCH_POINTS}),
            min_value=1,
            description="Max number of results to return",
        ),
    ),
)

_PROPERTIES = {prop.name: prop for prop in NODE_DESCRIPTION.properties}


def get_property(name: str) -> NodeProperty:
    """Look up a node property by parameter name.

    Raises:
        KeyError: If the node has no such parameter.
    """
    return _PROPERTIES[name]


def visible_properties(operation: Operation) -> list[NodeProperty]:
    """Return the properties the editor shows for an operation, in order."""
    return [prop for prop in NODE_DESCRIPTION.properties if prop.is_visible(operation)]


def render_subtitle(operation: str, collection_name: str) -> str:
    """Render the node subtitle, e.g. "searchPoints: docs"."""
    return f"{operation}: {collection_name}"
