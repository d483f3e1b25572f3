"""Execution context: how the node reads items, parameters and credentials."""

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from src.modules.qdrant_node.description import get_property
from src.modules.qdrant_node.operations import Operation


class ParameterSource(Protocol):
    """Resolves a node parameter for one input item."""

    def get_node_parameter(self, name: str, item_index: int) -> Any:
        """Return the parameter value with expressions already evaluated."""
        ...


class ExecutionContext(ParameterSource, Protocol):
    """What the hosting workflow runtime provides to a node execution."""

    def get_input_data(self) -> Sequence[Any]:
        """Return the input items, in order."""
        ...

    def get_credentials(self, name: str) -> Mapping[str, Any]:
        """Return the decrypted credential object stored under ``name``."""
        ...


class StaticExecutionContext:
    """In-process context for hosts that hand over plain data.

    Parameters may be one mapping shared by every item or one mapping per
    item. Parameters the user did not set fall back to the node description
    defaults; parameters hidden for the item's operation resolve to None.
    """

    def __init__(
        self,
        items: Sequence[Any],
        *,
        parameters: Mapping[str, Any] | Sequence[Mapping[str, Any]],
        credentials: Mapping[str, Mapping[str, Any]] | None = None,
    ) -> None:
        self._items = list(items)
        self._parameters: list[Mapping[str, Any]]
        if isinstance(parameters, Mapping):
            self._parameters = [parameters] * len(self._items)
        else:
            self._parameters = list(parameters)
        if len(self._parameters) != len(self._items):
            raise ValueError(
                f"Got {len(self._parameters)} parameter sets for "
                f"{len(self._items)} items"
            )
        self._credentials = dict(credentials or {})

    def get_input_data(self) -> Sequence[Any]:
        return self._items

    def get_node_parameter(self, name: str, item_index: int) -> Any:
        prop = get_property(name)
        values = self._parameters[item_index]

        if prop.show_for is not None:
            operation = self.get_node_parameter("operation", item_index)
            try:
                if not prop.is_visible(Operation(operation)):
                    return None
            except ValueError:
                # Unknown operations are reported by the dispatcher
                return None

        return values.get(name, prop.default)

    def get_credentials(self, name: str) -> Mapping[str, Any]:
        try:
            return self._credentials[name]
        except KeyError:
            raise KeyError(f"No credentials set for {name!r}") from None
