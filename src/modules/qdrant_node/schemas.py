"""Schemas for the Qdrant node."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SecretStr


@dataclass
class OutputItem:
    """One output record handed back to the host.

    Attributes:
        payload: JSON-serializable response (or success marker) for the item.
        item_index: Index of the input item this record was derived from.
    """

    payload: Any
    item_index: int


class QdrantCredentials(BaseModel):
    """Connection details resolved once per execution."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    url: str
    api_key: SecretStr | None = Field(default=None, alias="apiKey")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "QdrantCredentials":
        """Build credentials from the host's credential object.

        Accepts both ``apiKey`` and ``api_key``; an empty key means none.
        """
        api_key = data.get("apiKey", data.get("api_key")) or None
        return cls(url=data.get("url", ""), api_key=api_key)

    def api_key_value(self) -> str | None:
        """Return the plain API key, or None when unset."""
        return self.api_key.get_secret_value() if self.api_key else None
