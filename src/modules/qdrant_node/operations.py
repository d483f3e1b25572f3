"""Operations supported by the Qdrant node and their request variants.

Each operation has its own frozen request type carrying only the fields it
needs, already validated and normalized. ``OperationRequest`` is the closed
union of those types; the dispatcher matches on it exhaustively.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from src.infrastructure.qdrant import PointId


class Operation(str, Enum):
    """Operation values as stored in the workflow parameters."""

    CREATE_COLLECTION = "createCollection"
    UPDATE_COLLECTION = "updateCollection"
    DELETE_COLLECTION = "deleteCollection"
    LIST_COLLECTIONS = "listCollections"
    GET_COLLECTION = "getCollection"
    COUNT_POINTS = "countPoints"
    GET_POINTS = "getPoints"
    DELETE_POINTS = "deletePoints"
    UPSERT_POINTS = "upsertPoints"
    UPDATE_POINTS = "updatePoints"
    SEARCH_POINTS = "searchPoints"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    Operation.COUNT_POINTS: "Count Points",
    Operation.CREATE_COLLECTION: "Create Collection",
    Operation.DELETE_COLLECTION: "Delete Collection",
    Operation.DELETE_POINTS: "Delete Points",
    Operation.GET_COLLECTION: "Get Collection Info",
    Operation.GET_POINTS: "Get Points by IDs",
    Operation.LIST_COLLECTIONS: "List Collections",
    Operation.SEARCH_POINTS: "Search Points",
    Operation.UPDATE_COLLECTION: "Update Collection",
    Operation.UPDATE_POINTS: "Update Points",
    Operation.UPSERT_POINTS: "Upsert Points",
}


@dataclass(frozen=True)
class CreateCollection:
    collection_name: str
    config: dict[str, Any]


@dataclass(frozen=True)
class UpdateCollection:
    collection_name: str
    config: dict[str, Any]


@dataclass(frozen=True)
class DeleteCollection:
    collection_name: str


@dataclass(frozen=True)
class ListCollections:
    # Resolved and checked like every other operation, but not sent
    collection_name: str


@dataclass(frozen=True)
class GetCollection:
    collection_name: str


@dataclass(frozen=True)
class CountPoints:
    collection_name: str
    filter: dict[str, Any] | None = None


@dataclass(frozen=True)
class GetPoints:
    collection_name: str
    ids: list[PointId]


@dataclass(frozen=True)
class DeletePoints:
    collection_name: str
    ids: list[PointId]


@dataclass(frozen=True)
class UpsertPoints:
    collection_name: str
    points: list[dict[str, Any]]


@dataclass(frozen=True)
class UpdatePoints:
    """Same remote call as UpsertPoints; Qdrant upserts replace by ID."""

    collection_name: str
    points: list[dict[str, Any]]


@dataclass(frozen=True)
class SearchPoints:
    collection_name: str
    vector: list[float]
    limit: int
    filter: dict[str, Any] | None = None


OperationRequest = (
    CreateCollection
    | UpdateCollection
    | DeleteCollection
    | ListCollections
    | GetCollection
    | CountPoints
    | GetPoints
    | DeletePoints
    | UpsertPoints
    | UpdatePoints
    | SearchPoints
)
