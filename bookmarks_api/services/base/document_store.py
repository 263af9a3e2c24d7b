"""
Document store capability used by every service

Paths are slash-separated Firestore-style document or collection paths,
e.g. ``bookmarks/{uid}/groups/{group_id}/items/{bookmark_id}``.
"""
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class MutationKind(str, Enum):
    SET = "set"
    UPDATE = "update"
    DELETE = "delete"


class Mutation(BaseModel):
    """A single write inside an atomic batch"""
    kind: MutationKind
    path: str
    data: Dict[str, Any] = {}

    @classmethod
    def set(cls, path: str, data: Dict[str, Any]) -> "Mutation":
        return cls(kind=MutationKind.SET, path=path, data=dict(data))

    @classmethod
    def update(cls, path: str, data: Dict[str, Any]) -> "Mutation":
        return cls(kind=MutationKind.UPDATE, path=path, data=dict(data))

    @classmethod
    def delete(cls, path: str) -> "Mutation":
        return cls(kind=MutationKind.DELETE, path=path)


class BatchResult(BaseModel):
    applied: int


class DocumentStore:
    """Interface implemented by the Firestore store and by test fakes

    ``update`` and ``UPDATE`` mutations fail when the target document does
    not exist; ``apply_batch`` applies every mutation or none of them.
    """

    async def connect(self) -> "DocumentStore":
        raise NotImplementedError

    async def get(self, path: str) -> Optional[Dict[str, Any]]:
        """Return the document data with its ``id``, or None"""
        raise NotImplementedError

    async def list(self, collection_path: str) -> List[Dict[str, Any]]:
        """Return every document of a collection, each with its ``id``"""
        raise NotImplementedError

    async def set(self, path: str, data: Dict[str, Any]) -> None:
        raise NotImplementedError

    async def update(self, path: str, data: Dict[str, Any]) -> None:
        raise NotImplementedError

    async def apply_batch(self, mutations: List[Mutation]) -> BatchResult:
        raise NotImplementedError


def join_path(*segments: str) -> str:
    return "/".join(str(segment).strip("/") for segment in segments)
