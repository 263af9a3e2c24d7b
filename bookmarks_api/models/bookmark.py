"""
Bookmark data models
"""
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class Bookmark(BaseModel):
    id: str
    group_id: Optional[str] = Field(default=None, alias="groupId")
    title: str = ""
    url: str = ""
    favicon: Optional[str] = None
    position: Optional[int] = None  # None only on records written before ordering existed
    created_at: Optional[Any] = Field(default=None, alias="createdAt")
    updated_at: Optional[Any] = Field(default=None, alias="updatedAt")
    deleted: bool = False
    deleted_at: Optional[Any] = Field(default=None, alias="deletedAt")

    class Config:
        populate_by_name = True

    @classmethod
    def from_document(cls, data: Dict[str, Any], group_id: Optional[str] = None) -> "Bookmark":
        doc = dict(data)
        doc["id"] = doc.get("id") or doc.get("bookmarkId")
        if group_id is not None:
            doc["groupId"] = group_id
        return cls.model_validate(doc)

    def to_document(self) -> Dict[str, Any]:
        """Firestore representation (camelCase, id stored as bookmarkId)"""
        doc = self.model_dump(by_alias=True, exclude={"id"})
        doc["bookmarkId"] = self.id
        return doc

    def to_response(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class GroupSummary(BaseModel):
    id: str
    name: str
    created_at: Optional[Any] = Field(default=None, alias="createdAt")

    class Config:
        populate_by_name = True


class GroupBookmarks(BaseModel):
    group: GroupSummary
    bookmarks: List[Bookmark] = []


class MoveResult(BaseModel):
    success: bool = True
    message: str
    moved: bool = False
    from_group_id: str = Field(alias="fromGroupId")
    to_group_id: str = Field(alias="toGroupId")
    from_group_name: Optional[str] = Field(default=None, alias="fromGroupName")
    to_group_name: Optional[str] = Field(default=None, alias="toGroupName")
    position: int

    class Config:
        populate_by_name = True


class DeleteResult(BaseModel):
    success: bool = True
    message: Optional[str] = None
    actual_group_id: str = Field(alias="actualGroupId")

    class Config:
        populate_by_name = True


class UpdateResult(BaseModel):
    success: bool = True
    message: str
    moved: bool = False
    bookmark: Bookmark
    from_group_id: str = Field(alias="fromGroupId")
    to_group_id: str = Field(alias="toGroupId")

    class Config:
        populate_by_name = True


class AllBookmarks(BaseModel):
    bookmarks: List[GroupBookmarks] = []
    groups: List[Dict[str, str]] = []

    def to_response(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")
