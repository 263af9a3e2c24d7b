"""
Group data models
"""
from pydantic import BaseModel, Field
from typing import Any, Dict, Optional


class Group(BaseModel):
    id: str
    owner_user_id: Optional[str] = Field(default=None, alias="ownerUserId")
    name: str = Field(default="", alias="groupName")
    created_at: Optional[Any] = Field(default=None, alias="createdAt")
    updated_at: Optional[Any] = Field(default=None, alias="updatedAt")
    deleted: bool = False
    deleted_at: Optional[Any] = Field(default=None, alias="deletedAt")

    class Config:
        populate_by_name = True

    @classmethod
    def from_document(cls, data: Dict[str, Any]) -> "Group":
        doc = dict(data)
        doc["id"] = doc.get("id") or doc.get("groupId")
        return cls.model_validate(doc)

    def to_document(self) -> Dict[str, Any]:
        doc = self.model_dump(by_alias=True, exclude={"id"})
        doc["groupId"] = self.id
        return doc

    def to_response(self) -> Dict[str, Any]:
        response = self.model_dump(by_alias=True, mode="json")
        response["groupId"] = self.id
        return response
