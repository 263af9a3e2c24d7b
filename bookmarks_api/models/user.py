"""
User data models
"""
from pydantic import BaseModel, Field
from typing import Any, Dict, Optional


class User(BaseModel):
    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = Field(default=None, alias="displayName")
    photo_url: Optional[str] = Field(default=None, alias="photoURL")
    created_at: Optional[Any] = Field(default=None, alias="createdAt")
    updated_at: Optional[Any] = Field(default=None, alias="updatedAt")

    class Config:
        populate_by_name = True

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)

    def to_response(self) -> Dict[str, Any]:
        """Public profile shape returned by the auth endpoints"""
        return self.model_dump(by_alias=True, mode="json", exclude={"updated_at"})


class CurrentUser(BaseModel):
    """Claims of a verified ID token"""
    uid: str
    email: Optional[str] = None
    name: Optional[str] = None
    picture: Optional[str] = None
    email_verified: bool = False
