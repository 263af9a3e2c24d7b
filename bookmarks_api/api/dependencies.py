"""
Service wiring shared by the API routers
"""
from typing import Optional

from fastapi import Request
from pydantic import BaseModel

from ..services.auth_service import AuthService
from ..services.base.document_store import DocumentStore
from ..services.base.firestore_service import FirestoreStore
from ..services.bookmark_service import BookmarkService
from ..services.favicon_service import FaviconResolver
from ..services.group_service import GroupService
from ..services.user_service import UserService


class ServiceContainer(BaseModel):
    store: DocumentStore
    auth: AuthService
    users: UserService
    groups: GroupService
    bookmarks: BookmarkService

    class Config:
        arbitrary_types_allowed = True


def build_services(
    store: Optional[DocumentStore] = None,
    auth_service: Optional[AuthService] = None,
    favicon_resolver=None,
) -> ServiceContainer:
    """Construct every service around one store instance

    Defaults are the production collaborators (Firestore, Firebase Auth,
    HTTP favicon lookup); tests pass fakes.
    """
    store = store or FirestoreStore()
    groups = GroupService(store)
    return ServiceContainer(
        store=store,
        auth=auth_service or AuthService(),
        users=UserService(store),
        groups=groups,
        bookmarks=BookmarkService(store, groups, favicon_resolver or FaviconResolver()),
    )


def get_services(request: Request) -> ServiceContainer:
    return request.app.state.services
