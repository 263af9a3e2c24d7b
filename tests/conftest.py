from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from bookmarks_api.api.dependencies import ServiceContainer, build_services
from bookmarks_api.services.auth_service import AuthService
from bookmarks_api.services.bookmark_service import BookmarkService
from bookmarks_api.services.group_service import GroupService
from fakes import FakeTokenVerifier, InMemoryStore, StaticFaviconResolver
from main import create_app

USER_ID = "user-1"
OTHER_USER_ID = "user-2"

TOKENS = {
    "good-token": {
        "uid": USER_ID,
        "email": "ada@example.com",
        "name": "Ada Lovelace",
        "picture": "https://example.com/ada.png",
        "email_verified": True,
    },
    "other-token": {"uid": OTHER_USER_ID, "email": "bob@example.com", "name": "Bob"},
}


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def favicons() -> StaticFaviconResolver:
    return StaticFaviconResolver()


@pytest.fixture
def group_service(store: InMemoryStore) -> GroupService:
    return GroupService(store)


@pytest.fixture
def bookmark_service(store: InMemoryStore, group_service: GroupService, favicons) -> BookmarkService:
    return BookmarkService(store, group_service, favicons)


@pytest.fixture
def services(store: InMemoryStore, favicons: StaticFaviconResolver) -> ServiceContainer:
    return build_services(
        store=store,
        auth_service=AuthService(verifier=FakeTokenVerifier(TOKENS)),
        favicon_resolver=favicons,
    )


@pytest.fixture
def client(services: ServiceContainer) -> Generator[TestClient, None, None]:
    with TestClient(create_app(services)) as test_client:
        yield test_client


@pytest.fixture
def auth_headers() -> dict:
    return {"Authorization": "Bearer good-token"}
