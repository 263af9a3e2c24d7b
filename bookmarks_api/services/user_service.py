"""
User profile store
"""
import logging
from typing import Any, Dict, Optional

from ..core.config import settings
from ..models.user import User
from ..utils.timestamp import timestamp
from .base.document_store import DocumentStore, join_path

logger = logging.getLogger(__name__)


def user_path(uid: str) -> str:
    return join_path(settings.USERS_COLLECTION, uid)


class UserService:
    """Keeps one profile document per identity-provider subject"""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def get_user(self, uid: str) -> Optional[User]:
        data = await self.store.get(user_path(uid))
        if data is None:
            return None
        data.setdefault("uid", uid)
        return User.model_validate(data)

    async def upsert_from_claims(self, claims: Dict[str, Any]) -> User:
        """Create the profile on first sign-in, otherwise refresh ``updatedAt`` only"""
        uid = claims["uid"]
        existing = await self.get_user(uid)
        now = timestamp()

        if existing is None:
            user = User(
                uid=uid,
                email=claims.get("email"),
                display_name=claims.get("name"),
                photo_url=claims.get("picture"),
                created_at=now,
                updated_at=now,
            )
            await self.store.set(user_path(uid), user.to_document())
            logger.info(f"Created user profile {uid}")
            return user

        await self.store.update(user_path(uid), {"updatedAt": now})
        logger.info(f"Refreshed user profile {uid}")
        return existing.model_copy(update={"updated_at": now})
