"""
Group management service
"""
import logging
import uuid
from typing import List, Optional

from ..core.config import settings
from ..core.exceptions import ResourceNotFoundException, ValidationException
from ..core.responses import Messages
from ..models.group import Group
from ..utils.timestamp import EPOCH, timestamp, parse_timestamp
from .base.document_store import DocumentStore, Mutation, join_path

logger = logging.getLogger(__name__)


def groups_path(user_id: str) -> str:
    return join_path(settings.BOOKMARKS_COLLECTION, user_id, "groups")


def group_path(user_id: str, group_id: str) -> str:
    return join_path(groups_path(user_id), group_id)


def items_path(user_id: str, group_id: str) -> str:
    return join_path(group_path(user_id, group_id), "items")


class GroupService:
    """Service for managing a user's bookmark groups"""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def create_group(self, user_id: str, name: str) -> Group:
        """Create a new group owned by ``user_id``"""
        name = (name or "").strip()
        if not name:
            raise ValidationException("Group name is required", fields=["name"])

        now = timestamp()
        group = Group(
            id=str(uuid.uuid4()),
            owner_user_id=user_id,
            name=name,
            created_at=now,
            updated_at=now,
            deleted=False,
            deleted_at=None,
        )
        await self.store.set(group_path(user_id, group.id), group.to_document())
        logger.info(f"Created group {group.id} for user {user_id}")
        return group

    async def get_group(self, user_id: str, group_id: str, include_deleted: bool = False) -> Optional[Group]:
        data = await self.store.get(group_path(user_id, group_id))
        if data is None:
            return None
        group = Group.from_document(data)
        if group.deleted and not include_deleted:
            return None
        return group

    async def require_group(self, user_id: str, group_id: str) -> Group:
        group = await self.get_group(user_id, group_id)
        if group is None:
            raise ResourceNotFoundException(Messages.GROUP_NOT_FOUND, details={"group_id": group_id})
        return group

    async def update_group(self, user_id: str, group_id: str, name: str) -> Group:
        """Rename a group"""
        name = (name or "").strip()
        if not name:
            raise ValidationException("Group name is required", fields=["name"])

        group = await self.require_group(user_id, group_id)
        updates = {"groupName": name, "updatedAt": timestamp()}
        await self.store.update(group_path(user_id, group_id), updates)

        logger.info(f"Renamed group {group_id} for user {user_id}")
        return group.model_copy(update={"name": name, "updated_at": updates["updatedAt"]})

    async def list_groups(self, user_id: str) -> List[Group]:
        """Non-deleted groups, newest first

        Deleted groups are filtered here rather than in the query so no
        composite index is required.
        """
        documents = await self.store.list(groups_path(user_id))
        groups = [Group.from_document(doc) for doc in documents]
        groups = [group for group in groups if not group.deleted]
        groups.sort(key=lambda g: parse_timestamp(g.created_at) or EPOCH, reverse=True)
        return groups

    async def soft_delete_group(self, user_id: str, group_id: str) -> Group:
        """Mark the group and every bookmark record in it as deleted, atomically"""
        group = await self.require_group(user_id, group_id)

        now = timestamp()
        tombstone = {"deleted": True, "updatedAt": now, "deletedAt": now}
        mutations = [Mutation.update(group_path(user_id, group_id), tombstone)]
        for item in await self.store.list(items_path(user_id, group_id)):
            mutations.append(Mutation.update(join_path(items_path(user_id, group_id), item["id"]), tombstone))

        await self.store.apply_batch(mutations)
        logger.info(f"Soft-deleted group {group_id} and {len(mutations) - 1} bookmarks for user {user_id}")
        return group.model_copy(update={"deleted": True, "updated_at": now, "deleted_at": now})
