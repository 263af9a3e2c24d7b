"""
Bookmark service: CRUD, soft-delete and ordering of bookmarks within groups

Every group keeps its non-deleted bookmarks at positions 0..N-1. Creating
appends; reposition and move rewrite the positions of the whole affected
group in a single atomic batch. Soft-deletes and the source side of a move
leave the remaining positions untouched.
"""
import logging
import uuid
from typing import List, Optional, Tuple

from ..core.exceptions import ResourceNotFoundException, ValidationException
from ..core.responses import Messages
from ..models.bookmark import (
    AllBookmarks,
    Bookmark,
    DeleteResult,
    GroupBookmarks,
    GroupSummary,
    MoveResult,
    UpdateResult,
)
from ..utils.timestamp import timestamp
from .base.document_store import DocumentStore, Mutation, join_path
from .favicon_service import fallback_favicon
from .group_service import GroupService, items_path
from .ordering import dense_positions, sort_for_display, splice

logger = logging.getLogger(__name__)


def bookmark_path(user_id: str, group_id: str, bookmark_id: str) -> str:
    return join_path(items_path(user_id, group_id), bookmark_id)


class BookmarkService:
    """Service for managing bookmarks and their order"""

    def __init__(self, store: DocumentStore, group_service: GroupService, favicon_resolver):
        """
        Args:
            store: Document store used for every read and write
            group_service: Group lookups for moves, scans and listings
            favicon_resolver: Object exposing ``async resolve_with_fallback(url)``
        """
        self.store = store
        self.groups = group_service
        self.favicon_resolver = favicon_resolver

    async def _resolve_favicon(self, url: str) -> str:
        """Favicon lookup never blocks a write"""
        try:
            return await self.favicon_resolver.resolve_with_fallback(url)
        except Exception as e:
            logger.warning(f"Favicon resolution failed for {url}, using fallback: {str(e)}")
            return fallback_favicon(url)

    async def _get_bookmark(self, user_id: str, group_id: str, bookmark_id: str) -> Optional[Bookmark]:
        data = await self.store.get(bookmark_path(user_id, group_id, bookmark_id))
        if data is None:
            return None
        return Bookmark.from_document(data, group_id=group_id)

    async def list_bookmarks(self, user_id: str, group_id: str) -> List[Bookmark]:
        """Non-deleted bookmarks of a group in display order"""
        documents = await self.store.list(items_path(user_id, group_id))
        bookmarks = [Bookmark.from_document(doc, group_id=group_id) for doc in documents]
        return sort_for_display([b for b in bookmarks if not b.deleted])

    async def list_all(self, user_id: str) -> AllBookmarks:
        """Every non-deleted group (newest first) with its ordered bookmarks"""
        result = AllBookmarks()
        for group in await self.groups.list_groups(user_id):
            bookmarks = await self.list_bookmarks(user_id, group.id)
            result.bookmarks.append(GroupBookmarks(
                group=GroupSummary(id=group.id, name=group.name, created_at=group.created_at),
                bookmarks=bookmarks,
            ))
            result.groups.append({"id": group.id, "name": group.name})
        return result

    async def create_bookmark(self, user_id: str, group_id: str, title: str, url: str) -> Bookmark:
        """
        Append a new bookmark to a group

        The caller guarantees ``group_id`` is a live group of the user.

        Raises:
            ValidationException: If title or url is blank
        """
        title = (title or "").strip()
        url = (url or "").strip()
        missing = [name for name, value in (("title", title), ("url", url)) if not value]
        if missing:
            raise ValidationException("All fields are required!", fields=missing)

        existing = await self.list_bookmarks(user_id, group_id)
        favicon = await self._resolve_favicon(url)

        now = timestamp()
        bookmark = Bookmark(
            id=str(uuid.uuid4()),
            group_id=group_id,
            title=title,
            url=url,
            favicon=favicon,
            position=len(existing),
            created_at=now,
            updated_at=now,
            deleted=False,
            deleted_at=None,
        )
        await self.store.set(bookmark_path(user_id, group_id, bookmark.id), bookmark.to_document())

        logger.info(f"Created bookmark {bookmark.id} in group {group_id} at position {bookmark.position}")
        return bookmark

    async def reposition(self, user_id: str, group_id: str, bookmark_id: str, target_position: int) -> MoveResult:
        """
        Move a bookmark to ``target_position`` within its own group

        Raises:
            ValidationException: If target_position is negative
            ResourceNotFoundException: If the bookmark is not a live member of the group
        """
        if target_position < 0:
            raise ValidationException("Position must be a non-negative number", fields=["position"])

        bookmarks = await self.list_bookmarks(user_id, group_id)
        index = next((i for i, b in enumerate(bookmarks) if b.id == bookmark_id), None)
        if index is None:
            raise ResourceNotFoundException("Bookmark not found in group", details={
                "group_id": group_id, "bookmark_id": bookmark_id
            })

        moved = bookmarks.pop(index)
        ordered = splice(bookmarks, moved, target_position)

        now = timestamp()
        mutations = [
            Mutation.update(bookmark_path(user_id, group_id, bookmark.id), {"position": position, "updatedAt": now})
            for bookmark, position in dense_positions(ordered)
        ]
        await self.store.apply_batch(mutations)

        final_position = next(i for i, b in enumerate(ordered) if b is moved)
        group = await self.groups.get_group(user_id, group_id, include_deleted=True)
        group_name = group.name if group else None

        logger.info(f"Repositioned bookmark {bookmark_id} in group {group_id} to {final_position}")
        return MoveResult(
            message=f"Bookmark position updated to {final_position} in same group",
            moved=False,
            from_group_id=group_id,
            to_group_id=group_id,
            from_group_name=group_name,
            to_group_name=group_name,
            position=final_position,
        )

    async def move(
        self,
        user_id: str,
        bookmark_id: str,
        from_group_id: str,
        to_group_id: str,
        target_position: int,
    ) -> MoveResult:
        """
        Move a bookmark into another group at ``target_position``

        Same-group requests are a reposition. The destination group is
        renumbered densely; the source group keeps its remaining positions.

        Raises:
            ValidationException: If target_position is negative
            ResourceNotFoundException: If the bookmark is not live in the
                source group or the destination group does not exist
        """
        if from_group_id == to_group_id:
            return await self.reposition(user_id, from_group_id, bookmark_id, target_position)

        if target_position < 0:
            raise ValidationException("Position must be a non-negative number", fields=["position"])

        source = await self._get_bookmark(user_id, from_group_id, bookmark_id)
        if source is None or source.deleted:
            raise ResourceNotFoundException(Messages.BOOKMARK_NOT_FOUND, details={
                "group_id": from_group_id, "bookmark_id": bookmark_id
            })

        return await self._relocate(user_id, source, from_group_id, to_group_id, target_position)

    async def _relocate(
        self,
        user_id: str,
        source: Bookmark,
        from_group_id: str,
        to_group_id: str,
        target_position: Optional[int],
        changes: Optional[dict] = None,
    ) -> MoveResult:
        """Write the bookmark into the destination and drop the source record in one batch

        ``target_position`` None appends to the destination.
        """
        to_group = await self.groups.require_group(user_id, to_group_id)

        destination = [b for b in await self.list_bookmarks(user_id, to_group_id) if b.id != source.id]
        if target_position is None:
            target_position = len(destination)

        now = timestamp()
        moved = source.model_copy(update={**(changes or {}), "group_id": to_group_id, "updated_at": now})
        ordered = splice(destination, moved, target_position)

        mutations = []
        final_position = target_position
        for bookmark, position in dense_positions(ordered):
            path = bookmark_path(user_id, to_group_id, bookmark.id)
            if bookmark is moved:
                final_position = position
                mutations.append(Mutation.set(path, moved.model_copy(update={"position": position}).to_document()))
            else:
                mutations.append(Mutation.update(path, {"position": position, "updatedAt": now}))
        mutations.append(Mutation.delete(bookmark_path(user_id, from_group_id, source.id)))

        await self.store.apply_batch(mutations)

        from_group = await self.groups.get_group(user_id, from_group_id, include_deleted=True)
        from_name = from_group.name if from_group else None

        logger.info(
            f"Moved bookmark {source.id} from group {from_group_id} to {to_group_id} at position {final_position}"
        )
        return MoveResult(
            message=f'Bookmark moved from "{from_name}" to "{to_group.name}" at position {final_position}',
            moved=True,
            from_group_id=from_group_id,
            to_group_id=to_group_id,
            from_group_name=from_name,
            to_group_name=to_group.name,
            position=final_position,
        )

    async def _locate(self, user_id: str, group_id: Optional[str], bookmark_id: str) -> Tuple[Bookmark, str]:
        """Find a live bookmark, trying ``group_id`` first and then every group of the user"""
        if group_id:
            bookmark = await self._get_bookmark(user_id, group_id, bookmark_id)
            if bookmark is not None and not bookmark.deleted:
                return bookmark, group_id

        for group in await self.groups.list_groups(user_id):
            if group.id == group_id:
                continue
            bookmark = await self._get_bookmark(user_id, group.id, bookmark_id)
            if bookmark is not None and not bookmark.deleted:
                return bookmark, group.id

        raise ResourceNotFoundException(
            f"Bookmark with ID {bookmark_id} not found in any group",
            details={"bookmark_id": bookmark_id}
        )

    async def update_bookmark(
        self,
        user_id: str,
        group_id: str,
        bookmark_id: str,
        title: str,
        url: str,
    ) -> UpdateResult:
        """
        Update title/url, moving the bookmark when ``group_id`` is not its current group

        A moved bookmark targets its current position in the destination.

        Raises:
            ValidationException: If title or url is blank
            ResourceNotFoundException: If the bookmark or the destination group is missing
        """
        title = (title or "").strip()
        url = (url or "").strip()
        missing = [name for name, value in (("title", title), ("url", url)) if not value]
        if missing:
            raise ValidationException("All fields are required!", fields=missing)

        current, current_group_id = await self._locate(user_id, group_id, bookmark_id)

        changes = {"title": title, "url": url}
        if url != current.url:
            changes["favicon"] = await self._resolve_favicon(url)

        if current_group_id == group_id:
            now = timestamp()
            updates = {
                "title": title,
                "url": url,
                "updatedAt": now,
            }
            if "favicon" in changes:
                updates["favicon"] = changes["favicon"]
            await self.store.update(bookmark_path(user_id, group_id, bookmark_id), updates)

            logger.info(f"Updated bookmark {bookmark_id} in group {group_id}")
            return UpdateResult(
                message="Bookmark updated in same group",
                moved=False,
                bookmark=current.model_copy(update={**changes, "updated_at": now}),
                from_group_id=group_id,
                to_group_id=group_id,
            )

        result = await self._relocate(
            user_id, current, current_group_id, group_id, current.position, changes=changes
        )
        moved = await self._get_bookmark(user_id, group_id, bookmark_id)
        return UpdateResult(
            message=result.message,
            moved=True,
            bookmark=moved or current.model_copy(update={**changes, "group_id": group_id}),
            from_group_id=current_group_id,
            to_group_id=group_id,
        )

    async def soft_delete(self, user_id: str, group_id: str, bookmark_id: str) -> DeleteResult:
        """
        Mark a bookmark as deleted without renumbering its siblings

        Falls back to scanning the user's groups when the client's group id
        is stale.

        Raises:
            ResourceNotFoundException: If the bookmark is in none of the user's groups
        """
        now = timestamp()
        tombstone = {"deleted": True, "updatedAt": now, "deletedAt": now}

        if await self._get_bookmark(user_id, group_id, bookmark_id) is not None:
            await self.store.update(bookmark_path(user_id, group_id, bookmark_id), tombstone)
            logger.info(f"Soft-deleted bookmark {bookmark_id} in group {group_id}")
            return DeleteResult(actual_group_id=group_id)

        for group in await self.groups.list_groups(user_id):
            if group.id == group_id:
                continue
            if await self._get_bookmark(user_id, group.id, bookmark_id) is not None:
                await self.store.update(bookmark_path(user_id, group.id, bookmark_id), tombstone)
                logger.warning(f"Bookmark {bookmark_id} not in group {group_id}, deleted from {group.id}")
                return DeleteResult(
                    message=f"Bookmark deleted from group: {group.name}",
                    actual_group_id=group.id,
                )

        raise ResourceNotFoundException(
            f"Bookmark with ID {bookmark_id} not found in any group",
            details={"bookmark_id": bookmark_id}
        )
