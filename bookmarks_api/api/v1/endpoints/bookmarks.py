"""
Bookmarks management endpoints
"""
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Request

from ....core.responses import (
    Messages,
    exception_response,
    required_fields_response,
    success_response,
)
from ....models.payloads import (
    BookmarkCreateInput,
    BookmarkDeleteInput,
    BookmarkMoveInput,
    BookmarkUpdateInput,
    is_valid_id,
)
from ....models.user import CurrentUser
from ...dependencies import ServiceContainer, get_services
from .auth import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("")
async def create_bookmark(
    body: Optional[dict] = Body(default=None),
    current_user: CurrentUser = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services),
):
    """Create a new bookmark at the end of its group"""
    payload = BookmarkCreateInput.from_payload(body)
    if not payload.is_complete:
        return required_fields_response(fields=payload.missing_fields())

    try:
        await services.groups.require_group(current_user.uid, payload.group_id)
        bookmark = await services.bookmarks.create_bookmark(
            current_user.uid, payload.group_id, payload.title, payload.url
        )
        return success_response("Bookmark created", data=bookmark.to_response())
    except Exception as e:
        logger.error(f"Error creating bookmark in group {payload.group_id}: {str(e)}")
        return exception_response(e, "creating bookmark")


@router.put("")
async def update_bookmark(
    body: Optional[dict] = Body(default=None),
    current_user: CurrentUser = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services),
):
    """Update a bookmark, moving it when the group changed"""
    payload = BookmarkUpdateInput.from_payload(body)
    if not payload.is_complete:
        return required_fields_response(fields=payload.missing_fields())

    try:
        result = await services.bookmarks.update_bookmark(
            current_user.uid, payload.group_id, payload.bookmark_id, payload.title, payload.url
        )
        return success_response(result.message, data=result.model_dump(by_alias=True, mode="json", exclude={"success", "message"}))
    except Exception as e:
        logger.error(f"Error updating bookmark {payload.bookmark_id}: {str(e)}")
        return exception_response(e, "updating bookmark")


@router.patch("")
async def move_bookmark(
    request: Request,
    current_user: CurrentUser = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services),
):
    """Reposition a bookmark within its group or move it to another group"""
    payload = BookmarkMoveInput.from_payload(request.query_params)
    if not payload.is_complete:
        return required_fields_response(
            Messages.ALL_FIELDS_REQUIRED_AND_POSITION_NUMBER, fields=payload.missing_fields()
        )

    try:
        result = await services.bookmarks.move(
            current_user.uid,
            payload.bookmark_id,
            payload.from_group_id,
            payload.to_group_id,
            payload.target_position,
        )
        return success_response(result.message, data=result.model_dump(by_alias=True, mode="json", exclude={"success", "message"}))
    except Exception as e:
        logger.error(f"Error moving bookmark {payload.bookmark_id}: {str(e)}")
        return exception_response(e, "moving bookmark")


@router.get("")
async def get_bookmarks(
    groupId: Optional[str] = None,
    current_user: CurrentUser = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services),
):
    """Bookmarks of one group, or of every group when groupId is omitted"""
    group_id = (groupId or "").strip()
    if not is_valid_id(group_id):
        return required_fields_response(fields=["group_id"])

    try:
        if group_id:
            bookmarks = await services.bookmarks.list_bookmarks(current_user.uid, group_id)
            return success_response(bookmarks=[bookmark.to_response() for bookmark in bookmarks])

        everything = await services.bookmarks.list_all(current_user.uid)
        return success_response(**everything.to_response())
    except Exception as e:
        logger.error(f"Error fetching bookmarks for {current_user.uid}: {str(e)}")
        return exception_response(e, "fetching bookmarks")


@router.delete("")
async def delete_bookmark(
    request: Request,
    current_user: CurrentUser = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services),
):
    """Soft-delete a bookmark"""
    payload = BookmarkDeleteInput.from_payload(request.query_params)
    if not payload.is_complete:
        return required_fields_response(fields=payload.missing_fields())

    try:
        result = await services.bookmarks.soft_delete(current_user.uid, payload.group_id, payload.bookmark_id)
        return success_response(
            result.message or "Bookmark deleted",
            data={"actualGroupId": result.actual_group_id},
        )
    except Exception as e:
        logger.error(f"Error deleting bookmark {payload.bookmark_id}: {str(e)}")
        return exception_response(e, "deleting bookmark")
