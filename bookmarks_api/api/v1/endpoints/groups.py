"""
Group management endpoints
"""
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Request

from ....core.responses import exception_response, required_fields_response, success_response
from ....models.payloads import GroupCreateInput, GroupDeleteInput, GroupUpdateInput
from ....models.user import CurrentUser
from ...dependencies import ServiceContainer, get_services
from .auth import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("")
async def create_group(
    body: Optional[dict] = Body(default=None),
    current_user: CurrentUser = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services),
):
    """Create a new group"""
    payload = GroupCreateInput.from_payload(body)
    if not payload.is_complete:
        return required_fields_response(fields=payload.missing_fields())

    try:
        group = await services.groups.create_group(current_user.uid, payload.name)
        return success_response("Group created", data=group.to_response())
    except Exception as e:
        logger.error(f"Error creating group for {current_user.uid}: {str(e)}")
        return exception_response(e, "creating group")


@router.put("")
async def update_group(
    body: Optional[dict] = Body(default=None),
    current_user: CurrentUser = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services),
):
    """Rename a group"""
    payload = GroupUpdateInput.from_payload(body)
    if not payload.is_complete:
        return required_fields_response(fields=payload.missing_fields())

    try:
        group = await services.groups.update_group(current_user.uid, payload.group_id, payload.name)
        return success_response("Group updated", data=group.to_response())
    except Exception as e:
        logger.error(f"Error updating group {payload.group_id}: {str(e)}")
        return exception_response(e, "updating group")


@router.get("")
async def list_groups(
    current_user: CurrentUser = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services),
):
    """List the user's non-deleted groups, newest first"""
    try:
        groups = await services.groups.list_groups(current_user.uid)
        return success_response(groups=[group.to_response() for group in groups])
    except Exception as e:
        logger.error(f"Error fetching groups for {current_user.uid}: {str(e)}")
        return exception_response(e, "fetching groups")


@router.delete("")
async def delete_group(
    request: Request,
    current_user: CurrentUser = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services),
):
    """Soft-delete a group together with all of its bookmarks"""
    payload = GroupDeleteInput.from_payload(request.query_params)
    if not payload.is_complete:
        return required_fields_response(fields=payload.missing_fields())

    try:
        await services.groups.soft_delete_group(current_user.uid, payload.group_id)
        return success_response("Group deleted")
    except Exception as e:
        logger.error(f"Error deleting group {payload.group_id}: {str(e)}")
        return exception_response(e, "deleting group")
