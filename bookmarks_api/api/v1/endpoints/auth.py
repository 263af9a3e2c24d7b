"""
Authentication endpoints
"""
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from ....core.exceptions import AuthenticationException
from ....core.responses import (
    Messages,
    Status,
    error_response,
    not_found_response,
    success_response,
    unauthorized_response,
)
from ....models.user import CurrentUser
from ...dependencies import ServiceContainer, get_services

logger = logging.getLogger(__name__)

router = APIRouter()
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    services: ServiceContainer = Depends(get_services),
) -> CurrentUser:
    """Get current user from Firebase ID token"""
    if credentials is None or not credentials.credentials:
        raise AuthenticationException(Messages.NO_TOKEN)
    return services.auth.current_user(credentials.credentials)


@router.post("/google")
async def google_sign_in(
    body: Optional[dict] = Body(default=None),
    services: ServiceContainer = Depends(get_services),
):
    """Verify a Google sign-in ID token and create or refresh the user profile"""
    id_token = str((body or {}).get("idToken") or "").strip()
    if not id_token:
        return error_response(Status.BAD_REQUEST, Messages.ID_TOKEN_REQUIRED, http_status=400)

    try:
        claims = services.auth.verify_token(id_token)
        user = await services.users.upsert_from_claims(claims)
        return success_response(Messages.AUTH_SUCCESS, data={"user": user.to_response()})

    except AuthenticationException as e:
        return unauthorized_response(e.message, error=e.details.get("error"))
    except Exception as e:
        logger.error(f"Authentication error: {str(e)}")
        return error_response(
            Status.INTERNAL_SERVER_ERROR, Messages.AUTH_INTERNAL_ERROR, error=str(e), http_status=500
        )


@router.get("/verify")
async def verify(
    current_user: CurrentUser = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services),
):
    """Verify the bearer token and return the stored profile"""
    try:
        user = await services.users.get_user(current_user.uid)
    except Exception as e:
        logger.error(f"Token verification error: {str(e)}")
        return unauthorized_response("Invalid or expired token")

    if user is None:
        return not_found_response(Messages.USER_NOT_FOUND)
    return success_response(Messages.VERIFY_SUCCESS, data={"user": user.to_response()})
