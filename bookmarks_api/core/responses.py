"""
Standardized API response envelopes
"""
from enum import Enum
from typing import Any, Optional, Dict

from fastapi.responses import JSONResponse

from .config import settings
from .exceptions import BookmarksException, ResourceNotFoundException, ValidationException


class Status(str, Enum):
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"
    REQUIRED_FIELDS = "REQUIRED_FIELDS"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    BAD_REQUEST = "BAD_REQUEST"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class Messages:
    ALL_FIELDS_REQUIRED = "All fields are required! please check and update"
    ALL_FIELDS_REQUIRED_AND_POSITION_NUMBER = "All fields are required and position must be a valid number!"
    BOOKMARK_NOT_FOUND = "Bookmark not found in the source group"
    GROUP_NOT_FOUND = "Group not found"
    USER_NOT_FOUND = "User not found in database"
    ID_TOKEN_REQUIRED = "ID token is required"
    NO_TOKEN = "No authorization token provided"
    AUTH_SUCCESS = "Authentication successful"
    VERIFY_SUCCESS = "User verified successfully"
    AUTH_INTERNAL_ERROR = "Internal server error during authentication"


def success_response(message: Optional[str] = None, **payload: Any) -> Dict[str, Any]:
    """Helper function to create success response"""
    response: Dict[str, Any] = {"success": True, "status": Status.SUCCESS.value}
    if message:
        response["message"] = message
    for key, value in payload.items():
        if value is not None:
            response[key] = value
    return response


def error_response(
    status: Status,
    message: str,
    error: Optional[str] = None,
    http_status: int = 200,
    **payload: Any,
) -> JSONResponse:
    """Helper function to create error response

    The raw ``error`` text is only exposed outside production.
    """
    content: Dict[str, Any] = {"success": False, "status": status.value, "message": message}
    if error and not settings.is_production:
        content["error"] = error
    content.update({key: value for key, value in payload.items() if value is not None})
    return JSONResponse(status_code=http_status, content=content)


def required_fields_response(message: str = Messages.ALL_FIELDS_REQUIRED, fields: Optional[list] = None) -> JSONResponse:
    """Missing fields are reported with HTTP 200, as legacy clients expect"""
    return error_response(Status.REQUIRED_FIELDS, message, fields=fields or None)


def not_found_response(message: str) -> JSONResponse:
    return error_response(Status.NOT_FOUND, message, http_status=404)


def unauthorized_response(message: str, error: Optional[str] = None) -> JSONResponse:
    return error_response(Status.UNAUTHORIZED, message, error=error, http_status=401)


def server_error_response(message: str, error: Optional[str] = None) -> JSONResponse:
    return error_response(Status.ERROR, message, error=error, http_status=500)


def exception_response(error: Exception, action: str) -> JSONResponse:
    """Convert a service-layer failure into the JSON envelope"""
    if isinstance(error, ValidationException):
        return required_fields_response(error.message, fields=error.fields)
    if isinstance(error, ResourceNotFoundException):
        return not_found_response(error.message)
    if isinstance(error, BookmarksException):
        return server_error_response(f"Error {action}", error=error.message)
    return server_error_response(f"Error {action}", error=str(error))
