"""
Custom exception classes for better error handling
"""
from typing import Optional, Dict, Any


FIREBASE_ERROR_TAG = "[FIREBASE_ERROR]"


class BookmarksException(Exception):
    """Base exception for all custom exceptions"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class FirestoreException(BookmarksException):
    """Raised when Firestore operations fail"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        if not message.startswith(FIREBASE_ERROR_TAG):
            message = f"{FIREBASE_ERROR_TAG}: {message}"
        super().__init__(message, details)


class ValidationException(BookmarksException):
    """Raised when input validation fails"""
    def __init__(self, message: str, fields: Optional[list] = None, details: Optional[Dict[str, Any]] = None):
        self.fields = fields or []
        super().__init__(message, details)


class AuthenticationException(BookmarksException):
    """Raised when authentication fails"""
    pass


class ResourceNotFoundException(BookmarksException):
    """Raised when a requested resource is not found"""
    pass
