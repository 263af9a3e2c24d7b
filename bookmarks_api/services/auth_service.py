"""
Firebase ID token verification
"""
import logging
from typing import Any, Callable, Dict, Optional

from firebase_admin import auth as firebase_auth

from ..core.exceptions import AuthenticationException
from ..models.user import CurrentUser

logger = logging.getLogger(__name__)

TokenVerifier = Callable[[str], Dict[str, Any]]


class AuthService:
    """Exchanges a bearer credential for verified identity claims"""

    def __init__(self, verifier: Optional[TokenVerifier] = None):
        self._verifier = verifier or firebase_auth.verify_id_token

    def verify_token(self, id_token: str) -> Dict[str, Any]:
        """
        Verify a Firebase ID token

        Args:
            id_token: Raw ID token from the client

        Returns:
            Decoded token claims

        Raises:
            AuthenticationException: For any missing, malformed, invalid,
                expired or revoked token
        """
        if not id_token:
            raise AuthenticationException("No authorization token provided")

        try:
            claims = self._verifier(id_token)
        except firebase_auth.ExpiredIdTokenError as e:
            raise AuthenticationException("ID token has expired", details={"error": str(e)})
        except firebase_auth.RevokedIdTokenError as e:
            raise AuthenticationException("ID token has been revoked", details={"error": str(e)})
        except firebase_auth.InvalidIdTokenError as e:
            raise AuthenticationException("Invalid ID token", details={"error": str(e)})
        except ValueError as e:
            raise AuthenticationException("Invalid token format", details={"error": str(e)})
        except Exception as e:
            logger.error(f"Error verifying Firebase token: {str(e)}")
            raise AuthenticationException("Authentication failed", details={"error": str(e)})

        if not claims or not claims.get("uid"):
            raise AuthenticationException("Invalid ID token")
        return claims

    def current_user(self, id_token: str) -> CurrentUser:
        claims = self.verify_token(id_token)
        return CurrentUser(
            uid=claims["uid"],
            email=claims.get("email"),
            name=claims.get("name"),
            picture=claims.get("picture"),
            email_verified=bool(claims.get("email_verified", False)),
        )
