from typing import Optional, Annotated
from fastapi import Header, HTTPException
from config.settings import settings
import hmac

AuthHeader = Annotated[Optional[str], Header(alias="Authorization")]

STAFF = {"client": "staff"}


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=401, detail=detail, headers={"WWW-Authenticate": "Bearer"})


def _bearer_token(authorization: Optional[str]) -> str:
    """'Bearer <token>' -> token"""
    if not authorization:
        raise _unauthorized("Missing Authorization header")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise _unauthorized("Expected 'Bearer <token>'")
    return token.strip()


def require_staff_token(authorization: AuthHeader = None):
    """Gate for faculty routes. An empty API_TOKEN leaves them open (local development)."""
    if not settings.API_TOKEN:
        return STAFF

    # timing-safe comparison
    if not hmac.compare_digest(_bearer_token(authorization), settings.API_TOKEN):
        raise _unauthorized("Invalid token")
    return STAFF
