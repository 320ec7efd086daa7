"""
FastAPI dependencies for identity resolution.

Tokens are issued elsewhere; this backend only verifies the bearer token
and reads the user id from its ``sub`` claim.
"""

import logging
from typing import Optional

from fastapi import Request

from roadtrippi.core.exceptions import AuthenticationRequiredError
from roadtrippi.core.jwt import decode_token

logger = logging.getLogger(__name__)


def _bearer_token(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization", "")
    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


def _user_id_from_token(token: str) -> Optional[int]:
    payload = decode_token(token)
    if not payload or "sub" not in payload:
        return None
    try:
        return int(payload["sub"])
    except (TypeError, ValueError):
        return None


async def get_current_user_id(request: Request) -> int:
    """
    Resolve the authenticated user id from the Authorization header.

    Raises:
        AuthenticationRequiredError: missing, malformed or invalid token
    """
    token = _bearer_token(request)
    if token is None:
        raise AuthenticationRequiredError("Missing bearer token")

    user_id = _user_id_from_token(token)
    if user_id is None:
        logger.warning(
            "Rejected bearer token",
            extra={'request_id': getattr(request.state, 'request_id', 'unknown'), 'path': request.url.path}
        )
        raise AuthenticationRequiredError("Invalid authentication token")

    request.state.user_id = user_id
    return user_id


async def get_optional_user_id(request: Request) -> Optional[int]:
    """Like get_current_user_id, but anonymous or invalid tokens yield None."""
    token = _bearer_token(request)
    if token is None:
        return None
    return _user_id_from_token(token)
