"""Authorization checks applied at the start of every leave operation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import status

from leavedesk.exceptions import UnauthorizedError

if TYPE_CHECKING:
    import uuid

    from leavedesk.schemas.auth import AuthContext


def require_session(auth: AuthContext | None) -> AuthContext:
    """Fail with Unauthorized (401) when there is no authenticated session."""
    if auth is None:
        raise UnauthorizedError("Unauthorized", status_code=status.HTTP_401_UNAUTHORIZED)
    return auth


def require_admin(auth: AuthContext | None) -> AuthContext:
    """Fail with Unauthorized unless the session carries the admin role."""
    auth = require_session(auth)
    if not auth.is_admin:
        raise UnauthorizedError("Admin access required")
    return auth


def require_self_or_admin(auth: AuthContext | None, account_id: uuid.UUID) -> AuthContext:
    """Members may only act on their own account; admins on any."""
    auth = require_session(auth)
    if auth.account_id != account_id and not auth.is_admin:
        raise UnauthorizedError("Access denied - can only view your own leave")
    return auth
