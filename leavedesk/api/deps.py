# ruff: noqa: B008, TC003
from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import Depends, Header

from leavedesk.models.enums import AccountRole
from leavedesk.schemas.auth import AuthContext


async def get_auth_context(
    x_account_id: uuid.UUID | None = Header(default=None),
    x_role: AccountRole = Header(default=AccountRole.MEMBER),
) -> AuthContext | None:
    """Resolve the caller's session from dev headers; None when unauthenticated."""
    if x_account_id is None:
        return None
    return AuthContext(account_id=x_account_id, role=x_role)


AuthDep = Annotated[AuthContext | None, Depends(get_auth_context)]
