# ruff: noqa: TC003
from __future__ import annotations

import uuid

from pydantic import BaseModel

from leavedesk.models.enums import AccountRole


class AuthContext(BaseModel):
    """Identity of the caller, resolved once per request."""

    account_id: uuid.UUID
    role: AccountRole = AccountRole.MEMBER

    @property
    def is_admin(self) -> bool:
        return self.role == AccountRole.ADMIN
