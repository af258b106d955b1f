# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Protocol, runtime_checkable

from pydantic import BaseModel

from leavedesk.models.enums import AccountRole


class AccountInfo(BaseModel):
    """Account metadata owned by the identity provider."""

    id: uuid.UUID
    name: str
    email: str
    role: AccountRole = AccountRole.MEMBER
    created_at: datetime  # anchor for casual leave accrual


@runtime_checkable
class AccountDirectory(Protocol):
    """Read-only interface onto the identity provider's accounts."""

    async def get_account(self, account_id: uuid.UUID) -> AccountInfo | None:
        """Fetch account metadata. Returns None if not found."""
        ...

    async def list_accounts(self) -> list[AccountInfo]:
        """List all known accounts."""
        ...


class InMemoryAccountDirectory:
    """In-memory stub implementation for development."""

    def __init__(self) -> None:
        self._accounts: dict[uuid.UUID, AccountInfo] = {}

    def seed(self, account: AccountInfo) -> None:
        """Seed an account for testing."""
        self._accounts[account.id] = account

    async def get_account(self, account_id: uuid.UUID) -> AccountInfo | None:
        """Fetch account metadata. Returns None if not found."""
        return self._accounts.get(account_id)

    async def list_accounts(self) -> list[AccountInfo]:
        """List all known accounts."""
        return list(self._accounts.values())


_account_directory: AccountDirectory = InMemoryAccountDirectory()


def get_account_directory() -> AccountDirectory:
    """Return the active account directory."""
    return _account_directory


def set_account_directory(directory: AccountDirectory) -> None:
    """Override the directory (for testing or production wiring)."""
    global _account_directory
    _account_directory = directory
