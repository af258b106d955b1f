from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlmodel import col

from leavedesk.db import commit_or_raise, store_errors
from leavedesk.exceptions import NotFoundError
from leavedesk.models.balance import LeaveBalance
from leavedesk.models.base import as_utc
from leavedesk.models.enums import AuditAction, AuditEntityType, LeaveStatus, LeaveType
from leavedesk.models.request import LeaveRequest
from leavedesk.schemas.balance import LeaveBalanceResponse
from leavedesk.services.access import require_admin, require_self_or_admin
from leavedesk.services.account import get_account_directory
from leavedesk.services.accrual import (
    INITIAL_MEDICAL_LEAVE_DAYS,
    compute_casual_leave_balance,
    compute_medical_accrual,
)
from leavedesk.services.audit import model_to_audit_dict, write_audit_log
from leavedesk.services.invalidation import notify_views_changed

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from leavedesk.schemas.auth import AuthContext
    from leavedesk.services.account import AccountInfo

logger = logging.getLogger(__name__)

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def build_balance_response(balance: LeaveBalance) -> LeaveBalanceResponse:
    """Map a balance model to its response schema."""
    return LeaveBalanceResponse(
        account_id=balance.account_id,
        casual_leave_balance=balance.casual_leave_balance,
        medical_leave_balance=balance.medical_leave_balance,
        last_casual_accrual_at=as_utc(balance.last_casual_accrual_at),
        last_medical_accrual_at=as_utc(balance.last_medical_accrual_at),
        updated_at=as_utc(balance.updated_at),
    )


def available_days(balance: LeaveBalance, leave_type: LeaveType) -> Decimal | int:
    """Balance available for the given leave type."""
    if leave_type == LeaveType.CASUAL:
        return balance.casual_leave_balance
    return balance.medical_leave_balance


async def get_account_or_404(account_id: uuid.UUID) -> AccountInfo:
    """Look up an account in the directory. Raises NotFound if unknown."""
    account = await get_account_directory().get_account(account_id)
    if account is None:
        raise NotFoundError("Account not found")
    return account


async def _get_or_create_balance_for_update(
    session: AsyncSession,
    account_id: uuid.UUID,
    now: datetime,
) -> LeaveBalance:
    """Get the account's balance row with a FOR UPDATE lock, creating it if absent.

    Creation is an insert-on-conflict-do-nothing keyed by account_id, so two
    first-time callers for the same account both end up locking the same row.
    """
    dialect = session.get_bind().dialect.name
    insert = _INSERT_BY_DIALECT.get(dialect)
    if insert is None:
        msg = f"Unsupported database dialect: {dialect}"
        raise RuntimeError(msg)

    await session.execute(
        insert(LeaveBalance)
        .values(
            id=uuid.uuid4(),
            account_id=account_id,
            casual_leave_balance=Decimal("0.00"),
            medical_leave_balance=INITIAL_MEDICAL_LEAVE_DAYS,
            last_casual_accrual_at=now,
            last_medical_accrual_at=now,
            created_at=now,
            updated_at=now,
            version=1,
        )
        .on_conflict_do_nothing(index_elements=["account_id"])
    )

    result = await session.execute(
        select(LeaveBalance)
        .where(col(LeaveBalance.account_id) == account_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def sum_approved_days(session: AsyncSession, account_id: uuid.UUID, leave_type: LeaveType) -> int:
    """Total working days across the account's approved requests of one leave type."""
    result = await session.execute(
        select(func.coalesce(func.sum(col(LeaveRequest.total_days)), 0)).where(
            col(LeaveRequest.account_id) == account_id,
            col(LeaveRequest.leave_type) == leave_type.value,
            col(LeaveRequest.status) == LeaveStatus.APPROVED.value,
        )
    )
    return int(result.scalar_one())


async def _refresh_casual_balance(
    session: AsyncSession,
    balance: LeaveBalance,
    account: AccountInfo,
    now: datetime,
) -> None:
    used = await sum_approved_days(session, account.id, LeaveType.CASUAL)
    balance.casual_leave_balance = compute_casual_leave_balance(as_utc(account.created_at), used, now)
    balance.last_casual_accrual_at = now


def _apply_medical_accrual(balance: LeaveBalance, now: datetime) -> None:
    credit = compute_medical_accrual(as_utc(balance.last_medical_accrual_at), now)
    if credit <= 0:
        return
    balance.medical_leave_balance += credit
    balance.last_medical_accrual_at = now
    logger.info("Credited %d medical leave days to account %s", credit, balance.account_id)


# ---------------------------------------------------------------------------
# Synchronization
# ---------------------------------------------------------------------------


async def get_or_refresh_balance(
    session: AsyncSession,
    account_id: uuid.UUID,
    *,
    now: datetime | None = None,
) -> LeaveBalance:
    """Bring the account's stored balance in line with its current entitlement.

    1. Resolve the account (NotFound if unknown).
    2. Create the balance row on first use, then lock it.
    3. Recompute the casual balance from account age and approved usage.
    4. Apply yearly medical accrual when a full year has passed.
    5. Flush within the caller's transaction (the caller commits).

    Every balance-dependent decision goes through here; there is no
    background accrual job.
    """
    now = now or datetime.now(UTC)
    account = await get_account_or_404(account_id)

    balance = await _get_or_create_balance_for_update(session, account_id, now)

    await _refresh_casual_balance(session, balance, account, now)
    _apply_medical_accrual(balance, now)

    balance.updated_at = now
    balance.version += 1
    await session.flush()
    return balance


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


@store_errors()
async def get_leave_balance(
    session: AsyncSession,
    auth: AuthContext | None,
    account_id: uuid.UUID,
    *,
    now: datetime | None = None,
) -> LeaveBalanceResponse:
    """Synchronize and return an account's leave balance."""
    require_self_or_admin(auth, account_id)

    balance = await get_or_refresh_balance(session, account_id, now=now)
    await commit_or_raise(session)
    return build_balance_response(balance)


@store_errors()
async def recalculate_account_casual_balance(
    session: AsyncSession,
    auth: AuthContext | None,
    account_id: uuid.UUID,
    *,
    now: datetime | None = None,
) -> LeaveBalanceResponse:
    """Recompute and persist an account's casual balance on demand (admin only).

    Only the casual balance is touched; medical accrual and request status
    are left alone.
    """
    auth = require_admin(auth)
    now = now or datetime.now(UTC)
    account = await get_account_or_404(account_id)

    balance = await _get_or_create_balance_for_update(session, account_id, now)
    before_dict = model_to_audit_dict(balance)

    await _refresh_casual_balance(session, balance, account, now)
    balance.updated_at = now
    balance.version += 1
    await session.flush()

    await write_audit_log(
        session,
        actor_id=auth.account_id,
        entity_type=AuditEntityType.LEAVE_BALANCE,
        entity_id=balance.id,
        action=AuditAction.RECALCULATE,
        before_json=before_dict,
        after_json=model_to_audit_dict(balance),
    )

    await commit_or_raise(session)
    logger.info(
        "Recalculated casual balance for account %s: %s days",
        account_id,
        balance.casual_leave_balance,
    )
    await notify_views_changed()
    return build_balance_response(balance)
