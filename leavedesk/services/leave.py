# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select
from sqlmodel import col

from leavedesk.db import commit_or_raise, store_errors
from leavedesk.exceptions import (
    AlreadyProcessedError,
    EmptyRangeError,
    InsufficientBalanceError,
    InvalidDateRangeError,
    NotFoundError,
)
from leavedesk.models.base import as_utc
from leavedesk.models.enums import AuditAction, AuditEntityType, LeaveStatus, LeaveType
from leavedesk.models.request import LeaveRequest
from leavedesk.schemas.request import LeaveActionResponse, LeaveRequestListResponse, LeaveRequestResponse
from leavedesk.services.access import require_admin, require_self_or_admin, require_session
from leavedesk.services.account import get_account_directory
from leavedesk.services.accrual import round_days
from leavedesk.services.audit import model_to_audit_dict, write_audit_log
from leavedesk.services.balance import available_days, get_account_or_404, get_or_refresh_balance
from leavedesk.services.invalidation import notify_views_changed
from leavedesk.services.working_days import count_working_days

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from leavedesk.schemas.auth import AuthContext
    from leavedesk.schemas.request import ApplyLeavePayload

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _build_request_response(
    request: LeaveRequest,
    *,
    approver_name: str | None = None,
    account_name: str | None = None,
    account_email: str | None = None,
) -> LeaveRequestResponse:
    """Map a request model to its response schema."""
    return LeaveRequestResponse(
        id=request.id,
        account_id=request.account_id,
        leave_type=LeaveType(request.leave_type),
        from_date=request.from_date,
        to_date=request.to_date,
        total_days=request.total_days,
        reason=request.reason,
        status=LeaveStatus(request.status),
        approved_by=request.approved_by,
        approver_name=approver_name,
        account_name=account_name,
        account_email=account_email,
        created_at=as_utc(request.created_at),
        updated_at=as_utc(request.updated_at),
    )


async def _account_names(account_ids: set[uuid.UUID]) -> dict[uuid.UUID, tuple[str, str]]:
    """Resolve (name, email) for each known account id."""
    directory = get_account_directory()
    names: dict[uuid.UUID, tuple[str, str]] = {}
    for account_id in account_ids:
        account = await directory.get_account(account_id)
        if account is not None:
            names[account_id] = (account.name, account.email)
    return names


async def _get_request_for_update(session: AsyncSession, request_id: uuid.UUID) -> LeaveRequest:
    """Fetch and lock a request by ID. Raises NotFound if absent."""
    result = await session.execute(
        select(LeaveRequest)
        .where(col(LeaveRequest.id) == request_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    leave_request = result.scalar_one_or_none()
    if leave_request is None:
        raise NotFoundError("Leave request not found")
    return leave_request


async def _decide(
    session: AsyncSession,
    leave_request: LeaveRequest,
    auth: AuthContext,
    new_status: LeaveStatus,
    audit_action: AuditAction,
    now: datetime,
    before_dict: dict[str, Any],
) -> None:
    """Record the decision on the request and its audit entry, then commit."""
    leave_request.status = new_status.value
    leave_request.approved_by = auth.account_id
    leave_request.updated_at = now

    await session.flush()

    await write_audit_log(
        session,
        actor_id=auth.account_id,
        entity_type=AuditEntityType.LEAVE_REQUEST,
        entity_id=leave_request.id,
        action=audit_action,
        before_json=before_dict,
        after_json=model_to_audit_dict(leave_request),
    )

    await commit_or_raise(session)


# ---------------------------------------------------------------------------
# Lifecycle operations
# ---------------------------------------------------------------------------


@store_errors()
async def apply_leave(
    session: AsyncSession,
    auth: AuthContext | None,
    payload: ApplyLeavePayload,
    *,
    now: datetime | None = None,
) -> LeaveActionResponse:
    """Submit a leave request for the session's account.

    Flow:
    1. Require a session
    2. Validate the date range and count working days
    3. Synchronize and lock the requester's balance
    4. Check the balance covers the working days (nothing is reserved)
    5. Create the Pending request and its audit entry
    6. Commit, then signal view invalidation
    """
    auth = require_session(auth)
    now = now or datetime.now(UTC)

    if payload.from_date > payload.to_date:
        raise InvalidDateRangeError()

    total_days = count_working_days(payload.from_date, payload.to_date)
    if total_days == 0:
        raise EmptyRangeError()

    balance = await get_or_refresh_balance(session, auth.account_id, now=now)
    available = available_days(balance, payload.leave_type)
    if available < total_days:
        raise InsufficientBalanceError(payload.leave_type.value, available, total_days)

    leave_request = LeaveRequest(
        account_id=auth.account_id,
        leave_type=payload.leave_type.value,
        from_date=payload.from_date,
        to_date=payload.to_date,
        total_days=total_days,
        reason=payload.reason,
        status=LeaveStatus.PENDING.value,
        created_at=now,
        updated_at=now,
    )
    session.add(leave_request)
    await session.flush()

    await write_audit_log(
        session,
        actor_id=auth.account_id,
        entity_type=AuditEntityType.LEAVE_REQUEST,
        entity_id=leave_request.id,
        action=AuditAction.SUBMIT,
        after_json=model_to_audit_dict(leave_request),
    )

    await commit_or_raise(session)
    logger.info(
        "Account %s applied for %d day(s) of %s leave (%s)",
        auth.account_id,
        total_days,
        payload.leave_type.value,
        leave_request.id,
    )
    await notify_views_changed()
    return LeaveActionResponse(request=_build_request_response(leave_request))


@store_errors()
async def approve_leave(
    session: AsyncSession,
    auth: AuthContext | None,
    request_id: uuid.UUID,
    *,
    now: datetime | None = None,
) -> LeaveActionResponse:
    """Approve a Pending request and deduct its working days from the balance.

    1. Require admin.
    2. Lock the request; it must exist and be Pending.
    3. Synchronize and lock the requester's balance, then re-check it.
       On shortfall the request stays Pending.
    4. Mark Approved and deduct the days in the same transaction.
    """
    auth = require_admin(auth)
    now = now or datetime.now(UTC)

    leave_request = await _get_request_for_update(session, request_id)
    if leave_request.status != LeaveStatus.PENDING.value:
        raise AlreadyProcessedError()

    leave_type = LeaveType(leave_request.leave_type)
    balance = await get_or_refresh_balance(session, leave_request.account_id, now=now)
    available = available_days(balance, leave_type)
    if available < leave_request.total_days:
        raise InsufficientBalanceError(leave_type.value, available, leave_request.total_days)

    before_dict = model_to_audit_dict(leave_request)

    if leave_type == LeaveType.CASUAL:
        balance.casual_leave_balance = round_days(balance.casual_leave_balance - leave_request.total_days)
    else:
        balance.medical_leave_balance -= leave_request.total_days
    balance.updated_at = now
    balance.version += 1

    await _decide(session, leave_request, auth, LeaveStatus.APPROVED, AuditAction.APPROVE, now, before_dict)
    logger.info("Account %s approved leave request %s", auth.account_id, leave_request.id)
    await notify_views_changed()
    return LeaveActionResponse(request=_build_request_response(leave_request))


@store_errors()
async def reject_leave(
    session: AsyncSession,
    auth: AuthContext | None,
    request_id: uuid.UUID,
    *,
    now: datetime | None = None,
) -> LeaveActionResponse:
    """Reject a Pending request. Balances are untouched.

    Processed requests cannot be rejected; there is no un-approval path.
    """
    auth = require_admin(auth)
    now = now or datetime.now(UTC)

    leave_request = await _get_request_for_update(session, request_id)
    if leave_request.status != LeaveStatus.PENDING.value:
        raise AlreadyProcessedError()

    before_dict = model_to_audit_dict(leave_request)
    await _decide(session, leave_request, auth, LeaveStatus.REJECTED, AuditAction.REJECT, now, before_dict)
    logger.info("Account %s rejected leave request %s", auth.account_id, leave_request.id)
    await notify_views_changed()
    return LeaveActionResponse(request=_build_request_response(leave_request))


# ---------------------------------------------------------------------------
# Read path
# ---------------------------------------------------------------------------


@store_errors()
async def get_leave_history(
    session: AsyncSession,
    auth: AuthContext | None,
    account_id: uuid.UUID,
    offset: int = 0,
    limit: int = 50,
) -> LeaveRequestListResponse:
    """List an account's leave requests, newest first, with approver names."""
    require_self_or_admin(auth, account_id)
    await get_account_or_404(account_id)

    base_filter = col(LeaveRequest.account_id) == account_id

    count_result = await session.execute(select(func.count()).select_from(LeaveRequest).where(base_filter))
    total = count_result.scalar_one()

    result = await session.execute(
        select(LeaveRequest)
        .where(base_filter)
        .order_by(col(LeaveRequest.created_at).desc())
        .offset(offset)
        .limit(limit)
    )
    requests = list(result.scalars().all())

    approvers = await _account_names({r.approved_by for r in requests if r.approved_by is not None})
    items = []
    for r in requests:
        approver = approvers.get(r.approved_by) if r.approved_by is not None else None
        items.append(_build_request_response(r, approver_name=approver[0] if approver else None))

    return LeaveRequestListResponse(items=items, total=total)


@store_errors()
async def get_pending_leave_requests(
    session: AsyncSession,
    auth: AuthContext | None,
    offset: int = 0,
    limit: int = 50,
) -> LeaveRequestListResponse:
    """List all Pending requests, newest first, with requester name and email (admin only)."""
    require_admin(auth)

    base_filter = col(LeaveRequest.status) == LeaveStatus.PENDING.value

    count_result = await session.execute(select(func.count()).select_from(LeaveRequest).where(base_filter))
    total = count_result.scalar_one()

    result = await session.execute(
        select(LeaveRequest)
        .where(base_filter)
        .order_by(col(LeaveRequest.created_at).desc())
        .offset(offset)
        .limit(limit)
    )
    requests = list(result.scalars().all())

    requesters = await _account_names({r.account_id for r in requests})
    items = []
    for r in requests:
        name, email = requesters.get(r.account_id, (None, None))
        items.append(_build_request_response(r, account_name=name, account_email=email))

    return LeaveRequestListResponse(items=items, total=total)
