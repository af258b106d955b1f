# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query, status

from leavedesk.api.deps import AuthDep
from leavedesk.db import SessionDep
from leavedesk.schemas.request import (
    ApplyLeavePayload,
    LeaveActionResponse,
    LeaveRequestListResponse,
)
from leavedesk.services import leave as leave_service

leave_requests_router = APIRouter(
    prefix="/leave-requests",
    tags=["leave-requests"],
)

account_requests_router = APIRouter(
    prefix="/accounts/{account_id}/leave-requests",
    tags=["leave-requests"],
)


@leave_requests_router.post("", response_model=LeaveActionResponse, status_code=status.HTTP_201_CREATED)
async def apply_leave(
    payload: ApplyLeavePayload,
    session: SessionDep,
    auth: AuthDep,
) -> LeaveActionResponse:
    """Apply for leave as the current account."""
    return await leave_service.apply_leave(session, auth, payload)


@leave_requests_router.get("/pending", response_model=LeaveRequestListResponse)
async def get_pending_leave_requests(
    session: SessionDep,
    auth: AuthDep,
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> LeaveRequestListResponse:
    """List pending leave requests (admin only)."""
    return await leave_service.get_pending_leave_requests(session, auth, offset, limit)


@leave_requests_router.post("/{request_id}/approve", response_model=LeaveActionResponse)
async def approve_leave(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> LeaveActionResponse:
    """Approve a pending leave request (admin only)."""
    return await leave_service.approve_leave(session, auth, request_id)


@leave_requests_router.post("/{request_id}/reject", response_model=LeaveActionResponse)
async def reject_leave(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> LeaveActionResponse:
    """Reject a pending leave request (admin only)."""
    return await leave_service.reject_leave(session, auth, request_id)


@account_requests_router.get("", response_model=LeaveRequestListResponse)
async def get_leave_history(
    account_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> LeaveRequestListResponse:
    """List an account's leave history, newest first."""
    return await leave_service.get_leave_history(session, auth, account_id, offset, limit)
