# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field

from leavedesk.models.enums import LeaveStatus, LeaveType

REASON_MIN_LENGTH = 10

# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


class ApplyLeavePayload(BaseModel):
    """Request body for applying for leave.

    Date ordering is checked by the leave service, which reports it as
    InvalidDateRange rather than a schema error.
    """

    leave_type: LeaveType
    from_date: date
    to_date: date
    reason: str = Field(min_length=REASON_MIN_LENGTH, max_length=2000)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class LeaveRequestResponse(BaseModel):
    """Response schema for a single leave request."""

    id: uuid.UUID
    account_id: uuid.UUID
    leave_type: LeaveType
    from_date: date
    to_date: date
    total_days: int
    reason: str
    status: LeaveStatus
    approved_by: uuid.UUID | None
    approver_name: str | None = None
    account_name: str | None = None
    account_email: str | None = None
    created_at: datetime
    updated_at: datetime


class LeaveRequestListResponse(BaseModel):
    """Paginated list of leave requests, newest first."""

    items: list[LeaveRequestResponse]
    total: int


class LeaveActionResponse(BaseModel):
    """Outcome of submit, approve and reject."""

    success: bool = True
    request: LeaveRequestResponse
