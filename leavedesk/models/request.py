# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date

import sqlalchemy as sa
from sqlmodel import Field

from leavedesk.models.base import TimestampMixin, UUIDBase
from leavedesk.models.enums import LeaveStatus


class LeaveRequest(UUIDBase, TimestampMixin, table=True):
    """A leave request moving through Pending -> Approved | Rejected."""

    __tablename__ = "leave_request"
    __table_args__ = (sa.Index("ix_leave_request_account_created", "account_id", "created_at"),)

    account_id: uuid.UUID = Field(index=True)
    leave_type: str = Field(max_length=10)
    from_date: date
    to_date: date
    total_days: int
    reason: str
    status: str = Field(
        default=LeaveStatus.PENDING, max_length=20, index=True, sa_column_kwargs={"server_default": "Pending"}
    )
    approved_by: uuid.UUID | None = None
