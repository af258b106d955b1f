# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

import sqlalchemy as sa
from sqlmodel import Field

from leavedesk.models.base import UUIDBase, now_utc


class LeaveBalance(UUIDBase, table=True):
    """Last-synchronized leave entitlement for one account.

    The casual balance is a cache of the accrual formula and is rewritten on
    every synchronization. The medical balance is the stored counter.
    """

    __tablename__ = "leave_balance"

    account_id: uuid.UUID = Field(sa_column=sa.Column(sa.Uuid, nullable=False, unique=True, index=True))
    casual_leave_balance: Decimal = Field(
        default=Decimal("0.00"),
        max_digits=10,
        decimal_places=2,
        sa_column_kwargs={"server_default": "0"},
    )
    medical_leave_balance: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    last_casual_accrual_at: datetime = Field(
        default_factory=now_utc,
        sa_type=sa.DateTime(timezone=True),  # ty: ignore[invalid-argument-type]
        sa_column_kwargs={"server_default": sa.func.now()},
    )
    last_medical_accrual_at: datetime = Field(
        default_factory=now_utc,
        sa_type=sa.DateTime(timezone=True),  # ty: ignore[invalid-argument-type]
        sa_column_kwargs={"server_default": sa.func.now()},
    )
    created_at: datetime = Field(
        default_factory=now_utc,
        sa_type=sa.DateTime(timezone=True),  # ty: ignore[invalid-argument-type]
        sa_column_kwargs={"server_default": sa.func.now()},
    )
    updated_at: datetime = Field(
        default_factory=now_utc,
        sa_type=sa.DateTime(timezone=True),  # ty: ignore[invalid-argument-type]
        sa_column_kwargs={"server_default": sa.func.now()},
    )
    version: int = Field(default=1, sa_column_kwargs={"server_default": "1"})
