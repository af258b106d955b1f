# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class LeaveBalanceResponse(BaseModel):
    """Freshly synchronized leave balance for one account."""

    account_id: uuid.UUID
    casual_leave_balance: Decimal
    medical_leave_balance: int
    last_casual_accrual_at: datetime
    last_medical_accrual_at: datetime
    updated_at: datetime
