# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter

from leavedesk.api.deps import AuthDep
from leavedesk.db import SessionDep
from leavedesk.schemas.balance import LeaveBalanceResponse
from leavedesk.services import balance as balance_service

balance_router = APIRouter(
    prefix="/accounts/{account_id}/leave-balance",
    tags=["balances"],
)


@balance_router.get("", response_model=LeaveBalanceResponse)
async def get_leave_balance(
    account_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> LeaveBalanceResponse:
    """Get an account's synchronized leave balance."""
    return await balance_service.get_leave_balance(session, auth, account_id)


@balance_router.post("/recalculate", response_model=LeaveBalanceResponse)
async def recalculate_casual_balance(
    account_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> LeaveBalanceResponse:
    """Recompute an account's casual leave balance (admin only)."""
    return await balance_service.recalculate_account_casual_balance(session, auth, account_id)
