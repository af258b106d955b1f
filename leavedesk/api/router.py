from fastapi import APIRouter

from leavedesk.api.balances import balance_router
from leavedesk.api.leave_requests import account_requests_router, leave_requests_router

api_router = APIRouter()
api_router.include_router(balance_router)
api_router.include_router(account_requests_router)
api_router.include_router(leave_requests_router)
