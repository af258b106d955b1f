from sqlmodel import SQLModel

from leavedesk.models.audit import AuditLog
from leavedesk.models.balance import LeaveBalance
from leavedesk.models.base import TimestampMixin, UUIDBase
from leavedesk.models.enums import AccountRole, AuditAction, AuditEntityType, LeaveStatus, LeaveType
from leavedesk.models.request import LeaveRequest

__all__ = [
    "AccountRole",
    "AuditAction",
    "AuditEntityType",
    "AuditLog",
    "LeaveBalance",
    "LeaveRequest",
    "LeaveStatus",
    "LeaveType",
    "SQLModel",
    "TimestampMixin",
    "UUIDBase",
]
