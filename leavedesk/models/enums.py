from __future__ import annotations

import enum


class LeaveType(enum.StrEnum):
    """Kind of leave an account can request."""

    CASUAL = "CL"
    MEDICAL = "ML"


class LeaveStatus(enum.StrEnum):
    """State machine for leave requests: Pending -> Approved | Rejected."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class AccountRole(enum.StrEnum):
    """Role carried by an authenticated session."""

    ADMIN = "admin"
    MEMBER = "member"


class AuditEntityType(enum.StrEnum):
    """Entity type recorded in the audit log."""

    LEAVE_REQUEST = "LEAVE_REQUEST"
    LEAVE_BALANCE = "LEAVE_BALANCE"


class AuditAction(enum.StrEnum):
    """Action recorded in the audit log."""

    SUBMIT = "SUBMIT"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    RECALCULATE = "RECALCULATE"
