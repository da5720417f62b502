from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional

from ..core.exceptions import AuthorizationError


class Role(str, Enum):
    """User roles; capabilities are resolved from these once per request."""

    OWNER = "owner"
    ADMIN = "admin"
    EMPLOYEE = "employee"


class Capability(str, Enum):
    MANAGE_ATTENDANCE = "manage_attendance"
    RECORD_ATTENDANCE = "record_attendance"
    MANAGE_LEAVE = "manage_leave"
    REQUEST_LEAVE = "request_leave"
    MANAGE_SESSIONS = "manage_sessions"
    CLAIM_SESSIONS = "claim_sessions"
    MANAGE_RECAPS = "manage_recaps"
    MANAGE_PAYROLL = "manage_payroll"
    VIEW_PAYROLL = "view_payroll"
    MANAGE_PAYMENTS = "manage_payments"


POLICY: Mapping[Role, frozenset[Capability]] = {
    Role.ADMIN: frozenset(Capability),
    Role.OWNER: frozenset(
        {
            Capability.MANAGE_ATTENDANCE,
            Capability.MANAGE_LEAVE,
            Capability.MANAGE_RECAPS,
            Capability.MANAGE_PAYROLL,
            Capability.VIEW_PAYROLL,
            Capability.MANAGE_PAYMENTS,
        }
    ),
    Role.EMPLOYEE: frozenset(
        {
            Capability.RECORD_ATTENDANCE,
            Capability.REQUEST_LEAVE,
            Capability.CLAIM_SESSIONS,
            Capability.VIEW_PAYROLL,
        }
    ),
}


@dataclass(frozen=True)
class Actor:
    """Identity of the caller, passed explicitly into services."""

    user_id: Optional[int]
    role: Role
    employee_id: Optional[int] = None
    capabilities: frozenset[Capability] = field(default=frozenset(), compare=False)

    @classmethod
    def resolve(cls, *, user_id: Optional[int], role: Role, employee_id: Optional[int] = None) -> "Actor":
        return cls(
            user_id=user_id,
            role=role,
            employee_id=employee_id,
            capabilities=POLICY.get(role, frozenset()),
        )

    @classmethod
    def system(cls, user_id: Optional[int] = None) -> "Actor":
        """Actor used by CLI/batch triggers."""
        return cls.resolve(user_id=user_id, role=Role.ADMIN)

    def can(self, capability: Capability) -> bool:
        return capability in self.capabilities

    def owns(self, employee_id: int) -> bool:
        return self.employee_id is not None and int(self.employee_id) == int(employee_id)


def require(actor: Actor, *any_of: Capability) -> None:
    if not any(actor.can(c) for c in any_of):
        names = ", ".join(c.value for c in any_of)
        raise AuthorizationError(f"Missing capability: {names}")
