from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..auth.policy import Role


@dataclass(frozen=True)
class User:
    """Login account; ``employee_id`` links it to the employee directory."""

    user_id: int
    full_name: str
    username: str
    password_hash: str
    role: Role
    employee_id: Optional[int]
    is_active: bool = True
