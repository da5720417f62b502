from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import MonthlyRecap


class RecapRepository(Protocol):
    def get_by_id(self, recap_id: int) -> Optional[MonthlyRecap]:
        raise NotImplementedError

    def get_for_employee_and_period(self, employee_id: int, period: str) -> Optional[MonthlyRecap]:
        raise NotImplementedError

    def list_by_period(self, period: str) -> Sequence[MonthlyRecap]:
        raise NotImplementedError

    def upsert(self, recap: MonthlyRecap) -> int:
        """Insert or overwrite the (employee, period) row atomically; returns its id."""

        raise NotImplementedError
